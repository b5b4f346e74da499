from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Admin:
    id: int
    username: str
    password_hash: str
    name: str
