"""Employee session tokens.

The store is injected through the container; nothing in this module keeps
process-wide state.
"""

from __future__ import annotations

import logging
import secrets
import threading
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_SESSION_MAX_ENTRIES, DEFAULT_SESSION_TTL_HOURS

logger = logging.getLogger("timeclock.sessions")


@dataclass
class Session:
    employee_id: str
    token: str
    ip_address: str
    created_at: datetime
    last_access_at: datetime


class SessionStore(Protocol):
    def create(self, employee_id: str, ip_address: str) -> str:
        raise NotImplementedError

    def validate(self, token: str, ip_address: str) -> Optional[Session]:
        raise NotImplementedError

    def remove(self, token: str) -> None:
        raise NotImplementedError

    def purge_expired(self) -> int:
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    """Bounded, idle-timeout session store.

    One live session per employee. When full, the least recently used
    session is evicted.
    """

    def __init__(
        self,
        *,
        ttl: timedelta = timedelta(hours=DEFAULT_SESSION_TTL_HOURS),
        max_entries: int = DEFAULT_SESSION_MAX_ENTRIES,
        clock: Callable[[], datetime] = now_utc,
    ):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._ttl = ttl
        self._max_entries = int(max_entries)
        self._clock = clock
        self._sessions: "OrderedDict[str, Session]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, employee_id: str, ip_address: str) -> str:
        now = self._clock()
        token = secrets.token_hex(32)
        with self._lock:
            self._remove_employee(employee_id)
            while len(self._sessions) >= self._max_entries:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("session store full, evicted %s...", evicted[:8])
            self._sessions[token] = Session(
                employee_id=employee_id,
                token=token,
                ip_address=ip_address,
                created_at=now,
                last_access_at=now,
            )
        return token

    def validate(self, token: str, ip_address: str) -> Optional[Session]:
        now = self._clock()
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if now - session.last_access_at > self._ttl:
                del self._sessions[token]
                return None
            if session.ip_address != ip_address:
                logger.warning(
                    "session IP mismatch for %s: expected %s, got %s",
                    session.employee_id,
                    session.ip_address,
                    ip_address,
                )
                del self._sessions[token]
                return None
            session.last_access_at = now
            self._sessions.move_to_end(token)
            return session

    def remove(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [t for t, s in self._sessions.items() if now - s.last_access_at > self._ttl]
            for token in expired:
                del self._sessions[token]
        return len(expired)

    def _remove_employee(self, employee_id: str) -> None:
        for token in [t for t, s in self._sessions.items() if s.employee_id == employee_id]:
            del self._sessions[token]
