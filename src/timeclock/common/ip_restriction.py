from __future__ import annotations

import ipaddress
from typing import Iterable, Optional, Union

_Network = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def normalize_ip(value: str) -> str:
    """Strip IPv4-mapped IPv6 prefixes and map loopback aliases."""
    ip = (value or "").strip()
    if ip in {"::1", "localhost"}:
        return "127.0.0.1"
    if ip.lower().startswith("::ffff:"):
        return ip[7:]
    return ip


def client_ip(remote_addr: Optional[str]) -> str:
    """Address of the peer as seen by the WSGI server.

    Forwarded headers are only honoured through ProxyFix, which rewrites
    ``remote_addr`` when trusted proxy hops are configured.
    """
    return normalize_ip(remote_addr or "")


class IPAllowList:
    """Allow-list of exact addresses and CIDR ranges."""

    def __init__(self, entries: Iterable[str]):
        self._networks: list[_Network] = []
        for raw in entries:
            entry = normalize_ip(raw)
            if not entry:
                continue
            self._networks.append(ipaddress.ip_network(entry, strict=False))

    @classmethod
    def from_csv(cls, value: str) -> "IPAllowList":
        return cls(part for part in (value or "").split(","))

    def __len__(self) -> int:
        return len(self._networks)

    def is_allowed(self, ip: str) -> bool:
        try:
            addr = ipaddress.ip_address(normalize_ip(ip))
        except ValueError:
            return False
        return any(addr.version == net.version and addr in net for net in self._networks)
