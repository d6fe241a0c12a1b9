"""Client identity resolution.

The id is a best-effort grouping key taken from network origin. It is not
authenticated and clients behind one proxy or NAT share it.
"""
from __future__ import annotations

from typing import Mapping, Optional, Protocol

from fastapi import Request

FORWARDED_FOR_HEADER = "x-forwarded-for"
UNKNOWN_CLIENT_ID = "unknown-ip"


class ClientIdentityResolver(Protocol):
    def resolve(self, request: Request) -> str:
        ...


def resolve_client_id(headers: Mapping[str, str], remote_addr: Optional[str]) -> str:
    forwarded = headers.get(FORWARDED_FOR_HEADER) or ""
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop
    if remote_addr:
        return remote_addr
    return UNKNOWN_CLIENT_ID


class ForwardedForResolver:
    """Prefers the first X-Forwarded-For hop, then the socket peer."""

    def resolve(self, request: Request) -> str:
        remote_addr = request.client.host if request.client else None
        return resolve_client_id(request.headers, remote_addr)


def get_client_resolver() -> ClientIdentityResolver:
    return ForwardedForResolver()
