"""Error types raised across the chat proxy.

Everything derives from ``ChatProxyError`` so the HTTP layer can catch one
base class and decide what the caller gets to see.
"""
from __future__ import annotations

from typing import Any, Optional


class ChatProxyError(Exception):
    """Base error.

    Attributes:
        message: human readable description, logged server side.
        http_status: status code the HTTP layer maps this error to.
    """

    def __init__(self, message: str, http_status: int = 500) -> None:
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class ValidationError(ChatProxyError):
    """Missing or malformed input from the caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message, http_status=400)


class UpstreamError(ChatProxyError):
    """The completion provider failed or answered with something unusable.

    ``status_code`` is None when the request never got a response (connect
    error, timeout). ``malformed`` is set when a 2xx body lacked the expected
    ``choices[0].message.content`` structure.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Any = None,
        malformed: bool = False,
    ) -> None:
        super().__init__(message, http_status=502)
        self.status_code = status_code
        self.payload = payload
        self.malformed = malformed
