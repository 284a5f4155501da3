from __future__ import annotations

from typing import Any, Dict, Optional


class NinjaOneClientError(Exception):
    """Base error for client failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.cause = cause


class NinjaOneConfigError(NinjaOneClientError, ValueError):
    """Missing or invalid client configuration. Never retried."""


class NinjaOneHTTPError(NinjaOneClientError):
    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        message: str,
        response_json: Optional[Any] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(
            f"{status_code} {method} {url}: {message}", status_code=status_code
        )
        self.method = method
        self.url = url
        self.detail = message
        self.response_json = response_json
        self.response_text = response_text


class NinjaOneParseError(NinjaOneClientError):
    pass


class WriteDisabledError(PermissionError):
    """Raised when a mutating tool runs while READ_ONLY is in effect."""


def error_payload(exc: NinjaOneClientError) -> Dict[str, Any]:
    """Flatten a client error for transport responses."""
    return {
        "status_code": exc.status_code,
        "message": getattr(exc, "detail", None) or exc.message,
    }


__all__ = [
    "NinjaOneClientError",
    "NinjaOneConfigError",
    "NinjaOneHTTPError",
    "NinjaOneParseError",
    "WriteDisabledError",
    "error_payload",
]
