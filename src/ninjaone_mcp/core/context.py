"""Per-request correlation id carried through ContextVars."""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from typing import Optional

REQUEST_ID_HEADER = "X-Request-Id"

_request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def ensure_request_id(candidate: Optional[str] = None) -> str:
    candidate = (candidate or "").strip()
    return candidate or uuid.uuid4().hex


def apply_request_id(request_id: Optional[str] = None) -> Token:
    """Bind a request id for the current task; pass the token to reset."""
    return _request_id_var.set(ensure_request_id(request_id))


def get_request_id() -> Optional[str]:
    return _request_id_var.get()


def reset_request_id(token: Token) -> None:
    _request_id_var.reset(token)


__all__ = [
    "REQUEST_ID_HEADER",
    "ensure_request_id",
    "apply_request_id",
    "get_request_id",
    "reset_request_id",
]
