from __future__ import annotations

import logging
from typing import Any, Dict

from .context import get_request_id

# LogRecord attributes that cannot be overwritten through ``extra``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("x", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def _clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if k not in _RECORD_ATTRS}


def log_event(
    event: str,
    logger: logging.Logger | None = None,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """
    Emit one structured record named ``event``.
    Fields travel as ``extra``; the bound request id is added when not given.
    """
    log = logger or logging.getLogger("ninjaone_mcp.observability")
    fields.setdefault("request_id", get_request_id())
    log.log(level, event, extra=_clean_fields(fields))


__all__ = ["log_event"]
