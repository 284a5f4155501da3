import logging
import os
from typing import Any, Optional

LOG_FIELDS = (
    "request_id",
    "tool",
    "method",
    "path",
    "endpoint",
    "status",
    "attempt",
    "delay_ms",
    "duration_ms",
    "expires_in",
    "error_type",
)


class LogfmtFormatter(logging.Formatter):
    """key=value lines; extras that are missing on a record are skipped."""

    def format(self, record: logging.LogRecord) -> str:
        pairs = [
            ("ts", self.formatTime(record, "%Y-%m-%dT%H:%M:%S")),
            ("level", record.levelname.lower()),
            ("logger", record.name),
            ("msg", record.getMessage()),
        ]
        pairs.extend(
            (key, getattr(record, key))
            for key in LOG_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info and record.exc_info[0] is not None:
            pairs.append(("exc_type", record.exc_info[0].__name__))

        return " ".join(f"{k}={self._quote(v)}" for k, v in pairs if v != "")

    @staticmethod
    def _quote(val: Any) -> str:
        if isinstance(val, (bool, int, float)):
            return str(val).lower() if isinstance(val, bool) else str(val)
        text = str(val)
        if any(ch in text for ch in ' ="'):
            return '"' + text.replace('"', '\\"') + '"'
        return text


def setup_logging(level: Optional[str] = None) -> None:
    """Send root logging to stderr in logfmt. Level falls back to LOG_LEVEL."""
    level = level or os.getenv("LOG_LEVEL", "INFO")

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    # stdout belongs to the stdio transport
    handler = logging.StreamHandler()
    handler.setFormatter(LogfmtFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


__all__ = ["setup_logging", "LogfmtFormatter", "LOG_FIELDS"]
