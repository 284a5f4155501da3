from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Tuple
from urllib.parse import urlsplit

# Error code strings used across middlewares/routes/tests
ERROR_TIMEOUT = "timeout"
ERROR_INVALID_REQUEST = "invalid_request"
ERROR_READ_ONLY = "read_only"
ERROR_UPSTREAM = "upstream_error"
ERROR_CONFIG = "config_error"


def _get_bool_env(name: str, default: bool) -> bool:
    """Parse a boolean environment variable with a safe default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    if val in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if val in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _split_csv_env(name: str) -> List[str]:
    raw = os.getenv(name, "")
    return [part.strip() for part in raw.split(",") if part.strip()]


def _normalize_origin(origin: str) -> str:
    parts = urlsplit(origin.strip())
    if parts.scheme not in {"http", "https"} or not parts.hostname:
        raise ValueError(f"Invalid origin: {origin}")
    if parts.path not in {"", "/"} or parts.query or parts.fragment:
        raise ValueError("Origin must not include path, query, or fragment")
    return f"{parts.scheme}://{parts.netloc.lower()}"


def _normalize_prefix(prefix: str) -> str:
    prefix = "/" + prefix.strip().strip("/")
    if prefix == "/":
        raise ValueError("REST_PREFIX must not be the root path")
    return prefix


@dataclass(frozen=True)
class HttpConfig:
    """Settings for the HTTP runner (MCP endpoint + REST routes)."""

    host: str = "127.0.0.1"
    port: int = 3030
    path: str = "/mcp"
    rest_prefix: str = "/api"
    json_response: bool = True
    stateless_http: bool = True
    allowed_origins: Tuple[str, ...] = ()
    request_timeout_s: float = 60.0
    timeout_status: int = 504

    @classmethod
    def from_env(cls) -> "HttpConfig":
        request_timeout_s = float(os.getenv("MCP_REQUEST_TIMEOUT_S", "") or 60)
        if request_timeout_s < 0:
            raise ValueError("MCP_REQUEST_TIMEOUT_S must not be negative")

        timeout_status = int(os.getenv("MCP_TIMEOUT_STATUS", "") or 504)
        if timeout_status not in {408, 503, 504}:
            raise ValueError("MCP_TIMEOUT_STATUS must be one of 408, 503, 504")

        return cls(
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", "") or cls.port),
            path=os.getenv("MCP_PATH", cls.path),
            rest_prefix=_normalize_prefix(os.getenv("REST_PREFIX", cls.rest_prefix)),
            json_response=_get_bool_env("FASTMCP_JSON_RESPONSE", cls.json_response),
            stateless_http=_get_bool_env("FASTMCP_STATELESS_HTTP", cls.stateless_http),
            allowed_origins=tuple(
                _normalize_origin(o) for o in _split_csv_env("MCP_ALLOWED_ORIGINS")
            ),
            request_timeout_s=request_timeout_s,
            timeout_status=timeout_status,
        )


__all__ = [
    "HttpConfig",
    "ERROR_TIMEOUT",
    "ERROR_INVALID_REQUEST",
    "ERROR_READ_ONLY",
    "ERROR_UPSTREAM",
    "ERROR_CONFIG",
]
