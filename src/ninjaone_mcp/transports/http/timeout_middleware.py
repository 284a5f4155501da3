from __future__ import annotations

from typing import Callable

import anyio
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from ninjaone_mcp.transports.http.config import ERROR_TIMEOUT, HttpConfig


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Bound handling time of MCP and REST POSTs; 0 disables."""

    def __init__(self, app, cfg: HttpConfig):
        super().__init__(app)
        self.cfg = cfg

    def _applies(self, request: Request) -> bool:
        if request.method.upper() != "POST":
            return False
        path = request.url.path
        return path == self.cfg.path or path.startswith(self.cfg.rest_prefix + "/")

    async def dispatch(self, request: Request, call_next: Callable):
        if not self.cfg.request_timeout_s or not self._applies(request):
            return await call_next(request)

        try:
            with anyio.fail_after(self.cfg.request_timeout_s):
                return await call_next(request)
        except TimeoutError:
            return JSONResponse(
                {
                    "error": ERROR_TIMEOUT,
                    "message": "Request timed out",
                    "request_id": getattr(request.state, "request_id", ""),
                },
                status_code=self.cfg.timeout_status,
            )


__all__ = ["TimeoutMiddleware"]
