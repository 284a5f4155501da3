from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ninjaone_mcp.core.context import (
    REQUEST_ID_HEADER,
    apply_request_id,
    get_request_id,
    reset_request_id,
)
from ninjaone_mcp.core.observability import log_event

CORRELATION_ID_HEADER = "X-Correlation-Id"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Give every request an id before anything else runs.
    - Accepts X-Request-Id or X-Correlation-Id, otherwise generates one
    - Binds it for client logs, stores it on request.state, echoes it back
    - Logs one http_request event, also when the handler raises
    """

    async def dispatch(self, request: Request, call_next):
        token = apply_request_id(
            request.headers.get(REQUEST_ID_HEADER)
            or request.headers.get(CORRELATION_ID_HEADER)
        )
        rid = get_request_id()
        request.state.request_id = rid

        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            response.headers.setdefault(REQUEST_ID_HEADER, rid)
            return response
        finally:
            log_event(
                "http_request",
                request_id=rid,
                method=request.method.upper(),
                path=request.url.path,
                status=response.status_code if response is not None else "exception",
                duration_ms=int((time.perf_counter() - start) * 1000),
            )
            reset_request_id(token)


__all__ = ["RequestIdMiddleware", "CORRELATION_ID_HEADER"]
