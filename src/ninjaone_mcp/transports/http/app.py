from __future__ import annotations

import logging
from typing import Callable, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from starlette.applications import Starlette
from starlette.responses import JSONResponse

from ninjaone_mcp.core.client import NinjaOneClient
from ninjaone_mcp.core.config import create_client_from_env
from ninjaone_mcp.core.registry import register_discovered_tools
from ninjaone_mcp.transports.http.config import HttpConfig
from ninjaone_mcp.transports.http.ops import (
    build_readiness_status,
    compute_readiness_state,
    is_ops_path,
)
from ninjaone_mcp.transports.http.request_id_middleware import RequestIdMiddleware
from ninjaone_mcp.transports.http.rest import build_rest_app
from ninjaone_mcp.transports.http.timeout_middleware import TimeoutMiddleware

log = logging.getLogger(__name__)

ClientProvider = Callable[[], NinjaOneClient]


class LazyClient:
    """
    Process-wide client built from env on first use, so /healthz and
    /readyz answer even when credentials are missing.
    """

    def __init__(self, factory: Callable[[], NinjaOneClient] = create_client_from_env):
        self._factory = factory
        self._client: Optional[NinjaOneClient] = None

    def __call__(self) -> NinjaOneClient:
        if self._client is None:
            self._client = self._factory()
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _transport_security(cfg: HttpConfig) -> TransportSecuritySettings:
    allowed_hosts = [cfg.host, f"{cfg.host}:*", "testserver"]
    if cfg.host in {"127.0.0.1", "localhost", "0.0.0.0"}:
        allowed_hosts.extend(["localhost", "localhost:*", "127.0.0.1", "127.0.0.1:*"])
    return TransportSecuritySettings(
        enable_dns_rebinding_protection=True,
        allowed_hosts=list(dict.fromkeys(allowed_hosts)),
        allowed_origins=list(cfg.allowed_origins),
    )


def build_fastmcp(
    cfg: HttpConfig | None = None, client_provider: ClientProvider | None = None
) -> FastMCP:
    """Create a FastMCP instance with the NinjaOne tools registered."""
    cfg = cfg or HttpConfig.from_env()
    client_provider = client_provider or LazyClient()

    fastmcp = FastMCP(
        "ninjaone-mcp",
        json_response=cfg.json_response,
        stateless_http=cfg.stateless_http,
        streamable_http_path=cfg.path,
        host=cfg.host,
        port=cfg.port,
        transport_security=_transport_security(cfg),
    )
    register_discovered_tools(fastmcp, client_provider)

    log.info(
        "Built FastMCP (json_response=%s, stateless_http=%s, path=%s, rest_prefix=%s)",
        cfg.json_response,
        cfg.stateless_http,
        cfg.path,
        cfg.rest_prefix,
    )
    return fastmcp


def _build_ops_app() -> Starlette:
    async def healthz(_request):
        return JSONResponse({"status": "ok"}, headers={"Cache-Control": "no-store"})

    async def readyz(_request):
        payload = build_readiness_status(compute_readiness_state())
        return JSONResponse(
            payload,
            status_code=200 if payload["status"] == "ok" else 503,
            headers={"Cache-Control": "no-store"},
        )

    ops_app = Starlette()
    ops_app.add_route("/healthz", healthz, methods=["GET"])
    ops_app.add_route("/readyz", readyz, methods=["GET"])
    return ops_app


class OpsDispatcher:
    """
    ASGI wrapper sending ops endpoints to a bare app (no middleware, no
    credentials needed) and everything else to the main app.
    Exposes router/state so tests can drive the main app's lifespan.
    """

    def __init__(self, ops_app, main_app):
        self.ops_app = ops_app
        self.main_app = main_app
        self.router = main_app.router
        self.state = main_app.state

    async def __call__(self, scope, receive, send):
        if scope.get("type") == "http" and is_ops_path(scope.get("path")):
            await self.ops_app(scope, receive, send)
            return
        await self.main_app(scope, receive, send)


def build_http_app(
    cfg: HttpConfig | None = None, client_provider: ClientProvider | None = None
):
    """ASGI app serving ops endpoints, the MCP endpoint and the REST routes."""
    cfg = cfg or HttpConfig.from_env()
    client_provider = client_provider or LazyClient()

    fastmcp = build_fastmcp(cfg, client_provider)
    main_app = fastmcp.streamable_http_app()
    main_app.mount(cfg.rest_prefix, build_rest_app(client_provider), name="rest")

    # Starlette inserts at the front: RequestId runs first, then Timeout
    main_app.add_middleware(TimeoutMiddleware, cfg=cfg)
    main_app.add_middleware(RequestIdMiddleware)
    main_app.state.client_provider = client_provider

    return OpsDispatcher(_build_ops_app(), main_app)


__all__ = ["HttpConfig", "LazyClient", "build_http_app", "build_fastmcp"]
