import anyio
import pytest
from ninjaone_mcp.transports.http.config import HttpConfig
from ninjaone_mcp.transports.http.timeout_middleware import TimeoutMiddleware
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient


async def slow(_request):
    await anyio.sleep(0.5)
    return JSONResponse({"ok": True})


def _client(**overrides):
    cfg = HttpConfig(request_timeout_s=0.05, **overrides)
    app = Starlette(
        routes=[
            Route("/mcp", slow, methods=["GET", "POST"]),
            Route("/api/alerts/a1/reset", slow, methods=["GET", "POST"]),
            Route("/other", slow, methods=["POST"]),
        ],
        middleware=[Middleware(TimeoutMiddleware, cfg=cfg)],
    )
    return TestClient(app)


@pytest.mark.parametrize("path", ["/mcp", "/api/alerts/a1/reset"])
def test_slow_post_times_out(path):
    resp = _client().post(path)

    assert resp.status_code == 504
    assert resp.json()["error"] == "timeout"


def test_timeout_status_is_configurable():
    resp = _client(timeout_status=503).post("/mcp")

    assert resp.status_code == 503


@pytest.mark.parametrize("path", ["/mcp", "/api/alerts/a1/reset"])
def test_get_requests_are_not_bounded(path):
    assert _client().get(path).status_code == 200


def test_paths_outside_mcp_and_rest_are_not_bounded():
    assert _client().post("/other").status_code == 200


def test_zero_disables_timeout():
    cfg = HttpConfig(request_timeout_s=0)
    app = Starlette(
        routes=[Route("/mcp", slow, methods=["POST"])],
        middleware=[Middleware(TimeoutMiddleware, cfg=cfg)],
    )

    assert TestClient(app).post("/mcp").status_code == 200
