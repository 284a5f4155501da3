import logging

import httpx
import pytest
import respx
from ninjaone_mcp.core.client import NinjaOneClient
from ninjaone_mcp.core.config import ClientConfig
from ninjaone_mcp.core.context import apply_request_id, reset_request_id
from ninjaone_mcp.core.errors import NinjaOneClientError
from ninjaone_mcp.core.logging import LogfmtFormatter
from ninjaone_mcp.core.observability import log_event
from ninjaone_mcp.transports.http.request_id_middleware import RequestIdMiddleware
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

BASE = "https://api.ninja.test"


def _app(handler):
    return Starlette(
        routes=[Route("/mcp", handler, methods=["POST"])],
        middleware=[Middleware(RequestIdMiddleware)],
    )


def _client():
    return NinjaOneClient(
        ClientConfig(base_url=BASE, client_id="cid", client_secret="secret")
    )


def _token_route():
    respx.post(f"{BASE}/oauth/token").mock(
        return_value=httpx.Response(200, json={"access_token": "t", "expires_in": 3600})
    )


def test_request_id_logged_success(caplog):
    async def handler(request):
        return JSONResponse({"ok": True})

    app = _app(handler)
    with (
        TestClient(app) as client,
        caplog.at_level(logging.INFO, logger="ninjaone_mcp.observability"),
    ):
        resp = client.post("/mcp", json={"hello": "world"})

    assert resp.status_code == 200
    record = next(r for r in caplog.records if r.getMessage() == "http_request")
    assert record.request_id == resp.headers["X-Request-Id"]
    assert record.status == 200
    assert record.path == "/mcp"
    assert record.method == "POST"
    assert record.duration_ms >= 0


def test_incoming_request_id_is_echoed():
    async def handler(request):
        return JSONResponse({"rid": request.state.request_id})

    with TestClient(_app(handler)) as client:
        resp = client.post("/mcp", headers={"X-Correlation-Id": "corr-7"})

    assert resp.headers["X-Request-Id"] == "corr-7"
    assert resp.json() == {"rid": "corr-7"}


def test_request_id_logged_on_exception(caplog):
    async def handler(request):
        raise ValueError("boom")

    app = _app(handler)
    with (
        TestClient(app, raise_server_exceptions=False) as client,
        caplog.at_level(logging.INFO, logger="ninjaone_mcp.observability"),
    ):
        resp = client.post("/mcp", json={})

    assert resp.status_code == 500
    record = next(r for r in caplog.records if r.getMessage() == "http_request")
    assert record.status == "exception"
    assert record.request_id
    assert record.path == "/mcp"


@pytest.mark.asyncio
@respx.mock
async def test_op_call_logged_with_bound_request_id(caplog):
    caplog.set_level(logging.INFO)
    _token_route()
    respx.get(f"{BASE}/v2/organizations").mock(
        return_value=httpx.Response(200, json=[])
    )
    client = _client()
    token = apply_request_id("rid-success")
    try:
        await client.list_organizations()
    finally:
        reset_request_id(token)
        await client.aclose()

    record = next(r for r in caplog.records if r.getMessage() == "op_call")
    assert record.request_id == "rid-success"
    assert record.tool == "list_organizations"
    assert record.method == "GET"
    assert record.status == 200
    assert record.endpoint == "/v2/organizations"
    assert record.attempt == 0

    acquired = next(r for r in caplog.records if r.getMessage() == "token_acquired")
    assert acquired.expires_in == 3600
    assert acquired.endpoint == "/oauth/token"
    assert not hasattr(acquired, "access_token")


@pytest.mark.asyncio
@respx.mock
async def test_op_call_logged_on_exception(caplog):
    caplog.set_level(logging.INFO)
    _token_route()
    respx.get(f"{BASE}/v2/devices/1").mock(side_effect=httpx.ConnectTimeout("boom"))
    client = _client()

    with pytest.raises(NinjaOneClientError):
        await client.get_device(1)
    await client.aclose()

    record = next(r for r in caplog.records if r.getMessage() == "op_call")
    assert record.tool == "get_device"
    assert record.status == "exception"
    assert record.error_type == "ConnectTimeout"
    assert record.endpoint == "/v2/devices/1"


@pytest.mark.asyncio
@respx.mock
async def test_retry_logged_as_warning(caplog):
    caplog.set_level(logging.INFO)
    _token_route()
    respx.get(f"{BASE}/v2/alerts").mock(
        side_effect=[httpx.Response(503), httpx.Response(200, json=[])]
    )

    async def no_sleep(_delay):
        return None

    client = NinjaOneClient(
        ClientConfig(base_url=BASE, client_id="cid", client_secret="secret"),
        sleep=no_sleep,
    )
    await client.list_alerts()
    await client.aclose()

    retry = next(r for r in caplog.records if r.getMessage() == "op_retry")
    assert retry.levelno == logging.WARNING
    assert retry.status == 503
    assert retry.delay_ms == 250


def test_log_event_drops_reserved_fields(caplog):
    logger = logging.getLogger("ninjaone_mcp.test")
    with caplog.at_level(logging.INFO, logger="ninjaone_mcp.test"):
        log_event("custom", logger, name="clobber", tool="x")

    record = caplog.records[-1]
    assert record.name == "ninjaone_mcp.test"
    assert record.tool == "x"
    assert record.request_id is None


def test_logfmt_formatter_renders_known_fields():
    record = logging.LogRecord(
        "ninjaone_mcp.client", logging.INFO, __file__, 1, "op_call", None, None
    )
    record.tool = "get_device"
    record.status = 200
    record.endpoint = "/v2/devices/1"
    record.error_type = None

    line = LogfmtFormatter().format(record)

    assert "level=info" in line
    assert "msg=op_call" in line
    assert "tool=get_device" in line
    assert "status=200" in line
    assert "endpoint=/v2/devices/1" in line
    assert "error_type" not in line


def test_logfmt_formatter_quotes_spaces():
    record = logging.LogRecord(
        "x", logging.WARNING, __file__, 1, "two words", None, None
    )

    line = LogfmtFormatter().format(record)

    assert 'msg="two words"' in line
    assert "level=warning" in line
