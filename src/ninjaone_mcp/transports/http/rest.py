"""
Plain REST front end over the same tool handlers the MCP endpoint serves.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Dict, List

from pydantic import BaseModel, ValidationError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ninjaone_mcp.core.client import NinjaOneClient
from ninjaone_mcp.core.errors import (
    NinjaOneClientError,
    NinjaOneConfigError,
    WriteDisabledError,
    error_payload,
)
from ninjaone_mcp.core.models import (
    AlertListInput,
    DeviceListInput,
    ResetAlertInput,
    RunScriptInput,
)
from ninjaone_mcp.core.tools import alerts, devices, organizations, scripts
from ninjaone_mcp.transports.http.config import (
    ERROR_CONFIG,
    ERROR_INVALID_REQUEST,
    ERROR_READ_ONLY,
    ERROR_UPSTREAM,
)

log = logging.getLogger(__name__)


class _BadRequest(Exception):
    pass


ClientProvider = Callable[[], NinjaOneClient]
Handler = Callable[[Request, NinjaOneClient], Awaitable[Any]]


def _error(request: Request, status: int, code: str, message: str, **extra: Any):
    body = {
        "error": code,
        "message": message,
        "request_id": getattr(request.state, "request_id", ""),
        **extra,
    }
    return JSONResponse(body, status_code=status)


async def _json_body(request: Request, model: type[BaseModel]) -> BaseModel:
    raw = await request.body()
    try:
        data = json.loads(raw) if raw.strip() else {}
    except ValueError as exc:
        raise _BadRequest(f"Request body is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise _BadRequest("Request body must be a JSON object")
    return model.model_validate(data)


def _endpoint(handler: Handler, client_provider: ClientProvider):
    """Wrap a handler so core failures map onto HTTP statuses without reinterpretation."""

    async def endpoint(request: Request):
        try:
            data = await handler(request, client_provider())
        except NinjaOneConfigError as exc:
            log.error("NinjaOne client is not configured: %s", exc)
            return _error(request, 500, ERROR_CONFIG, str(exc))
        except WriteDisabledError as exc:
            return _error(request, 403, ERROR_READ_ONLY, str(exc))
        except ValidationError as exc:
            return _error(
                request,
                400,
                ERROR_INVALID_REQUEST,
                "Invalid request parameters",
                details=exc.errors(include_url=False, include_context=False),
            )
        except _BadRequest as exc:
            return _error(request, 400, ERROR_INVALID_REQUEST, str(exc))
        except NinjaOneClientError as exc:
            log.warning("Upstream call failed: %s", exc)
            return _error(request, 502, ERROR_UPSTREAM, str(exc), upstream=error_payload(exc))
        return JSONResponse(data)

    endpoint.__name__ = handler.__name__
    return endpoint


def _query(request: Request) -> Dict[str, str]:
    return dict(request.query_params)


async def get_organizations(request: Request, client: NinjaOneClient):
    return await organizations.list_organizations(client)


async def get_devices(request: Request, client: NinjaOneClient):
    query = DeviceListInput.model_validate(_query(request))
    return await devices.list_devices(client, **query.model_dump())


async def get_device(request: Request, client: NinjaOneClient):
    return await devices.get_device(client, request.path_params["device_id"])


async def get_alerts(request: Request, client: NinjaOneClient):
    query = AlertListInput.model_validate(_query(request))
    return await alerts.list_alerts(client, **query.model_dump())


async def post_alert_reset(request: Request, client: NinjaOneClient):
    body = await _json_body(request, ResetAlertInput)
    return await alerts.reset_alert(
        client, request.path_params["uid"], **body.model_dump()
    )


async def post_device_script(request: Request, client: NinjaOneClient):
    body = await _json_body(request, RunScriptInput)
    return await scripts.run_script(
        client, request.path_params["device_id"], **body.model_dump()
    )


def build_rest_routes(client_provider: ClientProvider) -> List[Route]:
    table = [
        ("/organizations", get_organizations, "GET"),
        ("/devices", get_devices, "GET"),
        ("/devices/{device_id}", get_device, "GET"),
        ("/devices/{device_id}/scripts", post_device_script, "POST"),
        ("/alerts", get_alerts, "GET"),
        ("/alerts/{uid}/reset", post_alert_reset, "POST"),
    ]
    return [
        Route(path, _endpoint(handler, client_provider), methods=[method])
        for path, handler, method in table
    ]


def build_rest_app(client_provider: ClientProvider) -> Starlette:
    return Starlette(routes=build_rest_routes(client_provider))


__all__ = ["build_rest_routes", "build_rest_app"]
