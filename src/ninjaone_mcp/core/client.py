import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union
from urllib.parse import quote

import httpx

from .config import ClientConfig, RunscriptStyle, config_from_env
from .errors import NinjaOneClientError, NinjaOneHTTPError, NinjaOneParseError
from .observability import log_event
from .token import TokenManager

Id = Union[int, str]


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 4  # extra attempts for 429/5xx
    backoff_base_seconds: float = 0.25  # 0.25, 0.5, 1, 2, 4 ...
    backoff_cap_seconds: float = 5.0

    def should_retry(self, status_code: int) -> bool:
        return status_code == 429 or 500 <= status_code <= 599

    def delay(self, attempt: int) -> float:
        return min(self.backoff_cap_seconds, self.backoff_base_seconds * (2**attempt))


class NinjaOneClient:
    """
    Authenticated client for the NinjaOne public API (v2).
    - Owns the OAuth2 token for its lifetime (see TokenManager)
    - Retries 429/5xx with capped exponential backoff
    - Re-authenticates once per call on 401
    - Returns decoded JSON; no business logic, tools own input handling
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        timeout_seconds: float = 30.0,
        token_timeout_seconds: float = 20.0,
        retry: Optional[RetryConfig] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.config = config
        self.base_url = config.base_url
        self.runscript_style = config.runscript_style
        self.timeout_seconds = timeout_seconds
        self.retry = retry if retry is not None else RetryConfig()
        self.log = logger or logging.getLogger("ninjaone_mcp.client")
        self._sleep = sleep or asyncio.sleep

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=timeout_seconds,
        )
        self.tokens = TokenManager(
            self.http,
            client_id=config.client_id,
            client_secret=config.client_secret,
            scope=config.scope,
            timeout_seconds=token_timeout_seconds,
            clock=clock or time.time,
        )

    @classmethod
    def from_env(cls, **kwargs) -> "NinjaOneClient":
        return cls(config_from_env(), **kwargs)

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "NinjaOneClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
        tool: Optional[str] = None,
    ) -> Any:
        """
        Core request method.
        - Refreshes the token up front when it is missing or about to expire
        - Retries 429/5xx up to retry.max_retries times, reusing the token
        - Forces one token refresh on the first 401 of this call
        - Raises NinjaOneHTTPError on any other non-2xx (or when retries run out)
        - Raises NinjaOneClientError on network/timeout errors (not retried)
        """
        method = method.upper()
        query = {k: v for k, v in (params or {}).items() if v is not None}

        await self.tokens.ensure_fresh()

        attempt = 0
        reauthenticated = False

        while True:
            start = time.perf_counter()
            token = self.tokens.token
            try:
                resp = await self.http.request(
                    method,
                    path,
                    params=query or None,
                    json=json,
                    headers={"Authorization": f"Bearer {token.access_token}"},
                    timeout=self.timeout_seconds,
                )
            except httpx.HTTPError as exc:
                log_event(
                    "op_call",
                    self.log,
                    tool=tool,
                    method=method,
                    endpoint=path,
                    status="exception",
                    error_type=type(exc).__name__,
                    attempt=attempt,
                    duration_ms=int((time.perf_counter() - start) * 1000),
                )
                raise NinjaOneClientError(
                    f"Network/timeout error calling {method} {path}: {exc}",
                    cause=exc,
                ) from exc

            status = resp.status_code
            log_event(
                "op_call",
                self.log,
                tool=tool,
                method=method,
                endpoint=path,
                status=status,
                attempt=attempt,
                duration_ms=int((time.perf_counter() - start) * 1000),
            )

            if 200 <= status < 300:
                return self._safe_json(resp)

            if self.retry.should_retry(status) and attempt < self.retry.max_retries:
                delay = self.retry.delay(attempt)
                log_event(
                    "op_retry",
                    self.log,
                    level=logging.WARNING,
                    tool=tool,
                    endpoint=path,
                    status=status,
                    attempt=attempt,
                    delay_ms=int(delay * 1000),
                )
                await self._sleep(delay)
                attempt += 1
                continue

            if status == 401 and not reauthenticated:
                reauthenticated = True
                await self.tokens.acquire()
                attempt += 1
                continue

            raise self._to_http_error(resp, method=method)

    def _safe_json(self, resp: httpx.Response) -> Any:
        # 204 No Content and friends
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            snippet = (resp.text or "")[:500]
            raise NinjaOneParseError(
                f"Expected JSON from {resp.request.method} {resp.request.url}, "
                f"got non-JSON body snippet: {snippet!r}",
                status_code=resp.status_code,
                cause=exc,
            ) from exc

    def _to_http_error(self, resp: httpx.Response, *, method: str) -> NinjaOneHTTPError:
        response_json: Optional[Any] = None
        response_text: Optional[str] = None
        message = resp.reason_phrase or "request failed"

        try:
            parsed = resp.json()
            response_json = parsed
            if isinstance(parsed, dict):
                message = (
                    parsed.get("message")
                    or parsed.get("error_description")
                    or parsed.get("error")
                    or parsed.get("resultCode")
                    or message
                )
        except ValueError:
            response_text = (resp.text or "")[:500]

        return NinjaOneHTTPError(
            status_code=resp.status_code,
            method=method,
            url=str(resp.request.url),
            message=str(message),
            response_json=response_json,
            response_text=response_text,
        )

    # --- Resource operations (NinjaOne public API v2) ---------------------- #

    async def list_organizations(self) -> Any:
        return await self.request("GET", "/v2/organizations", tool="list_organizations")

    async def list_devices(
        self,
        *,
        page_size: Optional[int] = None,
        cursor: Optional[str] = None,
        df: Optional[str] = None,
    ) -> Any:
        """df is an encode_df() value and is sent as the query value unchanged."""
        params = {
            "pageSize": page_size or None,
            "cursor": cursor or None,
            "df": df or None,
        }
        return await self.request("GET", "/v2/devices", params=params, tool="list_devices")

    async def get_device(self, device_id: Id) -> Any:
        return await self.request(
            "GET", f"/v2/devices/{_segment(device_id)}", tool="get_device"
        )

    async def list_alerts(
        self,
        *,
        status: Optional[str] = None,
        page_size: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> Any:
        params = {
            "status": status or None,
            "pageSize": page_size or None,
            "cursor": cursor or None,
        }
        return await self.request("GET", "/v2/alerts", params=params, tool="list_alerts")

    async def reset_alert(
        self, uid: str, body: Optional[Mapping[str, Optional[str]]] = None
    ) -> Any:
        """Reset/close an alert. POST .../reset with a note, otherwise DELETE."""
        path = f"/v2/alert/{quote(str(uid), safe='')}"
        if body and (body.get("activity") or body.get("note")):
            payload = {
                key: body[key]
                for key in ("activity", "note")
                if body.get(key) is not None
            }
            return await self.request(
                "POST", f"{path}/reset", json=payload, tool="reset_alert"
            )
        return await self.request("DELETE", path, tool="reset_alert")

    async def run_script(
        self,
        device_id: Id,
        script_id: Id,
        parameters: Optional[Dict[str, Any]] = None,
        dry_run: Any = False,
    ) -> Any:
        payload: Dict[str, Any] = {
            "scriptId": script_id,
            "parameters": parameters or {},
            "dryRun": bool(dry_run),
        }
        device = _segment(device_id)
        if self.runscript_style is RunscriptStyle.ACTIONS:
            return await self.request(
                "POST",
                f"/v2/devices/{device}/actions",
                json={"type": "RUN_SCRIPT", **payload},
                tool="run_script",
            )
        return await self.request(
            "POST", f"/v2/device/{device}/run/script", json=payload, tool="run_script"
        )


def _segment(value: Id) -> str:
    return quote(str(value), safe="")


__all__ = ["NinjaOneClient", "RetryConfig"]
