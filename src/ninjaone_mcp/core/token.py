from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import NinjaOneClientError, NinjaOneHTTPError, NinjaOneParseError
from .observability import log_event

TOKEN_PATH = "/oauth/token"

# Refresh this many seconds before the provider says the token expires.
EXPIRY_MARGIN_SECONDS = 60


class Token(BaseModel):
    """OAuth2 bearer token as returned by the token endpoint, plus when we got it."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    obtained_at: int = 0

    model_config = ConfigDict(frozen=True, extra="ignore")

    def is_fresh(self, now: float) -> bool:
        return now < self.obtained_at + self.expires_in - EXPIRY_MARGIN_SECONDS


class TokenManager:
    """
    Holds the client-credentials token for one client instance.
    - No token until the first acquire(); afterwards every acquire() replaces it
    - No retries and no locking: concurrent stale callers may both acquire,
      the last one to finish wins
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        client_id: str,
        client_secret: str,
        scope: Optional[str] = None,
        timeout_seconds: float = 20.0,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ):
        self.http = http
        self.client_id = client_id
        self._client_secret = client_secret
        self.scope = scope
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        self.log = logger or logging.getLogger("ninjaone_mcp.token")
        self.token: Optional[Token] = None

    def is_fresh(self) -> bool:
        return self.token is not None and self.token.is_fresh(self.clock())

    async def ensure_fresh(self) -> Token:
        if self.is_fresh():
            return self.token  # type: ignore[return-value]
        return await self.acquire()

    async def acquire(self) -> Token:
        """Run the client_credentials grant and store the new token."""
        form = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self._client_secret,
        }
        if self.scope:
            form["scope"] = self.scope

        try:
            resp = await self.http.post(
                TOKEN_PATH,
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise NinjaOneClientError(
                f"Token request failed: {exc}", cause=exc
            ) from exc

        if resp.status_code < 200 or resp.status_code >= 300:
            raise NinjaOneHTTPError(
                status_code=resp.status_code,
                method="POST",
                url=str(resp.request.url),
                message=_token_error_message(resp),
                response_text=(resp.text or "")[:500],
            )

        try:
            token = Token.model_validate(
                {**resp.json(), "obtained_at": int(self.clock())}
            )
        except (ValueError, TypeError, ValidationError) as exc:
            raise NinjaOneParseError(
                f"Unexpected token response from {resp.request.url}", cause=exc
            ) from exc

        self.token = token
        log_event(
            "token_acquired",
            self.log,
            endpoint=TOKEN_PATH,
            expires_in=token.expires_in,
        )
        return token


def _token_error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return "token request failed"
    if isinstance(body, dict):
        return (
            body.get("error_description")
            or body.get("error")
            or body.get("message")
            or "token request failed"
        )
    return "token request failed"


__all__ = ["Token", "TokenManager", "TOKEN_PATH", "EXPIRY_MARGIN_SECONDS"]
