from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from dotenv import load_dotenv

from .errors import NinjaOneConfigError

FALSEY = {"0", "false", "f", "no", "n", "off"}


class RunscriptStyle(str, Enum):
    """Request shape used to run a script on a device."""

    ACTIONS = "actions"
    LEGACY = "legacy"


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    client_id: str
    client_secret: str
    scope: Optional[str] = None
    runscript_style: RunscriptStyle = RunscriptStyle.ACTIONS

    def __post_init__(self) -> None:
        missing = [
            name
            for name in ("base_url", "client_id", "client_secret")
            if not (getattr(self, name) or "").strip()
        ]
        if missing:
            raise NinjaOneConfigError(f"{', '.join(missing)} must be provided.")

        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))
        object.__setattr__(self, "scope", self.scope or None)
        object.__setattr__(
            self, "runscript_style", parse_runscript_style(self.runscript_style)
        )


def parse_runscript_style(value: RunscriptStyle | str | None) -> RunscriptStyle:
    if value is None or value == "":
        return RunscriptStyle.ACTIONS
    try:
        return RunscriptStyle(str(getattr(value, "value", value)).strip().lower())
    except ValueError as exc:
        raise NinjaOneConfigError(
            f"NINJA_RUNSCRIPT_STYLE must be 'actions' or 'legacy', got {value!r}"
        ) from exc


def load_env_config(*, use_dotenv: bool = True) -> Dict[str, str]:
    """Load NinjaOne connection settings from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    return {
        "base_url": os.getenv("NINJA_BASE_URL", "").strip(),
        "client_id": os.getenv("NINJA_CLIENT_ID", "").strip(),
        "client_secret": os.getenv("NINJA_CLIENT_SECRET", "").strip(),
        "scope": os.getenv("NINJA_SCOPE", "").strip(),
        "runscript_style": os.getenv("NINJA_RUNSCRIPT_STYLE", "").strip(),
    }


def config_from_env(*, use_dotenv: bool = True) -> ClientConfig:
    values = load_env_config(use_dotenv=use_dotenv)
    missing = [
        env
        for env, key in (
            ("NINJA_BASE_URL", "base_url"),
            ("NINJA_CLIENT_ID", "client_id"),
            ("NINJA_CLIENT_SECRET", "client_secret"),
        )
        if not values[key]
    ]
    if missing:
        raise NinjaOneConfigError(f"Missing env: {', '.join(missing)}")
    return ClientConfig(**values)


def create_client_from_env(**kwargs):
    """Create a NinjaOneClient from environment variables."""
    from .client import NinjaOneClient

    return NinjaOneClient(config_from_env(), **kwargs)


def read_only_enabled() -> bool:
    """Writes stay disabled unless READ_ONLY is explicitly false-ish."""
    raw = os.getenv("READ_ONLY")
    if raw is None:
        return True
    return raw.strip().lower() not in FALSEY


__all__ = [
    "ClientConfig",
    "RunscriptStyle",
    "parse_runscript_style",
    "load_env_config",
    "config_from_env",
    "create_client_from_env",
    "read_only_enabled",
]
