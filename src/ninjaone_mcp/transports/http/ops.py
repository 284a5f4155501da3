from __future__ import annotations

from typing import Dict

from ninjaone_mcp.core.config import load_env_config

OPS_PATHS = {"/healthz", "/readyz"}


def is_ops_path(path: str | None) -> bool:
    return bool(path) and path in OPS_PATHS


def compute_readiness_state() -> Dict[str, bool]:
    values = load_env_config(use_dotenv=False)
    return {
        "config_loaded": True,
        "base_url_present": bool(values["base_url"]),
        "client_id_present": bool(values["client_id"]),
        "client_secret_present": bool(values["client_secret"]),
    }


def build_readiness_status(readiness_state: Dict[str, bool]) -> Dict[str, object]:
    failed = [k for k, v in readiness_state.items() if not v]
    return {
        "status": "ok" if not failed else "fail",
        "checks": readiness_state,
        "failed": failed,
    }


__all__ = [
    "OPS_PATHS",
    "is_ops_path",
    "compute_readiness_state",
    "build_readiness_status",
]
