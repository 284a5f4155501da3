"""Core domain surface for ninjaone-mcp (transport-agnostic)."""

from .client import NinjaOneClient, RetryConfig
from .config import (
    ClientConfig,
    RunscriptStyle,
    config_from_env,
    create_client_from_env,
    load_env_config,
    read_only_enabled,
)
from .context import apply_request_id, get_request_id, reset_request_id
from .errors import (
    NinjaOneClientError,
    NinjaOneConfigError,
    NinjaOneHTTPError,
    NinjaOneParseError,
    WriteDisabledError,
)
from .filters import build_device_filter, encode_df
from .registry import (
    discover_tool_modules,
    iter_tool_functions,
    register_discovered_tools,
)
from .token import Token, TokenManager

__all__ = [
    # Client
    "NinjaOneClient",
    "RetryConfig",
    "Token",
    "TokenManager",
    # Config
    "ClientConfig",
    "RunscriptStyle",
    "load_env_config",
    "config_from_env",
    "create_client_from_env",
    "read_only_enabled",
    # Exceptions
    "NinjaOneClientError",
    "NinjaOneConfigError",
    "NinjaOneHTTPError",
    "NinjaOneParseError",
    "WriteDisabledError",
    # Filters
    "encode_df",
    "build_device_filter",
    # Registry
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
    # Context
    "apply_request_id",
    "get_request_id",
    "reset_request_id",
]
