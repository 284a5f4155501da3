"""ninjaone_mcp package exports."""

from .core import (
    ClientConfig,
    NinjaOneClient,
    NinjaOneClientError,
    NinjaOneConfigError,
    NinjaOneHTTPError,
    NinjaOneParseError,
    RetryConfig,
    RunscriptStyle,
    Token,
    TokenManager,
    WriteDisabledError,
    build_device_filter,
    create_client_from_env,
    encode_df,
)

__version__ = "0.2.0"

__all__ = [
    "NinjaOneClient",
    "ClientConfig",
    "RetryConfig",
    "RunscriptStyle",
    "Token",
    "TokenManager",
    "NinjaOneClientError",
    "NinjaOneConfigError",
    "NinjaOneHTTPError",
    "NinjaOneParseError",
    "WriteDisabledError",
    "encode_df",
    "build_device_filter",
    "create_client_from_env",
]
