from .app import LazyClient, build_fastmcp, build_http_app
from .config import HttpConfig
from .rest import build_rest_app

__all__ = ["HttpConfig", "LazyClient", "build_http_app", "build_fastmcp", "build_rest_app"]
