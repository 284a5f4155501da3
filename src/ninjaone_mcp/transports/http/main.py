from __future__ import annotations

import asyncio

import uvicorn

from ninjaone_mcp.core.logging import setup_logging

from .app import LazyClient, build_http_app
from .config import HttpConfig


async def main() -> None:
    setup_logging()
    cfg = HttpConfig.from_env()
    client = LazyClient()
    app = build_http_app(cfg, client)

    server = uvicorn.Server(
        uvicorn.Config(app, host=cfg.host, port=cfg.port, log_config=None)
    )
    try:
        await server.serve()
    finally:
        await client.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
