from __future__ import annotations

import asyncio

from mcp.server.fastmcp import FastMCP

from ninjaone_mcp.core.config import create_client_from_env
from ninjaone_mcp.core.logging import setup_logging
from ninjaone_mcp.core.registry import register_discovered_tools


async def main() -> None:
    setup_logging()
    # Fail fast on missing credentials; stdio has no readiness probe
    client = create_client_from_env()

    app = FastMCP("ninjaone-mcp")
    register_discovered_tools(app, client)

    async with client:
        await app.run_stdio_async()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
