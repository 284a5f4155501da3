from typing import Any

from ninjaone_mcp.core.client import NinjaOneClient


async def list_organizations(client: NinjaOneClient) -> Any:
    """List organizations visible to this API client."""
    return await client.list_organizations()
