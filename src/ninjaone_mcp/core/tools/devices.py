from __future__ import annotations

from typing import Any, List, Optional, Union

from ninjaone_mcp.core.client import NinjaOneClient
from ninjaone_mcp.core.filters import build_device_filter
from ninjaone_mcp.core.models import DeviceClass, DeviceListInput, DeviceStatus


async def list_devices(
    client: NinjaOneClient,
    page_size: Optional[int] = None,
    cursor: Optional[str] = None,
    org_id: Optional[Union[int, str]] = None,
    status: Optional[DeviceStatus] = None,
    class_in: Optional[List[DeviceClass]] = None,
    online: Optional[bool] = None,
) -> Any:
    """
    List devices, optionally narrowed with NinjaOne's device filter (df).

    Filters combine with AND: org_id, status (APPROVED, PENDING,
    DECOMMISSIONED), class_in (device classes) and online/offline.
    Pass the cursor from a previous page to continue; page_size is 1-500.
    """
    query = DeviceListInput(
        page_size=page_size,
        cursor=cursor,
        org_id=org_id,
        status=status,
        class_in=class_in,
        online=online,
    )
    df = build_device_filter(
        org_id=query.org_id,
        status=query.status,
        class_in=query.class_in,
        online=query.online,
    )
    return await client.list_devices(
        page_size=query.page_size, cursor=query.cursor, df=df
    )


async def get_device(client: NinjaOneClient, device_id: Union[int, str]) -> Any:
    """Get a single device by id."""
    return await client.get_device(device_id)
