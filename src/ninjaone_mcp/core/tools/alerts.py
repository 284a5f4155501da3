from __future__ import annotations

from typing import Any, Optional

from ninjaone_mcp.core.client import NinjaOneClient
from ninjaone_mcp.core.models import AlertListInput, ResetAlertInput
from ninjaone_mcp.core.tools._guard import assert_writable


async def list_alerts(
    client: NinjaOneClient,
    page_size: Optional[int] = None,
    cursor: Optional[str] = None,
    status: Optional[str] = None,
) -> Any:
    """List alerts; filter by status (e.g., OPEN, CLOSED)."""
    query = AlertListInput(page_size=page_size, cursor=cursor, status=status)
    return await client.list_alerts(
        status=query.status, page_size=query.page_size, cursor=query.cursor
    )


async def reset_alert(
    client: NinjaOneClient,
    uid: str,
    activity: Optional[str] = None,
    note: Optional[str] = None,
) -> Any:
    """
    Reset/close an alert (triggered condition) by uid.
    With an activity or note the reset is posted with that text; otherwise
    the alert is simply deleted. Requires READ_ONLY=false.
    """
    assert_writable()
    body = ResetAlertInput(activity=activity, note=note)
    if not (body.activity or body.note):
        return await client.reset_alert(uid)
    return await client.reset_alert(uid, body.model_dump())
