from __future__ import annotations

from typing import Any, Dict, Optional, Union

from ninjaone_mcp.core.client import NinjaOneClient
from ninjaone_mcp.core.models import RunScriptInput
from ninjaone_mcp.core.tools._guard import assert_writable


async def run_script(
    client: NinjaOneClient,
    device_id: Union[int, str],
    script_id: Union[int, str],
    parameters: Optional[Dict[str, Any]] = None,
    dry_run: bool = True,
) -> Any:
    """
    Run a script on a device. Defaults to a dry run; set dry_run=false to
    execute for real. Requires READ_ONLY=false.
    """
    assert_writable()
    payload = RunScriptInput(
        script_id=script_id, parameters=parameters or {}, dry_run=dry_run
    )
    return await client.run_script(
        device_id, payload.script_id, payload.parameters, payload.dry_run
    )
