from __future__ import annotations

import asyncio
import os
import sys
from typing import Any, List, Optional

from ninjaone_mcp.core.client import NinjaOneClient
from ninjaone_mcp.core.errors import NinjaOneClientError
from ninjaone_mcp.core.tools.alerts import list_alerts
from ninjaone_mcp.core.tools.devices import get_device, list_devices
from ninjaone_mcp.core.tools.organizations import list_organizations
from ninjaone_mcp.core.tools.scripts import run_script


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(name)
    return val if val else default


def _print_step(title: str) -> None:
    print(f"\n== {title}")


def _fail(msg: str) -> int:
    print(f"FAILED: {msg}")
    return 1


def _items(payload: Any) -> List[Any]:
    # list endpoints answer with a bare array or a {"results": [...]} page
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        return payload.get("results") or payload.get("items") or []
    return []


async def run_smoke_test() -> int:
    """Read-only walk through the API. Runs a dry-run script only when asked."""
    try:
        client = NinjaOneClient.from_env()
    except ValueError as exc:
        return _fail(str(exc))

    script_id = _env("TEST_SCRIPT_ID")

    print("Config:")
    print(f"  base_url: {client.base_url}")
    print(f"  runscript_style: {client.runscript_style.value}")
    print(f"  dry-run script: {script_id or '-'}")

    async with client:
        try:
            _print_step("Token")
            token = await client.tokens.acquire()
            print(f"Got {token.token_type} token, expires_in={token.expires_in}s")

            _print_step("List organizations")
            orgs = _items(await list_organizations(client))
            print(f"{len(orgs)} organization(s)")

            _print_step("List devices")
            devices = _items(await list_devices(client, page_size=5))
            print(f"{len(devices)} device(s) on first page")

            device_id = _env("TEST_DEVICE_ID")
            if not device_id and devices:
                device_id = str(devices[0].get("id"))

            if device_id:
                _print_step("Get device")
                device = await get_device(client, device_id)
                print(f"Device {device_id}: {device.get('systemName') or device.get('displayName')}")

            _print_step("List alerts")
            alerts = _items(await list_alerts(client, page_size=5))
            print(f"{len(alerts)} alert(s) on first page")

            if script_id and device_id:
                _print_step("Run script (dry run)")
                result = await run_script(client, device_id, script_id, dry_run=True)
                print(f"Dry run accepted: {result!r}"[:200])
        except NinjaOneClientError as exc:
            return _fail(str(exc))
        except PermissionError as exc:
            return _fail(f"{exc} (needed for the dry-run script step)")

    print("\nPASSED smoke test.")
    return 0


def main() -> None:
    sys.exit(asyncio.run(run_smoke_test()))


if __name__ == "__main__":
    main()
