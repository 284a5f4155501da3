"""
Tool namespace for NinjaOne MCP.

Every public coroutine here that takes ``client`` first is registered as a
tool by ``ninjaone_mcp.core.registry`` and served by both transports.
"""

from .alerts import list_alerts, reset_alert
from .devices import get_device, list_devices
from .organizations import list_organizations
from .scripts import run_script

__all__ = [
    "list_organizations",
    "list_devices",
    "get_device",
    "list_alerts",
    "reset_alert",
    "run_script",
]
