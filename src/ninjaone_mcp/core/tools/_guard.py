"""
Read-only gate for mutating tools.
"""

from ninjaone_mcp.core.config import read_only_enabled
from ninjaone_mcp.core.errors import WriteDisabledError

WRITE_DISABLED_MESSAGE = "Mutating tools are disabled. Set READ_ONLY=false to enable."


def assert_writable() -> None:
    """Raise WriteDisabledError unless READ_ONLY is explicitly turned off."""
    if read_only_enabled():
        raise WriteDisabledError(WRITE_DISABLED_MESSAGE)
