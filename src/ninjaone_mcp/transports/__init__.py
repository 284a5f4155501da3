"""Transport adapters (HTTP, stdio) over ninjaone_mcp.core."""
