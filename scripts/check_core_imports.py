#!/usr/bin/env python3
"""
Keep ninjaone_mcp.core transport-agnostic.

Fails when a module under src/ninjaone_mcp/core/ imports a web/MCP server
framework or reaches into ninjaone_mcp.transports, including through
relative imports.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path
from typing import Iterator, List

REPO_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = REPO_ROOT / "src"
CORE_DIR = SRC_DIR / "ninjaone_mcp" / "core"

FORBIDDEN_PREFIXES = (
    "starlette",
    "uvicorn",
    "anyio",
    "mcp.server",
    "ninjaone_mcp.transports",
)


def is_forbidden(module: str) -> bool:
    return any(
        module == prefix or module.startswith(prefix + ".")
        for prefix in FORBIDDEN_PREFIXES
    )


def _package_of(path: Path) -> List[str]:
    # both pkg/__init__.py and pkg/mod.py resolve relative imports against pkg
    return list(path.relative_to(SRC_DIR).parent.parts)


def imported_modules(path: Path) -> Iterator[str]:
    """Absolute names of everything ``path`` imports."""
    tree = ast.parse(path.read_text(), filename=str(path))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            yield from (alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            if node.level:
                package = _package_of(path)
                base = package[: len(package) - node.level + 1]
                yield ".".join(base + ([node.module] if node.module else []))
            elif node.module:
                yield node.module


def scan_file(path: Path) -> List[str]:
    return [
        f"{path.relative_to(REPO_ROOT)}: forbidden import '{mod}'"
        for mod in imported_modules(path)
        if is_forbidden(mod)
    ]


def main() -> int:
    violations: List[str] = []
    for py_file in sorted(CORE_DIR.rglob("*.py")):
        violations.extend(scan_file(py_file))

    for v in violations:
        print(v, file=sys.stderr)
    return 1 if violations else 0


if __name__ == "__main__":
    sys.exit(main())
