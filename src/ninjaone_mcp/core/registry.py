from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Callable, Iterable, List, Set, Union, get_type_hints

from .client import NinjaOneClient

log = logging.getLogger("ninjaone_mcp.core.registry")

TOOLS_PACKAGE = "ninjaone_mcp.core.tools"

ClientProvider = Callable[[], NinjaOneClient]


def discover_tool_modules(package_name: str = TOOLS_PACKAGE) -> List[ModuleType]:
    """Import the public modules under the tools package, skipping failures."""
    modules: List[ModuleType] = []
    base_pkg = importlib.import_module(package_name)

    for info in pkgutil.iter_modules(base_pkg.__path__, base_pkg.__name__ + "."):
        if info.name.rsplit(".", 1)[-1].startswith("_"):
            continue
        try:
            modules.append(importlib.import_module(info.name))
        except Exception as exc:  # pragma: no cover - logged, not fatal
            log.error("Failed importing tool module %s: %s", info.name, exc)

    return modules


def iter_tool_functions(module: ModuleType) -> Iterable[Callable]:
    """Yield public coroutines defined in ``module`` whose first parameter is ``client``."""
    for name, func in inspect.getmembers(module, inspect.iscoroutinefunction):
        if name.startswith("_") or func.__module__ != module.__name__:
            continue

        params = list(inspect.signature(func).parameters)
        if not params or params[0] != "client":
            log.debug("Skipping %s.%s: first parameter must be 'client'", module.__name__, name)
            continue

        yield func


def _wrap_tool(func: Callable, client_provider: ClientProvider) -> Callable:
    """Return a coroutine with ``client`` injected and removed from the signature."""
    sig = inspect.signature(func)
    hints = get_type_hints(func)

    params = [
        p.replace(annotation=hints.get(name, p.annotation))
        for name, p in sig.parameters.items()
        if name != "client"
    ]

    async def wrapped(*args, **kwargs):
        return await func(client_provider(), *args, **kwargs)

    wrapped.__name__ = func.__name__
    wrapped.__qualname__ = func.__qualname__
    wrapped.__doc__ = func.__doc__
    wrapped.__module__ = func.__module__
    wrapped.__signature__ = sig.replace(  # type: ignore[attr-defined]
        parameters=params,
        return_annotation=hints.get("return", sig.return_annotation),
    )
    return wrapped


def register_discovered_tools(
    app,
    client_provider: Union[ClientProvider, NinjaOneClient],
    modules: List[ModuleType] | None = None,
) -> List[str]:
    """Register discovered tools on anything exposing a FastMCP-style ``tool`` decorator."""
    if isinstance(client_provider, NinjaOneClient):
        shared = client_provider

        def client_provider() -> NinjaOneClient:
            return shared

    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    registered: List[str] = []
    seen: Set[str] = set()

    for module in modules if modules is not None else discover_tool_modules():
        for func in iter_tool_functions(module):
            name = func.__name__
            if name in seen:
                raise ValueError(f"Duplicate tool name detected: {name}")
            app.tool(name=name)(_wrap_tool(func, client_provider))
            seen.add(name)
            registered.append(name)
            log.info("Registered tool: %s (%s)", name, module.__name__)

    return registered


__all__ = [
    "TOOLS_PACKAGE",
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
]
