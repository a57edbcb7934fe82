"""Subcommand registry.

Builders register via the @register_command decorator.
The registry auto-discovers modules within svnlook.commands.

Each lookup returns a *new* builder instance, since builders accumulate options.
"""

from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path

from ..config import SvnlookConfig
from .base import SvnlookCommand


_REGISTRY: dict[str, type[SvnlookCommand]] = {}


def register_command(cls: type[SvnlookCommand]) -> type[SvnlookCommand]:
    name = getattr(cls, "name", None)
    if not isinstance(name, str) or not name:
        raise ValueError("Command class must define a non-empty 'name' attribute")
    if name in _REGISTRY:
        raise ValueError(f"Duplicate command registration: {name}")
    _REGISTRY[name] = cls
    return cls


def _auto_import_commands() -> None:
    # Import all modules in this package except base/__init__.
    pkg_name = __name__
    for m in pkgutil.iter_modules(__path__):  # type: ignore[name-defined]
        if m.ispkg:
            continue
        if m.name in {"base", "__init__"}:
            continue
        importlib.import_module(f"{pkg_name}.{m.name}")


def command_names() -> list[str]:
    _auto_import_commands()
    return sorted(_REGISTRY)


def get_command(name: str, repository: Path, config: SvnlookConfig | None = None) -> SvnlookCommand:
    """Instantiate the builder registered under name."""

    _auto_import_commands()
    try:
        cls = _REGISTRY[name]
    except KeyError:
        raise ValueError(f"Unknown svnlook command: {name}") from None
    return cls(repository, config)
