"""Configuration and defaults.

This module defines:
- How svnlook is launched (executable, leading arguments, stderr handling).
- Defaults for the history walk.
- Optional JSON/YAML config overrides.

Command-line flags take precedence over anything loaded here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .utils.subprocess import StderrPolicy

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SvnlookConfig:
    """How to launch the svnlook executable."""

    executable: str = "svnlook"
    # Inserted between the executable and the subcommand (wrappers, test doubles).
    executable_args: tuple[str, ...] = ()
    stderr: StderrPolicy = StderrPolicy.INHERIT


@dataclass(frozen=True)
class HistoryDefaults:
    jobs: int = 1
    continue_on_error: bool = False


@dataclass(frozen=True)
class AppConfig:
    svnlook: SvnlookConfig = field(default_factory=SvnlookConfig)
    history: HistoryDefaults = field(default_factory=HistoryDefaults)


def load_config(path: Path | None) -> AppConfig:
    """Load optional config overrides.

    Supports JSON by default, YAML when the file extension is .yml/.yaml.

    Schema (all keys optional):
    {
      "svnlook": {
        "executable": "/usr/bin/svnlook",
        "executable_args": [],
        "stderr": "inherit"   # or "null"
      },
      "history": {"jobs": 4, "continue_on_error": true}
    }
    """

    if path is None:
        return AppConfig()

    path = path.expanduser().resolve()
    if not path.exists() or not path.is_file():
        raise FileNotFoundError(f"config file not found: {path}")

    raw: dict[str, Any]
    if path.suffix.lower() in {".yml", ".yaml"}:
        import yaml

        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    else:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"config root must be a mapping: {path}")

    base = AppConfig()

    s = base.svnlook
    s_raw = raw.get("svnlook") if isinstance(raw.get("svnlook"), dict) else {}

    executable = s_raw.get("executable", s.executable)
    if not isinstance(executable, str) or not executable:
        log.warning("Ignoring invalid svnlook.executable: %r", executable)
        executable = s.executable

    executable_args = s.executable_args
    if isinstance(s_raw.get("executable_args"), list):
        executable_args = tuple(str(a) for a in s_raw["executable_args"])

    stderr = s.stderr
    if "stderr" in s_raw:
        try:
            stderr = StderrPolicy(str(s_raw["stderr"]).lower())
        except ValueError:
            log.warning("Ignoring invalid svnlook.stderr: %r", s_raw["stderr"])

    h = base.history
    h_raw = raw.get("history") if isinstance(raw.get("history"), dict) else {}

    jobs = h.jobs
    try:
        jobs = max(1, int(h_raw.get("jobs", h.jobs)))
    except (TypeError, ValueError):
        log.warning("Ignoring invalid history.jobs: %r", h_raw.get("jobs"))

    return AppConfig(
        svnlook=SvnlookConfig(executable=executable, executable_args=executable_args, stderr=stderr),
        history=HistoryDefaults(
            jobs=jobs,
            continue_on_error=bool(h_raw.get("continue_on_error", h.continue_on_error)),
        ),
    )
