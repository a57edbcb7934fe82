"""Command line interface for svnlook."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import shutil
import sys
from pathlib import Path

from .changes import ChangeRecord
from .commands import get_command
from .commands.diff import FLAGS as DIFF_FLAGS
from .commands.diff import DiffCommand
from .config import AppConfig, load_config
from .pipeline import HistoryArgs, format_change, run_history
from .repository import Repository
from .utils.files import resolve_repository
from .utils.subprocess import StderrPolicy

log = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="svnlook-py",
        description="Inspect a Subversion repository through svnlook, with parsed output.",
    )
    p.add_argument("--config", type=Path, default=None, help="Optional JSON/YAML config override")
    p.add_argument("--svnlook", default=None, help="svnlook executable (default: from config, else PATH)")
    p.add_argument("--quiet-stderr", action="store_true", help="Discard svnlook's standard error")
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    sub = p.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("youngest", help="Print the latest revision number")
    sp.add_argument("repository", type=Path)

    sp = sub.add_parser("info", help="Print committer, date and message of a revision")
    sp.add_argument("repository", type=Path)
    sp.add_argument("revision", type=int)
    sp.add_argument("--json", action="store_true", help="Print as JSON")

    sp = sub.add_parser("changed", help="Print the paths changed in a revision")
    sp.add_argument("repository", type=Path)
    sp.add_argument("revision", type=int)
    sp.add_argument("--json", action="store_true", help="Print one JSON object per change")
    sp.add_argument("--continue-on-error", action="store_true", help="Skip malformed records")

    sp = sub.add_parser("diff", help="Print the raw diff of a revision")
    sp.add_argument("repository", type=Path)
    sp.add_argument("revision", type=int)
    for flag in DIFF_FLAGS:
        sp.add_argument(f"--{flag.replace('_', '-')}", dest=flag, action="store_true")
    sp.add_argument("--context-lines", dest="context_lines", type=int, default=None)

    sp = sub.add_parser("cat", help="Print the raw contents of a file at a revision")
    sp.add_argument("repository", type=Path)
    sp.add_argument("revision", type=int)
    sp.add_argument("path")

    sp = sub.add_parser("history", help="Walk revisions, printing info and changes")
    sp.add_argument("repository", type=Path)
    sp.add_argument("--start", type=int, default=1, help="First revision (default: 1)")
    sp.add_argument("--end", type=int, default=None, help="Last revision (default: youngest)")
    sp.add_argument("--jobs", type=int, default=None, help="Revisions inspected in parallel")
    sp.add_argument("--manifest", type=Path, default=None, help="Write JSONL here instead of a summary")
    sp.add_argument("--continue-on-error", action="store_true", default=None, help="Log failures and continue")

    return p


def _apply_overrides(config: AppConfig, ns: argparse.Namespace) -> AppConfig:
    svnlook = config.svnlook
    if ns.svnlook:
        svnlook = dataclasses.replace(svnlook, executable=ns.svnlook)
    if ns.quiet_stderr:
        svnlook = dataclasses.replace(svnlook, stderr=StderrPolicy.NULL)
    return dataclasses.replace(config, svnlook=svnlook)


def _print_changes(repo: Repository, ns: argparse.Namespace) -> int:
    failures = 0
    with repo.changed(ns.revision) as items:
        for item in items.results():
            if isinstance(item, ChangeRecord):
                if ns.json:
                    print(json.dumps(item.to_dict(), ensure_ascii=False))
                else:
                    print(format_change(item))
                continue
            if not ns.continue_on_error:
                raise item
            failures += 1
            log.warning("%s", item)
    return 1 if failures else 0


def _passthrough(repo_path: Path, config: AppConfig, ns: argparse.Namespace) -> int:
    cmd = get_command(ns.command, repo_path, config.svnlook)
    cmd.revision(ns.revision)
    if isinstance(cmd, DiffCommand):
        cmd.apply(**{flag: getattr(ns, flag) for flag in DIFF_FLAGS}, context_lines=ns.context_lines)
    else:
        cmd.file(ns.path)

    with cmd.spawn() as stream:
        shutil.copyfileobj(stream, sys.stdout.buffer)
    sys.stdout.flush()
    return 0


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = _build_parser()
    ns = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    try:
        config = _apply_overrides(load_config(ns.config), ns)

        if ns.command == "history":
            args = HistoryArgs(
                repository=ns.repository,
                start=ns.start,
                end=ns.end,
                jobs=ns.jobs,
                manifest_path=ns.manifest,
                continue_on_error=ns.continue_on_error,
            )
            return 1 if run_history(args, config, out=sys.stdout) else 0

        if ns.command in {"diff", "cat"}:
            return _passthrough(resolve_repository(ns.repository), config, ns)

        repo = Repository(ns.repository, config.svnlook)
        if ns.command == "youngest":
            print(repo.youngest())
            return 0
        if ns.command == "info":
            info = repo.info(ns.revision)
            if ns.json:
                print(json.dumps(info.to_dict(), ensure_ascii=False))
            else:
                print(f"Revision r{info.revision}, by {info.committer} at {info.date}")
                print(info.message)
            return 0
        return _print_changes(repo, ns)
    except Exception as e:
        log.error(str(e))
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
