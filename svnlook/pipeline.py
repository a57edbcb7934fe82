"""History walk (revision iteration, info + changes per revision, output writing)."""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any

from .changes import ChangeRecord
from .config import AppConfig
from .errors import ParseError, SvnlookError
from .info import RevisionInfo
from .repository import Repository
from .utils.files import ensure_parent_dir

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryArgs:
    repository: Path
    start: int = 1
    end: int | None = None  # None => youngest
    jobs: int | None = None  # None => config default
    manifest_path: Path | None = None
    continue_on_error: bool | None = None  # None => config default


@dataclass
class RevisionResult:
    revision: int
    info: RevisionInfo | None = None
    changes: list[ChangeRecord] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def manifest(self) -> dict[str, Any]:
        out: dict[str, Any] = {"revision": self.revision}
        if self.info is not None:
            out.update(self.info.to_dict())
        out["changes"] = [c.to_dict() for c in self.changes]
        if self.skipped:
            out["skipped"] = list(self.skipped)
        if self.error is not None:
            out["error"] = self.error
        return out


def _write_jsonl_line(fp, obj: dict[str, Any]) -> None:
    fp.write(json.dumps(obj, ensure_ascii=False) + "\n")


def format_change(change: ChangeRecord) -> str:
    line = f"   {change.status.label:.8}: "
    if change.copied_from is not None:
        src = change.copied_from
        return line + f"{src.path}@r{src.revision} -> {change.path}"
    return line + change.path


def format_revision(result: RevisionResult) -> str:
    if result.info is None:
        return f"Revision r{result.revision}: {result.error}\n"
    info = result.info
    lines = [f"Revision r{info.revision}, by {info.committer} at {info.date}"]
    lines.extend(format_change(c) for c in result.changes)
    return "\n".join(lines) + "\n"


def collect_changes(repo: Repository, revision: int, skip_malformed: bool) -> tuple[list[ChangeRecord], list[str]]:
    """Drain `svnlook changed` for one revision.

    Malformed records are skipped when skip_malformed is set; any other failure
    propagates after the command has been reaped.
    """

    changes: list[ChangeRecord] = []
    skipped: list[str] = []
    with repo.changed(revision) as items:
        for item in items.results():
            if isinstance(item, ParseError) and skip_malformed:
                log.warning("r%d: skipping malformed change record: %s", revision, item)
                skipped.append(str(item))
                continue
            if isinstance(item, SvnlookError):
                raise item
            changes.append(item)
    return changes, skipped


def run_history(args: HistoryArgs, config: AppConfig, out: IO[str] | None = None) -> int:
    """Walk a revision range and write one entry per revision.

    Writes JSONL to args.manifest_path when given, otherwise a readable summary
    to out. Returns the number of failed revisions.
    """

    repo = Repository(args.repository, config.svnlook)
    continue_on_error = (
        config.history.continue_on_error if args.continue_on_error is None else args.continue_on_error
    )
    jobs = config.history.jobs if args.jobs is None else args.jobs
    if jobs < 1:
        raise ValueError("jobs must be >= 1")

    end = repo.youngest() if args.end is None else args.end
    if args.start < 0 or end < 0:
        raise ValueError("revisions must be >= 0")
    if args.start > end:
        log.info("Nothing to do: start r%d is past end r%d", args.start, end)
        return 0

    revisions = range(args.start, end + 1)
    log.info("Walking r%d..r%d of %s", args.start, end, repo.path)

    def work(revision: int) -> RevisionResult:
        result = RevisionResult(revision=revision)
        try:
            result.info = repo.info(revision)
            result.changes, result.skipped = collect_changes(repo, revision, continue_on_error)
        except SvnlookError as e:
            result.error = str(e)
        return result

    failures = 0
    fp: IO[str] | None = None
    if args.manifest_path is not None:
        ensure_parent_dir(args.manifest_path)
        fp = args.manifest_path.open("w", encoding="utf-8")

    try:
        # Each revision runs its own svnlook processes, so workers share nothing.
        with ThreadPoolExecutor(max_workers=jobs) as ex:
            for result in ex.map(work, revisions):
                if fp is not None:
                    _write_jsonl_line(fp, result.manifest())
                elif out is not None:
                    out.write(format_revision(result))

                if not result.ok:
                    failures += 1
                    if not continue_on_error:
                        raise SvnlookError(f"r{result.revision}: {result.error}")
                    log.warning("r%d failed: %s", result.revision, result.error)
    finally:
        if fp is not None:
            fp.close()

    if failures:
        log.warning("Completed with %d failed revisions", failures)
    else:
        log.info("Completed %d revisions", len(revisions))

    return failures
