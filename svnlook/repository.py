"""Repository facade over the svnlook subcommands."""

from __future__ import annotations

from pathlib import Path

from .changes import ChangedIter
from .commands.cat import CatCommand
from .commands.changed import ChangedCommand
from .commands.diff import DiffCommand
from .commands.info import InfoCommand
from .commands.youngest import YoungestCommand
from .config import SvnlookConfig
from .info import RevisionInfo
from .utils.files import resolve_repository
from .utils.subprocess import ProcessStream


class Repository:
    """One Subversion repository inspected through svnlook.

    Every call starts a fresh svnlook process; instances hold no process state
    and may be shared between threads.
    """

    def __init__(self, path: Path, config: SvnlookConfig | None = None) -> None:
        self.path = resolve_repository(path)
        self.config = config or SvnlookConfig()

    def __repr__(self) -> str:
        return f"Repository({str(self.path)!r})"

    def youngest(self) -> int:
        return YoungestCommand(self.path, self.config).fetch()

    def info(self, revision: int) -> RevisionInfo:
        cmd = InfoCommand(self.path, self.config)
        cmd.revision(revision)
        return cmd.fetch()

    def changed(self, revision: int) -> ChangedIter:
        """Start `svnlook changed` and return an iterator over its records.

        Close the iterator (or use it in a ``with`` block) to stop early.
        """

        cmd = ChangedCommand(self.path, self.config)
        cmd.revision(revision)
        return cmd.iter_changes()

    def diff(self, revision: int, **flags: bool | int | None) -> ProcessStream:
        """Stream the raw diff of a revision; see DiffCommand for flags."""

        cmd = DiffCommand(self.path, self.config)
        cmd.revision(revision)
        cmd.apply(**flags)
        return cmd.spawn()

    def cat(self, revision: int, path: str) -> ProcessStream:
        """Stream the raw contents of a file at a revision."""

        cmd = CatCommand(self.path, self.config)
        cmd.revision(revision)
        cmd.file(path)
        return cmd.spawn()
