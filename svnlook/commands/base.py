"""Command builder interface shared by all svnlook subcommands."""

from __future__ import annotations

import shutil
from pathlib import Path

from ..config import SvnlookConfig
from ..utils.subprocess import ProcessStream, RunResult, run


class SvnlookCommand:
    """Composes one svnlook invocation against a repository.

    Command line: executable, executable_args, subcommand, options,
    ``-r REV``, ``--``, repository, then any trailing operands.
    """

    name: str
    takes_revision: bool = True

    def __init__(self, repository: Path, config: SvnlookConfig | None = None) -> None:
        self.repository = Path(repository)
        self.config = config or SvnlookConfig()
        self._revision: int | None = None
        self._options: list[str] = []

    def is_available(self) -> bool:
        """Return True if the configured executable can be found."""

        return shutil.which(self.config.executable) is not None

    def revision(self, revision: int) -> SvnlookCommand:
        if not self.takes_revision:
            raise ValueError(f"'{self.name}' does not take a revision")
        if revision < 0:
            raise ValueError("revision must be >= 0")
        self._revision = int(revision)
        return self

    def option(self, *args: str) -> SvnlookCommand:
        self._options.extend(args)
        return self

    def operands(self) -> list[str]:
        """Operands following the repository path."""

        return []

    def build_cmd(self) -> list[str]:
        cmd: list[str] = [self.config.executable, *self.config.executable_args, self.name]
        cmd.extend(self._options)
        if self._revision is not None:
            cmd.extend(["-r", str(self._revision)])
        cmd.append("--")
        cmd.append(str(self.repository))
        cmd.extend(self.operands())
        return cmd

    def spawn(self) -> ProcessStream:
        """Start the command and hand back its output as a stream."""

        return ProcessStream.spawn(self.build_cmd(), stderr=self.config.stderr)

    def output(self) -> RunResult:
        """Run the command to completion and capture its output."""

        return run(self.build_cmd())
