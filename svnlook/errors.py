"""Error types raised by svnlook.

A failed invocation is reported once; nothing here retries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .utils.subprocess import RunResult


class SvnlookError(RuntimeError):
    """Base class for all svnlook failures."""


class ProcessError(SvnlookError):
    """The process could not be started, or its pipe failed."""


class ExitFailure(SvnlookError):
    """The process ran to completion but exited with a non-zero status.

    Only detectable once its output has been exhausted.
    """

    def __init__(
        self,
        cmd: Sequence[str],
        returncode: int,
        result: RunResult | None = None,
        message: str | None = None,
    ):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.result = result
        super().__init__(message or f"non-zero exit from command ({returncode}): {' '.join(self.cmd)}")


class ParseError(SvnlookError):
    """Output did not match the expected layout."""
