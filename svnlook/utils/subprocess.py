"""Subprocess helpers.

We centralize subprocess behavior for consistent error reporting.

Two shapes are offered:
- run(): capture the whole output of a short command.
- ProcessStream: a readable raw stream over a running command's stdout that
  reports the exit status when the output ends and always reaps the child.
"""

from __future__ import annotations

import io
import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Mapping

from ..errors import ExitFailure, ProcessError

log = logging.getLogger(__name__)


class StderrPolicy(str, Enum):
    """What the child does with its standard error."""

    INHERIT = "inherit"
    NULL = "null"

    def popen_arg(self) -> int | None:
        return subprocess.DEVNULL if self is StderrPolicy.NULL else None


@dataclass(frozen=True)
class RunResult:
    cmd: list[str]
    returncode: int
    stdout: bytes
    stderr: str


def run(
    cmd: Iterable[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> RunResult:
    """Run a command, capturing stdout/stderr.

    stdout is kept as bytes since some layouts count message bytes.
    Raises ProcessError if the command cannot start, ExitFailure on non-zero exit.
    """

    cmd_list = [str(c) for c in cmd]

    try:
        proc = subprocess.run(
            cmd_list,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            check=False,
            cwd=cwd,
            env=dict(env) if env is not None else None,
        )
    except OSError as e:
        raise ProcessError(f"failed to start {cmd_list[0]}: {e}") from e

    res = RunResult(
        cmd=cmd_list,
        returncode=proc.returncode,
        stdout=proc.stdout or b"",
        stderr=(proc.stderr or b"").decode("utf-8", errors="replace"),
    )

    if res.returncode != 0:
        # Include stderr tail for signal.
        tail = res.stderr.strip().splitlines()[-20:]
        tail_text = "\n".join(tail)
        raise ExitFailure(
            res.cmd,
            res.returncode,
            res,
            f"Command failed with exit code {res.returncode}: {' '.join(res.cmd)}\n{tail_text}",
        )

    return res


class ProcessStream(io.RawIOBase):
    """Readable stream over the stdout of a child process it owns.

    End of data is never reported for a child that failed: the zero-byte read
    waits for the child and raises ExitFailure instead. close() (and therefore
    ``with``, a wrapping BufferedReader, or garbage collection) always reaps
    the child.

    Not thread-safe; use one instance per thread.
    """

    def __init__(self, proc: subprocess.Popen, cmd: list[str]):
        self._proc = proc
        self._cmd = cmd
        self._stdout = proc.stdout
        self._drained = False
        self._returncode: int | None = None
        super().__init__()

    @classmethod
    def spawn(
        cls,
        cmd: Iterable[str],
        *,
        stderr: StderrPolicy = StderrPolicy.INHERIT,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessStream:
        cmd_list = [str(c) for c in cmd]
        try:
            proc = subprocess.Popen(
                cmd_list,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=StderrPolicy(stderr).popen_arg(),
                cwd=cwd,
                env=dict(env) if env is not None else None,
                bufsize=0,
            )
        except OSError as e:
            raise ProcessError(f"failed to start {cmd_list[0]}: {e}") from e

        log.debug("Started pid=%d: %s", proc.pid, " ".join(cmd_list))
        return cls(proc, cmd_list)

    @property
    def cmd(self) -> list[str]:
        return list(self._cmd)

    @property
    def pid(self) -> int:
        return self._proc.pid

    @property
    def returncode(self) -> int | None:
        """Exit status once finished, else None."""
        return self._returncode

    @property
    def drained(self) -> bool:
        """True once a genuine end of data has been read."""
        return self._drained

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self._stdout is None:
            if self._drained:
                return self._end_of_data()
            raise ProcessError("pipe to subprocess closed")

        if len(memoryview(buffer)) == 0:
            return 0

        try:
            n = self._stdout.readinto(buffer)
        except OSError as e:
            raise ProcessError(f"reading from {self._cmd[0]} failed: {e}") from e

        if n:
            return n

        self._drained = True
        return self._end_of_data()

    def _end_of_data(self) -> int:
        returncode = self.finish()
        if returncode != 0:
            raise ExitFailure(self._cmd, returncode)
        return 0

    def finish(self) -> int:
        """Release the pipe, then wait for the child and return its exit status.

        The pipe must go first: a child blocked writing into a full pipe would
        otherwise never exit. Repeat calls return the cached status.
        """

        if self._returncode is not None:
            return self._returncode

        if self._stdout is not None:
            stdout, self._stdout = self._stdout, None
            try:
                stdout.close()
            except OSError as e:
                log.debug("Closing pipe of pid=%d failed: %s", self._proc.pid, e)

        try:
            self._returncode = self._proc.wait()
        except OSError as e:
            raise ProcessError(f"waiting for {self._cmd[0]} failed: {e}") from e

        log.debug("Reaped pid=%d returncode=%d", self._proc.pid, self._returncode)
        return self._returncode

    def close(self) -> None:
        if self.closed:
            return
        try:
            self.finish()
        except ProcessError as e:
            log.debug("Teardown of %s: %s", self._cmd[0], e)
        finally:
            super().close()
