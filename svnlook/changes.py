"""Parsing of `svnlook changed --copy-info` output.

Each change is one line: a 3-byte status code, a separating space, then the path.
Copies ("A +") are followed by a continuation line naming their source:

    A + trunk/new.txt
        (from trunk/old.txt:r41)

Lines are read one at a time from the running command, so a large changeset
never has to be held in memory.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

from .errors import ExitFailure, ParseError, ProcessError, SvnlookError
from .utils.subprocess import ProcessStream

log = logging.getLogger(__name__)

_COPY_PREFIX = b"    (from "
_COPY_SUFFIX = b")"


class ChangeStatus(str, Enum):
    ADDED = "added"
    DELETED = "deleted"
    UPDATED = "updated"
    PROPERTY_CHANGED = "property_changed"
    COPIED = "copied"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    ChangeStatus.ADDED: "Added",
    ChangeStatus.DELETED: "Deleted",
    ChangeStatus.UPDATED: "Updated",
    ChangeStatus.PROPERTY_CHANGED: "PropChange",
    ChangeStatus.COPIED: "Copied",
}

_STATUS_CODES: dict[bytes, ChangeStatus] = {
    b"A  ": ChangeStatus.ADDED,
    b"A +": ChangeStatus.COPIED,
    b"D  ": ChangeStatus.DELETED,
    b"U  ": ChangeStatus.UPDATED,
    b"UU ": ChangeStatus.UPDATED,
    b"_U ": ChangeStatus.PROPERTY_CHANGED,
}


@dataclass(frozen=True)
class CopySource:
    path: str
    revision: int


@dataclass(frozen=True)
class ChangeRecord:
    """How one path was affected by a revision.

    copied_from is present exactly when status is COPIED.
    """

    path: str
    status: ChangeStatus
    copied_from: CopySource | None = None

    def __post_init__(self) -> None:
        if (self.status is ChangeStatus.COPIED) != (self.copied_from is not None):
            raise ValueError("copied_from must be set for, and only for, copied records")

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"path": self.path, "status": self.status.value}
        if self.copied_from is not None:
            out["copied_from"] = {"path": self.copied_from.path, "revision": self.copied_from.revision}
        return out


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _chomp(line: bytes) -> bytes:
    if not line.endswith(b"\n"):
        raise ParseError(f"unterminated line: {line!r}")
    return line[:-1]


def parse_change_line(line: bytes) -> tuple[ChangeStatus, str]:
    """Parse one status line into (status, path).

    A COPIED status still needs its continuation line, see parse_copy_source().
    """

    body = _chomp(line)
    if len(body) < 4:
        raise ParseError(f"change line too short: {line!r}")

    status = _STATUS_CODES.get(body[:3])
    if status is None:
        raise ParseError(f"unknown status code {body[:3]!r}")

    # svnlook separates code and path with one space; some producers omit it.
    path = body[4:] if body[3:4] == b" " else body[3:]
    return status, _decode(path)


def parse_copy_source(line: bytes) -> CopySource:
    """Parse a `    (from PATH:rREV)` continuation line.

    The revision is split off at the rightmost colon since paths may contain colons.
    """

    body = _chomp(line)
    if not body.startswith(_COPY_PREFIX) or not body.endswith(_COPY_SUFFIX):
        raise ParseError(f"malformed copy source line: {line!r}")

    inner = body[len(_COPY_PREFIX) : -len(_COPY_SUFFIX)]
    pos = inner.rfind(b":")
    if pos < 0:
        raise ParseError(f"copy source without revision: {line!r}")

    path, rev = inner[:pos], inner[pos + 1 :]
    digits = rev[1:]
    if not rev.startswith(b"r") or not digits or not digits.isdigit():
        raise ParseError(f"bad copy source revision {rev!r}")

    return CopySource(path=_decode(path), revision=int(digits))


class ChangedIter:
    """Iterator over the change records of one running `svnlook changed`.

    Owns the stream it reads from. Items:
    - a ChangeRecord per logical change (two lines for copies);
    - ParseError raised for a malformed record; the iterator stays usable and
      the next call resumes with the following line;
    - ExitFailure or ProcessError raised once as the final item when the
      command failed, then StopIteration.

    Use it as a context manager, or call close(), to reap the command early.
    Abandoned iterators are reaped when collected.
    """

    def __init__(self, stream: ProcessStream):
        self._stream = stream
        self._reader = io.BufferedReader(stream)
        self._finished = False

    @property
    def stream(self) -> ProcessStream:
        return self._stream

    @property
    def finished(self) -> bool:
        return self._finished

    def __iter__(self) -> ChangedIter:
        return self

    def __next__(self) -> ChangeRecord:
        if self._finished:
            raise StopIteration

        line = self._readline()
        if not line:
            self._finished = True
            returncode = self._stream.finish()
            if returncode != 0:
                raise ExitFailure(self._stream.cmd, returncode)
            raise StopIteration

        return self._parse(line)

    def _readline(self) -> bytes:
        try:
            return self._reader.readline()
        except (ExitFailure, ProcessError):
            self._finished = True
            raise

    def _parse(self, line: bytes) -> ChangeRecord:
        status, path = parse_change_line(line)
        if status is not ChangeStatus.COPIED:
            return ChangeRecord(path=path, status=status)

        source = parse_copy_source(self._readline())
        return ChangeRecord(path=path, status=status, copied_from=source)

    def results(self) -> Iterator[ChangeRecord | SvnlookError]:
        """Yield every item, errors included, instead of raising them.

        Whether to keep going after a ParseError is up to the caller.
        """

        while True:
            try:
                yield next(self)
            except StopIteration:
                return
            except SvnlookError as e:
                yield e

    def close(self) -> None:
        self._finished = True
        self._reader.close()

    def __enter__(self) -> ChangedIter:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __del__(self) -> None:
        reader = getattr(self, "_reader", None)
        if reader is not None and not reader.closed:
            reader.close()
