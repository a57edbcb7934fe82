"""Parsing of `svnlook info` output.

Layout:

    committer
    2020-01-02 03:04:05 +0000 (Thu, 02 Jan 2020)
    <message byte count>
    <message, which may span several lines>

The message is length-prefixed rather than terminated, so only the first
three newlines separate fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .errors import ParseError

DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"
DATE_WIDTH = 25


@dataclass(frozen=True)
class RevisionInfo:
    revision: int
    committer: str
    date: datetime
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "revision": self.revision,
            "committer": self.committer,
            "date": self.date.isoformat(),
            "message": self.message,
        }


def parse_info(revision: int, output: bytes) -> RevisionInfo:
    """Build a RevisionInfo from the captured output of `svnlook info -r REVISION`."""

    sections = output.split(b"\n", 3)
    if len(sections) != 4:
        raise ParseError(f"expected 4 sections in info output, got {len(sections)}")
    committer_raw, date_raw, length_raw, rest = sections

    if len(date_raw) < DATE_WIDTH:
        raise ParseError(f"date field too short: {date_raw!r}")
    try:
        date = datetime.strptime(date_raw[:DATE_WIDTH].decode("ascii"), DATE_FORMAT)
    except (UnicodeDecodeError, ValueError) as e:
        raise ParseError(f"bad date field {date_raw!r}: {e}") from e

    if not length_raw.isdigit():
        raise ParseError(f"bad message length {length_raw!r}")
    length = int(length_raw)

    if len(rest) <= length:
        raise ParseError(f"message shorter than declared {length} bytes")

    return RevisionInfo(
        revision=revision,
        committer=committer_raw.decode("utf-8", errors="replace"),
        date=date,
        message=rest[:length].decode("utf-8", errors="replace"),
    )
