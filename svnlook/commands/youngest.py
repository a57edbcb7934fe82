"""`svnlook youngest`: the latest revision number."""

from __future__ import annotations

from ..errors import ParseError
from . import register_command
from .base import SvnlookCommand


@register_command
class YoungestCommand(SvnlookCommand):
    name = "youngest"
    takes_revision = False

    def fetch(self) -> int:
        text = self.output().stdout.strip()
        if not text.isdigit():
            raise ParseError(f"unexpected youngest output: {text[:80]!r}")
        return int(text)
