"""`svnlook info`: committer, date and log message of a revision."""

from __future__ import annotations

from ..errors import ParseError
from ..info import RevisionInfo, parse_info
from . import register_command
from .base import SvnlookCommand


@register_command
class InfoCommand(SvnlookCommand):
    name = "info"

    def fetch(self) -> RevisionInfo:
        if self._revision is None:
            raise ParseError("info needs a revision to attribute the output to")
        return parse_info(self._revision, self.output().stdout)
