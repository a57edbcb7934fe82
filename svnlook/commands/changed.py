"""`svnlook changed`: paths touched by a revision."""

from __future__ import annotations

from pathlib import Path

from ..changes import ChangedIter
from ..config import SvnlookConfig
from . import register_command
from .base import SvnlookCommand


@register_command
class ChangedCommand(SvnlookCommand):
    name = "changed"

    def __init__(self, repository: Path, config: SvnlookConfig | None = None, *, copy_info: bool = True) -> None:
        super().__init__(repository, config)
        # Without --copy-info there are no continuation lines to resolve copies.
        if copy_info:
            self.option("--copy-info")

    def iter_changes(self) -> ChangedIter:
        return ChangedIter(self.spawn())
