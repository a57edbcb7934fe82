"""`svnlook cat`: contents of a file at a revision, passed through unparsed."""

from __future__ import annotations

from pathlib import Path

from ..config import SvnlookConfig
from . import register_command
from .base import SvnlookCommand


@register_command
class CatCommand(SvnlookCommand):
    name = "cat"

    def __init__(self, repository: Path, config: SvnlookConfig | None = None) -> None:
        super().__init__(repository, config)
        self.path: str | None = None

    def file(self, path: str) -> CatCommand:
        self.path = path
        return self

    def operands(self) -> list[str]:
        if not self.path:
            raise ValueError("cat needs a file path")
        return [self.path]
