"""`svnlook diff`: GNU-style diff of a revision, passed through unparsed.

Layout for reference:

    {Added,Modified,Deleted}: <filename>
    ===================================================================
    --- old_filename (rev N)
    +++ new_filename yyyy-mm-dd hh:mm:ss UTC (rev M)
     <diff>

Options passed after `-x` go to the internal diff engine.
"""

from __future__ import annotations

from . import register_command
from .base import SvnlookCommand

# Boolean switches accepted by apply().
FLAGS = (
    "no_diff_deleted",
    "no_diff_added",
    "diff_copy_from",
    "ignore_properties",
    "properties_only",
    "ignore_whitespace_change",
    "ignore_all_whitespace",
    "ignore_eol_style",
    "show_c_function",
)


@register_command
class DiffCommand(SvnlookCommand):
    name = "diff"

    def no_diff_deleted(self) -> DiffCommand:
        self.option("--no-diff-deleted")
        return self

    def no_diff_added(self) -> DiffCommand:
        self.option("--no-diff-added")
        return self

    def diff_copy_from(self) -> DiffCommand:
        self.option("--diff-copy-from")
        return self

    def ignore_properties(self) -> DiffCommand:
        self.option("--ignore-properties")
        return self

    def properties_only(self) -> DiffCommand:
        self.option("--properties-only")
        return self

    def ignore_whitespace_change(self) -> DiffCommand:
        self.option("-x", "-b")
        return self

    def ignore_all_whitespace(self) -> DiffCommand:
        self.option("-x", "-w")
        return self

    def ignore_eol_style(self) -> DiffCommand:
        self.option("-x", "--ignore-eol-style")
        return self

    def show_c_function(self) -> DiffCommand:
        self.option("-x", "-p")
        return self

    def context_lines(self, lines: int) -> DiffCommand:
        if lines < 0:
            raise ValueError("context lines must be >= 0")
        self.option("-x", f"-U{int(lines)}")
        return self

    def apply(self, **flags: bool | int | None) -> DiffCommand:
        """Apply flags by method name, e.g. apply(ignore_properties=True, context_lines=5)."""

        for key, value in flags.items():
            if key == "context_lines":
                if value is not None:
                    self.context_lines(int(value))
            elif key in FLAGS:
                if value:
                    getattr(self, key)()
            else:
                raise ValueError(f"unknown diff flag: {key}")
        return self
