"""Tests for the subcommand builders and their registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from svnlook.commands import command_names, get_command, register_command
from svnlook.commands.base import SvnlookCommand
from svnlook.commands.cat import CatCommand
from svnlook.commands.changed import ChangedCommand
from svnlook.commands.diff import DiffCommand
from svnlook.commands.youngest import YoungestCommand
from svnlook.config import SvnlookConfig

REPO = Path("/srv/svn/repo")


class TestRegistry:
    def test_all_subcommands_registered(self):
        assert command_names() == ["cat", "changed", "diff", "info", "youngest"]

    def test_get_command_returns_fresh_instances(self):
        a = get_command("diff", REPO)
        b = get_command("diff", REPO)
        assert isinstance(a, DiffCommand)
        assert a is not b

    def test_unknown_command(self):
        with pytest.raises(ValueError, match="Unknown svnlook command"):
            get_command("proplist", REPO)

    def test_duplicate_registration(self):
        class Again(SvnlookCommand):
            name = "changed"

        with pytest.raises(ValueError, match="Duplicate"):
            register_command(Again)

    def test_nameless_registration(self):
        class Nameless(SvnlookCommand):
            name = ""

        with pytest.raises(ValueError, match="non-empty"):
            register_command(Nameless)


class TestBuildCmd:
    def test_changed_uses_copy_info(self):
        cmd = ChangedCommand(REPO).revision(5).build_cmd()
        assert cmd == ["svnlook", "changed", "--copy-info", "-r", "5", "--", str(REPO)]

    def test_changed_without_copy_info(self):
        cmd = ChangedCommand(REPO, copy_info=False).revision(5).build_cmd()
        assert "--copy-info" not in cmd

    def test_executable_and_leading_args(self):
        config = SvnlookConfig(executable="/opt/svn/bin/svnlook", executable_args=("--wrapper",))
        cmd = get_command("info", REPO, config).revision(0).build_cmd()
        assert cmd == ["/opt/svn/bin/svnlook", "--wrapper", "info", "-r", "0", "--", str(REPO)]

    def test_youngest_takes_no_revision(self):
        cmd = YoungestCommand(REPO)
        assert cmd.build_cmd() == ["svnlook", "youngest", "--", str(REPO)]
        with pytest.raises(ValueError):
            cmd.revision(3)

    def test_negative_revision(self):
        with pytest.raises(ValueError):
            ChangedCommand(REPO).revision(-1)

    def test_cat_appends_path_after_repository(self):
        cmd = CatCommand(REPO).revision(9).file("trunk/-dash.txt").build_cmd()
        assert cmd[-3:] == ["--", str(REPO), "trunk/-dash.txt"]

    def test_cat_needs_path(self):
        with pytest.raises(ValueError, match="file path"):
            CatCommand(REPO).revision(1).build_cmd()


class TestDiffFlags:
    def test_flag_methods(self):
        cmd = (
            DiffCommand(REPO)
            .no_diff_deleted()
            .ignore_properties()
            .ignore_all_whitespace()
            .context_lines(5)
            .revision(2)
            .build_cmd()
        )
        assert cmd == [
            "svnlook",
            "diff",
            "--no-diff-deleted",
            "--ignore-properties",
            "-x",
            "-w",
            "-x",
            "-U5",
            "-r",
            "2",
            "--",
            str(REPO),
        ]

    def test_apply_by_name(self):
        cmd = DiffCommand(REPO).apply(diff_copy_from=True, no_diff_added=False, context_lines=None)
        assert cmd.build_cmd() == ["svnlook", "diff", "--diff-copy-from", "--", str(REPO)]

    def test_apply_rejects_unknown(self):
        with pytest.raises(ValueError, match="unknown diff flag"):
            DiffCommand(REPO).apply(spawn=True)

    def test_negative_context(self):
        with pytest.raises(ValueError):
            DiffCommand(REPO).context_lines(-1)


class TestAvailability:
    def test_missing_executable(self, tmp_path):
        config = SvnlookConfig(executable=str(tmp_path / "missing-svnlook"))
        assert not YoungestCommand(REPO, config).is_available()
