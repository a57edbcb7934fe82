"""Repository facade tests against the fake svnlook."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from svnlook import ChangeRecord, ChangeStatus, CopySource, Repository
from svnlook.errors import ExitFailure, ParseError


class TestRepository:
    def test_missing_repository(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Repository(tmp_path / "nope")

    def test_youngest(self, repo_dir, fake_svnlook, sample_history):
        repo = Repository(repo_dir, fake_svnlook(sample_history))
        assert repo.youngest() == 3

    def test_youngest_garbage(self, repo_dir, fake_svnlook):
        repo = Repository(repo_dir, fake_svnlook({"youngest": {"stdout": "not a number\n"}}))
        with pytest.raises(ParseError):
            repo.youngest()

    def test_info(self, repo_dir, fake_svnlook, sample_history):
        repo = Repository(repo_dir, fake_svnlook(sample_history))

        info = repo.info(2)

        assert info.revision == 2
        assert info.committer == "bob"
        assert info.message == "Branch\n\nwith a long message"
        assert info.date == datetime(2020, 1, 3, 9, 0, 0, tzinfo=timezone.utc)

    def test_info_unknown_revision(self, repo_dir, fake_svnlook, sample_history):
        repo = Repository(repo_dir, fake_svnlook(sample_history))
        with pytest.raises(ExitFailure) as exc_info:
            repo.info(99)
        assert "No such revision" in exc_info.value.result.stderr

    def test_changed(self, repo_dir, fake_svnlook, sample_history):
        repo = Repository(repo_dir, fake_svnlook(sample_history))

        with repo.changed(2) as changes:
            records = list(changes)

        assert records == [
            ChangeRecord("branches/b1/", ChangeStatus.COPIED, CopySource("trunk/", 1)),
            ChangeRecord("trunk/README", ChangeStatus.PROPERTY_CHANGED),
        ]

    def test_changed_unknown_revision(self, repo_dir, fake_svnlook, sample_history):
        repo = Repository(repo_dir, fake_svnlook(sample_history))
        with repo.changed(42) as changes:
            with pytest.raises(ExitFailure):
                next(changes)

    def test_changed_passes_copy_info(self, repo_dir, tmp_path, fake_svnlook, sample_history):
        argv_log = tmp_path / "argv.jsonl"
        repo = Repository(repo_dir, fake_svnlook({**sample_history, "argv_log": str(argv_log)}))

        with repo.changed(1) as changes:
            list(changes)

        (argv,) = [json.loads(line) for line in argv_log.read_text().splitlines()]
        assert argv == ["changed", "--copy-info", "-r", "1", "--", str(repo_dir.resolve())]

    def test_changed_abandoned_early(self, repo_dir, fake_svnlook):
        data = {"changed": {"1": {"stdout": "U   trunk/big.bin\n", "repeat": 200000}}}
        repo = Repository(repo_dir, fake_svnlook(data))

        with repo.changed(1) as changes:
            first = next(changes)
            stream = changes.stream

        assert first.path == "trunk/big.bin"
        assert stream.returncode is not None

    def test_diff_stream(self, repo_dir, fake_svnlook, sample_history):
        repo = Repository(repo_dir, fake_svnlook(sample_history))

        with repo.diff(3, ignore_properties=True) as stream:
            assert stream.read() == b"Deleted: trunk/README\n===\n"
        assert stream.returncode == 0

    def test_cat_stream(self, repo_dir, fake_svnlook, sample_history):
        repo = Repository(repo_dir, fake_svnlook(sample_history))

        with repo.cat(1, "trunk/README") as stream:
            assert stream.read() == b"hello readme\n"

    def test_cat_failure_surfaces_at_end(self, repo_dir, fake_svnlook, sample_history):
        repo = Repository(repo_dir, fake_svnlook(sample_history))

        with repo.cat(2, "trunk/README") as stream:
            with pytest.raises(ExitFailure):
                stream.read()
