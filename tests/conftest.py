"""Pytest configuration and fixtures for svnlook tests."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from svnlook.config import SvnlookConfig
from svnlook.utils.subprocess import ProcessStream, StderrPolicy

FIXTURES_DIR = Path(__file__).parent / "fixtures"
FAKE_SVNLOOK = FIXTURES_DIR / "fake_svnlook.py"

# Child that writes the bytes of argv[1] (a file) to stdout and exits with argv[2].
EMIT_SCRIPT = (
    "import sys\n"
    "with open(sys.argv[1], 'rb') as f:\n"
    "    sys.stdout.buffer.write(f.read())\n"
    "sys.stdout.buffer.flush()\n"
    "sys.exit(int(sys.argv[2]))\n"
)


def python_cmd(code: str, *args: str) -> list[str]:
    return [sys.executable, "-c", code, *args]


@pytest.fixture
def emit(tmp_path: Path) -> Callable[..., ProcessStream]:
    """Spawn a child that prints the given bytes then exits with the given code."""

    counter = iter(range(1_000_000))

    def spawn(data: bytes, exit_code: int = 0) -> ProcessStream:
        payload = tmp_path / f"payload-{next(counter)}.bin"
        payload.write_bytes(data)
        return ProcessStream.spawn(
            python_cmd(EMIT_SCRIPT, str(payload), str(exit_code)),
            stderr=StderrPolicy.NULL,
        )

    return spawn


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    """An empty directory standing in for a repository."""

    repo = tmp_path / "repo"
    repo.mkdir()
    return repo


@pytest.fixture
def fake_svnlook(tmp_path: Path) -> Callable[[dict], SvnlookConfig]:
    """Build an SvnlookConfig that runs the fake svnlook with the given data."""

    def make(data: dict) -> SvnlookConfig:
        data_path = tmp_path / "svnlook-data.json"
        data_path.write_text(json.dumps(data), encoding="utf-8")
        return SvnlookConfig(
            executable=sys.executable,
            executable_args=(str(FAKE_SVNLOOK), "--data", str(data_path)),
            stderr=StderrPolicy.NULL,
        )

    return make


def info_output(committer: str, date: str, message: str) -> str:
    """Render `svnlook info` output the way svnlook lays it out."""

    return f"{committer}\n{date} (Thu, 02 Jan 2020)\n{len(message.encode('utf-8'))}\n{message}\n"


@pytest.fixture
def sample_history() -> dict:
    """Three revisions: plain adds, a copy with a property change, a delete."""

    return {
        "youngest": {"stdout": "3\n"},
        "info": {
            "1": {"stdout": info_output("alice", "2020-01-02 03:04:05 +0000", "Initial import")},
            "2": {"stdout": info_output("bob", "2020-01-03 10:00:00 +0100", "Branch\n\nwith a long message")},
            "3": {"stdout": info_output("alice", "2020-01-04 12:30:00 +0000", "Remove readme")},
        },
        "changed": {
            "1": {"stdout": "A   trunk/\nA   trunk/README\n"},
            "2": {"stdout": "A + branches/b1/\n    (from trunk/:r1)\n_U  trunk/README\n"},
            "3": {"stdout": "D   trunk/README\n"},
        },
        "diff": {"3": {"stdout": "Deleted: trunk/README\n===\n"}},
        "cat": {"1": {"stdout": "hello readme\n"}},
    }
