"""Repository path checks and output file helpers."""

from __future__ import annotations

from pathlib import Path


def resolve_repository(path: Path) -> Path:
    """Return the absolute repository path.

    svnlook works on the repository directory itself, not a working copy.
    """

    repo = Path(path).expanduser().resolve()
    if not repo.exists() or not repo.is_dir():
        raise FileNotFoundError(f"repository does not exist or is not a directory: {repo}")
    return repo


def ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
