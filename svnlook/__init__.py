"""svnlook

Drive the Subversion `svnlook` command and consume its output as typed data:
streamed change records for `svnlook changed`, parsed revision info for
`svnlook info`, and raw byte streams for `diff`/`cat`.

Primary entrypoints:
- svnlook.Repository
- console script: svnlook-py
"""

from __future__ import annotations

from .changes import ChangedIter, ChangeRecord, ChangeStatus, CopySource
from .errors import ExitFailure, ParseError, ProcessError, SvnlookError
from .info import RevisionInfo, parse_info
from .repository import Repository
from .utils.subprocess import ProcessStream, StderrPolicy

__all__ = [
    "__version__",
    "ChangedIter",
    "ChangeRecord",
    "ChangeStatus",
    "CopySource",
    "ExitFailure",
    "ParseError",
    "ProcessError",
    "ProcessStream",
    "Repository",
    "RevisionInfo",
    "StderrPolicy",
    "SvnlookError",
    "parse_info",
]

__version__ = "0.1.0"
