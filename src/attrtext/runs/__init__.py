"""Run partitioning and overlap policies."""

from .builder import ABSENT, Run, RunBuilder
from .policies import DEFAULT_POLICY, Combine, FirstWriterWins, LastWriterWins, OverlapPolicy

__all__ = [
    "ABSENT",
    "Combine",
    "DEFAULT_POLICY",
    "FirstWriterWins",
    "LastWriterWins",
    "OverlapPolicy",
    "Run",
    "RunBuilder",
]
