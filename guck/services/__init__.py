"""Services for the application."""

from .deadline import Deadline
from .diff_engine import (
    DiffEngine,
    DiffResult,
    FileDiffResult,
    compute_diff,
    select_comparator,
)
from .diff_parser import parse_diff_output
from .repository import GitRepository

__all__ = [
    "Deadline",
    "DiffEngine",
    "DiffResult",
    "FileDiffResult",
    "GitRepository",
    "compute_diff",
    "parse_diff_output",
    "select_comparator",
]
