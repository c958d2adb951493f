"""Diff engine protocol interface."""

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from ..services.deadline import Deadline
from ..services.diff_engine import DiffResult, FileDiffResult


@runtime_checkable
class DiffEngineProtocol(Protocol):
    """Protocol for the operations the HTTP layer needs from the engine."""

    @property
    def repo_path(self) -> str:
        """Path the repository is discovered from."""
        ...

    @property
    def base_branch(self) -> str:
        """Branch compared against in branch mode."""
        ...

    def get_diff(
        self,
        mode: Optional[str] = None,
        base_branch: Optional[str] = None,
        deadline: Optional[Deadline] = None,
    ) -> DiffResult:
        """Changed files plus branch, commit and remote information."""
        ...

    def get_file_diff(
        self,
        path: str,
        mode: Optional[str] = None,
        base_branch: Optional[str] = None,
        deadline: Optional[Deadline] = None,
    ) -> Optional[FileDiffResult]:
        """A single file's change with its old and new contents."""
        ...

    def get_status(self) -> Dict[str, Any]:
        """Branch, commit and dirty flags of the repository."""
        ...

    def get_default_branch(self) -> str:
        """Best guess of the repository's default branch."""
        ...
