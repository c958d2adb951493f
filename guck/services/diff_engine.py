"""Entry point of the diff engine: select a comparator and run it."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..exceptions import Cancelled, NoCommits
from ..models import DiffMode, FileChange, FileContents, FileStatus
from .comparators import compare_branch, compare_staged, compare_working, comparison_base
from .deadline import Deadline
from .diff_parser import unquote_path
from .repository import GitRepository

logger = logging.getLogger(__name__)

Comparator = Callable[[GitRepository, str, Deadline], List[FileChange]]

COMPARATORS: Dict[DiffMode, Comparator] = {
    DiffMode.BRANCH: compare_branch,
    DiffMode.WORKING: compare_working,
    DiffMode.STAGED: compare_staged,
}


def select_comparator(mode: Union[DiffMode, str, None]) -> Comparator:
    """Comparator for ``mode``; anything unrecognized selects branch mode."""
    return COMPARATORS[DiffMode.coerce(mode)]


def compute_diff(
    repository_root: Union[str, Path],
    mode: Union[DiffMode, str, None] = DiffMode.BRANCH,
    base_branch: str = "main",
    deadline: Optional[Deadline] = None,
) -> List[FileChange]:
    """Compute the changed files of a repository for one comparison mode.

    Raises:
        NotARepository: no repository contains ``repository_root``
        BranchNotFound: branch mode with an unknown ``base_branch``
        NoCommits: branch or staged mode in a repository without commits
        DiffFailed: git could not produce the diff
        Cancelled: the deadline expired or was cancelled
    """
    deadline = deadline or Deadline()
    repository = GitRepository.open(str(repository_root))
    comparator = select_comparator(mode)
    try:
        return comparator(repository, base_branch, deadline)
    except Cancelled:
        logger.info("Diff of %s (%s) was cancelled", repository_root, DiffMode.coerce(mode).value)
        raise


@dataclass
class DiffResult:
    """Changed files plus the repository facts the review UI shows with them."""

    files: List[FileChange]
    branch: str
    commit: str
    repo_path: str
    remote_url: str
    mode: DiffMode
    base_branch: str


@dataclass
class FileDiffResult:
    change: FileChange
    old_file: Optional[FileContents] = None
    new_file: Optional[FileContents] = None
    mode: DiffMode = DiffMode.BRANCH


class DiffEngine:
    """Diff engine bound to one repository path and its review defaults.

    Nothing is cached between calls: every call re-opens the repository and
    reads its current state.
    """

    def __init__(
        self,
        repo_path: str,
        base_branch: str = "main",
        mode: Union[DiffMode, str] = DiffMode.BRANCH,
        timeout: Optional[float] = None,
    ):
        self.repo_path = repo_path
        self.base_branch = base_branch
        self.mode = DiffMode.coerce(mode)
        self.timeout = timeout

    def _repository(self) -> GitRepository:
        return GitRepository.open(self.repo_path)

    def _deadline(self, deadline: Optional[Deadline]) -> Deadline:
        return deadline or Deadline(self.timeout)

    def _resolve(self, mode, base_branch):
        mode = self.mode if mode is None else DiffMode.coerce(mode)
        return mode, base_branch or self.base_branch

    def get_diff(
        self,
        mode: Union[DiffMode, str, None] = None,
        base_branch: Optional[str] = None,
        deadline: Optional[Deadline] = None,
    ) -> DiffResult:
        mode, base_branch = self._resolve(mode, base_branch)
        repository = self._repository()
        files = compute_diff(
            repository.root_path(), mode, base_branch, self._deadline(deadline)
        )

        try:
            commit = repository.current_commit()
        except NoCommits:
            commit = ""

        return DiffResult(
            files=files,
            branch=repository.current_branch(),
            commit=commit,
            repo_path=str(repository.root_path()),
            remote_url=repository.remote_url(),
            mode=mode,
            base_branch=base_branch,
        )

    def get_file_diff(
        self,
        path: str,
        mode: Union[DiffMode, str, None] = None,
        base_branch: Optional[str] = None,
        deadline: Optional[Deadline] = None,
    ) -> Optional[FileDiffResult]:
        """One file's change together with both sides of its content."""
        mode, base_branch = self._resolve(mode, base_branch)
        deadline = self._deadline(deadline)
        repository = self._repository()

        files = select_comparator(mode)(repository, base_branch, deadline)
        change = next((f for f in files if f.path == path), None)
        if change is None:
            return None

        if mode == DiffMode.BRANCH:
            old_ref = comparison_base(repository, base_branch, deadline).hexsha
            new_file = repository.file_at("HEAD", path)
        elif mode == DiffMode.STAGED:
            old_ref = "HEAD"
            new_file = repository.file_at("", path)
        else:
            old_ref = "HEAD" if repository.has_commits() else ""
            new_file = repository.working_file(path)

        old_file = None
        if change.status not in (FileStatus.ADDED, FileStatus.UNTRACKED) and old_ref:
            old_file = repository.file_at(old_ref, self._old_path(change))
        if change.status == FileStatus.DELETED:
            new_file = None

        return FileDiffResult(change=change, old_file=old_file, new_file=new_file, mode=mode)

    @staticmethod
    def _old_path(change: FileChange) -> str:
        if change.status == FileStatus.RENAMED:
            for line in change.patch.split("\n"):
                if line.startswith("rename from "):
                    return unquote_path(line[len("rename from "):])
                if line.startswith("@@"):
                    break
        return change.path

    def get_status(self) -> Dict[str, Any]:
        repository = self._repository()
        try:
            commit = repository.current_commit()
        except NoCommits:
            commit = ""
        return {
            "repo_path": str(repository.root_path()),
            "branch": repository.current_branch(),
            "commit": commit,
            "remote_url": repository.remote_url(),
            "default_branch": repository.default_branch(),
            "has_uncommitted_changes": repository.has_uncommitted_changes(),
            "has_staged_changes": repository.has_staged_changes(),
        }

    def get_default_branch(self) -> str:
        return self._repository().default_branch()
