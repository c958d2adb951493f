"""Read-only access to a local git repository."""

import logging
from pathlib import Path
from typing import Any, List, Optional

from git import Commit, Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git.refs.symbolic import SymbolicReference

from ..exceptions import BranchNotFound, DiffFailed, NoCommits, NotARepository
from ..models import FileContents
from .deadline import Deadline

logger = logging.getLogger(__name__)

ORIGIN = "origin"
REMOTE_PREFIX = f"refs/remotes/{ORIGIN}/"
LOCAL_PREFIX = "refs/heads/"
COMMON_BRANCHES = ["main", "master", "develop", "development"]
FALLBACK_BRANCH = "main"


class GitRepository:
    """Opens a repository root and answers questions about its refs."""

    def __init__(self, repo: Repo):
        self.repo = repo

    @classmethod
    def open(cls, path: str) -> "GitRepository":
        """Open the repository containing ``path``, searching parent directories."""
        try:
            repo = Repo(str(path), search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NotARepository(str(path)) from e

        if repo.bare or repo.working_tree_dir is None:
            raise NotARepository(str(path), "bare repository has no working tree")
        return cls(repo)

    def root_path(self) -> Path:
        """Absolute path of the working tree root."""
        return Path(self.repo.working_tree_dir).resolve()

    def has_commits(self) -> bool:
        return self.repo.head.is_valid()

    def head_commit(self) -> Commit:
        if not self.has_commits():
            raise NoCommits()
        return self.repo.head.commit

    def current_branch(self) -> str:
        """Short branch name, or ``"HEAD"`` when HEAD is detached."""
        if self.repo.head.is_detached:
            return "HEAD"
        return self.repo.active_branch.name

    def current_commit(self) -> str:
        return self.head_commit().hexsha

    def remote_url(self) -> str:
        """Fetch URL of ``origin``; empty when the remote is not configured."""
        if ORIGIN not in self.repo.remotes:
            return ""
        try:
            return next(iter(self.repo.remotes[ORIGIN].urls), "")
        except GitCommandError as e:
            logger.warning("Could not read URL of remote %s: %s", ORIGIN, e)
            return ""

    def _ref(self, path: str) -> Optional[SymbolicReference]:
        ref = SymbolicReference(self.repo, path)
        return ref if ref.is_valid() else None

    def default_branch(self) -> str:
        """Best-effort guess of the branch this repository integrates into."""
        remote_head = SymbolicReference(self.repo, f"{REMOTE_PREFIX}HEAD")
        try:
            target = remote_head.reference.path
        except (TypeError, ValueError):
            target = ""
        if target.startswith(REMOTE_PREFIX):
            return target[len(REMOTE_PREFIX):]

        for branch in COMMON_BRANCHES:
            if self._ref(REMOTE_PREFIX + branch) is not None:
                return branch
            if self._ref(LOCAL_PREFIX + branch) is not None:
                return branch

        return FALLBACK_BRANCH

    def resolve_branch(self, branch: str) -> Commit:
        """Commit of ``origin/<branch>``, falling back to the local branch."""
        for path in (REMOTE_PREFIX + branch, LOCAL_PREFIX + branch):
            ref = self._ref(path)
            if ref is None:
                continue
            try:
                return ref.commit
            except (TypeError, ValueError) as e:
                logger.debug("Ref %s does not point to a commit: %s", path, e)
        raise BranchNotFound(branch)

    def merge_bases(self, first: Commit, second: Commit, deadline: Deadline) -> List[Commit]:
        """All merge bases of two commits; empty for disjoint histories."""
        deadline.check()
        try:
            bases = self.repo.merge_base(first, second, all=True, **deadline.git_kwargs())
        except GitCommandError as e:
            deadline.check()
            raise DiffFailed(f"Failed to find merge base: {e}") from e
        # GitPython maps any exit status other than 128 to "no merge base",
        # which includes a merge-base process killed by the deadline.
        deadline.check()
        return bases

    def run_git(self, command: str, *args: Any, deadline: Deadline, **kwargs: Any) -> str:
        """Run a git subcommand and return its untouched stdout."""
        deadline.check()
        method = getattr(self.repo.git, command)
        try:
            return method(
                *args,
                strip_newline_in_stdout=False,
                **kwargs,
                **deadline.git_kwargs(),
            )
        except GitCommandError as e:
            deadline.check()
            raise DiffFailed(f"git {command} failed: {e}") from e

    def untracked_files(self, deadline: Deadline) -> List[str]:
        """Untracked files that are not excluded by ignore rules."""
        output = self.run_git(
            "ls_files", others=True, exclude_standard=True, z=True, deadline=deadline
        )
        return [path for path in output.split("\0") if path]

    def has_uncommitted_changes(self) -> bool:
        return self.repo.is_dirty(untracked_files=True)

    def has_staged_changes(self) -> bool:
        return self.repo.is_dirty(index=True, working_tree=False)

    def file_at(self, ref: str, path: str) -> Optional[FileContents]:
        """File content at ``ref``; an empty ref reads the index."""
        try:
            contents = self.repo.git.show(f"{ref}:{path}", strip_newline_in_stdout=False)
        except GitCommandError:
            return None
        return FileContents(name=Path(path).name, contents=contents)

    def working_file(self, path: str) -> Optional[FileContents]:
        full_path = self.root_path() / path
        try:
            contents = full_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Failed to read working file %s: %s", path, e)
            return None
        return FileContents(name=full_path.name, contents=contents)

    def read_bytes(self, path: str) -> Optional[bytes]:
        try:
            return (self.root_path() / path).read_bytes()
        except OSError as e:
            logger.debug("Failed to read %s: %s", path, e)
            return None
