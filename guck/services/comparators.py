"""The three comparison strategies: branch, working tree and staged.

Each comparator takes an open repository, the base branch name and a deadline,
and returns FileChange records in discovery order.
"""

import logging
from typing import Any, List

from git import Commit

from ..models import FileChange
from .deadline import Deadline
from .diff_parser import build_untracked_patch, parse_diff_output
from .repository import GitRepository

logger = logging.getLogger(__name__)

# Overrides user configuration that changes the shape of the diff text
# (diff.noprefix, diff.mnemonicPrefix, diff.external, color.diff).
DIFF_OPTIONS = {
    "no_color": True,
    "no_ext_diff": True,
    "find_renames": True,
    "src_prefix": "a/",
    "dst_prefix": "b/",
}


def _git_diff(repository: GitRepository, *args: Any, deadline: Deadline, **kwargs: Any) -> List[FileChange]:
    raw = repository.run_git("diff", *args, deadline=deadline, **DIFF_OPTIONS, **kwargs)
    return parse_diff_output(raw)


def comparison_base(repository: GitRepository, base_branch: str, deadline: Deadline) -> Commit:
    """The commit HEAD is compared against in branch mode.

    This is the first merge base of HEAD and the base branch, or the base
    branch tip itself when the histories share no ancestor.
    """
    base_commit = repository.resolve_branch(base_branch)
    head_commit = repository.head_commit()

    merge_bases = repository.merge_bases(base_commit, head_commit, deadline)
    if merge_bases:
        logger.debug("Merge base of %s and HEAD: %s", base_branch, merge_bases[0].hexsha)
        return merge_bases[0]

    logger.debug("No merge base with %s, diffing against its tip", base_branch)
    return base_commit


def compare_branch(repository: GitRepository, base_branch: str, deadline: Deadline) -> List[FileChange]:
    """What HEAD changed since it diverged from ``base_branch``."""
    base = comparison_base(repository, base_branch, deadline)
    head = repository.head_commit()
    return _git_diff(repository, base.hexsha, head.hexsha, deadline=deadline)


def compare_working(repository: GitRepository, base_branch: str, deadline: Deadline) -> List[FileChange]:
    """Uncommitted tracked changes followed by untracked files."""
    if repository.has_commits():
        files = _git_diff(repository, "HEAD", deadline=deadline)
    else:
        # Without HEAD the index is compared against the empty tree.
        files = _git_diff(repository, cached=True, deadline=deadline)

    for path in repository.untracked_files(deadline):
        deadline.check()
        data = repository.read_bytes(path)
        if data is None:
            continue
        files.append(build_untracked_patch(path, data))

    return files


def compare_staged(repository: GitRepository, base_branch: str, deadline: Deadline) -> List[FileChange]:
    """Changes in the index relative to HEAD."""
    repository.head_commit()
    return _git_diff(repository, cached=True, deadline=deadline)
