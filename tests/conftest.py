from pathlib import Path
from typing import Callable

import pytest
from git import Commit, Repo


def _configure(repo: Repo) -> None:
    repo.git.symbolic_ref("HEAD", "refs/heads/main")
    with repo.config_writer() as config:
        config.set_value("user", "name", "Test")
        config.set_value("user", "email", "test@test.com")


@pytest.fixture
def empty_repo(tmp_path) -> Repo:
    """A freshly initialized repository without any commits."""
    repo_dir = tmp_path / "empty-repo"
    repo_dir.mkdir()
    repo = Repo.init(repo_dir)
    _configure(repo)
    return repo


@pytest.fixture
def git_repo(tmp_path) -> Repo:
    """A repository on branch main with README.md committed."""
    repo_dir = tmp_path / "test-repo"
    repo_dir.mkdir()

    repo = Repo.init(repo_dir)
    _configure(repo)

    readme = repo_dir / "README.md"
    readme.write_text("# Test Repo\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    return repo


@pytest.fixture
def commit_file() -> Callable[..., Commit]:
    """Write a file into the working tree, stage it and commit it."""

    def _commit_file(repo: Repo, path: str, content, message: str = "Commit") -> Commit:
        full_path = Path(repo.working_tree_dir) / path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            full_path.write_bytes(content)
        else:
            full_path.write_text(content)
        repo.index.add([path])
        return repo.index.commit(message)

    return _commit_file
