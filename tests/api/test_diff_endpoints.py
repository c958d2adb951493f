from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from guck.dependencies import get_diff_engine
from guck.exceptions import Cancelled, DiffFailed
from guck.main import app
from guck.services.diff_engine_factory import create_diff_engine

client = TestClient(app)


class FailingEngine:
    """Engine stand-in whose diff calls raise a fixed error."""

    repo_path = "."
    base_branch = "main"

    def __init__(self, error):
        self.error = error

    def get_diff(self, mode=None, base_branch=None, deadline=None):
        raise self.error

    def get_file_diff(self, path, mode=None, base_branch=None, deadline=None):
        raise self.error

    def get_status(self):
        raise self.error

    def get_default_branch(self):
        return "main"


@pytest.fixture
def use_engine():
    def _use(engine):
        app.dependency_overrides[get_diff_engine] = lambda: engine

    yield _use
    app.dependency_overrides.clear()


def test_diff_working_mode(git_repo, use_engine):
    (Path(git_repo.working_tree_dir) / "README.md").write_text("# Modified Repo\n")
    (Path(git_repo.working_tree_dir) / "notes.txt").write_text("a\nb\n")
    use_engine(create_diff_engine(repo_path=git_repo.working_tree_dir))

    response = client.get("/api/diff", params={"mode": "working"})

    assert response.status_code == 200
    data = response.json()
    assert data["mode"] == "working"
    assert data["branch"] == "main"
    assert data["commit"] == git_repo.head.commit.hexsha
    assert data["remote_url"] is None
    assert [f["path"] for f in data["files"]] == ["README.md", "notes.txt"]
    assert data["files"][0]["status"] == "modified"
    assert data["files"][1]["status"] == "untracked"
    assert data["files"][1]["additions"] == 2


def test_diff_uses_engine_defaults(git_repo, commit_file, use_engine):
    git_repo.create_head("feature").checkout()
    commit_file(git_repo, "feature.txt", "feature\n")
    use_engine(create_diff_engine(repo_path=git_repo.working_tree_dir))

    response = client.get("/api/diff")

    assert response.status_code == 200
    data = response.json()
    assert data["mode"] == "branch"
    assert data["base_branch"] == "main"
    assert [f["path"] for f in data["files"]] == ["feature.txt"]


def test_diff_unknown_base_branch(git_repo, use_engine):
    use_engine(create_diff_engine(repo_path=git_repo.working_tree_dir))

    response = client.get("/api/diff", params={"base_branch": "develop"})

    assert response.status_code == 404
    detail = response.json()["detail"]
    assert "Base branch 'develop' not found" in detail
    assert "GUCK_BASE_BRANCH=main" in detail


def test_diff_not_a_repository(tmp_path, use_engine):
    use_engine(create_diff_engine(repo_path=str(tmp_path)))

    response = client.get("/api/diff")

    assert response.status_code == 400
    assert "Not a git repository" in response.json()["detail"]


def test_diff_staged_without_commits(empty_repo, use_engine):
    use_engine(create_diff_engine(repo_path=empty_repo.working_tree_dir))

    response = client.get("/api/diff", params={"mode": "staged"})

    assert response.status_code == 409


@pytest.mark.parametrize(
    "error,status_code",
    [
        (Cancelled("Diff computation exceeded 60 seconds"), 408),
        (DiffFailed("git diff failed"), 500),
    ],
)
def test_diff_error_mapping(use_engine, error, status_code):
    use_engine(FailingEngine(error))

    response = client.get("/api/diff")

    assert response.status_code == status_code


def test_file_diff(git_repo, use_engine):
    (Path(git_repo.working_tree_dir) / "README.md").write_text("# Test Repo\nMore\n")
    use_engine(create_diff_engine(repo_path=git_repo.working_tree_dir))

    response = client.get("/api/file-diff", params={"path": "README.md", "mode": "working"})

    assert response.status_code == 200
    data = response.json()
    assert data["path"] == "README.md"
    assert data["additions"] == 1
    assert data["deletions"] == 0
    assert data["old_file"] == {"name": "README.md", "contents": "# Test Repo\n"}
    assert data["new_file"] == {"name": "README.md", "contents": "# Test Repo\nMore\n"}


def test_file_diff_unchanged_file(git_repo, use_engine):
    use_engine(create_diff_engine(repo_path=git_repo.working_tree_dir))

    response = client.get("/api/file-diff", params={"path": "README.md", "mode": "working"})

    assert response.status_code == 404


def test_file_diff_requires_path(git_repo, use_engine):
    use_engine(create_diff_engine(repo_path=git_repo.working_tree_dir))

    response = client.get("/api/file-diff")

    assert response.status_code == 422


def test_status(git_repo, use_engine):
    git_repo.create_remote("origin", "git@github.com:example/project.git")
    (Path(git_repo.working_tree_dir) / "README.md").write_text("# Staged\n")
    git_repo.index.add(["README.md"])
    use_engine(create_diff_engine(repo_path=git_repo.working_tree_dir))

    response = client.get("/api/status")

    assert response.status_code == 200
    data = response.json()
    assert data["branch"] == "main"
    assert data["default_branch"] == "main"
    assert data["remote_url"] == "git@github.com:example/project.git"
    assert data["has_uncommitted_changes"] is True
    assert data["has_staged_changes"] is True
