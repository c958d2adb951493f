"""Errors raised by the diff engine."""


class GuckError(Exception):
    """Base class for all diff engine errors."""


class NotARepository(GuckError):
    """No git repository could be discovered from the given path."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Not a git repository: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class BranchNotFound(GuckError):
    """The base branch exists neither as origin/<branch> nor locally."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Failed to find branch {branch}")


class NoCommits(GuckError):
    """HEAD does not resolve to a commit yet."""

    def __init__(self, message: str = "Repository has no commits yet"):
        super().__init__(message)


class DiffFailed(GuckError):
    """Git could not produce the requested diff."""


class Cancelled(GuckError):
    """The caller's deadline expired or the request was cancelled."""
