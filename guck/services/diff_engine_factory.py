"""Factory for creating DiffEngine instances."""

from typing import Optional

from ..config.settings import Settings
from ..protocols.diff_engine_protocol import DiffEngineProtocol
from .diff_engine import DiffEngine


def create_diff_engine(
    repo_path: str = ".",
    base_branch: str = "main",
    mode: str = "branch",
    timeout: Optional[float] = None,
) -> DiffEngineProtocol:
    """
    Create a DiffEngine instance.

    Args:
        repo_path: Any path inside the repository to review
        base_branch: Branch to compare against in branch mode
        mode: Default comparison mode (branch, working or staged)
        timeout: Seconds a single diff computation may take, None for no limit

    Returns:
        DiffEngineProtocol implementation
    """
    return DiffEngine(
        repo_path=repo_path, base_branch=base_branch, mode=mode, timeout=timeout
    )


def create_diff_engine_from_settings(settings: Settings) -> DiffEngineProtocol:
    """
    Create a DiffEngine instance using application settings.

    Args:
        settings: Application settings

    Returns:
        DiffEngineProtocol implementation
    """
    return create_diff_engine(
        repo_path=settings.REPO_PATH,
        base_branch=settings.BASE_BRANCH,
        mode=settings.DIFF_MODE,
        timeout=float(settings.DIFF_TIMEOUT) if settings.DIFF_TIMEOUT > 0 else None,
    )
