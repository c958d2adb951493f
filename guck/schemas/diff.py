from typing import List, Optional

from pydantic import BaseModel

from ..models import DiffMode, FileChange, FileContents


class DiffResponse(BaseModel):
    files: List[FileChange]
    branch: str
    commit: str
    repo_path: str
    remote_url: Optional[str] = None
    mode: DiffMode
    base_branch: str  # only relevant for branch mode


class FileDiffResponse(FileChange):
    old_file: Optional[FileContents] = None
    new_file: Optional[FileContents] = None


class StatusResponse(BaseModel):
    repo_path: str
    branch: str
    commit: str
    remote_url: Optional[str] = None
    default_branch: str
    has_uncommitted_changes: bool
    has_staged_changes: bool
