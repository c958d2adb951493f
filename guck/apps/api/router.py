import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from guck.dependencies import get_diff_engine
from guck.exceptions import (
    BranchNotFound,
    Cancelled,
    DiffFailed,
    GuckError,
    NoCommits,
    NotARepository,
)
from guck.protocols.diff_engine_protocol import DiffEngineProtocol
from guck.schemas import DiffResponse, FileDiffResponse, StatusResponse

router = APIRouter(tags=["diff"])


async def _to_http_error(
    error: GuckError, engine: DiffEngineProtocol, base_branch: Optional[str]
) -> HTTPException:
    """Translate an engine error into the HTTP status the UI expects."""
    if isinstance(error, BranchNotFound):
        detected = await asyncio.to_thread(engine.get_default_branch)
        return HTTPException(
            status_code=404,
            detail=(
                f"Base branch '{base_branch or engine.base_branch}' not found. "
                f"This repository's default branch appears to be '{detected}'. "
                f"Please configure guck with: GUCK_BASE_BRANCH={detected}"
            ),
        )
    if isinstance(error, NotARepository):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, NoCommits):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, Cancelled):
        return HTTPException(status_code=408, detail=str(error))
    if isinstance(error, DiffFailed):
        return HTTPException(status_code=500, detail=f"Diff failed: {error}")
    return HTTPException(status_code=500, detail=str(error))


@router.get("/diff", response_model=DiffResponse)
async def get_diff(
    mode: Optional[str] = None,
    base_branch: Optional[str] = None,
    engine: DiffEngineProtocol = Depends(get_diff_engine),
):
    """Changed files of the repository for the requested comparison mode."""
    try:
        result = await asyncio.to_thread(engine.get_diff, mode, base_branch)
    except GuckError as e:
        raise await _to_http_error(e, engine, base_branch)

    return DiffResponse(
        files=result.files,
        branch=result.branch,
        commit=result.commit,
        repo_path=result.repo_path,
        remote_url=result.remote_url or None,
        mode=result.mode,
        base_branch=result.base_branch,
    )


@router.get("/file-diff", response_model=FileDiffResponse)
async def get_file_diff(
    path: str = Query(..., min_length=1),
    mode: Optional[str] = None,
    base_branch: Optional[str] = None,
    engine: DiffEngineProtocol = Depends(get_diff_engine),
):
    """A single changed file with the contents of both sides."""
    try:
        result = await asyncio.to_thread(engine.get_file_diff, path, mode, base_branch)
    except GuckError as e:
        raise await _to_http_error(e, engine, base_branch)

    if result is None:
        raise HTTPException(status_code=404, detail=f"No changes in {path}")

    return FileDiffResponse(
        **result.change.model_dump(),
        old_file=result.old_file,
        new_file=result.new_file,
    )


@router.get("/status", response_model=StatusResponse)
async def get_status(engine: DiffEngineProtocol = Depends(get_diff_engine)):
    """Branch, commit and pending-change flags of the repository."""
    try:
        status = await asyncio.to_thread(engine.get_status)
    except GuckError as e:
        raise await _to_http_error(e, engine, None)

    status["remote_url"] = status["remote_url"] or None
    return StatusResponse(**status)
