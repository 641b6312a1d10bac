"""FastAPI routes for running and inspecting analyses."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from find_unused.config import ConfigError, load_config
from find_unused.models import ReachabilityPolicy
from find_unused.pipeline import UnusedFilesError, run_analysis_async
from find_unused.web.state import AnalysisSession, state

router = APIRouter(prefix="/api")


# --- Request models ---

class AnalyzeRequest(BaseModel):
    path: str
    include: list[str] | None = None
    exclude: list[str] | None = None
    alias: dict[str, str] | None = None
    entries: list[str] | None = None
    policy: ReachabilityPolicy | None = None
    fail_on_unused: bool = False
    concurrency: int | None = Field(default=None, ge=1)


def _validate_root(p: str) -> Path:
    resolved = Path(p).expanduser().resolve()
    if not resolved.exists():
        raise HTTPException(404, f"Path not found: {resolved}")
    if not resolved.is_dir():
        raise HTTPException(400, f"Not a directory: {resolved}")
    return resolved


def _session_payload(session: AnalysisSession) -> dict:
    payload = session.result.to_dict()
    payload["id"] = session.id
    payload["failed"] = session.failed
    payload["timestamp"] = session.timestamp
    return payload


def _get_session(analysis_id: str) -> AnalysisSession:
    session = state.get(analysis_id)
    if session is None:
        raise HTTPException(404, "Analysis not found")
    return session


# --- Endpoints ---

@router.post("/analyze")
async def analyze(req: AnalyzeRequest):
    """Run a report-only analysis; the API never deletes files."""
    root = _validate_root(req.path)
    try:
        config = load_config(
            root,
            include=req.include,
            exclude=req.exclude,
            alias=req.alias,
            entries=req.entries,
            policy=req.policy,
            concurrency=req.concurrency,
            fail_on_unused=req.fail_on_unused or None,
            dry_run=True,
        )
    except ConfigError as e:
        raise HTTPException(422, str(e))

    failed = False
    try:
        result = await run_analysis_async(config)
    except UnusedFilesError as e:
        result = e.result
        failed = True

    session = AnalysisSession(result=result, failed=failed)
    state.add(session)
    return _session_payload(session)


@router.get("/analysis/{analysis_id}")
async def get_analysis(analysis_id: str):
    return _session_payload(_get_session(analysis_id))


@router.get("/analysis/{analysis_id}/unresolved")
async def get_unresolved(analysis_id: str):
    session = _get_session(analysis_id)
    return {
        "id": analysis_id,
        "unresolved": session.result.to_dict()["unresolved"],
    }


@router.delete("/analysis/{analysis_id}")
async def delete_analysis(analysis_id: str):
    if not state.delete(analysis_id):
        raise HTTPException(404, "Analysis not found")
    return {"deleted": analysis_id}
