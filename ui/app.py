from __future__ import annotations

import logging
import os
import secrets
from datetime import date
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from flexstreak import (
    check_celebration,
    evaluate,
    evaluate_task_success,
    trackable_stats,
)
from flexstreak.hooks import emit_completion_events
from flexstreak.log import setup_logger
from flexstreak.models import TrackableDefinition, parse_date
from flexstreak.store import (
    create_trackable,
    delete_completions,
    delete_trackable,
    find_trackable,
    load_completions,
    load_trackables,
    record_completion,
    save_trackables,
    update_trackable,
)
from flexstreak.workspace import today_local, workspace_root

setup_logger()
logger = logging.getLogger(__name__)

app = FastAPI(title="flexstreak", version="0.1.0")


# ── Auth ──────────────────────────────────────────────────────

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("FLEXSTREAK_USERNAME", "")
    expected_password = os.environ.get("FLEXSTREAK_PASSWORD", "")

    # No credentials configured: open access
    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Helpers ───────────────────────────────────────────────────


def _get_trackable_or_404(trackable_id: str) -> TrackableDefinition:
    trackable = find_trackable(load_trackables(workspace_root()), trackable_id)
    if trackable is None:
        raise HTTPException(status_code=404, detail=f"Trackable not found: {trackable_id}")
    return trackable


def _parse_day(value: Any) -> date:
    if value is None:
        return today_local(workspace_root())
    day = parse_date(value)
    if day is None:
        raise HTTPException(status_code=400, detail=f"Invalid date: {value}")
    return day


def _parse_count(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise HTTPException(status_code=400, detail=f"{field} must be a non-negative integer")
    return value


# ── Endpoints ─────────────────────────────────────────────────


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/api/trackables")
def api_list_trackables(username: str = Depends(get_current_user)) -> dict[str, Any]:
    trackables = load_trackables(workspace_root())
    return {"trackables": [t.to_dict() for t in trackables], "count": len(trackables)}


@app.post("/api/trackables")
def api_create_trackable(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = workspace_root()
    trackables = load_trackables(root)
    trackable, errors = create_trackable(trackables, payload)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    save_trackables(trackables, root)
    logger.info("Created trackable %s", trackable.id)
    return {"ok": True, "trackable": trackable.to_dict()}


@app.put("/api/trackables/{trackable_id}")
def api_update_trackable(trackable_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = workspace_root()
    trackables = load_trackables(root)
    if find_trackable(trackables, trackable_id) is None:
        raise HTTPException(status_code=404, detail=f"Trackable not found: {trackable_id}")
    updated, errors = update_trackable(trackables, trackable_id, payload)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    save_trackables(trackables, root)
    return {"ok": True, "trackable": updated.to_dict()}


@app.delete("/api/trackables/{trackable_id}")
def api_delete_trackable(trackable_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = workspace_root()
    trackables = load_trackables(root)
    if not delete_trackable(trackables, trackable_id):
        raise HTTPException(status_code=404, detail=f"Trackable not found: {trackable_id}")
    save_trackables(trackables, root)
    removed = delete_completions(trackable_id, root)
    logger.info("Deleted trackable %s and %d completion(s)", trackable_id, removed)
    return {"ok": True, "trackable_id": trackable_id, "completions_removed": removed}


@app.get("/api/trackables/{trackable_id}/completions")
def api_list_completions(trackable_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    _get_trackable_or_404(trackable_id)
    records = load_completions(trackable_id, workspace_root())
    return {"count": len(records), "completions": [r.to_dict() for r in records]}


@app.post("/api/trackables/{trackable_id}/completions")
def api_record_completion(trackable_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Record today's (or a given date's) count and check for a celebration."""
    root = workspace_root()
    trackable = _get_trackable_or_404(trackable_id)
    day = _parse_day(payload.get("date"))
    count = _parse_count(payload.get("actualCount", payload.get("count", 1)), "actualCount")
    notes = str(payload.get("notes", "") or "")

    history = load_completions(trackable_id, root)
    evaluation, decision, moment = check_celebration(trackable, history, count, today=day)
    record = record_completion(trackable_id, day, count, notes, root)

    emit_completion_events(trackable_id, record, evaluation, moment, root)

    return {
        "ok": True,
        "completion": record.to_dict(),
        "evaluation": evaluation.to_dict(),
        "celebration": decision.to_dict(),
        "moment": moment.to_dict() if moment else None,
    }


@app.get("/api/trackables/{trackable_id}/stats")
def api_trackable_stats(trackable_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = workspace_root()
    trackable = _get_trackable_or_404(trackable_id)
    records = load_completions(trackable_id, root)
    return trackable_stats(trackable, records, today=today_local(root))


@app.post("/api/evaluate")
def api_evaluate(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Stateless evaluation of one count against a target."""
    actual = _parse_count(payload.get("actualCount"), "actualCount")
    target = _parse_count(payload.get("targetCount"), "targetCount")
    return evaluate(actual, target, payload.get("successCriteria")).to_dict()


@app.post("/api/tasks/evaluate")
def api_evaluate_task(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    partial = payload.get("partialCompletion")
    if partial is not None and (isinstance(partial, bool) or not isinstance(partial, (int, float))):
        raise HTTPException(status_code=400, detail="partialCompletion must be numeric")
    return evaluate_task_success(bool(payload.get("isCompleted", False)), partial).to_dict()
