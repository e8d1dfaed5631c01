"""Trackable definitions and completion records in the workspace.

Definitions live in tracker/trackables.yaml, completion counts in
tracker/completions.json keyed by trackable id then ISO date. One record
per (trackable, date): recording again for the same day replaces it.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any

from flexstreak.fileio import read_json, read_yaml, update_json, write_yaml_atomic
from flexstreak.models import Cadence, CompletionRecord, TrackableDefinition, parse_date
from flexstreak.workspace import completions_path, trackables_path

logger = logging.getLogger(__name__)


# ── Validation ────────────────────────────────────────────────


VALID_CADENCES = {c.value for c in Cadence}


def validate_trackable(data: dict[str, Any]) -> list[str]:
    """Validate a trackable payload and return a list of errors (empty if valid).

    successCriteria is not validated: malformed criteria are stored as given
    and evaluated as exact.
    """
    errors = []
    if not str(data.get("id", "")).strip():
        errors.append("Missing required field: id")
    if not str(data.get("name", "")).strip():
        errors.append("Missing required field: name")

    target = data.get("targetCount", 1)
    if isinstance(target, bool) or not isinstance(target, int) or target < 1:
        errors.append("targetCount must be a positive integer")

    cadence = data.get("cadence", "daily")
    if cadence not in VALID_CADENCES:
        errors.append(f"Invalid cadence: {cadence}")

    if "startDate" in data and parse_date(data["startDate"]) is None:
        errors.append(f"Invalid startDate: {data['startDate']}")

    return errors


# ── Definitions CRUD ──────────────────────────────────────────


def load_trackables(root: Path | None = None) -> list[TrackableDefinition]:
    data = read_yaml(trackables_path(root))
    return [TrackableDefinition.from_dict(t) for t in (data.get("trackables") or []) if isinstance(t, dict)]


def save_trackables(trackables: list[TrackableDefinition], root: Path | None = None) -> None:
    write_yaml_atomic(trackables_path(root), {"trackables": [t.to_dict() for t in trackables]})


def find_trackable(trackables: list[TrackableDefinition], trackable_id: str) -> TrackableDefinition | None:
    for t in trackables:
        if t.id == trackable_id:
            return t
    return None


def create_trackable(
    trackables: list[TrackableDefinition], data: dict[str, Any]
) -> tuple[TrackableDefinition | None, list[str]]:
    """Create and add a new trackable. Returns (trackable, errors)."""
    errors = validate_trackable(data)
    if errors:
        return None, errors
    if find_trackable(trackables, str(data["id"])):
        return None, [f"Trackable ID already exists: {data['id']}"]

    trackable = TrackableDefinition.from_dict(data)
    trackables.append(trackable)
    return trackable, []


def update_trackable(
    trackables: list[TrackableDefinition], trackable_id: str, updates: dict[str, Any]
) -> tuple[TrackableDefinition | None, list[str]]:
    """Update a trackable by id. The id itself cannot change."""
    existing = find_trackable(trackables, trackable_id)
    if existing is None:
        return None, [f"Trackable not found: {trackable_id}"]

    merged = existing.to_dict()
    merged.update(updates)
    merged["id"] = trackable_id
    errors = validate_trackable(merged)
    if errors:
        return None, errors

    updated = TrackableDefinition.from_dict(merged)
    trackables[trackables.index(existing)] = updated
    return updated, []


def delete_trackable(trackables: list[TrackableDefinition], trackable_id: str) -> bool:
    existing = find_trackable(trackables, trackable_id)
    if existing is None:
        return False
    trackables.remove(existing)
    return True


# ── Completions ───────────────────────────────────────────────


def _parse_rows(trackable_id: str, rows: dict[str, Any]) -> list[CompletionRecord]:
    records = []
    for day_str, row in rows.items():
        day = parse_date(day_str)
        if day is None:
            logger.warning("Skipping completion with bad date %r for %s", day_str, trackable_id)
            continue
        if isinstance(row, dict):
            count, notes = row.get("count", 0), row.get("notes", "")
        else:
            count, notes = row, ""
        try:
            records.append(CompletionRecord(date=day, actual_count=int(count), notes=str(notes or "")))
        except (TypeError, ValueError):
            logger.warning("Skipping completion with bad count %r on %s for %s", count, day_str, trackable_id)
    return records


def load_completions(trackable_id: str, root: Path | None = None) -> list[CompletionRecord]:
    """All completion records for a trackable, most recent first."""
    data = read_json(completions_path(root))
    rows = data.get(trackable_id) or {}
    if not isinstance(rows, dict):
        return []
    return sorted(_parse_rows(trackable_id, rows), key=lambda r: r.date, reverse=True)


def record_completion(
    trackable_id: str,
    day: date,
    count: int,
    notes: str = "",
    root: Path | None = None,
) -> CompletionRecord:
    """Upsert the completion count for one trackable on one date."""

    def upsert(data: dict[str, Any]) -> None:
        rows = data.get(trackable_id)
        if not isinstance(rows, dict):
            rows = data[trackable_id] = {}
        rows[day.isoformat()] = {"count": count, "notes": notes}

    update_json(completions_path(root), upsert)
    logger.info("Recorded %s x%d on %s", trackable_id, count, day.isoformat())
    return CompletionRecord(date=day, actual_count=count, notes=notes)


def delete_completions(trackable_id: str, root: Path | None = None) -> int:
    """Drop every record for a trackable. Returns how many were removed."""
    path = completions_path(root)
    if trackable_id not in read_json(path):
        return 0

    def drop(data: dict[str, Any]) -> int:
        rows = data.pop(trackable_id, None)
        return len(rows) if isinstance(rows, dict) else 0

    return update_json(path, drop)
