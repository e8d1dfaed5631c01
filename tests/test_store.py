"""Tests for flexstreak/store.py — trackable CRUD and completion records."""

import json
from datetime import date

from flexstreak.models import Cadence, FlexibleCriteria, TrackableDefinition
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
    validate_trackable,
)


def test_validate_trackable_valid():
    assert validate_trackable({"id": "t1", "name": "T", "targetCount": 3, "cadence": "weekly"}) == []


def test_validate_trackable_missing_fields():
    errors = validate_trackable({})
    assert any("id" in e for e in errors)
    assert any("name" in e for e in errors)


def test_validate_trackable_bad_values():
    errors = validate_trackable({"id": "t", "name": "T", "targetCount": 0, "cadence": "hourly", "startDate": "soon"})
    assert any("targetCount" in e for e in errors)
    assert any("cadence" in e for e in errors)
    assert any("startDate" in e for e in errors)


def test_validate_ignores_malformed_criteria():
    assert validate_trackable({"id": "t", "name": "T", "successCriteria": "{nope"}) == []


def test_load_trackables(workspace):
    trackables = load_trackables(workspace)
    assert [t.id for t in trackables] == ["meditate", "water", "long-run"]
    water = find_trackable(trackables, "water")
    assert water.success_criteria == FlexibleCriteria(allow_partial_streaks=True)
    long_run = find_trackable(trackables, "long-run")
    assert long_run.cadence is Cadence.WEEKLY
    assert long_run.success_criteria is None


def test_create_and_save(workspace):
    trackables = load_trackables(workspace)
    t, errors = create_trackable(trackables, {
        "id": "stretch", "name": "Stretch", "targetCount": 2, "startDate": "2026-02-01",
    })
    assert errors == []
    assert t.target_count == 2
    save_trackables(trackables, workspace)
    assert find_trackable(load_trackables(workspace), "stretch") is not None


def test_create_duplicate(workspace):
    trackables = load_trackables(workspace)
    _, errors = create_trackable(trackables, {"id": "meditate", "name": "Again"})
    assert any("already exists" in e for e in errors)


def test_update_trackable(workspace):
    trackables = load_trackables(workspace)
    updated, errors = update_trackable(trackables, "meditate", {"targetCount": 2, "id": "renamed"})
    assert errors == []
    assert updated.id == "meditate"
    assert updated.target_count == 2
    assert find_trackable(trackables, "meditate").target_count == 2


def test_update_trackable_invalid(workspace):
    trackables = load_trackables(workspace)
    updated, errors = update_trackable(trackables, "meditate", {"targetCount": -1})
    assert updated is None
    assert errors
    _, errors = update_trackable(trackables, "missing", {})
    assert any("not found" in e for e in errors)


def test_delete_trackable():
    trackables = [TrackableDefinition(id="a"), TrackableDefinition(id="b")]
    assert delete_trackable(trackables, "a") is True
    assert delete_trackable(trackables, "a") is False
    assert [t.id for t in trackables] == ["b"]


def test_load_completions_sorted(workspace):
    records = load_completions("water", workspace)
    assert [r.date for r in records] == [date(2026, 2, 10), date(2026, 2, 9), date(2026, 2, 8)]
    assert records[1].notes == "busy day"
    assert load_completions("unknown", workspace) == []


def test_record_completion_upserts(workspace):
    record_completion("water", date(2026, 2, 10), 9, root=workspace)
    records = load_completions("water", workspace)
    assert len(records) == 3
    assert records[0].actual_count == 9

    record_completion("new-habit", date(2026, 2, 11), 1, notes="first", root=workspace)
    assert load_completions("new-habit", workspace)[0].notes == "first"


def test_load_completions_skips_bad_rows(workspace):
    path = workspace / "tracker" / "completions.json"
    path.write_text(json.dumps({"x": {"not-a-date": 1, "2026-02-01": {"count": "many"}, "2026-02-02": 3}}))
    records = load_completions("x", workspace)
    assert len(records) == 1
    assert records[0].actual_count == 3


def test_delete_completions(workspace):
    assert delete_completions("meditate", workspace) == 4
    assert load_completions("meditate", workspace) == []
    assert delete_completions("meditate", workspace) == 0


def test_missing_files_read_empty(tmp_path):
    assert load_trackables(tmp_path) == []
    assert load_completions("anything", tmp_path) == []
