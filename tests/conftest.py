"""Shared test fixtures for flexstreak tests."""

from __future__ import annotations

import json
import os
from datetime import date, timedelta
from pathlib import Path

import pytest
import yaml

TODAY = date(2026, 2, 11)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with a profile, trackables and completions."""
    root = tmp_path / "workspace"
    (root / "tracker").mkdir(parents=True)

    (root / "tracker" / "profile.yaml").write_text(
        yaml.dump({"timezone": "UTC"}, default_flow_style=False), encoding="utf-8"
    )

    trackables = {
        "trackables": [
            {
                "id": "meditate",
                "name": "Meditate",
                "targetCount": 1,
                "cadence": "daily",
                "startDate": "2026-02-01",
            },
            {
                "id": "water",
                "name": "Drink water",
                "targetCount": 8,
                "cadence": "daily",
                "startDate": "2026-02-01",
                "successCriteria": {"criteria": "flexible", "allowPartialStreaks": True},
            },
            {
                "id": "long-run",
                "name": "Long run",
                "targetCount": 1,
                "cadence": "weekly",
                "startDate": "2026-01-28",
                "successCriteria": "{not valid json",
            },
        ]
    }
    (root / "tracker" / "trackables.yaml").write_text(
        yaml.dump(trackables, default_flow_style=False, sort_keys=False), encoding="utf-8"
    )

    # Meditate: every day Feb 7-10, water: 8, 6, 3 on Feb 8-10
    completions = {
        "meditate": {
            (TODAY - timedelta(days=d)).isoformat(): {"count": 1, "notes": ""}
            for d in range(1, 5)
        },
        "water": {
            "2026-02-08": {"count": 8, "notes": ""},
            "2026-02-09": {"count": 6, "notes": "busy day"},
            "2026-02-10": {"count": 3, "notes": ""},
        },
    }
    (root / "tracker" / "completions.json").write_text(
        json.dumps(completions, indent=2), encoding="utf-8"
    )

    os.environ["FLEXSTREAK_ROOT"] = str(root)
    yield root
    if "FLEXSTREAK_ROOT" in os.environ:
        del os.environ["FLEXSTREAK_ROOT"]
