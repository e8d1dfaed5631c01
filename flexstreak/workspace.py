"""Workspace root, timezone and path helpers for flexstreak."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from flexstreak.fileio import read_yaml

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"


def workspace_root() -> Path:
    """Workspace root directory (contains tracker/)."""
    return Path(
        os.environ.get("FLEXSTREAK_ROOT", str(Path.home() / "flexstreak"))
    ).expanduser().resolve()


def _tracker_dir(root: Path | None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "tracker"


def profile_path(root: Path | None = None) -> Path:
    return _tracker_dir(root) / "profile.yaml"


def trackables_path(root: Path | None = None) -> Path:
    return _tracker_dir(root) / "trackables.yaml"


def completions_path(root: Path | None = None) -> Path:
    return _tracker_dir(root) / "completions.json"


def hooks_config_path(root: Path | None = None) -> Path:
    return _tracker_dir(root) / "hooks.yaml"


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """User's timezone from profile.yaml, defaulting to UTC."""
    try:
        profile = read_yaml(profile_path(root))
    except yaml.YAMLError:
        logger.warning("Unreadable profile.yaml, using %s", DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)
    name = profile.get("timezone") or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(str(name))
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r in profile.yaml, using %s", name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def now_local(root: Path | None = None) -> datetime:
    return datetime.now(get_user_timezone(root))


def today_local(root: Path | None = None) -> date:
    """Today's date in the user's timezone."""
    return now_local(root).date()
