"""Tests for workspace paths, file I/O and logging setup."""

import json
import logging

import pytest

from flexstreak.fileio import read_json, read_yaml, update_json, write_json_atomic, write_yaml_atomic
from flexstreak.log import setup_logger
from flexstreak.workspace import (
    completions_path,
    get_user_timezone,
    today_local,
    trackables_path,
    workspace_root,
)


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()
    assert trackables_path() == workspace.resolve() / "tracker" / "trackables.yaml"
    assert completions_path(workspace).name == "completions.json"


def test_timezone_from_profile(workspace):
    (workspace / "tracker" / "profile.yaml").write_text("timezone: Europe/Berlin\n", encoding="utf-8")
    assert str(get_user_timezone(workspace)) == "Europe/Berlin"


def test_timezone_fallbacks(workspace):
    (workspace / "tracker" / "profile.yaml").write_text("timezone: Mars/Olympus\n", encoding="utf-8")
    assert str(get_user_timezone(workspace)) == "UTC"
    (workspace / "tracker" / "profile.yaml").write_text("timezone: [unclosed\n", encoding="utf-8")
    assert str(get_user_timezone(workspace)) == "UTC"
    assert today_local(workspace) is not None


def test_json_round_trip(tmp_path):
    path = tmp_path / "nested" / "data.json"
    write_json_atomic(path, {"b": 1, "a": {"2026-02-10": {"count": 3}}})
    assert read_json(path) == {"a": {"2026-02-10": {"count": 3}}, "b": 1}
    assert list(tmp_path.joinpath("nested").glob(".tmp_*")) == []


def test_read_json_missing_and_non_object(tmp_path):
    assert read_json(tmp_path / "missing.json") == {}
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert read_json(path) == {}


def test_read_json_corrupt_raises(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{oops", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        read_json(path)


def test_update_json_returns_mutator_result(tmp_path):
    path = tmp_path / "completions.json"
    write_json_atomic(path, {"water": {"2026-02-10": {"count": 3}}})

    def bump(data):
        data["water"]["2026-02-10"]["count"] += 1
        return data["water"]["2026-02-10"]["count"]

    assert update_json(path, bump) == 4
    assert read_json(path)["water"]["2026-02-10"]["count"] == 4
    assert (tmp_path / ".completions.json.lock").exists()


def test_yaml_round_trip(tmp_path):
    path = tmp_path / "t.yaml"
    write_yaml_atomic(path, {"trackables": [{"id": "run", "name": "Läufe"}]})
    assert read_yaml(path) == {"trackables": [{"id": "run", "name": "Läufe"}]}


def test_setup_logger_with_file(tmp_path):
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    saved_flag = getattr(root, "_flexstreak_configured", None)
    if saved_flag is not None:
        del root._flexstreak_configured
    try:
        log_file = tmp_path / "logs" / "flexstreak.log"
        logger = setup_logger(level="debug", log_file=str(log_file))
        assert logger.level == logging.DEBUG
        logging.getLogger("flexstreak.test").info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")

        # second call does not stack handlers
        count = len(logger.handlers)
        setup_logger()
        assert len(logger.handlers) == count
    finally:
        for handler in root.handlers:
            if handler not in saved_handlers:
                handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
        if saved_flag is None:
            root.__dict__.pop("_flexstreak_configured", None)
        else:
            root._flexstreak_configured = saved_flag
