"""Lifecycle hooks: hand tracker events to external commands.

Configured via tracker/hooks.yaml, one list of commands per hook point:

    on_celebration:
      - notify-send "Nice work"
      - command: ./push.sh
        timeout: 10

Each command receives the event as JSON on stdin. Delivering notifications
is left entirely to those commands.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from flexstreak.fileio import read_yaml
from flexstreak.models import CelebrationMoment, CompletionRecord, SuccessEvaluation
from flexstreak.workspace import hooks_config_path, workspace_root

logger = logging.getLogger(__name__)

ON_COMPLETION_RECORDED = "on_completion_recorded"
ON_CELEBRATION = "on_celebration"
VALID_HOOK_POINTS = {ON_COMPLETION_RECORDED, ON_CELEBRATION}

DEFAULT_TIMEOUT = 30
OUTPUT_CAP = 4096


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    return read_yaml(hooks_config_path(root))


def _commands(config: dict[str, Any], hook_point: str) -> list[tuple[str, float]]:
    """(command, timeout) pairs registered for hook_point; blank entries dropped."""
    entries = config.get(hook_point) or []
    if not isinstance(entries, list):
        logger.warning("hooks.yaml: %s must be a list", hook_point)
        return []
    commands = []
    for entry in entries:
        if isinstance(entry, dict):
            command, timeout = str(entry.get("command") or ""), entry.get("timeout", DEFAULT_TIMEOUT)
        else:
            command, timeout = str(entry or ""), DEFAULT_TIMEOUT
        if command.strip():
            commands.append((command, timeout))
    return commands


def _run_one(command: str, timeout: float, payload: str, cwd: Path) -> dict[str, Any]:
    try:
        proc = subprocess.run(
            command,
            shell=True,
            input=payload,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=str(cwd),
        )
    except subprocess.TimeoutExpired:
        logger.warning("Hook %r timed out after %ss", command, timeout)
        return {"exit_code": -1, "error": f"Hook timed out after {timeout}s"}
    except OSError as e:
        logger.warning("Hook %r failed to start: %s", command, e)
        return {"exit_code": -1, "error": str(e)}

    if proc.returncode != 0:
        logger.warning("Hook %r exited with %d", command, proc.returncode)
    return {
        "exit_code": proc.returncode,
        "stdout": proc.stdout[:OUTPUT_CAP],
        "stderr": proc.stderr[:OUTPUT_CAP],
    }


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Run every command registered for hook_point.

    Returns one result per command with exit_code and captured output;
    failures and timeouts are reported in the result, not raised.
    """
    if hook_point not in VALID_HOOK_POINTS:
        logger.warning("Unknown hook point: %s", hook_point)
        return []
    if root is None:
        root = workspace_root()

    commands = _commands(load_hooks_config(root), hook_point)
    if not commands:
        return []

    payload = json.dumps({"event": hook_point, **context}, ensure_ascii=False, default=str)
    return [
        {"command": command, "hook_point": hook_point, **_run_one(command, timeout, payload, root)}
        for command, timeout in commands
    ]


def emit_completion_events(
    trackable_id: str,
    record: CompletionRecord,
    evaluation: SuccessEvaluation,
    moment: CelebrationMoment | None = None,
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Fire on_completion_recorded, then on_celebration when there is a moment."""
    results = run_hooks(ON_COMPLETION_RECORDED, {
        "trackableId": trackable_id,
        "completion": record.to_dict(),
        "evaluation": evaluation.to_dict(),
    }, root)
    if moment is not None:
        results += run_hooks(ON_CELEBRATION, moment.to_dict(), root)
    return results
