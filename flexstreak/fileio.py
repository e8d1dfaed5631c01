"""Workspace file access: tolerant reads, atomic replaces, locked updates.

Writers replace files via a temp file in the same directory followed by
os.replace, so readers see either the old or the new document. Read-modify-
write cycles on the same document are serialised with an exclusive flock on
a sibling ``.lock`` file.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def read_json(path: Path) -> dict[str, Any]:
    """JSON object at path. Missing, blank or non-object documents read as {}.

    A corrupt document is logged and the decode error re-raised.
    """
    text = read_text(path)
    if not text.strip():
        return {}
    try:
        doc = json.loads(text)
    except json.JSONDecodeError:
        logger.error("Corrupt JSON document: %s", path)
        raise
    return doc if isinstance(doc, dict) else {}


def read_yaml(path: Path) -> dict[str, Any]:
    text = read_text(path)
    if not text.strip():
        return {}
    doc = yaml.safe_load(text)
    return doc if isinstance(doc, dict) else {}


def _replace(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=path.suffix)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


def _dump_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, sort_keys=True) + "\n"


def write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    _replace(path, _dump_json(data))


def write_yaml_atomic(path: Path, data: dict[str, Any]) -> None:
    _replace(path, yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False))


@contextmanager
def locked(path: Path) -> Iterator[None]:
    """Hold an exclusive lock for the document at path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lock_path = path.with_name(f".{path.name}.lock")
    with open(lock_path, "a", encoding="utf-8") as lock:
        fcntl.flock(lock.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock.fileno(), fcntl.LOCK_UN)


def update_json(path: Path, mutate: Callable[[dict[str, Any]], Any]) -> Any:
    """Read, mutate in place and write back the JSON document under lock.

    Returns whatever mutate returns.
    """
    with locked(path):
        data = read_json(path)
        result = mutate(data)
        write_json_atomic(path, data)
    return result
