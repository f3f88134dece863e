"""JSON file helpers for the suggester CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def read_json(path: str | Path) -> dict[str, Any]:
    """Read a JSON object from ``path``.

    Malformed JSON and non-object roots raise ``ValueError``; a missing file
    raises ``FileNotFoundError``.
    """
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc.msg} (line {exc.lineno})") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"JSON root must be an object: {path}")
    return payload


def resolve_input_path(request_file: str | Path, value: str) -> Path:
    """Resolve a path referenced by a request file, relative to that file."""
    path = Path(value)
    if path.is_absolute():
        return path
    return (Path(request_file).parent / path).resolve()


def dump_json(payload: dict[str, Any] | list[Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)


def write_json(path: str | Path, payload: dict[str, Any] | list[Any]) -> None:
    Path(path).write_text(dump_json(payload) + "\n", encoding="utf-8")
