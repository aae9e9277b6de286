from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ccatlas.discover import encode_project_dir_name


def write_log(path: Path, lines: list[Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    rendered = [line if isinstance(line, str) else json.dumps(line) for line in lines]
    path.write_text("\n".join(rendered) + "\n", encoding="utf-8")
    return path


def make_project(root: Path) -> tuple[Path, Path, Path]:
    """Create (project_dir, store_root, project_log_dir) under root."""
    project_dir = root / "work" / "demo-project"
    project_dir.mkdir(parents=True)
    store_root = root / "claude" / "projects"
    log_dir = store_root / encode_project_dir_name(project_dir.resolve())
    return project_dir, store_root, log_dir


def user_line(content: Any, **extra: Any) -> dict[str, Any]:
    record = {"type": "user", "message": {"role": "user", "content": content}}
    record.update(extra)
    return record


def assistant_line(content: Any, model: str | None = None, **extra: Any) -> dict[str, Any]:
    message: dict[str, Any] = {"role": "assistant", "content": content}
    if model is not None:
        message["model"] = model
    record = {"type": "assistant", "message": message}
    record.update(extra)
    return record


SCENARIO_A = [
    {
        "type": "user",
        "message": {"role": "user", "content": "Hi"},
        "sessionId": "s1",
        "cwd": "/p",
        "timestamp": "2024-01-01T00:00:00Z",
    },
    {
        "type": "assistant",
        "message": {"role": "assistant", "content": "## Hello", "model": "m1"},
        "sessionId": "s1",
        "cwd": "/p",
        "timestamp": "2024-01-01T00:00:05Z",
    },
]
