from __future__ import annotations

from pathlib import Path

from .config import get_exports_dir

MARKDOWN_SUFFIX = ".md"


def export_filename(session_id: str, custom_name: str | None = None) -> str:
    base_name = custom_name or session_id
    if base_name.endswith(MARKDOWN_SUFFIX):
        return base_name
    return base_name + MARKDOWN_SUFFIX


def resolve_export_path(
    session_id: str,
    custom_name: str | None = None,
    base_dir: Path | None = None,
) -> Path:
    """Pick an output path for an export that does not exist yet.

    Existing files are never reused: ``name.md`` becomes ``name_1.md``,
    ``name_2.md`` and so on until a free name is found.
    """
    base_dir = (base_dir if base_dir is not None else get_exports_dir()).absolute()
    filename = export_filename(session_id, custom_name)
    path = base_dir / filename
    if not path.exists():
        return path

    stem = filename[: -len(MARKDOWN_SUFFIX)]
    counter = 1
    while True:
        path = base_dir / f"{stem}_{counter}{MARKDOWN_SUFFIX}"
        if not path.exists():
            return path
        counter += 1
