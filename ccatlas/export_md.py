from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config import configure_logging
from .discover import LogLocator
from .errors import ExportIOError, NotFoundError
from .models import ExportOutcome, ParsedMessage, SessionMetadata, ToolSummary
from .parser import parse_transcript
from .paths import resolve_export_path
from .utils import date_part, file_name, time_part

logger = configure_logging()

FOOTER = "*Exported by cc-atlas*"


@dataclass
class ExportOptions:
    include_tools: bool = True
    include_timestamps: bool = True
    # Accepted for compatibility; rendering does not consult it.
    include_thinking: bool = False
    max_tool_files: int = 5

    @classmethod
    def from_payload(cls, payload: Any) -> ExportOptions:
        """Build options from a request body, using defaults for anything ill-typed."""
        defaults = cls()
        if not isinstance(payload, dict):
            if payload is not None:
                logger.warning("export options payload is not an object; using defaults")
            return defaults

        def flag(key: str, default: bool) -> bool:
            value = payload.get(key)
            if isinstance(value, bool):
                return value
            if value is not None:
                logger.warning("export option %s is not a boolean; using %s", key, default)
            return default

        max_files = payload.get("max_tool_files")
        if isinstance(max_files, bool) or not isinstance(max_files, int) or max_files < 0:
            if max_files is not None:
                logger.warning("export option max_tool_files is invalid; using %s", defaults.max_tool_files)
            max_files = defaults.max_tool_files

        return cls(
            include_tools=flag("include_tools", defaults.include_tools),
            include_timestamps=flag("include_timestamps", defaults.include_timestamps),
            include_thinking=flag("include_thinking", defaults.include_thinking),
            max_tool_files=max_files,
        )


def _format_header(metadata: SessionMetadata) -> list[str]:
    lines = [
        "# Chat Transcript",
        "",
        f"**Session:** {metadata.session_id}",
        f"**Project:** {metadata.cwd}",
    ]
    if metadata.git_branch:
        lines.append(f"**Branch:** {metadata.git_branch}")
    lines.append(f"**Date:** {date_part(metadata.date_range[0])}")
    lines.append(f"**Messages:** {metadata.message_count}")
    if metadata.models:
        lines.append(f"**Models:** {', '.join(metadata.models)}")
    return lines


def format_tools(tools: list[ToolSummary], max_files: int) -> str:
    parts: list[str] = []
    for tool in tools:
        if not tool.files:
            parts.append(tool.name)
            continue
        files = ", ".join(file_name(path) for path in tool.files[: max(max_files, 0)])
        parts.append(f"{tool.name}({files})")
    return ", ".join(parts)


def _role_heading(message: ParsedMessage) -> str:
    if message.role == "user":
        return "User"
    if message.model:
        return f"Assistant ({message.model})"
    return "Assistant"


def _format_message(message: ParsedMessage, options: ExportOptions) -> str:
    lines = [f"## {_role_heading(message)}"]
    if options.include_timestamps:
        lines.append(f"*{time_part(message.timestamp)}*")
    if options.include_tools and message.tools:
        lines.append(f"*Tools: {format_tools(message.tools, options.max_tool_files)}*")
    lines.append("")
    lines.append(message.text)
    return "\n".join(lines)


def render_markdown(
    messages: list[ParsedMessage],
    metadata: SessionMetadata,
    options: ExportOptions,
) -> str:
    parts = ["\n".join(_format_header(metadata)), "\n\n---\n\n"]
    for message in messages:
        parts.append(_format_message(message, options))
        parts.append("\n\n")
    parts.append(f"---\n\n{FOOTER}\n")
    return "".join(parts)


def write_export(content: str, out_path: Path) -> int:
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise NotFoundError(f"cannot create export directory {out_path.parent}: {exc}") from exc
    try:
        out_path.write_text(content, encoding="utf-8")
        return out_path.stat().st_size
    except OSError as exc:
        raise ExportIOError(f"failed to write {out_path}: {exc}") from exc


def export_chat(
    session_id: str,
    project_root: Path | str,
    options: ExportOptions | None = None,
    custom_name: str | None = None,
    *,
    locator: LogLocator | None = None,
    exports_dir: Path | None = None,
) -> ExportOutcome:
    """Render one session of a project to markdown and write it to a fresh file."""
    options = options or ExportOptions()
    locator = locator or LogLocator()
    chat = locator.find_chat(session_id, project_root)

    messages, metadata = parse_transcript(chat.file_path)
    content = render_markdown(messages, metadata, options)

    out_path = resolve_export_path(session_id, custom_name, exports_dir)
    size = write_export(content, out_path)
    logger.info("exported %s (%d messages) to %s", session_id, len(messages), out_path)

    return ExportOutcome(
        output_path=out_path,
        message_count=len(messages),
        export_size=size,
        title=metadata.session_id or session_id,
    )
