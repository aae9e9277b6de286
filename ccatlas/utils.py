from __future__ import annotations

import json
from pathlib import PurePosixPath
from typing import Any, Iterable, Iterator

from .models import (
    BlockContent,
    ContentBlock,
    LogRecord,
    MessageContent,
    OtherBlock,
    PlainContent,
    RecordMessage,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
)

_CONVERSATIONAL_KINDS = ("user", "assistant")


def safe_json_loads(line: str) -> tuple[Any | None, str | None]:
    try:
        return json.loads(line), None
    except json.JSONDecodeError as exc:
        return None, str(exc)


def _optional_text(record: dict[str, Any], key: str) -> tuple[str | None, bool]:
    """Return (value, ok); ok is False when the key holds a non-string."""
    value = record.get(key)
    if value is None or isinstance(value, str):
        return value, True
    return None, False


def _decode_block(block: Any) -> ContentBlock | None:
    if not isinstance(block, dict):
        return None
    block_type = block.get("type")
    if block_type == "text":
        text = block.get("text")
        if isinstance(text, str):
            return TextBlock(text=text)
        return OtherBlock(block_type=block_type)
    if block_type == "tool_use":
        name = block.get("name")
        tool_input = block.get("input")
        return ToolUseBlock(
            name=name if isinstance(name, str) else "unknown",
            input=tool_input if isinstance(tool_input, dict) else {},
        )
    if block_type == "tool_result":
        return ToolResultBlock()
    return OtherBlock(block_type=block_type if isinstance(block_type, str) else None)


def decode_content(content: Any) -> MessageContent:
    if isinstance(content, str):
        return PlainContent(text=content)
    if isinstance(content, list):
        blocks = [_decode_block(item) for item in content]
        return BlockContent(blocks=tuple(block for block in blocks if block is not None))
    return BlockContent()


def _decode_message(message: Any) -> tuple[RecordMessage | None, bool]:
    if message is None:
        return None, True
    if not isinstance(message, dict):
        return None, False
    role = message.get("role")
    if not isinstance(role, str) or "content" not in message:
        return None, False
    model, ok = _optional_text(message, "model")
    if not ok:
        return None, False
    return RecordMessage(role=role, content=decode_content(message["content"]), model=model), True


def decode_record(line: str) -> LogRecord | None:
    """Decode one log line, or return None when it does not fit the record shape."""
    raw, error = safe_json_loads(line)
    if error or not isinstance(raw, dict):
        return None
    record_type = raw.get("type")
    if not isinstance(record_type, str):
        return None

    fields: dict[str, str | None] = {}
    for key in ("timestamp", "cwd", "gitBranch", "sessionId"):
        value, ok = _optional_text(raw, key)
        if not ok:
            return None
        fields[key] = value

    is_meta = raw.get("isMeta")
    if is_meta is not None and not isinstance(is_meta, bool):
        return None

    message, ok = _decode_message(raw.get("message"))
    if not ok:
        return None

    return LogRecord(
        kind=record_type if record_type in _CONVERSATIONAL_KINDS else "other",
        message=message,
        is_meta=bool(is_meta),
        timestamp=fields["timestamp"],
        cwd=fields["cwd"],
        git_branch=fields["gitBranch"],
        session_id=fields["sessionId"],
    )


def iter_records(lines: Iterable[str]) -> Iterator[LogRecord]:
    for line in lines:
        record = decode_record(line)
        if record is not None:
            yield record


def shift_headings(text: str) -> str:
    lines = text.split("\n")
    return "\n".join("#" + line if line.startswith("#") else line for line in lines)


def date_part(timestamp: str | None) -> str:
    if not timestamp:
        return "unknown"
    return timestamp.split("T", 1)[0]


def time_part(timestamp: str) -> str:
    if "T" not in timestamp:
        return timestamp
    return timestamp.split("T", 1)[1].split(".", 1)[0]


def file_name(path: str) -> str:
    return PurePosixPath(path).name or path
