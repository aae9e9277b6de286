from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .config import configure_logging
from .errors import ExportIOError, NotFoundError
from .models import (
    BlockContent,
    LogRecord,
    MessageContent,
    ParsedMessage,
    PlainContent,
    SessionMetadata,
    TextBlock,
    ToolSummary,
    ToolUseBlock,
)
from .utils import iter_records, shift_headings

logger = configure_logging()

FILE_INPUT_KEYS = ("file_path", "path")


def extract_text(content: MessageContent) -> str:
    if isinstance(content, PlainContent):
        return content.text
    texts = (block.text for block in content.blocks if isinstance(block, TextBlock))
    return "\n\n".join(text for text in texts if text)


def extract_tool_summaries(content: MessageContent) -> list[ToolSummary]:
    if not isinstance(content, BlockContent):
        return []
    summaries: list[ToolSummary] = []
    for block in content.blocks:
        if not isinstance(block, ToolUseBlock):
            continue
        files = [block.input[key] for key in FILE_INPUT_KEYS if isinstance(block.input.get(key), str)]
        summaries.append(ToolSummary(name=block.name, files=files))
    return summaries


@dataclass
class _TranscriptBuilder:
    messages: list[ParsedMessage] = field(default_factory=list)
    session_id: str | None = None
    cwd: str | None = None
    git_branch: str | None = None
    models: list[str] = field(default_factory=list)
    first_timestamp: str | None = None
    last_timestamp: str | None = None

    def feed(self, record: LogRecord) -> None:
        if not record.is_conversational:
            return

        if self.session_id is None and record.session_id:
            self.session_id = record.session_id
        if self.cwd is None and record.cwd:
            self.cwd = record.cwd
        if self.git_branch is None and record.git_branch:
            self.git_branch = record.git_branch

        if record.timestamp:
            if self.first_timestamp is None:
                self.first_timestamp = record.timestamp
            self.last_timestamp = record.timestamp

        message = record.message
        if message is None:
            return

        text = extract_text(message.content)
        tools = extract_tool_summaries(message.content) if record.kind == "assistant" else []

        if message.model and message.model not in self.models:
            self.models.append(message.model)

        # Tool-only turns have no text of their own and are dropped with their tools.
        if not text:
            return

        self.messages.append(
            ParsedMessage(
                role=message.role,
                text=shift_headings(text),
                model=message.model,
                timestamp=record.timestamp or "",
                tools=tools,
            )
        )

    def finish(self) -> tuple[list[ParsedMessage], SessionMetadata]:
        metadata = SessionMetadata(
            session_id=self.session_id or "",
            cwd=self.cwd or "",
            git_branch=self.git_branch,
            message_count=len(self.messages),
            models=list(self.models),
            date_range=(self.first_timestamp or "", self.last_timestamp or ""),
        )
        return self.messages, metadata


def parse_lines(lines: Iterable[str]) -> tuple[list[ParsedMessage], SessionMetadata]:
    builder = _TranscriptBuilder()
    for record in iter_records(lines):
        builder.feed(record)
    return builder.finish()


def parse_transcript(path: Path) -> tuple[list[ParsedMessage], SessionMetadata]:
    """Stream one session log into its rendered messages and session metadata.

    Lines that fail to decode, non-conversational records and meta records are
    skipped without being reported.
    """
    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            return parse_lines(handle)
    except FileNotFoundError as exc:
        raise NotFoundError(f"session log not found: {path}") from exc
    except OSError as exc:
        logger.warning("failed to read %s: %s", path, exc)
        raise ExportIOError(f"failed to read {path}: {exc}") from exc
