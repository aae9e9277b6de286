from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class TextBlock:
    text: str


@dataclass(frozen=True)
class ToolUseBlock:
    name: str
    input: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResultBlock:
    pass


@dataclass(frozen=True)
class OtherBlock:
    block_type: str | None


ContentBlock = TextBlock | ToolUseBlock | ToolResultBlock | OtherBlock


@dataclass(frozen=True)
class PlainContent:
    text: str


@dataclass(frozen=True)
class BlockContent:
    blocks: tuple[ContentBlock, ...] = ()


MessageContent = PlainContent | BlockContent


@dataclass(frozen=True)
class RecordMessage:
    role: str
    content: MessageContent
    model: str | None = None


@dataclass(frozen=True)
class LogRecord:
    kind: str
    message: RecordMessage | None = None
    is_meta: bool = False
    timestamp: str | None = None
    cwd: str | None = None
    git_branch: str | None = None
    session_id: str | None = None

    @property
    def is_conversational(self) -> bool:
        return self.kind in ("user", "assistant") and not self.is_meta


@dataclass(frozen=True)
class ChatSummary:
    session_id: str
    file_path: Path
    title: str
    line_count: int
    last_modified: str
    file_size: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "file_path": str(self.file_path),
            "title": self.title,
            "line_count": self.line_count,
            "last_modified": self.last_modified,
            "file_size": self.file_size,
        }


@dataclass
class ToolSummary:
    name: str
    files: list[str] = field(default_factory=list)


@dataclass
class ParsedMessage:
    role: str
    text: str
    model: str | None
    timestamp: str
    tools: list[ToolSummary] = field(default_factory=list)


@dataclass
class SessionMetadata:
    session_id: str
    cwd: str
    git_branch: str | None
    message_count: int
    models: list[str]
    date_range: tuple[str, str]


@dataclass(frozen=True)
class ExportOutcome:
    output_path: Path
    message_count: int
    export_size: int
    title: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "output_path": str(self.output_path),
            "message_count": self.message_count,
            "export_size": self.export_size,
            "title": self.title,
        }
