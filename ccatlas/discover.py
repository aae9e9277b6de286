from __future__ import annotations

from pathlib import Path

from .config import configure_logging, get_projects_root
from .errors import NotFoundError
from .filters import sort_chats
from .models import ChatSummary
from .utils import date_part, decode_record

logger = configure_logging()

LOG_SUFFIX = ".jsonl"


def encode_project_dir_name(project_path: Path) -> str:
    text = project_path.as_posix()
    if text.startswith("/"):
        text = text[1:]
    return "-" + text.replace("/", "-")


def build_chat_summary(path: Path) -> ChatSummary:
    line_count = 0
    first_timestamp: str | None = None
    last_timestamp: str | None = None
    session_id: str | None = None
    cwd: str | None = None

    with path.open("r", encoding="utf-8", errors="replace") as handle:
        for line in handle:
            line_count += 1
            record = decode_record(line)
            if record is None:
                continue
            if record.timestamp:
                if first_timestamp is None:
                    first_timestamp = record.timestamp
                last_timestamp = record.timestamp
            if session_id is None and record.session_id:
                session_id = record.session_id
            if cwd is None and record.cwd:
                cwd = record.cwd

    project_name = Path(cwd).name if cwd else ""
    title = f"{date_part(last_timestamp)} · {line_count} lines · {project_name or 'unknown'}"
    return ChatSummary(
        session_id=session_id or path.stem,
        file_path=path,
        title=title,
        line_count=line_count,
        last_modified=last_timestamp or "",
        file_size=path.stat().st_size,
    )


class LogLocator:
    """Maps project directories onto their session logs under a store root."""

    def __init__(self, store_root: Path | None = None) -> None:
        self.store_root = store_root if store_root is not None else get_projects_root()

    def project_log_dir(self, project_root: Path | str) -> Path:
        try:
            absolute = Path(project_root).expanduser().resolve(strict=True)
        except FileNotFoundError as exc:
            raise NotFoundError(f"project directory not found: {project_root}") from exc
        return self.store_root / encode_project_dir_name(absolute)

    def find_log_files(self, project_root: Path | str) -> list[Path]:
        log_dir = self.project_log_dir(project_root)
        if not log_dir.is_dir():
            logger.info("no session logs for %s (looked in %s)", project_root, log_dir)
            return []
        return sorted(path for path in log_dir.iterdir() if path.suffix == LOG_SUFFIX and path.is_file())

    def list_chats(self, project_root: Path | str) -> list[ChatSummary]:
        chats: list[ChatSummary] = []
        for path in self.find_log_files(project_root):
            try:
                chats.append(build_chat_summary(path))
            except OSError as exc:
                logger.warning("failed to read %s: %s", path, exc)
        return sort_chats(chats)

    def find_chat(self, session_id: str, project_root: Path | str) -> ChatSummary:
        for chat in self.list_chats(project_root):
            if chat.session_id == session_id:
                return chat
        raise NotFoundError(f"chat not found: {session_id}")
