from __future__ import annotations

from typing import Iterable

from .models import ChatSummary


def _match_text(value: str | None, needle: str) -> bool:
    if not value:
        return False
    return needle.lower() in value.lower()


def filter_chats(chats: Iterable[ChatSummary], *, query: str | None = None) -> list[ChatSummary]:
    results: list[ChatSummary] = []
    for chat in chats:
        if query and not (_match_text(chat.session_id, query) or _match_text(chat.title, query)):
            continue
        results.append(chat)
    return results


def sort_chats(chats: Iterable[ChatSummary]) -> list[ChatSummary]:
    # ISO-8601 timestamps of one fixed format order correctly as strings.
    return sorted(chats, key=lambda item: item.last_modified, reverse=True)
