from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import pydoc
from typing import Iterable, Sequence

from prompt_toolkit.application import Application
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import Layout
from prompt_toolkit.layout.containers import HSplit
from prompt_toolkit.shortcuts import prompt
from prompt_toolkit.widgets import Label, RadioList

from .config import Settings, configure_logging
from .discover import LogLocator
from .errors import CcAtlasError
from .export_md import ExportOptions, export_chat, render_markdown
from .filters import filter_chats, sort_chats
from .models import ChatSummary
from .parser import parse_transcript

logger = configure_logging()


@dataclass
class TuiState:
    project_root: str
    chats: list[ChatSummary]
    settings: Settings
    locator: LogLocator = field(default_factory=LogLocator)


def run_tui(project_root: str = ".") -> int:
    locator = LogLocator()
    chats = locator.list_chats(project_root)
    state = TuiState(project_root=project_root, chats=chats, settings=Settings(), locator=locator)

    while True:
        try:
            result = _main_menu(state)
        except CcAtlasError as exc:
            logger.warning("tui action failed: %s", exc.message)
            _show_message("Error", exc.message)
            continue
        if result == "quit":
            return 0


def _main_menu(state: TuiState) -> str:
    while True:
        options = [
            ("browse", "Browse chats"),
            ("search", "Search"),
            ("refresh", "Refresh chat list"),
            ("settings", "Settings"),
            ("quit", "Quit"),
        ]
        choice = _prompt_choice(
            "Main",
            options,
            allow_back=False,
            allow_quit=True,
            header_lines=[f"Project: {state.project_root}", f"Chats found: {len(state.chats)}"],
        )
        if choice == "quit":
            return "quit"
        if choice == "browse":
            result = _chat_list_menu(state, state.chats, ["Chats"])
        elif choice == "search":
            result = _search_chats(state)
        elif choice == "refresh":
            state.chats = state.locator.list_chats(state.project_root)
            result = None
        elif choice == "settings":
            result = _settings_menu(state)
        else:
            result = None
        if result == "quit":
            return "quit"


def _search_chats(state: TuiState) -> str | None:
    if not state.chats:
        _show_message("Search", "No chats found.")
        return "back"
    while True:
        query = _prompt_text("Search", "Search term")
        if query in ("back", "quit"):
            return query
        if not query:
            _show_message("Search", "Enter a search term or use 'b' to go back.")
            continue
        results = filter_chats(state.chats, query=query)
        if not results:
            _show_message("Search", "No matches. Try another query.")
            continue
        result = _chat_list_menu(state, results, ["Search", query])
        if result == "quit":
            return "quit"


def _settings_menu(state: TuiState) -> str | None:
    settings = state.settings
    while True:
        options = [
            ("tools", f"Include tools: {settings.include_tools}"),
            ("timestamps", f"Include timestamps: {settings.include_timestamps}"),
            ("max_files", f"Files listed per tool: {settings.max_tool_files}"),
            ("output_dir", f"Output directory: {settings.output_dir or 'default'}"),
        ]
        choice = _prompt_choice("Settings", options)
        if choice in ("back", "quit"):
            return choice
        if choice == "tools":
            settings.include_tools = not settings.include_tools
        elif choice == "timestamps":
            settings.include_timestamps = not settings.include_timestamps
        elif choice == "max_files":
            raw = _prompt_text("Settings > Files per tool", "Files listed per tool", default=str(settings.max_tool_files))
            if raw == "quit":
                return "quit"
            if raw and raw.isdigit():
                settings.max_tool_files = int(raw)
        elif choice == "output_dir":
            raw = _prompt_text("Settings > Output directory", "Output directory (blank for default)")
            if raw == "quit":
                return "quit"
            if raw != "back":
                settings.output_dir = Path(raw).expanduser() if raw else None


def _chat_list_menu(state: TuiState, chats: Iterable[ChatSummary], breadcrumb: list[str]) -> str | None:
    chat_list = sort_chats(chats)
    while True:
        if not chat_list:
            _show_message(_format_breadcrumb(breadcrumb), "No chats found.")
            return "back"
        options = [(idx, _format_chat_line(chat)) for idx, chat in enumerate(chat_list)]
        choice = _prompt_choice(_format_breadcrumb(breadcrumb), options)
        if choice in ("back", "quit"):
            return choice
        selected = chat_list[choice]
        result = _chat_action_menu(state, selected, breadcrumb + [selected.session_id])
        if result == "quit":
            return "quit"


def _chat_action_menu(state: TuiState, chat: ChatSummary, breadcrumb: list[str]) -> str | None:
    while True:
        options = [
            ("export", "Export Markdown"),
            ("preview", "Show Markdown preview"),
        ]
        choice = _prompt_choice(_format_breadcrumb(breadcrumb), options, header_lines=[chat.title])
        if choice in ("back", "quit"):
            return choice
        if choice == "export":
            outcome = export_chat(
                chat.session_id,
                state.project_root,
                _resolve_export_options(state.settings),
                locator=state.locator,
                exports_dir=state.settings.output_dir,
            )
            _show_message(
                _format_breadcrumb(breadcrumb),
                f"Exported {outcome.message_count} messages to {outcome.output_path}",
            )
            continue
        if choice == "preview":
            messages, metadata = parse_transcript(chat.file_path)
            content = render_markdown(messages, metadata, _resolve_export_options(state.settings))
            _clear_screen()
            print(_format_breadcrumb(breadcrumb))
            print("")
            pydoc.pager(content)
            continue


def _resolve_export_options(settings: Settings) -> ExportOptions:
    return ExportOptions(
        include_tools=settings.include_tools,
        include_timestamps=settings.include_timestamps,
        include_thinking=settings.include_thinking,
        max_tool_files=settings.max_tool_files,
    )


def _clear_screen() -> None:
    print("\033[2J\033[H", end="")


def _format_breadcrumb(breadcrumb: Sequence[str] | str) -> str:
    if isinstance(breadcrumb, str):
        return breadcrumb
    return " > ".join(breadcrumb)


def _nav_hint(allow_back: bool, allow_quit: bool) -> str:
    if allow_back and allow_quit:
        return "b = back | q = quit"
    if allow_back:
        return "b = back"
    if allow_quit:
        return "q = quit"
    return ""


def _show_message(title: Sequence[str] | str, message: str) -> None:
    _clear_screen()
    print(_format_breadcrumb(title))
    print("")
    print(message)
    prompt("Press Enter to continue...")


def _prompt_text(
    title: Sequence[str] | str,
    label: str,
    *,
    default: str | None = None,
) -> str:
    """Read one line; "b"/"back" and "q"/"quit" (or Ctrl-C) navigate instead."""
    if default:
        label += f" [{default}]"
    _clear_screen()
    print(_format_breadcrumb(title))
    print("")
    print(_nav_hint(True, True))
    try:
        raw = prompt(f"{label}: ").strip() or (default or "")
    except (EOFError, KeyboardInterrupt):
        return "quit"
    return {"b": "back", "back": "back", "q": "quit", "quit": "quit"}.get(raw.lower(), raw)


def _prompt_choice(
    title: Sequence[str] | str,
    options: list[tuple[object, str]],
    *,
    allow_back: bool = True,
    allow_quit: bool = True,
    header_lines: list[str] | None = None,
) -> object | str:
    if not options:
        return "back"
    title_text = _format_breadcrumb(title)
    hint = _nav_hint(allow_back, allow_quit)
    radio = RadioList(options)
    kb = KeyBindings()

    @kb.add("enter", eager=True)
    def _select(event) -> None:
        radio._handle_enter()
        event.app.exit(result=radio.current_value)

    if allow_back:
        @kb.add("b", eager=True)
        @kb.add("escape", eager=True)
        def _go_back(event) -> None:
            event.app.exit(result="back")

    if allow_quit:
        @kb.add("q", eager=True)
        @kb.add("c-c", eager=True)
        def _go_quit(event) -> None:
            event.app.exit(result="quit")

    rows: list[Label | RadioList] = [Label(title_text)]
    for line in header_lines or []:
        rows.append(Label(line))
    rows.append(Label(""))
    rows.append(radio)
    if hint:
        rows.append(Label(""))
        rows.append(Label(hint))
    app = Application(layout=Layout(HSplit(rows)), key_bindings=kb, full_screen=True)
    return app.run()


def _format_chat_line(chat: ChatSummary) -> str:
    return f"{_shorten_text(chat.title, 70)} | {chat.session_id[:8]}"


def _shorten_text(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
