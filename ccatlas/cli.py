from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

from .config import configure_logging
from .discover import LogLocator
from .errors import CcAtlasError
from .export_md import ExportOptions, export_chat
from .filters import filter_chats
from .models import ChatSummary
from .tui import run_tui

logger = configure_logging()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="cc-atlas", description="Export Claude Code chats to Markdown")
    subparsers = parser.add_subparsers(dest="command")

    list_parser = subparsers.add_parser("list", help="List chats for a project")
    list_parser.add_argument("--project", type=str, default=".", help="Project directory")
    list_parser.add_argument("--query", type=str, help="Search term (session id or title)")
    list_parser.add_argument("--limit", type=int, default=50, help="Limit results")
    list_parser.add_argument("--json", action="store_true", help="Print JSON")

    export_parser = subparsers.add_parser("export", help="Export a chat to Markdown")
    export_parser.add_argument("session_id", type=str, help="Session id to export")
    export_parser.add_argument("--project", type=str, default=".", help="Project directory")
    export_parser.add_argument("--name", type=str, help="Output file name (defaults to the session id)")
    export_parser.add_argument("--out-dir", type=str, help="Output directory")
    export_parser.add_argument(
        "--include-tools",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Include a tools line per message",
    )
    export_parser.add_argument(
        "--include-timestamps",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Include message times",
    )
    export_parser.add_argument("--include-thinking", action="store_true", help="Reserved; has no effect")
    export_parser.add_argument("--max-tool-files", type=int, default=5, help="Files listed per tool")
    export_parser.add_argument("--options", type=str, help="Export options as a JSON object (overrides flags)")
    export_parser.add_argument("--json", action="store_true", help="Print JSON")

    tui_parser = subparsers.add_parser("tui", help="Launch interactive menu")
    tui_parser.add_argument("--project", type=str, default=".", help="Project directory")

    args = parser.parse_args(argv)

    try:
        if args.command is None:
            return run_tui(".")
        if args.command == "tui":
            return run_tui(args.project)
        if args.command == "list":
            return _list_cmd(args)
        if args.command == "export":
            return _export_cmd(args)
    except CcAtlasError as exc:
        logger.error("%s failed: %s", args.command or "tui", exc.message)
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


def _list_cmd(args: argparse.Namespace) -> int:
    chats = LogLocator().list_chats(args.project)
    results = filter_chats(chats, query=args.query)
    if args.limit:
        results = results[: args.limit]

    if args.json:
        print(json.dumps([chat.to_dict() for chat in results], indent=2))
        return 0

    if not results:
        print("No chats found.")
        return 0

    for chat in results:
        print(_format_chat_line(chat))
    return 0


def _export_cmd(args: argparse.Namespace) -> int:
    if args.options is not None:
        try:
            payload = json.loads(args.options)
        except json.JSONDecodeError:
            payload = args.options
        options = ExportOptions.from_payload(payload)
    else:
        options = ExportOptions(
            include_tools=args.include_tools,
            include_timestamps=args.include_timestamps,
            include_thinking=args.include_thinking,
            max_tool_files=max(args.max_tool_files, 0),
        )

    out_dir = Path(args.out_dir).expanduser() if args.out_dir else None
    outcome = export_chat(args.session_id, args.project, options, args.name, exports_dir=out_dir)

    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2))
    else:
        print(f"Exported {outcome.message_count} messages -> {outcome.output_path}")
    return 0


def _format_chat_line(chat: ChatSummary) -> str:
    size_kb = chat.file_size / 1024
    return f"{chat.session_id} | {chat.title} | {size_kb:.1f} KB"


if __name__ == "__main__":
    raise SystemExit(main())
