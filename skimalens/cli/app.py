from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from skimalens.cli import output as out
from skimalens.cli.config import (
    Config,
    config_exists,
    config_path_display,
    load_config,
    save_config,
)
from skimalens.core.exceptions import (
    FormatError,
    ParseError,
    UnsupportedDataKindError,
)
from skimalens.core.loader import load_file
from skimalens.core.types import ParsedData
from skimalens.export.exporter import (
    ConversationExporter,
    ExportFormat,
    ExportOptions,
    FilenameFormat,
)
from skimalens.export.markdown import format_timestamp
from skimalens.providers.registry import get_provider_config
from skimalens.providers.types import Conversation
from skimalens.viewer import (
    conversation_stats,
    conversation_summaries,
    filter_messages,
    find_conversation,
    list_conversations,
    timeline,
)

DESCRIPTION = """\
skimalens — view and export Claude and ChatGPT conversation logs

Reads a Claude or ChatGPT export (.json, .yaml or .yml), detects which
schema it uses and normalizes it into a chronological message timeline
you can browse in the terminal or export as Markdown, JSON or YAML."""


# ── Helpers ─────────────────────────────────────────────────────────


def _load_or_exit(path: str) -> ParsedData:
    try:
        return load_file(path)
    except FileNotFoundError as exc:
        out.error(str(exc))
    except ParseError as exc:
        out.error(exc.message)
    sys.exit(1)


def _require_conversations(parsed: ParsedData, command: str) -> None:
    """Exit with guidance if the file is not a conversation export."""
    if parsed.kind.is_conversation:
        return
    out.error(f"Unsupported data type for {command}: {parsed.kind}")
    out.info("Only Claude and ChatGPT conversations are supported.")
    sys.exit(1)


# ── inspect ─────────────────────────────────────────────────────────


def cmd_inspect(args: argparse.Namespace) -> None:
    """Print what a file was detected as."""
    parsed = _load_or_exit(args.path)
    meta = parsed.metadata

    out.header(meta.filename)
    if meta.file_size is not None:
        out.kv("Size", f"{meta.file_size:,} bytes")
    out.kv("Detected type", parsed.kind.value)
    records = f"{meta.record_count:,}" if meta.record_count is not None else "n/a"
    out.kv("Records", records)

    if parsed.kind.is_conversation:
        try:
            summaries = conversation_summaries(parsed)
        except FormatError as exc:
            out.warn(exc.message)
            return
        deleted = sum(1 for s in summaries if s.deleted)
        out.kv("Conversations", f"{len(summaries):,}")
        if deleted:
            out.kv("Deleted", f"{deleted:,}")
        print()
        out.info("Next:")
        out.next_step(f"skimalens view {args.path}")
        out.next_step(f"skimalens export {args.path}")
    print()


# ── view ────────────────────────────────────────────────────────────


def _print_conversation_list(parsed: ParsedData, args: argparse.Namespace, cfg: Config) -> None:
    hide_deleted = cfg.hide_deleted and not args.show_deleted
    summaries = conversation_summaries(parsed)
    rows = list_conversations(summaries, query=args.search or "", hide_deleted=hide_deleted)

    out.header(f"Conversations ({len(rows):,} of {len(summaries):,})")
    print()
    for row in rows:
        title = row.title or out.dim("(deleted)")
        updated = format_timestamp(row.updated)
        print(f"  {out.bold(title)}  {out.dim(row.id)}")
        print(f"    {out.dim(f'{row.message_count} messages · updated {updated}')}")
    if not rows:
        out.info("No conversations match your search.")
    print()


def _print_timeline(
    parsed: ParsedData, conversation: Conversation, args: argparse.Namespace
) -> None:
    provider = get_provider_config(parsed.kind)
    messages = timeline(parsed, conversation)
    shown = filter_messages(messages, query=args.search or "", sender=args.sender)
    stats = conversation_stats(messages)

    out.header(provider.title(conversation) or "(deleted)")
    out.kv("ID", provider.conversation_id(conversation))
    out.kv("Messages", f"{stats.total} ({stats.human} human, {stats.assistant} assistant)")
    if stats.with_feedback:
        out.kv("With feedback", stats.with_feedback)
    out.rule()

    for m in shown:
        speaker = "Human" if m.is_human else "Assistant"
        out.message(speaker, format_timestamp(m.create_time), m.text, m.is_human)
        print()

    if not shown:
        out.info("No messages match your current filters.")
    elif args.search:
        out.info(f'Found {len(shown)} message(s) matching "{args.search}"')


def cmd_view(args: argparse.Namespace) -> None:
    """List conversations, or print one conversation's timeline."""
    cfg = load_config()
    parsed = _load_or_exit(args.path)
    _require_conversations(parsed, "view")

    provider = get_provider_config(parsed.kind)
    try:
        conversations = provider.conversations(parsed.raw)
        if args.conversation:
            conversation = find_conversation(parsed, args.conversation)
            if conversation is None:
                out.error(f"No conversation with id {args.conversation}")
                sys.exit(1)
            _print_timeline(parsed, conversation, args)
        elif len(conversations) == 1:
            _print_timeline(parsed, conversations[0], args)
        else:
            _print_conversation_list(parsed, args, cfg)
    except FormatError as exc:
        out.error(exc.message)
        sys.exit(1)


# ── export ──────────────────────────────────────────────────────────


def cmd_export(args: argparse.Namespace) -> None:
    cfg = load_config()
    parsed = _load_or_exit(args.path)
    out.kv("Detected data type", parsed.kind.value)
    _require_conversations(parsed, "export")

    options = ExportOptions(
        output_dir=Path(args.out) if args.out else cfg.export_path,
        filename_format=FilenameFormat(args.filename_format or cfg.filename_format),
        export_format=ExportFormat(args.export_format or cfg.export_format),
    )

    try:
        written = ConversationExporter(options).export(parsed.raw, parsed.kind)
    except (FormatError, UnsupportedDataKindError) as exc:
        out.error(f"Error during export: {exc.message}")
        sys.exit(1)

    for path in written:
        out.success(f"Exported: {path.name}")
    print()
    out.success(f"Export completed successfully to: {options.output_dir.resolve()}")


# ── config ──────────────────────────────────────────────────────────


def cmd_config_show(args: argparse.Namespace) -> None:
    """Display current configuration."""
    cfg = load_config()

    source = config_path_display() if config_exists() else "defaults"
    out.header(f"Configuration ({source})")
    print()
    out.kv("Export directory", cfg.export_dir)
    out.kv("Export format", cfg.export_format.value)
    out.kv("Filename format", cfg.filename_format.value)
    out.kv("Hide deleted", "yes" if cfg.hide_deleted else "no")
    print()


def cmd_config_path(args: argparse.Namespace) -> None:
    """Print the config file path."""
    print(config_path_display())


def cmd_config_init(args: argparse.Namespace) -> None:
    """Write the effective settings to the config file."""
    if config_exists() and not args.force:
        out.warn(f"Config already exists at {config_path_display()}")
        out.info("Use --force to overwrite it.")
        return
    path = save_config(load_config())
    out.success(f"Config written to {path}")


# ── Parser ──────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skimalens",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  skimalens inspect conversations.json\n"
            "  skimalens view conversations.json --search python\n"
            "  skimalens export conversations.json --out ./output\n"
            "  skimalens export conversations.json --export-format yaml "
            "--filename-format id\n"
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show detailed progress logs",
    )
    sub = parser.add_subparsers(dest="command", title="commands")

    p_inspect = sub.add_parser("inspect", help="Detect the data type of a file")
    p_inspect.add_argument("path", help="Path to a .json, .yaml or .yml file")

    p_view = sub.add_parser("view", help="Browse conversations in the terminal")
    p_view.add_argument("path", help="Path to a .json, .yaml or .yml file")
    p_view.add_argument("--search", "-s", help="Case-insensitive search query")
    p_view.add_argument(
        "--sender",
        choices=["human", "assistant"],
        help="Only show messages from this sender",
    )
    p_view.add_argument(
        "--conversation",
        "-c",
        metavar="ID",
        help="Show the timeline of the conversation with this id",
    )
    p_view.add_argument(
        "--show-deleted",
        action="store_true",
        help="Include conversations with an empty title",
    )

    p_export = sub.add_parser("export", help="Export conversations to files")
    p_export.add_argument("path", help="Path to a .json, .yaml or .yml file")
    p_export.add_argument("--out", metavar="DIR", help="Output directory")
    p_export.add_argument(
        "--export-format",
        choices=[f.value for f in ExportFormat],
        help="Output format (default: markdown)",
    )
    p_export.add_argument(
        "--filename-format",
        choices=[f.value for f in FilenameFormat],
        help="Name files by conversation title or id (default: title)",
    )

    p_cfg = sub.add_parser("config", help="View and change settings")
    cfg_sub = p_cfg.add_subparsers(dest="config_command")
    cfg_sub.add_parser("show", help="Show current settings")
    cfg_sub.add_parser("path", help="Print config file location")
    p_cfg_init = cfg_sub.add_parser("init", help="Write a config file with current settings")
    p_cfg_init.add_argument(
        "--force", action="store_true", help="Overwrite an existing config file"
    )

    return parser


# ── Dispatch ────────────────────────────────────────────────────────

_CommandHandler = Callable[[argparse.Namespace], None]

_COMMAND_MAP: dict[str, _CommandHandler] = {
    "inspect": cmd_inspect,
    "view": cmd_view,
    "export": cmd_export,
}

_CONFIG_MAP: dict[str, _CommandHandler] = {
    "show": cmd_config_show,
    "path": cmd_config_path,
    "init": cmd_config_init,
}


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="  %(name)s: %(message)s",
        )

    if not args.command:
        out.banner()
        parser.print_help()
        return

    if args.command == "config":
        if not args.config_command:
            parser.parse_args(["config", "--help"])
            return
        handler = _CONFIG_MAP.get(args.config_command)
    else:
        handler = _COMMAND_MAP.get(args.command)

    if handler is None:
        parser.print_help()
        return

    try:
        handler(args)
    except KeyboardInterrupt:
        print()


if __name__ == "__main__":
    main()
