"""Command line entry point of the journaling preprocessor."""

from __future__ import annotations

import argparse
import json
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from .book import parse_input
from .errors import JournalError
from .generation import CliEntryGenerator, EntryGenerator, JsonEntryGenerator
from .journal import CliLoader, Journal
from .preprocessor import SimpleDirPreprocessor


def _version() -> str:
    try:
        return version("mdjournal")
    except PackageNotFoundError:
        return "unknown"


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdbook-journal", description="mdBook journaling system")
    parser.add_argument("-c", "--config", default="book.toml", type=Path)
    parser.add_argument("-V", "--version", action="version", version=_version())
    commands = parser.add_subparsers(dest="command")

    supports = commands.add_parser(
        "supports", help="Called by mdbook to determine render compatability"
    )
    supports.add_argument("renderer", help='renderer to check, such as "html"')

    new = commands.add_parser("new", help="Create a new topic entry")
    new.add_argument("topic", help="topic to use")
    new.add_argument("-i", "--input", choices=["interactive", "json"], default="interactive")

    ls = commands.add_parser("ls", help="List out topics")
    ls.add_argument("topic", help="Topic to list out")

    commands.add_parser("process", help="(default) Process mdbook from stdin")
    return parser


def _collect(kind: str) -> EntryGenerator:
    if kind == "json":
        return JsonEntryGenerator(json.load(sys.stdin))
    return CliEntryGenerator()


def _load(config: Path) -> Journal:
    return Journal.load(CliLoader(), config.resolve(strict=True))


def _run(args: argparse.Namespace) -> None:
    command = args.command or "process"
    if command == "process":
        ctx, book = parse_input(sys.stdin)
        journal = Journal.load(CliLoader(), ctx.root / "book.toml")
        book = SimpleDirPreprocessor(journal).run(ctx, book)
        json.dump(book.to_dict(), sys.stdout)
    elif command == "new":
        journal = _load(args.config)
        topic = journal.with_topic(args.topic)
        entry = topic.generate_entry(_collect(args.input))
        path = journal.persist_entry(entry)
        print(f"Entry Created: {path}")
    elif command == "ls":
        journal = _load(args.config)
        for entry in journal.entries_for_topic(args.topic):
            if entry.file_location is not None:
                print(entry.file_location)


def main(argv=None) -> int:
    args = _parser().parse_args(argv)
    try:
        _run(args)
    except (JournalError, OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())