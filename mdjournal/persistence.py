"""Saving, loading and querying journal entries as markdown files."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Union

import yaml

from .entry import Entry
from .errors import JournalError
from .topic import Topic

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _FrontMatterLoader(yaml.SafeLoader):
    """Safe YAML loader that keeps timestamps as plain strings."""


_FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass
class AllEntries:
    """Query for every entry in the journal."""


@dataclass
class ForTopic:
    """Query for the entries of one topic."""

    topic: Topic


Query = Union[AllEntries, ForTopic]


def encode(entry: Entry) -> str:
    """Render an entry as front matter followed by its content."""
    meta = yaml.safe_dump(
        dict(entry.meta),
        sort_keys=True,
        default_flow_style=False,
        allow_unicode=True,
    )
    return (
        "---\n"
        f"CREATED_AT: {entry.created_at.isoformat()}\n"
        f"TOPIC: {entry.topic_name}\n"
        f"{meta}"
        "---\n"
        f"{entry.content}"
    )


def _split_front_matter(text: str) -> tuple[str, str]:
    if not text:
        raise JournalError("empty file")
    opening_end = text.find("\n")
    if opening_end == -1 or text[:opening_end].rstrip() != "---":
        raise JournalError("expecting FrontMatter")
    start = pos = opening_end + 1
    while pos <= len(text):
        line_end = text.find("\n", pos)
        line = text[pos:] if line_end == -1 else text[pos:line_end]
        if line.rstrip() == "---":
            content = "" if line_end == -1 else text[line_end + 1:]
            return text[start:pos], content
        if line_end == -1:
            break
        pos = line_end + 1
    raise JournalError("expecting FrontMatter")


def _parse_created_at(value: Any) -> datetime:
    if not isinstance(value, str):
        raise JournalError("expecting CREATED_AT str")
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        stamp = datetime.fromisoformat(text)
    except ValueError as exc:
        raise JournalError("expecting CREATED_AT valid format") from exc
    if stamp.tzinfo is None:
        raise JournalError("expecting CREATED_AT valid format")
    return stamp.astimezone(timezone.utc)


def decode(text: str) -> Entry:
    """Parse a markdown file with front matter back into an entry."""
    front, content = _split_front_matter(text)
    try:
        data = yaml.load(front, Loader=_FrontMatterLoader)
    except yaml.YAMLError as exc:
        raise JournalError(f"invalid front matter: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise JournalError("front matter is not a mapping")

    if "CREATED_AT" not in data:
        raise JournalError("expecting CREATED_AT")
    created_at = _parse_created_at(data.pop("CREATED_AT"))

    if "TOPIC" not in data:
        raise JournalError("expecting TOPIC")
    topic = data.pop("TOPIC")
    if not isinstance(topic, str):
        raise JournalError("expecting TOPIC str")

    meta = {key: value for key, value in data.items() if isinstance(key, str)}
    return (
        Entry.builder(topic)
        .created_at(created_at)
        .content(content)
        .add_meta(meta)
        .build()
    )


class Persistence(abc.ABC):
    """Storage for serialized entries."""

    @abc.abstractmethod
    def persist(self, path: Path, data: Any) -> None:
        """Store serialized data at ``path``."""

    @abc.abstractmethod
    def load(self, path: Path) -> tuple[Path, Any]:
        """Read the serialized data stored at ``path``."""

    @abc.abstractmethod
    def serialize(self, entry: Entry) -> Any:
        """Turn an entry into its stored form."""

    @abc.abstractmethod
    def deserialize(self, data: Any) -> Entry:
        """Turn stored data back into an entry."""

    @abc.abstractmethod
    def execute(self, query: Query) -> list[tuple[Path, Any]]:
        """Return the location and stored data of every match."""

    def fetch(self, path: Path) -> Entry:
        file_path, data = self.load(Path(path))
        entry = self.deserialize(data)
        entry.file_loc = file_path
        return entry

    def query(self, query: Query) -> list[Entry]:
        entries = []
        for path, data in self.execute(query):
            entry = self.deserialize(data)
            entry.file_loc = path
            entries.append(entry)
        return entries


def _walk(path: Path) -> Iterator[Path]:
    for child in sorted(path.iterdir()):
        yield child
        if child.is_dir() and not child.is_symlink():
            yield from _walk(child)


def _is_md_file(path: Path) -> bool:
    return path.is_file() and path.suffix == ".md"


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise JournalError(f"cannot read {path}") from exc


class FilePersistence(Persistence):
    """Keeps entries as markdown files below a root directory."""

    def __init__(self, root) -> None:
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"FilePersistence({str(self.root)!r})"

    def serialize(self, entry: Entry) -> str:
        return encode(entry)

    def deserialize(self, data: str) -> Entry:
        return decode(data)

    def load(self, path) -> tuple[Path, str]:
        path = Path(path)
        return path, _read(path)

    def persist(self, path, data: str) -> None:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise JournalError(f"writing directories for {path}") from exc
        try:
            path.write_text(data, encoding="utf-8", newline="")
        except OSError as exc:
            raise JournalError(f"saving {path}") from exc

    def execute(self, query: Query) -> list[tuple[Path, str]]:
        if isinstance(query, ForTopic):
            directory = self.root / query.topic.source_root
        else:
            directory = self.root
        if not directory.is_dir():
            return []
        return [(path, _read(path)) for path in _walk(directory) if _is_md_file(path)]