"""Journal entries and their builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass
class Entry:
    """A single markdown file created from a topic."""

    topic: str
    created_at: datetime
    meta: dict[str, Any] = field(default_factory=dict)
    content: str = ""
    file_loc: Path | None = None
    virtual_path: Path | None = None

    @staticmethod
    def builder(topic: str) -> "EntryBuilder":
        return EntryBuilder(topic)

    @property
    def topic_name(self) -> str:
        return self.topic

    @property
    def file_location(self) -> Path | None:
        return self.file_loc

    def meta_value(self, key: str) -> Any:
        return self.meta.get(key)

    def to_dict(self) -> dict[str, Any]:
        """Plain data view of the entry, as handed to templates."""
        return {
            "topic": self.topic,
            "created_at": self.created_at.isoformat(),
            "file_loc": None if self.file_loc is None else Path(self.file_loc).as_posix(),
            "virtual_path": None
            if self.virtual_path is None
            else Path(self.virtual_path).as_posix(),
            "meta": dict(self.meta),
            "content": self.content,
        }


class EntryBuilder:
    """Fluent construction of an :class:`Entry`."""

    def __init__(self, topic: str) -> None:
        self._entry = Entry(topic=str(topic), created_at=datetime.now(timezone.utc))

    @property
    def entry(self) -> Entry:
        return self._entry

    def created_at(self, created_at: datetime) -> "EntryBuilder":
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        self._entry.created_at = created_at.astimezone(timezone.utc)
        return self

    def virtual_path(self, path) -> "EntryBuilder":
        self._entry.virtual_path = Path(path)
        return self

    def content(self, content: str) -> "EntryBuilder":
        self._entry.content = str(content)
        return self

    def file_name(self, file_name) -> "EntryBuilder":
        name = Path(file_name).name
        self._entry.file_loc = Path(name) if name else None
        return self

    def add_meta(self, meta: dict[str, Any]) -> "EntryBuilder":
        self._entry.meta = dict(meta)
        return self

    def add_meta_value(self, key: str, value: Any) -> "EntryBuilder":
        self._entry.meta[str(key)] = value
        return self

    def build(self) -> Entry:
        return self._entry