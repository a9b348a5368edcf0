"""Directory index of a topic's entries, keyed by virtual path segments."""

from __future__ import annotations

from typing import Iterable, Iterator

from .entry import Entry
from .topic import Topic


def topic_parts(topic: Topic, entry: Entry) -> list[str]:
    """Directory segments of the entry's virtual path, without the file name."""
    return list(topic.virtual_path(entry).parent.parts)


class DirIndex:
    """A tree of directories, each holding every entry found below it."""

    def __init__(self, depth: int = 0) -> None:
        self.depth = depth
        self._entries: list[Entry] = []
        self._indices: dict[str, DirIndex] = {}

    @staticmethod
    def for_topic(entries: Iterable[Entry], topic: Topic) -> "DirIndex":
        index = DirIndex()
        for entry in entries:
            current = index
            for depth, segment in enumerate(topic_parts(topic, entry), start=1):
                current._entries.append(entry)
                current = current._indices.setdefault(segment, DirIndex(depth))
            current._entries.append(entry)
        return index

    def is_leaf(self) -> bool:
        return not self._indices

    def children(self) -> Iterator[tuple[str, "DirIndex"]]:
        for name in sorted(self._indices):
            yield name, self._indices[name]

    def entries(self) -> Iterator[Entry]:
        return iter(list(self._entries))

    def is_empty(self) -> bool:
        return not self._entries

    def __getitem__(self, key: str) -> "DirIndex":
        return self._indices[key]

    def __repr__(self) -> str:
        return (
            f"DirIndex(depth={self.depth}, entries={len(self._entries)}, "
            f"children={sorted(self._indices)})"
        )