"""The journal: topics together with where their entries are kept."""

from __future__ import annotations

import abc
from pathlib import Path
from typing import Any, Iterator

from .config import install as install_config
from .config import load as load_config
from .config import topic_map_from_config
from .entry import Entry
from .errors import JournalError
from .persistence import AllEntries, FilePersistence, ForTopic, Persistence
from .topic import Topic, TopicMap


class JournalLoader(abc.ABC):
    """Builds the parts of a journal from some configuration source."""

    @abc.abstractmethod
    def load(self, config_source: Any) -> tuple[Persistence, TopicMap, Path]:
        """Return the persistence, topics and source root."""

    @abc.abstractmethod
    def install(self, config_source: Any) -> None:
        """Prepare the configuration source for use with the journal."""


class CliLoader(JournalLoader):
    """Loads a journal from a book configuration file on disk."""

    def load(self, config_source) -> tuple[FilePersistence, TopicMap, Path]:
        path = Path(config_source)
        config = load_config(path)
        if path.parent == path:
            raise JournalError(f"invalid path `{path}`")
        root = path.parent / config.src
        topics = topic_map_from_config(config)
        return FilePersistence(root), topics, root

    def install(self, config_source) -> None:
        install_config(Path(config_source))


class Journal:
    """All tracked topics and the storage for their entries."""

    def __init__(self, source_root, topics: TopicMap, persistence: Persistence) -> None:
        self.source_root = Path(source_root)
        self.topics = topics
        self.persistence = persistence

    @classmethod
    def load(cls, loader: JournalLoader, config_source) -> "Journal":
        persistence, topics, source_root = loader.load(config_source)
        return cls(source_root, topics, persistence)

    @staticmethod
    def install(loader: JournalLoader, config_source) -> None:
        loader.install(config_source)

    def with_topic(self, topic: str) -> Topic:
        found = self.topics.find(topic)
        if found is None:
            raise JournalError(f"Topic Not Found [{topic}]")
        return found

    def each_topic(self) -> Iterator[Topic]:
        return iter(self.topics)

    def persist_entry(self, entry: Entry) -> Path:
        topic = self.with_topic(entry.topic_name)
        file_location = self.source_root / topic.source_path(entry)
        data = self.persistence.serialize(entry)
        self.persistence.persist(file_location, data)
        return file_location

    def fetch_entry(self, path) -> Entry:
        return self.persistence.fetch(Path(path))

    def entries_for_topic(self, topic: str) -> list[Entry]:
        entries = self.persistence.query(ForTopic(self.with_topic(topic)))
        self._hydrate_virtual_paths(entries)
        return entries

    def all_entries(self) -> list[Entry]:
        entries = self.persistence.query(AllEntries())
        self._hydrate_virtual_paths(entries)
        return entries

    def _hydrate_virtual_paths(self, entries: list[Entry]) -> None:
        for entry in entries:
            entry.virtual_path = self.with_topic(entry.topic_name).virtual_path(entry)