"""Preprocessors that add journal topics and entries to a book."""

from __future__ import annotations

from pathlib import Path

from .book import Book, BookItem, Chapter, PreprocessorContext, SectionNumber
from .entry import Entry
from .errors import JournalError
from .index import DirIndex
from .journal import Journal
from .topic import Topic


def _title(entry: Entry) -> str:
    title = entry.meta_value("title")
    return title if isinstance(title, str) else "Untitled"


def _virtual_path(topic: Topic, entry: Entry) -> Path | None:
    try:
        return topic.virtual_path(entry)
    except JournalError:
        return None


def _newest_first(journal: Journal, topic: Topic) -> list[Entry]:
    entries = journal.entries_for_topic(topic.name)
    entries.sort(key=lambda entry: entry.created_at, reverse=True)
    return entries


class NaivePreprocessor:
    """Adds one flat chapter per topic listing all of its entries."""

    name = "Naive Journal Preprocessor"

    def __init__(self, journal: Journal) -> None:
        self.journal = journal

    def run(self, ctx: PreprocessorContext | None, book: Book) -> Book:
        for topic in self.journal.each_topic():
            entries = _newest_first(self.journal, topic)
            book.push_item(
                Chapter(
                    name=topic.name,
                    sub_items=[self._entry_chapter(topic, e) for e in entries],
                )
            )
        return book

    @staticmethod
    def _entry_chapter(topic: Topic, entry: Entry) -> Chapter:
        return Chapter(
            name=_title(entry),
            content=entry.content,
            path=_virtual_path(topic, entry),
            source_path=entry.file_location,
        )


class SimpleDirPreprocessor:
    """Adds one chapter per topic, nested by the entries' directories."""

    name = "Simple Directory Preprocessor"

    def __init__(self, journal: Journal) -> None:
        self.journal = journal

    def run(self, ctx: PreprocessorContext | None, book: Book) -> Book:
        highest = book.max_section_number()
        root = None if highest is None else highest.root()
        section = SectionNumber() if root is None else root
        for topic in self.journal.each_topic():
            entries = _newest_first(self.journal, topic)
            section.increment()
            book.push_item(_topic_chapter(topic, entries, section.copy()))
        return book


def _topic_chapter(topic: Topic, entries: list[Entry], section: SectionNumber) -> Chapter:
    index = DirIndex.for_topic(entries, topic)
    sub_items: list[BookItem] = []
    if not index.is_empty():
        try:
            topic_index = index[topic.name]
        except KeyError as exc:
            raise JournalError(f"no directory index for topic [{topic.name}]") from exc
        sub_items = _build_sub_items(topic, topic_index, [topic.name], section.advance_level())
    return Chapter(
        name=topic.name,
        sub_items=sub_items,
        path=topic.virtual_root / "README.md",
        number=section,
    )


def _build_sub_items(
    topic: Topic, index: DirIndex, parents: list[str], section: SectionNumber
) -> list[BookItem]:
    items: list[BookItem] = []
    if index.is_leaf():
        for entry in index.entries():
            section.increment()
            items.append(_entry_chapter(topic, entry, list(parents), section.copy()))
        return items

    for name, directory in index.children():
        new_parents = [*parents, name]
        path = Path("/".join(new_parents)) / "README.md"
        section.increment()
        items.append(
            Chapter(
                name=name,
                content=_build_content(directory, path, topic),
                number=section.copy(),
                sub_items=_build_sub_items(topic, directory, new_parents, section.advance_level()),
                path=path,
                parent_names=list(parents),
            )
        )
    return items


def _build_content(directory: DirIndex, path: Path, topic: Topic) -> str:
    if not directory.is_leaf():
        return ""
    data = {
        "path": path.as_posix(),
        "entries": [entry.to_dict() for entry in directory.entries()],
    }
    try:
        return topic.directory_template.generate_content(data)
    except JournalError as exc:
        raise JournalError(f"Generating content with data:\n{data!r}") from exc


def _entry_chapter(
    topic: Topic, entry: Entry, parents: list[str], section: SectionNumber
) -> Chapter:
    return Chapter(
        name=_title(entry),
        content=entry.content,
        number=section,
        path=_virtual_path(topic, entry),
        source_path=entry.file_location,
        parent_names=parents,
    )