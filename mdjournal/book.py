"""Book structures exchanged with the book builder as JSON."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, TextIO, Union

from .errors import JournalError


@dataclass
class SectionNumber:
    """Hierarchical chapter number such as 1.2.3."""

    parts: list[int] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.parts

    def root(self) -> "SectionNumber | None":
        value = self.root_value()
        return None if value is None else SectionNumber([value])

    def root_value(self) -> int | None:
        return self.parts[0] if self.parts else None

    def advance_level(self) -> "SectionNumber":
        return SectionNumber([*self.parts, 0])

    def increment(self) -> None:
        if self.parts:
            self.parts[-1] += 1
        else:
            self.parts.append(1)

    def copy(self) -> "SectionNumber":
        return SectionNumber(list(self.parts))

    def __iter__(self) -> Iterator[int]:
        return iter(self.parts)

    def __len__(self) -> int:
        return len(self.parts)

    def __str__(self) -> str:
        return "".join(f"{n}." for n in self.parts)


def _path_str(path: Path | None) -> str | None:
    return None if path is None else Path(path).as_posix()


def _opt_path(value: Any) -> Path | None:
    return None if value is None else Path(value)


@dataclass
class Chapter:
    """A chapter of the book, possibly holding nested items."""

    name: str = ""
    content: str = ""
    number: SectionNumber | None = None
    sub_items: list["BookItem"] = field(default_factory=list)
    path: Path | None = None
    source_path: Path | None = None
    parent_names: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "content": self.content,
            "number": None if self.number is None else list(self.number.parts),
            "sub_items": [_item_to_dict(item) for item in self.sub_items],
            "path": _path_str(self.path),
            "source_path": _path_str(self.source_path),
            "parent_names": list(self.parent_names),
        }

    @staticmethod
    def from_dict(data: Any) -> "Chapter":
        if not isinstance(data, Mapping):
            raise JournalError("chapter must be an object")
        number = data.get("number")
        if number is not None and not isinstance(number, list):
            raise JournalError("chapter number must be a list")
        return Chapter(
            name=str(data.get("name", "")),
            content=str(data.get("content", "")),
            number=None if number is None else SectionNumber([int(n) for n in number]),
            sub_items=[_item_from_dict(item) for item in data.get("sub_items") or []],
            path=_opt_path(data.get("path")),
            source_path=_opt_path(data.get("source_path")),
            parent_names=[str(n) for n in data.get("parent_names") or []],
        )


@dataclass
class Separator:
    """A separator line between chapters."""


@dataclass
class PartTitle:
    """A title heading a part of the book."""

    title: str = ""


BookItem = Union[Chapter, Separator, PartTitle]


def _item_to_dict(item: BookItem) -> Any:
    if isinstance(item, Chapter):
        return {"Chapter": item.to_dict()}
    if isinstance(item, PartTitle):
        return {"PartTitle": item.title}
    return "Separator"


def _item_from_dict(data: Any) -> BookItem:
    if data == "Separator":
        return Separator()
    if isinstance(data, Mapping) and len(data) == 1:
        ((kind, value),) = data.items()
        if kind == "Chapter":
            return Chapter.from_dict(value)
        if kind == "PartTitle":
            return PartTitle(str(value))
    raise JournalError(f"unknown book item {data!r}")


def _section_number(item: BookItem) -> SectionNumber | None:
    return item.number if isinstance(item, Chapter) else None


def _root_num(item: BookItem) -> int:
    number = _section_number(item)
    value = None if number is None else number.root_value()
    return 0 if value is None else value


@dataclass
class Book:
    """The whole book: a list of top-level items."""

    sections: list[BookItem] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def push_item(self, item: BookItem) -> "Book":
        self.sections.append(item)
        return self

    def max_section_number(self) -> SectionNumber | None:
        """Number of the top-level item with the highest root number."""
        if not self.sections:
            return None
        best = max(reversed(self.sections), key=_root_num)
        number = _section_number(best)
        return None if number is None else number.copy()

    def to_dict(self) -> dict[str, Any]:
        data = {"sections": [_item_to_dict(item) for item in self.sections]}
        data.update(self.extra)
        data.setdefault("__non_exhaustive", None)
        return data

    @staticmethod
    def from_dict(data: Any) -> "Book":
        if not isinstance(data, Mapping):
            raise JournalError("book must be an object")
        sections = data.get("sections") or []
        if not isinstance(sections, list):
            raise JournalError("book sections must be a list")
        extra = {k: v for k, v in data.items() if k != "sections"}
        return Book([_item_from_dict(item) for item in sections], extra)


@dataclass
class PreprocessorContext:
    """Information the book builder hands to a preprocessor."""

    root: Path
    config: dict[str, Any] = field(default_factory=dict)
    renderer: str = ""
    mdbook_version: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Any) -> "PreprocessorContext":
        if not isinstance(data, Mapping) or "root" not in data:
            raise JournalError("preprocessor context must be an object with a root")
        known = {"root", "config", "renderer", "mdbook_version"}
        return PreprocessorContext(
            root=Path(data["root"]),
            config=dict(data.get("config") or {}),
            renderer=str(data.get("renderer", "")),
            mdbook_version=str(data.get("mdbook_version", "")),
            extra={k: v for k, v in data.items() if k not in known},
        )


def parse_input(stream: TextIO) -> tuple[PreprocessorContext, Book]:
    """Read the ``[context, book]`` pair a preprocessor receives."""
    try:
        data = json.load(stream)
    except ValueError as exc:
        raise JournalError(f"unable to parse the input: {exc}") from exc
    if not isinstance(data, list) or len(data) != 2:
        raise JournalError("unable to parse the input: expected [context, book]")
    return PreprocessorContext.from_dict(data[0]), Book.from_dict(data[1])