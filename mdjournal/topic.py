"""Topics: collections of similar journal entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from .entry import Entry
from .errors import JournalError
from .generation import EntryGenerator
from .templating import DirectoryTemplate, Template
from .variables import Variable, VariableMap

DEFAULT_MAPPING = "%Y/%B/%d-%H-%M-%S-{{kebabCase title}}"


def _template_data(entry: Entry) -> dict[str, Any]:
    data = dict(entry.meta)
    data["CREATED_AT"] = entry.created_at.strftime("%Y-%m-%d %H:%M:%S UTC")
    return data


class PathMapping:
    """Maps an entry to a relative markdown file path."""

    def __init__(self, pattern: str) -> None:
        self.template = Template(pattern)

    def map(self, entry: Entry) -> Path:
        rendered = self.template.render(_template_data(entry))
        path = Path(entry.created_at.strftime(rendered))
        return path.with_suffix(".md") if path.name else path


class ContentTemplate:
    """Template for the initial content of a new entry."""

    def __init__(self, source: str = "") -> None:
        self.template = Template(source)

    def generate_content(self, entry: Entry) -> str:
        return self.template.render(_template_data(entry))


@dataclass
class Topic:
    """A named collection of entries sharing layout and variables."""

    name: str
    virtual_root: Path
    source_root: Path
    variables: VariableMap
    path_mapping: PathMapping
    content_template: ContentTemplate
    directory_template: DirectoryTemplate

    @staticmethod
    def builder(name: str) -> "TopicBuilder":
        return TopicBuilder(name)

    def virtual_path(self, entry: Entry) -> Path:
        return self.virtual_root / self.path_mapping.map(entry)

    def source_path(self, entry: Entry) -> Path:
        return self.source_root / self.path_mapping.map(entry)

    def generate_entry(self, adapter: EntryGenerator) -> Entry:
        builder = Entry.builder(self.name).created_at(adapter.created_at())
        for var in self.variables:
            value = adapter.collect_value(var)
            if value is not None:
                builder.add_meta_value(var.key, value)
            elif var.required:
                default = var.default_value()
                if default is None:
                    raise JournalError(f"{var.key} is required")
                builder.add_meta_value(var.key, default)
        content = self.content_template.generate_content(builder.entry)
        return builder.content(content).build()


class TopicBuilder:
    """Fluent construction of a :class:`Topic`."""

    def __init__(self, name: str) -> None:
        self.name = str(name)
        self.virtual_root = Path(self.name)
        self.source_root = Path(self.name)
        self.variables = VariableMap()
        self.path_mapping: PathMapping | None = None
        self.content_template = ContentTemplate()
        self.leaf_template = DirectoryTemplate()

    def with_source_root(self, source_root) -> "TopicBuilder":
        self.source_root = Path(source_root)
        return self

    def with_virtual_root(self, virtual_root) -> "TopicBuilder":
        self.virtual_root = Path(virtual_root)
        return self

    def with_path_mapping(self, mapping: str) -> "TopicBuilder":
        self.path_mapping = PathMapping(mapping)
        return self

    def with_template(self, template: str) -> "TopicBuilder":
        self.content_template = ContentTemplate(template)
        return self

    def with_leaf_template(self, template: str) -> "TopicBuilder":
        self.leaf_template = DirectoryTemplate(template)
        return self

    def add_variable(self, var: Variable) -> "TopicBuilder":
        self.variables.insert(var)
        return self

    def build(self) -> Topic:
        return Topic(
            name=self.name,
            virtual_root=self.virtual_root,
            source_root=self.source_root,
            variables=self.variables,
            path_mapping=self.path_mapping or PathMapping(DEFAULT_MAPPING),
            content_template=self.content_template,
            directory_template=self.leaf_template,
        )


@dataclass
class TopicMap:
    """Topics indexed by unique name, iterated in name order."""

    _map: dict[str, Topic] = field(default_factory=dict)

    def insert(self, topic: Topic) -> "TopicMap":
        if topic.name in self._map:
            raise JournalError(f"Topic with key {topic.name} already taken!")
        self._map[topic.name] = topic
        return self

    def find(self, name: str) -> Topic | None:
        return self._map.get(name)

    def __iter__(self) -> Iterator[Topic]:
        return iter([self._map[k] for k in sorted(self._map)])