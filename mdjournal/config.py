"""Reading and updating the book configuration file."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .errors import JournalError
from .topic import Topic, TopicMap
from .variables import Variable

PREPROCESSOR_COMMAND = "mdbook-journal"
TOPICS_KEY = "preprocessor.journal.topics"


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise JournalError(f"cannot read configuration file `{path}`") from exc


def _parse(path: Path) -> tomlkit.TOMLDocument:
    text = _read(path)
    try:
        return tomlkit.parse(text)
    except TOMLKitError as exc:
        raise JournalError(f"invalid TOML format `{path}`") from exc


def _journal_settings(doc: tomlkit.TOMLDocument) -> MutableMapping:
    if "preprocessor" not in doc:
        doc["preprocessor"] = tomlkit.table()
    preprocessor = doc["preprocessor"]
    if not isinstance(preprocessor, MutableMapping):
        raise JournalError("preprocessor not a table")
    if "journal" not in preprocessor:
        preprocessor["journal"] = tomlkit.table()
    journal = preprocessor["journal"]
    if not isinstance(journal, MutableMapping):
        raise JournalError("preprocessor.journal not a table")
    journal["command"] = PREPROCESSOR_COMMAND
    return journal


def install(path) -> None:
    """Register the journal preprocessor in the configuration file."""
    path = Path(path)
    doc = _parse(path)
    _journal_settings(doc)
    try:
        path.write_text(tomlkit.dumps(doc), encoding="utf-8")
    except OSError as exc:
        raise JournalError(f"cannot write config file `{path}`") from exc


@dataclass
class BookConfig:
    """Parsed contents of a book configuration file."""

    data: dict[str, Any] = field(default_factory=dict)

    @property
    def src(self) -> Path:
        book = self.data.get("book")
        src = book.get("src") if isinstance(book, Mapping) else None
        return Path("src") if src is None else Path(src)

    def get(self, key: str) -> Any:
        """Look up a dotted key, returning None when it is absent."""
        value: Any = self.data
        for part in key.split("."):
            if not isinstance(value, Mapping) or part not in value:
                return None
            value = value[part]
        return value


def load(path) -> BookConfig:
    """Read the configuration file at ``path``."""
    return BookConfig(_parse(Path(path)).unwrap())


def _optional_str(data: Mapping, key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise JournalError(f"invalid type for `{key}`, expected a string")
    return value


@dataclass
class VariableDto:
    """Settings of one topic variable as written in the configuration."""

    required: bool = False
    default: str | None = None

    @staticmethod
    def from_mapping(data: Any) -> "VariableDto":
        if not isinstance(data, Mapping):
            raise JournalError("variable settings must be a table")
        required = data.get("required", False)
        if not isinstance(required, bool):
            raise JournalError("invalid type for `required`, expected a boolean")
        return VariableDto(required=required, default=_optional_str(data, "default"))

    def to_variable(self, name: str) -> Variable:
        return Variable(key=name, required=self.required, default=self.default)


@dataclass
class TopicDto:
    """Settings of one topic as written in the configuration."""

    virtual_root: Path | None = None
    source_root: Path | None = None
    path_mapping: str | None = None
    template: str | None = None
    leaf_template: str | None = None
    variables: dict[str, VariableDto] = field(default_factory=dict)

    @staticmethod
    def from_mapping(data: Any) -> "TopicDto":
        if not isinstance(data, Mapping):
            raise JournalError("topic settings must be a table")
        if "variables" not in data:
            raise JournalError("missing field `variables`")
        variables = data["variables"]
        if not isinstance(variables, Mapping):
            raise JournalError("invalid type for `variables`, expected a table")
        virtual_root = _optional_str(data, "virtual_root")
        source_root = _optional_str(data, "source_root")
        return TopicDto(
            virtual_root=None if virtual_root is None else Path(virtual_root),
            source_root=None if source_root is None else Path(source_root),
            path_mapping=_optional_str(data, "path_mapping"),
            template=_optional_str(data, "template"),
            leaf_template=_optional_str(data, "leaf_template"),
            variables={
                name: VariableDto.from_mapping(variables[name]) for name in sorted(variables)
            },
        )

    def to_topic(self, name: str) -> Topic:
        builder = Topic.builder(name)
        if self.source_root is not None:
            builder.with_source_root(self.source_root)
        if self.virtual_root is not None:
            builder.with_virtual_root(self.virtual_root)
        if self.path_mapping is not None:
            try:
                builder.with_path_mapping(self.path_mapping)
            except JournalError as exc:
                raise JournalError(f"mapping with {self.path_mapping}") from exc
        if self.template is not None:
            try:
                builder.with_template(self.template)
            except JournalError as exc:
                raise JournalError(f"template with: \n\n{self.template}") from exc
        if self.leaf_template is not None:
            try:
                builder.with_leaf_template(self.leaf_template)
            except JournalError as exc:
                raise JournalError(f"directory template: \n\n{self.leaf_template}") from exc
        for var_name, var in self.variables.items():
            builder.add_variable(var.to_variable(var_name))
        return builder.build()


def topic_map_from_config(config: BookConfig) -> TopicMap:
    """Build every topic declared in the configuration."""
    topics = TopicMap()
    settings = config.get(TOPICS_KEY)
    if settings is None:
        return topics
    if not isinstance(settings, Mapping):
        raise JournalError("loading topics dto: topics must be a table")
    for name in sorted(settings):
        try:
            dto = TopicDto.from_mapping(settings[name])
        except JournalError as exc:
            raise JournalError(f"loading topics dto: {name}: {exc}") from exc
        try:
            topics.insert(dto.to_topic(name))
        except JournalError as exc:
            raise JournalError(f"converting topics dto: {name}: {exc}") from exc
    return topics