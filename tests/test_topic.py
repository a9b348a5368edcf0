from datetime import datetime, timezone
from pathlib import Path

import pytest

from mdjournal.entry import Entry
from mdjournal.errors import JournalError
from mdjournal.generation import JsonEntryGenerator
from mdjournal.topic import PathMapping, Topic, TopicMap
from mdjournal.variables import Variable


@pytest.fixture
def entry():
    return (
        Entry.builder("test")
        .add_meta_value("title", "Test Blog")
        .created_at(datetime(2024, 7, 15, 16, 20, 0, tzinfo=timezone.utc))
        .build()
    )


class _Fixed(JsonEntryGenerator):
    def created_at(self):
        return datetime(2024, 10, 19, 16, 20, 0, tzinfo=timezone.utc)


def test_mapping_works(entry):
    assert PathMapping("%Y/%B/{{kebabCase title}}").map(entry) == Path("2024/July/test-blog.md")


def test_default_mapping_virtual_path(entry):
    topic = Topic.builder("test").build()
    assert topic.virtual_path(entry) == Path("test/2024/July/15-16-20-00-test-blog.md")


def test_source_root_override(entry):
    topic = Topic.builder("test").with_source_root("src").with_path_mapping("{{title}}").build()
    assert topic.source_path(entry) == Path("src/Test Blog.md")


def test_generate_entry():
    topic = Topic.builder("code-blog").add_variable(Variable("title", required=True)).build()
    entry = topic.generate_entry(_Fixed({"title": "Test Entry"}))
    assert entry.topic_name == "code-blog"
    assert entry.created_at.year == 2024
    assert entry.created_at.month == 10
    assert entry.meta_value("title") == "Test Entry"
    assert entry.content == ""


def test_generate_required_missing():
    topic = Topic.builder("t").add_variable(Variable("title", required=True)).build()
    with pytest.raises(JournalError):
        topic.generate_entry(_Fixed({}))


def test_generate_uses_default_and_template():
    topic = (
        Topic.builder("t")
        .add_variable(Variable("title", required=True, default="Untitled"))
        .add_variable(Variable("opt"))
        .with_template("# {{title}}")
        .build()
    )
    entry = topic.generate_entry(_Fixed({}))
    assert entry.content == "# Untitled"
    assert entry.meta_value("opt") is None


def test_topic_map():
    tmap = TopicMap().insert(Topic.builder("b").build()).insert(Topic.builder("a").build())
    assert [t.name for t in tmap] == ["a", "b"]
    assert tmap.find("a").name == "a"
    assert tmap.find("z") is None
    with pytest.raises(JournalError):
        tmap.insert(Topic.builder("a").build())