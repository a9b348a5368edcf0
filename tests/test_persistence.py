from datetime import datetime, timezone

import pytest

from mdjournal.entry import Entry
from mdjournal.errors import JournalError
from mdjournal.persistence import (
    AllEntries,
    FilePersistence,
    ForTopic,
    decode,
    encode,
)
from mdjournal.topic import Topic


@pytest.fixture
def entry():
    return (
        Entry.builder("test")
        .add_meta_value("title", "Test Blog")
        .created_at(datetime(2024, 7, 15, 16, 20, tzinfo=timezone.utc))
        .build()
    )


def test_encode_layout(entry):
    assert encode(entry) == (
        "---\n"
        "CREATED_AT: 2024-07-15T16:20:00+00:00\n"
        "TOPIC: test\n"
        "title: Test Blog\n"
        "---\n"
    )


def test_round_trip_keeps_fields(entry):
    entry.content = "Hello\n\nworld\n"
    entry.meta["day"] = "2024-07-15"
    decoded = decode(encode(entry))
    assert decoded.topic_name == entry.topic_name
    assert decoded.created_at == entry.created_at
    assert decoded.content == entry.content
    assert decoded.meta == entry.meta
    assert decoded.file_location is None


def test_round_trip_empty_meta():
    original = (
        Entry.builder("notes")
        .created_at(datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        .build()
    )
    decoded = decode(encode(original))
    assert decoded.meta == {}
    assert decoded.created_at == original.created_at


def test_decode_accepts_zulu_and_ignores_non_string_keys():
    text = "---\nCREATED_AT: 2024-07-15T16:20:00Z\nTOPIC: t\n1: one\nname: x\n---\nbody"
    decoded = decode(text)
    assert decoded.created_at == datetime(2024, 7, 15, 16, 20, tzinfo=timezone.utc)
    assert decoded.meta == {"name": "x"}
    assert decoded.content == "body"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "no front matter here",
        "---\nCREATED_AT: 2024-07-15T16:20:00+00:00\nTOPIC: t\n",
        "---\nTOPIC: t\n---\n",
        "---\nCREATED_AT: 2024-07-15T16:20:00+00:00\n---\n",
        "---\nCREATED_AT: not-a-date\nTOPIC: t\n---\n",
        "---\nCREATED_AT: 5\nTOPIC: t\n---\n",
        "---\nCREATED_AT: 2024-07-15T16:20:00+00:00\nTOPIC: [a]\n---\n",
    ],
)
def test_decode_errors(text):
    with pytest.raises(JournalError):
        decode(text)


def test_persist_and_fetch(tmp_path, entry):
    store = FilePersistence(tmp_path)
    target = tmp_path / "deep" / "dir" / "entry.md"
    store.persist(target, store.serialize(entry))
    assert target.is_file()
    fetched = store.fetch(target)
    assert fetched.file_location == target
    assert fetched.meta == entry.meta
    assert fetched.created_at == entry.created_at


def test_load_missing_file(tmp_path):
    with pytest.raises(JournalError):
        FilePersistence(tmp_path).load(tmp_path / "missing.md")


def test_execute_filters_by_topic_and_extension(tmp_path, entry):
    store = FilePersistence(tmp_path)
    data = store.serialize(entry)
    store.persist(tmp_path / "test" / "a.md", data)
    store.persist(tmp_path / "test" / "notes.txt", "plain")
    store.persist(tmp_path / "other" / "b.md", data)
    topic = Topic.builder("test").build()

    for_topic = store.execute(ForTopic(topic))
    assert [path for path, _ in for_topic] == [tmp_path / "test" / "a.md"]
    assert for_topic[0][1] == data

    everything = store.execute(AllEntries())
    assert sorted(path for path, _ in everything) == sorted(
        [tmp_path / "test" / "a.md", tmp_path / "other" / "b.md"]
    )


def test_query_sets_file_locations(tmp_path, entry):
    store = FilePersistence(tmp_path)
    path = tmp_path / "test" / "a.md"
    store.persist(path, store.serialize(entry))
    entries = store.query(AllEntries())
    assert len(entries) == 1
    assert entries[0].file_location == path
    assert entries[0].meta_value("title") == entry.meta_value("title")


def test_query_on_missing_directory(tmp_path):
    store = FilePersistence(tmp_path / "absent")
    assert store.query(AllEntries()) == []
    assert store.execute(ForTopic(Topic.builder("x").build())) == []