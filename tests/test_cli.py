import io
import json
from pathlib import Path

import pytest

from mdjournal.cli import main
from mdjournal.persistence import decode

BOOK_TOML = """[book]
src = "src"

[preprocessor.journal.topics.notes.variables.title]
required = true
"""


@pytest.fixture
def config(tmp_path):
    path = tmp_path / "book.toml"
    path.write_text(BOOK_TOML, encoding="utf-8")
    return path


def _created_path(out):
    return Path(out.split("Entry Created: ")[1].strip())


def test_new_from_json(config, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"title": "Hello World"})))
    assert main(["--config", str(config), "new", "notes", "--input", "json"]) == 0
    path = _created_path(capsys.readouterr().out)
    assert path.is_file()
    assert path.suffix == ".md"
    assert (config.parent / "src" / "notes").resolve() in path.resolve().parents
    assert decode(path.read_text(encoding="utf-8")).meta_value("title") == "Hello World"


def test_new_interactive(config, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("Typed Title\n"))
    assert main(["--config", str(config), "new", "notes"]) == 0
    out = capsys.readouterr().out
    assert "(title)❯ " in out
    path = _created_path(out)
    assert decode(path.read_text(encoding="utf-8")).meta_value("title") == "Typed Title"


def test_ls_lists_created_entries(config, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"title": "Listed"})))
    assert main(["--config", str(config), "new", "notes", "-i", "json"]) == 0
    created = _created_path(capsys.readouterr().out)
    assert main(["--config", str(config), "ls", "notes"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [Path(line).resolve() for line in lines] == [created.resolve()]


def test_unknown_topic_fails(config, capsys):
    assert main(["--config", str(config), "ls", "nope"]) == 1
    assert "Topic Not Found [nope]" in capsys.readouterr().err


def test_missing_required_value_fails(config, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("{}"))
    assert main(["--config", str(config), "new", "notes", "--input", "json"]) == 1
    assert "title is required" in capsys.readouterr().err


def test_missing_config_fails(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "absent.toml"), "ls", "notes"]) == 1
    assert capsys.readouterr().err.startswith("Error:")


def test_supports_accepts_any_renderer(capsys):
    assert main(["supports", "html"]) == 0
    assert capsys.readouterr().out == ""


def test_process_adds_topic_chapter(config, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"title": "Processed"})))
    assert main(["--config", str(config), "new", "notes", "-i", "json"]) == 0
    capsys.readouterr()

    ctx = {"root": str(config.parent), "config": {}, "renderer": "html",
           "mdbook_version": "0.4.40", "__non_exhaustive": None}
    book = {"sections": [], "__non_exhaustive": None}
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps([ctx, book])))
    assert main([]) == 0
    result = json.loads(capsys.readouterr().out)
    chapter = result["sections"][0]["Chapter"]
    assert chapter["name"] == "notes"
    assert chapter["number"] == [1]
    leaf = chapter["sub_items"][0]["Chapter"]["sub_items"][0]["Chapter"]
    assert [c["Chapter"]["name"] for c in leaf["sub_items"]] == ["Processed"]


def test_process_rejects_bad_input(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("garbage"))
    assert main(["process"]) == 1
    assert "Error:" in capsys.readouterr().err