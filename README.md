# mdjournal

A journaling system for mdBook-style books. You declare *topics* in
`book.toml` and create dated markdown entries for them from the command
line. A preprocessor then adds each topic to the book as a chapter, with
the entries nested by directory (by default year, then month).

## Installation

```
pip install mdjournal
```

This installs the `mdbook-journal` command.

## Configuring topics

Topics live under `preprocessor.journal.topics` in `book.toml`:

```toml
[book]
src = "src"

[preprocessor.journal]
command = "mdbook-journal"

[preprocessor.journal.topics.code-blog]
path_mapping = "%Y/%B/%d-%H-%M-%S-{{kebabCase title}}"
template = "# {{title}}\n"

[preprocessor.journal.topics.code-blog.variables.title]
required = true
```

Entries are stored below the book's `src` directory (`book.src`, which
defaults to `src`). The settings of a topic are:

- `variables` (required, may be an empty table): the values collected for
  each new entry, in key order. Each one may set `required` (a boolean) and
  `default` (a string). A required variable with no value takes its default.
  If it has no default, creating the entry fails with `<key> is required`.
  An optional variable with no value is left out.
- `source_root`: where entries are saved, relative to `src`. It defaults
  to the topic name.
- `virtual_root`: where entries appear in the generated book. It defaults
  to the topic name. The directory chapters are built under the topic name,
  so a `virtual_root` whose first segment is not the topic name makes
  processing fail.
- `path_mapping`: the template for an entry's file path. It is rendered
  with the entry's variables, then passed through `strftime` with the
  entry's creation time (UTC). Its extension is set to `.md`. The default
  is `%Y/%B/%d-%H-%M-%S-{{kebabCase title}}`.
- `template`: the starting content of a new entry. It defaults to empty.
- `leaf_template`: the template for the index page of a directory that
  holds only entries. It receives `path` and `entries`. Each entry has
  `topic`, `created_at`, `file_loc`, `virtual_path`, `meta` and `content`.
  By default the page lists each entry's title and links to its virtual
  path.

`path_mapping` and `template` can also use `CREATED_AT`, which is the
creation time written as `YYYY-MM-DD HH:MM:SS UTC`.

### Templates

Templates use a small handlebars-style syntax:

- `{{name}}` is HTML-escaped. `{{{name}}}` is not.
- Dotted paths (`meta.title`), `this`, `../` and `@index`, `@key`,
  `@first`, `@last` inside `each`.
- Block helpers `#if`, `#unless`, `#each` and `#with`, each with `{{else}}`.
- Helpers `kebabCase`, `snakeCase`, `lowercase` and `uppercase`.
- Comments written as `{{! ... }}`.

## Entry files

Each entry is a markdown file with YAML front matter:

```
---
CREATED_AT: 2024-10-19T16:20:00+00:00
TOPIC: code-blog
title: Test Entry
---
# Test Entry
```

The variables are written in key order after `CREATED_AT` and `TOPIC`.
Everything after the closing `---` line is the entry's content.

## Command line

`mdbook-journal` takes `-c/--config` (default `book.toml`) and `-V/--version`.

Create a new entry. You are prompted with `(key)❯ ` for each variable, and
an empty answer means no value:

```
mdbook-journal new code-blog
```

Or supply the values as a JSON object on standard input. Strings are taken
as they are. Numbers and booleans are turned into text. `null` counts as no
value. Objects and arrays are rejected:

```
echo '{"title": "Hello World"}' | mdbook-journal new code-blog --input json
```

The path of the new file is printed as `Entry Created: <path>`.

List the entry files of a topic:

```
mdbook-journal ls code-blog
```

Run with no subcommand, or with `process`, to act as a preprocessor. The
program reads a `[context, book]` JSON pair from standard input, loads
`book.toml` from the context's `root`, and writes the updated book as JSON
to standard output. Topics are added in name order. Their chapters are
numbered after the highest top-level number already in the book, and
entries are listed newest first. `supports <renderer>` accepts every
renderer.

On failure the command prints `Error: <message>` to standard error and
exits with status 1.

## Library use

```python
from mdjournal.journal import Journal, CliLoader
from mdjournal.generation import JsonEntryGenerator

journal = Journal.load(CliLoader(), "book.toml")
topic = journal.with_topic("code-blog")
entry = topic.generate_entry(JsonEntryGenerator({"title": "Hello World"}))
path = journal.persist_entry(entry)

for item in journal.entries_for_topic("code-blog"):
    print(item.file_location, item.meta_value("title"))
```

The modules:

- `mdjournal.journal`: `Journal`, `JournalLoader` and `CliLoader`.
- `mdjournal.topic`: `Topic`, `TopicBuilder`, `TopicMap`, `PathMapping`
  and `ContentTemplate`.
- `mdjournal.entry`: `Entry` and `EntryBuilder`.
- `mdjournal.variables`: `Variable` and `VariableMap`.
- `mdjournal.generation`: `EntryGenerator`, `JsonEntryGenerator` and
  `CliEntryGenerator`.
- `mdjournal.persistence`: `FilePersistence`, `encode` and `decode`, and
  the `AllEntries` and `ForTopic` queries.
- `mdjournal.config`: `load`, `install`, `BookConfig` and
  `topic_map_from_config`.
- `mdjournal.index`: `DirIndex`.
- `mdjournal.book`: `Book`, `Chapter`, `SectionNumber` and `parse_input`.
- `mdjournal.preprocessor`: `SimpleDirPreprocessor` (the one the command
  uses) and `NaivePreprocessor`, which adds one flat chapter per topic.
- `mdjournal.templating`: `Template`, `DirectoryTemplate` and `kebab_case`.

Errors are raised as `mdjournal.errors.JournalError`. Template errors use
its subclass `TemplateError`.

## What it does not do

- No command registers the preprocessor in `book.toml`. Call
  `mdjournal.config.install(path)` or `Journal.install(CliLoader(), path)`.
  It adds `[preprocessor.journal]` with `command = "mdbook-journal"` and
  keeps the rest of the file as it was.
- It does not build or render books. It only adds chapters to the book JSON
  it is given.
- `supports` does not check the renderer.