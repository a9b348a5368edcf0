"""Topics, dated markdown entries with front matter, and a preprocessor that adds them to a book."""

__version__ = "0.1.0"