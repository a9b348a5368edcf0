"""Sources of data for newly generated entries."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from typing import Any, TextIO

from .errors import JournalError
from .variables import Variable


class EntryGenerator:
    """Supplies the creation time and variable values for a new entry."""

    def created_at(self) -> datetime:
        return datetime.now(timezone.utc)

    def collect_value(self, variable: Variable) -> Any:
        raise NotImplementedError


class JsonEntryGenerator(EntryGenerator):
    """Reads variable values from a decoded JSON object."""

    def __init__(self, data: Any) -> None:
        self.data = data

    def collect_value(self, variable: Variable) -> str | None:
        if not isinstance(self.data, dict):
            raise JournalError(f"reading input {self.data!r}")
        value = self.data.get(variable.key)
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, dict):
            raise JournalError("invalid value of object")
        if isinstance(value, list):
            raise JournalError("invalid value of array")
        raise JournalError(f"invalid value {value!r}")


class CliEntryGenerator(EntryGenerator):
    """Prompts for each variable on a terminal."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def collect_value(self, variable: Variable) -> str | None:
        self.stdout.write(f"({variable.key})❯ ")
        self.stdout.flush()
        value = self.stdin.readline().strip()
        return value or None