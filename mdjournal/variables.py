"""Variables collected when an entry is created."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Variable:
    """A named value collected for a new entry."""

    key: str
    required: bool = False
    default: str | None = None

    def default_value(self) -> str | None:
        return None if self.default is None else str(self.default)


class VariableMap:
    """Variables indexed by key, iterated in key order."""

    def __init__(self) -> None:
        self._data: dict[str, Variable] = {}

    def insert(self, var: Variable) -> None:
        self._data[var.key] = var

    def get(self, key: str) -> Variable | None:
        return self._data.get(key)

    def __iter__(self) -> Iterator[Variable]:
        return iter([self._data[k] for k in sorted(self._data)])

    def __len__(self) -> int:
        return len(self._data)