"""A small handlebars-style template engine."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Callable

from .errors import TemplateError

_TAG = re.compile(r"\{\{\{(.*?)\}\}\}|\{\{(.*?)\}\}", re.S)
_ARG = re.compile(r'"[^"]*"|\'[^\']*\'|\S+')
_WORD = re.compile(r"[A-Z]+(?![a-z])[0-9]*|[A-Z]?[a-z]+[0-9]*|[0-9]+")
_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "`": "&#x60;",
    "=": "&#x3D;",
}
_BLOCK_HELPERS = {"if", "unless", "each", "with"}


def kebab_case(text: str) -> str:
    """Lower-case the words of ``text`` and join them with hyphens."""
    return "-".join(word.lower() for word in _WORD.findall(str(text)))


def _snake_case(text: str) -> str:
    return "_".join(word.lower() for word in _WORD.findall(str(text)))


_HELPERS: dict[str, Callable[..., Any]] = {
    "kebabCase": kebab_case,
    "snakeCase": _snake_case,
    "lowercase": lambda text: str(text).lower(),
    "uppercase": lambda text: str(text).upper(),
}


@dataclass
class _Var:
    args: list[str]
    escape: bool


@dataclass
class _Block:
    name: str
    args: list[str]
    body: list = field(default_factory=list)
    inverse: list = field(default_factory=list)
    in_inverse: bool = False

    def add(self, node) -> None:
        (self.inverse if self.in_inverse else self.body).append(node)


@dataclass
class _Frame:
    value: Any
    parent: "_Frame | None" = None
    locals: dict = field(default_factory=dict)


def _parse(source: str) -> list:
    root = _Block("", [])
    stack = [root]
    pos = 0
    for match in _TAG.finditer(source):
        if match.start() > pos:
            stack[-1].add(source[pos:match.start()])
        pos = match.end()
        if match.group(1) is not None:
            args = _ARG.findall(match.group(1).strip())
            if not args:
                raise TemplateError("empty expression")
            stack[-1].add(_Var(args, escape=False))
            continue
        body = match.group(2).strip()
        if body.startswith("!"):
            continue
        if body.startswith("#"):
            args = _ARG.findall(body[1:])
            if not args or args[0] not in _BLOCK_HELPERS:
                raise TemplateError(f"unknown block helper in {{{{{body}}}}}")
            block = _Block(args[0], args[1:])
            stack[-1].add(block)
            stack.append(block)
        elif body.startswith("/"):
            name = body[1:].strip()
            if len(stack) == 1 or stack[-1].name != name:
                raise TemplateError(f"unexpected closing tag {{{{/{name}}}}}")
            stack.pop()
        elif body == "else":
            if len(stack) == 1:
                raise TemplateError("{{else}} outside of a block")
            stack[-1].in_inverse = True
        else:
            args = _ARG.findall(body)
            if not args:
                raise TemplateError("empty expression")
            stack[-1].add(_Var(args, escape=True))
    if len(stack) > 1:
        raise TemplateError(f"unclosed block {{{{#{stack[-1].name}}}}}")
    if pos < len(source):
        root.add(source[pos:])
    return root.body


def _lookup(path: str, frame: _Frame) -> Any:
    while path.startswith("../"):
        path = path[3:]
        if frame.parent is not None:
            frame = frame.parent
    if path.startswith("@"):
        return frame.locals.get(path[1:])
    if path in ("this", "."):
        return frame.value
    if path.startswith("this."):
        path = path[5:]
    value = frame.value
    for segment in path.split("."):
        if isinstance(value, dict):
            value = value.get(segment)
        elif isinstance(value, (list, tuple)) and segment.isdigit():
            index = int(segment)
            value = value[index] if index < len(value) else None
        else:
            value = getattr(value, segment, None) if value is not None else None
        if value is None:
            return None
    return value


def _literal(token: str, frame: _Frame) -> Any:
    if len(token) >= 2 and token[0] == token[-1] and token[0] in "\"'":
        return token[1:-1]
    if token == "true":
        return True
    if token == "false":
        return False
    if token in ("null", "undefined"):
        return None
    if re.fullmatch(r"-?\d+", token):
        return int(token)
    return _lookup(token, frame)


def _evaluate(args: list[str], frame: _Frame) -> Any:
    name, rest = args[0], args[1:]
    if name in _HELPERS:
        values = [_literal(arg, frame) for arg in rest]
        try:
            return _HELPERS[name](*("" if v is None else _stringify(v) for v in values))
        except TypeError as exc:
            raise TemplateError(f"wrong arguments for helper {name}") from exc
    if rest:
        raise TemplateError(f"helper not defined: {name}")
    return _literal(name, frame)


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(v) for v in value)
    if isinstance(value, dict):
        return "[object]"
    if isinstance(value, PurePath):
        return value.as_posix()
    return str(value)


def _truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None or value == "" or value == 0:
        return False
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return True


def _render(nodes: list, frame: _Frame, out: list[str]) -> None:
    for node in nodes:
        if isinstance(node, str):
            out.append(node)
        elif isinstance(node, _Var):
            text = _stringify(_evaluate(node.args, frame))
            if node.escape:
                text = "".join(_ESCAPES.get(ch, ch) for ch in text)
            out.append(text)
        else:
            _render_block(node, frame, out)


def _render_block(block: _Block, frame: _Frame, out: list[str]) -> None:
    if len(block.args) != 1:
        raise TemplateError(f"block {block.name} takes exactly one argument")
    value = _evaluate(block.args, frame)
    if block.name == "if":
        _render(block.body if _truthy(value) else block.inverse, frame, out)
    elif block.name == "unless":
        _render(block.inverse if _truthy(value) else block.body, frame, out)
    elif block.name == "with":
        if _truthy(value):
            _render(block.body, _Frame(value, frame), out)
        else:
            _render(block.inverse, frame, out)
    else:
        if isinstance(value, dict):
            items = list(value.items())
        elif isinstance(value, (list, tuple)):
            items = list(enumerate(value))
        else:
            items = []
        if not items:
            _render(block.inverse, frame, out)
            return
        last = len(items) - 1
        for position, (key, item) in enumerate(items):
            locals_ = {
                "index": position,
                "key": key,
                "first": position == 0,
                "last": position == last,
            }
            _render(block.body, _Frame(item, frame, locals_), out)


class Template:
    """A compiled template rendered against plain data."""

    def __init__(self, source: str) -> None:
        self.source = source
        self._nodes = _parse(source)

    def render(self, data: Any) -> str:
        out: list[str] = []
        _render(self._nodes, _Frame(data), out)
        return "".join(out)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source!r})"


_DEFAULT_DIRECTORY_SOURCE = (
    "# {{path}}\n\n"
    "{{#each entries}}"
    "* [{{#if meta.title}}{{meta.title}}{{else}}Untitled{{/if}}](/{{virtual_path}})\n"
    "{{/each}}"
)


class DirectoryTemplate:
    """Template for the index page of a directory holding entries."""

    def __init__(self, source: str | None = None) -> None:
        self.template = Template(_DEFAULT_DIRECTORY_SOURCE if source is None else source)

    def generate_content(self, data: Any) -> str:
        return self.template.render(data)