"""A small JSONPath evaluator for JSON-like data.

Paths start with ``$`` and are made of ``.key`` steps and bracket steps:
``[2]``, ``[-1]``, ``[0,2]``, ``[*]``, ``[1:3]`` (both ends included) and
filters such as ``[?(@.kind == 'Node')]`` or ``[?(@.name)]``.
"""

from __future__ import annotations

import operator
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Union


class JSONPathError(ValueError):
    """A path could not be compiled or evaluated."""


class JSONPathKeyError(JSONPathError):
    """A mapping along the path lacks the requested key."""


@dataclass(frozen=True)
class _Key:
    name: str


@dataclass(frozen=True)
class _Index:
    indices: tuple[int, ...]


@dataclass(frozen=True)
class _Range:
    start: int | None
    stop: int | None


@dataclass(frozen=True)
class _Operand:
    relative: bool
    steps: tuple


@dataclass(frozen=True)
class _Filter:
    left: _Operand
    op: str | None
    right: Any = None


_Step = Union[_Key, _Index, _Range, _Filter]

_NAME_RE = re.compile(r"[^.\[]+")
_FILTER_RE = re.compile(r"^(\S+?)\s*(==|!=|<=|>=|=~|<|>)\s*(.+)$", re.S)
_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def _closing_bracket(path: str, start: int) -> int:
    depth = 0
    quote: str | None = None
    for pos in range(start, len(path)):
        char = path[pos]
        if quote is not None:
            if char == quote:
                quote = None
            continue
        if char in "'\"":
            quote = char
        elif char in "[(":
            depth += 1
        elif char in "])":
            depth -= 1
            if depth == 0:
                if char != "]":
                    break
                return pos
    raise JSONPathError(f"unbalanced brackets in path {path!r}")


def _parse_int(text: str, path: str) -> int:
    try:
        return int(text.strip())
    except ValueError as exc:
        raise JSONPathError(f"invalid index {text!r} in path {path!r}") from exc


def _parse_operand(text: str) -> _Operand:
    if text.startswith("@"):
        return _Operand(True, compile_path("$" + text[1:]))
    if text.startswith("$"):
        return _Operand(False, compile_path(text))
    raise JSONPathError(f"filter operand must start with '@' or '$': {text!r}")


def _parse_literal(text: str) -> Any:
    if text.startswith(("@", "$")):
        return _parse_operand(text)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        return text[1:-1]
    if len(text) >= 2 and text[0] == text[-1] == "/":
        try:
            return re.compile(text[1:-1])
        except re.error as exc:
            raise JSONPathError(f"invalid regular expression {text!r}: {exc}") from exc
    keywords = {"true": True, "false": False, "null": None}
    if text in keywords:
        return keywords[text]
    for convert in (int, float):
        try:
            return convert(text)
        except ValueError:
            pass
    raise JSONPathError(f"invalid filter value {text!r}")


def _parse_filter(expr: str) -> _Filter:
    expr = expr.strip()
    match = _FILTER_RE.match(expr)
    if match is None:
        return _Filter(_parse_operand(expr), None)
    left, op, right = match.groups()
    return _Filter(_parse_operand(left), op, _parse_literal(right.strip()))


def _parse_bracket(content: str, path: str) -> _Step:
    content = content.strip()
    if not content:
        raise JSONPathError(f"empty brackets in path {path!r}")
    if content == "*":
        return _Range(None, None)
    if content.startswith("?(") and content.endswith(")"):
        return _parse_filter(content[2:-1])
    if len(content) >= 2 and content[0] == content[-1] and content[0] in "'\"":
        return _Key(content[1:-1])
    if ":" in content:
        start, stop = content.split(":", 1)
        return _Range(
            _parse_int(start, path) if start.strip() else None,
            _parse_int(stop, path) if stop.strip() else None,
        )
    return _Index(tuple(_parse_int(part, path) for part in content.split(",")))


def compile_path(path: str) -> tuple:
    """Compile ``path`` into a sequence of steps usable with :func:`lookup`."""
    if not path.startswith("$"):
        raise JSONPathError(f"path should start with '$': {path!r}")
    steps: list[_Step] = []
    pos = 1
    while pos < len(path):
        char = path[pos]
        if char == ".":
            pos += 1
            if path.startswith(".", pos):
                raise JSONPathError(f"recursive descent is not supported: {path!r}")
            match = _NAME_RE.match(path, pos)
            if match is None:
                raise JSONPathError(f"missing key after '.' in path {path!r}")
            steps.append(_Key(match.group()))
            pos = match.end()
        elif char == "[":
            end = _closing_bracket(path, pos)
            steps.append(_parse_bracket(path[pos + 1 : end], path))
            pos = end + 1
        else:
            raise JSONPathError(f"unexpected {char!r} at {pos} in path {path!r}")
    return tuple(steps)


def _get_key(obj: Any, name: str) -> Any:
    if obj is None:
        raise JSONPathError("get attribute from null object")
    if isinstance(obj, Mapping):
        if name not in obj:
            raise JSONPathKeyError(f"key error: {name} not found in object")
        return obj[name]
    if isinstance(obj, (list, tuple)):
        found = []
        for item in obj:
            try:
                found.append(_get_key(item, name))
            except JSONPathError:
                continue
        return found
    raise JSONPathError("object is not map")


def _get_index(obj: Any, index: int) -> Any:
    if not isinstance(obj, (list, tuple)):
        raise JSONPathError("object is not Slice")
    if not -len(obj) <= index < len(obj):
        raise JSONPathError(f"index out of range: len: {len(obj)}, idx: {index}")
    return obj[index]


def _get_range(obj: Any, start: int | None, stop: int | None) -> list:
    if not isinstance(obj, (list, tuple)):
        raise JSONPathError("object is not Slice")
    length = len(obj)
    first = 0 if start is None else (length + start if start < 0 else start)
    last = length - 1 if stop is None else stop
    end = length + last + 1 if last < 0 else last + 1
    if not 0 <= first < length:
        raise JSONPathError(f"index [from] out of range: len: {length}, from: {start}")
    if not 0 <= end <= length:
        raise JSONPathError(f"index [to] out of range: len: {length}, to: {stop}")
    return list(obj[first:end])


def _resolve(operand: _Operand, item: Any, root: Any) -> tuple[bool, Any]:
    try:
        return True, _evaluate(operand.steps, item if operand.relative else root, root)
    except JSONPathError:
        return False, None


def _matches(flt: _Filter, item: Any, root: Any) -> bool:
    found, left = _resolve(flt.left, item, root)
    if flt.op is None:
        return found and left is not None
    if not found:
        return False
    right = flt.right
    if isinstance(right, _Operand):
        found, right = _resolve(right, item, root)
        if not found:
            return False
    if flt.op == "=~":
        if not isinstance(left, str):
            return False
        pattern = right if isinstance(right, re.Pattern) else str(right)
        return re.search(pattern, left) is not None
    try:
        return bool(_COMPARISONS[flt.op](left, right))
    except TypeError:
        return False


def _get_filtered(obj: Any, flt: _Filter, root: Any) -> list:
    items: Iterable[Any]
    if isinstance(obj, Mapping):
        items = obj.values()
    elif isinstance(obj, (list, tuple)):
        items = obj
    else:
        raise JSONPathError("object is not Slice")
    return [item for item in items if _matches(flt, item, root)]


def _apply(step: _Step, obj: Any, root: Any) -> Any:
    if isinstance(step, _Key):
        return _get_key(obj, step.name)
    if isinstance(step, _Index):
        if len(step.indices) == 1:
            return _get_index(obj, step.indices[0])
        return [_get_index(obj, index) for index in step.indices]
    if isinstance(step, _Range):
        return _get_range(obj, step.start, step.stop)
    return _get_filtered(obj, step, root)


def _evaluate(steps: Iterable[_Step], obj: Any, root: Any) -> Any:
    current = obj
    for step in steps:
        current = _apply(step, current, root)
    return current


def lookup(path: str | tuple, obj: Any) -> Any:
    """Evaluate ``path`` (a string or a compiled path) against ``obj``."""
    steps = compile_path(path) if isinstance(path, str) else tuple(path)
    return _evaluate(steps, obj, obj)