"""Small helpers for string lists, chart files and log messages."""

from __future__ import annotations

from typing import Any, Iterable, Sequence


def string_slice_find(items: Sequence[str], value: str) -> int:
    """Return the first index of ``value`` in ``items``, or ``len(items)``."""
    return next((index for index, item in enumerate(items) if item == value), len(items))


def string_slice_contains(items: Iterable[str], value: str) -> bool:
    """Tell whether ``items`` contains ``value``."""
    return value in items


def find_cr_file(files: Sequence[Any], name: str) -> int:
    """Return the index of the file named ``<name>.yaml``, or -1."""
    wanted = f"{name}.yaml"
    return next((index for index, file in enumerate(files) if file.name == wanted), -1)


def string_slice_insert(items: Sequence[str], index: int, value: str) -> list[str]:
    """Return a list with ``value`` inserted before position ``index``."""
    if not 0 <= index <= len(items):
        raise IndexError(f"index {index} out of range for length {len(items)}")
    return [*items[:index], value, *items[index:]]


def warn_string(text: str) -> str:
    """Prefix ``text`` with a warning marker."""
    return f"WARNING: {text}"