"""Splitting of multi-document YAML manifests on ``---`` lines."""

from __future__ import annotations

from typing import Any, Iterator

_SEPARATOR = b"---"
_SPACE_CHARS = (
    "\t\n\v\f\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


class YAMLScanError(ValueError):
    """The manifest could not be read."""


def _as_bytes(data: Any) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    read = getattr(data, "read", None)
    if read is None:
        raise YAMLScanError(f"cannot read YAML from {type(data).__name__}")
    try:
        content = read()
    except OSError as exc:
        raise YAMLScanError(f"failed to read YAML: {exc}") from exc
    if isinstance(content, (str, bytes, bytearray, memoryview)):
        return _as_bytes(content)
    raise YAMLScanError(f"reader returned {type(content).__name__}, expected bytes")


def _lines(data: bytes) -> Iterator[bytes]:
    """Yield lines ending in a single newline; CRLF endings are normalised."""
    *complete, last = data.split(b"\n")
    for line in complete:
        yield (line[:-1] if line.endswith(b"\r") else line) + b"\n"
    if last:
        yield last + b"\n"


def _is_separator(line: bytes) -> bool:
    if not line.startswith(_SEPARATOR):
        return False
    rest = line[len(_SEPARATOR):].decode("utf-8", "replace")
    return not rest.rstrip(_SPACE_CHARS)


def _documents(data: bytes) -> Iterator[bytes]:
    buffer = bytearray()
    for line in _lines(data):
        if _is_separator(line) and buffer:
            yield bytes(buffer)
            buffer.clear()
            continue
        # A separator before any content stays part of the next document.
        buffer += line
    if buffer:
        yield bytes(buffer)


class YAMLScanner:
    """Iterate over the non-empty documents of a YAML manifest as bytes."""

    def __init__(self, data: Any) -> None:
        self._data = _as_bytes(data)

    def __iter__(self) -> Iterator[bytes]:
        return _documents(self._data)


def split_documents(data: Any) -> list[bytes]:
    """Return every document of a YAML manifest."""
    return list(YAMLScanner(data))