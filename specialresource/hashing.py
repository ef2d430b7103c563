"""FNV-1a hashing of strings and of JSON-like objects, and hash annotations."""

from __future__ import annotations

import struct
from typing import Any

HASH_ANNOTATION = "specialresource.openshift.io/hash"

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MASK = (1 << 64) - 1
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


def _fnv(data: bytes) -> int:
    digest = _FNV_OFFSET
    for byte in data:
        digest = ((digest ^ byte) * _FNV_PRIME) & _MASK
    return digest


def _hash_ordered(a: int, b: int) -> int:
    return _fnv(struct.pack("<QQ", a, b))


def _hash_finish_unordered(a: int) -> int:
    return _fnv(struct.pack("<Q", a))


def fnv64a(text: str) -> str:
    """Return the 64-bit FNV-1a hash of ``text`` as lower-case hex."""
    return format(_fnv(text.encode("utf-8")), "x")


def hash_object(obj: Any) -> int:
    """Hash a JSON-like value; mappings hash the same whatever their order."""
    if obj is None:
        return _fnv(struct.pack("<q", 0))
    if isinstance(obj, bool):
        return _fnv(struct.pack("<b", 1 if obj else 0))
    if isinstance(obj, int):
        if not _INT64_MIN <= obj <= _INT64_MAX:
            raise ValueError(f"integer {obj} does not fit in 64 bits")
        return _fnv(struct.pack("<q", obj))
    if isinstance(obj, float):
        return _fnv(struct.pack("<d", obj))
    if isinstance(obj, str):
        return _fnv(obj.encode("utf-8"))
    if isinstance(obj, dict):
        combined = 0
        for key, value in obj.items():
            combined ^= _hash_ordered(hash_object(key), hash_object(value))
        return _hash_finish_unordered(combined)
    if isinstance(obj, (list, tuple)):
        combined = 0
        for item in obj:
            combined = _hash_ordered(combined, hash_object(item))
        return combined
    raise TypeError(f"unknown kind to hash: {type(obj).__name__}")


def _describe(obj: dict) -> str:
    metadata = obj.get("metadata") or {}
    return f"{obj.get('kind', '')} {metadata.get('namespace', '')}/{metadata.get('name', '')}"


def _hash_or_raise(obj: dict, what: str) -> int:
    try:
        return hash_object(obj)
    except (TypeError, ValueError) as exc:
        raise type(exc)(f"failed to hash {what} {_describe(obj)}: {exc}") from exc


def annotate(obj: dict) -> None:
    """Store the hash of ``obj`` in its own hash annotation."""
    digest = _hash_or_raise(obj, "object")
    metadata = obj.setdefault("metadata", {})
    annotations = dict(metadata.get("annotations") or {})
    annotations[HASH_ANNOTATION] = str(digest)
    metadata["annotations"] = annotations


def annotation_equal(new: dict, old: dict) -> bool:
    """Tell whether the hash annotation of ``new`` matches the hash of ``old``."""
    digest = _hash_or_raise(old, "old object")
    annotations = (new.get("metadata") or {}).get("annotations") or {}
    return annotations.get(HASH_ANNOTATION, "") == str(digest)