"""Shared cluster object identifiers and client errors."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NamespacedName:
    """Namespace and name that together identify a cluster object."""

    namespace: str = ""
    name: str = ""

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


class KubeError(Exception):
    """Base class for errors reported by a cluster client."""


class NotFoundError(KubeError):
    """The requested object does not exist."""


class AlreadyExistsError(KubeError):
    """The object being created already exists."""