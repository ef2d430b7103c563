"""Key/value storage kept in the data section of a ConfigMap."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from specialresource.kube import KubeError, NamespacedName, NotFoundError

CONFIG_MAP_KIND = "ConfigMap"

_log = logging.getLogger(__name__)


class ConfigMapClient(Protocol):
    """The part of a cluster client that the storage needs."""

    def get(self, kind: str, name: NamespacedName) -> dict[str, Any]:
        """Return the object of ``kind`` called ``name``; raise NotFoundError if absent."""

    def update(self, obj: dict[str, Any]) -> None:
        """Write ``obj`` back to the cluster."""


class StorageError(Exception):
    """A ConfigMap entry could not be read or written."""


class ConfigMapStorage:
    """Read, write and delete single entries of a ConfigMap."""

    def __init__(self, client: ConfigMapClient) -> None:
        self._client = client

    def check_config_map_entry(self, key: str, ins: NamespacedName) -> str:
        """Return the value stored under ``key``, or an empty string."""
        config_map = self._get_config_map(ins, "failed to get config map")
        return (config_map.get("data") or {}).get(key, "")

    def update_config_map_entry(self, key: str, value: str, ins: NamespacedName) -> None:
        """Store ``value`` under ``key``, writing only when it changes."""
        config_map = self._get_config_map(ins, "failed to get configmap")
        data = config_map.get("data")
        if data is None:
            data = config_map["data"] = {}
        if data.get(key, "") != value:
            data[key] = value
            self._update(config_map, f"failed to update configmap {ins}, key {key}")

    def delete_config_map_entry(self, key: str, ins: NamespacedName) -> None:
        """Remove ``key`` if it is present."""
        config_map = self._get_config_map(ins, "failed to get configmap")
        data = config_map.get("data") or {}
        if key in data:
            del data[key]
            config_map["data"] = data
            self._update(
                config_map, f"failed to update configmap {ins} with deleted entry {key}"
            )

    def _get_config_map(self, ins: NamespacedName, context: str) -> dict[str, Any]:
        try:
            return self._client.get(CONFIG_MAP_KIND, ins)
        except NotFoundError as exc:
            raise StorageError(
                f"{context} {ins}: failed to find configmap {ins}: {exc}"
            ) from exc
        except KubeError as exc:
            raise StorageError(
                f"{context} {ins}: failed to get configmap {ins}: {exc}"
            ) from exc

    def _update(self, config_map: dict[str, Any], context: str) -> None:
        try:
            self._client.update(config_map)
        except KubeError as exc:
            raise StorageError(f"{context}: {exc}") from exc
        _log.debug("updated configmap entry", extra={"context": context})