"""Observation of extra cluster resources that trigger module reconciliation."""

from __future__ import annotations

import dataclasses
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Protocol

from specialresource.jsonpath import JSONPathError, JSONPathKeyError, compile_path, lookup
from specialresource.kube import NamespacedName
from specialresource.utils import warn_string

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class WatchedResource:
    """An object, or every object of a kind when name and namespace are empty."""

    api_version: str
    kind: str
    name: str = ""
    namespace: str = ""


@dataclass(frozen=True)
class WatchedResourceWithPath:
    """A watched resource together with the path of the value observed in it."""

    resource: WatchedResource
    path: str


@dataclass(frozen=True)
class ModuleWatch:
    """One watch entry of a special resource module."""

    api_version: str
    kind: str
    name: str = ""
    namespace: str = ""
    path: str = ""


@dataclass
class SpecialResourceModule:
    """The parts of a special resource module that the watcher uses."""

    name: str
    namespace: str = ""
    watch: list[ModuleWatch] = field(default_factory=list)


class Controller(Protocol):
    def watch(
        self, template: dict[str, Any], handler: Callable[[Any], list[NamespacedName]]
    ) -> None: ...


@dataclass
class _PathData:
    """Last seen value at a path and the modules to reconcile when it changes."""

    data: list[str] | None = None
    triggers: list[NamespacedName] = field(default_factory=list)


def module_watch_from_resource(wrp: WatchedResourceWithPath) -> ModuleWatch:
    """Build the module watch entry that describes ``wrp``."""
    resource = wrp.resource
    return ModuleWatch(
        api_version=resource.api_version,
        kind=resource.kind,
        name=resource.name,
        namespace=resource.namespace,
        path=wrp.path,
    )


def api_version_of(group: str, version: str) -> str:
    """Join an API group and version as ``group/version``, or the version alone."""
    return f"{group}/{version}" if group else version


def get_json_path(path: str, obj: Mapping[str, Any]) -> list[str] | None:
    """Return the strings found at ``path`` in ``obj``; None when a key is missing."""
    steps = compile_path(path)
    try:
        match = lookup(steps, obj)
    except JSONPathKeyError:
        return None
    except JSONPathError as exc:
        metadata = obj.get("metadata") or {}
        raise JSONPathError(
            f"failed to lookup object {metadata.get('namespace', '')}/"
            f"{metadata.get('name', '')}: {exc}"
        ) from exc
    if isinstance(match, list):
        if not all(isinstance(element, str) for element in match):
            raise JSONPathError("error converting result to string")
        return list(match)
    if isinstance(match, str):
        return [match]
    raise JSONPathError("unsupported result")


def _are_equal(first: list[str] | None, second: list[str] | None) -> bool:
    return sorted(first or []) == sorted(second or [])


class Watcher:
    """Keep the set of watched resources in line with special resource modules."""

    def __init__(self, controller: Controller) -> None:
        self._controller = controller
        self._resource_paths: dict[WatchedResource, list[str]] = {}
        self._resource_data: dict[WatchedResourceWithPath, _PathData] = {}
        self._lock = threading.RLock()

    def reconcile_watches(self, module: SpecialResourceModule) -> None:
        """Drop watches ``module`` no longer wants and add the ones it asks for."""
        trigger = NamespacedName(namespace=module.namespace, name=module.name)

        with self._lock:
            for wrp, path_data in list(self._resource_data.items()):
                wanted = module_watch_from_resource(wrp) in module.watch
                if not wanted and trigger in path_data.triggers:
                    _log.info("removing watched resource %s for %s", wrp, trigger)
                    path_data.triggers.remove(trigger)

                if not path_data.triggers:
                    _log.info("empty list of CR to trigger for resource %s", wrp)
                    del self._resource_data[wrp]
                    paths = self._resource_paths.get(wrp.resource)
                    if paths is not None:
                        if wrp.path in paths:
                            paths.remove(wrp.path)
                        if not paths:
                            _log.info("empty list of paths to observe %s", wrp.resource)
                            del self._resource_paths[wrp.resource]

        for watch in module.watch:
            try:
                self._try_add_resource_to_watch(watch, trigger)
            except Exception as exc:
                raise RuntimeError(
                    f"failed to add resource {watch.namespace}/{watch.name} to watch: {exc}"
                ) from exc

    def _try_add_resource_to_watch(self, watch: ModuleWatch, trigger: NamespacedName) -> None:
        resource = WatchedResource(
            api_version=watch.api_version,
            kind=watch.kind,
            name=watch.name,
            namespace=watch.namespace,
        )
        if self.is_already_being_watched(resource, watch.path, trigger):
            return

        # Filtering happens in the mapper: several modules may depend on
        # different paths of one resource.
        template = {"apiVersion": resource.api_version, "kind": resource.kind}
        try:
            self._controller.watch(template, self.mapper)
        except Exception as exc:
            raise RuntimeError(f"failed to start watch for kind {resource.kind}: {exc}") from exc

        self.add_to_watched(resource, watch.path, trigger)
        _log.info("added resource to be watched kind=%s triggers=%s", resource.kind, trigger)

    def is_already_being_watched(
        self, resource: WatchedResource, path: str, trigger: NamespacedName
    ) -> bool:
        """Tell whether ``trigger`` is already reconciled on changes at ``path``."""
        with self._lock:
            path_data = self._resource_data.get(WatchedResourceWithPath(resource, path))
            return path_data is not None and trigger in path_data.triggers

    def add_to_watched(
        self, resource: WatchedResource, path: str, trigger: NamespacedName
    ) -> None:
        """Record that changes at ``path`` of ``resource`` reconcile ``trigger``."""
        with self._lock:
            paths = self._resource_paths.setdefault(resource, [])
            if path not in paths:
                paths.append(path)
            key = WatchedResourceWithPath(resource, path)
            self._resource_data.setdefault(key, _PathData()).triggers.append(trigger)

    def mapper(self, obj: Any) -> list[NamespacedName]:
        """Return the modules to reconcile because observed values in ``obj`` changed."""
        if not isinstance(obj, Mapping):
            _log.warning(
                warn_string("failed to convert incoming object to Unstructured: %s"),
                type(obj).__name__,
            )
            return []

        group, _, version = str(obj.get("apiVersion", "")).rpartition("/")
        resource = WatchedResource(api_version_of(group, version), str(obj.get("kind", "")))
        triggered: list[NamespacedName] = []

        with self._lock:
            paths = self._resource_paths.get(resource)
            if paths is None:
                metadata = obj.get("metadata") or {}
                resource = dataclasses.replace(
                    resource,
                    name=metadata.get("name", ""),
                    namespace=metadata.get("namespace", ""),
                )
                paths = self._resource_paths.get(resource)

            for path in list(paths or ()):
                try:
                    values = get_json_path(path, obj)
                except JSONPathError as exc:
                    _log.error("failed to obtain a value at path %s: %s", path, exc)
                    values = None

                path_data = self._resource_data.get(WatchedResourceWithPath(resource, path))
                if path_data is not None and not _are_equal(path_data.data, values):
                    triggered.extend(path_data.triggers)
                    path_data.data = values

        return triggered