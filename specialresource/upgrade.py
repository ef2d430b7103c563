"""Matching of the kernels running on nodes with driver-toolkit images."""

from __future__ import annotations

import dataclasses
import logging
import platform
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol

from specialresource.osversion import parse_os_info

_log = logging.getLogger(__name__)

_ARCH_ALIASES = {"amd64": "x86_64", "x64": "x86_64", "arm64": "aarch64"}


@dataclass
class DriverToolkitEntry:
    """Kernel and OS versions built into a driver-toolkit image."""

    image_url: str = ""
    kernel_full_version: str = ""
    rt_kernel_full_version: str = ""
    os_version: str = ""


@dataclass
class NodeVersion:
    """Versions running on a node and the driver toolkit that fits them."""

    os_version: str = ""
    os_major: str = ""
    os_major_minor: str = ""
    cluster_version: str = ""
    driver_toolkit: DriverToolkitEntry = field(default_factory=DriverToolkitEntry)


@dataclass(frozen=True)
class NodeInfo:
    """The system information a node reports."""

    name: str
    kernel_version: str
    os_image: str


class ClusterInfoError(Exception):
    """Node and driver-toolkit information could not be put together."""


class Registry(Protocol):
    def last_layer(self, image_url: str) -> Any: ...

    def extract_toolkit_release(self, layer: Any) -> DriverToolkitEntry: ...


class Cluster(Protocol):
    def get_dtk_images(self) -> list[str]: ...


def running_arch() -> str:
    """Return the machine architecture in kernel naming (e.g. ``x86_64``)."""
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


class ClusterInfo:
    """Collect per-kernel version information for the nodes of a cluster."""

    def __init__(self, registry: Registry, cluster: Cluster) -> None:
        self._registry = registry
        self._cluster = cluster
        self._cache: dict[str, DriverToolkitEntry] = {}

    def get_cluster_info(self, nodes: Iterable[NodeInfo]) -> dict[str, NodeVersion]:
        """Return a mapping of full kernel version to node version information."""
        try:
            info = self._node_version_info(nodes)
        except ClusterInfoError as exc:
            raise ClusterInfoError(f"failed to get nodes version list: {exc}") from exc

        try:
            dtk_images = self._cluster.get_dtk_images()
        except Exception as exc:
            raise ClusterInfoError(f"could not get DTK images: {exc}") from exc

        try:
            return self._driver_toolkit_version(dtk_images, info)
        except Exception as exc:
            raise ClusterInfoError(f"failed to extract dtk versions: {exc}") from exc

    def get_dtk_data(self, image_url: str) -> DriverToolkitEntry:
        """Return the toolkit entry of an image, reading the registry only once."""
        cached = self._cache.get(image_url)
        if cached is not None:
            _log.info("Using DTK image from cache imageURL=%s dtk=%s", image_url, cached)
            return cached
        layer = self._registry.last_layer(image_url)
        if layer is None:
            raise ClusterInfoError(f"cannot extract last layer for DTK from {image_url}")
        dtk = self._registry.extract_toolkit_release(layer)
        self._cache[image_url] = dtk
        _log.info("Added DTK image to cache imageURL=%s dtk=%s", image_url, dtk)
        return dtk

    @staticmethod
    def _node_version_info(nodes: Iterable[NodeInfo]) -> dict[str, NodeVersion]:
        info: dict[str, NodeVersion] = {}
        for node in nodes:
            if not node.kernel_version:
                raise ClusterInfoError(f"kernel version label not found in node {node.name}")
            try:
                parsed = parse_os_info(node.os_image)
            except ValueError as exc:
                raise ClusterInfoError(
                    f"failed to parse node {node.name} info os image: {exc}"
                ) from exc
            info[node.kernel_version] = NodeVersion(
                os_version=parsed.os_version,
                cluster_version=parsed.cluster_version,
                os_major="rhel" + parsed.os_major,
                os_major_minor="rhel" + parsed.os_version,
            )
        return info

    def _driver_toolkit_version(
        self, dtk_images: list[str], info: dict[str, NodeVersion]
    ) -> dict[str, NodeVersion]:
        if not dtk_images:
            return info
        image_url = dtk_images[0]
        try:
            dtk = self.get_dtk_data(image_url)
        except Exception as exc:
            raise ClusterInfoError(
                f"failed to extact dtk data from image url {image_url}: {exc}"
            ) from exc
        # Only kernels that are running get toolkit information attached.
        return self._update_info(info, dtk, image_url)

    @staticmethod
    def _update_info(
        info: dict[str, NodeVersion], dtk: DriverToolkitEntry, image_url: str
    ) -> dict[str, NodeVersion]:
        dtk = dataclasses.replace(dtk, image_url=image_url)
        arch = running_arch()
        if arch not in dtk.kernel_full_version:
            dtk.kernel_full_version = f"{dtk.kernel_full_version}.{arch}"
            dtk.rt_kernel_full_version = f"{dtk.rt_kernel_full_version}.{arch}"

        matched = False
        for kernel in (dtk.kernel_full_version, dtk.rt_kernel_full_version):
            node_version = info.get(kernel)
            if node_version is None:
                continue
            if node_version.os_version != dtk.os_version:
                raise ClusterInfoError(
                    f"os version mismatch Node: {node_version.os_version} "
                    f"vs. DTK: {dtk.os_version}"
                )
            info[kernel] = dataclasses.replace(node_version, driver_toolkit=dtk)
            matched = True

        if not matched:
            raise ClusterInfoError(
                "DTK kernel not found running in the cluster. "
                f"kernelFullVersion: {dtk.kernel_full_version}. "
                f"rtKernelFullVersion: {dtk.rt_kernel_full_version}"
            )
        return info