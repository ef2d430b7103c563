"""Parsing of the operating system image string reported by nodes."""

from __future__ import annotations

import re
from typing import NamedTuple

_VERSION_RE = re.compile(
    r"(?P<cluster_version>\d{2,})\.(?P<os_version>\d{2,})\.\d{12}-\d", re.ASCII
)


class OSInfo(NamedTuple):
    """Cluster version, OS version in ``X.Y`` form and OS major version."""

    cluster_version: str
    os_version: str
    os_major: str


def _dotted(digits: str) -> str:
    return f"{digits[0]}.{digits[1:]}"


def parse_os_info(os_image_pretty: str) -> OSInfo:
    """Parse e.g. ``Red Hat Enterprise Linux CoreOS 49.84.202201102104-0 (Ootpa)``."""
    match = _VERSION_RE.search(os_image_pretty)
    if match is None:
        raise ValueError(f"failed to find a match for {os_image_pretty}")
    cluster, os_version = match["cluster_version"], match["os_version"]
    return OSInfo(_dotted(cluster), _dotted(os_version), os_version[0])