"""Building blocks for a Kubernetes special-resource operator: config-map
storage, driver-toolkit cluster info, resource watches and manifest helpers."""

__version__ = "0.1.0"