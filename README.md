# specialresource

This package provides building blocks for an operator that manages special
resources on a Kubernetes cluster. Out-of-tree kernel modules are one
example: they must be built for the kernel that each node runs.

The package has no runtime dependencies beyond the standard library.

## Installation

```
pip install .
```

To install with the test dependencies:

```
pip install ".[test]"
pytest
```

## What is inside

- **`specialresource.kube`** holds the shared types.
  - `NamespacedName` is a frozen namespace/name pair. Its string form is
    `namespace/name`.
  - `KubeError`, `NotFoundError` and `AlreadyExistsError` are the errors a
    client raises.
- **`specialresource.storage`** provides `ConfigMapStorage`. It keeps
  key/value entries in the `data` section of a config map, through a client
  that you supply. The client needs two methods:
  - `get(kind, name)` returns the object as a dict.
  - `update(obj)` writes the object back.

  `ConfigMapStorage` has three methods:
  - `check_config_map_entry` returns the value for a key, or `""` when the
    key is absent.
  - `update_config_map_entry` writes to the cluster only when the value
    actually changes.
  - `delete_config_map_entry` writes to the cluster only when the key was
    present.

  Client failures are raised as `StorageError`.
- **`specialresource.upgrade`** provides `ClusterInfo`. You build it from a
  registry and a cluster object that you supply.
  - The registry needs `last_layer(image_url)` and
    `extract_toolkit_release(layer)`.
  - The cluster needs `get_dtk_images()`.

  `ClusterInfo` has two methods:
  - `get_cluster_info(nodes)` takes `NodeInfo` records. It returns a map
    from each running kernel version to a `NodeVersion`. That value holds
    the cluster version, the OS version (for example `8.4`), `rhel8`/`rhel8.4`
    style names and the matching `DriverToolkitEntry`. Before matching, the
    machine architecture from `running_arch()` is appended to the toolkit
    kernel versions unless it is already there.
  - `get_dtk_data(image_url)` caches toolkit data for each image URL.

  An OS mismatch, or a toolkit kernel that no node runs, raises
  `ClusterInfoError`.
- **`specialresource.watcher`** provides `Watcher`. It is built on a
  controller object that has `watch(template, handler)`.
  - `reconcile_watches(module)` takes a `SpecialResourceModule`. It adds the
    watches listed in the module's `ModuleWatch` entries and drops the ones
    it no longer lists.
  - `mapper(obj)` returns the `NamespacedName`s of the modules to reconcile.
    A module is returned only when the strings at a watched JSON path have
    really changed. The same values in a different order do not count as a
    change.
  - `get_json_path(path, obj)` returns the strings at a path, or `None` when
    a key is missing.
- **`specialresource.jsonpath`** is a small JSONPath evaluator.
  - `compile_path` and `lookup` handle `.key` steps.
  - They also handle index, list, `*` and inclusive range brackets, and
    `?()` filters.
- **`specialresource.hashing`** has four functions.
  - `fnv64a(text)` gives the FNV-1a hex digest of a string.
  - `hash_object(obj)` hashes JSON-like values. The order of keys in a
    mapping does not change the result.
  - `annotate(obj)` stores the object's hash in the
    `specialresource.openshift.io/hash` annotation.
  - `annotation_equal(new, old)` compares that annotation with the hash of
    another object.
- **`specialresource.osversion`** provides `parse_os_info`, which turns a
  node's OS image string into an `OSInfo`.
- **`specialresource.yamlscan`** provides `YAMLScanner` and
  `split_documents`. They split a multi-document manifest on `---` lines and
  yield the non-empty documents as bytes.
- **`specialresource.utils`** holds small list helpers and `warn_string`.

## Examples

```python
from specialresource.hashing import fnv64a, annotate
from specialresource.osversion import parse_os_info
from specialresource.utils import string_slice_insert, warn_string
from specialresource.yamlscan import YAMLScanner

fnv64a("")                                  # 'cbf29ce484222325'
string_slice_insert(["a", "b"], 1, "c")     # ['a', 'c', 'b']
warn_string("disk almost full")             # 'WARNING: disk almost full'

parse_os_info("Red Hat Enterprise Linux CoreOS 49.84.202201102104-0 (Ootpa)")
# OSInfo(cluster_version='4.9', os_version='8.4', os_major='8')

manifest = {"kind": "ConfigMap", "metadata": {"name": "demo"}}
annotate(manifest)
# manifest["metadata"]["annotations"]["specialresource.openshift.io/hash"]
# now holds the hash

for document in YAMLScanner(b"a: 1\n---\nb: 2\n"):
    print(document)    # b'a: 1\n', then b'b: 2\n'
```

If an OS image string does not contain the
`<cluster>.<os>.<12-digit build>-<n>` form, `parse_os_info` raises
`ValueError`.

## What this package does not do

- It has no cluster client, registry client or controller runtime. Every
  object that talks to a cluster or an image registry must be supplied by
  the caller.
- It has no command-line tool.
- It does not deploy or remove manifests.
- `yamlscan` only splits documents. It does not parse YAML.