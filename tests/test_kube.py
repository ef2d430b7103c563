import dataclasses

import pytest

from specialresource.kube import (
    AlreadyExistsError,
    KubeError,
    NamespacedName,
    NotFoundError,
)


def test_str_joins_namespace_and_name():
    assert str(NamespacedName("test-ns", "test-resource")) == "test-ns/test-resource"


def test_str_of_empty_name():
    assert str(NamespacedName()) == "/"


def test_equal_names_hash_alike():
    first = NamespacedName(namespace="sro", name="kmod2")
    second = NamespacedName("sro", "kmod2")
    assert first == second
    assert {first: 1}[second] == 1


def test_different_namespaces_are_distinct():
    assert NamespacedName("a", "x") != NamespacedName("b", "x")


def test_is_immutable():
    nsn = NamespacedName("ns", "name")
    with pytest.raises(dataclasses.FrozenInstanceError):
        nsn.name = "other"  # type: ignore[misc]
    assert nsn.name == "name"
    assert str(nsn) == "ns/name"


def test_not_found_is_a_kube_error():
    err = NotFoundError("configmap missing")
    assert isinstance(err, KubeError)
    assert issubclass(NotFoundError, KubeError)
    assert str(err) == "configmap missing"
    with pytest.raises(KubeError, match="configmap missing") as excinfo:
        raise err
    assert excinfo.value is err


def test_already_exists_is_not_a_not_found():
    assert issubclass(AlreadyExistsError, KubeError)
    assert not issubclass(AlreadyExistsError, NotFoundError)
    assert str(AlreadyExistsError("exists")) == "exists"