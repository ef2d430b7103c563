from types import SimpleNamespace

import pytest

from specialresource.utils import (
    find_cr_file,
    string_slice_contains,
    string_slice_find,
    string_slice_insert,
    warn_string,
)

ITEMS = ["a", "b", "c", "d"]


@pytest.mark.parametrize("value, expected", [("c", 2), ("z", len(ITEMS))])
def test_string_slice_find(value, expected):
    assert string_slice_find(ITEMS, value) == expected


def test_string_slice_find_returns_first_match():
    assert string_slice_find(["x", "y", "x"], "x") == 0


@pytest.mark.parametrize("value, expected", [("a", True), ("z", False)])
def test_string_slice_contains(value, expected):
    assert string_slice_contains(ITEMS, value) is expected


FILES = [SimpleNamespace(name="chart0.yaml"), SimpleNamespace(name="chart1.yaml")]


@pytest.mark.parametrize("name, expected", [("chart1", 1), ("chart99", -1)])
def test_find_cr_file(name, expected):
    assert find_cr_file(FILES, name) == expected


@pytest.mark.parametrize(
    "index, expected",
    [
        (0, ["c", "a", "b"]),
        (1, ["a", "c", "b"]),
        (2, ["a", "b", "c"]),
    ],
)
def test_string_slice_insert(index, expected):
    assert string_slice_insert(["a", "b"], index, "c") == expected


def test_string_slice_insert_into_empty():
    assert string_slice_insert([], 0, "c") == ["c"]


@pytest.mark.parametrize("index", [-1, 3])
def test_string_slice_insert_out_of_range(index):
    with pytest.raises(IndexError):
        string_slice_insert(["a", "b"], index, "c")


def test_warn_string():
    assert warn_string("failed to convert") == "WARNING: failed to convert"