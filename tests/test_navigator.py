import pytest

from jsontree.errors import KeyNotFoundError
from jsontree.services.navigator import navigate

DOC = {"a": {"b": [1, 2, 3], "c": 7}, "name": "x"}


def test_navigate_hits():
    assert navigate(DOC, ["a", "c"]) == 7
    assert navigate(DOC, ["a", "b"]) == [1, 2, 3]
    assert navigate(DOC, []) is DOC


def test_navigate_missing_key_names_segment():
    with pytest.raises(KeyNotFoundError) as ei:
        navigate(DOC, ["a", "z"])
    assert ei.value.segment == "z"
    assert ei.value.depth == 1


def test_arrays_and_scalars_are_not_indexable():
    with pytest.raises(KeyNotFoundError):
        navigate(DOC, ["a", "b", "0"])
    with pytest.raises(KeyNotFoundError):
        navigate(DOC, ["name", "length"])
