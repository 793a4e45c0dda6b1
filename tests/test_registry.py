import pytest
from pydantic import ValidationError

from jsontree.di import Container
from jsontree.errors import NotEmptyError, TraversalError
from server.registry import build_tool_registry, dispatch_tool_call


def test_registry_exposes_every_operation(container: Container):
    reg = build_tool_registry(container)
    assert set(reg) == {
        "doc_get", "doc_init", "doc_merge", "doc_edit", "doc_increment",
        "tree_copy", "tree_delete", "tree_mkdir", "tree_list",
    }


def test_dispatch_round_trip(container: Container):
    reg = build_tool_registry(container)
    dispatch_tool_call(reg, "doc_init", {"path": "t.json", "value": {"n": 1, "m": {"k": "v"}}})
    assert dispatch_tool_call(reg, "doc_increment", {"path": "t.json", "field": "n"})["newValue"] == 2
    assert dispatch_tool_call(reg, "doc_get", {"path": "t.json", "keys": ["m", "k"]}) == "v"
    assert dispatch_tool_call(reg, "doc_edit", {"path": "t.json", "patch": {"n": 0, "x": 1}}) == {
        "n": 0, "m": {"k": "v"},
    }
    listing = dispatch_tool_call(reg, "tree_list", {"path": ""})
    assert listing == {"entries": [{"name": "t.json", "kind": "file", "path": "t.json"}]}


def test_dispatch_errors(container: Container):
    reg = build_tool_registry(container)
    with pytest.raises(KeyError):
        dispatch_tool_call(reg, "nope", {})
    with pytest.raises(ValidationError):
        dispatch_tool_call(reg, "doc_increment", {"path": "t.json"})
    dispatch_tool_call(reg, "doc_init", {"path": "d/t.json"})
    with pytest.raises(NotEmptyError):
        dispatch_tool_call(reg, "tree_delete", {"path": "d", "isDirectory": True})


def test_increment_empty_key_is_a_valid_field(container: Container):
    reg = build_tool_registry(container)
    dispatch_tool_call(reg, "doc_init", {"path": "e.json", "value": {"": 1, "n": 0}})
    assert dispatch_tool_call(reg, "doc_increment", {"path": "e.json", "field": ""}) == {
        "field": "", "newValue": 2, "noop": False,
    }
    dispatch_tool_call(reg, "doc_init", {"path": "f.json", "value": {"n": 0}})
    assert dispatch_tool_call(reg, "doc_increment", {"path": "f.json", "field": ""})["noop"] is True


def test_tool_paths_are_percent_decoded(container: Container):
    reg = build_tool_registry(container)
    dispatch_tool_call(reg, "doc_init", {"path": "a%20b.json", "value": {"x": 1}})
    assert container.namespace.get_document("a b.json") == {"x": 1}
    with pytest.raises(TraversalError):
        dispatch_tool_call(reg, "doc_get", {"path": "..%2f..%2fetc%2fpasswd"})
