from pathlib import Path
import json
import pytest

from jsontree.errors import NotFoundError, ParseError, PatchError
from jsontree.services.documents import DocumentStore
from jsontree.services.locks import PathLockRegistry


@pytest.fixture
def store() -> DocumentStore:
    return DocumentStore(PathLockRegistry(timeout_sec=5.0))


def test_initialize_then_read_round_trips(store: DocumentStore, tmp_path: Path):
    p = tmp_path / "nested" / "doc.json"
    value = {"a": 1, "b": [True, None, 2.5], "c": {"d": "é"}}
    assert store.initialize(p, value) == {"ok": True}
    assert store.read(p) == value


def test_initialize_overwrites_and_accepts_non_objects(store: DocumentStore, tmp_path: Path):
    p = tmp_path / "doc.json"
    store.initialize(p, {"old": True})
    store.initialize(p, [1, 2])
    assert store.read(p) == [1, 2]


def test_read_errors(store: DocumentStore, tmp_path: Path):
    with pytest.raises(NotFoundError):
        store.read(tmp_path / "missing.json")
    with pytest.raises(NotFoundError):
        store.read(tmp_path)
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ParseError):
        store.read(bad)


def test_merge_update(store: DocumentStore, tmp_path: Path):
    p = tmp_path / "doc.json"
    store.initialize(p, {"a": 1, "b": 2})
    assert store.merge_update(p, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}
    assert store.read(p) == {"a": 1, "b": 3, "c": 4}


def test_merge_is_shallow(store: DocumentStore, tmp_path: Path):
    p = tmp_path / "doc.json"
    store.initialize(p, {"a": {"x": 1, "y": 2}})
    assert store.merge_update(p, {"a": {"x": 9}}) == {"a": {"x": 9}}


def test_restricted_edit_drops_unknown_fields(store: DocumentStore, tmp_path: Path):
    p = tmp_path / "doc.json"
    store.initialize(p, {"a": 1, "b": 2})
    assert store.restricted_edit(p, {"b": 3, "c": 4}) == {"a": 1, "b": 3}
    assert store.read(p) == {"a": 1, "b": 3}


def test_mutations_need_an_existing_object(store: DocumentStore, tmp_path: Path):
    with pytest.raises(NotFoundError):
        store.merge_update(tmp_path / "missing.json", {"a": 1})
    p = tmp_path / "list.json"
    store.initialize(p, [1, 2])
    with pytest.raises(ParseError):
        store.restricted_edit(p, {"a": 1})
    with pytest.raises(PatchError):
        store.merge_update(p, ["not", "a", "patch"])


def test_increment(store: DocumentStore, tmp_path: Path):
    p = tmp_path / "counter.json"
    store.initialize(p, {"count": 5, "ratio": 0.5, "name": "n", "flag": True})
    assert store.increment(p, "count") == {"field": "count", "newValue": 6, "noop": False}
    assert store.increment(p, "ratio")["newValue"] == 1.5
    assert store.read(p)["count"] == 6


@pytest.mark.parametrize("field", ["missing", "name", "flag"])
def test_increment_noop_leaves_file_unchanged(store: DocumentStore, tmp_path: Path, field: str):
    p = tmp_path / "counter.json"
    store.initialize(p, {"count": 5, "name": "n", "flag": True})
    before = p.read_bytes()
    mtime = p.stat().st_mtime_ns
    assert store.increment(p, field) == {"field": field, "newValue": None, "noop": True}
    assert p.read_bytes() == before
    assert p.stat().st_mtime_ns == mtime


def test_writes_leave_no_temp_files(store: DocumentStore, tmp_path: Path):
    p = tmp_path / "doc.json"
    store.initialize(p, {"a": 1})
    store.merge_update(p, {"b": 2})
    store.increment(p, "a")
    assert sorted(x.name for x in tmp_path.iterdir()) == ["doc.json"]


def test_unserializable_value_keeps_previous_document(store: DocumentStore, tmp_path: Path):
    p = tmp_path / "doc.json"
    store.initialize(p, {"a": 1})
    with pytest.raises(PatchError):
        store.merge_update(p, {"b": object()})
    assert json.loads(p.read_text(encoding="utf-8")) == {"a": 1}
    assert sorted(x.name for x in tmp_path.iterdir()) == ["doc.json"]


def test_written_json_is_indented(tmp_path: Path):
    store = DocumentStore(PathLockRegistry(), indent=4)
    p = tmp_path / "doc.json"
    store.initialize(p, {"a": 1})
    assert p.read_text(encoding="utf-8") == '{\n    "a": 1\n}'
