# jsontree/services/documents.py
from __future__ import annotations
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict

from jsontree.errors import NotFoundError, ParseError, PatchError, ReadError, WriteError
from jsontree.services.locks import PathLockRegistry
from jsontree.services.navigator import JsonObject, JsonValue

logger = logging.getLogger(__name__)


def atomic_write_json(path: Path, value: Any, indent: int = 2) -> None:
    """
    Serialize `value` into a temp file beside `path`, then rename it over the
    target. Readers see the old document or the new one, never a partial one.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(value, f, indent=indent, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


class DocumentStore:
    """
    Whole-document JSON I/O plus the read-modify-write mutations.

    Nothing is cached: every call re-reads the file. Mutations run their full
    read-transform-write cycle under the path's exclusive lock.
    """

    def __init__(self, locks: PathLockRegistry, indent: int = 2):
        self.locks = locks
        self.indent = indent

    # ---------- Public API ----------

    def read(self, path: Path) -> JsonValue:
        try:
            raw = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise NotFoundError("Document not found", str(path)) from e
        except OSError as e:
            raise ReadError(f"Error reading file ({e.strerror})", str(path)) from e
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ParseError("Error parsing JSON", str(path)) from e

    def initialize(self, path: Path, default: JsonValue) -> Dict[str, Any]:
        with self.locks.hold(path):
            self._write(path, default)
        return {"ok": True}

    def merge_update(self, path: Path, patch: JsonObject) -> JsonObject:
        def merge(doc: JsonObject) -> JsonObject:
            doc.update(patch)
            return doc

        return self._mutate_object(path, patch, merge)

    def restricted_edit(self, path: Path, patch: JsonObject) -> JsonObject:
        def edit(doc: JsonObject) -> JsonObject:
            for k, v in patch.items():
                if k in doc:
                    doc[k] = v
            return doc

        return self._mutate_object(path, patch, edit)

    def increment(self, path: Path, key: str) -> Dict[str, Any]:
        with self.locks.hold(path):
            doc = self.read(path)
            if not isinstance(doc, dict) or not _is_number(doc.get(key)):
                return {"field": key, "newValue": None, "noop": True}
            doc[key] = doc[key] + 1
            self._write(path, doc)
            return {"field": key, "newValue": doc[key], "noop": False}

    # ---------- Internals ----------

    def _mutate_object(
        self,
        path: Path,
        patch: JsonObject,
        transform: Callable[[JsonObject], JsonObject],
    ) -> JsonObject:
        if not isinstance(patch, dict):
            raise PatchError("Patch must be a JSON object", str(path))
        with self.locks.hold(path):
            doc = self.read(path)
            if not isinstance(doc, dict):
                raise ParseError("Document is not a JSON object", str(path))
            doc = transform(doc)
            self._write(path, doc)
            return doc

    def _write(self, path: Path, value: JsonValue):
        try:
            atomic_write_json(path, value, indent=self.indent)
        except (TypeError, ValueError) as e:
            raise PatchError(f"Value is not JSON serializable ({e})", str(path)) from e
        except OSError as e:
            raise WriteError(f"Error writing file ({e.strerror})", str(path)) from e
        logger.debug("wrote %s", path)
