# jsontree/services/namespace.py
from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Sequence

from jsontree.errors import StoreError
from jsontree.logging import log_operation
from jsontree.services.documents import DocumentStore
from jsontree.services.navigator import JsonObject, JsonValue, navigate
from jsontree.services.paths import PathResolver
from jsontree.services.tree import DirectoryEntry, TreeOperations

logger = logging.getLogger(__name__)


@contextmanager
def _reported_as(logical_path: str) -> Iterator[None]:
    # Errors leave the namespace carrying the caller's path, never the real one
    try:
        yield
    except StoreError as e:
        e.path = logical_path
        raise


class DocumentNamespace:
    """
    The operations offered to transports, in terms of logical paths.
    Every path is resolved (and traversal rejected) before any I/O happens.
    """

    def __init__(self, resolver: PathResolver, store: DocumentStore, tree: TreeOperations):
        self.resolver = resolver
        self.store = store
        self.tree = tree

    # ---- Documents

    def get_document(self, path: str) -> JsonValue:
        log_operation(logger, "get_document", {"path": path})
        with _reported_as(path):
            return self.store.read(self.resolver.resolve(path))

    def get_nested_value(self, path: str, keys: Sequence[str]) -> JsonValue:
        log_operation(logger, "get_nested_value", {"path": path, "keys": list(keys)})
        with _reported_as(path):
            doc = self.store.read(self.resolver.resolve(path))
            return navigate(doc, keys)

    def init_document(self, path: str, default: JsonValue) -> Dict[str, Any]:
        log_operation(logger, "init_document", {"path": path, "default": default})
        with _reported_as(path):
            return self.store.initialize(self.resolver.resolve(path), default)

    def merge_update(self, path: str, patch: JsonObject) -> JsonObject:
        log_operation(logger, "merge_update", {"path": path, "patch": patch})
        with _reported_as(path):
            return self.store.merge_update(self.resolver.resolve(path), patch)

    def restricted_edit(self, path: str, patch: JsonObject) -> JsonObject:
        log_operation(logger, "restricted_edit", {"path": path, "patch": patch})
        with _reported_as(path):
            return self.store.restricted_edit(self.resolver.resolve(path), patch)

    def increment(self, path: str, field: str) -> Dict[str, Any]:
        log_operation(logger, "increment", {"path": path, "field": field})
        with _reported_as(path):
            return self.store.increment(self.resolver.resolve(path), field)

    # ---- Tree

    def copy_item(self, source: str, target: str, recursive: bool = False) -> Dict[str, Any]:
        log_operation(logger, "copy_item", {"source": source, "target": target, "recursive": recursive})
        with _reported_as(source):
            src = self.resolver.resolve(source)
        with _reported_as(target):
            dst = self.resolver.resolve(target)
            return self.tree.copy(src, dst, recursive)

    def delete_item(self, path: str, is_directory: bool = False) -> Dict[str, Any]:
        log_operation(logger, "delete_item", {"path": path, "is_directory": is_directory})
        with _reported_as(path):
            return self.tree.delete(self.resolver.resolve(path), is_directory)

    def create_folder(self, path: str) -> Dict[str, Any]:
        log_operation(logger, "create_folder", {"path": path})
        with _reported_as(path):
            return self.tree.create_folder(self.resolver.resolve(path))

    def list_folder(self, path: str = "") -> List[DirectoryEntry]:
        log_operation(logger, "list_folder", {"path": path})
        with _reported_as(path):
            return self.tree.list_folder(self.resolver.resolve(path))
