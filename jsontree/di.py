# jsontree/di.py
from dataclasses import dataclass
from jsontree.config import Settings
from jsontree.services.documents import DocumentStore
from jsontree.services.locks import PathLockRegistry
from jsontree.services.namespace import DocumentNamespace
from jsontree.services.paths import PathResolver
from jsontree.services.tree import TreeOperations

@dataclass
class Container:
    settings: Settings
    resolver: PathResolver
    locks: PathLockRegistry
    store: DocumentStore
    tree: TreeOperations
    namespace: DocumentNamespace

def build_container(settings: Settings | None = None) -> Container:
    s = settings or Settings()
    resolver = PathResolver(s.DATA_ROOT)

    # One registry shared by documents and tree ops: both write files
    locks = PathLockRegistry(timeout_sec=s.LOCK_TIMEOUT_SEC)
    store = DocumentStore(locks, indent=s.JSON_INDENT)
    tree = TreeOperations(resolver.root, locks)

    namespace = DocumentNamespace(resolver, store, tree)
    return Container(s, resolver, locks, store, tree, namespace)
