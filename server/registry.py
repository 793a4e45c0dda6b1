# server/registry.py
from dataclasses import dataclass
from typing import Any, Callable, Dict, Type
from urllib.parse import unquote
from pydantic import BaseModel

from jsontree.di import Container

from server.tools.documents import DocGetIn, DocInitIn, DocPatchIn, DocIncrementIn
from server.tools.tree import TreeCopyIn, TreeDeleteIn, TreePathIn


def _decoded(path: str) -> str:
    # Tool arguments may carry URL-encoded paths; HTTP paths are decoded by the router
    return unquote(path)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[[BaseModel], Any]


class ToolHandlers:
    """
    Named handlers for each tool (no lambdas).
    Thin adapters over the document namespace, which owns logging and security.
    """
    def __init__(self, container: Container):
        self.namespace = container.namespace

    # ---- Documents
    def doc_get(self, args: DocGetIn) -> Any:
        if args.keys:
            return self.namespace.get_nested_value(_decoded(args.path), args.keys)
        return self.namespace.get_document(_decoded(args.path))

    def doc_init(self, args: DocInitIn) -> dict:
        return self.namespace.init_document(_decoded(args.path), args.value)

    def doc_merge(self, args: DocPatchIn) -> dict:
        return self.namespace.merge_update(_decoded(args.path), args.patch)

    def doc_edit(self, args: DocPatchIn) -> dict:
        return self.namespace.restricted_edit(_decoded(args.path), args.patch)

    def doc_increment(self, args: DocIncrementIn) -> dict:
        return self.namespace.increment(_decoded(args.path), args.field)

    # ---- Tree
    def tree_copy(self, args: TreeCopyIn) -> dict:
        return self.namespace.copy_item(_decoded(args.source), _decoded(args.target), args.recursive)

    def tree_delete(self, args: TreeDeleteIn) -> dict:
        return self.namespace.delete_item(_decoded(args.path), args.isDirectory)

    def tree_mkdir(self, args: TreePathIn) -> dict:
        return self.namespace.create_folder(_decoded(args.path))

    def tree_list(self, args: TreePathIn) -> dict:
        entries = self.namespace.list_folder(_decoded(args.path))
        return {"entries": [e.model_dump() for e in entries]}


def build_tool_registry(container: Container) -> Dict[str, ToolSpec]:
    """
    Build a registry once at startup from the DI container.
    Transport layers read from this registry to expose tools.
    """
    handlers = ToolHandlers(container)

    specs = [
        ToolSpec("doc_get", "Read a JSON document, or a nested value when keys are given",
                 DocGetIn, handlers.doc_get),
        ToolSpec("doc_init", "Create or overwrite a JSON document with an initial value",
                 DocInitIn, handlers.doc_init),
        ToolSpec("doc_merge", "Shallow-merge fields into a JSON object document",
                 DocPatchIn, handlers.doc_merge),
        ToolSpec("doc_edit", "Overwrite only fields that already exist in a JSON object document",
                 DocPatchIn, handlers.doc_edit),
        ToolSpec("doc_increment", "Increment a numeric top-level field by 1 (no-op otherwise)",
                 DocIncrementIn, handlers.doc_increment),
        ToolSpec("tree_copy", "Copy a file, or a directory subtree when recursive",
                 TreeCopyIn, handlers.tree_copy),
        ToolSpec("tree_delete", "Delete a file or an empty directory",
                 TreeDeleteIn, handlers.tree_delete),
        ToolSpec("tree_mkdir", "Create a directory and any missing parents",
                 TreePathIn, handlers.tree_mkdir),
        ToolSpec("tree_list", "List the entries of a directory",
                 TreePathIn, handlers.tree_list),
    ]
    return {spec.name: spec for spec in specs}


def dispatch_tool_call(registry: Dict[str, ToolSpec], name: str, arguments: Dict[str, Any]) -> Any:
    """
    Validate args with the tool's Pydantic model, then invoke the named handler.
    """
    if name not in registry:
        raise KeyError(f"Tool not found: {name}")
    spec = registry[name]
    args_obj = spec.input_model(**arguments)
    return spec.handler(args_obj)


def register_into_fastmcp(mcp, registry: Dict[str, ToolSpec]) -> None:
    """
    Register all registry tools into a FastMCP host.
    """
    for spec in registry.values():
        # Create a local closure so each handler binds to its spec
        def make_tool(spec: ToolSpec):
            def tool_handler(input):
                return spec.handler(input)
            tool_handler.__annotations__ = {"input": spec.input_model, "return": Any}
            tool_handler.__name__ = spec.name
            return tool_handler

        mcp.tool(name=spec.name, description=spec.description)(make_tool(spec))
