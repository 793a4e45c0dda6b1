# server/http_app.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from jsontree.di import Container, build_container
from jsontree.errors import (
    KeyNotFoundError,
    LockTimeoutError,
    NotEmptyError,
    NotFoundError,
    ParseError,
    PatchError,
    ReadError,
    StoreError,
    TraversalError,
    WriteError,
)
from jsontree.logging import configure_logging
from jsontree.services.namespace import DocumentNamespace

# Reuse the tool input models for structural request bodies
from server.tools.tree import TreeCopyIn, TreeDeleteIn, TreePathIn

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    TraversalError: 403,
    NotFoundError: 404,
    KeyNotFoundError: 404,
    NotEmptyError: 409,
    PatchError: 400,
    ParseError: 500,
    ReadError: 500,
    WriteError: 500,
    LockTimeoutError: 503,
}


class IncrementIn(BaseModel):
    field: str = Field(..., description="Numeric top-level field to increment by 1")


# ---------- Security: Origin validation & Bearer token ----------

def _origin_allowed(req: Request) -> bool:
    settings = req.app.state.container.settings
    origin = req.headers.get("origin")
    if not origin:
        return settings.HTTP_ALLOW_NO_ORIGIN
    allowed = {o.strip().lower() for o in settings.HTTP_ALLOWED_ORIGINS.split(",") if o.strip()}
    return origin.lower() in allowed


def _require_auth(req: Request):
    auth = req.headers.get("authorization", "")
    if not auth.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing Bearer token")
    token = auth.split(" ", 1)[1]
    if token != req.app.state.container.settings.HTTP_BEARER_TOKEN:
        raise HTTPException(status_code=401, detail="Invalid Bearer token")


def _namespace(req: Request) -> DocumentNamespace:
    return req.app.state.container.namespace


def _store_error_response(request: Request, exc: StoreError) -> JSONResponse:
    status = next((code for cls, code in STATUS_BY_ERROR.items() if isinstance(exc, cls)), 500)
    logger.warning("%s %s -> %d %s", request.method, request.url.path, status, exc)
    body = {"error": {"code": status, "type": type(exc).__name__, "message": str(exc)}}
    return JSONResponse(body, status_code=status)


# ---------- Documents ----------

router = APIRouter()


@router.get("/docs/{path:path}")
def get_document(path: str, key: List[str] = Query(default=[]),
                 ns: DocumentNamespace = Depends(_namespace)):
    if key:
        return ns.get_nested_value(path, key)
    return ns.get_document(path)


@router.put("/docs/{path:path}", dependencies=[Depends(_require_auth)])
async def init_document(path: str, request: Request, ns: DocumentNamespace = Depends(_namespace)):
    # Any JSON value is a valid document, `null` included, so the body is parsed by hand
    raw = await request.body()
    try:
        value = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PatchError("Request body must be a JSON value", path) from e
    return await run_in_threadpool(ns.init_document, path, value)


@router.patch("/docs/{path:path}")
def merge_update(path: str, patch: Dict[str, Any] = Body(...),
                 ns: DocumentNamespace = Depends(_namespace)):
    return ns.merge_update(path, patch)


@router.post("/edit/{path:path}")
def restricted_edit(path: str, patch: Dict[str, Any] = Body(...),
                    ns: DocumentNamespace = Depends(_namespace)):
    return ns.restricted_edit(path, patch)


@router.post("/increment/{path:path}")
def increment(path: str, body: IncrementIn, ns: DocumentNamespace = Depends(_namespace)):
    return ns.increment(path, body.field)


# Legacy single-document routes, bound to DEFAULT_DOCUMENT

@router.get("/get-json")
def get_json(request: Request, ns: DocumentNamespace = Depends(_namespace)):
    return ns.get_document(request.app.state.container.settings.DEFAULT_DOCUMENT)


@router.post("/update-json")
def update_json(request: Request, patch: Dict[str, Any] = Body(...),
                ns: DocumentNamespace = Depends(_namespace)):
    ns.merge_update(request.app.state.container.settings.DEFAULT_DOCUMENT, patch)
    return {"ok": True, "message": "JSON file updated successfully"}


# ---------- Tree ----------

@router.post("/tree/copy", dependencies=[Depends(_require_auth)])
def copy_item(body: TreeCopyIn, ns: DocumentNamespace = Depends(_namespace)):
    return ns.copy_item(body.source, body.target, body.recursive)


@router.post("/tree/delete", dependencies=[Depends(_require_auth)])
def delete_item(body: TreeDeleteIn, ns: DocumentNamespace = Depends(_namespace)):
    return ns.delete_item(body.path, body.isDirectory)


@router.post("/tree/folders", dependencies=[Depends(_require_auth)])
def create_folder(body: TreePathIn, ns: DocumentNamespace = Depends(_namespace)):
    return ns.create_folder(body.path)


@router.get("/tree/{path:path}")
def list_folder(path: str, ns: DocumentNamespace = Depends(_namespace)):
    return {"entries": [e.model_dump() for e in ns.list_folder(path)]}


def create_app(container: Container | None = None) -> FastAPI:
    container = container or build_container()
    configure_logging(container.settings.LOG_LEVEL)

    app = FastAPI(title="jsontree", version="0.1.0")
    app.state.container = container

    @app.middleware("http")
    async def origin_validation_mw(request: Request, call_next):
        # Browser requests from unknown origins are refused outright
        if not _origin_allowed(request):
            return JSONResponse({"error": {"code": 403, "message": "Forbidden origin"}}, status_code=403)
        return await call_next(request)

    app.add_exception_handler(StoreError, _store_error_response)
    app.include_router(router)
    return app


if __name__ == "__main__":
    import uvicorn
    from jsontree.config import Settings

    settings = Settings()
    uvicorn.run(
        "server.http_app:create_app",
        factory=True,
        host=settings.HTTP_HOST,
        port=settings.HTTP_PORT,
        reload=False,
    )
