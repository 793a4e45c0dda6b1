# server/tools/documents.py
from __future__ import annotations
from typing import Any, Dict, List
from pydantic import BaseModel, Field


class DocGetIn(BaseModel):
    path: str = Field(..., description="Document path relative to the data root")
    keys: List[str] = Field(
        default_factory=list, description="Optional key path into the document; empty returns it whole"
    )


class DocInitIn(BaseModel):
    path: str = Field(..., description="Document path relative to the data root")
    value: Any = Field(default_factory=dict, description="Initial JSON value (overwrites existing content)")


class DocPatchIn(BaseModel):
    path: str = Field(..., description="Document path relative to the data root")
    patch: Dict[str, Any] = Field(..., description="Top-level fields to write")


class DocIncrementIn(BaseModel):
    path: str = Field(..., description="Document path relative to the data root")
    field: str = Field(..., description="Numeric top-level field to increment by 1")
