# server/tools/tree.py
from pydantic import BaseModel, Field


class TreeCopyIn(BaseModel):
    source: str = Field(..., description="Source path relative to the data root")
    target: str = Field(..., description="Target path relative to the data root")
    recursive: bool = Field(False, description="Copy a whole directory subtree")


class TreeDeleteIn(BaseModel):
    path: str = Field(..., description="Path relative to the data root")
    isDirectory: bool = Field(False, description="Delete an (empty) directory instead of a file")


class TreePathIn(BaseModel):
    path: str = Field("", description="Directory path relative to the data root")
