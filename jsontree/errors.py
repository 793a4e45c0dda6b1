# jsontree/errors.py
from __future__ import annotations
from typing import Optional


class StoreError(Exception):
    """
    Base for every failure the document store reports to its callers.
    Transports translate these into status codes; services never retry.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message}: {self.path}"
        return self.message


class TraversalError(StoreError):
    """Logical path escapes the sandbox root."""


class NotFoundError(StoreError):
    pass


class ParseError(StoreError):
    """Stored content is not valid JSON (or not the shape the operation needs)."""


class ReadError(StoreError):
    pass


class WriteError(StoreError):
    pass


class NotEmptyError(StoreError):
    """Refused to delete a directory that still has entries."""


class PatchError(StoreError):
    pass


class LockTimeoutError(StoreError):
    pass


class KeyNotFoundError(StoreError):
    def __init__(self, segment: str, depth: int, path: Optional[str] = None):
        super().__init__(f"Key not found: {segment!r} at depth {depth}", path)
        self.segment = segment
        self.depth = depth
