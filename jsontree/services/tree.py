# jsontree/services/tree.py
from __future__ import annotations
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Literal

from pydantic import BaseModel

from jsontree.errors import NotEmptyError, NotFoundError, TraversalError, WriteError
from jsontree.services.locks import PathLockRegistry

logger = logging.getLogger(__name__)


class DirectoryEntry(BaseModel):
    name: str
    kind: Literal["file", "directory"]
    path: str  # relative to the sandbox root


def _is_temp_write(name: str) -> bool:
    return name.startswith(".") and name.endswith(".tmp")


class TreeOperations:
    """
    Structural operations over the sandboxed tree. Paths arrive already
    resolved; every file write and delete takes the same per-path lock the
    document store uses, so they never interleave with a mutation.
    """

    def __init__(self, root: Path, locks: PathLockRegistry):
        self.root = Path(root).resolve()
        self.locks = locks

    # ---------- Public API ----------

    def copy(self, source: Path, target: Path, recursive: bool = False) -> Dict[str, Any]:
        if not recursive:
            if not source.is_file():
                raise NotFoundError("Source file not found", str(source))
            self._copy_file(source, target)
            return {"ok": True, "copied": 1}

        if not source.is_dir():
            raise NotFoundError("Source directory not found", str(source))
        if target == source or source in target.parents:
            raise WriteError("Cannot copy a directory into itself", str(target))
        copied = [0]
        try:
            self._copy_tree(source, target, copied)
        except WriteError as e:
            raise WriteError(f"Copy stopped after {copied[0]} entries ({e.message})", e.path) from e
        except OSError as e:
            raise WriteError(
                f"Copy stopped after {copied[0]} entries ({e.strerror or e})",
                getattr(e, "filename", None) or str(target),
            ) from e
        return {"ok": True, "copied": copied[0]}

    def delete(self, path: Path, is_directory: bool = False) -> Dict[str, Any]:
        if path == self.root:
            raise TraversalError("Refusing to delete the sandbox root", str(path))

        if is_directory:
            if not path.is_dir() or path.is_symlink():
                raise NotFoundError("Directory not found", str(path))
            try:
                next(path.iterdir())
            except StopIteration:
                pass
            else:
                raise NotEmptyError("Directory is not empty", str(path))
            try:
                path.rmdir()
            except OSError as e:
                # An entry may have appeared since the check above
                if path.exists() and any(path.iterdir()):
                    raise NotEmptyError("Directory is not empty", str(path)) from e
                raise WriteError(f"Error deleting directory ({e.strerror})", str(path)) from e
            return {"ok": True}

        if path.is_dir() and not path.is_symlink():
            raise NotFoundError("File not found", str(path))
        with self.locks.hold(path):
            try:
                path.unlink()
            except FileNotFoundError as e:
                raise NotFoundError("File not found", str(path)) from e
            except OSError as e:
                raise WriteError(f"Error deleting file ({e.strerror})", str(path)) from e
        return {"ok": True}

    def create_folder(self, path: Path) -> Dict[str, Any]:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteError(f"Error creating folder ({e.strerror})", str(path)) from e
        return {"ok": True}

    def list_folder(self, path: Path) -> List[DirectoryEntry]:
        if not path.is_dir():
            raise NotFoundError("Directory not found", str(path))
        entries: List[DirectoryEntry] = []
        for child in path.iterdir():
            if _is_temp_write(child.name):
                continue
            kind = "directory" if child.is_dir() else "file"
            entries.append(
                DirectoryEntry(name=child.name, kind=kind, path=child.relative_to(self.root).as_posix())
            )
        entries.sort(key=lambda e: (e.kind != "directory", e.name))
        return entries

    # ---------- Internals ----------

    def _copy_file(self, source: Path, target: Path):
        with self.locks.hold(target):
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
                os.close(fd)
            except OSError as e:
                raise WriteError(f"Error copying file ({e.strerror})", str(target)) from e
            try:
                shutil.copyfile(source, tmp)
                os.replace(tmp, target)
            except OSError as e:
                try:
                    os.unlink(tmp)
                except FileNotFoundError:
                    pass
                raise WriteError(f"Error copying file ({e.strerror})", str(target)) from e
        logger.debug("copied %s -> %s", source, target)

    def _copy_tree(self, source: Path, target: Path, copied: List[int]):
        target.mkdir(parents=True, exist_ok=True)
        for child in sorted(source.iterdir()):
            dest = target / child.name
            if child.is_symlink():
                os.symlink(os.readlink(child), dest)
            elif child.is_dir():
                self._copy_tree(child, dest, copied)
            else:
                self._copy_file(child, dest)
            copied[0] += 1
