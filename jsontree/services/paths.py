# jsontree/services/paths.py
import os
import posixpath
from pathlib import Path

from jsontree.errors import TraversalError


class PathResolver:
    """
    Map caller-supplied logical paths onto the sandbox root.

    Inputs arrive already percent-decoded: the HTTP router decodes them and
    the MCP tool handlers do it themselves. The escape check runs on the
    lexically normalized path before anything touches the filesystem, so
    out-of-sandbox inputs learn nothing about what exists there. A second check after symlink resolution blocks links that
    point outside the root.
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self._root_posix = self.root.as_posix()

    def _normalize(self, logical_path: str) -> str:
        raw = str(logical_path or "")
        if "\x00" in raw:
            raise TraversalError("Path contains NUL byte", logical_path)
        raw = raw.replace("\\", "/")

        # Absolute inputs already under root are taken as-is
        if raw.startswith("/"):
            absolute = posixpath.normpath(raw)
            if self._is_within(absolute):
                return absolute
            raw = raw.lstrip("/")

        joined = posixpath.normpath(posixpath.join(self._root_posix, raw))
        if not self._is_within(joined):
            raise TraversalError("Path escapes sandbox root", logical_path)
        return joined

    def _is_within(self, posix_path: str) -> bool:
        return posix_path == self._root_posix or posix_path.startswith(self._root_posix.rstrip("/") + "/")

    def resolve(self, logical_path: str) -> Path:
        candidate = Path(self._normalize(logical_path))
        real = Path(os.path.realpath(candidate))
        if real != self.root and self.root not in real.parents:
            raise TraversalError("Path escapes sandbox root", logical_path)
        return candidate

    def relative(self, path: Path) -> str:
        rel = Path(path).relative_to(self.root).as_posix()
        return "" if rel == "." else rel
