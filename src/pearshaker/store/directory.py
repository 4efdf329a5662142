"""Read-only store backed by a directory on the local filesystem."""

from __future__ import annotations

import logging
from pathlib import Path

from pearshaker.exceptions import StoreError
from pearshaker.store.base import VirtualStore, normalize_path

logger = logging.getLogger(__name__)


class DirectoryStore(VirtualStore):
    """Expose a local directory as a virtual store.

    Store path ``/lib/a.js`` maps to ``<root>/lib/a.js``. Symlinks that
    point outside the root are refused.

    Args:
        root: Directory to expose. Must exist.
        scheme: URL scheme for ``ModuleURL.href``.

    Raises:
        StoreError: If ``root`` is not a directory.
    """

    def __init__(self, root: Path | str, scheme: str = "drive") -> None:
        root_path = Path(root).resolve()
        if not root_path.is_dir():
            raise StoreError(f"Store root is not a directory: {root_path}")
        self.root = root_path
        self.scheme = scheme

    def _local_path(self, path: str) -> Path:
        local = (self.root / normalize_path(path).lstrip("/")).resolve()
        if local != self.root and self.root not in local.parents:
            raise StoreError(f"Path {path!r} escapes store root {self.root}")
        return local

    def read(self, path: str) -> bytes | None:
        local = self._local_path(path)
        try:
            if not local.is_file():
                return None
            return local.read_bytes()
        except OSError as exc:
            logger.warning("Cannot read %s: %s", local, exc)
            return None
