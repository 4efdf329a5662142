"""In-memory content-addressed store.

Content is kept once per SHA-256 digest; paths point at digests. Two paths
holding identical bytes share a single blob.
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping

from pearshaker.store.base import VirtualStore, normalize_path


class MemoryStore(VirtualStore):
    """Content-addressed store held in memory.

    ``put`` is for building fixtures before a run; the traversal engine
    only calls ``read``.

    Usage::

        store = MemoryStore()
        store.put("/index.js", 'require("./dep.js")')
        store.put("/dep.js", "module.exports = 1")
    """

    def __init__(self, scheme: str = "drive") -> None:
        self.scheme = scheme
        self._blobs: dict[str, bytes] = {}
        self._index: dict[str, str] = {}

    @classmethod
    def from_mapping(
        cls, files: Mapping[str, str | bytes], scheme: str = "drive"
    ) -> MemoryStore:
        """Create a store pre-populated with ``path -> content`` entries."""
        store = cls(scheme=scheme)
        for path, content in files.items():
            store.put(path, content)
        return store

    def put(self, path: str, content: str | bytes) -> str:
        """Store ``content`` at ``path`` and return its SHA-256 hex digest.

        Strings are encoded as UTF-8. Overwriting a path repoints it; the
        old blob is dropped once nothing references it.
        """
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        digest = hashlib.sha256(data).hexdigest()
        key = normalize_path(path)
        previous = self._index.get(key)
        self._blobs.setdefault(digest, data)
        self._index[key] = digest
        if previous is not None and previous != digest:
            if previous not in self._index.values():
                del self._blobs[previous]
        return digest

    def digest(self, path: str) -> str | None:
        """Return the content digest stored at ``path``, or None."""
        return self._index.get(normalize_path(path))

    def read(self, path: str) -> bytes | None:
        digest = self._index.get(normalize_path(path))
        if digest is None:
            return None
        return self._blobs[digest]

    @property
    def paths(self) -> list[str]:
        """All stored paths, sorted."""
        return sorted(self._index)

    @property
    def blob_count(self) -> int:
        """Number of distinct content blobs."""
        return len(self._blobs)

    def __len__(self) -> int:
        return len(self._index)
