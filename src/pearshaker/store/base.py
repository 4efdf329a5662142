"""Virtual store interface and path normalization.

A store maps ``/``-rooted POSIX paths to bytes. The traversal engine only
ever reads from it, so implementations need no locking as long as reads do
not mutate shared state.
"""

from __future__ import annotations

import posixpath
from abc import ABC, abstractmethod

from pearshaker.core.models import ModuleURL


def normalize_path(path: str) -> str:
    """Return the canonical store form of ``path``.

    Backslashes become slashes, a leading ``/`` is added, and ``.``/``..``
    segments are collapsed. ``..`` never climbs above the root.

    >>> normalize_path("a/./b/../c.js")
    '/a/c.js'
    """
    path = path.replace("\\", "/")
    normalized = posixpath.normpath("/" + path.lstrip("/"))
    # normpath keeps a leading "//" as-is
    return "/" + normalized.lstrip("/")


class VirtualStore(ABC):
    """Abstract read-only file store.

    Subclasses implement ``read``. ``exists`` and ``url_for`` have working
    defaults.

    Attributes:
        scheme: URL scheme used for ``ModuleURL.href``.
    """

    scheme: str = "drive"

    @abstractmethod
    def read(self, path: str) -> bytes | None:
        """Return the content at ``path``, or None if there is no file there.

        Args:
            path: A normalized store path.
        """

    def exists(self, path: str) -> bool:
        """Return True if a file is stored at ``path``."""
        return self.read(path) is not None

    def url_for(self, path: str) -> ModuleURL:
        """Return the store URL for ``path``."""
        return ModuleURL.for_path(normalize_path(path), self.scheme)
