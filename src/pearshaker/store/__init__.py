"""Read-only virtual file stores the traversal engine walks.

Re-exports the store interface and both built-in implementations so callers
can write ``from pearshaker.store import MemoryStore``.
"""

from pearshaker.store.base import VirtualStore, normalize_path
from pearshaker.store.directory import DirectoryStore
from pearshaker.store.memory import MemoryStore

__all__ = [
    "VirtualStore",
    "normalize_path",
    "DirectoryStore",
    "MemoryStore",
]
