"""Traversal engine and result aggregation.

``PearShaker`` runs one retry-with-defer task per entrypoint and merges their
results with ``merge``.
"""

from pearshaker.core.traversal.aggregate import (
    merge,
    merge_files,
    merge_resolutions,
    merge_skips,
)
from pearshaker.core.traversal.engine import PearShaker

__all__ = [
    "PearShaker",
    "merge",
    "merge_files",
    "merge_resolutions",
    "merge_skips",
]
