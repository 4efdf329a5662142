"""pearshaker: Dependency traversal for JavaScript files in a virtual file store."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
