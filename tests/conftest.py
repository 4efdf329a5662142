"""Shared fixtures for pearshaker tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable

import pytest

from pearshaker.config import TraversalConfig
from pearshaker.core.models import TraversalReport
from pearshaker.core.traversal import PearShaker
from pearshaker.store import MemoryStore


@pytest.fixture
def store() -> MemoryStore:
    """An empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def traverse() -> Callable[..., TraversalReport]:
    """Run ``PearShaker`` to completion and return its report."""

    def _traverse(
        store: MemoryStore,
        entrypoints: Iterable[str],
        defer: list[str] | None = None,
        config: TraversalConfig | None = None,
    ) -> TraversalReport:
        shaker = PearShaker(store, entrypoints, config=config)
        return asyncio.run(shaker.run(defer=defer))

    return _traverse
