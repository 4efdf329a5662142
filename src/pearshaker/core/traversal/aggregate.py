"""Result Aggregator: join per-entrypoint results into one report.

- ``files``: union of paths; first-seen order, no duplicates.
- ``skips``: concatenated, then de-duplicated by ``(specifier, referrer.href)``.
  The first record in entrypoint order is kept.
- ``resolutions``: shallow merge in entrypoint order. On a key collision the
  later entrypoint's value replaces the earlier one.
"""

from __future__ import annotations

from collections.abc import Iterable

from pearshaker.core.models import EntrypointResult, SkipRecord, TraversalReport


def merge_files(results: Iterable[EntrypointResult]) -> list[str]:
    """Union of all entrypoints' files, first-seen order."""
    seen: dict[str, None] = {}
    for result in results:
        for path in result.files:
            seen.setdefault(path, None)
    return list(seen)


def merge_skips(results: Iterable[EntrypointResult]) -> list[SkipRecord]:
    """Concatenate skips, dropping repeats of the same ``(specifier, referrer.href)``."""
    kept: dict[tuple[str, str], SkipRecord] = {}
    for result in results:
        for skip in result.skips:
            kept.setdefault(skip.key, skip)
    return list(kept.values())


def merge_resolutions(results: Iterable[EntrypointResult]) -> dict[str, dict[str, str]]:
    """Shallow-merge resolution maps; later entrypoints win on collisions."""
    merged: dict[str, dict[str, str]] = {}
    for result in results:
        merged.update(result.resolutions)
    return merged


def merge(results: Iterable[EntrypointResult]) -> TraversalReport:
    """Build the aggregate ``TraversalReport``.

    Args:
        results: Per-entrypoint results in entrypoint-processing order.
    """
    results = list(results)
    return TraversalReport(
        files=merge_files(results),
        skips=merge_skips(results),
        resolutions=merge_resolutions(results),
    )
