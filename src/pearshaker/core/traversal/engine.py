"""Traversal Engine: per-entrypoint retry-with-defer over the packer.

For each entrypoint an independent task runs this loop:

1. Pack the entrypoint with the current defer list.
2. ``PackResult`` -- done; keep its files and resolutions.
3. ``Unresolved`` with no referrer -- the entrypoint itself is missing;
   raise ``UnresolvedSpecifierError``.
4. ``Unresolved`` with a referrer -- add the specifier to this task's defer
   list, record a ``SkipRecord``, and pack again.

Exceptions from the packer propagate unchanged.

Termination: every retry adds one specifier that can no longer stop this
entrypoint, and an entrypoint reaches finitely many specifiers, so the loop
ends after at most that many retries.

Concurrency: tasks share only the read-only store. Each owns its defer list
and skip list; results are merged after every task has settled. If any task
fails, ``run()`` raises the failure of the first failing entrypoint in
entrypoint order and returns no partial report.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable

from pearshaker.config import TraversalConfig
from pearshaker.core.models import (
    EntrypointResult,
    PackOutcome,
    PackResult,
    SkipRecord,
    TraversalReport,
)
from pearshaker.core.packer import Resolver, pack
from pearshaker.core.resolution import ConditionResolver
from pearshaker.core.traversal.aggregate import merge
from pearshaker.exceptions import TraversalError, UnresolvedSpecifierError
from pearshaker.store.base import VirtualStore, normalize_path

logger = logging.getLogger(__name__)

Packer = Callable[..., PackOutcome]


class PearShaker:
    """Compute the files reachable from a set of entrypoints.

    Usage::

        store = MemoryStore.from_mapping({
            "/index.js": 'require("./dep.js")',
            "/dep.js": "module.exports = 1",
        })
        report = asyncio.run(PearShaker(store, ["/index.js"]).run())
        report.files  # ['/index.js', '/dep.js']

    Args:
        store: Read-only store holding the sources.
        entrypoints: Entrypoint paths. Normalized, then de-duplicated with
            the first occurrence keeping its position.
        config: Builtins and targets. Defaults to ``TraversalConfig()``.
        packer: Replacement for ``pearshaker.core.packer.pack``.
        resolver_factory: Builds the resolver injected into the packer.
    """

    def __init__(
        self,
        store: VirtualStore,
        entrypoints: Iterable[str],
        *,
        config: TraversalConfig | None = None,
        packer: Packer = pack,
        resolver_factory: Callable[[VirtualStore], Resolver] = ConditionResolver,
    ) -> None:
        self._store = store
        self._entrypoints = list(dict.fromkeys(normalize_path(e) for e in entrypoints))
        self._config = config or TraversalConfig()
        self._packer = packer
        self._resolver_factory = resolver_factory

    @property
    def entrypoints(self) -> list[str]:
        """De-duplicated, normalized entrypoints in processing order."""
        return list(self._entrypoints)

    @property
    def config(self) -> TraversalConfig:
        return self._config

    async def run(self, defer: Iterable[str] | None = None) -> TraversalReport:
        """Traverse every entrypoint concurrently and merge the results.

        Args:
            defer: Specifiers that must not stop traversal if unresolved.
                Each entrypoint gets its own copy.

        Returns:
            The merged ``TraversalReport``.

        Raises:
            UnresolvedSpecifierError: If an entrypoint file is missing.
            PearShakerError: Any other fatal failure from packing.
        """
        seed = list(defer or ())
        resolve = self._resolver_factory(self._store)
        outcomes = await asyncio.gather(
            *(self._traverse(e, list(seed), resolve) for e in self._entrypoints),
            return_exceptions=True,
        )

        for entrypoint, outcome in zip(self._entrypoints, outcomes):
            if isinstance(outcome, BaseException):
                logger.debug("Traversal of %s failed: %s", entrypoint, outcome)
                raise outcome

        report = merge(outcomes)
        logger.debug(
            "Traversed %d entrypoint(s): %d file(s), %d skip(s)",
            len(self._entrypoints), len(report.files), len(report.skips),
        )
        return report

    async def _traverse(
        self, entrypoint: str, defer: list[str], resolve: Resolver
    ) -> EntrypointResult:
        result = EntrypointResult(entrypoint=entrypoint)

        while True:
            result.attempts += 1
            logger.debug(
                "Packing %s (attempt %d, %d deferred)",
                entrypoint, result.attempts, len(defer),
            )
            outcome = await asyncio.to_thread(
                self._packer,
                self._store,
                entrypoint,
                builtins=self._config.builtins,
                targets=self._config.targets,
                resolve=resolve,
                defer=tuple(defer),
            )

            if isinstance(outcome, PackResult):
                result.files = list(outcome.files)
                result.resolutions = outcome.resolutions
                return result

            if outcome.referrer is None:
                raise UnresolvedSpecifierError.from_outcome(outcome)

            if outcome.specifier in defer:
                raise TraversalError(
                    f"Packer reported deferred specifier {outcome.specifier!r} "
                    f"from {outcome.referrer.href} as unresolved"
                )

            defer.append(outcome.specifier)
            result.skips.append(
                SkipRecord(outcome.specifier, outcome.referrer, outcome.candidates)
            )
            logger.warning(
                "Skipping unresolved %r imported from %s",
                outcome.specifier, outcome.referrer.pathname,
            )
