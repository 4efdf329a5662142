"""Module resolution: map a specifier to a file in the store.

Resolution order:

1. Path specifiers (``/``, ``./``, ``../``, ``.``, ``..``) resolve against
   the referrer's directory: exact file, then each extension, then the
   directory's ``package.json`` ``main``, then ``index.<ext>``.
2. ``#`` specifiers remap through the nearest manifest's ``imports``.
3. Bare specifiers look for ``node_modules/<name>`` in the referrer's
   directory and each parent. A package with ``exports`` only exposes what
   it exports; otherwise ``main``/``index`` and plain subpaths apply.

Every URL tried is recorded, in order, in ``Unresolved.candidates``.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Sequence

from pearshaker.core.models import ModuleURL, Resolution, Resolved, Unresolved
from pearshaker.core.resolution.manifest import (
    Conditions,
    ancestors,
    condition_matrix,
    export_targets,
    find_package_scope,
    match_subpath,
    read_manifest,
)
from pearshaker.store.base import VirtualStore, normalize_path

logger = logging.getLogger(__name__)


def is_path_specifier(specifier: str) -> bool:
    """Return True for ``/``-absolute and ``.``-relative specifiers."""
    return (
        specifier.startswith(("/", "./", "../"))
        or specifier in (".", "..")
    )


def split_package_specifier(specifier: str) -> tuple[str, str] | None:
    """Split a bare specifier into ``(package name, subpath)``.

    >>> split_package_specifier("@scope/pkg/lib/a.js")
    ('@scope/pkg', './lib/a.js')
    >>> split_package_specifier("pkg")
    ('pkg', '.')
    """
    parts = specifier.split("/")
    if specifier.startswith("@"):
        if len(parts) < 2 or not parts[1]:
            return None
        name, rest = "/".join(parts[:2]), parts[2:]
    else:
        name, rest = parts[0], parts[1:]
    if not name:
        return None
    rest = [p for p in rest if p]
    return name, ("./" + "/".join(rest)) if rest else "."


class _Lookup:
    """Probe the store while recording every candidate URL."""

    def __init__(self, store: VirtualStore, extensions: Sequence[str] | None) -> None:
        self.store = store
        self.extensions = tuple(extensions) if extensions is not None else ()
        self.candidates: list[str] = []

    def probe(self, path: str) -> str | None:
        path = normalize_path(path)
        self.candidates.append(self.store.url_for(path).href)
        return path if self.store.exists(path) else None

    def file(self, path: str) -> str | None:
        if found := self.probe(path):
            return found
        for ext in self.extensions:
            if found := self.probe(path + ext):
                return found
        return None

    def index(self, directory: str) -> str | None:
        for ext in self.extensions:
            if found := self.probe(posixpath.join(directory, "index" + ext)):
                return found
        return None

    def directory(self, directory: str) -> str | None:
        manifest = read_manifest(self.store, directory)
        main = manifest.get("main") if manifest else None
        if isinstance(main, str) and main:
            main_path = normalize_path(posixpath.join(directory, main))
            if found := self.file(main_path) or self.index(main_path):
                return found
        return self.index(directory)

    def path(self, path: str) -> str | None:
        return self.file(path) or self.directory(path)


def _resolve_package(
    lookup: _Lookup, specifier: str, base_dir: str, matrix: list[tuple[str, ...]]
) -> str | None:
    parsed = split_package_specifier(specifier)
    if parsed is None:
        return None
    name, subpath = parsed

    for directory in ancestors(base_dir):
        if posixpath.basename(directory) == "node_modules":
            continue
        package_dir = normalize_path(posixpath.join(directory, "node_modules", name))
        manifest = read_manifest(lookup.store, package_dir)

        if manifest is not None and "exports" in manifest:
            for conditions in matrix:
                for target in export_targets(manifest["exports"], subpath, conditions):
                    if found := lookup.probe(posixpath.join(package_dir, target)):
                        return found
            logger.debug("%s: %s not exported by %s", specifier, subpath, package_dir)
            return None

        if subpath == ".":
            found = lookup.directory(package_dir)
        else:
            found = lookup.path(posixpath.join(package_dir, subpath))
        if found:
            return found
    return None


def _resolve_imports(
    lookup: _Lookup, specifier: str, base_dir: str, matrix: list[tuple[str, ...]]
) -> str | None:
    scope = find_package_scope(lookup.store, base_dir)
    if scope is None:
        return None
    scope_dir, manifest = scope
    imports = manifest.get("imports")
    if not isinstance(imports, dict):
        return None

    for conditions in matrix:
        for target in match_subpath(imports, specifier, conditions):
            if is_path_specifier(target):
                found = lookup.probe(posixpath.join(scope_dir, target))
            else:
                found = _resolve_package(lookup, target, scope_dir, matrix)
            if found:
                return found
    return None


def resolve_module(
    store: VirtualStore,
    specifier: str,
    referrer: ModuleURL | None,
    *,
    extensions: Sequence[str] | None = None,
    conditions: Conditions = (),
) -> Resolution:
    """Resolve ``specifier`` as imported from ``referrer``.

    Args:
        store: Store to probe.
        specifier: The literal specifier.
        referrer: URL of the importing file; None resolves from ``/``.
        extensions: Extensions to append when the exact path is missing.
            None disables extension and ``index`` probing.
        conditions: Ordered condition tuples for ``exports``/``imports``.

    Returns:
        ``Resolved`` with the file URL, or ``Unresolved`` listing every
        candidate tried.
    """
    lookup = _Lookup(store, extensions)
    matrix = condition_matrix(conditions)
    base_dir = posixpath.dirname(referrer.pathname) if referrer else "/"

    if is_path_specifier(specifier):
        found = lookup.path(posixpath.join(base_dir, specifier))
    elif specifier.startswith("#"):
        found = _resolve_imports(lookup, specifier, base_dir, matrix)
    else:
        found = _resolve_package(lookup, specifier, base_dir, matrix)

    if found is None:
        return Unresolved(specifier, referrer, tuple(lookup.candidates))
    return Resolved(store.url_for(found))
