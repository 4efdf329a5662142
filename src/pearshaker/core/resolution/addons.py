"""Native addon resolution: locate a prebuilt binary for each target host.

An addon specifier names a package (``"."`` being the package that contains
the referrer). The package's prebuilds are laid out as::

    <package>/prebuilds/<os>-<arch>/<name><ext>

where ``<name>`` is the manifest name with ``/`` replaced by ``+`` for scoped
packages. Hosts are tried in order, then extensions, and the first binary
present wins.
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
    find_package_scope,
    match_subpath,
    read_manifest,
)
from pearshaker.core.resolution.modules import (
    is_path_specifier,
    split_package_specifier,
)
from pearshaker.store.base import VirtualStore, normalize_path

logger = logging.getLogger(__name__)


def _remap_import(
    store: VirtualStore, specifier: str, base_dir: str, conditions: Conditions
) -> tuple[str, str] | None:
    """Map a ``#`` specifier through ``imports``; returns ``(target, scope_dir)``."""
    scope = find_package_scope(store, base_dir)
    if scope is None:
        return None
    scope_dir, manifest = scope
    imports = manifest.get("imports")
    if not isinstance(imports, dict):
        return None
    for condition_set in condition_matrix(conditions):
        targets = match_subpath(imports, specifier, condition_set)
        if targets:
            return targets[0], scope_dir
    return None


def _package_root(
    store: VirtualStore, specifier: str, base_dir: str
) -> tuple[str, dict | None] | None:
    """Find the directory (and manifest) of the package holding the addon."""
    if is_path_specifier(specifier):
        target = normalize_path(posixpath.join(base_dir, specifier))
        scope = find_package_scope(store, target)
        if scope is not None:
            return scope
        return target, None

    parsed = split_package_specifier(specifier)
    if parsed is None:
        return None
    name, _ = parsed
    for directory in ancestors(base_dir):
        if posixpath.basename(directory) == "node_modules":
            continue
        package_dir = normalize_path(posixpath.join(directory, "node_modules", name))
        manifest = read_manifest(store, package_dir)
        if manifest is not None:
            return package_dir, manifest
    return None


def prebuild_name(package_dir: str, manifest: dict | None) -> str:
    """Binary base name for a package: manifest name, else directory name."""
    name = manifest.get("name") if manifest else None
    if not isinstance(name, str) or not name:
        name = posixpath.basename(package_dir) or "addon"
    return name.replace("/", "+")


def resolve_addon(
    store: VirtualStore,
    specifier: str,
    referrer: ModuleURL | None,
    *,
    extensions: Sequence[str] = (".node", ".bare"),
    conditions: Conditions = (),
    hosts: Sequence[str] = (),
    linked: bool = False,
) -> Resolution:
    """Resolve an addon specifier to a prebuilt binary.

    Args:
        store: Store to probe.
        specifier: Addon specifier; empty means ``"."``.
        referrer: URL of the file loading the addon.
        extensions: Binary extensions, in preference order.
        conditions: Condition tuples used when remapping ``#`` specifiers.
        hosts: ``<os>-<arch>`` hosts, in preference order.
        linked: Linked (system-installed) addons are not supported.

    Returns:
        ``Resolved`` with the first binary found, or ``Unresolved``.

    Raises:
        ValueError: If ``linked`` is True.
    """
    if linked:
        raise ValueError("Linked addon resolution is not supported")

    specifier = specifier or "."
    base_dir = posixpath.dirname(referrer.pathname) if referrer else "/"
    candidates: list[str] = []
    lookup_spec = specifier

    if specifier.startswith("#"):
        remapped = _remap_import(store, specifier, base_dir, conditions)
        if remapped is None:
            return Unresolved(specifier, referrer, ())
        lookup_spec, base_dir = remapped

    root = _package_root(store, lookup_spec, base_dir)
    if root is None:
        return Unresolved(specifier, referrer, ())
    package_dir, manifest = root
    name = prebuild_name(package_dir, manifest)

    for host in hosts:
        for ext in extensions:
            path = normalize_path(
                posixpath.join(package_dir, "prebuilds", host, name + ext)
            )
            candidates.append(store.url_for(path).href)
            if store.exists(path):
                return Resolved(store.url_for(path))

    logger.debug("No prebuild for %s in %s", name, package_dir)
    return Unresolved(specifier, referrer, tuple(candidates))
