"""``package.json`` reading and ``exports``/``imports`` target matching.

Condition sets are evaluated as a matrix: the caller passes an ordered list
of condition tuples, and each tuple is tried in turn against a conditional
map. Within one tuple, a map key matches if it is ``"default"`` or a member
of the tuple, and the first matching key in map order wins.
"""

from __future__ import annotations

import json
import logging
import posixpath
from collections.abc import Iterator, Sequence
from typing import Any

from pearshaker.store.base import VirtualStore, normalize_path

logger = logging.getLogger(__name__)

Conditions = Sequence[Sequence[str]]


def read_manifest(store: VirtualStore, directory: str) -> dict[str, Any] | None:
    """Read and decode ``<directory>/package.json``.

    Returns:
        The manifest mapping, or None if the file is missing. A manifest
        that is not a JSON object is logged and treated as missing.
    """
    path = normalize_path(posixpath.join(directory, "package.json"))
    raw = store.read(path)
    if raw is None:
        return None
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        logger.warning("Ignoring malformed manifest %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring manifest %s: not a JSON object", path)
        return None
    return data


def ancestors(directory: str) -> Iterator[str]:
    """Yield ``directory`` and each parent up to and including ``/``."""
    current = normalize_path(directory)
    while True:
        yield current
        if current == "/":
            return
        current = posixpath.dirname(current)


def find_package_scope(
    store: VirtualStore, directory: str
) -> tuple[str, dict[str, Any]] | None:
    """Return ``(dir, manifest)`` for the nearest enclosing package, if any."""
    for candidate in ancestors(directory):
        manifest = read_manifest(store, candidate)
        if manifest is not None:
            return candidate, manifest
    return None


def condition_matrix(conditions: Conditions) -> list[tuple[str, ...]]:
    """Normalize a condition list; an empty list still allows ``default``."""
    matrix = [tuple(c) for c in conditions]
    return matrix or [()]


def _resolve_target(
    target: Any, conditions: tuple[str, ...], substitution: str | None
) -> list[str] | None:
    """Expand one target value.

    Returns:
        Target strings in fallback order, an empty list if nothing in the
        value applies, or None when the value explicitly excludes the path
        (a JSON ``null``).
    """
    if target is None:
        return None
    if isinstance(target, str):
        if substitution is not None:
            target = target.replace("*", substitution)
        return [target]
    if isinstance(target, list):
        out: list[str] = []
        for item in target:
            out.extend(_resolve_target(item, conditions, substitution) or [])
        return out
    if isinstance(target, dict):
        for key, value in target.items():
            if key != "default" and key not in conditions:
                continue
            resolved = _resolve_target(value, conditions, substitution)
            if resolved is None or resolved:
                return resolved
        return []
    return []


def match_subpath(
    mapping: dict[str, Any], key: str, conditions: tuple[str, ...]
) -> list[str]:
    """Match ``key`` against a subpath map (``exports`` or ``imports``).

    Exact keys win over ``*`` patterns; among patterns, the longest prefix
    wins.
    """
    if key in mapping and "*" not in key:
        return _resolve_target(mapping[key], conditions, None) or []

    best: tuple[str, str, str] | None = None
    for pattern in mapping:
        star = pattern.find("*")
        if star == -1:
            continue
        prefix, suffix = pattern[:star], pattern[star + 1:]
        if not key.startswith(prefix) or key == prefix:
            continue
        if suffix and (not key.endswith(suffix) or len(key) < len(pattern)):
            continue
        if best is None or len(prefix) > len(best[1]):
            best = (pattern, prefix, suffix)

    if best is None:
        return []
    pattern, prefix, suffix = best
    substitution = key[len(prefix):len(key) - len(suffix)]
    return _resolve_target(mapping[pattern], conditions, substitution) or []


def export_targets(
    exports: Any, subpath: str, conditions: tuple[str, ...]
) -> list[str]:
    """Return the ``exports`` targets for ``subpath`` under one condition tuple.

    Args:
        exports: The manifest's ``exports`` value.
        subpath: ``"."`` or ``"./<path>"``.
        conditions: One condition tuple.
    """
    if isinstance(exports, dict) and any(k.startswith(".") for k in exports):
        mapping = exports
    else:
        mapping = {".": exports}
    return match_subpath(mapping, subpath, conditions)
