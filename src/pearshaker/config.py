"""Traversal configuration: builtin module names and target platforms.

Both lists are plain configuration handed to ``PearShaker`` at construction
time. The defaults below cover the Bare/Node runtime builtins and the desktop
platforms Pear applications ship for.

A YAML file can override either list::

    builtins: [fs, path]          # replaces the default builtins
    extra_builtins: [bare-fs]     # appended to whatever builtins are active
    targets: [linux-x64, darwin-arm64]
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from pearshaker.exceptions import ConfigError

DEFAULT_BUILTINS: tuple[str, ...] = (
    "net",
    "assert",
    "console",
    "events",
    "fs",
    "fs/promises",
    "http",
    "https",
    "os",
    "util",
    "path",
    "child_process",
    "repl",
    "url",
    "tty",
    "module",
    "process",
    "timers",
    "inspector",
    "electron",
    "stream",
    "crypto",
    "tls",
    "zlib",
    "buffer",
)

DEFAULT_TARGETS: tuple[str, ...] = (
    "darwin-arm64",
    "darwin-x64",
    "linux-arm64",
    "linux-x64",
    "win32-x64",
)

_KNOWN_KEYS = frozenset({"builtins", "extra_builtins", "targets"})


def parse_target(target: str) -> tuple[str, str]:
    """Split a ``<os>-<arch>`` target string into its two parts.

    Args:
        target: Target identifier such as ``"linux-x64"``.

    Returns:
        An ``(os, arch)`` tuple.

    Raises:
        ConfigError: If the string is not exactly two non-empty parts.
    """
    parts = target.strip().split("-")
    if len(parts) != 2 or not all(parts):
        raise ConfigError(f"Invalid target {target!r}: expected '<os>-<arch>'")
    return parts[0], parts[1]


@dataclass(frozen=True)
class TraversalConfig:
    """Builtins and targets used by one traversal run.

    Attributes:
        builtins: Specifiers reserved for the runtime; never resolved.
        targets: Ordered ``<os>-<arch>`` strings. Order is resolution
            precedence: earlier targets win.
    """

    builtins: tuple[str, ...] = DEFAULT_BUILTINS
    targets: tuple[str, ...] = DEFAULT_TARGETS

    def __post_init__(self) -> None:
        object.__setattr__(self, "builtins", tuple(self.builtins))
        object.__setattr__(self, "targets", tuple(self.targets))
        for target in self.targets:
            parse_target(target)

    @property
    def target_pairs(self) -> tuple[tuple[str, str], ...]:
        """Targets split into ``(os, arch)`` pairs, in configured order."""
        return tuple(parse_target(t) for t in self.targets)

    def with_overrides(
        self,
        *,
        builtins: list[str] | tuple[str, ...] | None = None,
        targets: list[str] | tuple[str, ...] | None = None,
    ) -> TraversalConfig:
        """Return a copy with the given lists replaced (None keeps current)."""
        return replace(
            self,
            builtins=tuple(builtins) if builtins is not None else self.builtins,
            targets=tuple(targets) if targets is not None else self.targets,
        )


def _string_list(data: dict[str, Any], key: str, source: Path) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{source}: '{key}' must be a list of strings")
    return value


def load_config(path: Path | str, base: TraversalConfig | None = None) -> TraversalConfig:
    """Load a ``TraversalConfig`` from a YAML file.

    Args:
        path: Path to the YAML file.
        base: Configuration to apply the file on top of. Defaults to
            ``TraversalConfig()``.

    Returns:
        The merged configuration.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, is not a
            mapping, has unknown keys, or has values of the wrong type.
    """
    source = Path(path)
    try:
        raw = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config {source}: {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: top level must be a mapping")

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(f"{source}: unknown keys {', '.join(sorted(unknown))}")

    config = base or TraversalConfig()
    builtins = _string_list(data, "builtins", source)
    extra = _string_list(data, "extra_builtins", source)
    targets = _string_list(data, "targets", source)

    if extra:
        merged = list(builtins if builtins is not None else config.builtins)
        builtins = merged + [b for b in extra if b not in merged]

    return config.with_overrides(builtins=builtins, targets=targets)
