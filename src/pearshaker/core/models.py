"""Data types shared by the lexer, resolvers, packer, and traversal engine.

Resolution outcomes are explicit variants rather than exceptions:

- ``Resolved`` -- the specifier maps to a file in the store.
- ``Unresolved`` -- nothing matched; carries every candidate URL tried.

The packer returns either a ``PackResult`` or the ``Unresolved`` that
stopped it, and the traversal engine dispatches on the type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class ModuleURL:
    """URL of a file inside a virtual store.

    Attributes:
        href: Full URL, ``<scheme>://<pathname>`` (e.g. ``drive:///index.js``).
        pathname: Normalized store path (e.g. ``/index.js``).
    """

    href: str
    pathname: str

    @classmethod
    def for_path(cls, pathname: str, scheme: str = "drive") -> ModuleURL:
        """Build the URL for a normalized store path."""
        return cls(href=f"{scheme}://{pathname}", pathname=pathname)

    def to_dict(self) -> dict[str, str]:
        return {"href": self.href, "pathname": self.pathname}


@dataclass(frozen=True)
class EntryDescriptor:
    """A specifier as found at one import/require site.

    Capabilities are computed once by the lexer. Addon/asset describe what is
    being loaded; require/import describe how. The two axes are independent,
    so ``require.addon()`` is both ``is_addon`` and ``is_require``.
    """

    specifier: str
    is_addon: bool = False
    is_asset: bool = False
    is_require: bool = False
    is_import: bool = False

    @property
    def kind(self) -> str:
        """Short label for logs and CLI output."""
        if self.is_addon:
            return "addon"
        if self.is_asset:
            return "asset"
        if self.is_require:
            return "require"
        if self.is_import:
            return "import"
        return "module"


@dataclass(frozen=True)
class Resolved:
    """A specifier resolved to a concrete file URL."""

    url: ModuleURL


@dataclass(frozen=True)
class Unresolved:
    """A specifier that matched no file.

    Attributes:
        specifier: The literal specifier.
        referrer: URL of the file that contains it; None when the specifier
            is the entrypoint itself.
        candidates: Every URL the resolver tried, in order.
    """

    specifier: str
    referrer: ModuleURL | None
    candidates: tuple[str, ...] = ()


Resolution = Union[Resolved, Unresolved]


@dataclass(frozen=True)
class SkipRecord:
    """A failed resolution the traversal engine deferred instead of aborting."""

    specifier: str
    referrer: ModuleURL
    candidates: tuple[str, ...] = ()

    @property
    def key(self) -> tuple[str, str]:
        """Deduplication key: ``(specifier, referrer.href)``."""
        return self.specifier, self.referrer.href

    def to_dict(self) -> dict[str, Any]:
        return {
            "specifier": self.specifier,
            "referrer": self.referrer.to_dict(),
            "candidates": list(self.candidates),
        }


@dataclass(frozen=True)
class PackedFile:
    """A file reached by the packer.

    Attributes:
        url: The file's store URL.
        size: Content length in bytes.
    """

    url: ModuleURL
    size: int


@dataclass
class PackResult:
    """Successful output of one pack call.

    Attributes:
        files: Mapping of store path to ``PackedFile``, in discovery order.
        resolutions: ``referrer href -> {specifier -> resolved href}``.
    """

    files: dict[str, PackedFile] = field(default_factory=dict)
    resolutions: dict[str, dict[str, str]] = field(default_factory=dict)


PackOutcome = Union[PackResult, Unresolved]


@dataclass
class EntrypointResult:
    """Everything one entrypoint's traversal task produced."""

    entrypoint: str
    files: list[str] = field(default_factory=list)
    skips: list[SkipRecord] = field(default_factory=list)
    resolutions: dict[str, dict[str, str]] = field(default_factory=dict)
    attempts: int = 0


@dataclass
class TraversalReport:
    """Aggregate report across all entrypoints of a ``run()`` call.

    Attributes:
        files: Union of every resolved store path. Order is not meaningful.
        skips: Deferred resolutions, unique by ``(specifier, referrer.href)``.
        resolutions: Shallow merge of per-entrypoint resolution maps.
    """

    files: list[str] = field(default_factory=list)
    skips: list[SkipRecord] = field(default_factory=list)
    resolutions: dict[str, dict[str, str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible form of the report."""
        return {
            "files": list(self.files),
            "skips": [s.to_dict() for s in self.skips],
            "resolutions": {k: dict(v) for k, v in self.resolutions.items()},
        }
