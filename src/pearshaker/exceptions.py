"""pearshaker exception hierarchy.

All public exceptions inherit from PearShakerError, giving callers a single
base class to catch when they want to handle any pearshaker-specific failure
without swallowing unrelated errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pearshaker.core.models import ModuleURL, Unresolved


class PearShakerError(Exception):
    """Base exception for all pearshaker errors."""


class UnresolvedSpecifierError(PearShakerError):
    """Raised when a specifier cannot be resolved and cannot be deferred.

    The traversal engine raises this only when the entrypoint itself is
    missing from the store (``referrer`` is None). The resolution context
    is kept on the exception so callers can report it verbatim.

    Attributes:
        specifier: The specifier that failed to resolve.
        referrer: URL of the file containing the specifier, or None.
        candidates: Every URL the resolver tried, in order.
        code: Always ``"MODULE_NOT_FOUND"``.
    """

    code = "MODULE_NOT_FOUND"

    def __init__(
        self,
        specifier: str,
        referrer: ModuleURL | None = None,
        candidates: tuple[str, ...] = (),
    ) -> None:
        self.specifier = specifier
        self.referrer = referrer
        self.candidates = tuple(candidates)
        where = referrer.href if referrer is not None else "<entrypoint>"
        super().__init__(f"Cannot find module {specifier!r} imported from {where}")

    @classmethod
    def from_outcome(cls, outcome: Unresolved) -> UnresolvedSpecifierError:
        """Build the exception from an ``Unresolved`` result variant."""
        return cls(outcome.specifier, outcome.referrer, outcome.candidates)


class ParseError(PearShakerError):
    """Raised when a source file cannot be decoded or lexed.

    Covers undecodable bytes and any malformed source the packer refuses
    to walk. Never retried by the traversal engine.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse {path}: {reason}")


class StoreError(PearShakerError):
    """Raised for invalid virtual store access, such as a path escaping the root."""


class ConfigError(PearShakerError):
    """Raised when a configuration file or value is invalid."""


class TraversalError(PearShakerError):
    """Raised when the packer breaks the retry contract.

    A packer that reports an already-deferred specifier as unresolved would
    make the retry loop spin forever, so the engine stops instead.
    """
