"""Condition Resolver: pick conditions and extensions, then delegate.

For every target ``(os, arch)``, in order, three condition tuples are
emitted::

    (node, os, arch)
    (node, bare, os, arch)
    (module, os, arch)

The list order is resolution precedence: earlier targets win, and within a
target ``node`` wins over ``module``. Each tuple is then prefixed according
to the entry's capabilities:

=============  ============  ==========================================
Entry          Prefix        Extensions
=============  ============  ==========================================
addon          ``addon``     ``.node``, ``.bare`` (addon resolver)
asset          ``asset``     none -- exact paths only
require        ``require``   ``.js .cjs .mjs .json .node .bare``
import         ``import``    same as require
other          none          same as require
=============  ============  ==========================================

The resolver adds no caching and no error handling: whatever the delegated
algorithm returns or raises reaches the caller unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from pearshaker.config import parse_target
from pearshaker.core.models import EntryDescriptor, ModuleURL, Resolution
from pearshaker.core.resolution.addons import resolve_addon
from pearshaker.core.resolution.modules import resolve_module
from pearshaker.store.base import VirtualStore

MODULE_EXTENSIONS: tuple[str, ...] = (".js", ".cjs", ".mjs", ".json", ".node", ".bare")
ADDON_EXTENSIONS: tuple[str, ...] = (".node", ".bare")

ModuleResolver = Callable[..., Resolution]
AddonResolver = Callable[..., Resolution]


def build_conditions(targets: Sequence[str]) -> list[tuple[str, ...]]:
    """Return the unprefixed condition tuples for ``targets``, in precedence order.

    Args:
        targets: ``<os>-<arch>`` strings.

    Raises:
        ConfigError: If a target is malformed.
    """
    conditions: list[tuple[str, ...]] = []
    for target in targets:
        os_name, arch = parse_target(target)
        conditions.append(("node", os_name, arch))
        conditions.append(("node", "bare", os_name, arch))
        conditions.append(("module", os_name, arch))
    return conditions


@dataclass(frozen=True)
class ResolutionPlan:
    """What the Condition Resolver will hand to the delegated algorithm.

    Attributes:
        kind: ``"addon"``, ``"asset"``, ``"require"``, ``"import"``, or
            ``"module"``.
        specifier: Specifier passed on (``"."`` for an empty addon specifier).
        conditions: Prefixed condition tuples, in precedence order.
        extensions: Extension list, or None for exact-path resolution.
    """

    kind: str
    specifier: str
    conditions: tuple[tuple[str, ...], ...]
    extensions: tuple[str, ...] | None

    @property
    def is_addon(self) -> bool:
        return self.kind == "addon"


def plan_resolution(entry: EntryDescriptor, targets: Sequence[str]) -> ResolutionPlan:
    """Compute conditions and extensions for ``entry`` without resolving it."""
    base = build_conditions(targets)

    if entry.is_addon:
        return ResolutionPlan(
            kind="addon",
            specifier=entry.specifier or ".",
            conditions=tuple(("addon", *c) for c in base),
            extensions=ADDON_EXTENSIONS,
        )

    if entry.is_asset:
        return ResolutionPlan(
            kind="asset",
            specifier=entry.specifier,
            conditions=tuple(("asset", *c) for c in base),
            extensions=None,
        )

    if entry.is_require:
        kind, conditions = "require", tuple(("require", *c) for c in base)
    elif entry.is_import:
        kind, conditions = "import", tuple(("import", *c) for c in base)
    else:
        kind, conditions = "module", tuple(base)
    return ResolutionPlan(
        kind=kind,
        specifier=entry.specifier,
        conditions=conditions,
        extensions=MODULE_EXTENSIONS,
    )


class ConditionResolver:
    """Resolve lexed entries against one store.

    Instances are callables with the signature the packer expects:
    ``resolver(entry, referrer, targets) -> Resolved | Unresolved``.

    Args:
        store: Store the delegated algorithms probe.
        module_resolver: Replacement for ``resolve_module``.
        addon_resolver: Replacement for ``resolve_addon``.
    """

    def __init__(
        self,
        store: VirtualStore,
        *,
        module_resolver: ModuleResolver = resolve_module,
        addon_resolver: AddonResolver = resolve_addon,
    ) -> None:
        self._store = store
        self._resolve_module = module_resolver
        self._resolve_addon = addon_resolver

    def __call__(
        self,
        entry: EntryDescriptor,
        referrer: ModuleURL | None,
        targets: Sequence[str],
    ) -> Resolution:
        plan = plan_resolution(entry, targets)

        if plan.is_addon:
            return self._resolve_addon(
                self._store,
                plan.specifier,
                referrer,
                extensions=plan.extensions,
                conditions=plan.conditions,
                hosts=tuple(targets),
                linked=False,
            )

        return self._resolve_module(
            self._store,
            plan.specifier,
            referrer,
            extensions=plan.extensions,
            conditions=plan.conditions,
        )
