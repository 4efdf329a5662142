"""Specifier resolution: condition selection plus module and addon algorithms.

``ConditionResolver`` is the entry point used by the packer. It decides the
condition tuples and extensions for a lexed entry and delegates to
``resolve_module`` or ``resolve_addon``. Both algorithms return an explicit
``Resolved`` or ``Unresolved`` result rather than raising.
"""

from pearshaker.core.resolution.addons import resolve_addon
from pearshaker.core.resolution.conditions import (
    ADDON_EXTENSIONS,
    MODULE_EXTENSIONS,
    ConditionResolver,
    ResolutionPlan,
    build_conditions,
    plan_resolution,
)
from pearshaker.core.resolution.modules import resolve_module

__all__ = [
    "ADDON_EXTENSIONS",
    "MODULE_EXTENSIONS",
    "ConditionResolver",
    "ResolutionPlan",
    "build_conditions",
    "plan_resolution",
    "resolve_addon",
    "resolve_module",
]
