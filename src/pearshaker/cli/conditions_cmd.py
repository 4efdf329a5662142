"""``pearshaker conditions``: Show the resolution conditions for a specifier kind.

Prints the prefixed condition tuples, in precedence order, and the extension
list the Condition Resolver would hand to the resolution algorithm.

Exit Codes:
    0: Always, unless a target is malformed (2).
"""

from __future__ import annotations

import json

import click

from pearshaker.cli.output import print_plan
from pearshaker.config import DEFAULT_TARGETS
from pearshaker.core.models import EntryDescriptor
from pearshaker.core.resolution import plan_resolution
from pearshaker.exceptions import ConfigError

_KIND_FLAGS: dict[str, dict[str, bool]] = {
    "module": {},
    "require": {"is_require": True},
    "import": {"is_import": True},
    "addon": {"is_addon": True, "is_require": True},
    "asset": {"is_asset": True, "is_require": True},
}


@click.command("conditions")
@click.option(
    "--kind",
    type=click.Choice(list(_KIND_FLAGS)),
    default="module",
    help="Specifier kind (default: module).",
)
@click.option(
    "--target", "-t", "targets",
    multiple=True,
    help="<os>-<arch> target (repeatable). Defaults to all built-in targets.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def conditions_command(kind: str, targets: tuple[str, ...], output_format: str) -> None:
    """Show condition tuples and extensions for a specifier KIND."""
    entry = EntryDescriptor("", **_KIND_FLAGS[kind])
    try:
        plan = plan_resolution(entry, targets or DEFAULT_TARGETS)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    if output_format == "json":
        click.echo(json.dumps({
            "kind": plan.kind,
            "conditions": [list(c) for c in plan.conditions],
            "extensions": list(plan.extensions) if plan.extensions is not None else None,
        }, indent=2))
    else:
        print_plan(plan)
