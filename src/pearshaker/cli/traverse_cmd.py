"""``pearshaker traverse ROOT ENTRYPOINT...``: Compute reachable files.

Exposes ROOT as a read-only store and traverses each ENTRYPOINT (a path
inside ROOT, such as ``/index.js``).

Exit Codes:
    0: Traversal finished (skips, if any, are listed).
    1: Fatal traversal error (missing entrypoint, undecodable source).
    2: Usage or configuration error.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import click

from pearshaker.cli.output import print_report, print_traversal_error
from pearshaker.config import TraversalConfig, load_config
from pearshaker.core.traversal import PearShaker
from pearshaker.exceptions import ConfigError, PearShakerError, UnresolvedSpecifierError
from pearshaker.store import DirectoryStore


def _build_config(config_path: str | None, targets: tuple[str, ...]) -> TraversalConfig:
    """Load the optional YAML config, then apply ``--target`` overrides.

    Raises:
        click.UsageError: If the config or a target is invalid.
    """
    try:
        config = load_config(config_path) if config_path else TraversalConfig()
        if targets:
            config = config.with_overrides(targets=list(targets))
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc
    return config


def _error_payload(exc: PearShakerError) -> dict[str, Any]:
    """JSON form of a fatal error, keeping the resolution context if any."""
    payload: dict[str, Any] = {"error": str(exc)}
    if isinstance(exc, UnresolvedSpecifierError):
        payload["code"] = exc.code
        payload["specifier"] = exc.specifier
        payload["referrer"] = exc.referrer.to_dict() if exc.referrer is not None else None
        payload["candidates"] = list(exc.candidates)
    return payload


@click.command("traverse")
@click.argument("root", type=click.Path(exists=True, file_okay=False))
@click.argument("entrypoints", nargs=-1, required=True)
@click.option(
    "--defer", "-d", "defer",
    multiple=True,
    help="Specifier to tolerate if unresolved (repeatable).",
)
@click.option(
    "--target", "-t", "targets",
    multiple=True,
    help="<os>-<arch> target, in precedence order (repeatable). "
    "Replaces the configured targets.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file overriding builtins and targets.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def traverse_command(
    root: str,
    entrypoints: tuple[str, ...],
    defer: tuple[str, ...],
    targets: tuple[str, ...],
    config_path: str | None,
    output_format: str,
) -> None:
    """Compute the files reachable from ENTRYPOINTS inside ROOT.

    Unresolvable specifiers are deferred and reported as skips. A missing
    entrypoint is fatal.

    Examples:

        pearshaker traverse ./app /index.js

        pearshaker traverse ./app /index.js --defer ./optional.js --format json
    """
    config = _build_config(config_path, targets)
    shaker = PearShaker(DirectoryStore(Path(root)), entrypoints, config=config)

    try:
        report = asyncio.run(shaker.run(defer=list(defer)))
    except PearShakerError as exc:
        if output_format == "json":
            click.echo(json.dumps(_error_payload(exc), indent=2))
        else:
            print_traversal_error(exc)
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        print_report(report)
    sys.exit(0)
