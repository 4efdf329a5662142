"""pearshaker CLI: dependency traversal for Pear/Bare application drives.

Entry point for the ``pearshaker`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    traverse    Compute the files reachable from one or more entrypoints.
    conditions  Show the condition tuples used to resolve a specifier kind.

Usage::

    pearshaker traverse ./app /index.js
    pearshaker traverse ./app /index.js /worker.js --defer ./optional.js
    pearshaker traverse ./app /index.js --format json
    pearshaker conditions --kind addon --target linux-x64
"""

from __future__ import annotations

import logging

import click

from pearshaker import __version__
from pearshaker.cli.conditions_cmd import conditions_command
from pearshaker.cli.traverse_cmd import traverse_command


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log traversal progress to stderr.")
def cli(verbose: bool) -> None:
    """pearshaker: Find every file an application's entrypoints can load.

    Walks require/import specifiers through a read-only file store,
    deferring specifiers that cannot be resolved instead of failing.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


cli.add_command(traverse_command)
cli.add_command(conditions_command)
