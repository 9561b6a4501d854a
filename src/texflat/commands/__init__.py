"""Subcommand modules for texflat.

Provides register_commands() which uses deferred imports to keep
``texflat --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from texflat.commands.flatten import flatten
    from texflat.commands.rewrite import rewrite

    cli.add_command(flatten)
    cli.add_command(rewrite)
