"""Click base classes that add an ``--examples`` flag.

``--help`` stays short; ``--examples`` prints a block of ready-to-paste
invocations for the command and exits.
"""

from __future__ import annotations

from typing import Any

import click


class ExamplesMixin:
    """Mixin for click commands taking an ``examples=`` keyword."""

    examples: str | None
    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class TexflatCommand(ExamplesMixin, click.Command):
    """A click command accepting ``examples=``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class TexflatGroup(ExamplesMixin, click.Group):
    """A click group accepting ``examples=``.

    Subcommands declared through the group default to TexflatCommand.
    """

    command_class = TexflatCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
