"""Command: preview reference rewriting for a single document."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from texflat.commands._base import TexflatCommand

if TYPE_CHECKING:
    from texflat.commands._context import AppContext


@click.command(
    cls=TexflatCommand,
    examples="""\
  texflat rewrite chapters/intro.tex
  texflat rewrite main.tex | diff main.tex -
  texflat --json rewrite main.tex""",
)
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def rewrite(app: AppContext, document: Path) -> None:
    """Print DOCUMENT with its include paths flattened.

    The file itself is not modified.
    """
    from texflat.services.flatten import FlattenService

    app.emit_content(FlattenService(app.settings).rewrite_file(document), "content")
