"""Command: flatten a nested LaTeX project into one directory."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from texflat.commands._base import TexflatCommand
from texflat.domain.collisions import CollisionPolicy

if TYPE_CHECKING:
    from texflat.commands._context import AppContext


@click.command(
    cls=TexflatCommand,
    examples="""\
  texflat flatten --path thesis --out thesis-flat
  texflat flatten -p thesis -o thesis-flat --dry-run
  texflat flatten -p thesis -o thesis-flat --on-collision warn
  texflat flatten -p thesis -o thesis-flat --jobs 8
  texflat --json flatten -p thesis -o thesis-flat""",
)
@click.option(
    "-p",
    "--path",
    "input_path",
    required=True,
    type=click.Path(path_type=Path),
    help="Folder containing the LaTeX project.",
)
@click.option(
    "-o",
    "--out",
    "output_path",
    required=True,
    type=click.Path(path_type=Path),
    help="Empty (or missing) directory for the flattened project.",
)
@click.option(
    "--on-collision",
    type=click.Choice([p.value for p in CollisionPolicy], case_sensitive=False),
    default=None,
    help="What to do when two files flatten to the same name.",
)
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    help="Number of files processed concurrently.",
)
@click.option("--dry-run", is_flag=True, help="Show the flattening plan without writing.")
@click.pass_obj
def flatten(
    app: AppContext,
    input_path: Path,
    output_path: Path,
    on_collision: str | None,
    jobs: int | None,
    dry_run: bool,
) -> None:
    """Copy every project file into OUT with its path encoded in its name."""
    from texflat.services.flatten import FlattenService

    settings = app.settings.with_flatten(on_collision=on_collision, jobs=jobs)
    svc = FlattenService(settings)

    if dry_run:
        app.emit(svc.plan(input_path, output_path))
    else:
        app.emit(svc.flatten(input_path, output_path))
