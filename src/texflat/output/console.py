"""Rich Console factory and theme for texflat output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TEXFLAT_THEME = Theme(
    {
        "texflat.ok": "bold green",
        "texflat.error": "bold red",
        "texflat.warning": "bold yellow",
        "texflat.op": "bold cyan",
        "texflat.key": "dim",
        "texflat.path": "dim",
        "texflat.target": "bold blue",
        "texflat.document": "green",
        "texflat.binary": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=TEXFLAT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(document: bool) -> str:
    """Rich style for a planned file: rewritten document or copied bytes."""
    return "texflat.document" if document else "texflat.binary"
