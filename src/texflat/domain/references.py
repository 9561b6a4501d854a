r"""Reference rewriting — flatten the path arguments of LaTeX include commands.

Recognized grammar, matched independently on each line::

    reference := '\' command [ options ] '{' path '}'
    command   := "input" | "include" | "includegraphics" | "bibliography" IDENT_TAIL
    options   := '[' NON_CLOSE_BRACKET* ']'
    path      := NON_CLOSE_BRACE*

The scanner is a small explicit state machine rather than a regex:
find ``\``, read the command token (a maximal run of word characters),
take an optional ``[...]`` span up to the first ``]``, then require a
``{...}`` span up to the first ``}``. Anything that does not fit is left
alone: commands split across lines, nested braces inside the path, an
options span without a following ``{``.

Pure functions, no infrastructure dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from texflat.domain.paths import DEFAULT_DELIMITER, flatten_fragment

BASE_COMMANDS: frozenset[str] = frozenset({"input", "include", "includegraphics"})

# Any command starting with this prefix is recognized
# (\bibliography, \bibliographystyle, \bibliographyS, ...).
BIBLIOGRAPHY_PREFIX = "bibliography"


@dataclass(frozen=True)
class ReferenceCommand:
    """A reference command found on a single line."""

    command: str
    options: str | None  # verbatim, brackets included
    path: str
    start: int
    end: int  # exclusive

    def render(self, *, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Rebuild the command with its path argument flattened."""
        flat = flatten_fragment(self.path, delimiter=delimiter)
        return f"\\{self.command}{self.options or ''}{{{flat}}}"


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class ReferenceScanner:
    """Locate reference commands in a line of LaTeX source.

    Args:
        extra_commands: Additional exact command names to recognize on top
            of :data:`BASE_COMMANDS` and the ``bibliography`` prefix.
    """

    def __init__(self, extra_commands: Iterable[str] = ()) -> None:
        self.commands = BASE_COMMANDS | frozenset(extra_commands)

    def is_recognized(self, name: str) -> bool:
        return name in self.commands or name.startswith(BIBLIOGRAPHY_PREFIX)

    def scan(self, line: str) -> list[ReferenceCommand]:
        """Return every non-overlapping reference in *line*, left to right."""
        found: list[ReferenceCommand] = []
        pos = line.find("\\")
        while pos != -1:
            match = self._match_at(line, pos)
            if match is None:
                pos = line.find("\\", pos + 1)
            else:
                found.append(match)
                pos = line.find("\\", match.end)
        return found

    def _match_at(self, line: str, start: int) -> ReferenceCommand | None:
        # Command token.
        i = start + 1
        while i < len(line) and _is_word_char(line[i]):
            i += 1
        command = line[start + 1 : i]
        if not command or not self.is_recognized(command):
            return None

        # Optional options span.
        options: str | None = None
        if i < len(line) and line[i] == "[":
            close = line.find("]", i + 1)
            if close == -1:
                return None
            options = line[i : close + 1]
            i = close + 1

        # Required path argument.
        if i >= len(line) or line[i] != "{":
            return None
        close = line.find("}", i + 1)
        if close == -1:
            return None
        path = line[i + 1 : close]
        if "{" in path:
            return None  # nested braces are not supported

        return ReferenceCommand(
            command=command,
            options=options,
            path=path,
            start=start,
            end=close + 1,
        )


_DEFAULT_SCANNER = ReferenceScanner()


def _scanner_for(extra_commands: Iterable[str]) -> ReferenceScanner:
    extra = frozenset(extra_commands)
    if not extra:
        return _DEFAULT_SCANNER
    return ReferenceScanner(extra)


def rewrite_line(
    line: str,
    *,
    delimiter: str = DEFAULT_DELIMITER,
    extra_commands: Iterable[str] = (),
) -> str:
    r"""Flatten the path argument of every reference command in *line*.

    Returns *line* itself when it holds no reference.

    Examples:
        >>> rewrite_line(r"\input{a/b}\includegraphics{c/d.png}")
        '\\input{a__b}\\includegraphics{c__d.png}'
    """
    return _rewrite_line(line, _scanner_for(extra_commands), delimiter)


def _rewrite_line(line: str, scanner: ReferenceScanner, delimiter: str) -> str:
    matches = scanner.scan(line)
    if not matches:
        return line

    parts: list[str] = []
    cursor = 0
    for match in matches:
        parts.append(line[cursor : match.start])
        parts.append(match.render(delimiter=delimiter))
        cursor = match.end
    parts.append(line[cursor:])
    return "".join(parts)


def rewrite_document(
    text: str,
    *,
    delimiter: str = DEFAULT_DELIMITER,
    extra_commands: Iterable[str] = (),
) -> str:
    """Rewrite every line of a document.

    Lines are split on ``\\n`` and rejoined with ``\\n``, so line endings
    and the presence of a trailing newline survive unchanged.
    """
    scanner = _scanner_for(extra_commands)
    lines = text.split("\n")
    rewritten = [_rewrite_line(line, scanner, delimiter) for line in lines]
    if all(new is old for new, old in zip(rewritten, lines, strict=True)):
        return text
    return "\n".join(rewritten)


def count_references(text: str, *, extra_commands: Iterable[str] = ()) -> int:
    """Count the reference commands in a document."""
    scanner = _scanner_for(extra_commands)
    return sum(len(scanner.scan(line)) for line in text.split("\n"))
