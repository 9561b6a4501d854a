"""Path flattening — hierarchical project paths to single flat names.

Pure functions, no filesystem access. ``a/b/c.tex`` under the project
root becomes ``a__b__c.tex``. The same policy is applied to the
``/``-delimited fragments found inside reference commands, so a
rewritten ``\\input{a/b}`` points at the flattened ``a__b.tex``.

INVARIANT: A flat name is a pure function of the relative path.
Distinct paths can still collide when a segment already contains the
delimiter; detecting that is the caller's job (see
:mod:`texflat.domain.collisions`).
"""

from __future__ import annotations

from pathlib import PurePath

DEFAULT_DELIMITER = "__"


class PathEncodingError(ValueError):
    """A path segment cannot be represented as text."""

    def __init__(self, path: PurePath, segment: str) -> None:
        self.path = path
        self.segment = segment
        super().__init__(f"Path segment {segment!r} of {str(path)!r} is not valid text")


def _ensure_text(path: PurePath, segment: str) -> None:
    # Undecodable filesystem bytes arrive as lone surrogates (surrogateescape).
    try:
        segment.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise PathEncodingError(path, segment) from exc


def project_segments(root: PurePath, path: PurePath) -> tuple[str, ...]:
    """Return the segments of *path* that remain after stripping *root*.

    Raises ValueError when *path* is not strictly beneath *root*.
    """
    try:
        relative = PurePath(path).relative_to(root)
    except ValueError as exc:
        msg = f"{path} is not beneath project root {root}"
        raise ValueError(msg) from exc

    segments = relative.parts
    if not segments:
        msg = f"{path} is the project root itself, not a file beneath it"
        raise ValueError(msg)
    if ".." in segments:
        msg = f"{path} escapes project root {root}"
        raise ValueError(msg)
    return segments


def flatten_path(
    root: PurePath,
    path: PurePath,
    *,
    delimiter: str = DEFAULT_DELIMITER,
) -> str:
    """Flatten *path* (beneath *root*) into a single file name.

    Examples:
        >>> from pathlib import PurePosixPath as P
        >>> flatten_path(P("/proj"), P("/proj/content/background.tex"))
        'content__background.tex'
        >>> flatten_path(P("/proj"), P("/proj/main.tex"))
        'main.tex'
    """
    segments = project_segments(root, path)
    for segment in segments:
        _ensure_text(PurePath(path), segment)
    return delimiter.join(segments)


def flatten_fragment(fragment: str, *, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Flatten a ``/``-delimited reference fragment (no filesystem semantics)."""
    return fragment.replace("/", delimiter)
