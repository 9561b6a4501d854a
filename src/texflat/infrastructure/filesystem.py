"""Filesystem operations for project input and flattened output.

Pure flattening and rewriting live in :mod:`texflat.domain` (correct
dependency direction: infrastructure -> domain). This module handles
file discovery, input/output validation, and the actual I/O.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from enum import StrEnum
from pathlib import Path


class PathKind(StrEnum):
    """Supported shapes of an input or output location."""

    DIRECTORY = "directory"
    ZIP = "zip"


class LocationError(ValueError):
    """An input or output location is unusable."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        super().__init__(message)


# ---------------------------------------------------------------------------
# Location checks
# ---------------------------------------------------------------------------


def classify_path(path: Path) -> PathKind:
    """Classify *path* as a directory or zip archive by its shape.

    An existing directory is always a directory. Otherwise a ``.zip``
    suffix means archive and no suffix means a (future) directory.
    """
    if path.is_dir():
        return PathKind.DIRECTORY
    if path.suffix.lower() == ".zip":
        return PathKind.ZIP
    if not path.suffix:
        return PathKind.DIRECTORY
    msg = f"Invalid extension {path.suffix!r} for {path}, expected zip file or directory"
    raise LocationError("INVALID_PATH", msg)


def check_input_dir(path: Path) -> Path:
    """Validate the project input location, returning its resolved path."""
    kind = classify_path(path)
    if kind is PathKind.ZIP:
        msg = f"Zip archives are not supported as input: {path}"
        raise LocationError("UNSUPPORTED_ARCHIVE", msg)
    if not path.is_dir():
        msg = f"The input path must point to a directory: {path}"
        raise LocationError("INPUT_NOT_DIRECTORY", msg)
    return path.resolve()


def check_output_dir(path: Path) -> Path:
    """Validate the output location without creating anything.

    It must be a directory path (not a zip) that is missing or empty.
    """
    kind = classify_path(path)
    if kind is PathKind.ZIP:
        msg = f"Zip archives are not supported as output: {path}"
        raise LocationError("UNSUPPORTED_ARCHIVE", msg)
    if path.exists():
        if not path.is_dir():
            msg = f"Expected the output path to be an empty directory: {path}"
            raise LocationError("OUTPUT_NOT_DIRECTORY", msg)
        if any(path.iterdir()):
            msg = f"The output directory must be empty: {path}"
            raise LocationError("OUTPUT_NOT_EMPTY", msg)
    return path.resolve()


def prepare_output_dir(path: Path) -> Path:
    """Validate the output location and create it if missing."""
    resolved = check_output_dir(path)
    resolved.mkdir(parents=True, exist_ok=True)
    return resolved


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def find_project_files(root: Path, *, exclude: Path | None = None) -> list[Path]:
    """Discover every regular file beneath *root*, sorted by path.

    Symlinked directories are not followed. Files under *exclude*
    (typically an output directory nested inside the project) are skipped.
    """
    results: list[Path] = []
    for path in root.rglob("*"):
        if not path.is_file():
            continue
        if exclude is not None and path.is_relative_to(exclude):
            continue
        results.append(path)
    return sorted(results)


def is_document_source(path: Path, extensions: Iterable[str]) -> bool:
    """Whether *path* should go through the reference rewriter."""
    return any(path.name.endswith(ext) for ext in extensions)


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_document(path: Path) -> str:
    """Read a document source as UTF-8, keeping line endings untouched."""
    with path.open(encoding="utf-8", newline="") as fh:
        return fh.read()


def write_document(path: Path, text: str) -> None:
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(text)


def copy_bytes(source: Path, target: Path) -> None:
    """Copy a non-document file bit for bit."""
    shutil.copyfile(source, target)
