"""Locate and load ``texflat.toml``.

The nearest ``texflat.toml`` in the working directory or one of its
parents applies, the way git finds ``.git``. ``TEXFLAT_CONFIG`` names a
file explicitly and disables the search.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from texflat.config.models import TexflatConfig

CONFIG_FILENAME = "texflat.toml"
CONFIG_ENV_VAR = "TEXFLAT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), if any.

    A ``TEXFLAT_CONFIG`` pointing at a missing file yields None rather than
    falling back to the directory search.
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> TexflatConfig:
    """Parse and validate a config file without the env/CLI layers.

    With no *path*, the file applying to *cwd* is used; with no file at
    all, every section keeps its defaults.
    """
    path = path or find_config(cwd)
    if path is None:
        return TexflatConfig()
    with path.open("rb") as fh:
        return TexflatConfig.model_validate(tomllib.load(fh))
