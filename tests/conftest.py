"""Shared pytest fixtures and test helpers for texflat tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from texflat.config.settings import TexflatSettings
from texflat.services.telemetry import disable_telemetry

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe\x00\x01{}/\\"


@pytest.fixture(autouse=True)
def _clean_global_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Isolate env config, logging handlers and telemetry between tests."""
    monkeypatch.delenv("TEXFLAT_CONFIG", raising=False)
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    texflat_level = logging.getLogger("texflat").level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    logging.getLogger("texflat").setLevel(texflat_level)
    structlog.reset_defaults()
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from a temp directory so no stray texflat.toml is discovered.

    Use via ``@pytest.mark.usefixtures("_isolated_cwd")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A small nested LaTeX project.

    Layout::

        proj/
          main.tex                 (3 references)
          content/background.tex   (1 reference)
          content/sub/detail.tex   (no references, no trailing newline)
          figures/plot.png         (binary)
          bib/refs.bib             (not a document source)
    """
    root = tmp_path / "proj"
    (root / "content" / "sub").mkdir(parents=True)
    (root / "figures").mkdir()
    (root / "bib").mkdir()
    (root / "main.tex").write_bytes(
        b"\\documentclass{article}\n"
        b"\\begin{document}\n"
        b"\\input{content/background}\n"
        b"\\includegraphics[width=0.8\\linewidth]{figures/plot.png}\n"
        b"\\bibliography{bib/refs}\n"
        b"\\end{document}\n"
    )
    (root / "content" / "background.tex").write_bytes(
        b"Background, see \\input{content/sub/detail}.\n"
    )
    (root / "content" / "sub" / "detail.tex").write_bytes(b"Some detail/with a slash")
    (root / "figures" / "plot.png").write_bytes(PNG_BYTES)
    (root / "bib" / "refs.bib").write_bytes(b"@misc{x, note={see a/b}}\n")
    return root


@pytest.fixture
def colliding_project(tmp_path: Path) -> Path:
    """Two files that both flatten to ``a__b__c.tex``.

    Sorted traversal visits ``a/b__c.tex`` before ``a__b/c.tex``.
    """
    root = tmp_path / "collide"
    (root / "a").mkdir(parents=True)
    (root / "a__b").mkdir()
    (root / "a" / "b__c.tex").write_text("first\n", encoding="utf-8")
    (root / "a__b" / "c.tex").write_text("second\n", encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_settings(tmp_path: Path, **flatten: Any) -> TexflatSettings:
    """Settings with code defaults plus ``[flatten]`` overrides."""
    return TexflatSettings.from_cli(search_from=tmp_path).with_flatten(**flatten)


def listing(directory: Path) -> dict[str, bytes]:
    """Map file name to bytes for every file directly in *directory*."""
    return {p.name: p.read_bytes() for p in sorted(directory.iterdir())}
