"""Tests for TexflatSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from texflat.config.settings import TexflatSettings
from texflat.domain.collisions import CollisionPolicy


class TestTexflatSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = TexflatSettings.from_cli(search_from=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.flatten.delimiter == "__"
        assert settings.flatten.on_collision is CollisionPolicy.ERROR

    def test_frozen(self, tmp_path: Path) -> None:
        settings = TexflatSettings.from_cli(search_from=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = TexflatSettings.from_cli(search_from=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "texflat.toml").write_text(
            '[flatten]\ndelimiter = "-"\nextra_commands = ["subfile"]\n'
        )
        settings = TexflatSettings.from_cli(search_from=tmp_path)
        assert settings.flatten.delimiter == "-"
        assert settings.flatten.extra_commands == ("subfile",)
        assert settings.flatten.jobs == 1  # default preserved
        assert settings.config_path == (tmp_path / "texflat.toml").resolve()

    def test_discovered_from_subdirectory(self, tmp_path: Path) -> None:
        (tmp_path / "texflat.toml").write_text('[flatten]\non_collision = "warn"\n')
        sub = tmp_path / "chapters"
        sub.mkdir()
        settings = TexflatSettings.from_cli(search_from=sub)
        assert settings.flatten.on_collision is CollisionPolicy.WARN

    def test_empty_toml_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "texflat.toml").write_text("")
        settings = TexflatSettings.from_cli(search_from=tmp_path)
        assert settings.flatten.delimiter == "__"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[flatten]\njobs = 6\n")
        settings = TexflatSettings.from_cli(config_path=str(custom), search_from=tmp_path)
        assert settings.flatten.jobs == 6
        assert settings.config_path == custom

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="not found"):
            TexflatSettings.from_cli(config_path=str(tmp_path / "missing.toml"))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "texflat.toml").write_text("[flatten\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            TexflatSettings.from_cli(search_from=tmp_path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / "texflat.toml").write_text('[flatten]\ndelimiter = "/"\n')
        with pytest.raises(click.ClickException, match="Invalid settings"):
            TexflatSettings.from_cli(search_from=tmp_path)


class TestEnvVars:
    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEXFLAT_LOG_JSON", "true")
        settings = TexflatSettings.from_cli(search_from=tmp_path)
        assert settings.log_json is True

    def test_nested_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEXFLAT_FLATTEN__JOBS", "4")
        settings = TexflatSettings.from_cli(search_from=tmp_path)
        assert settings.flatten.jobs == 4


class TestWithFlatten:
    def test_overrides(self, tmp_path: Path) -> None:
        settings = TexflatSettings.from_cli(search_from=tmp_path)
        updated = settings.with_flatten(on_collision="warn", jobs=3)
        assert updated.flatten.on_collision is CollisionPolicy.WARN
        assert updated.flatten.jobs == 3
        assert settings.flatten.jobs == 1

    def test_none_values_ignored(self, tmp_path: Path) -> None:
        settings = TexflatSettings.from_cli(search_from=tmp_path)
        assert settings.with_flatten(on_collision=None, jobs=None) is settings
