"""Tests for pydantic config models."""

import pytest
from pydantic import ValidationError

from texflat.config.models import FlattenConfig, TexflatConfig
from texflat.domain.collisions import CollisionPolicy


class TestFlattenConfig:
    def test_defaults(self) -> None:
        cfg = FlattenConfig()
        assert cfg.delimiter == "__"
        assert cfg.extra_commands == ()
        assert cfg.document_extensions == (".tex",)
        assert cfg.on_collision is CollisionPolicy.ERROR
        assert cfg.jobs == 1

    def test_frozen(self) -> None:
        cfg = FlattenConfig()
        with pytest.raises(ValidationError):
            cfg.jobs = 2  # type: ignore[misc]

    def test_lists_become_tuples(self) -> None:
        cfg = FlattenConfig.model_validate({"extra_commands": ["subfile", "includepdf"]})
        assert cfg.extra_commands == ("subfile", "includepdf")

    def test_policy_from_string(self) -> None:
        cfg = FlattenConfig.model_validate({"on_collision": "overwrite"})
        assert cfg.on_collision is CollisionPolicy.OVERWRITE

    def test_unknown_policy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FlattenConfig.model_validate({"on_collision": "rename"})

    @pytest.mark.parametrize("delimiter", ["", "/", "a\\b", "-/-"])
    def test_bad_delimiter(self, delimiter: str) -> None:
        with pytest.raises(ValidationError):
            FlattenConfig(delimiter=delimiter)

    def test_custom_delimiter(self) -> None:
        assert FlattenConfig(delimiter="--").delimiter == "--"

    @pytest.mark.parametrize("name", ["\\subfile", "sub file", "", "a{b"])
    def test_bad_command_name(self, name: str) -> None:
        with pytest.raises(ValidationError):
            FlattenConfig.model_validate({"extra_commands": [name]})

    def test_extensions_normalized(self) -> None:
        cfg = FlattenConfig.model_validate({"document_extensions": ["tex", ".ltx"]})
        assert cfg.document_extensions == (".tex", ".ltx")

    def test_jobs_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            FlattenConfig(jobs=0)


class TestTexflatConfig:
    def test_sparse_section(self) -> None:
        cfg = TexflatConfig.model_validate({"flatten": {"jobs": 3}})
        assert cfg.flatten.jobs == 3
        assert cfg.flatten.delimiter == "__"

    def test_empty(self) -> None:
        assert TexflatConfig().flatten == FlattenConfig()
