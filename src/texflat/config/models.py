"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, texflat.toml only contains overrides.
A project with no config file flattens with ``__`` and the stock commands.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

from texflat.domain.collisions import CollisionPolicy
from texflat.domain.paths import DEFAULT_DELIMITER

_COMMAND_NAME = re.compile(r"\w+")

# --- texflat.toml sections ---


class FlattenConfig(BaseModel):
    """[flatten] section."""

    model_config = {"frozen": True}

    delimiter: str = DEFAULT_DELIMITER
    extra_commands: tuple[str, ...] = ()
    document_extensions: tuple[str, ...] = (".tex",)
    on_collision: CollisionPolicy = CollisionPolicy.ERROR
    jobs: int = Field(default=1, ge=1)

    @field_validator("delimiter")
    @classmethod
    def _check_delimiter(cls, value: str) -> str:
        if not value:
            msg = "delimiter must not be empty"
            raise ValueError(msg)
        if "/" in value or "\\" in value:
            msg = f"delimiter {value!r} must not contain a path separator"
            raise ValueError(msg)
        return value

    @field_validator("extra_commands")
    @classmethod
    def _check_commands(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for name in value:
            if not _COMMAND_NAME.fullmatch(name):
                msg = f"command name {name!r} must be word characters only, without '\\'"
                raise ValueError(msg)
        return value

    @field_validator("document_extensions")
    @classmethod
    def _check_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(ext if ext.startswith(".") else f".{ext}" for ext in value)


class TexflatConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    flatten: FlattenConfig = Field(default_factory=FlattenConfig)
