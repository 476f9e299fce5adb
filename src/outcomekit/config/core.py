# src/outcomekit/config/core.py

"""Core configuration schema and resolution for outcomekit.

- Single source of truth for configuration schema (Settings)
- Immutable runtime payload (FrozenConfig)
- Layered resolution with audit tracking (SourceMap)
- Guarded ambient scope for test-time overrides
"""

from __future__ import annotations

from contextlib import contextmanager
import contextvars
from dataclasses import dataclass
from enum import Enum
from functools import cache
import logging
from typing import TYPE_CHECKING, Any, Literal, overload

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from outcomekit.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping

logger = logging.getLogger(__name__)

# --- Schema (Pydantic wall) ---


class Settings(BaseModel):
    """Pydantic schema for configuration fields, defaults and validation."""

    # Names of the two metadata slots cleared by strip_metadata
    metadata_field: str = Field(default="__metadata__", min_length=1)
    meta_field: str = Field(default="__meta__", min_length=1)
    # Line width used when pretty-printing errors into failure messages
    pretty_width: int = Field(default=80, ge=20)
    deprecation_warnings: bool = Field(default=True)

    model_config = {"extra": "forbid"}

    @field_validator("metadata_field", "meta_field", mode="before")
    @classmethod
    def normalize_slot_name(cls, v: Any) -> Any:
        """Trim surrounding whitespace on slot names."""
        if isinstance(v, str):
            return v.strip()
        return v

    @model_validator(mode="after")
    def validate_distinct_slots(self) -> Settings:
        if self.metadata_field == self.meta_field:
            raise ValueError("metadata_field and meta_field must differ")
        return self


# --- Immutable runtime payload ---


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable, validated configuration."""

    metadata_field: str
    meta_field: str
    pretty_width: int
    deprecation_warnings: bool


# --- Audit types ---


class Origin(str, Enum):
    """Source origin for configuration field values."""

    DEFAULT = "default"
    PROJECT = "project"
    ENV = "env"
    OVERRIDES = "overrides"


@dataclass(frozen=True)
class FieldOrigin:
    """Tracks the origin of a configuration field value."""

    origin: Origin
    env_key: str | None = None  # e.g., "OUTCOMEKIT_PRETTY_WIDTH"
    file: str | None = None  # e.g., "./pyproject.toml"


SourceMap = dict[str, FieldOrigin]


# --- Ambient scope ---

_AMBIENT: contextvars.ContextVar[FrozenConfig | None] = contextvars.ContextVar(
    "outcomekit_ambient_config", default=None
)

_DOTENV_LOADED: bool = False


@contextmanager
def config_scope(
    cfg_or_overrides: Mapping[str, Any] | FrozenConfig | None = None,
    **overrides: object,
) -> Generator[FrozenConfig]:
    """Run a block with a specific ambient configuration.

    Example:
        with config_scope(metadata_field="metadata"):
            assert strip_metadata(record) == expected
    """
    if isinstance(cfg_or_overrides, FrozenConfig):
        cfg = cfg_or_overrides
    else:
        cfg = resolve_config(overrides={**(cfg_or_overrides or {}), **overrides})

    token = _AMBIENT.set(cfg)
    try:
        yield cfg
    finally:
        _AMBIENT.reset(token)


def get_config() -> FrozenConfig:
    """Return the ambient configuration, else the process default.

    The default is resolved from files and environment once, on first use.
    Call ``reset_config_cache()`` after changing those sources.
    """
    cfg = _AMBIENT.get()
    return cfg if cfg is not None else _default_config()


@cache
def _default_config() -> FrozenConfig:
    return resolve_config()


def reset_config_cache() -> None:
    """Forget the cached default configuration."""
    _default_config.cache_clear()


def _load_dotenv_once() -> None:
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import load_dotenv

    load_dotenv()
    _DOTENV_LOADED = True


# --- Public resolution API ---


@overload
def resolve_config(
    overrides: Mapping[str, Any] | None = ...,
    *,
    explain: Literal[True],
) -> tuple[FrozenConfig, SourceMap]: ...


@overload
def resolve_config(
    overrides: Mapping[str, Any] | None = ...,
    *,
    explain: Literal[False] = ...,
) -> FrozenConfig: ...


def resolve_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    explain: bool = False,
) -> FrozenConfig | tuple[FrozenConfig, SourceMap]:
    """Resolve configuration from all sources into a FrozenConfig.

    Precedence: defaults < pyproject ``[tool.outcomekit]`` < env < overrides.

    Raises:
        ConfigurationError: If configuration validation fails.
    """
    _load_dotenv_once()

    from . import loaders

    merged, sources = _resolve_layers(
        overrides=overrides or {},
        env=loaders.load_env(),
        project=loaders.load_pyproject(),
    )

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg") or "invalid value"
        # Drop Pydantic's "Value error, " wrapper prefix
        msg = msg.removeprefix("Value error, ")
        origin = sources.get(loc)
        if origin is None:
            hint = "Known fields: " + ", ".join(sorted(Settings.model_fields))
        else:
            where = origin.env_key or origin.file
            hint = f"Value came from {origin.origin.value}" + (
                f" ({where})" if where else ""
            )
        raise ConfigurationError(
            f"Configuration validation failed: {loc + ': ' if loc else ''}{msg}",
            hint=hint,
        ) from e

    frozen = FrozenConfig(**settings.model_dump())
    logger.debug("Resolved configuration: %s", frozen)
    return (frozen, sources) if explain else frozen


def _resolve_layers(
    *,
    overrides: Mapping[str, Any],
    env: Mapping[str, Any],
    project: Mapping[str, Any],
) -> tuple[dict[str, Any], SourceMap]:
    """Merge layers with last-wins precedence, recording each field's origin."""
    from . import loaders

    merged: dict[str, Any] = {}
    sources: SourceMap = {
        name: FieldOrigin(Origin.DEFAULT) for name in Settings.model_fields
    }

    project_file = str(loaders.get_pyproject_path())
    for key, value in project.items():
        merged[key] = value
        sources[key] = FieldOrigin(Origin.PROJECT, file=project_file)
    for key, value in env.items():
        merged[key] = value
        sources[key] = FieldOrigin(Origin.ENV, env_key=loaders.env_key(key))
    for key, value in overrides.items():
        merged[key] = value
        sources[key] = FieldOrigin(Origin.OVERRIDES)

    return merged, sources
