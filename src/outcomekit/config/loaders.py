# src/outcomekit/config/loaders.py

"""Configuration loaders for environment and files.

Pure data loading: each loader returns a plain dictionary that the core
resolver merges and validates.
"""

from __future__ import annotations

import os
from pathlib import Path
import tomllib
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

CONFIG_TOOL_NAME = "outcomekit"
ENV_PREFIX = "OUTCOMEKIT_"
PYPROJECT_PATH_VAR = f"{ENV_PREFIX}PYPROJECT_PATH"

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def env_key(field_name: str) -> str:
    return f"{ENV_PREFIX}{field_name.upper()}"


def get_pyproject_path() -> Path:
    """Return the project pyproject.toml path, honoring the env override."""
    if override := os.environ.get(PYPROJECT_PATH_VAR):
        return Path(override)
    return Path.cwd() / "pyproject.toml"


def load_env() -> Mapping[str, Any]:
    """Load configuration from ``OUTCOMEKIT_*`` environment variables.

    Only variables naming a known field are read. Values are coerced to the
    field's declared type (bool/int) when possible; anything that fails
    coercion is passed through so validation reports it.
    """
    from .core import Settings  # local import to keep loaders import-light

    config: dict[str, Any] = {}
    for name, info in Settings.model_fields.items():
        raw = os.environ.get(env_key(name))
        if raw is None:
            continue
        config[name] = _coerce_env_value(raw, info.annotation)
    return config


def _coerce_env_value(value: str, target_type: Any) -> Any:
    if target_type is bool:
        return value.strip().lower() in _TRUE_STRINGS
    if target_type is int:
        try:
            return int(value)
        except ValueError:
            return value
    return value


def _read_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file, returning an empty dict when it is missing."""
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        from outcomekit.errors import ConfigurationError

        raise ConfigurationError(
            f"Could not parse {path}: {e}",
            hint=f"Fix the TOML syntax or point {PYPROJECT_PATH_VAR} elsewhere",
        ) from e


def load_pyproject() -> Mapping[str, Any]:
    """Load the ``[tool.outcomekit]`` table from the project's pyproject.toml."""
    data = _read_toml(get_pyproject_path())
    section = data.get("tool", {}).get(CONFIG_TOOL_NAME, {})
    return dict(section) if isinstance(section, dict) else {}
