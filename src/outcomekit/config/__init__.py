"""Configuration for outcomekit.

Resolution precedence: defaults < ``[tool.outcomekit]`` in pyproject.toml <
``OUTCOMEKIT_*`` environment variables (``.env`` included) < programmatic
overrides.
"""

from __future__ import annotations

from .core import (
    FieldOrigin,
    FrozenConfig,
    Origin,
    Settings,
    SourceMap,
    config_scope,
    get_config,
    reset_config_cache,
    resolve_config,
)

__all__ = [
    "FieldOrigin",
    "FrozenConfig",
    "Origin",
    "Settings",
    "SourceMap",
    "config_scope",
    "get_config",
    "reset_config_cache",
    "resolve_config",
]
