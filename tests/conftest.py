"""Pytest configuration and fixtures.

Provides environment isolation and logging configuration. All fixtures here
are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import logging
import os

import pytest

from outcomekit.config import reset_config_cache
from tests.helpers import RecordingReporter

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_outcomekit_env(monkeypatch, tmp_path):
    """Clear OUTCOMEKIT_* env vars and point config at an empty pyproject."""
    for key in list(os.environ.keys()):
        if key.startswith("OUTCOMEKIT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("OUTCOMEKIT_PYPROJECT_PATH", str(tmp_path / "pyproject.toml"))
    reset_config_cache()
    yield
    reset_config_cache()


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_library_logging():
    """Keep library debug records out of captured output unless asked for."""
    logging.getLogger("outcomekit").setLevel(logging.INFO)


# =============================================================================
# Test Doubles
# =============================================================================


@pytest.fixture
def reporter() -> RecordingReporter:
    """A reporter that records failures and warnings before raising."""
    return RecordingReporter()
