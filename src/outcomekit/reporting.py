"""Assertion reporting: how failing checks and deprecations are surfaced.

Matchers never raise on their own authority; they hand a prepared
``AssertionFailure`` to a ``Reporter``. The default reporter simply raises it,
which is what a test runner expects. Tests that need to observe failures or
deprecation notices pass their own reporter.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NoReturn, Protocol, runtime_checkable
import warnings

from outcomekit.config import get_config

if TYPE_CHECKING:
    from outcomekit.errors import AssertionFailure

logger = logging.getLogger(__name__)


@runtime_checkable
class Reporter(Protocol):
    """Receives assertion failures and warnings from the matchers."""

    def fail(self, failure: AssertionFailure) -> NoReturn: ...

    def warn(self, message: str) -> None: ...


class RaisingReporter:
    """Default reporter: raise failures, route warnings through ``warnings``."""

    def fail(self, failure: AssertionFailure) -> NoReturn:
        __tracebackhide__ = True
        raise failure

    def warn(self, message: str) -> None:
        if not get_config().deprecation_warnings:
            return
        logger.debug(message)
        # The warnings filter prints once per callsite by default, which is
        # the one-time behavior we want without keeping global state.
        warnings.warn(message, DeprecationWarning, stacklevel=3)


DEFAULT_REPORTER = RaisingReporter()
