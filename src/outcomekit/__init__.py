"""outcomekit: test assertions for operation outcomes.

Public API:
    - assert_has_error() / refute_has_error(): check an outcome's errors
    - strip_metadata(): clear record bookkeeping before comparing results
    - Success, Failure, OK, Changeset, Query, ActionInput: outcome shapes
    - classify(), ErrorClass, DomainError: error classification
"""

from __future__ import annotations

import logging

from outcomekit.classification import (
    DEFAULT_TAXONOMY,
    FORBIDDEN,
    FRAMEWORK,
    INVALID,
    UNKNOWN,
    Classifier,
    DomainError,
    ErrorClass,
    ErrorCollection,
    ErrorTaxonomy,
    classify,
)
from outcomekit.config import config_scope, get_config, resolve_config
from outcomekit.errors import (
    AssertionFailure,
    ClassificationMismatch,
    ConfigurationError,
    NoErrorsPresent,
    NoMatchingError,
    OutcomeKitError,
    UnexpectedErrorMatch,
    UnsupportedOutcomeError,
)
from outcomekit.matchers import assert_has_error, refute_has_error
from outcomekit.metadata import strip_metadata
from outcomekit.outcome import (
    OK,
    ActionInput,
    Changeset,
    Failure,
    Outcome,
    Query,
    Success,
    SuccessUnit,
)
from outcomekit.pages import KeysetPage, OffsetPage, Page
from outcomekit.reporting import RaisingReporter, Reporter

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("outcomekit")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("outcomekit").addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Assertions
    "assert_has_error",
    "refute_has_error",
    "strip_metadata",
    # Outcomes
    "Outcome",
    "Success",
    "Failure",
    "SuccessUnit",
    "OK",
    "Changeset",
    "Query",
    "ActionInput",
    "Page",
    "OffsetPage",
    "KeysetPage",
    # Classification
    "classify",
    "Classifier",
    "DomainError",
    "ErrorClass",
    "ErrorCollection",
    "ErrorTaxonomy",
    "DEFAULT_TAXONOMY",
    "FORBIDDEN",
    "INVALID",
    "FRAMEWORK",
    "UNKNOWN",
    # Reporting
    "Reporter",
    "RaisingReporter",
    # Configuration
    "config_scope",
    "get_config",
    "resolve_config",
    # Errors
    "OutcomeKitError",
    "ConfigurationError",
    "UnsupportedOutcomeError",
    "AssertionFailure",
    "NoErrorsPresent",
    "ClassificationMismatch",
    "NoMatchingError",
    "UnexpectedErrorMatch",
]
