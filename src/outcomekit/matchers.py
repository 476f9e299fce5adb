"""Assertions about the errors carried by an operation outcome.

``assert_has_error`` requires that at least one classified error satisfies a
predicate (and optionally that the errors classify as a given class);
``refute_has_error`` requires that none does. Both accept the optional
classification the way the predicate-only form reads::

    assert_has_error(outcome, lambda e: e.field == "title")
    assert_has_error(outcome, INVALID, lambda e: e.field == "title")
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
from pprint import pformat
from typing import TYPE_CHECKING, Any, NoReturn

from outcomekit.classification import (
    DEFAULT_TAXONOMY,
    Classifier,
    DomainError,
    ErrorClass,
    ErrorCollection,
    ErrorTaxonomy,
    classify,
)
from outcomekit.config import get_config
from outcomekit.errors import (
    ClassificationMismatch,
    NoErrorsPresent,
    NoMatchingError,
    UnexpectedErrorMatch,
)
from outcomekit.outcome import (
    describe_shape,
    error_source,
    is_success_shape,
    require_outcome,
)
from outcomekit.reporting import DEFAULT_REPORTER, Reporter

if TYPE_CHECKING:
    from outcomekit.errors import AssertionFailure
    from outcomekit.outcome import Outcome

logger = logging.getLogger(__name__)

Predicate = Callable[[DomainError], Any]

ERROR_CLASS_DEPRECATION = (
    "`error_class` argument to `refute_has_error` is deprecated and will be ignored"
)


def assert_has_error(
    outcome: Outcome,
    error_class: ErrorClass | str | Predicate | None = None,
    predicate: Predicate | None = None,
    *,
    message: str | None = None,
    reporter: Reporter | None = None,
    classifier: Classifier | None = None,
    taxonomy: ErrorTaxonomy | None = None,
) -> DomainError:
    """Assert that the outcome has an error matching ``predicate``.

    Args:
        outcome: ``Success``, ``Failure``, ``OK`` or a pending request.
        error_class: When given, the errors taken together must classify as
            exactly this class. May be omitted, in which case the second
            positional argument is the predicate.
        predicate: Test applied to each classified error, in order.
        message: Replaces the default text when no error matches.
        reporter: Where failures are sent; defaults to raising them.
        classifier: Replaces the default ``classify``; ``taxonomy`` is then
            not consulted.
        taxonomy: Taxonomy for the default classifier.

    Returns:
        The first error, in classification order, that satisfies the predicate.

    Raises:
        NoErrorsPresent: The outcome carries no errors.
        ClassificationMismatch: The errors classify as a different class. The
            predicate is not evaluated in this case.
        NoMatchingError: No error satisfies the predicate.
        UnsupportedOutcomeError: ``outcome`` is not a known outcome shape.
    """
    __tracebackhide__ = True
    error_class, predicate = _split_args("assert_has_error", error_class, predicate)
    outcome = require_outcome(outcome)
    reporter = reporter or DEFAULT_REPORTER

    collection = None
    if not is_success_shape(outcome):
        collection = _classify(outcome, classifier, taxonomy)
    # A failure whose source classifies to nothing carries no errors either.
    if collection is None or not collection.errors:
        _fail(
            reporter,
            NoErrorsPresent(_no_errors_message(error_class), expected=error_class),
        )

    if error_class is not None:
        expected = _class_name(error_class)
        actual = _class_name(collection.error_class)
        if expected != actual:
            shape = describe_shape(outcome)
            _fail(
                reporter,
                ClassificationMismatch(
                    f"Expected the {shape} to have errors of class {expected}, "
                    f"got: {actual}",
                    expected=error_class,
                    actual=collection.error_class,
                    shape=shape,
                ),
            )

    found, match = _first_match(collection.errors, predicate)
    if not found:
        _fail(
            reporter,
            NoMatchingError(
                message or _no_match_message(collection.errors),
                errors=collection.errors,
            ),
        )
    return match


def refute_has_error(
    outcome: Outcome,
    error_class: ErrorClass | str | Predicate | None = None,
    predicate: Predicate | None = None,
    *,
    message: str | None = None,
    reporter: Reporter | None = None,
    classifier: Classifier | None = None,
    taxonomy: ErrorTaxonomy | None = None,
) -> None:
    """Assert that no error of the outcome matches ``predicate``.

    An outcome without errors always passes. ``error_class`` is deprecated: it
    is accepted, reported through ``reporter.warn`` and otherwise ignored.

    Raises:
        UnexpectedErrorMatch: Some error satisfies the predicate.
        UnsupportedOutcomeError: ``outcome`` is not a known outcome shape.
    """
    __tracebackhide__ = True
    error_class, predicate = _split_args("refute_has_error", error_class, predicate)
    outcome = require_outcome(outcome)
    reporter = reporter or DEFAULT_REPORTER

    if error_class is not None:
        reporter.warn(ERROR_CLASS_DEPRECATION)

    if is_success_shape(outcome):
        return None

    collection = _classify(outcome, classifier, taxonomy)
    if not collection.errors:
        return None
    found, match = _first_match(collection.errors, predicate)
    if found:
        _fail(
            reporter,
            UnexpectedErrorMatch(
                message or _unexpected_match_message(match, collection.errors),
                match=match,
                errors=collection.errors,
            ),
        )
    return None


# --- Internal helpers ---


def _split_args(
    name: str,
    error_class: ErrorClass | str | Predicate | None,
    predicate: Predicate | None,
) -> tuple[ErrorClass | str | None, Predicate]:
    """Resolve the optional middle argument into ``(error_class, predicate)``."""
    if predicate is None:
        if callable(error_class):
            return None, error_class
        raise TypeError(f"{name}() missing required argument: 'predicate'")
    if not callable(predicate):
        raise TypeError(
            f"{name}() predicate must be callable, got {type(predicate).__name__}"
        )
    if error_class is not None and not isinstance(error_class, (ErrorClass, str)):
        raise TypeError(
            f"{name}() error_class must be an ErrorClass or str, "
            f"got {type(error_class).__name__}"
        )
    return error_class, predicate


def _classify(
    outcome: Outcome,
    classifier: Classifier | None,
    taxonomy: ErrorTaxonomy | None,
) -> ErrorCollection:
    source = error_source(outcome)  # type: ignore[arg-type]
    if classifier is not None:
        collection = classifier(source)
    else:
        collection = classify(source, taxonomy=taxonomy or DEFAULT_TAXONOMY)
    logger.debug(
        "Classified %s errors as %s (%d entries)",
        describe_shape(outcome),
        collection.error_class,
        len(collection.errors),
    )
    return collection


def _first_match(
    errors: Sequence[DomainError], predicate: Predicate
) -> tuple[bool, DomainError | None]:
    # Called at most once per entry, in order; exceptions propagate as-is.
    for entry in errors:
        if predicate(entry):
            return True, entry
    return False, None


def _fail(reporter: Reporter, failure: AssertionFailure) -> NoReturn:
    __tracebackhide__ = True
    reporter.fail(failure)
    # A reporter that records instead of raising must not let the check pass.
    raise failure


def _class_name(error_class: ErrorClass | str) -> str:
    return error_class.name if isinstance(error_class, ErrorClass) else error_class


def _pretty(value: Any) -> str:
    return pformat(value, width=get_config().pretty_width)


def _no_errors_message(error_class: ErrorClass | str | None) -> str:
    if error_class is not None:
        return (
            f"Expected the value to have errors of class {_class_name(error_class)}, "
            "but it had no errors"
        )
    return (
        "Expected the value to have errors matching the provided callback, "
        "but it had no errors"
    )


def _no_match_message(errors: Sequence[DomainError]) -> str:
    return (
        "Expected at least one error to match the provided callback, but none did.\n"
        "\n"
        "Errors:\n"
        "\n"
        f"{_pretty(list(errors))}\n"
    )


def _unexpected_match_message(match: Any, errors: Sequence[DomainError]) -> str:
    return (
        "Expected no errors to match the provided callback, but one did.\n"
        "\n"
        "Matching Error:\n"
        "\n"
        f"{_pretty(match)}\n"
        "\n"
        "Errors:\n"
        "\n"
        f"{_pretty(list(errors))}\n"
    )
