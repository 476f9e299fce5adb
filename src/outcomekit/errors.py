"""Exception hierarchy for outcomekit."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence


class OutcomeKitError(Exception):
    """Base exception for all outcomekit library errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def __str__(self) -> str:
        msg = super().__str__()
        return f"{msg}. {self.hint}" if self.hint else msg


class ConfigurationError(OutcomeKitError):
    """Configuration validation or resolution failed."""


class UnsupportedOutcomeError(OutcomeKitError, TypeError):
    """The value handed to a matcher is not one of the known outcome shapes."""


# --- Assertion failures ---
# These are what a failing check raises. They derive from AssertionError so
# test runners report them as ordinary assertion failures.


class AssertionFailure(AssertionError):
    """A checked condition about an outcome did not hold."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NoErrorsPresent(AssertionFailure):
    """`assert_has_error` was given an outcome without errors."""

    def __init__(self, message: str, *, expected: Any = None) -> None:
        super().__init__(message)
        self.expected = expected


class ClassificationMismatch(AssertionFailure):
    """The classified error class differs from the expected one."""

    def __init__(self, message: str, *, expected: Any, actual: Any, shape: str) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.shape = shape


class NoMatchingError(AssertionFailure):
    """No classified error satisfied the predicate."""

    def __init__(self, message: str, *, errors: Sequence[Any]) -> None:
        super().__init__(message)
        self.errors = tuple(errors)


class UnexpectedErrorMatch(AssertionFailure):
    """A classified error satisfied a predicate that was meant to match nothing."""

    def __init__(self, message: str, *, match: Any, errors: Sequence[Any]) -> None:
        super().__init__(message)
        self.match = match
        self.errors = tuple(errors)
