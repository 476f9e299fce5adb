"""Outcome shapes accepted by the matchers.

An operation either succeeded (``Success``, or the bare ``OK`` unit), failed
(``Failure``), or has not run yet but already collected errors (one of the
pending requests: ``Changeset``, ``Query``, ``ActionInput``). The union is
closed; anything else is rejected by ``require_outcome``.
"""

from __future__ import annotations

import dataclasses
import typing
from typing import Any, ClassVar, Final, TypeGuard

from outcomekit.errors import UnsupportedOutcomeError

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure")


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful outcome carrying the produced value."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A failed outcome carrying its error source."""

    error: TFailure


@typing.final
class SuccessUnit:
    """The bare success outcome: the operation succeeded and produced nothing."""

    __slots__ = ()
    _instance: ClassVar[SuccessUnit | None] = None

    def __new__(cls) -> SuccessUnit:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OK"

    def __reduce__(self) -> str:
        return "OK"


OK: Final = SuccessUnit()


@dataclasses.dataclass
class PendingRequest:
    """A built but not yet executed request that accumulates errors."""

    kind: ClassVar[str] = "request"

    resource: str
    action: str
    errors: list[Any] = dataclasses.field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def add_error(self, *errors: Any) -> typing.Self:
        """Append errors in order and return the request for chaining."""
        self.errors.extend(errors)
        return self


@dataclasses.dataclass
class Changeset(PendingRequest):
    """A pending create/update/destroy."""

    kind: ClassVar[str] = "changeset"

    arguments: dict[str, Any] = dataclasses.field(default_factory=dict)
    attributes: dict[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass
class Query(PendingRequest):
    """A pending read."""

    kind: ClassVar[str] = "query"

    arguments: dict[str, Any] = dataclasses.field(default_factory=dict)
    filter: Any = None


@dataclasses.dataclass
class ActionInput(PendingRequest):
    """Pending input to a generic action."""

    kind: ClassVar[str] = "action input"

    arguments: dict[str, Any] = dataclasses.field(default_factory=dict)


Outcome = Success[Any] | Failure[Any] | SuccessUnit | Changeset | Query | ActionInput

_PENDING_KINDS: Final = (Changeset, Query, ActionInput)
_ACCEPTED = "Success(value), Failure(error), OK, Changeset, Query or ActionInput"


def is_pending(obj: object) -> TypeGuard[Changeset | Query | ActionInput]:
    return isinstance(obj, _PENDING_KINDS)


def require_outcome(obj: object) -> Outcome:
    """Return ``obj`` unchanged when it is a known outcome shape.

    Raises:
        UnsupportedOutcomeError: For anything outside the closed union.
    """
    if isinstance(obj, (Success, Failure, SuccessUnit, *_PENDING_KINDS)):
        return typing.cast("Outcome", obj)
    raise UnsupportedOutcomeError(
        f"Unsupported outcome shape: {type(obj).__name__}",
        hint=f"Pass one of {_ACCEPTED}",
    )


def is_success_shape(outcome: Outcome) -> bool:
    """Return True when the outcome carries no errors at all."""
    match outcome:
        case Success() | SuccessUnit():
            return True
        case Changeset() | Query() | ActionInput():
            return outcome.valid
        case Failure():
            return False
    raise UnsupportedOutcomeError(
        f"Unsupported outcome shape: {type(outcome).__name__}",
        hint=f"Pass one of {_ACCEPTED}",
    )


def describe_shape(outcome: Outcome) -> str:
    """Name the outcome's shape the way failure messages refer to it."""
    if is_pending(outcome):
        return outcome.kind
    return "value"


def error_source(outcome: Failure[Any] | Changeset | Query | ActionInput) -> Any:
    """Return the raw, unclassified error source of a failing outcome."""
    if isinstance(outcome, Failure):
        return outcome.error
    return outcome
