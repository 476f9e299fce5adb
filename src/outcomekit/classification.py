"""Error classification: collapse heterogeneous error sources into one class.

A classification call takes whatever a failing outcome carries (a pending
request, a list of errors, a single error, an exception, ...) and returns an
``ErrorCollection``: the flattened, ordered entries plus the single dominant
``ErrorClass`` among them. The dominant class is the one that ranks first in
the taxonomy's precedence order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from outcomekit.outcome import PendingRequest


@dataclass(frozen=True, slots=True)
class ErrorClass:
    """A classification tag. Two classes are equal when their names are."""

    name: str

    def __str__(self) -> str:
        return self.name


FORBIDDEN: Final = ErrorClass("forbidden")
INVALID: Final = ErrorClass("invalid")
FRAMEWORK: Final = ErrorClass("framework")
UNKNOWN: Final = ErrorClass("unknown")


@dataclass(frozen=True)
class ErrorTaxonomy:
    """Ordered set of error classes, highest precedence first."""

    classes: tuple[ErrorClass, ...]
    unknown: ErrorClass = UNKNOWN

    def __post_init__(self) -> None:
        names = [c.name for c in self.classes]
        if len(set(names)) != len(names):
            raise ValueError("ErrorTaxonomy.classes must have unique names")
        if self.unknown not in self.classes:
            raise ValueError("ErrorTaxonomy.unknown must be one of its classes")

    def lookup(self, ref: ErrorClass | str) -> ErrorClass | None:
        """Return the taxonomy's class for a class or class name, if known."""
        name = ref.name if isinstance(ref, ErrorClass) else ref
        return next((c for c in self.classes if c.name == name), None)

    def class_of(self, entry: DomainError) -> ErrorClass:
        return self.lookup(entry.error_class) or self.unknown

    def dominant(self, classes: Iterable[ErrorClass]) -> ErrorClass:
        """Return the highest-precedence class present, or ``unknown`` if none."""
        rank = {c: i for i, c in enumerate(self.classes)}
        present = [c for c in classes if c in rank]
        if not present:
            return self.unknown
        return min(present, key=rank.__getitem__)


DEFAULT_TAXONOMY: Final = ErrorTaxonomy(classes=(FORBIDDEN, INVALID, FRAMEWORK, UNKNOWN))


class DomainError(BaseModel):
    """A single structured error entry.

    ``cause`` holds the original object when the entry was produced by
    wrapping something that was not already a ``DomainError``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    error_class: str = Field(default=UNKNOWN.name, min_length=1)
    code: str = "unknown"
    message: str = ""
    field: str | None = None
    path: tuple[str | int, ...] = ()
    vars: dict[str, Any] = Field(default_factory=dict)
    cause: Any = None

    @field_validator("error_class", mode="before")
    @classmethod
    def normalize_error_class(cls, v: Any) -> Any:
        """Accept an ``ErrorClass`` or a name with stray whitespace/case."""
        if isinstance(v, ErrorClass):
            return v.name
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


@dataclass(frozen=True, slots=True)
class ErrorCollection:
    """The result of classifying an error source."""

    error_class: ErrorClass
    errors: tuple[DomainError, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[DomainError]:
        return iter(self.errors)


Classifier = Callable[[Any], ErrorCollection]


def classify(source: Any, *, taxonomy: ErrorTaxonomy = DEFAULT_TAXONOMY) -> ErrorCollection:
    """Classify an error source into a single ``ErrorCollection``.

    Total and deterministic: every input yields a collection, and the same
    input always yields the same class and entry order. Nested collections,
    lists and exception groups are flattened depth-first.
    """
    entries = tuple(_flatten(source, taxonomy))
    error_class = taxonomy.dominant(taxonomy.class_of(e) for e in entries)
    return ErrorCollection(error_class=error_class, errors=entries)


def _flatten(source: Any, taxonomy: ErrorTaxonomy) -> Iterator[DomainError]:
    if isinstance(source, DomainError):
        yield source
    elif isinstance(source, ErrorCollection):
        yield from source.errors
    elif isinstance(source, PendingRequest):
        for item in source.errors:
            yield from _flatten(item, taxonomy)
    elif isinstance(source, BaseExceptionGroup):
        for exc in source.exceptions:
            yield from _flatten(exc, taxonomy)
    elif isinstance(source, (list, tuple)):
        for item in source:
            yield from _flatten(item, taxonomy)
    else:
        yield _wrap_unknown(source, taxonomy)


def _wrap_unknown(value: Any, taxonomy: ErrorTaxonomy) -> DomainError:
    message = str(value) if isinstance(value, (str, BaseException)) else repr(value)
    return DomainError(
        error_class=taxonomy.unknown.name,
        code="unknown",
        message=message,
        cause=value,
    )
