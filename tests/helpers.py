"""Test helpers (small, reusable doubles and record types).

Keep this file tiny and purpose-built: records here stand in for the data
layer's result types in normalizer and matcher tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NoReturn

from pydantic import BaseModel, Field

from outcomekit.errors import AssertionFailure


@dataclass
class RecordingReporter:
    """Reporter that records everything it is given.

    ``fail`` still raises so the matcher contract (a failing check never
    returns) is exercised exactly as with the default reporter.
    """

    failures: list[AssertionFailure] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def fail(self, failure: AssertionFailure) -> NoReturn:
        self.failures.append(failure)
        raise failure

    def warn(self, message: str) -> None:
        self.warnings.append(message)


@dataclass
class SwallowingReporter(RecordingReporter):
    """Reporter whose ``fail`` returns, to prove matchers still abort."""

    def fail(self, failure: AssertionFailure) -> NoReturn:  # type: ignore[misc]
        self.failures.append(failure)
        return None  # type: ignore[return-value]


@dataclass
class Post:
    """A record carrying both metadata slots."""

    id: int
    title: str
    author: Any = None
    comments: list[Any] = field(default_factory=list)
    __metadata__: dict[str, Any] = field(default_factory=dict)
    __meta__: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Author:
    """A frozen record carrying only the first metadata slot."""

    name: str
    __metadata__: dict[str, Any] = field(default_factory=dict)


@dataclass
class Tag:
    """A record with no metadata slots."""

    label: str
    __meta__: dict[str, Any] = field(default_factory=dict)


class Profile(BaseModel):
    """A pydantic record; pydantic reserves underscore names, so slots differ."""

    handle: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    meta: dict[str, Any] = Field(default_factory=dict)
    friends: list[Any] = Field(default_factory=list)
