"""Paginated read results.

Two page kinds exist: offset-based and keyset (cursor) based. Both wrap an
ordered ``results`` list; every other field is pagination bookkeeping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Page:
    """Common base for the concrete page kinds."""

    results: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class OffsetPage(Page):
    """A page addressed by limit/offset."""

    limit: int | None = None
    offset: int = 0
    count: int | None = None
    more: bool = False


@dataclass(frozen=True)
class KeysetPage(Page):
    """A page addressed by opaque before/after cursors."""

    limit: int | None = None
    before: str | None = None
    after: str | None = None
    count: int | None = None
    more: bool = False
