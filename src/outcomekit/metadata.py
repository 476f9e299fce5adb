"""Metadata stripping for structural comparison of results.

Records produced by a data layer carry bookkeeping slots (load metadata,
persistence state) that differ between two otherwise identical results.
``strip_metadata`` resets those slots to empty dicts at every depth so results
can be compared with ``==``.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
import copy
import dataclasses
from typing import Any

from pydantic import BaseModel

from outcomekit.config import get_config
from outcomekit.outcome import Failure, Success
from outcomekit.pages import Page

_Slots = tuple[str, str]


def strip_metadata(
    value: Any,
    *,
    metadata_field: str | None = None,
    meta_field: str | None = None,
) -> Any:
    """Return ``value`` with every record's metadata slots emptied.

    Dispatch, first match wins:

    1. ``list``: each element is stripped, order and length kept.
    2. ``tuple`` (namedtuples included), ``Success`` and ``Failure``: same
       arity and type, each member stripped.
    3. ``OffsetPage`` / ``KeysetPage``: ``results`` stripped, pagination
       fields untouched.
    4. A record (dataclass instance, mapping or pydantic model) that has the
       metadata slot: that slot, and the meta slot when present, are set to
       ``{}``; then every field is stripped.
    5. Anything else is returned as is.

    The input is never mutated. Value trees must be acyclic.

    Args:
        value: Value to normalize.
        metadata_field: Name of the first slot; defaults to the configured
            ``metadata_field`` (``"__metadata__"``).
        meta_field: Name of the second slot; defaults to the configured
            ``meta_field`` (``"__meta__"``).
    """
    if metadata_field is None or meta_field is None:
        cfg = get_config()
        metadata_field = metadata_field or cfg.metadata_field
        meta_field = meta_field or cfg.meta_field
    return _strip(value, (metadata_field, meta_field))


def _strip(value: Any, slots: _Slots) -> Any:
    if isinstance(value, list):
        return [_strip(item, slots) for item in value]
    if isinstance(value, tuple):
        items = [_strip(item, slots) for item in value]
        if hasattr(value, "_make"):
            return value._make(items)
        return tuple(items) if type(value) is tuple else type(value)(items)
    if isinstance(value, Success):
        return Success(_strip(value.value, slots))
    if isinstance(value, Failure):
        return Failure(_strip(value.error, slots))
    if isinstance(value, Page):
        return dataclasses.replace(
            value, results=[_strip(item, slots) for item in value.results]
        )

    fields = _record_fields(value)
    primary, secondary = slots
    if fields is None or primary not in fields:
        return value

    cleared: dict[str, Any] = {primary: {}}
    if secondary in fields:
        cleared[secondary] = {}
    updated = {
        name: _strip(cleared.get(name, current), slots)
        for name, current in fields.items()
    }
    return _rebuild(value, updated)


def _record_fields(value: Any) -> dict[str, Any] | None:
    """Return a record's fields in declaration order, or None if not a record."""
    if isinstance(value, BaseModel):
        fields = {name: getattr(value, name) for name in type(value).model_fields}
        fields.update(value.model_extra or {})
        return fields
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return dict(value.items())
    return None


def _rebuild(value: Any, updated: dict[str, Any]) -> Any:
    """Copy a record with new field values, skipping its constructor."""
    if isinstance(value, BaseModel):
        return value.model_copy(update=updated)
    if isinstance(value, MutableMapping):
        new = copy.copy(value)
        new.update(updated)
        return new
    if isinstance(value, Mapping):
        try:
            return type(value)(updated)
        except TypeError:
            # constructor does not take a mapping
            return dict(updated)
    new = copy.copy(value)
    for name, field_value in updated.items():
        # bypasses frozen=True on the copy
        object.__setattr__(new, name, field_value)
    return new
