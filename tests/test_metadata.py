"""strip_metadata tests: every dispatch case, plus idempotence properties."""

from __future__ import annotations

from collections import namedtuple
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import BaseModel, ConfigDict
import pytest

from outcomekit import (
    Failure,
    KeysetPage,
    OffsetPage,
    Success,
    config_scope,
    strip_metadata,
)
from outcomekit.errors import ConfigurationError
from tests.helpers import Author, Post, Profile, Tag

pytestmark = pytest.mark.unit


def _post(pk: int = 1, **kwargs: Any) -> Post:
    kwargs.setdefault("__metadata__", {"selected": ["id", "title"]})
    kwargs.setdefault("__meta__", {"state": "loaded"})
    return Post(id=pk, title=f"post {pk}", **kwargs)


def test_record_with_both_slots_is_cleared() -> None:
    post = _post()

    stripped = strip_metadata(post)

    assert stripped.__metadata__ == {}
    assert stripped.__meta__ == {}
    assert (stripped.id, stripped.title) == (1, "post 1")


def test_input_is_not_mutated() -> None:
    post = _post()

    strip_metadata(post)

    assert post.__metadata__ == {"selected": ["id", "title"]}
    assert post.__meta__ == {"state": "loaded"}


def test_record_with_only_first_slot_is_cleared() -> None:
    author = Author("ada", {"calculated": {"rank": 1}})

    stripped = strip_metadata(author)

    assert stripped == Author("ada", {})


def test_record_with_only_second_slot_is_left_alone() -> None:
    tag = Tag("python", {"state": "loaded"})

    assert strip_metadata(tag) is tag


def test_nested_records_are_cleared_at_every_depth() -> None:
    post = _post(
        author=Author("ada", {"x": 1}),
        comments=[_post(2, author=Author("bob", {"y": 2})), "plain"],
    )

    stripped = strip_metadata(post)

    assert stripped.author == Author("ada", {})
    assert stripped.comments[0].__metadata__ == {}
    assert stripped.comments[0].__meta__ == {}
    assert stripped.comments[0].author == Author("bob", {})
    assert stripped.comments[1] == "plain"


def test_sequence_of_records_keeps_length_and_order() -> None:
    records = [_post(1, author=Author("a", {"k": 1})), _post(2, author=Author("b"))]

    stripped = strip_metadata(records)

    assert [r.id for r in stripped] == [1, 2]
    assert all(r.__metadata__ == {} and r.__meta__ == {} for r in stripped)
    assert [r.author for r in stripped] == [Author("a", {}), Author("b", {})]


def test_tuple_keeps_arity_and_position() -> None:
    stripped = strip_metadata((_post(), "literal"))

    assert isinstance(stripped, tuple)
    assert len(stripped) == 2
    assert stripped[0].__metadata__ == {}
    assert stripped[1] == "literal"


def test_namedtuple_type_is_preserved() -> None:
    Pair = namedtuple("Pair", ["left", "right"])

    stripped = strip_metadata(Pair(Author("a", {"k": 1}), 3))

    assert stripped == Pair(Author("a", {}), 3)
    assert type(stripped) is Pair


def test_outcome_wrappers_are_walked() -> None:
    assert strip_metadata(Success(Author("a", {"k": 1}))) == Success(Author("a", {}))
    assert strip_metadata(Failure([Author("a", {"k": 1})])) == Failure(
        [Author("a", {})]
    )


def test_keyset_page_results_are_stripped_and_bookkeeping_kept() -> None:
    page = KeysetPage(
        results=[Author("a", {"k": 1}), Author("b", {"k": 2})],
        limit=2,
        after="abc",
        more=True,
    )

    stripped = strip_metadata(page)

    assert isinstance(stripped, KeysetPage)
    assert stripped.after == "abc"
    assert stripped.limit == 2
    assert stripped.more is True
    assert stripped.results == [Author("a", {}), Author("b", {})]


def test_offset_page_bookkeeping_is_not_walked() -> None:
    marker = {"__metadata__": {"not": "touched"}}
    page = OffsetPage(results=[], limit=10, offset=20, count=marker)  # type: ignore[arg-type]

    stripped = strip_metadata(page)

    assert stripped.count is marker
    assert (stripped.limit, stripped.offset) == (10, 20)


def test_mapping_records_are_stripped() -> None:
    record = {
        "id": 1,
        "__metadata__": {"k": 1},
        "__meta__": {"s": 1},
        "child": {"__metadata__": {"k": 2}, "name": "c"},
    }

    assert strip_metadata(record) == {
        "id": 1,
        "__metadata__": {},
        "__meta__": {},
        "child": {"__metadata__": {}, "name": "c"},
    }
    assert list(strip_metadata(record)) == list(record)


def test_read_only_mapping_record_keeps_its_type() -> None:
    record = MappingProxyType({"__metadata__": {"k": 1}, "n": 1})

    stripped = strip_metadata(record)

    assert isinstance(stripped, MappingProxyType)
    assert dict(stripped) == {"__metadata__": {}, "n": 1}


def test_pydantic_records_use_configured_slot_names() -> None:
    profile = Profile(
        handle="ada",
        metadata={"k": 1},
        meta={"s": 1},
        friends=[Profile(handle="bob", metadata={"k": 2})],
    )

    with config_scope(metadata_field="metadata", meta_field="meta"):
        stripped = strip_metadata(profile)

    assert stripped.metadata == {}
    assert stripped.meta == {}
    assert stripped.friends[0].metadata == {}
    assert stripped.handle == "ada"


def test_slot_names_can_be_passed_per_call() -> None:
    profile = Profile(handle="ada", metadata={"k": 1})

    stripped = strip_metadata(profile, metadata_field="metadata", meta_field="meta")

    assert stripped.metadata == {}


def test_pydantic_extra_fields_are_walked() -> None:
    class Loose(BaseModel):
        model_config = ConfigDict(extra="allow")

        handle: str
        metadata: dict[str, Any] = {}

    loose = Loose(
        handle="ada", metadata={"k": 1}, author=Author(name="ada", __metadata__={"k": 2})
    )

    stripped = strip_metadata(loose, metadata_field="metadata", meta_field="meta")

    assert stripped.metadata == {}
    assert stripped.author == Author(name="ada")
    assert loose.author.__metadata__ == {"k": 2}


class _KeywordOnlyMapping(Mapping):
    """Read-only mapping whose constructor does not take a mapping."""

    def __init__(self, *, items: dict[str, Any]) -> None:
        self._items = dict(items)

    def __getitem__(self, key: str) -> Any:
        return self._items[key]

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


def test_mapping_that_cannot_be_rebuilt_becomes_a_dict() -> None:
    record = _KeywordOnlyMapping(
        items={"__metadata__": {"k": 1}, "__meta__": {"s": 1}, "n": 1}
    )

    stripped = strip_metadata(record)

    assert stripped == {"__metadata__": {}, "__meta__": {}, "n": 1}
    assert record["__metadata__"] == {"k": 1}


def test_explicit_slot_names_do_not_read_configuration(monkeypatch) -> None:
    monkeypatch.setenv("OUTCOMEKIT_PRETTY_WIDTH", "5")

    with pytest.raises(ConfigurationError):
        strip_metadata(_post())

    stripped = strip_metadata(
        _post(), metadata_field="__metadata__", meta_field="__meta__"
    )

    assert stripped.__metadata__ == {}
    assert stripped.__meta__ == {}


@pytest.mark.parametrize("scalar", [None, 1, 2.5, "text", b"bytes", True, object])
def test_scalars_pass_through(scalar: object) -> None:
    assert strip_metadata(scalar) is scalar


def test_two_results_compare_equal_after_stripping() -> None:
    loaded = [_post(1, __metadata__={"from": "db"}, __meta__={"state": "loaded"})]
    built = [_post(1, __metadata__={}, __meta__={"state": "built"})]

    assert loaded != built
    assert strip_metadata(loaded) == strip_metadata(built)


# --- Properties ---

_scalars = st.one_of(st.none(), st.integers(), st.text(max_size=5), st.booleans())


def _records(children: st.SearchStrategy[Any]) -> st.SearchStrategy[Any]:
    metadata = st.dictionaries(st.text(max_size=3), _scalars, max_size=2)
    return st.one_of(
        st.builds(Author, name=st.text(max_size=5), __metadata__=metadata),
        st.builds(
            lambda pk, meta1, meta2, kids: Post(
                id=pk,
                title="t",
                comments=kids,
                __metadata__=meta1,
                __meta__=meta2,
            ),
            st.integers(),
            metadata,
            metadata,
            st.lists(children, max_size=3),
        ),
        st.builds(
            lambda results, after: KeysetPage(results=results, after=after),
            st.lists(children, max_size=3),
            st.text(max_size=3),
        ),
        st.lists(children, max_size=3),
        st.tuples(children, children),
    )


value_trees = st.recursive(_scalars, _records, max_leaves=12)


def _all_slots_empty(value: Any) -> bool:
    if isinstance(value, (list, tuple)):
        return all(_all_slots_empty(v) for v in value)
    if isinstance(value, KeysetPage):
        return _all_slots_empty(value.results)
    if isinstance(value, Post):
        return (
            value.__metadata__ == {}
            and value.__meta__ == {}
            and _all_slots_empty(value.comments)
        )
    if isinstance(value, Author):
        return value.__metadata__ == {}
    return True


def _shape(value: Any) -> Any:
    if isinstance(value, list):
        return ["list", [_shape(v) for v in value]]
    if isinstance(value, tuple):
        return ["tuple", [_shape(v) for v in value]]
    if isinstance(value, KeysetPage):
        return ["page", value.after, _shape(value.results)]
    if isinstance(value, Post):
        return ["post", value.id, _shape(value.comments)]
    if isinstance(value, Author):
        return ["author", value.name]
    return value


@given(value=value_trees)
@settings(max_examples=60, deadline=None, derandomize=True)
def test_strip_metadata_is_idempotent(value: Any) -> None:
    """Property: stripping twice equals stripping once."""
    once = strip_metadata(value)

    assert strip_metadata(once) == once


@given(value=value_trees)
@settings(max_examples=60, deadline=None, derandomize=True)
def test_strip_metadata_preserves_shape_and_clears_slots(value: Any) -> None:
    """Property: only slot contents change, and they all end up empty."""
    stripped = strip_metadata(value)

    assert _shape(stripped) == _shape(value)
    assert _all_slots_empty(stripped)
