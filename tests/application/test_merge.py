from __future__ import annotations

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from lib_hierarchical_data.application.merge import contains_value, merge_values, unmerge_values
from lib_hierarchical_data.domain.errors import NotMergeable

SCALAR = st.one_of(st.booleans(), st.integers(), st.text(min_size=1, max_size=5))
LIST = st.lists(SCALAR, max_size=5)
VALUE = st.recursive(
    SCALAR,
    lambda children: st.dictionaries(st.text(min_size=1, max_size=5), children, min_size=1, max_size=3),
    max_leaves=10,
)
MAPPING = st.dictionaries(st.text(min_size=1, max_size=5), VALUE, max_size=4)


def test_sequence_merge_skips_present_elements() -> None:
    assert merge_values(["a", "b"], ["b", "c", "c"], key="tags") == ["a", "b", "c"]


def test_mapping_merge_recurses_and_overwrites_scalars() -> None:
    current = {"db": {"host": "localhost", "ports": [5432]}, "debug": False}
    incoming = {"db": {"ports": [5433], "user": "app"}, "debug": True}
    assert merge_values(current, incoming, key="opts") == {
        "db": {"host": "localhost", "ports": [5432, 5433], "user": "app"},
        "debug": True,
    }


def test_merge_does_not_mutate_inputs() -> None:
    current = {"db": {"ports": [1]}}
    incoming = {"db": {"ports": [2]}}
    merge_values(current, incoming, key="opts")
    assert current == {"db": {"ports": [1]}}
    assert incoming == {"db": {"ports": [2]}}


def test_sequence_unmerge_drops_subtrahend_elements() -> None:
    assert unmerge_values(["a", "b", "c"], ["c", "a", "z"], key="tags") == ["b"]


def test_mapping_unmerge_only_drops_equal_entries() -> None:
    current = {"x": 1, "y": 2, "nested": {"keep": 1, "drop": 2}, "gone": {"a": 1}}
    removal = {"x": 1, "y": 3, "nested": {"drop": 2}, "gone": {"a": 1}}
    assert unmerge_values(current, removal, key="opts") == {"y": 2, "nested": {"keep": 1}}


@pytest.mark.parametrize(
    ("current", "incoming"),
    [("a", ["b"]), (["a"], {"b": 1}), ({"a": 1}, ["a"]), (1, 2), (None, ["a"])],
)
def test_mismatched_shapes_are_not_mergeable(current, incoming) -> None:
    with pytest.raises(NotMergeable) as excinfo:
        merge_values(current, incoming, key="tags")
    assert excinfo.value.key == "tags"
    assert "tags" in str(excinfo.value)
    with pytest.raises(NotMergeable):
        unmerge_values(current, incoming, key="tags")


def test_containment_per_shape() -> None:
    assert contains_value(["a", "b"], ["b"])
    assert contains_value(["a"], [])
    assert not contains_value(["a"], ["a", "c"])
    assert contains_value({"x": {"y": [1, 2]}}, {"x": {"y": [2]}})
    assert not contains_value({"x": 1}, {"x": 1, "y": 2})
    assert not contains_value(["a"], {"a": 1})
    assert contains_value("a", "a")


@given(LIST, LIST)
def test_sequence_merge_then_unmerge_restores_prior(prior, added) -> None:
    fresh = [item for item in added if item not in prior]
    assume(fresh)
    merged = merge_values(prior, fresh, key="tags")
    assert unmerge_values(merged, fresh, key="tags") == prior


@given(MAPPING, MAPPING)
def test_mapping_merge_then_unmerge_restores_prior(prior, added) -> None:
    fresh = {key: value for key, value in added.items() if key not in prior}
    merged = merge_values(prior, fresh, key="opts")
    assert unmerge_values(merged, fresh, key="opts") == prior


@given(MAPPING, MAPPING)
def test_merged_value_contains_both_sides_additions(lhs, rhs) -> None:
    merged = merge_values(lhs, rhs, key="opts")
    assert contains_value(merged, rhs)


@given(LIST, LIST)
def test_sequence_merge_is_idempotent(lhs, rhs) -> None:
    once = merge_values(lhs, rhs, key="tags")
    assert merge_values(once, rhs, key="tags") == once
