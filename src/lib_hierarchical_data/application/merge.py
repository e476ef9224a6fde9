"""Application-layer merge policy for merge keys.

Purpose
-------
Combine and subtract the values of keys declared as merge keys. A merge key
inherits the union of every ancestor's contribution instead of only the nearest
ancestor's value, which requires three operations: merge (union), unmerge
(difference), and containment (is a value already part of a union?).

Contents
    - ``merge_values``: union of two values of the same shape.
    - ``unmerge_values``: remove one value's contribution from another.
    - ``contains_value``: containment test used for redundancy detection.
    - ``_merge_sequence`` / ``_merge_mapping`` / ``_unmerge_*`` /
      ``_contains_*``: per-shape stanzas selected by :class:`ValueShape`.

System Role
-----------
Called by :mod:`lib_hierarchical_data.application.resolve` when a change sets a
merge key and by :mod:`lib_hierarchical_data.application.lookup` when it
accumulates inherited values. All functions are pure and never mutate inputs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..domain.errors import NotMergeable
from ..domain.values import ValueShape, deepcopy_value, shape_of


def merge_values(current: Any, incoming: Any, *, key: str) -> Any:
    """Return the union of *current* and *incoming* for merge key *key*.

    Why
    ----
    Several levels of the hierarchy may contribute to a merge key; their
    contributions accumulate rather than override each other.

    What
    ----
    Sequences concatenate while skipping elements already present. Mappings
    merge key-wise, recursing where both sides hold mergeable values of the same
    shape and overwriting otherwise.

    Raises
    ------
    NotMergeable
        When the two values are not both sequences or both mappings.

    Examples
    --------
    >>> merge_values(["a"], ["a", "c"], key="tags")
    ['a', 'c']
    >>> merge_values({"x": {"y": 1}}, {"x": {"z": 2}}, key="opts")
    {'x': {'y': 1, 'z': 2}}
    >>> merge_values("a", ["b"], key="tags")
    Traceback (most recent call last):
    ...
    lib_hierarchical_data.domain.errors.NotMergeable: Values for merge key 'tags' are not mergeable: str 'a' cannot be combined with list ['b']
    """

    shape = _common_shape(current, incoming, key=key)
    if shape is ValueShape.SEQUENCE:
        return _merge_sequence(current, incoming)
    return _merge_mapping(current, incoming, key=key)


def unmerge_values(current: Any, removal: Any, *, key: str) -> Any:
    """Return *current* without the contribution of *removal*.

    Sequences drop every element present in *removal*. Mappings drop entries
    whose values are equal to the ones in *removal*, recurse into nested values
    of the same mergeable shape, and drop nested containers that become empty.

    Raises
    ------
    NotMergeable
        When the two values are not both sequences or both mappings.

    Examples
    --------
    >>> unmerge_values(["a", "b", "c"], ["a", "c"], key="tags")
    ['b']
    >>> unmerge_values({"x": 1, "y": {"z": 2, "w": 3}}, {"y": {"z": 2}}, key="opts")
    {'x': 1, 'y': {'w': 3}}
    """

    shape = _common_shape(current, removal, key=key)
    if shape is ValueShape.SEQUENCE:
        return _unmerge_sequence(current, removal)
    return _unmerge_mapping(current, removal, key=key)


def contains_value(container: Any, candidate: Any) -> bool:
    """Return ``True`` when *candidate* is already part of *container*.

    Sequences contain a candidate sequence when every element is a member.
    Mappings contain a candidate mapping when every entry is present with an
    equal value, or with a recursively containing value of the same mergeable
    shape. Scalars compare by equality; mismatched shapes never contain.

    Examples
    --------
    >>> contains_value(["a", "c"], ["c"])
    True
    >>> contains_value({"x": {"y": 1, "z": 2}}, {"x": {"z": 2}})
    True
    >>> contains_value({"x": 1}, {"x": 2})
    False
    """

    shape = shape_of(container)
    if shape is not shape_of(candidate):
        return False
    if shape is ValueShape.SEQUENCE:
        return _contains_sequence(container, candidate)
    if shape is ValueShape.MAPPING:
        return _contains_mapping(container, candidate)
    return container == candidate


def _common_shape(current: Any, other: Any, *, key: str) -> ValueShape:
    """Return the shared mergeable shape or raise :class:`NotMergeable`."""

    shape = shape_of(current)
    if not shape.mergeable or shape is not shape_of(other):
        raise NotMergeable(key, current, other)
    return shape


def _merge_sequence(current: Sequence[Any], incoming: Sequence[Any]) -> list[Any]:
    merged = [deepcopy_value(item) for item in current]
    for item in incoming:
        if item not in merged:
            merged.append(deepcopy_value(item))
    return merged


def _merge_mapping(current: Mapping[str, Any], incoming: Mapping[str, Any], *, key: str) -> dict[str, Any]:
    merged = {name: deepcopy_value(value) for name, value in current.items()}
    for name, value in incoming.items():
        existing = merged.get(name)
        if name in merged and _same_mergeable_shape(existing, value):
            merged[name] = merge_values(existing, value, key=key)
        else:
            merged[name] = deepcopy_value(value)
    return merged


def _unmerge_sequence(current: Sequence[Any], removal: Sequence[Any]) -> list[Any]:
    return [deepcopy_value(item) for item in current if item not in removal]


def _unmerge_mapping(current: Mapping[str, Any], removal: Mapping[str, Any], *, key: str) -> dict[str, Any]:
    remaining: dict[str, Any] = {}
    for name, value in current.items():
        if name not in removal:
            remaining[name] = deepcopy_value(value)
            continue
        removed = removal[name]
        if value == removed:
            continue
        if _same_mergeable_shape(value, removed):
            rest = unmerge_values(value, removed, key=key)
            if rest:
                remaining[name] = rest
        else:
            remaining[name] = deepcopy_value(value)
    return remaining


def _contains_sequence(container: Sequence[Any], candidate: Sequence[Any]) -> bool:
    return all(item in container for item in candidate)


def _contains_mapping(container: Mapping[str, Any], candidate: Mapping[str, Any]) -> bool:
    for name, value in candidate.items():
        if name not in container:
            return False
        existing = container[name]
        if _same_mergeable_shape(existing, value):
            if not contains_value(existing, value):
                return False
        elif existing != value:
            return False
    return True


def _same_mergeable_shape(left: Any, right: Any) -> bool:
    shape = shape_of(left)
    return shape.mergeable and shape is shape_of(right)
