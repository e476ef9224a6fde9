"""Value shapes and copy helpers shared by the domain and application layers.

Purpose
-------
Classify the JSON/YAML-like values stored in data sources into a small tagged
variant so merge, unmerge, and containment checks can dispatch on shape pairs
instead of scattering ``isinstance`` checks across the resolver.

Contents
--------
* :class:`ValueShape` – ``SCALAR`` / ``SEQUENCE`` / ``MAPPING`` tag.
* :func:`shape_of` – classify a value.
* :func:`deepcopy_mapping` / :func:`deepcopy_value` – clone nested data into
  plain ``dict``/``list`` containers.
* :data:`MISSING` – sentinel for "no value" distinct from ``None``.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Final


class ValueShape(Enum):
    """Tag describing how a value participates in merges."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"

    @property
    def mergeable(self) -> bool:
        return self is not ValueShape.SCALAR


class _Missing:
    """Sentinel type for absent values (``None`` is a legitimate YAML value)."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


def shape_of(value: Any) -> ValueShape:
    """Return the :class:`ValueShape` of *value*.

    Strings and bytes are scalars even though they are sequences in Python.

    Examples
    --------
    >>> shape_of([1, 2]).name, shape_of({"a": 1}).name, shape_of("abc").name
    ('SEQUENCE', 'MAPPING', 'SCALAR')
    """

    if isinstance(value, Mapping):
        return ValueShape.MAPPING
    if isinstance(value, (list, tuple)):
        return ValueShape.SEQUENCE
    return ValueShape.SCALAR


def deepcopy_mapping(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively clone a mapping so callers receive a mutable ``dict``.

    Read-only views (``mappingproxy``) and tuples come back as ``dict`` and
    ``list`` so the copy can be serialised by ``yaml.safe_dump``.

    Examples
    --------
    >>> original = {"a": {"b": [1, 2]}}
    >>> clone = deepcopy_mapping(original)
    >>> clone["a"]["b"].append(3)
    >>> original["a"]["b"]
    [1, 2]
    """

    return {key: deepcopy_value(value) for key, value in mapping.items()}


def deepcopy_value(value: Any) -> Any:
    """Clone nested values, normalising sequences to lists and mappings to dicts."""

    shape = shape_of(value)
    if shape is ValueShape.MAPPING:
        return deepcopy_mapping(value)
    if shape is ValueShape.SEQUENCE:
        return [deepcopy_value(item) for item in value]
    return value
