"""Inherited-value lookup.

Purpose
-------
Answer the question at the heart of redundancy pruning: if a source did not
store a value for a key itself, would it still end up with that value purely
through inheritance?

Contents
    - ``DataLookup``: bound to one source of an in-progress result snapshot.

System Role
-----------
Built by the resolver once per visited source, against the *current* result
snapshot, so ancestors resolved earlier in the same pass are seen with their
new data rather than their stale pre-change data.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import Any

from ..domain.errors import TargetNotFound
from ..domain.values import MISSING, deepcopy_value
from .merge import contains_value, merge_values
from .ports import HierarchyView


class DataLookup:
    """Resolve inherited values for *source* from the ancestors' stored data.

    Why
    ----
    Plain keys inherit the nearest ancestor's value while merge keys inherit
    the union of every ancestor's value; both rules must skip the source's own
    mapping so the lookup reflects inheritance alone.

    Parameters
    ----------
    data:
        Snapshot mapping each source to its own stored data. Read lazily, so
        updates to ancestors made before a lookup are visible.
    source:
        The source whose inheritance is inspected.
    hierarchy:
        Tree providing the ancestor chain.
    merge_keys:
        Keys inherited with merge semantics.

    Raises
    ------
    TargetNotFound
        When *source* is not part of *hierarchy*.

    Examples
    --------
    >>> from lib_hierarchical_data.domain.hierarchy import Hierarchy
    >>> tree = Hierarchy.from_data({"global": {"team": ["dev"]}})
    >>> data = {"global": {"tags": ["a"]}, "team": {"color": "blue", "tags": ["b"]}}
    >>> lookup = DataLookup(data, "dev", tree, {"tags"})
    >>> lookup.is_value_inherited("color", "blue")
    True
    >>> lookup.inherited_value("tags")
    ['a', 'b']
    """

    def __init__(
        self,
        data: Mapping[str, Mapping[str, Any] | None],
        source: str,
        hierarchy: HierarchyView,
        merge_keys: Collection[str],
    ) -> None:
        ancestors = hierarchy.ancestors_of(source)
        if ancestors is None:
            raise TargetNotFound(source, hierarchy)
        self._data = data
        self._source = source
        self._ancestors = tuple(ancestors[:-1])
        self._merge_keys = merge_keys

    @property
    def source(self) -> str:
        return self._source

    def inherited_value(self, key: str) -> Any:
        """Return the value *key* would inherit, or :data:`MISSING`."""

        if key in self._merge_keys:
            return self._merged_value(key)
        for ancestor in reversed(self._ancestors):
            values = self._data.get(ancestor) or {}
            if key in values:
                return values[key]
        return MISSING

    def is_value_inherited(self, key: str, value: Any) -> bool:
        """Return ``True`` when *value* for *key* already reaches the source by inheritance."""

        inherited = self.inherited_value(key)
        if inherited is MISSING:
            return False
        if key in self._merge_keys:
            return contains_value(inherited, value)
        return inherited == value

    def _merged_value(self, key: str) -> Any:
        merged: Any = MISSING
        for ancestor in self._ancestors:
            values = self._data.get(ancestor) or {}
            if key not in values:
                continue
            if merged is MISSING:
                merged = deepcopy_value(values[key])
            else:
                merged = merge_values(merged, values[key], key=key)
        return merged
