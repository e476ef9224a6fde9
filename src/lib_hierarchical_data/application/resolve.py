"""Resolution of desired changes into minimal per-source data.

Purpose
-------
Given a hierarchy, the desired end-state changes, the current per-source data,
and a target, compute new data for the target and every source below it such
that each source's effective value matches the end state while its own stored
data only keeps what it does not already inherit.

Contents
    - ``generate_sources``: public entry point (also exported as ``resolve``).
    - ``resolve_source``: new stored data for a single source.
    - ``changes_for_source``: changes declared for one source, in input order.

System Role
-----------
The pure core of the library. No I/O and no logging happen here; the
composition root in :mod:`lib_hierarchical_data.core` wraps these functions with
loading, writing, and observability.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from typing import Any

from ..domain.change import Change
from ..domain.errors import TargetNotFound
from ..domain.values import deepcopy_mapping, deepcopy_value
from .lookup import DataLookup
from .merge import merge_values, unmerge_values
from .ports import HierarchyView

DataSnapshot = dict[str, dict[str, Any]]


def generate_sources(
    hierarchy: HierarchyView,
    changes: Iterable[Change],
    target: str,
    data: Mapping[str, Mapping[str, Any] | None],
    merge_keys: Collection[str] = frozenset(),
) -> DataSnapshot:
    """Return new data for *target* and its descendants with *changes* applied.

    Why
    ----
    Changes describe the end state as if the whole tree could be rewritten.
    Only the target's subtree may actually change, so each source in it must
    store exactly what it needs to reach that end state.

    What
    ----
    Deep-copies *data*, then visits the target's subtree top-down, replacing
    each source's entry with :func:`resolve_source`. Each visit reads the
    partially updated copy, so a child sees its parent's new values.

    Parameters
    ----------
    hierarchy:
        Tree describing which sources inherit from which.
    changes:
        End-state change records. Iterated once per visited ancestor, so any
        re-iterable collection works; one-shot iterators are materialised.
    target:
        Topmost source that may change. Sources above it are read-only context.
    data:
        Current stored data per source. Never mutated.
    merge_keys:
        Keys inherited with merge semantics.

    Returns
    -------
    dict[str, dict[str, Any]]
        Full snapshot: the target's subtree resolved, every other source copied
        unchanged.

    Raises
    ------
    TargetNotFound
        When *target* is not part of *hierarchy*.
    NotMergeable
        When a merge key holds values of incompatible shapes.

    Examples
    --------
    >>> from lib_hierarchical_data.domain.hierarchy import Hierarchy
    >>> tree = Hierarchy.from_data({"global": {"team": ["dev", "prod"]}})
    >>> result = generate_sources(
    ...     tree,
    ...     [Change("team", {"color": "blue"})],
    ...     "team",
    ...     {"dev": {"color": "blue", "size": 1}},
    ... )
    >>> result["team"], result["dev"], result["prod"]
    ({'color': 'blue'}, {'size': 1}, {})
    """

    descendants = hierarchy.descendants_of(target)
    if descendants is None:
        raise TargetNotFound(target, hierarchy)

    change_list = list(changes)
    result: DataSnapshot = {source: deepcopy_mapping(values or {}) for source, values in data.items()}

    for descendant in descendants:
        result[descendant] = resolve_source(hierarchy, change_list, descendant, result, merge_keys)

    return result


resolve = generate_sources


def resolve_source(
    hierarchy: HierarchyView,
    changes: Iterable[Change],
    source: str,
    data: Mapping[str, Mapping[str, Any] | None],
    merge_keys: Collection[str] = frozenset(),
) -> dict[str, Any]:
    """Return the new stored data of *source* only.

    Ancestors' changes are applied root first, then the source's own. A value
    from an ancestor's change that *source* already inherits is not stored;
    any explicit copy is pruned (unmerged for merge keys, deleted otherwise).
    """

    ancestors = hierarchy.ancestors_of(source)
    if ancestors is None:
        raise TargetNotFound(source, hierarchy)

    lookup = DataLookup(data, source, hierarchy, merge_keys)
    resolved = deepcopy_mapping(data.get(source) or {})

    for ancestor in ancestors:
        for change in changes_for_source(ancestor, changes):
            for key, value in change.set.items():
                if change.source != source and lookup.is_value_inherited(key, value):
                    _prune_inherited(resolved, key, lookup.inherited_value(key), merge_keys)
                    continue
                resolved[key] = _new_value(resolved, key, value, merge_keys)

            # Nested keys are not addressable; removal is top-level only.
            for key in change.remove:
                resolved.pop(key, None)

    return resolved


def changes_for_source(source: str, changes: Iterable[Change]) -> list[Change]:
    """Return the changes declared for *source*, preserving input order."""

    return [change for change in changes if change.source == source]


def _new_value(resolved: Mapping[str, Any], key: str, value: Any, merge_keys: Collection[str]) -> Any:
    if key in merge_keys and resolved.get(key) is not None:
        return merge_values(resolved[key], value, key=key)
    return deepcopy_value(value)


def _prune_inherited(resolved: dict[str, Any], key: str, inherited: Any, merge_keys: Collection[str]) -> None:
    """Drop the parts of ``resolved[key]`` that *inherited* already supplies."""

    if key not in resolved:
        return
    if key not in merge_keys or resolved[key] == inherited:
        del resolved[key]
        return
    remaining = unmerge_values(resolved[key], inherited, key=key)
    if remaining:
        resolved[key] = remaining
    else:
        del resolved[key]
