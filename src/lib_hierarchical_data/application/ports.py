"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the resolver and the composition root depend
on, so concrete implementations (the in-memory :class:`Hierarchy`, the
filesystem source store, the structured file loaders) can be swapped without
touching the algorithm.

Contents
--------
* :class:`HierarchyView` – ancestor-chain and subtree queries.
* :class:`InheritedValueLookup` – redundancy decision for one source.
* :class:`FileLoader` – parses structured artifacts into mappings.
* :class:`SourceStore` – loads and persists per-source data.

System Role
-----------
These protocols keep the dependency rule intact: the application layer asks
for behaviour through abstractions and adapters implement them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping, Protocol, runtime_checkable


@runtime_checkable
class HierarchyView(Protocol):
    """Answer ordering queries over the source tree.

    Both methods return ``None`` rather than raising when the source is
    unknown; callers turn absence into
    :class:`~lib_hierarchical_data.domain.errors.TargetNotFound`.
    """

    def ancestors_of(self, source: str) -> list[str] | None:
        """Return the root-to-source chain, inclusive."""

    def descendants_of(self, source: str) -> list[str] | None:
        """Return *source* followed by its subtree in pre-order."""


@runtime_checkable
class InheritedValueLookup(Protocol):
    """Decide whether a value reaches a source through inheritance alone."""

    def inherited_value(self, key: str) -> Any:
        """Return the inherited value or the ``MISSING`` sentinel."""

    def is_value_inherited(self, key: str, value: Any) -> bool:
        """Return ``True`` when *value* is already inherited for *key*."""


@runtime_checkable
class FileLoader(Protocol):
    """Parse a structured file into a mapping.

    Why
    ----
    Segregate parsing concerns (YAML/JSON/TOML) from orchestration logic.
    """

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return a mapping or raise ``InvalidFormat``."""


@runtime_checkable
class SourceStore(Protocol):
    """Load the current data of sources and persist resolved data."""

    def load(self, sources: Iterable[str]) -> dict[str, dict[str, Any]]:
        """Return the stored data of every source in *sources*."""

    def write(
        self, data: Mapping[str, Mapping[str, Any]], sources: Iterable[str], output_dir: str | Path
    ) -> list[Path]:
        """Persist the listed *sources* of *data* below *output_dir*."""
