"""Source hierarchy value object.

Purpose
-------
Model the ordered tree of data sources where each source inherits from its
ancestors. The tree answers the two queries the resolver depends on: the
ancestor chain of a source and the pre-order subtree below it.

Contents
--------
* :class:`Node` – one source and its ordered children.
* :class:`Hierarchy` – immutable forest of nodes with constant-time lookups.

System Role
-----------
Built by :func:`lib_hierarchical_data.adapters.inputs.read_hierarchy` from the
nested YAML/JSON structure and consumed read-only by the resolver. Ordering is
always declaration order; nothing is sorted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator

from .errors import InvalidFormat


@dataclass(frozen=True, slots=True)
class Node:
    """A source identifier and its children in declaration order."""

    source: str
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Hierarchy:
    """Immutable tree (or forest) of source identifiers.

    Why
    ----
    Inheritance runs from the root down; the resolver needs the ancestor chain
    of every source it visits and the subtree of the target it starts from.

    What
    ----
    Wraps the root nodes and indexes parents and nodes by source id in
    ``MappingProxyType`` views during initialisation. Duplicate ids are rejected
    so every source has at most one parent and the tree cannot contain cycles.

    Examples
    --------
    >>> tree = Hierarchy.from_data({"global": {"team": ["dev", "prod"]}})
    >>> tree.ancestors_of("dev")
    ['global', 'team', 'dev']
    >>> tree.descendants_of("team")
    ['team', 'dev', 'prod']
    >>> tree.descendants_of("missing") is None
    True
    """

    roots: tuple[Node, ...]
    _nodes: Mapping[str, Node] = field(init=False, repr=False, compare=False)
    _parents: Mapping[str, str | None] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        nodes: dict[str, Node] = {}
        parents: dict[str, str | None] = {}
        for node, parent in _walk(self.roots, None):
            if node.source in nodes:
                raise InvalidFormat(f"Source {node.source!r} appears more than once in the hierarchy")
            nodes[node.source] = node
            parents[node.source] = parent
        object.__setattr__(self, "roots", tuple(self.roots))
        object.__setattr__(self, "_nodes", MappingProxyType(nodes))
        object.__setattr__(self, "_parents", MappingProxyType(parents))

    @classmethod
    def from_data(cls, layout: Any) -> Hierarchy:
        """Build a hierarchy from a nested YAML/JSON structure.

        A string is a leaf, a mapping maps each source to the layout of its
        children, and a list holds sibling layouts. ``None`` means no children.

        Raises
        ------
        InvalidFormat
            When the structure contains anything other than strings, lists,
            mappings, and ``None``, or when a source appears twice.
        """

        return cls(_parse_nodes(layout))

    def ancestors_of(self, source: str) -> list[str] | None:
        """Return the chain from the root down to and including *source*."""

        if source not in self._parents:
            return None
        chain: list[str] = []
        current: str | None = source
        while current is not None:
            chain.append(current)
            current = self._parents[current]
        chain.reverse()
        return chain

    def descendants_of(self, source: str) -> list[str] | None:
        """Return *source* followed by its subtree in pre-order."""

        node = self._nodes.get(source)
        if node is None:
            return None
        return [child.source for child, _ in _walk((node,), None)]

    def parent_of(self, source: str) -> str | None:
        """Return the parent of *source* (``None`` for roots and unknown ids)."""

        return self._parents.get(source)

    def sources(self) -> list[str]:
        """Return every source in pre-order."""

        return list(self._nodes)

    def __contains__(self, source: object) -> bool:
        return source in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def render(self, indent: str = "  ") -> str:
        """Render the tree as indented lines, one source per line."""

        lines: list[str] = []
        stack = [(node, 0) for node in reversed(self.roots)]
        while stack:
            node, depth = stack.pop()
            lines.append(f"{indent * depth}{node.source}")
            stack.extend((child, depth + 1) for child in reversed(node.children))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


def _walk(nodes: tuple[Node, ...], parent: str | None) -> Iterator[tuple[Node, str | None]]:
    """Yield ``(node, parent_source)`` pairs in pre-order."""

    stack = [(node, parent) for node in reversed(nodes)]
    while stack:
        node, node_parent = stack.pop()
        yield node, node_parent
        stack.extend((child, node.source) for child in reversed(node.children))


def _parse_nodes(layout: Any) -> tuple[Node, ...]:
    if layout is None:
        return ()
    if isinstance(layout, str):
        return (Node(layout),)
    if isinstance(layout, Mapping):
        return tuple(Node(_source_id(key), _parse_nodes(children)) for key, children in layout.items())
    if isinstance(layout, (list, tuple)):
        return tuple(node for item in layout for node in _parse_nodes(item))
    raise InvalidFormat(f"Unsupported hierarchy entry {layout!r}; expected a source name, list, or mapping")


def _source_id(key: Any) -> str:
    if not isinstance(key, str):
        raise InvalidFormat(f"Hierarchy source names must be strings, got {key!r}")
    return key
