"""Desired end-state change records.

A :class:`Change` names a source and the keys that should be set on, or
removed from, that source's effective data. Instances are immutable: the
constructor copies every container it is given, so later mutation of the
caller's dictionaries or lists cannot leak into a change.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable

from .errors import MalformedChange
from .values import deepcopy_mapping


@dataclass(frozen=True, slots=True, init=False)
class Change:
    """One ``{source, set, remove}`` record.

    Examples
    --------
    >>> change = Change("teams/myteam.yaml", {"myapp::version": 2}, ["myapp::legacy"])
    >>> change.set["myapp::version"], change.remove
    (2, ('myapp::legacy',))
    """

    source: str
    set: Mapping[str, Any]
    remove: tuple[str, ...]

    def __init__(
        self,
        source: str,
        set: Mapping[str, Any] | None = None,  # noqa: A002 - mirrors the record field name
        remove: Iterable[str] | None = None,
    ) -> None:
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "set", MappingProxyType(deepcopy_mapping(set or {})))
        object.__setattr__(self, "remove", tuple(remove or ()))

    @classmethod
    def from_mapping(cls, record: Any) -> Change:
        """Build a change from a parsed YAML/JSON record.

        Absent ``set`` and ``remove`` entries default to empty containers. A
        missing record, or one whose parts have the wrong structure, raises
        :class:`MalformedChange`.
        """

        if record is None:
            raise MalformedChange("Cannot create a change from 'null'.")
        if not isinstance(record, Mapping):
            raise MalformedChange(f"Change records must be mappings, got {type(record).__name__}")
        source = record.get("source")
        if not isinstance(source, str):
            raise MalformedChange(f"Change record is missing a string 'source': {dict(record)!r}")
        set_values = record.get("set")
        if set_values is not None and not isinstance(set_values, Mapping):
            raise MalformedChange(f"'set' of change for {source} must be a mapping")
        remove = record.get("remove")
        if remove is not None and (isinstance(remove, (str, Mapping)) or not isinstance(remove, Iterable)):
            raise MalformedChange(f"'remove' of change for {source} must be a list of keys")
        return cls(source, set_values, remove)

    def to_dict(self) -> dict[str, Any]:
        """Return a plain ``dict`` representation suitable for serialisation."""

        return {"source": self.source, "set": deepcopy_mapping(self.set), "remove": list(self.remove)}

    def __hash__(self) -> int:
        return hash((self.source, tuple(self.set), self.remove))
