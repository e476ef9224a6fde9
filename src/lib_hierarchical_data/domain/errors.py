"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the resolver, the adapters, the
composition root, and consuming applications. The hierarchy lives in the domain
layer so outer layers may depend on it without the domain depending on them.

Contents
--------
* :class:`HierarchicalDataError` – umbrella base class for all library errors.
* :class:`TargetNotFound` – a source id is absent from the hierarchy.
* :class:`NotMergeable` – a merge key holds values of incompatible shapes.
* :class:`InvalidFormat` – input artifacts that cannot be parsed.
* :class:`MalformedChange` – change records that cannot be normalised.
* :class:`ValidationError` – required inputs are missing.
* :class:`NotFound` – an expected resource is missing.

System Role
-----------
The resolver raises :class:`TargetNotFound` and :class:`NotMergeable`; adapters
raise :class:`InvalidFormat` and :class:`NotFound`. Callers catch
:class:`HierarchicalDataError` to handle all library failures uniformly.
"""

from __future__ import annotations

from typing import Any


class HierarchicalDataError(Exception):
    """Base type for all exceptions emitted by ``lib_hierarchical_data``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class TargetNotFound(HierarchicalDataError, LookupError):
    """Raised when a target or source id is not part of the hierarchy.

    What
    ----
    Carries the attempted id and the hierarchy so operators can see which
    sources actually exist.

    Examples
    --------
    >>> error = TargetNotFound("teams/missing.yaml", "global.yaml")
    >>> error.target
    'teams/missing.yaml'
    """

    def __init__(self, target: str, hierarchy: object) -> None:
        self.target = target
        self.hierarchy = hierarchy
        super().__init__(f"Could not find target in hierarchy. Target: {target}. Hierarchy:\n{hierarchy}")


class NotMergeable(HierarchicalDataError, TypeError):
    """Raised when the values of a merge key cannot be combined.

    Why
    ----
    Merge keys only make sense for sequences or mappings of the same shape;
    anything else is a configuration error the user must fix.
    """

    def __init__(self, key: str, existing: Any, incoming: Any) -> None:
        self.key = key
        self.existing = existing
        self.incoming = incoming
        super().__init__(
            f"Values for merge key {key!r} are not mergeable: "
            f"{_describe(existing)} cannot be combined with {_describe(incoming)}"
        )


class InvalidFormat(HierarchicalDataError):
    """Raised when an input artifact cannot be parsed into structured data.

    Typical Sources
    ---------------
    Hierarchy and change documents, per-source data files, and config files.
    """


class MalformedChange(InvalidFormat):
    """Raised when a change record cannot be turned into a :class:`Change`."""


class ValidationError(HierarchicalDataError):
    """Signifies that syntactically valid inputs are incomplete or inconsistent."""


class NotFound(HierarchicalDataError):
    """Represents missing resources (files, directories, etc.)."""


def _describe(value: Any) -> str:
    """Return a short ``type(value)`` description used in error messages."""

    return f"{type(value).__name__} {value!r}"
