"""Public package surface for ``lib_hierarchical_data``.

Resolve end-state changes over a hierarchy of data sources so every source
below a target inherits the desired values while storing only what it does not
already inherit. The pure resolver is re-exported next to the composition root
that reads and writes source files.
"""

from __future__ import annotations

from .application.lookup import DataLookup
from .application.merge import contains_value, merge_values, unmerge_values
from .application.resolve import generate_sources, resolve, resolve_source
from .core import ApplyResult, apply_changes, run_inputs
from .domain.change import Change
from .domain.errors import (
    HierarchicalDataError,
    InvalidFormat,
    MalformedChange,
    NotFound,
    NotMergeable,
    TargetNotFound,
    ValidationError,
)
from .domain.hierarchy import Hierarchy, Node
from .observability import bind_trace_id, get_logger
from .settings import Inputs, load_inputs

__all__ = [
    "ApplyResult",
    "Change",
    "DataLookup",
    "HierarchicalDataError",
    "Hierarchy",
    "Inputs",
    "InvalidFormat",
    "MalformedChange",
    "Node",
    "NotFound",
    "NotMergeable",
    "TargetNotFound",
    "ValidationError",
    "apply_changes",
    "bind_trace_id",
    "contains_value",
    "generate_sources",
    "get_logger",
    "load_inputs",
    "merge_values",
    "resolve",
    "resolve_source",
    "run_inputs",
    "unmerge_values",
]
