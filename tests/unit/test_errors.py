from __future__ import annotations

from lib_hierarchical_data.domain.errors import (
    HierarchicalDataError,
    InvalidFormat,
    MalformedChange,
    NotFound,
    NotMergeable,
    TargetNotFound,
    ValidationError,
)
from lib_hierarchical_data.domain.hierarchy import Hierarchy


def test_error_hierarchy() -> None:
    for cls in (TargetNotFound, NotMergeable, InvalidFormat, MalformedChange, ValidationError, NotFound):
        assert issubclass(cls, HierarchicalDataError)
    assert issubclass(MalformedChange, InvalidFormat)
    assert issubclass(TargetNotFound, LookupError)
    assert issubclass(NotMergeable, TypeError)


def test_target_not_found_renders_hierarchy() -> None:
    tree = Hierarchy.from_data({"global": ["dev"]})
    error = TargetNotFound("staging", tree)
    assert error.target == "staging"
    assert error.hierarchy is tree
    assert str(error) == "Could not find target in hierarchy. Target: staging. Hierarchy:\nglobal\n  dev"


def test_not_mergeable_describes_both_values() -> None:
    error = NotMergeable("tags", "a", ["b"])
    assert (error.key, error.existing, error.incoming) == ("tags", "a", ["b"])
    assert "'tags'" in str(error)
    assert "str" in str(error)
    assert "list" in str(error)
