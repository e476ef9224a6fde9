from __future__ import annotations

import dataclasses

import pytest

from lib_hierarchical_data.domain.change import Change
from lib_hierarchical_data.domain.errors import InvalidFormat, MalformedChange


def test_change_copies_caller_containers() -> None:
    values = {"tags": ["a"], "nested": {"x": 1}}
    remove = ["old"]
    change = Change("team", values, remove)

    values["tags"].append("b")
    values["nested"]["x"] = 2
    values["new"] = True
    remove.append("other")

    assert change.set == {"tags": ["a"], "nested": {"x": 1}}
    assert change.remove == ("old",)


def test_change_is_read_only() -> None:
    change = Change("team", {"color": "blue"})
    with pytest.raises(TypeError):
        change.set["color"] = "red"  # type: ignore[index]
    with pytest.raises(dataclasses.FrozenInstanceError):
        change.source = "other"  # type: ignore[misc]


def test_from_mapping_defaults_missing_parts() -> None:
    change = Change.from_mapping({"source": "teams/dev.yaml"})
    assert change.source == "teams/dev.yaml"
    assert dict(change.set) == {}
    assert change.remove == ()


def test_from_mapping_reads_all_parts() -> None:
    change = Change.from_mapping({"source": "a", "set": {"k": "v"}, "remove": ["gone"]})
    assert change == Change("a", {"k": "v"}, ["gone"])


def test_from_mapping_rejects_null_record() -> None:
    with pytest.raises(MalformedChange, match="null"):
        Change.from_mapping(None)


@pytest.mark.parametrize(
    "record",
    [
        ["not", "a", "mapping"],
        {"set": {"k": "v"}},
        {"source": "a", "set": ["k"]},
        {"source": "a", "remove": "k"},
    ],
)
def test_from_mapping_rejects_malformed_records(record) -> None:
    with pytest.raises(MalformedChange):
        Change.from_mapping(record)
    assert issubclass(MalformedChange, InvalidFormat)


def test_to_dict_round_trips_through_from_mapping() -> None:
    change = Change("a", {"k": {"nested": [1]}}, ["gone"])
    assert Change.from_mapping(change.to_dict()) == change


def test_changes_are_hashable() -> None:
    assert len({Change("a", {"k": 1}), Change("a", {"k": 1})}) == 1
