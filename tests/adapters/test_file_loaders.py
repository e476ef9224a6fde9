from __future__ import annotations

import json
from pathlib import Path

import pytest

from lib_hierarchical_data.adapters.file_loaders.structured import (
    JSONFileLoader,
    TOMLFileLoader,
    YAMLFileLoader,
    loader_for,
    parse_yaml_documents,
)
from lib_hierarchical_data.domain.errors import InvalidFormat, NotFound


def test_yaml_loader(tmp_path: Path) -> None:
    path = tmp_path / "dev.yaml"
    path.write_text("db:\n  port: 5432\n", encoding="utf-8")
    assert YAMLFileLoader().load(str(path))["db"]["port"] == 5432


def test_yaml_loader_handles_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("# empty file\n", encoding="utf-8")
    assert YAMLFileLoader().load(str(path)) == {}


def test_yaml_loader_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(InvalidFormat, match="did not produce a mapping"):
        YAMLFileLoader().load(str(path))


def test_yaml_loader_reads_document_streams(tmp_path: Path) -> None:
    path = tmp_path / "changes.yaml"
    path.write_text("---\nsource: a\n---\nsource: b\n", encoding="utf-8")
    assert YAMLFileLoader().load_documents(str(path)) == [{"source": "a"}, {"source": "b"}]


def test_missing_file_is_not_found(tmp_path: Path) -> None:
    with pytest.raises(NotFound):
        YAMLFileLoader().load(str(tmp_path / "missing.yaml"))


def test_json_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{invalid}", encoding="utf-8")
    with pytest.raises(InvalidFormat):
        JSONFileLoader().load(str(path))


def test_json_loader_valid(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"feature": True}), encoding="utf-8")
    assert JSONFileLoader().load(str(path))["feature"] is True


def test_toml_loader(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('target = "teams/dev.yaml"\n', encoding="utf-8")
    assert TOMLFileLoader().load(str(path)) == {"target": "teams/dev.yaml"}


def test_toml_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("target = \n", encoding="utf-8")
    with pytest.raises(InvalidFormat):
        TOMLFileLoader().load(str(path))


def test_loader_for_picks_by_suffix() -> None:
    assert isinstance(loader_for("a/b.YML"), YAMLFileLoader)
    assert isinstance(loader_for("a/b.json"), JSONFileLoader)
    assert isinstance(loader_for("a/b.toml"), TOMLFileLoader)


def test_loader_for_rejects_unknown_or_disallowed_suffix() -> None:
    with pytest.raises(InvalidFormat):
        loader_for("data.ini")
    with pytest.raises(InvalidFormat):
        loader_for("data.toml", allowed=(".yaml", ".json"))


def test_parse_yaml_documents_reports_origin() -> None:
    with pytest.raises(InvalidFormat, match="inline-test"):
        parse_yaml_documents("a: [unclosed", origin="inline-test")
