"""End-to-end coverage of :func:`apply_changes` against an on-disk repository."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from lib_hierarchical_data import Inputs, apply_changes, run_inputs
from lib_hierarchical_data.domain.errors import NotFound, TargetNotFound, ValidationError
from tests.support import data_repository, write

TEAM = "teams/myteam.yaml"
DEV = "teams/myteam/dev.yaml"
PROD = "teams/myteam/prod.yaml"
CHANGES = f"source: {TEAM}\nset:\n  color: blue\n  tags: [c]\n"


def _read(path: Path) -> dict:
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def test_apply_changes_updates_subtree_in_place(tmp_path: Path) -> None:
    root = data_repository(tmp_path)
    outcome = apply_changes(
        hierarchy=str(root / "hierarchy.yaml"),
        changes=CHANGES,
        target=TEAM,
        data_dir=root,
        merge_keys="tags",
    )
    assert outcome.written == [root / TEAM, root / DEV, root / PROD]
    assert outcome.sources == {TEAM: {"tags": ["a", "c"], "color": "blue"}, DEV: {"tags": ["b"]}, PROD: {}}
    assert _read(root / "global.yaml") == {"color": "red"}
    assert _read(root / TEAM) == {"tags": ["a", "c"], "color": "blue"}
    assert _read(root / DEV) == {"tags": ["b"]}
    assert (root / PROD).read_text(encoding="utf-8") == ""


def test_apply_changes_resolves_relative_inputs_against_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = data_repository(tmp_path / "repo")
    write(root / "changes.yaml", CHANGES)
    monkeypatch.chdir(tmp_path)
    outcome = apply_changes(hierarchy="hierarchy.yaml", changes="changes.yaml", target=DEV, data_dir=root, dry_run=True)
    assert outcome.sources == {DEV: {"color": "blue", "tags": ["c"]}}


def test_apply_changes_writes_to_output_dir(tmp_path: Path) -> None:
    root = data_repository(tmp_path / "repo")
    out = tmp_path / "out"
    outcome = apply_changes(
        hierarchy=str(root / "hierarchy.yaml"), changes=CHANGES, target=DEV, data_dir=root, output_dir=out
    )
    assert outcome.written == [out / DEV]
    assert _read(root / DEV) == {"color": "blue", "tags": ["a", "b"]}
    assert not (out / TEAM).exists()


def test_dry_run_writes_nothing(tmp_path: Path) -> None:
    root = data_repository(tmp_path)
    before = (root / DEV).read_text(encoding="utf-8")
    outcome = apply_changes(
        hierarchy=str(root / "hierarchy.yaml"), changes=CHANGES, target=TEAM, data_dir=root, dry_run=True
    )
    assert outcome.written == []
    assert outcome.sources[DEV] == {}
    assert (root / DEV).read_text(encoding="utf-8") == before
    assert not (root / PROD).exists()


def test_unknown_target_is_logged_and_raised(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="lib_hierarchical_data")
    root = data_repository(tmp_path)
    with pytest.raises(TargetNotFound):
        apply_changes(hierarchy=str(root / "hierarchy.yaml"), changes=CHANGES, target="teams/staging.yaml", data_dir=root)
    assert caplog.records[-1].getMessage() == "target_missing"
    assert caplog.records[-1].context["trace_id"]


def test_missing_changes_file_is_not_found(tmp_path: Path) -> None:
    root = data_repository(tmp_path)
    with pytest.raises(NotFound):
        apply_changes(hierarchy=str(root / "hierarchy.yaml"), changes="absent.yaml", target=TEAM, data_dir=root)


def test_run_inputs_reports_every_missing_option() -> None:
    with pytest.raises(ValidationError) as excinfo:
        run_inputs(Inputs(target=TEAM))
    assert str(excinfo.value) == "Missing required option(s): --hierarchy, --changes, --data-dir"
