from __future__ import annotations

from pathlib import Path

import pytest

from lib_hierarchical_data.domain.hierarchy import Hierarchy

TEAM_TREE = {"global": {"team": ["dev", "prod"]}}


@pytest.fixture()
def team_tree() -> Hierarchy:
    """``global → team → {dev, prod}`` used by most resolver scenarios."""

    return Hierarchy.from_data(TEAM_TREE)


@pytest.fixture(autouse=True)
def _isolated_default_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the default config file at an empty location so the user's home never leaks in."""

    path = tmp_path_factory.mktemp("default-config") / "config.yaml"
    monkeypatch.setenv("LIB_HIERARCHICAL_DATA_CONFIG", str(path))
    return path

