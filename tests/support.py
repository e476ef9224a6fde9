"""Shared helpers for building on-disk data repositories in tests."""

from __future__ import annotations

from pathlib import Path


def write(path: Path, content: str) -> Path:
    """Write *content* to *path*, creating parent directories."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def data_repository(root: Path) -> Path:
    """Create ``global → teams/myteam → {dev, prod}`` sources under *root*."""

    write(root / "hierarchy.yaml", "global.yaml:\n  teams/myteam.yaml:\n    - teams/myteam/dev.yaml\n    - teams/myteam/prod.yaml\n")
    write(root / "global.yaml", "color: red\n")
    write(root / "teams" / "myteam.yaml", "tags:\n  - a\n")
    write(root / "teams" / "myteam" / "dev.yaml", "color: blue\ntags:\n  - a\n  - b\n")
    return root
