"""Filesystem-backed store of per-source data.

Purpose
-------
Read the current data of every source from files below a data directory and
write resolved data back out. Source identifiers are paths relative to the
directory (``teams/myteam/dev.yaml``), so the suffix of each source selects its
format.

Contents
--------
* :class:`SourceDirectory` – implements the ``SourceStore`` port.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from ..domain.errors import InvalidFormat, NotFound
from ..domain.values import deepcopy_mapping
from ..observability import log_debug, log_info, make_event
from .file_loaders.structured import loader_for

_DATA_SUFFIXES = (".yaml", ".yml", ".json")


class SourceDirectory:
    """Load and persist source data files relative to a root directory.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> store = SourceDirectory(tmp.name)
    >>> written = store.write({"team.yaml": {"color": "blue"}}, ["team.yaml"], tmp.name)
    >>> store.load(["team.yaml", "missing.yaml"])
    {'team.yaml': {'color': 'blue'}, 'missing.yaml': {}}
    >>> tmp.cleanup()
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def load(self, sources: Iterable[str]) -> dict[str, dict[str, Any]]:
        """Return the stored data of each source; missing files yield ``{}``."""

        data: dict[str, dict[str, Any]] = {}
        for source in sources:
            path = self.root / source
            loader = loader_for(path, allowed=_DATA_SUFFIXES)
            try:
                values = loader.load(str(path))
            except NotFound:
                log_debug("source_missing", **make_event(source, str(path)))
                values = {}
            data[source] = deepcopy_mapping(values)
        return data

    def write(
        self,
        data: Mapping[str, Mapping[str, Any]],
        sources: Iterable[str],
        output_dir: str | Path,
    ) -> list[Path]:
        """Write the listed *sources* of *data* below *output_dir*.

        Parent directories are created as needed. Returns the written paths in
        the order of *sources*.
        """

        written: list[Path] = []
        for source in sources:
            path = Path(output_dir) / source
            payload = _dump(path, data.get(source) or {})
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
            log_info("source_written", **make_event(source, str(path), {"keys": len(data.get(source) or {})}))
            written.append(path)
        return written


def _dump(path: Path, values: Mapping[str, Any]) -> str:
    """Serialise *values* in the format implied by the suffix of *path*."""

    suffix = path.suffix.lower()
    plain = deepcopy_mapping(values)
    if suffix in (".yaml", ".yml"):
        if not plain:
            return ""
        return yaml.safe_dump(plain, default_flow_style=False, sort_keys=False, allow_unicode=True)
    if suffix == ".json":
        return json.dumps(plain, indent=2, ensure_ascii=False) + "\n"
    raise InvalidFormat(f"Unsupported file type for {path}; expected one of: {', '.join(_DATA_SUFFIXES)}")
