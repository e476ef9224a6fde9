"""Readers for the hierarchy, change records, and merge-key options.

Purpose
-------
Turn the raw values operators supply (file paths, inline YAML, comma-delimited
strings) into domain objects. Hierarchy and changes options accept either a
path to a YAML/JSON file or the YAML text itself, so short trees can be given
inline on the command line.

Contents
--------
* :func:`read_hierarchy` – build a :class:`Hierarchy`.
* :func:`read_changes` – build the list of :class:`Change` records.
* :func:`parse_merge_keys` – normalise merge keys into a ``frozenset``.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..domain.change import Change
from ..domain.errors import InvalidFormat, NotFound
from ..domain.hierarchy import Hierarchy
from ..observability import log_debug
from .file_loaders.structured import parse_yaml_documents

_FILE_SUFFIXES = (".yaml", ".yml", ".json")


def read_hierarchy(path_or_yaml: str, *, base_dir: str | Path | None = None) -> Hierarchy:
    """Return the hierarchy described by a file or inline YAML.

    A relative path is looked up in the working directory first and then in
    *base_dir* (typically the data directory).

    Examples
    --------
    >>> read_hierarchy("global.yaml: [dev.yaml, prod.yaml]").descendants_of("global.yaml")
    ['global.yaml', 'dev.yaml', 'prod.yaml']
    """

    documents, origin = _documents(path_or_yaml, base_dir)
    if len(documents) > 1:
        raise InvalidFormat(f"Hierarchy in {origin} must be a single YAML document, found {len(documents)}")
    hierarchy = Hierarchy.from_data(documents[0] if documents else None)
    log_debug("hierarchy_loaded", path=origin, sources=len(hierarchy))
    return hierarchy


def read_changes(path_or_yaml: str, *, base_dir: str | Path | None = None) -> list[Change]:
    """Return the change records described by a file or inline YAML.

    Each YAML document is either one change record or a list of records; empty
    documents (for example a trailing ``---``) are skipped.

    Examples
    --------
    >>> changes = read_changes("source: team.yaml\\nset: {color: blue}")
    >>> [(change.source, dict(change.set)) for change in changes]
    [('team.yaml', {'color': 'blue'})]
    """

    documents, origin = _documents(path_or_yaml, base_dir)
    changes: list[Change] = []
    for document in documents:
        if document is None:
            continue
        records = document if isinstance(document, list) else [document]
        changes.extend(Change.from_mapping(record) for record in records)
    log_debug("changes_loaded", path=origin, changes=len(changes))
    return changes


def parse_merge_keys(value: str | Iterable[str] | None) -> frozenset[str]:
    """Normalise merge keys from a comma-delimited string or an iterable.

    Examples
    --------
    >>> sorted(parse_merge_keys(" classes, tags,,"))
    ['classes', 'tags']
    >>> parse_merge_keys(None)
    frozenset()
    """

    if value is None:
        return frozenset()
    items = value.split(",") if isinstance(value, str) else list(value)
    keys = set()
    for item in items:
        if not isinstance(item, str):
            raise InvalidFormat(f"Merge keys must be strings, got {item!r}")
        if item.strip():
            keys.add(item.strip())
    return frozenset(keys)


def _documents(path_or_yaml: str, base_dir: str | Path | None) -> tuple[list[Any], str]:
    path = _existing_file(path_or_yaml, base_dir)
    if path is not None:
        return parse_yaml_documents(path.read_text(encoding="utf-8"), origin=str(path)), str(path)
    if _looks_like_path(path_or_yaml):
        raise NotFound(f"File not found: {path_or_yaml}")
    return parse_yaml_documents(path_or_yaml), "<inline>"


def _existing_file(value: str, base_dir: str | Path | None) -> Path | None:
    if "\n" in value:
        return None
    candidates = [Path(value).expanduser()]
    if base_dir is not None and not candidates[0].is_absolute():
        candidates.append(Path(base_dir) / value)
    for candidate in candidates:
        try:
            if candidate.is_file():
                return candidate
        except OSError:
            # Inline YAML can exceed filesystem name limits.
            return None
    return None


def _looks_like_path(value: str) -> bool:
    stripped = value.strip()
    return "\n" not in stripped and ":" not in stripped and stripped.lower().endswith(_FILE_SUFFIXES)
