"""Structured file loaders.

Purpose
-------
Convert on-disk artifacts into Python mappings. Adapters are small wrappers
around ``yaml.safe_load``/``json``/``tomllib`` so error handling and
observability live in one place.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`YAMLFileLoader` – loader for the canonical YAML format, including
  multi-document streams.
* :class:`JSONFileLoader` – minimal JSON loader.
* :class:`TOMLFileLoader` – loader for TOML config files.
* :func:`loader_for` – pick a loader by file suffix.

System Role
-----------
Used by :class:`lib_hierarchical_data.adapters.source_store.SourceDirectory` to
read per-source data files and by :mod:`lib_hierarchical_data.settings` to read
config files.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

import yaml

from ...domain.errors import InvalidFormat, NotFound
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    format_name = "file"

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing.

        Side Effects
        ------------
        Emits ``file_read`` debug events.
        """

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"File not found: {path}")
        payload = file_path.read_bytes()
        log_debug("file_read", path=path, size=len(payload))
        return payload

    @staticmethod
    def _ensure_mapping(data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* behaves like a mapping, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"key": 1}, path="demo")
        {'key': 1}
        >>> BaseFileLoader._ensure_mapping(42, path="demo")
        Traceback (most recent call last):
        ...
        lib_hierarchical_data.domain.errors.InvalidFormat: File demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        return data

    def _invalid(self, path: str, exc: Exception) -> InvalidFormat:
        log_error("file_invalid", path=path, format=self.format_name, error=str(exc))
        return InvalidFormat(f"Invalid {self.format_name.upper()} in {path}: {exc}")

    def _loaded(self, data: Mapping[str, object], path: str) -> Mapping[str, object]:
        log_debug("file_loaded", path=path, format=self.format_name, keys=len(data))
        return data


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents; an empty document is an empty mapping."""

    format_name = "yaml"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the YAML file at *path*."""

        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            raise self._invalid(path, exc) from exc
        if data is None:
            data = {}
        return self._loaded(self._ensure_mapping(data, path=path), path)

    def load_documents(self, path: str) -> list[Any]:
        """Return every document of a ``---`` separated YAML stream at *path*."""

        return parse_yaml_documents(self._read(path).decode("utf-8"), origin=path)


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    format_name = "json"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the JSON file at *path*."""

        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded(self._ensure_mapping(data, path=path), path)


class TOMLFileLoader(BaseFileLoader):
    """Load TOML documents using the standard library parser."""

    format_name = "toml"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the TOML file at *path*."""

        try:
            data = tomllib.loads(self._read(path).decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded(self._ensure_mapping(data, path=path), path)


_LOADERS: dict[str, BaseFileLoader] = {
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
    ".json": JSONFileLoader(),
    ".toml": TOMLFileLoader(),
}


def loader_for(path: str | Path, *, allowed: tuple[str, ...] | None = None) -> BaseFileLoader:
    """Return the loader registered for the suffix of *path*.

    Raises
    ------
    InvalidFormat
        When the suffix is unknown or not in *allowed*.

    Examples
    --------
    >>> type(loader_for("teams/dev.yml")).__name__
    'YAMLFileLoader'
    """

    suffix = Path(path).suffix.lower()
    if suffix not in _LOADERS or (allowed is not None and suffix not in allowed):
        supported = ", ".join(allowed if allowed is not None else _LOADERS)
        raise InvalidFormat(f"Unsupported file type for {path}; expected one of: {supported}")
    return _LOADERS[suffix]


def parse_yaml_documents(text: str, *, origin: str = "<inline>") -> list[Any]:
    """Parse every document of a YAML stream, raising ``InvalidFormat`` on errors."""

    try:
        return list(yaml.safe_load_all(text))
    except yaml.YAMLError as exc:
        log_error("file_invalid", path=origin, format="yaml", error=str(exc))
        raise InvalidFormat(f"Invalid YAML in {origin}: {exc}") from exc
