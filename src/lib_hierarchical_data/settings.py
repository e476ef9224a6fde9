"""Layered settings for the command line.

Purpose
-------
Every command line option may also be supplied by config files, so operators
can keep the hierarchy, data directory, and merge keys of a repository in one
place and only pass the changes and target per run.

Contents
--------
* :class:`Inputs` – immutable option bundle with fallback composition.
* :func:`default_config_path` – location of the always-consulted config file.
* :func:`load_inputs` – read config files into one :class:`Inputs`.

Precedence
----------
Command line values win over config files given with ``--config`` (earlier
files win over later ones), which win over the default config file.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Final

import yaml

from .adapters.file_loaders.structured import loader_for
from .domain.errors import InvalidFormat, NotFound
from .observability import log_debug

CONFIG_ENV_VAR: Final[str] = "LIB_HIERARCHICAL_DATA_CONFIG"
DEFAULT_CONFIG_PATH: Final[Path] = Path("~") / ".lib_hierarchical_data" / "config.yaml"


@dataclass(frozen=True, slots=True)
class Inputs:
    """Options needed to apply changes; ``None`` means "not configured here".

    Examples
    --------
    >>> cli = Inputs(target="teams/dev.yaml")
    >>> config = Inputs(target="global.yaml", data_dir="/srv/hieradata")
    >>> merged = cli.falling_back_to(config)
    >>> merged.target, merged.data_dir
    ('teams/dev.yaml', '/srv/hieradata')
    """

    hierarchy: str | None = None
    changes: str | None = None
    target: str | None = None
    data_dir: str | None = None
    output_dir: str | None = None
    merge_keys: str | tuple[str, ...] | None = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], *, origin: str = "<mapping>") -> Inputs:
        """Build inputs from a config mapping using snake_case or kebab-case keys."""

        known = {field.name for field in fields(cls)}
        values: dict[str, Any] = {}
        for raw_key, value in mapping.items():
            key = str(raw_key).replace("-", "_")
            if key not in known:
                raise InvalidFormat(f"Unknown option {raw_key!r} in {origin}; expected one of: {', '.join(sorted(known))}")
            values[key] = _normalise(key, value, origin)
        return cls(**values)

    def falling_back_to(self, other: Inputs) -> Inputs:
        """Return a copy whose unset fields are taken from *other*."""

        missing = {field.name: getattr(other, field.name) for field in fields(self) if getattr(self, field.name) is None}
        return replace(self, **missing)

    def overridden_with(self, other: Inputs) -> Inputs:
        """Return a copy whose fields are replaced by the ones *other* sets."""

        return other.falling_back_to(self)

    def missing(self, *names: str) -> list[str]:
        """Return the subset of *names* that are not set."""

        return [name for name in names if getattr(self, name) is None]


def default_config_path() -> Path:
    """Return the default config file, honouring ``LIB_HIERARCHICAL_DATA_CONFIG``."""

    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override).expanduser() if override else DEFAULT_CONFIG_PATH.expanduser()


def load_inputs(paths: Iterable[str | Path] = (), *, include_default: bool = True) -> Inputs:
    """Read config files into one :class:`Inputs`, earlier paths winning.

    Raises
    ------
    NotFound
        When an explicitly listed config file does not exist. A missing default
        config file is ignored.
    InvalidFormat
        When a config file cannot be parsed or holds unknown options.
    """

    inputs = Inputs()
    for path in paths:
        inputs = inputs.falling_back_to(_load_file(Path(path)))
    if include_default:
        default = default_config_path()
        try:
            inputs = inputs.falling_back_to(_load_file(default))
        except NotFound:
            log_debug("config_default_missing", path=str(default))
    return inputs


def _load_file(path: Path) -> Inputs:
    data = loader_for(path).load(str(path))
    log_debug("config_file_loaded", path=str(path), keys=len(data))
    return Inputs.from_mapping(data, origin=str(path))


def _normalise(key: str, value: Any, origin: str) -> Any:
    if value is None:
        return None
    if key in ("hierarchy", "changes") and isinstance(value, (Mapping, list)):
        return yaml.safe_dump(value, sort_keys=False)
    if key == "merge_keys":
        if isinstance(value, str):
            return value
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return tuple(value)
        raise InvalidFormat(f"'merge_keys' in {origin} must be a string or a list of strings")
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise InvalidFormat(f"Option {key!r} in {origin} must be a string")
    return str(value)
