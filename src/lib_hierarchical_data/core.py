"""Composition root for ``lib_hierarchical_data``.

Purpose
-------
Provide the single entry point that reads the hierarchy and changes, loads the
current per-source data, runs the resolver, and writes the target's subtree
back out, emitting structured observability signals along the way.

Contents
--------
* :class:`ApplyResult` – resolved subtree data plus the written paths.
* :func:`apply_changes` – high-level API wiring adapters around the resolver.
* :func:`run_inputs` – validates an :class:`Inputs` bundle and delegates.

System Role
-----------
This module connects adapters (inputs, source store) with the pure resolver in
:mod:`lib_hierarchical_data.application.resolve`. It is the canonical location
for adjusting which sources are loaded or written.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from uuid import uuid4

from .adapters.inputs import parse_merge_keys, read_changes, read_hierarchy
from .adapters.source_store import SourceDirectory
from .application.resolve import generate_sources
from .domain.errors import TargetNotFound, ValidationError
from .observability import bind_trace_id, log_error, log_info
from .settings import Inputs

REQUIRED_INPUTS: tuple[str, ...] = ("hierarchy", "changes", "target", "data_dir")


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of :func:`apply_changes`.

    Attributes
    ----------
    sources:
        Resolved data for the target and its descendants, in traversal order.
    written:
        Files written (empty for dry runs).
    """

    sources: dict[str, dict[str, Any]]
    written: list[Path] = field(default_factory=list)


def apply_changes(
    *,
    hierarchy: str,
    changes: str,
    target: str,
    data_dir: str | Path,
    output_dir: str | Path | None = None,
    merge_keys: str | Iterable[str] | None = None,
    dry_run: bool = False,
) -> ApplyResult:
    """Resolve *changes* for *target* and write the affected sources.

    Why
    ----
    Operators describe the end state they want; this function turns it into
    minimal per-source files without touching anything above *target*.

    Parameters
    ----------
    hierarchy / changes:
        File paths (absolute, relative to the working directory, or relative
        to *data_dir*) or inline YAML.
    target:
        Source from which changes may be written, inclusive.
    data_dir:
        Directory holding the existing source files.
    output_dir:
        Directory receiving results; defaults to *data_dir* (in-place update).
    merge_keys:
        Comma-delimited string or iterable of merge keys.
    dry_run:
        Resolve without writing any file.

    Returns
    -------
    ApplyResult
        Resolved subtree data and the written paths.

    Side Effects
    ------------
    Writes one file per source in the target subtree unless *dry_run*; binds a
    fresh trace identifier and emits structured log events.
    """

    bind_trace_id(uuid4().hex)
    tree = read_hierarchy(hierarchy, base_dir=data_dir)
    change_list = read_changes(changes, base_dir=data_dir)
    keys = parse_merge_keys(merge_keys)

    subtree = tree.descendants_of(target)
    if subtree is None:
        log_error("target_missing", source=target, path=None)
        raise TargetNotFound(target, tree)

    store = SourceDirectory(data_dir)
    current = store.load(tree.sources())
    resolved = generate_sources(tree, change_list, target, current, keys)
    log_info("sources_resolved", source=target, path=str(data_dir), sources=len(subtree), changes=len(change_list))

    result_sources = {source: resolved[source] for source in subtree}
    if dry_run:
        return ApplyResult(result_sources)

    destination = Path(output_dir) if output_dir is not None else Path(data_dir)
    written = store.write(resolved, subtree, destination)
    log_info("apply_complete", source=target, path=str(destination), written=len(written))
    return ApplyResult(result_sources, written)


def run_inputs(inputs: Inputs, *, dry_run: bool = False) -> ApplyResult:
    """Validate *inputs* and delegate to :func:`apply_changes`.

    Raises
    ------
    ValidationError
        When any of :data:`REQUIRED_INPUTS` is unset.
    """

    missing = inputs.missing(*REQUIRED_INPUTS)
    if missing:
        options = ", ".join("--" + name.replace("_", "-") for name in missing)
        raise ValidationError(f"Missing required option(s): {options}")
    return apply_changes(
        hierarchy=inputs.hierarchy,  # type: ignore[arg-type]
        changes=inputs.changes,  # type: ignore[arg-type]
        target=inputs.target,  # type: ignore[arg-type]
        data_dir=inputs.data_dir,  # type: ignore[arg-type]
        output_dir=inputs.output_dir,
        merge_keys=inputs.merge_keys,
        dry_run=dry_run,
    )


__all__ = ["ApplyResult", "apply_changes", "run_inputs", "REQUIRED_INPUTS"]
