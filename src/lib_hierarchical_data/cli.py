"""CLI adapter for ``lib_hierarchical_data`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose change resolution via a command line interface so operators can update
hierarchical data repositories without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_apply` – layers command line options over config files, calls
  :func:`lib_hierarchical_data.core.run_inputs`, and prints the outcome as JSON.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It invokes the composition root and never
reaches into adapter details directly. ``lib_cli_exit_tools`` centralises the
exit code strategy so all commands behave consistently across shells and CI.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .core import run_inputs
from .settings import Inputs, load_inputs

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_DISTRIBUTION: Final[str] = "lib_hierarchical_data"


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` when unavailable."""

    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Apply end-state changes to hierarchical data while keeping each source minimal",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name=_DISTRIBUTION,
    message="lib_hierarchical_data version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        click.echo(f"{_DISTRIBUTION} (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', _DISTRIBUTION)}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")
    for entry in meta.get_all("Project-URL") or []:
        click.echo(f"  {entry}")


@cli.command("apply", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--hierarchy",
    default=None,
    help="Path to a YAML file describing the source hierarchy (or the YAML itself)",
)
@click.option(
    "-c",
    "--changes",
    default=None,
    help="Path to a YAML file of desired end-state changes (or the YAML itself)",
)
@click.option(
    "-t",
    "--target",
    default=None,
    help="Source from which to change data, including everything beneath it",
)
@click.option(
    "-d",
    "--data-dir",
    default=None,
    help="Directory holding the existing data sources named in the hierarchy",
)
@click.option(
    "-o",
    "--output-dir",
    default=None,
    help="Directory receiving the resulting sources (defaults to the data directory)",
)
@click.option(
    "-m",
    "--merge-keys",
    default=None,
    help="Comma-delimited keys whose inherited values merge across all ancestors",
)
@click.option(
    "--config",
    "configs",
    multiple=True,
    type=click.Path(path_type=Path, dir_okay=False),
    help="Config file supplying defaults for these options (repeatable, earlier wins)",
)
@click.option(
    "--dry-run/--no-dry-run",
    default=False,
    help="Print the resolved sources as JSON instead of writing them",
    show_default=True,
)
@click.option(
    "--indent",
    type=int,
    default=2,
    show_default=True,
    help="Indent size for JSON output",
)
def cli_apply(
    hierarchy: Optional[str],
    changes: Optional[str],
    target: Optional[str],
    data_dir: Optional[str],
    output_dir: Optional[str],
    merge_keys: Optional[str],
    configs: Sequence[Path],
    dry_run: bool,
    indent: int,
) -> None:
    """Apply changes to TARGET and its descendants, pruning inherited values.

    Options not given on the command line fall back to ``--config`` files and
    then to the default config file. Prints a JSON array of written files, or
    with ``--dry-run`` a JSON object of the resolved sources.
    """

    given = Inputs(
        hierarchy=hierarchy,
        changes=changes,
        target=target,
        data_dir=data_dir,
        output_dir=output_dir,
        merge_keys=merge_keys,
    )
    inputs = given.falling_back_to(load_inputs(configs))
    outcome = run_inputs(inputs, dry_run=dry_run)
    if dry_run:
        click.echo(json.dumps(outcome.sources, indent=indent, ensure_ascii=False))
        return
    click.echo(json.dumps([str(path) for path in outcome.written], indent=indent))


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=_DISTRIBUTION,
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
