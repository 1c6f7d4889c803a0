"""MRG generation CLI commands.

Commands:
    mrgtool generate   -- Generate the MRG of one version, or of all versions
    mrgtool versions   -- List the versions declared in the SAF
"""

from __future__ import annotations

import json as json_lib
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mrgtool.glossary.exceptions import SafError, VersionNotFoundError
from mrgtool.glossary.generator import Generator
from mrgtool.glossary.models import PublishResult, ScopeConfig
from mrgtool.glossary.resolver import find_duplicate_tags
from mrgtool.saf import SAF_FILENAME, load_saf

logger = logging.getLogger(__name__)

console = Console(width=120)

EXIT_FAILED_VERSION = 1
EXIT_FATAL = 2


def _configure_logging(verbose: bool, json_output: bool = False) -> None:
    if verbose:
        level = logging.DEBUG
    elif json_output:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _load_config(saf: Path, scopedir: Optional[Path]) -> ScopeConfig:
    try:
        return load_saf(saf, localscopedir=scopedir)
    except SafError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(EXIT_FATAL)


def _render_results(config: ScopeConfig, results: List[PublishResult]) -> None:
    table = Table(title=f"MRGs for scope '{escape(config.scopetag)}'")
    table.add_column("Version", style="cyan")
    table.add_column("MRG file")
    table.add_column("Aliases")
    table.add_column("Status")

    for result in results:
        canonical = result.canonical.name if result.canonical else "-"
        aliases = ", ".join(alias.name for alias in result.aliases) or "-"
        status = "[green]ok[/green]" if result.success else "[red]failed[/red]"
        table.add_row(escape(result.vsntag), escape(canonical), escape(aliases), status)

    console.print(table)
    for result in results:
        for error in result.errors:
            console.print(f"[red]{escape(result.vsntag)}: {escape(error)}[/red]")


def generate(
    saf: Path = typer.Option(
        Path(SAF_FILENAME),
        "--saf",
        help="Scope Administration File of the scope to generate",
    ),
    scopedir: Optional[Path] = typer.Option(
        None,
        "--scopedir",
        help="Local root directory of the scope (defaults to the SAF's directory)",
    ),
    vsntag: Optional[str] = typer.Option(
        None,
        "--vsntag",
        help="Version to generate (vsntag or altvsntag); all versions when omitted",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON (machine-parseable)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging (default level is INFO)"),
) -> None:
    """Generate merged glossaries (MRGs) for a scope."""
    _configure_logging(verbose, json_output)
    config = _load_config(saf, scopedir)

    try:
        results = Generator(config).run(vsntag)
    except VersionNotFoundError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(EXIT_FATAL)

    if json_output:
        payload = {
            "scopetag": config.scopetag,
            "results": [result.to_dict() for result in results],
        }
        print(json_lib.dumps(payload, indent=2))
    else:
        _render_results(config, results)

    if not all(result.success for result in results):
        raise typer.Exit(EXIT_FAILED_VERSION)


def versions(
    saf: Path = typer.Option(
        Path(SAF_FILENAME),
        "--saf",
        help="Scope Administration File to read",
    ),
) -> None:
    """List the versions declared in a SAF."""
    config = _load_config(saf, None)

    table = Table(title=f"Versions of scope '{escape(config.scopetag)}'")
    table.add_column("vsntag", style="cyan")
    table.add_column("altvsntags")
    table.add_column("Default")
    table.add_column("Instructions", justify="right")

    for version in config.versions:
        table.add_row(
            escape(version.vsntag),
            escape(", ".join(version.altvsntags) or "-"),
            "yes" if version.vsntag == config.defaultvsn else "",
            str(len(version.termselcrit)),
        )
    console.print(table)

    for tag, owners in find_duplicate_tags(config).items():
        console.print(
            f"[yellow]Warning: tag '{escape(tag)}' is claimed by versions {escape(', '.join(owners))}; "
            f"'{escape(owners[0])}' wins[/yellow]"
        )
