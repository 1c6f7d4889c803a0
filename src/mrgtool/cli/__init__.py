"""Command line interface for mrgtool."""

import typer

from .commands import generate, versions

app = typer.Typer(
    name="mrgtool",
    help="Generate merged glossaries (MRGs) for terminology scopes",
    add_completion=False,
    no_args_is_help=True,
)

app.command("generate")(generate)
app.command("versions")(versions)

__all__ = ["app"]
