"""Tracevault CLI: version control and baselines for engineering artifacts."""

import typer
from rich.console import Console

from tracevault import __version__

from . import output
from .commands import baseline_app, commit, export_history, history, init, snapshot_app
from .logging import configure_logging
from .output import OutputContext


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"tracevault {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="tracevault",
    help="Commit-backed revision history and baselines for engineering artifacts",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """Tracevault CLI - artifact version control and baselines."""
    configure_logging(verbosity=verbose, quiet=quiet, no_color=no_color)
    # Logs go to stderr; command output goes to stdout
    console = Console(no_color=no_color, highlight=False)
    output.set_output_context(OutputContext(console=console, json_mode=json_output))


app.command()(init)
app.command()(commit)
app.command()(history)
app.command("export-history")(export_history)
app.add_typer(baseline_app, name="baseline")
app.add_typer(snapshot_app, name="snapshot")


if __name__ == "__main__":
    app()
