"""rawcols CLI entrypoint."""

from __future__ import annotations

import typer

from rawcols.cli.logging_utils import configure_cli_logging

app = typer.Typer(
    name="rawcols",
    add_completion=False,
    no_args_is_help=True,
    help="Validate and describe raw column declaration documents.",
)


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """rawcols CLI."""
    configure_cli_logging(verbose=verbose)


@app.command("version")
def version() -> None:
    """Print the installed rawcols version."""
    from rawcols import __version__

    typer.echo(__version__)


def _register_commands() -> None:
    """Register CLI subcommands.

    Importing these modules must remain lightweight so `rawcols --help` is fast.
    """
    from rawcols.cli.commands import describe as describe_cmd
    from rawcols.cli.commands import validate_doc as validate_doc_cmd

    validate_doc_cmd.register(app)
    describe_cmd.register(app)


_register_commands()
