"""`rawcols validate` command.

Validates a raw column document on disk:
- decodes YAML/JSON via rawcols.io.read_raw_columns()
- dispatches every record and checks collection invariants
- prints `OK (<n> raw columns)`; on the first failure prints it to stderr and
  exits with code 1
"""

from __future__ import annotations

from pathlib import Path

import typer

from rawcols.core.errors import RawColumnError
from rawcols.io.document import read_raw_columns


def register(app: typer.Typer) -> None:
    @app.command("validate")
    def validate(
        path: Path = typer.Option(
            ..., "--path", exists=True, dir_okay=False, readable=True, help="Raw column document (.yaml/.yml/.json)."
        ),
    ) -> None:
        """Validate a raw column document."""
        try:
            columns = read_raw_columns(path)
        except RawColumnError as e:
            typer.echo(f"ERROR: {e}", err=True)
            raise typer.Exit(code=1) from e

        typer.echo(f"OK ({len(columns)} raw columns)")
