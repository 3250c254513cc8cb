"""`rawcols describe` command.

Prints (or writes as CSV) the canonical summary table of a validated document.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from rawcols.core.errors import RawColumnError
from rawcols.core.tables import raw_columns_to_frame, write_summary_csv
from rawcols.io.document import read_raw_columns


def register(app: typer.Typer) -> None:
    @app.command("describe")
    def describe(
        path: Path = typer.Option(
            ..., "--path", exists=True, dir_okay=False, readable=True, help="Raw column document (.yaml/.yml/.json)."
        ),
        csv: Optional[str] = typer.Option(None, "--csv", help="Write the summary table to this CSV path."),
    ) -> None:
        """Describe the columns declared in a raw column document."""
        try:
            columns = read_raw_columns(path)
        except RawColumnError as e:
            typer.echo(f"ERROR: {e}", err=True)
            raise typer.Exit(code=1) from e

        if csv:
            out_path = Path(csv)
            write_summary_csv(columns, out_path)
            typer.echo(str(out_path))
            return

        typer.echo(raw_columns_to_frame(columns).to_string(index=False))
