"""
Sample database generator for the transcript desk.

Writes a deterministic SQLite file containing the `podcasts` table so the CLI
and the integration tests have something realistic to load.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path

import typer

from transcript_desk.sample import build_sample_bytes

app = typer.Typer(help="Generate a sample podcasts SQLite database.")


def _write_database(path: Path, rows: int, seed: int, table: str) -> int:
    data = build_sample_bytes(rows=rows, seed=seed, table=table)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return len(data)


@app.command()
def main(
    rows: int = typer.Option(
        120,
        "--rows",
        "-r",
        help="Number of podcast records to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    table: str = typer.Option(
        "podcasts",
        "--table",
        help="Name of the table to create.",
    ),
    output: Path = typer.Option(
        Path("flask_app.db"),
        "--output",
        "-o",
        help="Database file to write (overwritten if present).",
    ),
) -> None:
    """
    Generate sample podcast records and write them to a SQLite file.
    """
    start = time.perf_counter()
    typer.echo(f"Generating {rows:,} rows -> {output} (table={table}, seed={seed})")
    size = _write_database(output, rows=rows, seed=seed, table=table)
    duration = time.perf_counter() - start
    typer.echo(f"Wrote {size:,} bytes in {duration:.2f}s")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
