from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Optional

import numpy as np
import typer

from .config import load_settings
from .errors import IngestError
from .ingest import ingest_path
from .insight import acquire_insight, make_client, render_insight_markdown
from .particles import ParticleFieldAnimation, RasterSurface
from .stats import numeric_columns, preview, summarize

app = typer.Typer(add_completion=False, help="NeuralCanvas: explore a CSV/JSON file and ask for AI insights")


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at INFO level"),
) -> None:
    settings = load_settings()
    level = logging.INFO if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _load(path: Path):
    settings = load_settings()
    try:
        return ingest_path(path, max_bytes=settings.max_upload_bytes)
    except (IngestError, FileNotFoundError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def inspect(
    data: Path = typer.Argument(..., help="Path to a .csv or .json file"),
    rows: int = typer.Option(10, "--rows", min=0, help="Preview row count"),
    strict: bool = typer.Option(False, "--strict", help="Classify numeric columns by scanning every row"),
    as_json: bool = typer.Option(False, "--json", help="Emit stats and preview as JSON"),
):
    """
    Ingest a file and print its summary statistics and a preview.
    """
    table = _load(data)
    stats = summarize(table, strict=strict)
    head = preview(table, rows)

    if as_json:
        typer.echo(
            json.dumps(
                {
                    "headers": list(table.headers),
                    "stats": stats.as_dict(),
                    "numeric_columns": numeric_columns(table, strict=strict),
                    "preview": head,
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    typer.echo(f"Total records: {stats.total_rows}")
    typer.echo(f"Columns: {stats.total_cols}")
    typer.echo(f"Numeric fields: {stats.numeric_cols}")
    typer.echo(f"Categorical: {stats.categorical_cols}")
    typer.echo("")
    typer.echo("\t".join(table.headers))
    for r in head:
        typer.echo("\t".join(r[h] for h in table.headers))
    if stats.total_rows > rows:
        typer.echo(f"Showing {rows} of {stats.total_rows} rows")


@app.command()
def analyze(
    data: Path = typer.Argument(..., help="Path to a .csv or .json file"),
    as_json: bool = typer.Option(False, "--json", help="Emit the insight as JSON"),
):
    """
    Ingest a file and request an AI insight summary.

    Falls back to a deterministic local summary whenever the insight service
    is unreachable or answers with something other than the expected JSON.
    """
    table = _load(data)
    insight = acquire_insight(table, client=make_client(load_settings()))
    if as_json:
        typer.echo(json.dumps(insight.to_payload(), indent=2, ensure_ascii=False))
    else:
        typer.echo(render_insight_markdown(insight).rstrip())


@app.command()
def particles(
    out: Path = typer.Option(Path("particles.png"), "--out", help="Where to write the last frame (PNG)"),
    width: int = typer.Option(800, "--width", min=1),
    height: int = typer.Option(600, "--height", min=1),
    frames: int = typer.Option(120, "--frames", min=1, help="Frames to simulate (ignored with --seconds)"),
    seconds: Optional[float] = typer.Option(None, "--seconds", help="Run on a real-time 60fps ticker instead"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible particles"),
):
    """
    Render the decorative particle field to a PNG.
    """
    surface = RasterSurface(width, height)
    anim = ParticleFieldAnimation(width, height, surface, rng=np.random.default_rng(seed))
    if seconds is not None:
        with anim:
            time.sleep(seconds)
    else:
        anim.start(threaded=False)
        try:
            for _ in range(frames):
                anim.advance()
        finally:
            anim.stop()

    surface.save(out)
    typer.echo(f"Rendered {anim.frames} frame(s) to {out}")
