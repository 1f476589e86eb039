"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TimeElapsedColumn

from photomosaic.composer import MosaicComposer
from photomosaic.config import MosaicConfig, database_path
from photomosaic.database import build_database, load_database
from photomosaic.errors import MosaicError
from photomosaic.image_io import load_source, make_comparison_grid, save_image

app = typer.Typer(
    name="photomosaic",
    help="Rebuild photographs out of a database of small tile images.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, markup=True)],
        force=True,
    )


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[bold red]Error:[/bold red] {message}")
    return typer.Exit(1)


def _quality_metric(target: np.ndarray, mosaic: np.ndarray) -> float:
    t = target.reshape(-1, 3).astype(np.float64)
    m = mosaic.reshape(-1, 3).astype(np.float64)
    return float(np.mean(np.sqrt(np.sum((t - m) ** 2, axis=1))))


# Defaults come from MosaicConfig - single source of truth
_DEFAULTS = MosaicConfig()


# -- mosaic command ----------------------------------------------------

@app.command()
def mosaic(
    image: Path = typer.Argument(..., help="Path to the source image"),
    width: int = typer.Option(
        _DEFAULTS.width, "--width", "-w", help="Side of the square the source is scaled to",
    ),
    patch_size: int = typer.Option(
        _DEFAULTS.patch_size, "--patch", "-p", help="Patch / tile side in pixels",
    ),
    unique_box: int = typer.Option(
        _DEFAULTS.unique_box, "--unique-box", "-u",
        help="Neighbourhood (in patches) searched for repeated tiles",
    ),
    db_dir: Path = typer.Option(
        _DEFAULTS.db_dir, "--db-dir", help="Folder holding db<P>x<P>.csv",
    ),
    database: Path | None = typer.Option(
        None, "--database", help="Explicit database CSV (overrides --db-dir)",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    upscale: int = typer.Option(
        _DEFAULTS.upscale, "--upscale", help="Pixel upscale factor for saved files",
    ),
    save_scaled: bool = typer.Option(
        _DEFAULTS.save_scaled, "--scaled/--no-scaled", help="Save the scaled source",
    ),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
        help="Save a side-by-side comparison",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Turn IMAGE into a photomosaic."""
    _setup_logging(verbose)
    logger = logging.getLogger("photomosaic")

    try:
        cfg = MosaicConfig(
            width=width,
            patch_size=patch_size,
            unique_box=unique_box,
            db_dir=db_dir,
            database=database,
            output_dir=output_dir,
            upscale=upscale,
            save_scaled=save_scaled,
            save_comparison=comparison,
        )
    except ValueError as exc:
        raise _fail(str(exc)) from exc

    t_total = time.perf_counter()
    try:
        tiles = load_database(cfg.database_path)
        source = load_source(image, cfg.width)
    except MosaicError as exc:
        raise _fail(str(exc)) from exc

    console.print(Panel.fit(
        f"[bold]PHOTOMOSAIC[/bold]\n"
        f"Source: {image.name}  |  Size: {cfg.width}x{cfg.width}\n"
        f"Patch: {cfg.patch_size}  |  Unique box: {cfg.unique_box}\n"
        f"Tiles: {len(tiles)}  |  Database: {cfg.database_path}",
        border_style="cyan",
    ))

    if cfg.save_scaled:
        save_image(source, cfg.scaled_path(image), cfg.upscale)
        logger.info("Scaled source saved: %s", cfg.scaled_path(image))

    composer = MosaicComposer(tiles, cfg.patch_size, cfg.unique_box)
    n_patches = (cfg.width // cfg.patch_size) ** 2
    try:
        with Progress(
            "[progress.description]{task.description}",
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Matching patches", total=n_patches)
            result = composer.compose(
                source, on_patch=lambda x, y, tid: progress.advance(task),
            )
    except MosaicError as exc:
        raise _fail(str(exc)) from exc

    mosaic_path = cfg.mosaic_path(image)
    save_image(result, mosaic_path, cfg.upscale)

    if cfg.save_comparison:
        make_comparison_grid(source, result, cfg.comparison_path(image))

    grid = composer.grid
    distinct = len({tid for row in grid.to_list() for tid in row})
    err = _quality_metric(source, result)
    elapsed = time.perf_counter() - t_total
    console.print(
        f"[green]✓[/green] {mosaic_path}  "
        f"[dim]{grid.cols}x{grid.rows} patches  {distinct} distinct tiles  "
        f"error={err:.1f}  time={elapsed:.1f}s[/dim]"
    )


# -- build-db command --------------------------------------------------

@app.command("build-db")
def build_db(
    source: Path = typer.Argument(..., help="Image file or folder of images"),
    width: int = typer.Option(
        _DEFAULTS.patch_size, "--width", "-w", help="Tile side in pixels",
    ),
    db_dir: Path = typer.Option(
        _DEFAULTS.db_dir, "--db-dir", help="Folder for tiles and the CSV",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Scale the images in SOURCE into tiles and record their signatures."""
    _setup_logging(verbose)
    if width <= 0:
        raise _fail(f"width must be positive, got {width}")

    try:
        added = build_database(source, db_dir, width)
    except FileNotFoundError as exc:
        raise _fail(str(exc)) from exc

    console.print(
        f"[green]✓[/green] {len(added)} tiles added to "
        f"[bold]{database_path(db_dir, width)}[/bold]"
    )


if __name__ == "__main__":
    app()
