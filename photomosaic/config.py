"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


def database_path(db_dir: str | Path, patch_size: int) -> Path:
    """Conventional database location for tiles of *patch_size* pixels."""
    return Path(db_dir) / f"db{patch_size}x{patch_size}.csv"


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for a mosaic run.

    Attributes:
        width:           Side of the square the source is scaled to.
        patch_size:      Side of each patch / tile in pixels.
        unique_box:      Side of the neighbourhood searched for repeats.
        db_dir:          Folder holding tiles and ``db<P>x<P>.csv`` files.
        database:        Explicit database file (overrides ``db_dir``).
        output_dir:      Folder for results.
        scaled_prefix:   File-name prefix of the saved scaled source.
        mosaic_prefix:   File-name prefix of the saved mosaic.
        output_format:   Image format for saved files.
        upscale:         Each output pixel becomes n x n when saved.
        save_scaled:     Persist the scaled source next to the mosaic.
        save_comparison: Generate a side-by-side comparison image.
    """

    # Geometry
    width: int = 512
    patch_size: int = 8
    unique_box: int = 21

    # Database
    db_dir: Path = field(default_factory=lambda: Path("db"))
    database: Path | None = None

    # Output
    output_dir: Path = field(default_factory=lambda: Path("."))
    scaled_prefix: str = "SCALED_ORIGINAL_"
    mosaic_prefix: str = "MOSAIC_OUTPUT_"
    output_format: str = "jpg"
    upscale: int = 1
    save_scaled: bool = True
    save_comparison: bool = False

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".jfif", ".gif"}
    )

    def __post_init__(self) -> None:
        for name in ("width", "patch_size", "upscale"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.width % self.patch_size:
            raise ValueError(
                f"width {self.width} is not a multiple of patch size {self.patch_size}",
            )
        if self.unique_box < 0:
            raise ValueError(f"unique_box must be >= 0, got {self.unique_box}")

    @property
    def database_path(self) -> Path:
        if self.database is not None:
            return Path(self.database)
        return database_path(self.db_dir, self.patch_size)

    def _output(self, prefix: str, source: str | Path) -> Path:
        stem = Path(source).stem
        return Path(self.output_dir) / f"{prefix}{stem}.{self.output_format}"

    def scaled_path(self, source: str | Path) -> Path:
        return self._output(self.scaled_prefix, source)

    def mosaic_path(self, source: str | Path) -> Path:
        return self._output(self.mosaic_prefix, source)

    def comparison_path(self, source: str | Path) -> Path:
        return self._output("COMPARISON_", source)
