"""Tile database: CSV persistence of precomputed tile signatures.

Each record is ``path,c0,c1,c2,c3`` where ``c0..c3`` are the packed RGB
integers of the tile's quadrant means in signature order.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path

import numpy as np
from PIL import Image

from photomosaic.config import MosaicConfig, database_path
from photomosaic.errors import MalformedRecordError, MissingDatabaseError
from photomosaic.image_io import scale_to_square
from photomosaic.signature import Color, Signature, compute_signature

logger = logging.getLogger(__name__)

RECORD_FIELDS = 5


@dataclass(frozen=True)
class TileEntry:
    """One usable tile: where its pixels live and what they look like."""

    tile_id: str
    signature: Signature


class TileDatabase(Sequence[TileEntry]):
    """Read-only, ordered collection of tiles with a cached signature matrix."""

    def __init__(self, entries: Iterable[TileEntry] = ()) -> None:
        self._entries = tuple(entries)

    def __getitem__(self, index):  # type: ignore[override]
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TileDatabase({len(self)} tiles)"

    @cached_property
    def signatures(self) -> np.ndarray:
        """(N, 4, 3) int64 quadrant colours, one row per entry."""
        if not self._entries:
            return np.empty((0, 4, 3), dtype=np.int64)
        return np.stack([e.signature.as_array() for e in self._entries])

    @cached_property
    def index(self) -> dict[str, list[int]]:
        """Map each identifier to the rows it occupies."""
        rows: dict[str, list[int]] = {}
        for i, entry in enumerate(self._entries):
            rows.setdefault(entry.tile_id, []).append(i)
        return rows


def parse_record(fields: Sequence[str]) -> TileEntry:
    """Build a :class:`TileEntry` from one CSV row."""
    if len(fields) != RECORD_FIELDS:
        raise MalformedRecordError(
            f"expected {RECORD_FIELDS} fields, got {len(fields)}",
        )
    path, *packed = fields
    try:
        colors = [Color.from_packed(int(v.strip())) for v in packed]
    except ValueError as exc:
        raise MalformedRecordError(f"bad colour value: {exc}") from exc
    return TileEntry(path.strip(), Signature(*colors))


def format_record(entry: TileEntry) -> list[str]:
    return [entry.tile_id, *(str(c.to_packed()) for c in entry.signature)]


def load_database(path: str | Path) -> TileDatabase:
    """Read every well-formed record from the CSV at *path*.

    Raises:
        MissingDatabaseError: if the file does not exist.
    """
    path = Path(path)
    if not path.is_file():
        raise MissingDatabaseError(f"{path} does not exist")

    entries: list[TileEntry] = []
    with path.open(newline="") as fh:
        for lineno, row in enumerate(csv.reader(fh), 1):
            if not row or not any(f.strip() for f in row):
                continue
            try:
                entries.append(parse_record(row))
            except MalformedRecordError as exc:
                logger.warning("%s:%d: invalid entry (%s), skipping", path, lineno, exc)

    logger.info("Loaded %d tiles from %s", len(entries), path)
    return TileDatabase(entries)


def append_records(path: str | Path, entries: Iterable[TileEntry]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", newline="") as fh:
        writer = csv.writer(fh)
        for entry in entries:
            writer.writerow(format_record(entry))


def _collect_sources(source: Path, extensions: frozenset[str]) -> list[Path]:
    if source.is_file():
        return [source]
    return sorted(
        f for f in source.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def build_database(
    source: str | Path,
    db_dir: str | Path,
    width: int,
    extensions: frozenset[str] = MosaicConfig.SUPPORTED_EXTENSIONS,
) -> list[TileEntry]:
    """Scale raw images into square tiles and append their records.

    *source* may be a single image or a directory of images. Images whose
    scaled tile already exists, or which fail to decode, are skipped with a
    warning, so re-running over the same folder only adds new tiles.

    Returns:
        The entries appended in this run.
    """
    source = Path(source)
    db_dir = Path(db_dir)
    if not source.exists():
        raise FileNotFoundError(f"{source} does not exist")
    db_dir.mkdir(parents=True, exist_ok=True)
    csv_path = database_path(db_dir, width)

    added: list[TileEntry] = []
    for f in _collect_sources(source, extensions):
        out_path = db_dir / f"{width}x{width}_{f.stem}.jpg"
        if out_path.exists():
            logger.warning("Skipping already existing tile: %s", out_path)
            continue
        try:
            with Image.open(f) as img:
                tile = scale_to_square(img, width)
        except OSError as exc:
            logger.warning("Skipping unreadable image %s (%s)", f.name, exc)
            continue

        Image.fromarray(tile).save(out_path)
        entry = TileEntry(str(out_path), compute_signature(tile))
        # one record per tile, written as we go so an interrupted run keeps its work
        append_records(csv_path, [entry])
        added.append(entry)
        logger.info("Created %s", out_path)

    logger.info("Added %d tiles to %s", len(added), csv_path)
    return added
