"""
Photomosaic Generator
=====================

Rebuild a photograph out of small tile images. Every patch of the scaled
source is matched against a database of tile signatures (mean colours of
four quadrants) and replaced by the closest tile, with a penalty for
repeating the same tile nearby.
"""

__version__ = "1.0.0"

from photomosaic.composer import MosaicComposer, build_mosaic
from photomosaic.config import MosaicConfig
from photomosaic.database import (
    TileDatabase,
    TileEntry,
    build_database,
    load_database,
)
from photomosaic.errors import (
    EmptyTileSetError,
    InvalidImageError,
    MalformedRecordError,
    MissingDatabaseError,
    MosaicError,
    PlacementError,
    TileDecodeError,
)
from photomosaic.grid import PlacementGrid
from photomosaic.image_io import load_source, load_tile, save_image
from photomosaic.matching import (
    select_best_tile,
    signature_distance,
    uniqueness_penalty,
)
from photomosaic.signature import Color, Signature, compute_signature

__all__ = [
    "Color",
    "EmptyTileSetError",
    "InvalidImageError",
    "MalformedRecordError",
    "MissingDatabaseError",
    "MosaicComposer",
    "MosaicConfig",
    "MosaicError",
    "PlacementError",
    "PlacementGrid",
    "Signature",
    "TileDatabase",
    "TileDecodeError",
    "TileEntry",
    "build_database",
    "build_mosaic",
    "compute_signature",
    "load_database",
    "load_source",
    "load_tile",
    "save_image",
    "select_best_tile",
    "signature_distance",
    "uniqueness_penalty",
]
