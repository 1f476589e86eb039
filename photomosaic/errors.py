"""Exception hierarchy for mosaic runs.

Everything except :class:`MalformedRecordError` aborts the run; malformed
database records are skipped by the loader with a warning.
"""

from __future__ import annotations


class MosaicError(Exception):
    """Base class for all photomosaic failures."""


class InvalidImageError(MosaicError):
    """The source image is missing or does not decode."""


class MissingDatabaseError(MosaicError):
    """The tile database file does not exist."""


class MalformedRecordError(MosaicError):
    """A database record has the wrong field count or a bad colour value."""


class EmptyTileSetError(MosaicError):
    """No usable tiles are available to match against."""


class TileDecodeError(MosaicError):
    """A selected tile image could not be loaded."""


class PlacementError(MosaicError):
    """A placement grid cell was written twice."""
