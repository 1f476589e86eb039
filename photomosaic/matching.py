"""Best-tile selection: signature distance scaled by a repetition penalty.

A candidate's score is ``signature_distance * uniqueness_penalty``; the
lowest score wins and ties go to the earliest candidate.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from photomosaic.database import TileDatabase, TileEntry
from photomosaic.errors import EmptyTileSetError
from photomosaic.grid import PlacementGrid
from photomosaic.signature import Signature

REPEAT_WEIGHT = 0.5


def signature_distance(a: Signature, b: Signature) -> int:
    """Sum of squared RGB differences over the four quadrants."""
    diff = a.as_array() - b.as_array()
    return int(np.sum(diff * diff))


def uniqueness_penalty(
    tile_id: str,
    patch_x: int,
    patch_y: int,
    grid: PlacementGrid,
    unique_box: int,
) -> float:
    """``1.0 + 0.5 * n`` for *n* placements of *tile_id* in the box."""
    return 1.0 + REPEAT_WEIGHT * grid.occurrences(tile_id, patch_x, patch_y, unique_box)


def score_candidates(
    query: Signature,
    tiles: TileDatabase,
    grid: PlacementGrid,
    patch_x: int,
    patch_y: int,
    unique_box: int,
) -> np.ndarray:
    """Scores of every tile in *tiles*, in database order."""
    diff = tiles.signatures - query.as_array()
    distances = np.sum(diff * diff, axis=(1, 2)).astype(np.float64)

    penalties = np.ones(len(tiles), dtype=np.float64)
    for tile_id, count in grid.neighbourhood(patch_x, patch_y, unique_box).items():
        rows = tiles.index.get(tile_id)
        if rows:
            penalties[rows] += REPEAT_WEIGHT * count
    return distances * penalties


def select_best_tile(
    query: Signature,
    candidates: TileDatabase | Sequence[TileEntry],
    grid: PlacementGrid,
    patch_x: int,
    patch_y: int,
    unique_box: int,
) -> str:
    """Identifier of the lowest-scoring candidate for the patch at (x, y).

    Raises:
        EmptyTileSetError: if there are no candidates.
    """
    tiles = candidates if isinstance(candidates, TileDatabase) else TileDatabase(candidates)
    if not len(tiles):
        raise EmptyTileSetError("no tiles to choose from")
    scores = score_candidates(query, tiles, grid, patch_x, patch_y, unique_box)
    # argmin returns the first index of the minimum
    return tiles[int(np.argmin(scores))].tile_id
