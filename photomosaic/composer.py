"""Greedy, single-pass patch-by-patch mosaic composition."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

import numpy as np

from photomosaic.database import TileDatabase, TileEntry
from photomosaic.errors import EmptyTileSetError
from photomosaic.grid import PlacementGrid
from photomosaic.image_io import load_tile
from photomosaic.matching import select_best_tile
from photomosaic.signature import compute_signature

logger = logging.getLogger(__name__)

TileLoader = Callable[[str], np.ndarray]
PatchCallback = Callable[[int, int, str], None]


class MosaicComposer:
    """Replace every patch of a source image with its best-matching tile.

    Patches are visited row by row, left to right. Each choice sees only the
    placements made before it and is never revisited.

    Attributes:
        tiles:      Tile database to match against (read-only).
        patch_size: Side of each patch in pixels; tiles must be this size.
        unique_box: Side of the neighbourhood penalising repeated tiles.
        tile_loader: Callable returning a tile's pixels from its identifier.
        grid:       Placement grid of the most recent :meth:`compose` call.
    """

    def __init__(
        self,
        tiles: TileDatabase | Sequence[TileEntry],
        patch_size: int,
        unique_box: int = 21,
        tile_loader: TileLoader = load_tile,
    ) -> None:
        if patch_size <= 0:
            raise ValueError(f"patch_size must be positive, got {patch_size}")
        if unique_box < 0:
            raise ValueError(f"unique_box must be >= 0, got {unique_box}")
        self.tiles = tiles if isinstance(tiles, TileDatabase) else TileDatabase(tiles)
        self.patch_size = patch_size
        self.unique_box = unique_box
        self.tile_loader = tile_loader
        self.grid: PlacementGrid | None = None

    def compose(
        self,
        source: np.ndarray,
        on_patch: PatchCallback | None = None,
    ) -> np.ndarray:
        """Build the mosaic for an (H, W, 3) source image.

        Only whole patches are visited; sides are expected to be multiples
        of ``patch_size``.

        Returns:
            (H, W, 3) uint8 mosaic. *source* itself is left untouched.
        """
        if not len(self.tiles):
            raise EmptyTileSetError("tile database is empty")

        p = self.patch_size
        h, w = source.shape[:2]
        grid = PlacementGrid(w // p, h // p)
        self.grid = grid
        cache: dict[str, np.ndarray] = {}
        output = np.array(source, dtype=np.uint8, copy=True)

        logger.info(
            "Composing %dx%d patches (%d tiles, unique box %d)",
            grid.cols, grid.rows, len(self.tiles), self.unique_box,
        )
        t0 = time.perf_counter()

        for patch_y in range(grid.rows):
            for patch_x in range(grid.cols):
                y, x = patch_y * p, patch_x * p
                region = output[y:y + p, x:x + p]
                tile_id = select_best_tile(
                    compute_signature(region), self.tiles, grid,
                    patch_x, patch_y, self.unique_box,
                )
                grid.place(patch_x, patch_y, tile_id)

                if tile_id not in cache:
                    logger.debug("Loading tile %s", tile_id)
                    cache[tile_id] = self.tile_loader(tile_id)
                output[y:y + p, x:x + p] = cache[tile_id]

                if on_patch is not None:
                    on_patch(patch_x, patch_y, tile_id)

        logger.info(
            "Mosaic done | %d patches, %d distinct tiles  (%.1f s)",
            grid.placed, len(cache), time.perf_counter() - t0,
        )
        return output


def build_mosaic(
    source: np.ndarray,
    tiles: TileDatabase | Sequence[TileEntry],
    patch_size: int,
    unique_box: int = 21,
    tile_loader: TileLoader = load_tile,
    on_patch: PatchCallback | None = None,
) -> np.ndarray:
    """Functional shortcut for :meth:`MosaicComposer.compose`."""
    composer = MosaicComposer(tiles, patch_size, unique_box, tile_loader)
    return composer.compose(source, on_patch=on_patch)
