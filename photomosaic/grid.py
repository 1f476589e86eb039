"""Record of which tile was placed at each patch coordinate."""

from __future__ import annotations

from collections import Counter

import numpy as np

from photomosaic.errors import PlacementError


def box_bounds(center: int, unique_box: int, limit: int) -> tuple[int, int]:
    """Half-open index range of a uniqueness box, clipped to ``[0, limit)``.

    The half-width is ``unique_box // 2`` on both sides, so an even box of
    20 covers offsets -10..+10.
    """
    if unique_box < 0:
        raise ValueError(f"unique_box must be >= 0, got {unique_box}")
    half = unique_box // 2
    return max(0, center - half), min(limit, center + half + 1)


class PlacementGrid:
    """A ``cols x rows`` grid of tile identifiers, each cell written once.

    Cells are addressed as ``(patch_x, patch_y)``; unset cells hold ``None``.
    """

    def __init__(self, cols: int, rows: int) -> None:
        if cols < 0 or rows < 0:
            raise ValueError(f"grid size must be non-negative, got {cols}x{rows}")
        self.cols = cols
        self.rows = rows
        # stored row-major: _cells[patch_y, patch_x]
        self._cells = np.full((rows, cols), None, dtype=object)

    def __getitem__(self, xy: tuple[int, int]) -> str | None:
        x, y = xy
        return self._cells[y, x]

    def __repr__(self) -> str:
        return f"PlacementGrid({self.cols}x{self.rows}, placed={self.placed})"

    @property
    def placed(self) -> int:
        """Number of cells already written."""
        return int(np.count_nonzero(self._cells != None))  # noqa: E711

    @property
    def complete(self) -> bool:
        return self.placed == self.cols * self.rows

    def place(self, patch_x: int, patch_y: int, tile_id: str) -> None:
        """Record *tile_id* at a cell that has not been written yet."""
        current = self._cells[patch_y, patch_x]
        if current is not None:
            raise PlacementError(
                f"cell ({patch_x}, {patch_y}) already holds {current!r}",
            )
        self._cells[patch_y, patch_x] = tile_id

    def neighbourhood(
        self, patch_x: int, patch_y: int, unique_box: int,
    ) -> Counter[str]:
        """Occurrences of each placed identifier inside the uniqueness box."""
        x0, x1 = box_bounds(patch_x, unique_box, self.cols)
        y0, y1 = box_bounds(patch_y, unique_box, self.rows)
        window = self._cells[y0:y1, x0:x1].ravel()
        return Counter(tid for tid in window if tid is not None)

    def occurrences(
        self, tile_id: str, patch_x: int, patch_y: int, unique_box: int,
    ) -> int:
        """How many cells inside the uniqueness box hold *tile_id*."""
        return self.neighbourhood(patch_x, patch_y, unique_box)[tile_id]

    def to_list(self) -> list[list[str | None]]:
        """Rows of identifiers, top to bottom."""
        return self._cells.tolist()
