"""Four-quadrant mean-colour signatures."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np


class Color(NamedTuple):
    """An opaque 8-bit RGB colour."""

    red: int
    green: int
    blue: int

    def to_packed(self) -> int:
        """Pack as a 24-bit ``0xRRGGBB`` integer."""
        return (self.red << 16) | (self.green << 8) | self.blue

    @classmethod
    def from_packed(cls, value: int) -> Color:
        """Unpack a ``0xRRGGBB`` integer.

        Bits above the low 24 are ignored, so signed 32-bit ARGB values
        (``-16777216`` is opaque black) decode as well.
        """
        value &= 0xFFFFFF
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


class Signature(NamedTuple):
    """Mean colours of the four quadrants of an image region."""

    top_left: Color
    top_right: Color
    bottom_left: Color
    bottom_right: Color

    def as_array(self) -> np.ndarray:
        """(4, 3) int64 array in quadrant order."""
        return np.array(self, dtype=np.int64)


def _mean_color(quadrant: np.ndarray) -> Color:
    count = quadrant.shape[0] * quadrant.shape[1]
    if count == 0:
        return Color(0, 0, 0)
    totals = quadrant.reshape(-1, 3).astype(np.int64).sum(axis=0)
    r, g, b = (int(t) // count for t in totals)
    return Color(r, g, b)


def compute_signature(region: np.ndarray) -> Signature:
    """Compute the signature of an (H, W, 3) pixel region.

    The region is halved with integer division, so odd sizes push the extra
    row/column into the bottom/right quadrants. Channel means are truncated.
    """
    h, w = region.shape[:2]
    mid_y, mid_x = h // 2, w // 2
    return Signature(
        _mean_color(region[:mid_y, :mid_x]),
        _mean_color(region[:mid_y, mid_x:]),
        _mean_color(region[mid_y:, :mid_x]),
        _mean_color(region[mid_y:, mid_x:]),
    )
