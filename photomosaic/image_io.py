"""Image loading, saving, and comparison-image generation."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from photomosaic.errors import InvalidImageError, TileDecodeError


def scale_to_square(image: Image.Image, width: int) -> np.ndarray:
    """Resize to ``width x width`` RGB, ignoring the original aspect ratio.

    Returns:
        (width, width, 3) uint8 array.
    """
    img = image.convert("RGB").resize((width, width), Image.LANCZOS)
    return np.array(img, dtype=np.uint8)


def load_source(path: str | Path, width: int) -> np.ndarray:
    """Load the source photograph scaled to a ``width x width`` square.

    Raises:
        InvalidImageError: if the file is missing or not a decodable image.
    """
    try:
        with Image.open(path) as img:
            return scale_to_square(img, width)
    except OSError as exc:
        raise InvalidImageError(f"{path} is not a valid image: {exc}") from exc


def load_tile(path: str | Path) -> np.ndarray:
    """Decode a database tile as an (H, W, 3) uint8 array.

    Raises:
        TileDecodeError: if the tile cannot be read.
    """
    try:
        with Image.open(path) as img:
            return np.array(img.convert("RGB"), dtype=np.uint8)
    except OSError as exc:
        raise TileDecodeError(f"cannot load tile {path}: {exc}") from exc


def save_image(
    array: np.ndarray,
    path: str | Path,
    upscale: int = 1,
) -> None:
    """Save an (H, W, 3) array, optionally nearest-neighbour upscaled."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.fromarray(array.astype(np.uint8))
    if upscale > 1:
        h, w = array.shape[:2]
        img = img.resize((w * upscale, h * upscale), Image.NEAREST)
    img.save(path)


def make_comparison_grid(
    scaled: np.ndarray,
    mosaic: np.ndarray,
    output_path: str | Path,
) -> None:
    """Create a 2-panel comparison: Scaled original | Mosaic."""
    panel_h, panel_w = mosaic.shape[:2]
    label_height = 36

    panels = [
        Image.fromarray(scaled).resize((panel_w, panel_h), Image.NEAREST),
        Image.fromarray(mosaic),
    ]
    labels = [f"Original {panel_w}x{panel_h}", "Mosaic"]

    gap = 8
    total_w = len(panels) * panel_w + (len(panels) - 1) * gap
    total_h = panel_h + label_height

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (panel, label) in enumerate(zip(panels, labels, strict=False)):
        x = i * (panel_w + gap)
        canvas.paste(panel, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    canvas.save(output_path)
