"""
Built-in pixel art and test patterns.

Patterns are authored as character rows plus a color map. A space is
transparent; any character without a color is opaque black.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .ingestion import PixelGrid

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class PixelPattern:
    """Character rows and the colors they stand for."""
    rows: Tuple[str, ...]
    colors: Mapping[str, RGB]
    transparent_space: bool = True

    def to_grid(self) -> PixelGrid:
        return pattern_to_grid(self.rows, self.colors, self.transparent_space)


def pattern_to_grid(
    rows: Sequence[str],
    colors: Mapping[str, RGB],
    transparent_space: bool = True
) -> PixelGrid:
    """
    Rasterize a character pattern.

    Args:
        rows: Pattern rows, top row first; short rows are padded with spaces
        colors: Map from character to RGB
        transparent_space: Whether ' ' produces a transparent pixel

    Returns:
        PixelGrid with width equal to the longest row
    """
    height = len(rows)
    width = max((len(row) for row in rows), default=0)
    pixels = np.zeros((height, width, 4), dtype=np.uint8)

    for y, row in enumerate(rows):
        for x in range(width):
            char = row[x] if x < len(row) else " "
            r, g, b = colors.get(char, (0, 0, 0))
            alpha = 0 if (transparent_space and char == " ") else 255
            pixels[y, x] = (r, g, b, alpha)

    return PixelGrid(pixels)


RED = (255, 0, 0)
GOLD = (255, 215, 0)
BLACK = (0, 0, 0)

PATTERNS: Dict[str, PixelPattern] = {
    "heart": PixelPattern(
        rows=(
            "  RR  RR  ",
            " RRRRRRRR ",
            "RRRRRRRRRR",
            "RRRRRRRRRR",
            "RRRRRRRRRR",
            " RRRRRRRR ",
            "  RRRRRR  ",
            "   RRRR   ",
            "    RR    ",
        ),
        colors={"R": RED},
    ),
    "star": PixelPattern(
        rows=(
            "    YY    ",
            "    YY    ",
            "   YYYY   ",
            "YYYYYYYYYY",
            " YYYYYYYY ",
            "  YYYYYY  ",
            "  YY  YY  ",
            " YY    YY ",
        ),
        colors={"Y": GOLD},
    ),
    "smiley": PixelPattern(
        rows=(
            "  YYYY  ",
            " YYYYYY ",
            "YYBYYBYY",
            "YYYYYYYY",
            "YYYYYYYY",
            "YBYYBYYY",
            " YBBBYY ",
            "  YYYY  ",
        ),
        colors={"Y": GOLD, "B": BLACK},
    ),
}


def _freeze(grid: PixelGrid) -> PixelGrid:
    grid.pixels.setflags(write=False)
    return grid


PIXEL_ART_LIBRARY: Dict[str, PixelGrid] = {
    name: _freeze(pattern.to_grid()) for name, pattern in PATTERNS.items()
}


def get_pixel_art(name: str) -> Optional[PixelGrid]:
    """Look up a built-in pattern by case-insensitive name."""
    return PIXEL_ART_LIBRARY.get(name.strip().lower())


def list_pixel_art() -> List[str]:
    return sorted(PIXEL_ART_LIBRARY)


def checkerboard(
    width: int,
    height: int,
    size: int = 1,
    color1: RGB = (255, 255, 255),
    color2: RGB = (0, 0, 0)
) -> PixelGrid:
    """
    Opaque checkerboard test pattern.

    Cell (0, 0) uses color1. With the defaults every pixel alternates
    between white and black.
    """
    size = max(1, int(size))
    ys, xs = np.mgrid[0:height, 0:width]
    first = ((xs // size + ys // size) % 2) == 0

    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., :3] = np.where(first[..., None], color1, color2)
    pixels[..., 3] = 255
    return PixelGrid(pixels)


def gradient(width: int, height: int, blue: int = 128) -> PixelGrid:
    """
    Opaque gradient test pattern.

    Red ramps from 0 along x and green from 0 along y, each reaching
    floor(255 * (n - 1) / n) on the last column or row.
    """
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = np.floor(xs / max(width, 1) * 255)
    pixels[..., 1] = np.floor(ys / max(height, 1) * 255)
    pixels[..., 2] = blue
    pixels[..., 3] = 255
    return PixelGrid(pixels)
