"""
Block Palette Module

Maps reference colors to block identifiers for pixel-art builds.

Handles:
- The ordered block color table (order is the nearest-match tie-break)
- Exact and nearest-color lookups for single colors
- Vectorized quantization of whole RGB images (Numba JIT)

Distance is plain squared Euclidean distance in sRGB. No perceptual
weighting is applied, so results match what players expect from the
block swatches.
"""

from typing import Dict, NamedTuple, Optional, Tuple
import numpy as np
from numba import njit


class BlockPaletteEntry(NamedTuple):
    """A block id and the average color of its texture."""
    block_id: str
    reference_color: Tuple[int, int, int]


BLOCK_PALETTE: Tuple[BlockPaletteEntry, ...] = (
    # Concrete
    BlockPaletteEntry("white_concrete", (207, 213, 214)),
    BlockPaletteEntry("orange_concrete", (224, 97, 1)),
    BlockPaletteEntry("magenta_concrete", (169, 48, 159)),
    BlockPaletteEntry("light_blue_concrete", (36, 137, 199)),
    BlockPaletteEntry("yellow_concrete", (241, 175, 21)),
    BlockPaletteEntry("lime_concrete", (94, 169, 24)),
    BlockPaletteEntry("pink_concrete", (214, 101, 143)),
    BlockPaletteEntry("gray_concrete", (55, 58, 62)),
    BlockPaletteEntry("light_gray_concrete", (125, 125, 115)),
    BlockPaletteEntry("cyan_concrete", (21, 119, 136)),
    BlockPaletteEntry("purple_concrete", (100, 32, 156)),
    BlockPaletteEntry("blue_concrete", (45, 47, 143)),
    BlockPaletteEntry("brown_concrete", (96, 60, 32)),
    BlockPaletteEntry("green_concrete", (73, 91, 36)),
    BlockPaletteEntry("red_concrete", (142, 33, 33)),
    BlockPaletteEntry("black_concrete", (8, 10, 15)),
    # Wool
    BlockPaletteEntry("white_wool", (234, 236, 237)),
    BlockPaletteEntry("orange_wool", (241, 118, 20)),
    BlockPaletteEntry("magenta_wool", (189, 68, 179)),
    BlockPaletteEntry("light_blue_wool", (58, 175, 217)),
    BlockPaletteEntry("yellow_wool", (249, 198, 40)),
    BlockPaletteEntry("lime_wool", (112, 185, 26)),
    BlockPaletteEntry("pink_wool", (238, 141, 172)),
    BlockPaletteEntry("cyan_wool", (21, 138, 145)),
    BlockPaletteEntry("purple_wool", (122, 42, 173)),
    BlockPaletteEntry("blue_wool", (53, 57, 157)),
    BlockPaletteEntry("brown_wool", (114, 72, 41)),
    BlockPaletteEntry("green_wool", (85, 110, 28)),
    BlockPaletteEntry("red_wool", (161, 39, 35)),
    BlockPaletteEntry("black_wool", (21, 21, 26)),
    # Terracotta
    BlockPaletteEntry("white_terracotta", (210, 178, 161)),
    BlockPaletteEntry("orange_terracotta", (162, 84, 38)),
    BlockPaletteEntry("yellow_terracotta", (186, 133, 35)),
    BlockPaletteEntry("brown_terracotta", (77, 51, 36)),
    BlockPaletteEntry("red_terracotta", (143, 61, 47)),
    BlockPaletteEntry("black_terracotta", (37, 23, 16)),
    # Mineral blocks
    BlockPaletteEntry("gold_block", (246, 208, 62)),
    BlockPaletteEntry("iron_block", (220, 220, 220)),
    BlockPaletteEntry("diamond_block", (98, 219, 214)),
    BlockPaletteEntry("emerald_block", (42, 176, 66)),
    BlockPaletteEntry("lapis_block", (31, 67, 140)),
    BlockPaletteEntry("redstone_block", (170, 26, 6)),
    BlockPaletteEntry("coal_block", (16, 16, 16)),
    BlockPaletteEntry("netherite_block", (66, 61, 63)),
    BlockPaletteEntry("copper_block", (192, 107, 79)),
    # Building materials
    BlockPaletteEntry("oak_planks", (162, 130, 78)),
    BlockPaletteEntry("spruce_planks", (115, 85, 49)),
    BlockPaletteEntry("birch_planks", (196, 179, 123)),
    BlockPaletteEntry("dark_oak_planks", (67, 43, 20)),
    BlockPaletteEntry("stone", (126, 126, 126)),
    BlockPaletteEntry("cobblestone", (128, 128, 128)),
    BlockPaletteEntry("stone_bricks", (122, 122, 122)),
    BlockPaletteEntry("bricks", (150, 97, 83)),
    BlockPaletteEntry("sandstone", (223, 214, 170)),
    BlockPaletteEntry("quartz_block", (235, 229, 222)),
    BlockPaletteEntry("prismarine", (99, 156, 151)),
    BlockPaletteEntry("sea_lantern", (172, 199, 190)),
    BlockPaletteEntry("glowstone", (171, 131, 84)),
    BlockPaletteEntry("obsidian", (15, 11, 25)),
    # Glass
    BlockPaletteEntry("glass", (200, 220, 230)),
    BlockPaletteEntry("white_stained_glass", (255, 255, 255)),
    BlockPaletteEntry("light_blue_stained_glass", (102, 153, 216)),
)

BLOCK_IDS: Tuple[str, ...] = tuple(entry.block_id for entry in BLOCK_PALETTE)

# (N, 3) int32 reference colors, row order matches BLOCK_PALETTE
PALETTE_COLORS = np.array([entry.reference_color for entry in BLOCK_PALETTE], dtype=np.int32)
PALETTE_COLORS.setflags(write=False)

_EXACT: Dict[Tuple[int, int, int], int] = {}
for _index, _entry in enumerate(BLOCK_PALETTE):
    _EXACT.setdefault(_entry.reference_color, _index)


@njit(cache=True)
def _nearest_index(r: int, g: int, b: int, palette: np.ndarray) -> int:
    """
    Linear scan for the closest palette color.

    Strict less-than keeps the first entry on ties.
    """
    best = 0
    best_dist = -1
    for i in range(palette.shape[0]):
        dr = r - palette[i, 0]
        dg = g - palette[i, 1]
        db = b - palette[i, 2]
        dist = dr * dr + dg * dg + db * db
        if best_dist < 0 or dist < best_dist:
            best = i
            best_dist = dist
    return best


@njit(cache=True)
def _quantize_flat(colors: np.ndarray, palette: np.ndarray) -> np.ndarray:
    """
    Map every color to its nearest palette index.

    Args:
        colors: Array of shape (N, 3) with int32 RGB values
        palette: Array of shape (M, 3) with int32 RGB values

    Returns:
        Array of shape (N,) with int32 palette indices
    """
    n = colors.shape[0]
    result = np.empty(n, dtype=np.int32)
    for i in range(n):
        result[i] = _nearest_index(colors[i, 0], colors[i, 1], colors[i, 2], palette)
    return result


def nearest_index(r: int, g: int, b: int) -> int:
    """
    Get the palette index for a color.

    Exact reference colors are answered from a lookup table, everything
    else falls back to the nearest-distance scan.
    """
    key = (int(r), int(g), int(b))
    if key in _EXACT:
        return _EXACT[key]
    return int(_nearest_index(key[0], key[1], key[2], PALETTE_COLORS))


def find_closest_block(r: int, g: int, b: int) -> str:
    """
    Find the block whose reference color is nearest to an RGB color.

    Args:
        r: Red component (0-255)
        g: Green component (0-255)
        b: Blue component (0-255)

    Returns:
        Block id, e.g. "red_concrete" for (142, 33, 33)
    """
    return BLOCK_IDS[nearest_index(r, g, b)]


def quantize_image(rgb: np.ndarray) -> np.ndarray:
    """
    Quantize an image to palette indices.

    Args:
        rgb: Array of shape (H, W, 3) or (H, W, 4); alpha is ignored

    Returns:
        Array of shape (H, W) with int32 indices into BLOCK_PALETTE
    """
    h, w = rgb.shape[:2]
    flat = np.ascontiguousarray(rgb[:, :, :3].reshape(-1, 3), dtype=np.int32)
    if flat.shape[0] == 0:
        return np.zeros((h, w), dtype=np.int32)
    return _quantize_flat(flat, PALETTE_COLORS).reshape(h, w)


def block_for_index(index: int) -> str:
    return BLOCK_IDS[index]


def reference_color(block_id: str) -> Optional[Tuple[int, int, int]]:
    """Look up the reference color of a block, or None if it is not in the table."""
    for entry in BLOCK_PALETTE:
        if entry.block_id == block_id:
            return entry.reference_color
    return None

