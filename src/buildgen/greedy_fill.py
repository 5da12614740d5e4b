"""
Greedy Fill Merging with Numba JIT Compilation

Collapses runs of single-block placements into as few rectangular fills
as possible. Image walls and scale-1 voxel objects are mostly setblocks,
and each one costs a console round trip, so merging them pays off.

Algorithm Overview:
1. Split the instruction list into runs of plain setblocks. Anything else
   (fills, forceloads, annotated setblocks) is a barrier that keeps its
   position.
2. Within a run, later placements overwrite earlier ones at the same cell.
3. For each Y layer, greedily sweep a 2D block grid and grow rectangles of
   one block id, first along Z and then along X.
4. Emit one fill per rectangle; 1x1 rectangles stay setblocks.
"""

import logging
import re
from typing import Dict, List, Sequence, Tuple

import numpy as np
from numba import njit

from .instructions import Instruction, fill, setblock

logger = logging.getLogger(__name__)

_SETBLOCK = re.compile(r"^setblock (-?\d+) (-?\d+) (-?\d+) (\S+)$")

# Layers with a larger bounding rectangle are emitted unmerged
DEFAULT_MAX_LAYER_AREA = 1 << 20

EMPTY = -1


@njit(cache=True)
def _greedy_rectangles(grid: np.ndarray) -> np.ndarray:
    """
    Greedy rectangle cover of one layer.

    Args:
        grid: (DX, DZ) int32 block indices, EMPTY where nothing is placed

    Returns:
        (N, 5) int32 array of [x, z, size_x, size_z, block] in scan order
    """
    dim1, dim2 = grid.shape
    mask = np.zeros((dim1, dim2), dtype=np.uint8)
    rects = np.zeros((dim1 * dim2, 5), dtype=np.int32)
    count = 0

    for d1 in range(dim1):
        d2 = 0
        while d2 < dim2:
            value = grid[d1, d2]
            if mask[d1, d2] != 0 or value == EMPTY:
                d2 += 1
                continue

            # Expand width (along d2)
            width = 1
            while d2 + width < dim2:
                if mask[d1, d2 + width] != 0 or grid[d1, d2 + width] != value:
                    break
                width += 1

            # Expand height (along d1), a whole row at a time
            height = 1
            done = False
            while d1 + height < dim1 and not done:
                for w in range(width):
                    if mask[d1 + height, d2 + w] != 0 or grid[d1 + height, d2 + w] != value:
                        done = True
                        break
                if not done:
                    height += 1

            rects[count, 0] = d1
            rects[count, 1] = d2
            rects[count, 2] = height
            rects[count, 3] = width
            rects[count, 4] = value
            count += 1

            for h in range(height):
                for w in range(width):
                    mask[d1 + h, d2 + w] = 1

            d2 += width

    return rects[:count]


def _parse_plain_setblock(instruction: Instruction):
    if instruction.has_metadata:
        return None
    match = _SETBLOCK.match(instruction.text)
    if match is None:
        return None
    x, y, z, block = match.groups()
    return (int(x), int(y), int(z)), block


def _merge_run(cells: Dict[Tuple[int, int, int], str], max_layer_area: int) -> List[Instruction]:
    """Merge one run of placements, layer by layer from the bottom up."""
    layers: Dict[int, List[Tuple[int, int, str]]] = {}
    for (x, y, z), block in cells.items():
        layers.setdefault(y, []).append((x, z, block))

    merged = []
    for y in sorted(layers):
        placements = layers[y]
        xs = [p[0] for p in placements]
        zs = [p[1] for p in placements]
        min_x, min_z = min(xs), min(zs)
        size_x = max(xs) - min_x + 1
        size_z = max(zs) - min_z + 1

        if size_x * size_z > max_layer_area:
            logger.debug("Layer y=%d spans %dx%d, leaving unmerged", y, size_x, size_z)
            merged.extend(setblock(x, y, z, block) for x, z, block in sorted(placements))
            continue

        block_ids: List[str] = []
        index_of: Dict[str, int] = {}
        grid = np.full((size_x, size_z), EMPTY, dtype=np.int32)
        for x, z, block in placements:
            if block not in index_of:
                index_of[block] = len(block_ids)
                block_ids.append(block)
            grid[x - min_x, z - min_z] = index_of[block]

        for dx, dz, sx, sz, value in _greedy_rectangles(grid):
            x1 = min_x + int(dx)
            z1 = min_z + int(dz)
            block = block_ids[value]
            if sx == 1 and sz == 1:
                merged.append(setblock(x1, y, z1, block))
            else:
                merged.append(fill(x1, y, z1, x1 + int(sx) - 1, y, z1 + int(sz) - 1, block))

    return merged


def optimize_instructions(
    instructions: Sequence[Instruction],
    max_layer_area: int = DEFAULT_MAX_LAYER_AREA
) -> List[Instruction]:
    """
    Merge runs of single-block placements into rectangular fills.

    The set of blocks placed and the position of every other instruction are
    unchanged.

    Args:
        instructions: Instructions in execution order
        max_layer_area: Largest layer bounding area that is merged

    Returns:
        New instruction list
    """
    result: List[Instruction] = []
    run: Dict[Tuple[int, int, int], str] = {}

    for instruction in instructions:
        parsed = _parse_plain_setblock(instruction)
        if parsed is not None:
            position, block = parsed
            run.pop(position, None)
            run[position] = block
            continue

        if run:
            result.extend(_merge_run(run, max_layer_area))
            run = {}
        result.append(instruction)

    if run:
        result.extend(_merge_run(run, max_layer_area))

    if len(result) != len(instructions):
        logger.info("Merged %d instructions into %d", len(instructions), len(result))
    return result
