"""
Voxelization Engine

This module provides:
- Voxelizer: Converts pixel grids into block placement instructions
- intersect_silhouettes: Dual-view carve of a 3D volume from two images

Three planar projections share one code path (wall, extrusion, relief);
they only differ in the depth map handed in. Silhouette carving builds a
dense boolean volume and emits it in (y, x, z) order.

Memory consideration: a 64 x 64 x 64 carve is 256 KB of booleans.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from .depth import DepthEstimator, DepthMode
from .ingestion import DEFAULT_ALPHA_THRESHOLD, PixelGrid
from .instructions import Instruction, fill, setblock
from .palette import BLOCK_IDS, quantize_image
from .projection import Facing, Origin, pixel_box

logger = logging.getLogger(__name__)


def intersect_silhouettes(front_mask: np.ndarray, side_mask: np.ndarray) -> np.ndarray:
    """
    Carve a volume from two orthogonal silhouettes.

    Both masks are bottom-up (row 0 = lowest) and must have the same
    number of rows.

    Args:
        front_mask: (H, W) occupancy seen from the front, W runs along X
        side_mask: (H, D) occupancy seen from the side, D runs along Z

    Returns:
        (H, W, D) boolean volume, True where both views are opaque
    """
    return front_mask[:, :, None] & side_mask[:, None, :]


class Voxelizer:
    """
    Engine for converting pixel grids to block instructions.

    Usage:
        voxelizer = Voxelizer(facing=Facing.SOUTH, scale=2)
        commands = voxelizer.project(grid, (0, 65, 0), DepthEstimator())
    """

    def __init__(
        self,
        facing: Facing = Facing.SOUTH,
        scale: int = 1,
        alpha_threshold: int = DEFAULT_ALPHA_THRESHOLD
    ):
        """
        Initialize the voxelizer.

        Args:
            facing: Direction the image front looks towards
            scale: Blocks per pixel along the image plane (at least 1)
            alpha_threshold: Pixels with alpha above this become blocks
        """
        self.facing = facing
        self.scale = max(1, int(scale))
        self.alpha_threshold = alpha_threshold

    def project(
        self,
        grid: PixelGrid,
        origin: Origin,
        depth_estimator: Optional[DepthEstimator] = None,
        as_wall: bool = False
    ) -> List[Instruction]:
        """
        Stand an image up in the world.

        Pixels are visited bottom row first, left to right.

        Args:
            grid: Source pixels
            origin: World position of the bottom-left corner
            depth_estimator: Per-pixel depth (defaults to flat depth 1)
            as_wall: Emit setblocks at scale 1 instead of fills

        Returns:
            One instruction per opaque pixel
        """
        depth_estimator = depth_estimator or DepthEstimator(DepthMode.FLAT, max_depth=1)
        pixels = grid.bottom_up()
        mask = pixels[:, :, 3] > self.alpha_threshold
        blocks = quantize_image(pixels)
        depths = depth_estimator.estimate(mask, pixels)

        commands = []
        for py, px in np.argwhere(mask):
            block = BLOCK_IDS[blocks[py, px]]
            box = pixel_box(self.facing, origin, int(px), int(py), self.scale, int(depths[py, px]))

            if as_wall and self.scale == 1:
                commands.append(setblock(box[0], box[1], box[2], block))
            else:
                commands.append(fill(*box, block))

        logger.debug("Projected %d opaque pixels facing %s", len(commands), self.facing.value)
        return commands

    def carve(
        self,
        front: PixelGrid,
        side: PixelGrid,
        center: Origin,
        block: Optional[str] = None
    ) -> Tuple[List[Instruction], Tuple[int, int, int]]:
        """
        Build a statue from front and side silhouettes.

        Both images are cropped to the shorter height, keeping their top
        rows. The statue is centered on ``center`` in X and Z and rests on
        ``center``'s Y.

        Args:
            front: Front view, its columns map to X
            side: Side view, its columns map to Z
            center: World position of the statue's base center
            block: Block for every voxel, None to color from the front view

        Returns:
            (instructions, (width, height, depth))
        """
        height = min(front.height, side.height)
        front_pixels = front.pixels[:height][::-1]
        front_mask = front_pixels[:, :, 3] > self.alpha_threshold
        side_mask = side.pixels[:height][::-1][:, :, 3] > self.alpha_threshold

        volume = intersect_silhouettes(front_mask, side_mask)
        blocks = None if block else quantize_image(front_pixels)

        cx, cy, cz = center
        start_x = cx - front.width // 2
        start_z = cz - side.width // 2

        commands = []
        for y, x, z in np.argwhere(volume):
            block_id = block or BLOCK_IDS[blocks[y, x]]
            commands.append(setblock(start_x + int(x), cy + int(y), start_z + int(z), block_id))

        logger.debug("Carved %d voxels from %dx%d and %dx%d silhouettes",
                     len(commands), front.width, front.height, side.width, side.height)
        return commands, (front.width, height, side.width)
