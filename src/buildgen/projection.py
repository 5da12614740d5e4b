"""
Projection of image pixels into world space.

An image is stood upright in the world like a painting:
- pixel column -> the horizontal axis of the image plane
- pixel row (counted from the bottom) -> world Y
- extrusion depth -> along the facing normal

Coordinate System (Minecraft):
- +X East, +Y Up, +Z South
- north/south facing: image plane spans X, depth runs along Z
- east/west facing: image plane spans Z, depth runs along X
"""

import logging
from enum import Enum
from typing import Tuple, Union

logger = logging.getLogger(__name__)

Box = Tuple[int, int, int, int, int, int]
Origin = Tuple[int, int, int]


class Facing(Enum):
    """Direction the front of the image looks towards."""
    NORTH = "north"     # depth grows towards -Z
    SOUTH = "south"     # depth grows towards +Z
    EAST = "east"       # depth grows towards +X
    WEST = "west"       # depth grows towards -X

    @classmethod
    def parse(cls, value: Union["Facing", str, None]) -> "Facing":
        """Parse a facing name, falling back to SOUTH with a warning."""
        if isinstance(value, Facing):
            return value
        if value is None:
            return cls.SOUTH
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown facing %r, using south", value)
            return cls.SOUTH

    @property
    def spans_x(self) -> bool:
        """True when the image plane runs along X."""
        return self in (Facing.NORTH, Facing.SOUTH)

    def depth_range(self, base: int, depth: int) -> Tuple[int, int]:
        """
        Inclusive coordinate range covered by ``depth`` layers from ``base``.

        South and east grow in the positive direction, north and west in the
        negative one. The range is always returned low to high.
        """
        if self in (Facing.SOUTH, Facing.EAST):
            return (base, base + depth - 1)
        return (base - depth + 1, base)


def pixel_box(
    facing: Facing,
    origin: Origin,
    px: int,
    py: int,
    scale: int,
    depth: int = 1
) -> Box:
    """
    World box covered by one pixel.

    Args:
        facing: Image orientation
        origin: World position of the bottom-left pixel corner
        px: Pixel column, 0 at the left
        py: Pixel row, 0 at the bottom
        scale: Blocks per pixel along the image plane
        depth: Block layers along the facing normal

    Returns:
        (x1, y1, z1, x2, y2, z2), inclusive
    """
    ox, oy, oz = origin
    a1 = px * scale
    a2 = (px + 1) * scale - 1
    y1 = oy + py * scale
    y2 = oy + (py + 1) * scale - 1

    if facing.spans_x:
        z1, z2 = facing.depth_range(oz, depth)
        return (ox + a1, y1, z1, ox + a2, y2, z2)

    x1, x2 = facing.depth_range(ox, depth)
    return (x1, y1, oz + a1, x2, y2, oz + a2)


def centered_origin(facing: Facing, origin: Origin, width: int) -> Origin:
    """Shift the origin so a build ``width`` blocks wide is centered on it."""
    ox, oy, oz = origin
    half = width // 2
    if facing.spans_x:
        return (ox - half, oy, oz)
    return (ox, oy, oz - half)


def footprint(facing: Facing, origin: Origin, width: int, depth: int) -> Tuple[int, int, int, int]:
    """
    Horizontal extent (x1, z1, x2, z2) of a build, inclusive.

    Args:
        facing: Image orientation
        origin: Bottom-left corner as passed to pixel_box
        width: Build width in blocks
        depth: Build depth in blocks
    """
    ox, _, oz = origin
    if facing.spans_x:
        z1, z2 = facing.depth_range(oz, depth)
        return (ox, z1, ox + width - 1, z2)

    x1, x2 = facing.depth_range(ox, depth)
    return (x1, oz, x2, oz + width - 1)
