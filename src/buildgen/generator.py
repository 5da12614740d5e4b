"""
Image-to-Voxel Generator

This is the primary interface for turning images into builds.
It orchestrates:
1. Image fetching and downscaling (or a built-in pixel-art pattern)
2. Depth estimation (flat or luminosity)
3. Projection into wall, extrusion or relief instructions
4. Optional centering and region-load hints

Example Usage:
    generator = ImageVoxelGenerator()
    await generator.fetch("https://example.com/logo.png", max_size=64)
    generator.set_mode("relief", max_depth=8)
    result = generator.build((0, 65, 50), centered=True)

Or in one call:
    result = await fetch_and_build(url, (0, 65, 0), ImageBuildOptions(depth=3))
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from .depth import DepthEstimator, DepthMode
from .ingestion import (
    DEFAULT_ALPHA_THRESHOLD,
    ImageFetcher,
    PixelGrid,
    as_pixel_grid,
    fetch_pixels,
)
from .instructions import Instruction, annotate, forceload
from .pixel_art import get_pixel_art
from .projection import Facing, Origin, centered_origin, footprint
from .voxelizer import Voxelizer

logger = logging.getLogger(__name__)

FORCELOAD_MARGIN = 16
FORCELOAD_DELAY_MS = 2000


class BuildMode(Enum):
    """How an image is stood up in the world."""
    WALL = "wall"               # One block thick
    EXTRUSION = "extrusion"     # Constant depth
    RELIEF = "relief"           # Depth from brightness


@dataclass
class ImageBuildOptions:
    """
    Settings for an image build.

    Attributes:
        mode: Projection mode; None picks wall for depth <= 1, else extrusion
        scale: Blocks per pixel along the image plane
        depth: Extrusion depth in blocks
        max_depth: Deepest relief layer, reached by the brightest pixels
        invert: Relief only, dark pixels stand out instead of bright ones
        facing: Direction the image front looks towards
        max_size: Largest allowed width and height in pixels after downscaling
        timeout: Fetch timeout in seconds, None for no limit
        centered: Center the build horizontally on the origin
        forceload: Prepend a region-load hint covering the build area
        resample: Downscaling filter name
    """
    mode: Optional[Union[BuildMode, str]] = None
    scale: int = 1
    depth: int = 1
    max_depth: int = 10
    invert: bool = False
    facing: Union[Facing, str] = Facing.SOUTH
    max_size: int = 100
    timeout: Optional[float] = None
    centered: bool = False
    forceload: bool = False
    resample: str = "nearest"

    def resolved_mode(self) -> BuildMode:
        if self.mode is None:
            return BuildMode.WALL if self.depth <= 1 else BuildMode.EXTRUSION
        if isinstance(self.mode, BuildMode):
            return self.mode
        return BuildMode(str(self.mode).lower())


@dataclass
class ImageBuildResult:
    """
    Output of an image build.

    Attributes:
        instructions: Ordered instructions, forceload hint first if requested
        dimensions: (width, height, depth) of the build in blocks
        origin: World position of the bottom-left corner after centering
    """
    instructions: List[Instruction] = field(default_factory=list)
    dimensions: Tuple[int, int, int] = (0, 0, 0)
    origin: Optional[Origin] = None

    @property
    def instruction_count(self) -> int:
        return len(self.instructions)


class ImageVoxelGenerator:
    """
    High-level interface for image builds.

    Methods chain; build() must come after an image has been loaded.
    """

    def __init__(self, alpha_threshold: int = DEFAULT_ALPHA_THRESHOLD):
        """
        Initialize the generator.

        Args:
            alpha_threshold: Pixels with alpha > threshold become blocks
        """
        self.alpha_threshold = alpha_threshold

        self._grid: Optional[PixelGrid] = None
        self._mode = BuildMode.WALL
        self._depth = 1
        self._max_depth = 10
        self._invert = False
        self._facing = Facing.SOUTH
        self._scale = 1

    @property
    def grid(self) -> Optional[PixelGrid]:
        return self._grid

    def load_grid(self, grid: PixelGrid) -> "ImageVoxelGenerator":
        """
        Use already decoded pixels.

        Args:
            grid: PixelGrid, RGBA array or PIL image

        Returns:
            self for method chaining
        """
        self._grid = as_pixel_grid(grid)
        return self

    def load_pixel_art(self, name: str) -> "ImageVoxelGenerator":
        """
        Use a built-in pattern (heart, star, smiley).

        Raises:
            KeyError: If no pattern has that name
        """
        grid = get_pixel_art(name)
        if grid is None:
            raise KeyError(f"Unknown pixel art pattern: {name}")
        self._grid = grid
        return self

    async def fetch(
        self,
        url: str,
        fetcher: Optional[ImageFetcher] = None,
        max_size: int = 100,
        timeout: Optional[float] = None,
        resample: str = "nearest"
    ) -> "ImageVoxelGenerator":
        """
        Fetch, decode and downscale an image.

        Raises:
            FetchError, FetchTimeout, DecodeError
        """
        self._grid = await fetch_pixels(
            url,
            fetcher=fetcher,
            max_width=max_size,
            max_height=max_size,
            timeout=timeout,
            resample=resample,
        )
        return self

    def set_mode(
        self,
        mode: Union[str, BuildMode],
        depth: int = 1,
        max_depth: int = 10,
        invert: bool = False
    ) -> "ImageVoxelGenerator":
        """
        Configure the projection.

        Args:
            mode: "wall", "extrusion" or "relief"
            depth: Extrusion depth
            max_depth: Relief depth for the brightest pixels
            invert: Relief only, carve dark pixels deepest

        Returns:
            self for method chaining
        """
        self._mode = BuildMode(mode.lower()) if isinstance(mode, str) else mode
        self._depth = max(1, int(depth))
        self._max_depth = max(1, int(max_depth))
        self._invert = invert
        return self

    def set_placement(self, facing: Union[str, Facing] = Facing.SOUTH, scale: int = 1) -> "ImageVoxelGenerator":
        self._facing = Facing.parse(facing)
        self._scale = max(1, int(scale))
        return self

    def _depth_estimator(self) -> DepthEstimator:
        if self._mode == BuildMode.RELIEF:
            return DepthEstimator(DepthMode.LUMINOSITY, self._max_depth, self._invert)
        if self._mode == BuildMode.EXTRUSION:
            return DepthEstimator(DepthMode.FLAT, self._depth)
        return DepthEstimator(DepthMode.FLAT, 1)

    def _depth_extent(self) -> int:
        if self._mode == BuildMode.RELIEF:
            return self._max_depth
        if self._mode == BuildMode.EXTRUSION:
            return self._depth
        return 1

    def build(
        self,
        origin: Origin,
        centered: bool = False,
        with_forceload: bool = False
    ) -> ImageBuildResult:
        """
        Project the loaded image into instructions.

        Args:
            origin: Bottom-left corner, or bottom center when centered
            centered: Shift the build so it is centered on the origin
            with_forceload: Prepend a forceload hint for the build area

        Returns:
            ImageBuildResult

        Raises:
            RuntimeError: If no image has been loaded
        """
        if self._grid is None:
            raise RuntimeError("No image loaded. Call load_grid(), load_pixel_art() or fetch() first.")

        width = self._grid.width * self._scale
        height = self._grid.height * self._scale
        depth = self._depth_extent()

        if centered:
            origin = centered_origin(self._facing, origin, width)

        voxelizer = Voxelizer(self._facing, self._scale, self.alpha_threshold)
        instructions = voxelizer.project(
            self._grid,
            origin,
            self._depth_estimator(),
            as_wall=self._mode == BuildMode.WALL,
        )

        if with_forceload:
            x1, z1, x2, z2 = footprint(self._facing, origin, width, depth)
            hint = forceload(
                x1 - FORCELOAD_MARGIN, z1 - FORCELOAD_MARGIN,
                x2 + FORCELOAD_MARGIN, z2 + FORCELOAD_MARGIN,
            )
            instructions = annotate([hint], "Load build area", FORCELOAD_DELAY_MS) + instructions

        logger.info(
            "Generated %d commands for %dx%d image (scale: %dx, mode: %s)",
            len(instructions), self._grid.width, self._grid.height, self._scale, self._mode.value,
        )
        return ImageBuildResult(instructions, (width, height, depth), origin)

    def configure(self, options: ImageBuildOptions) -> "ImageVoxelGenerator":
        """Apply projection and placement settings from an options object."""
        self.set_mode(options.resolved_mode(), options.depth, options.max_depth, options.invert)
        return self.set_placement(options.facing, options.scale)


def build_from_grid(
    grid: PixelGrid,
    origin: Origin,
    options: Optional[ImageBuildOptions] = None
) -> ImageBuildResult:
    """
    Build an image that is already in memory.

    The grid is downscaled to options.max_size first.
    """
    options = options or ImageBuildOptions()
    grid = as_pixel_grid(grid).downscale(options.max_size, options.max_size, options.resample)
    generator = ImageVoxelGenerator().load_grid(grid).configure(options)
    return generator.build(origin, options.centered, options.forceload)


def build_builtin(
    name: str,
    origin: Origin,
    options: Optional[ImageBuildOptions] = None
) -> ImageBuildResult:
    """
    Build a built-in pixel-art pattern.

    Unknown names log a warning and produce an empty result.
    """
    grid = get_pixel_art(name)
    if grid is None:
        logger.warning("Unknown image pattern: %s", name)
        return ImageBuildResult()
    return build_from_grid(grid, origin, options)


async def fetch_and_build(
    source: str,
    origin: Origin = (0, 65, 0),
    options: Optional[ImageBuildOptions] = None,
    fetcher: Optional[ImageFetcher] = None
) -> ImageBuildResult:
    """
    Fetch an image and build it.

    Args:
        source: Image URL, local image path, or the name of a built-in pattern
        origin: Bottom-left corner (bottom center when options.centered)
        options: Build settings
        fetcher: Async callable mapping a source to a PixelGrid (defaults to
            URLs over HTTP and local paths from disk)

    Returns:
        ImageBuildResult; nothing is returned if the fetch fails

    Raises:
        FetchError: Source unreachable or returned an error status
        FetchTimeout: options.timeout elapsed
        DecodeError: Data was not a decodable image
    """
    options = options or ImageBuildOptions()
    builtin = get_pixel_art(source)
    if builtin is not None:
        return build_from_grid(builtin, origin, options)

    logger.info("Fetching image from: %s", source)
    generator = ImageVoxelGenerator()
    await generator.fetch(source, fetcher, options.max_size, options.timeout, options.resample)
    return generator.configure(options).build(origin, options.centered, options.forceload)


async def carve_silhouettes(
    front: str,
    side: str,
    center: Origin,
    max_size: int = 64,
    block: Optional[str] = None,
    fetcher: Optional[ImageFetcher] = None,
    timeout: Optional[float] = None
) -> ImageBuildResult:
    """
    Build a statue from a front and a side silhouette.

    Both images are fetched concurrently. A voxel exists where both
    silhouettes are opaque.

    Args:
        front: URL or path of the front view
        side: URL or path of the side view
        center: World position of the statue's base center
        max_size: Largest allowed width and height of each image
        block: Block for every voxel, None to color from the front view
        fetcher: Async image fetcher (defaults to URLs over HTTP and local
            paths from disk)
        timeout: Per-image fetch timeout in seconds

    Returns:
        ImageBuildResult with setblocks in (y, x, z) order

    Raises:
        FetchError, FetchTimeout, DecodeError
    """
    front_grid, side_grid = await asyncio.gather(
        fetch_pixels(front, fetcher, max_size, max_size, timeout),
        fetch_pixels(side, fetcher, max_size, max_size, timeout),
    )

    instructions, dimensions = Voxelizer().carve(front_grid, side_grid, center, block)
    logger.info("Carved statue %dx%dx%d with %d blocks", *dimensions, len(instructions))
    return ImageBuildResult(instructions, dimensions, center)
