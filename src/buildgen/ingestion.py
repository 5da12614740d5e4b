"""
Image Ingestion Module

This module handles:
- Decoding fetched image bytes into RGBA pixel grids (Pillow)
- Proportional downscaling so builds stay within a size limit
- Binary alpha thresholding (a pixel either becomes a block or it doesn't)
- The default fetcher: HTTP(S) URLs through requests, anything else read
  from the local filesystem, both run off the event loop in an executor

Row 0 of a PixelGrid is the top of the source image. Consumers that map
rows to world height must flip vertically.
"""

import asyncio
import io
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional, Tuple, Union
from urllib.parse import urlparse

import numpy as np
import requests
from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, FetchError, FetchTimeout

logger = logging.getLogger(__name__)

# Pixels with alpha > threshold are opaque, i.e. alpha >= 128
DEFAULT_ALPHA_THRESHOLD = 127

RESAMPLE_FILTERS = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


@dataclass
class PixelGrid:
    """
    Decoded RGBA image.

    Attributes:
        pixels: Array of shape (H, W, 4), uint8, row 0 at the top
    """
    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(f"expected (H, W, 4) RGBA pixels, got shape {self.pixels.shape}")
        self.pixels = np.ascontiguousarray(self.pixels, dtype=np.uint8)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        """(width, height) in pixels."""
        return (self.width, self.height)

    def opaque_mask(self, alpha_threshold: int = DEFAULT_ALPHA_THRESHOLD) -> np.ndarray:
        """Boolean (H, W) mask of pixels that become blocks."""
        return self.pixels[:, :, 3] > alpha_threshold

    def bottom_up(self) -> np.ndarray:
        """Pixels with row 0 at the bottom, matching world Y."""
        return self.pixels[::-1]

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelGrid":
        """Convert any PIL image to an RGBA grid."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(np.array(image, dtype=np.uint8))

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels, mode="RGBA")

    def downscale(
        self,
        max_width: int,
        max_height: int,
        resample: str = "nearest"
    ) -> "PixelGrid":
        """
        Shrink proportionally so neither dimension exceeds the maximum.

        Images already within bounds are returned unchanged; images are never
        enlarged.

        Args:
            max_width: Maximum width in pixels
            max_height: Maximum height in pixels
            resample: Resampling filter name (see RESAMPLE_FILTERS)

        Returns:
            PixelGrid within the bounds
        """
        target = fit_within(self.width, self.height, max_width, max_height)
        if target == (self.width, self.height):
            return self

        resized = self.to_image().resize(target, RESAMPLE_FILTERS[resample])
        logger.debug("Downscaled %dx%d -> %dx%d", self.width, self.height, *target)
        return PixelGrid.from_image(resized)


def fit_within(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """
    Target size for a proportional downscale.

    Width is clamped first and height follows, then height is clamped and
    width follows. Each dependent dimension is rounded half up and never
    drops below one pixel.
    """
    if width > max_width:
        ratio = max_width / width
        width = max_width
        height = max(1, math.floor(height * ratio + 0.5))

    if height > max_height:
        ratio = max_height / height
        height = max_height
        width = max(1, math.floor(width * ratio + 0.5))

    return (width, height)


def decode_image(data: bytes, source: str = "<bytes>") -> PixelGrid:
    """
    Decode image bytes with Pillow.

    Args:
        data: Encoded image (PNG, JPEG, GIF, ...)
        source: Name used in error messages

    Returns:
        PixelGrid of the first frame

    Raises:
        DecodeError: If Pillow cannot read the data
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            return PixelGrid.from_image(image)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(source, f"could not decode image ({e})") from e


ImageFetcher = Callable[[str], Awaitable[PixelGrid]]


class HttpImageFetcher:
    """
    HTTP(S) image fetcher.

    Downloads with requests in the event loop's default executor, then
    decodes with Pillow in the same executor so neither blocks the loop.
    """

    def __init__(
        self,
        request_timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        user_agent: str = "buildgen/1.0"
    ):
        """
        Initialize the fetcher.

        Args:
            request_timeout: Per-request socket timeout in seconds
            session: Optional shared requests session. Without one, each
                download opens and closes its own session.
            user_agent: User-Agent header sent with each request
        """
        self.request_timeout = request_timeout
        self.session = session
        self.user_agent = user_agent

    def _get(self, session: requests.Session, url: str) -> requests.Response:
        response = session.get(
            url,
            timeout=self.request_timeout,
            headers={"User-Agent": self.user_agent},
        )
        response.raise_for_status()
        return response

    def _download(self, url: str) -> bytes:
        try:
            if self.session is not None:
                response = self._get(self.session, url)
            else:
                with requests.Session() as session:
                    response = self._get(session, url)
        except requests.Timeout as e:
            raise FetchTimeout(url, "request timed out") from e
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e
        return response.content

    def _fetch_sync(self, url: str) -> PixelGrid:
        data = self._download(url)
        logger.debug("Fetched %d bytes from %s", len(data), url)
        return decode_image(data, url)

    async def __call__(self, url: str) -> PixelGrid:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._fetch_sync, url)


class FileImageFetcher:
    """Reads images from the local filesystem."""

    def _read_sync(self, source: str) -> PixelGrid:
        path = Path(source).expanduser()
        if not path.is_file():
            raise FetchError(source, f"image not found: {path}")
        try:
            data = path.read_bytes()
        except OSError as e:
            raise FetchError(source, f"could not read image ({e})") from e
        logger.debug("Read %d bytes from %s", len(data), path)
        return decode_image(data, source)

    async def __call__(self, source: str) -> PixelGrid:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read_sync, source)


class SourceImageFetcher:
    """
    Fetcher that routes http(s) URLs to an HttpImageFetcher and every
    other source to a FileImageFetcher.
    """

    def __init__(
        self,
        http: Optional[HttpImageFetcher] = None,
        files: Optional[FileImageFetcher] = None
    ):
        self.http = http or HttpImageFetcher()
        self.files = files or FileImageFetcher()

    @staticmethod
    def is_url(source: str) -> bool:
        return urlparse(source).scheme.lower() in ("http", "https")

    async def __call__(self, source: str) -> PixelGrid:
        if self.is_url(source):
            return await self.http(source)
        return await self.files(source)


# Holds no open connections; HttpImageFetcher opens a session per download
DEFAULT_FETCHER = SourceImageFetcher()


async def fetch_pixels(
    url: str,
    fetcher: Optional[ImageFetcher] = None,
    max_width: int = 128,
    max_height: int = 128,
    timeout: Optional[float] = None,
    resample: str = "nearest"
) -> PixelGrid:
    """
    Fetch, decode and downscale an image.

    Fetching is all-or-nothing: on timeout or failure nothing is returned.

    Args:
        url: Image location handed to the fetcher
        fetcher: Async callable returning a PixelGrid (defaults to
            DEFAULT_FETCHER, which handles URLs and local paths)
        max_width: Maximum width after downscaling
        max_height: Maximum height after downscaling
        timeout: Overall timeout in seconds, None for no limit
        resample: Resampling filter for the downscale

    Returns:
        Downscaled PixelGrid

    Raises:
        FetchError: Source unreachable or returned an error
        FetchTimeout: Timeout elapsed
        DecodeError: Data could not be decoded
    """
    fetcher = fetcher or DEFAULT_FETCHER
    try:
        grid = await asyncio.wait_for(fetcher(url), timeout)
    except asyncio.TimeoutError as e:
        raise FetchTimeout(url, f"no image after {timeout}s") from e

    logger.info("Image loaded: %dx%d pixels from %s", grid.width, grid.height, url)
    return grid.downscale(max_width, max_height, resample)


def as_pixel_grid(value: Union[PixelGrid, np.ndarray, Image.Image]) -> PixelGrid:
    """Accept a PixelGrid, an RGBA array or a PIL image."""
    if isinstance(value, PixelGrid):
        return value
    if isinstance(value, Image.Image):
        return PixelGrid.from_image(value)
    return PixelGrid(np.asarray(value))
