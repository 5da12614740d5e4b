"""
Depth Estimation Module

Assigns an extrusion depth, in blocks, to every opaque pixel:
1. Flat - Constant depth for all opaque pixels (walls and extrusions)
2. Luminosity - Brighter pixels stand further out (reliefs)

Transparent pixels always get depth 0 and never produce blocks.
"""

from enum import Enum
from typing import Optional
import numpy as np


class DepthMode(Enum):
    """Available depth strategies."""
    FLAT = "flat"               # Constant depth
    LUMINOSITY = "luminosity"   # Brightness-based


# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def luminance(rgb: np.ndarray) -> np.ndarray:
    """
    Perceived brightness of each pixel.

    Args:
        rgb: Array of shape (H, W, 3) or (H, W, 4); alpha is ignored

    Returns:
        Float array of shape (H, W) in [0, 255]
    """
    return rgb[..., :3].astype(np.float64) @ LUMA_WEIGHTS


class DepthEstimator:
    """
    Depth engine for pixel-to-voxel projection.

    The estimator takes a binary mask and produces a depth map where each
    opaque pixel is assigned a positive number of block layers.
    """

    def __init__(
        self,
        mode: DepthMode = DepthMode.FLAT,
        max_depth: int = 1,
        invert: bool = False
    ):
        """
        Initialize the depth estimator.

        Args:
            mode: Depth strategy
            max_depth: Constant depth for FLAT, brightest depth for LUMINOSITY
            invert: If True, dark pixels stand out instead of bright ones
        """
        self.mode = mode
        self.max_depth = max(1, int(max_depth))
        self.invert = invert

    def estimate(
        self,
        mask: np.ndarray,
        color_image: Optional[np.ndarray] = None
    ) -> np.ndarray:
        """
        Estimate depth for all pixels in the mask.

        Args:
            mask: Binary mask where True = opaque pixel
            color_image: RGB(A) image, required for LUMINOSITY

        Returns:
            Int32 depth map, 0 for transparent pixels and at least 1 elsewhere
        """
        if self.mode == DepthMode.FLAT:
            depth = np.full(mask.shape, self.max_depth, dtype=np.int32)
        elif self.mode == DepthMode.LUMINOSITY:
            if color_image is None:
                raise ValueError("Color image required for luminosity depth mode")
            depth = self._luminosity_depth(color_image)
        else:
            raise ValueError(f"Unknown depth mode: {self.mode}")

        return np.where(mask, depth, 0).astype(np.int32)

    def _luminosity_depth(self, color_image: np.ndarray) -> np.ndarray:
        """
        Depth proportional to brightness, rounded half up and clamped to 1.
        """
        brightness = luminance(color_image) / 255.0
        depth = np.floor(brightness * self.max_depth + 0.5).astype(np.int32)

        if self.invert:
            depth = self.max_depth - depth

        return np.maximum(depth, 1)
