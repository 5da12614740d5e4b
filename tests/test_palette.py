"""
Unit tests for block color matching.
"""

import sys
from pathlib import Path
import numpy as np
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from buildgen.palette import (
    BLOCK_IDS,
    BLOCK_PALETTE,
    block_for_index,
    find_closest_block,
    quantize_image,
    reference_color,
)


class TestFindClosestBlock(unittest.TestCase):
    """Tests for nearest-color lookup."""

    def test_exact_reference_colors(self):
        """Every reference color maps back to its own block."""
        for entry in BLOCK_PALETTE:
            assert find_closest_block(*entry.reference_color) == entry.block_id

    def test_red_concrete(self):
        assert find_closest_block(142, 33, 33) == "red_concrete"
        assert find_closest_block(140, 35, 30) == "red_concrete"

    def test_extremes(self):
        assert find_closest_block(255, 255, 255) == "white_stained_glass"
        assert find_closest_block(0, 0, 0) == "black_concrete"
        assert find_closest_block(255, 0, 0) == "redstone_block"

    def test_block_ids_are_unique(self):
        assert len(set(BLOCK_IDS)) == len(BLOCK_IDS)


class TestQuantizeImage(unittest.TestCase):
    """Tests for whole-image quantization."""

    def test_matches_per_pixel_lookup(self):
        rng = np.random.default_rng(7)
        rgba = rng.integers(0, 256, size=(6, 5, 4), dtype=np.uint8)

        indices = quantize_image(rgba)

        assert indices.shape == (6, 5)
        assert indices.dtype == np.int32
        for y in range(6):
            for x in range(5):
                r, g, b = (int(v) for v in rgba[y, x, :3])
                assert block_for_index(indices[y, x]) == find_closest_block(r, g, b)

    def test_alpha_is_ignored(self):
        rgba = np.array([[[142, 33, 33, 0], [142, 33, 33, 255]]], dtype=np.uint8)
        indices = quantize_image(rgba)
        assert indices[0, 0] == indices[0, 1]

    def test_empty_image(self):
        assert quantize_image(np.zeros((0, 0, 4), dtype=np.uint8)).shape == (0, 0)


class TestReferenceColor(unittest.TestCase):

    def test_lookup(self):
        assert reference_color("red_concrete") == (142, 33, 33)
        assert reference_color("bedrock") is None


if __name__ == "__main__":
    unittest.main(verbosity=2)
