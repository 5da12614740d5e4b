"""
Unit tests for the image pipeline: ingestion, depth, projection and builds.
"""

import asyncio
import io
import sys
import tempfile
from pathlib import Path
from unittest import mock
import numpy as np
import requests
import unittest
from PIL import Image

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from buildgen.depth import DepthEstimator, DepthMode
from buildgen.errors import DecodeError, FetchError, FetchTimeout
from buildgen.generator import (
    BuildMode,
    ImageBuildOptions,
    ImageVoxelGenerator,
    build_builtin,
    carve_silhouettes,
    fetch_and_build,
)
from buildgen.ingestion import (
    FileImageFetcher,
    HttpImageFetcher,
    PixelGrid,
    SourceImageFetcher,
    decode_image,
    fetch_pixels,
    fit_within,
)
from buildgen.pixel_art import checkerboard, get_pixel_art, gradient, list_pixel_art
from buildgen.projection import Facing
from buildgen.voxelizer import Voxelizer, intersect_silhouettes

RED = (142, 33, 33)


def solid(width, height, color=RED, alpha=255):
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, :3] = color
    pixels[:, :, 3] = alpha
    return PixelGrid(pixels)


def png_bytes(width=3, height=2, color=(10, 20, 30)):
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def texts(instructions):
    return [i.text for i in instructions]


def fake_fetcher(grids):
    async def fetch(url):
        return grids[url]
    return fetch


class TestPixelGrid(unittest.TestCase):
    """Tests for PixelGrid and downscaling."""

    def test_rejects_non_rgba(self):
        with self.assertRaises(ValueError):
            PixelGrid(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_opaque_mask_threshold(self):
        pixels = np.zeros((1, 2, 4), dtype=np.uint8)
        pixels[0, 0, 3] = 127
        pixels[0, 1, 3] = 128
        mask = PixelGrid(pixels).opaque_mask()
        assert list(mask[0]) == [False, True]

    def test_fit_within(self):
        assert fit_within(200, 100, 100, 100) == (100, 50)
        assert fit_within(100, 300, 100, 100) == (33, 100)
        assert fit_within(1000, 1, 100, 100) == (100, 1)
        assert fit_within(40, 30, 100, 100) == (40, 30)

    def test_downscale(self):
        grid = solid(200, 100)
        small = grid.downscale(50, 50)
        assert small.shape == (50, 25)
        assert small.opaque_mask().all()

    def test_downscale_never_enlarges(self):
        grid = solid(10, 10)
        assert grid.downscale(50, 50) is grid


class TestDecode(unittest.TestCase):
    """Tests for decode_image."""

    def test_png(self):
        grid = decode_image(png_bytes())
        assert grid.shape == (3, 2)
        assert tuple(grid.pixels[0, 0]) == (10, 20, 30, 255)

    def test_garbage(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_image(b"not an image", "http://example.com/x.png")
        assert ctx.exception.source == "http://example.com/x.png"


class TestDepthEstimator(unittest.TestCase):
    """Tests for depth estimation."""

    def test_flat_depth(self):
        mask = np.array([[True, False]])
        depth = DepthEstimator(DepthMode.FLAT, max_depth=3).estimate(mask)
        assert depth.tolist() == [[3, 0]]

    def test_luminosity_depth(self):
        pixels = np.array([[[255, 255, 255, 255], [0, 0, 0, 255]]], dtype=np.uint8)
        mask = np.array([[True, True]])

        depth = DepthEstimator(DepthMode.LUMINOSITY, max_depth=4).estimate(mask, pixels)
        assert depth.tolist() == [[4, 1]]

        inverted = DepthEstimator(DepthMode.LUMINOSITY, max_depth=4, invert=True).estimate(mask, pixels)
        assert inverted.tolist() == [[1, 4]]

    def test_luminosity_needs_colors(self):
        with self.assertRaises(ValueError):
            DepthEstimator(DepthMode.LUMINOSITY).estimate(np.ones((2, 2), dtype=bool))


class TestProjection(unittest.TestCase):
    """Tests for wall, extrusion and relief builds."""

    def test_rows_are_flipped(self):
        """Row 0 is the top of the image and ends up highest."""
        pixels = np.zeros((2, 2, 4), dtype=np.uint8)
        pixels[0, 0] = (*RED, 255)

        result = ImageVoxelGenerator().load_grid(PixelGrid(pixels)).build((0, 65, 0))

        assert texts(result.instructions) == ["setblock 0 66 0 red_concrete"]
        assert result.dimensions == (2, 2, 1)

    def test_wall_order(self):
        result = ImageVoxelGenerator().load_grid(solid(2, 2)).build((0, 65, 0))

        assert texts(result.instructions) == [
            "setblock 0 65 0 red_concrete",
            "setblock 1 65 0 red_concrete",
            "setblock 0 66 0 red_concrete",
            "setblock 1 66 0 red_concrete",
        ]

    def test_transparent_pixels_are_skipped(self):
        result = ImageVoxelGenerator().load_grid(solid(3, 3, alpha=127)).build((0, 65, 0))
        assert result.instructions == []

    def test_extrusion_facings(self):
        expected = {
            "south": "fill 0 65 0 0 65 2 red_concrete",
            "north": "fill 0 65 -2 0 65 0 red_concrete",
            "east": "fill 0 65 0 2 65 0 red_concrete",
            "west": "fill -2 65 0 0 65 0 red_concrete",
        }
        for facing, text in expected.items():
            generator = ImageVoxelGenerator().load_grid(solid(1, 1))
            generator.set_mode("extrusion", depth=3).set_placement(facing)
            result = generator.build((0, 65, 0))
            assert texts(result.instructions) == [text], facing
            assert result.dimensions == (1, 1, 3)

    def test_east_facing_spans_z(self):
        generator = ImageVoxelGenerator().load_grid(solid(2, 1)).set_placement("east")
        assert texts(generator.build((0, 65, 0)).instructions) == [
            "setblock 0 65 0 red_concrete",
            "setblock 0 65 1 red_concrete",
        ]

    def test_scaled_wall_uses_fills(self):
        generator = ImageVoxelGenerator().load_grid(solid(1, 1)).set_placement("south", scale=2)
        result = generator.build((0, 65, 0))
        assert texts(result.instructions) == ["fill 0 65 0 1 66 0 red_concrete"]
        assert result.dimensions == (2, 2, 1)

    def test_relief(self):
        pixels = np.array([[[255, 255, 255, 255], [0, 0, 0, 255]]], dtype=np.uint8)
        generator = ImageVoxelGenerator().load_grid(PixelGrid(pixels)).set_mode("relief", max_depth=4)
        result = generator.build((0, 65, 0))

        assert texts(result.instructions) == [
            "fill 0 65 0 0 65 3 white_stained_glass",
            "fill 1 65 0 1 65 0 black_concrete",
        ]
        assert result.dimensions == (2, 1, 4)

    def test_relief_inverted(self):
        pixels = np.array([[[255, 255, 255, 255], [0, 0, 0, 255]]], dtype=np.uint8)
        generator = ImageVoxelGenerator().load_grid(PixelGrid(pixels))
        generator.set_mode("relief", max_depth=4, invert=True)

        assert texts(generator.build((0, 65, 0)).instructions) == [
            "fill 0 65 0 0 65 0 white_stained_glass",
            "fill 1 65 0 1 65 3 black_concrete",
        ]

    def test_centered(self):
        result = ImageVoxelGenerator().load_grid(solid(4, 1)).build((10, 65, 0), centered=True)
        assert result.origin == (8, 65, 0)
        assert result.instructions[0].text == "setblock 8 65 0 red_concrete"

        generator = ImageVoxelGenerator().load_grid(solid(4, 1)).set_placement("west")
        assert generator.build((10, 65, 0), centered=True).origin == (10, 65, -2)

    def test_forceload_hint(self):
        result = ImageVoxelGenerator().load_grid(solid(2, 1)).build((0, 65, 0), with_forceload=True)
        hint = result.instructions[0]

        assert hint.text == "forceload add -16 -16 17 16"
        assert hint.delay_ms == 2000
        assert hint.description == "Load build area"
        assert result.instruction_count == 3

    def test_forceload_covers_depth(self):
        generator = ImageVoxelGenerator().load_grid(solid(2, 1))
        generator.set_mode("extrusion", depth=3).set_placement("north")
        result = generator.build((0, 65, 0), with_forceload=True)
        assert result.instructions[0].text == "forceload add -16 -18 17 16"

    def test_build_without_image(self):
        with self.assertRaises(RuntimeError):
            ImageVoxelGenerator().build((0, 65, 0))

    def test_resolved_mode(self):
        assert ImageBuildOptions().resolved_mode() == BuildMode.WALL
        assert ImageBuildOptions(depth=3).resolved_mode() == BuildMode.EXTRUSION
        assert ImageBuildOptions(mode="Relief").resolved_mode() == BuildMode.RELIEF

    def test_unknown_facing_defaults_to_south(self):
        assert Facing.parse("up") == Facing.SOUTH
        assert Facing.parse("East") == Facing.EAST


class TestPixelArt(unittest.TestCase):
    """Tests for built-in patterns."""

    def test_library(self):
        assert list_pixel_art() == ["heart", "smiley", "star"]
        assert get_pixel_art(" Heart ") is get_pixel_art("heart")
        assert get_pixel_art("dragon") is None

    def test_opaque_counts(self):
        assert int(get_pixel_art("heart").opaque_mask().sum()) == 62
        assert int(get_pixel_art("star").opaque_mask().sum()) == 40
        assert get_pixel_art("smiley").shape == (8, 8)

    def test_library_grids_are_read_only(self):
        assert not get_pixel_art("heart").pixels.flags.writeable

    def test_build_builtin(self):
        result = build_builtin("heart", (0, 70, 0))
        assert result.instruction_count == 62
        assert all(text.endswith(" redstone_block") for text in texts(result.instructions))

    def test_unknown_builtin(self):
        assert build_builtin("dragon", (0, 70, 0)).instruction_count == 0
        with self.assertRaises(KeyError):
            ImageVoxelGenerator().load_pixel_art("dragon")

    def test_checkerboard(self):
        grid = checkerboard(3, 2)
        assert tuple(grid.pixels[0, 0]) == (255, 255, 255, 255)
        assert tuple(grid.pixels[0, 1]) == (0, 0, 0, 255)
        assert tuple(grid.pixels[1, 0]) == (0, 0, 0, 255)
        assert tuple(grid.pixels[1, 1]) == (255, 255, 255, 255)

        wide = checkerboard(4, 4, size=2)
        assert tuple(wide.pixels[0, 1, :3]) == (255, 255, 255)
        assert tuple(wide.pixels[0, 2, :3]) == (0, 0, 0)

    def test_gradient(self):
        grid = gradient(4, 2)
        assert grid.pixels[0, 0, 0] == 0
        assert grid.pixels[0, 3, 0] == 191
        assert grid.pixels[1, 0, 1] == 127
        assert (grid.pixels[:, :, 2] == 128).all()
        assert grid.opaque_mask().all()


class TestSilhouettes(unittest.TestCase):
    """Tests for dual-view carving."""

    def test_intersect(self):
        front = np.array([[True, False]])
        side = np.array([[True, True, False]])
        volume = intersect_silhouettes(front, side)

        assert volume.shape == (1, 2, 3)
        assert volume.sum() == 2

    def test_carve_crops_to_top_rows(self):
        pixels = np.zeros((3, 1, 4), dtype=np.uint8)
        pixels[:2] = (*RED, 255)
        front = PixelGrid(pixels)
        side = solid(1, 2)

        commands, dimensions = Voxelizer().carve(front, side, (0, 65, 0))

        assert texts(commands) == [
            "setblock 0 65 0 red_concrete",
            "setblock 0 66 0 red_concrete",
        ]
        assert dimensions == (1, 2, 1)


class TestFetch(unittest.IsolatedAsyncioTestCase):
    """Tests for fetched image builds."""

    async def test_fetch_and_build_downscales(self):
        fetcher = fake_fetcher({"http://img/a.png": solid(20, 10)})
        result = await fetch_and_build("http://img/a.png", (0, 65, 0), ImageBuildOptions(max_size=10), fetcher)

        assert result.dimensions == (10, 5, 1)
        assert result.instruction_count == 50

    async def test_builtin_name_skips_fetch(self):
        async def fetcher(url):
            raise AssertionError("should not fetch")

        result = await fetch_and_build("heart", (0, 70, 0), fetcher=fetcher)
        assert result.instruction_count == 62

    async def test_timeout(self):
        async def slow(url):
            await asyncio.sleep(10)

        with self.assertRaises(FetchTimeout):
            await fetch_and_build("http://img/slow.png", options=ImageBuildOptions(timeout=0.01), fetcher=slow)

    async def test_fetch_error_propagates(self):
        async def broken(url):
            raise FetchError(url, "404 Not Found")

        with self.assertRaises(FetchError):
            await fetch_and_build("http://img/missing.png", fetcher=broken)

    async def test_carve_silhouettes(self):
        fetcher = fake_fetcher({"front": solid(3, 2), "side": solid(2, 2)})
        result = await carve_silhouettes("front", "side", (0, 65, 0), block="stone", fetcher=fetcher)

        assert result.instruction_count == 12
        assert result.dimensions == (3, 2, 2)
        assert texts(result.instructions[:2]) == [
            "setblock -1 65 -1 stone",
            "setblock -1 65 0 stone",
        ]


class TestHttpImageFetcher(unittest.IsolatedAsyncioTestCase):
    """Tests for the requests-based fetcher."""

    def session_returning(self, content):
        response = mock.Mock(content=content)
        session = mock.Mock()
        session.get.return_value = response
        return session

    async def test_fetch(self):
        session = self.session_returning(png_bytes())
        grid = await HttpImageFetcher(request_timeout=5, session=session)("http://img/a.png")

        assert grid.shape == (3, 2)
        _, kwargs = session.get.call_args
        assert kwargs["timeout"] == 5
        assert kwargs["headers"]["User-Agent"] == "buildgen/1.0"

    async def test_timeout(self):
        session = mock.Mock()
        session.get.side_effect = requests.Timeout()

        with self.assertRaises(FetchTimeout):
            await HttpImageFetcher(session=session)("http://img/a.png")

    async def test_connection_error(self):
        session = mock.Mock()
        session.get.side_effect = requests.ConnectionError("refused")

        with self.assertRaises(FetchError) as ctx:
            await HttpImageFetcher(session=session)("http://img/a.png")
        assert not isinstance(ctx.exception, FetchTimeout)

    async def test_http_error_status(self):
        session = self.session_returning(b"")
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("404")

        with self.assertRaises(FetchError):
            await HttpImageFetcher(session=session)("http://img/a.png")

    async def test_not_an_image(self):
        session = self.session_returning(b"<html></html>")

        with self.assertRaises(DecodeError):
            await HttpImageFetcher(session=session)("http://img/a.png")

    async def test_own_session_is_closed(self):
        session = self.session_returning(png_bytes())
        with mock.patch("buildgen.ingestion.requests.Session") as session_cls:
            session_cls.return_value.__enter__.return_value = session
            grid = await HttpImageFetcher()("http://img/a.png")

        assert grid.shape == (3, 2)
        session.get.assert_called_once()
        session_cls.return_value.__exit__.assert_called_once()


class TestFileImageFetcher(unittest.IsolatedAsyncioTestCase):
    """Tests for reading images from disk."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    async def test_reads_png(self):
        path = self.dir / "front.png"
        path.write_bytes(png_bytes(4, 5))

        grid = await FileImageFetcher()(str(path))
        assert grid.shape == (4, 5)

    async def test_missing_file(self):
        with self.assertRaises(FetchError):
            await FileImageFetcher()(str(self.dir / "missing.png"))

    async def test_not_an_image(self):
        path = self.dir / "notes.png"
        path.write_text("not a png", encoding="utf-8")

        with self.assertRaises(DecodeError):
            await FileImageFetcher()(str(path))


class TestSourceImageFetcher(unittest.IsolatedAsyncioTestCase):
    """Tests for routing sources to the right fetcher."""

    def test_is_url(self):
        assert SourceImageFetcher.is_url("http://img/a.png")
        assert SourceImageFetcher.is_url("HTTPS://img/a.png")
        assert not SourceImageFetcher.is_url("front.png")
        assert not SourceImageFetcher.is_url("/tmp/front.png")
        assert not SourceImageFetcher.is_url("C:\\images\\front.png")

    async def test_routes_by_scheme(self):
        http = mock.AsyncMock(return_value=solid(1, 1))
        files = mock.AsyncMock(return_value=solid(2, 2))
        fetcher = SourceImageFetcher(http=http, files=files)

        assert (await fetcher("https://img/a.png")).shape == (1, 1)
        assert (await fetcher("art/front.png")).shape == (2, 2)
        http.assert_awaited_once_with("https://img/a.png")
        files.assert_awaited_once_with("art/front.png")

    async def test_fetch_pixels_reads_local_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logo.png"
            path.write_bytes(png_bytes(20, 10))

            grid = await fetch_pixels(str(path), max_width=10, max_height=10)

        assert grid.shape == (10, 5)


if __name__ == "__main__":
    unittest.main(verbosity=2)
