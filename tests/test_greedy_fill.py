"""
Unit tests for greedy fill merging.
"""

import sys
from pathlib import Path
import numpy as np
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from buildgen.greedy_fill import EMPTY, _greedy_rectangles, optimize_instructions
from buildgen.instructions import Instruction, annotate, fill, setblock


def texts(instructions):
    return [i.text for i in instructions]


def placed_blocks(instructions):
    """Expand setblocks and fills into a {(x, y, z): block} map."""
    world = {}
    for instruction in instructions:
        parts = instruction.text.split()
        if parts[0] == "setblock":
            x, y, z = (int(v) for v in parts[1:4])
            world[(x, y, z)] = parts[4]
        elif parts[0] == "fill":
            x1, y1, z1, x2, y2, z2 = (int(v) for v in parts[1:7])
            for x in range(x1, x2 + 1):
                for y in range(y1, y2 + 1):
                    for z in range(z1, z2 + 1):
                        world[(x, y, z)] = parts[7]
    return world


class TestGreedyRectangles(unittest.TestCase):
    """Tests for the JIT rectangle cover."""

    def test_single_block_type(self):
        grid = np.zeros((4, 3), dtype=np.int32)
        rects = _greedy_rectangles(grid)
        assert rects.tolist() == [[0, 0, 4, 3, 0]]

    def test_empty_cells(self):
        grid = np.full((2, 2), EMPTY, dtype=np.int32)
        assert len(_greedy_rectangles(grid)) == 0

    def test_covers_every_cell_once(self):
        rng = np.random.default_rng(3)
        grid = rng.integers(-1, 3, size=(8, 8)).astype(np.int32)
        covered = np.zeros_like(grid)

        for x, z, sx, sz, value in _greedy_rectangles(grid):
            assert (grid[x:x + sx, z:z + sz] == value).all()
            covered[x:x + sx, z:z + sz] += 1

        assert (covered[grid != EMPTY] == 1).all()
        assert (covered[grid == EMPTY] == 0).all()


class TestOptimizeInstructions(unittest.TestCase):
    """Tests for optimize_instructions()."""

    def test_merges_square(self):
        commands = [setblock(x, 64, z, "stone") for x in range(3) for z in range(3)]
        assert texts(optimize_instructions(commands)) == ["fill 0 64 0 2 64 2 stone"]

    def test_same_blocks_placed(self):
        commands = [
            setblock(x, y, z, "stone" if (x + z) % 3 else "glass")
            for y in range(64, 67) for x in range(5) for z in range(4)
        ]
        optimized = optimize_instructions(commands)

        assert len(optimized) < len(commands)
        assert placed_blocks(optimized) == placed_blocks(commands)

    def test_layers_ascend(self):
        commands = [setblock(0, 66, 0, "a"), setblock(0, 64, 0, "b"), setblock(0, 65, 0, "c")]
        assert texts(optimize_instructions(commands)) == [
            "setblock 0 64 0 b",
            "setblock 0 65 0 c",
            "setblock 0 66 0 a",
        ]

    def test_last_write_wins(self):
        commands = [setblock(0, 64, 0, "stone"), setblock(1, 64, 0, "stone"), setblock(0, 64, 0, "glass")]
        assert placed_blocks(optimize_instructions(commands)) == {
            (0, 64, 0): "glass",
            (1, 64, 0): "stone",
        }

    def test_barriers_keep_position(self):
        commands = [
            setblock(0, 64, 0, "stone"),
            setblock(1, 64, 0, "stone"),
            fill(0, 64, 0, 5, 64, 5, "air"),
            setblock(0, 64, 0, "glass"),
        ]
        assert texts(optimize_instructions(commands)) == [
            "fill 0 64 0 1 64 0 stone",
            "fill 0 64 0 5 64 5 air",
            "setblock 0 64 0 glass",
        ]

    def test_annotated_setblocks_are_untouched(self):
        commands = annotate([setblock(0, 64, 0, "stone"), setblock(1, 64, 0, "stone")], "Step", 50)
        assert optimize_instructions(commands) == commands

    def test_raw_commands_pass_through(self):
        commands = [Instruction("forceload add 0 0 16 16"), setblock(0, 64, 0, "stone")]
        assert optimize_instructions(commands) == commands

    def test_oversized_layer_is_left_unmerged(self):
        commands = [setblock(0, 64, 0, "stone"), setblock(99, 64, 99, "stone")]
        result = optimize_instructions(commands, max_layer_area=100)
        assert texts(result) == ["setblock 0 64 0 stone", "setblock 99 64 99 stone"]


if __name__ == "__main__":
    unittest.main(verbosity=2)
