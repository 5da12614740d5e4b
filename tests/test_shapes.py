"""
Unit tests for the shape rasterizer.
"""

import sys
from pathlib import Path
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from buildgen.instructions import Instruction, annotate, fill, forceload, setblock
from buildgen.shapes import (
    ShapeCommand,
    arch,
    box,
    cylinder,
    dome,
    parse_shape_command,
    pyramid,
    rasterize,
    ring,
    shape_to_instructions,
    sphere,
    stairs,
)


def texts(instructions):
    return [i.text for i in instructions]


class TestInstructions(unittest.TestCase):
    """Tests for the instruction builders."""

    def test_text_forms(self):
        assert fill(0, 64, 0, 2, 66, 2, "stone").text == "fill 0 64 0 2 66 2 stone"
        assert fill(0, 64, 0, 2, 66, 2, "stone", "hollow").text == "fill 0 64 0 2 66 2 stone hollow"
        assert setblock(1, 2, 3, "glass").text == "setblock 1 2 3 glass"
        assert forceload(-16, -16, 16, 16).text == "forceload add -16 -16 16 16"

    def test_integral_floats_are_written_as_integers(self):
        assert setblock(1.0, 64.0, -3.0, "stone").text == "setblock 1 64 -3 stone"

    def test_annotate_puts_delay_on_last(self):
        """The pause comes once, after the whole group."""
        group = annotate([setblock(0, 0, 0, "a"), setblock(1, 0, 0, "b")], "Step", 50, optional=True)

        assert [i.description for i in group] == ["Step", "Step"]
        assert group[0].delay_ms is None
        assert group[1].delay_ms == 50
        assert all(i.optional for i in group)

    def test_to_dict_omits_unset_metadata(self):
        assert Instruction("setblock 0 0 0 stone").to_dict() == {"text": "setblock 0 0 0 stone"}
        assert Instruction("x", "d", 10, True).to_dict() == {
            "text": "x", "description": "d", "delay_ms": 10, "optional": True,
        }


class TestParser(unittest.TestCase):
    """Tests for the call syntax parser."""

    def test_parse_call(self):
        command = parse_shape_command('hollowsphere(0, 64, 0, 12, "glass")')
        assert command == ShapeCommand("hollowsphere", [0, 64, 0, 12, "glass"])

    def test_parse_types(self):
        command = parse_shape_command("Box(1.5, 64, -2, 5, 3, 3, stone, false)")
        assert command.shape == "box"
        assert command.params == [1.5, 64, -2, 5, 3, 3, "stone", False]

    def test_quoted_commas_stay_together(self):
        command = parse_shape_command("wall(0, 64, 0, 5, 70, 0, '50%stone,50%glass')")
        assert command.params[-1] == "50%stone,50%glass"

    def test_not_a_call(self):
        assert parse_shape_command("fill 0 0 0 1 1 1 stone") is None
        assert parse_shape_command("sphere") is None


class TestShapes(unittest.TestCase):
    """Tests for the primitive rasterizers."""

    def test_sphere_slices(self):
        """One slice per Y offset, point caps at the poles."""
        commands = texts(sphere(0, 64, 0, 3, "stone"))

        assert len(commands) == 7
        assert commands[0] == "fill 0 61 0 0 61 0 stone"
        assert commands[3] == "fill -3 64 -3 3 64 3 stone"
        assert commands[-1] == "fill 0 67 0 0 67 0 stone"

    def test_sphere_radius_is_floored(self):
        assert len(sphere(0, 64, 0, 3.9, "stone")) == 7

    def test_hollow_sphere_equator_bands(self):
        commands = texts(sphere(0, 64, 0, 3, "glass", hollow=True))
        equator = [c for c in commands if " 64 " in c]

        assert equator == [
            "fill -3 64 -3 3 64 -3 glass",
            "fill -3 64 3 3 64 3 glass",
            "fill -3 64 -2 -3 64 2 glass",
            "fill 3 64 -2 3 64 2 glass",
        ]

    def test_dome(self):
        commands = texts(dome(0, 64, 0, 3, "stone"))

        assert len(commands) == 4
        assert commands[0] == "fill -3 64 -3 3 64 3 stone"
        assert commands[-1] == "fill 0 67 0 0 67 0 stone"

    def test_cylinder(self):
        assert len(cylinder(0, 64, 0, 3, 5, "stone")) == 5
        assert len(cylinder(0, 64, 0, 3, 2, "stone", hollow=True)) == 8

    def test_hollow_cylinder_walls(self):
        commands = texts(cylinder(0, 64, 0, 3, 1, "stone", hollow=True))

        assert commands == [
            "fill -3 64 -3 3 64 -2 stone",
            "fill -3 64 2 3 64 3 stone",
            "fill -3 64 -1 -2 64 1 stone",
            "fill 2 64 -1 3 64 1 stone",
        ]

    def test_pyramid_ends_in_apex(self):
        commands = texts(pyramid(0, 64, 0, 9, 5, "sandstone"))

        assert commands == [
            "fill -4 64 -4 4 64 4 sandstone",
            "fill -3 65 -3 3 65 3 sandstone",
            "fill -2 66 -2 2 66 2 sandstone",
            "fill -1 67 -1 1 67 1 sandstone",
            "fill 0 68 0 0 68 0 sandstone",
        ]

    def test_arch(self):
        commands = texts(arch(0, 64, 0, 10, 10, 1, "stone"))

        assert commands[0] == "fill -5 64 0 -3 70 0 stone"
        assert commands[1] == "fill 3 64 0 5 70 0 stone"
        assert len(commands) == 9
        assert commands[-1] == "fill -5 73 0 5 73 0 stone"

    def test_box(self):
        assert texts(box(0, 64, 0, 5, 3, 3, "stone")) == ["fill -2 64 -1 2 66 1 stone hollow"]
        assert texts(box(0, 64, 0, 5, 3, 3, "stone", hollow=False)) == ["fill -2 64 -1 2 66 1 stone"]

    def test_stairs(self):
        commands = texts(stairs(0, 64, 0, "north", 3, 4, "oak_planks"))

        assert len(commands) == 4
        assert commands[0] == "fill -1 64 0 1 64 0 oak_planks"
        assert commands[-1] == "fill -1 67 -3 1 67 -3 oak_planks"

    def test_ring(self):
        assert texts(ring(0, 64, 0, 2, 4, "stone")) == [
            "fill -4 64 -4 4 64 4 stone",
            "fill -2 64 -2 2 64 2 air",
        ]
        assert len(ring(0, 64, 0, 0, 4, "stone")) == 1


class TestDispatch(unittest.TestCase):
    """Tests for name lookup and parameter checking."""

    def test_aliases(self):
        assert texts(rasterize("Hollow_Sphere", [0, 64, 0, 3, "glass"])) == \
            texts(sphere(0, 64, 0, 3, "glass", hollow=True))
        assert texts(rasterize("tube", [0, 64, 0, 3, 1, "stone"])) == \
            texts(cylinder(0, 64, 0, 3, 1, "stone", hollow=True))

    def test_box_hollow_flag(self):
        commands = texts(rasterize("box", [0, 64, 0, 5, 3, 3, "stone", False]))
        assert commands == ["fill -2 64 -1 2 66 1 stone"]

    def test_unknown_shape(self):
        assert rasterize("teapot", [0, 64, 0]) == []

    def test_malformed_params(self):
        assert rasterize("sphere", [0, 64, 0, 3]) == []
        assert rasterize("sphere", [0, 64, "zero", 3, "stone"]) == []

    def test_shape_to_instructions(self):
        command = parse_shape_command("floor(0, 0, 4, 4, 63, grass_block)")
        assert texts(shape_to_instructions(command)) == ["fill 0 63 0 4 63 4 grass_block"]


if __name__ == "__main__":
    unittest.main(verbosity=2)
