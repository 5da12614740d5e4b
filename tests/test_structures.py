"""
Unit tests for procedural structure generation.
"""

import math
import random
import re
import sys
from pathlib import Path
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from buildgen.structures import (
    GENERATORS,
    StructureCategory,
    StructureParams,
    StructurePosition,
    create_noise_pattern,
    create_pattern,
    generate_from_description,
    generate_positions,
    generate_structures,
    pick,
    rand_range,
    seed_hash,
    select_categories,
    structure_count,
)
from buildgen.themes import PALETTES, detect_palette, get_palette

STRUCTURE_ID = re.compile(r"^[a-z-]+-[0-9a-f]{8}-\d+$")


def assert_valid_instruction(text):
    """Integer coordinates, a block, and at most a 'replace <block>' modifier."""
    parts = text.split(" ")
    verb = parts[0]
    assert verb in ("fill", "setblock"), text
    n = 6 if verb == "fill" else 3
    for value in parts[1:n + 1]:
        int(value)
    rest = parts[n + 1:]
    assert len(rest) in (1, 3), text
    if len(rest) == 3:
        assert rest[1] == "replace", text


class TestRandomHelpers(unittest.TestCase):
    """Tests for seeding and random helpers."""

    def test_seed_hash(self):
        assert seed_hash("") == 0
        assert seed_hash("a") == 97
        assert seed_hash("ab") == 97 * 31 + 98

    def test_seed_hash_is_32_bit(self):
        assert 0 <= seed_hash("a fairly long seed string for overflow") < 2 ** 32

    def test_seed_hash_counts_surrogate_pairs(self):
        """Characters outside the BMP hash as two UTF-16 code units."""
        assert seed_hash("\U0001F600") == (0xD83D * 31 + 0xDE00) & 0xFFFFFFFF

    def test_rand_range_bounds(self):
        rng = random.Random(1)
        values = {rand_range(rng, 3, 5) for _ in range(200)}
        assert values == {3, 4, 5}

    def test_pick(self):
        rng = random.Random(1)
        assert all(pick(rng, "abc") in "abc" for _ in range(50))


class TestPatterns(unittest.TestCase):
    """Tests for weighted block patterns."""

    def test_create_pattern(self):
        assert create_pattern(["stone", "glass"], [60, 40]) == "60%stone,40%glass"
        assert create_pattern(["stone", "glass"]) == "stone,glass"
        assert create_pattern(["stone", "glass"], [100]) == "stone,glass"

    def test_create_noise_pattern(self):
        assert create_noise_pattern("stone", ["andesite", "diorite"], 0.7) == "70%stone,15%andesite,15%diorite"
        assert create_noise_pattern("stone", [], 0.5) == "50%stone"


class TestThemes(unittest.TestCase):
    """Tests for theme detection."""

    def test_detect_palette(self):
        assert detect_palette("Volcanic spires") == "volcanic"
        assert detect_palette("an underwater city") == "aquatic"
        assert detect_palette("frozen peaks") == "arctic"
        assert detect_palette("") == "ethereal"
        assert detect_palette("lightning") == "ethereal"

    def test_first_match_wins(self):
        """'divine' is listed under both ethereal and celestial."""
        assert detect_palette("divine") == "ethereal"

    def test_every_palette_is_complete(self):
        assert len(PALETTES) == 10
        for name, palette in PALETTES.items():
            for role in ("primary", "secondary", "detail", "light", "organic", "special"):
                assert len(getattr(palette, role)) > 0, (name, role)

    def test_get_palette(self):
        assert get_palette("candy land") is PALETTES["candy"]


class TestSelection(unittest.TestCase):
    """Tests for counts, categories and positions."""

    def test_structure_count(self):
        assert structure_count(5) == 7
        assert structure_count(1) == 3
        assert structure_count(100) == 10
        assert structure_count(-4) == 3
        assert structure_count(float("nan")) == 3
        assert structure_count(float("inf")) == 10

    def test_select_categories(self):
        for seed in range(20):
            categories = select_categories("a city of towers", 6, random.Random(seed))
            assert len(categories) == 6
            assert all(isinstance(c, StructureCategory) for c in categories)

    def test_positions(self):
        positions = generate_positions(5, random.Random(3))

        assert len(positions) == 5
        assert positions[0] == StructurePosition(0, 64, 30)
        for position in positions[1:]:
            distance = math.hypot(position.x, position.z)
            assert 100 <= distance <= 351
            assert 54 <= position.y <= 84


class TestGenerateStructures(unittest.TestCase):
    """Tests for the full generation pipeline."""

    def test_deterministic(self):
        first = generate_structures("my-world", "volcanic spires", 1.0, 5)
        second = generate_structures("my-world", "volcanic spires", 1.0, 5)

        assert [s.to_dict() for s in first] == [s.to_dict() for s in second]

    def test_count_and_metadata(self):
        structures = generate_structures("my-world", "volcanic spires", 1.0, 5)
        hashed = f"{seed_hash('my-world'):08x}"

        assert len(structures) == 7
        for index, structure in enumerate(structures):
            assert STRUCTURE_ID.match(structure.id), structure.id
            assert structure.id.endswith(f"-{hashed}-{index}")
            assert "volcanic" in structure.tags
            assert structure.estimated_block_count > 0
            assert len(structure.instructions) > 0

    def test_first_structure_near_spawn(self):
        structures = generate_structures("seed", "", 1.0, 3)
        position = structures[0].position
        assert (position.x, position.y, position.z) == (0, 64, 30)

    def test_instructions_are_valid(self):
        for seed in ("alpha", "beta", "gamma"):
            for structure in generate_structures(seed, "giant floating mountain garden", 1.5, 6):
                for instruction in structure.instructions:
                    assert_valid_instruction(instruction.text)
                    assert instruction.description

    def test_every_generator_and_palette(self):
        position = StructurePosition(0, 64, 0)
        for theme in PALETTES:
            params = StructureParams(theme, 1.0, seed_hash(theme))
            for generator in set(GENERATORS.values()):
                for seed in range(4):
                    structure = generator(params, position, seed, random.Random(seed))
                    assert structure.instructions, (theme, generator.__name__)
                    for instruction in structure.instructions:
                        assert_valid_instruction(instruction.text)

    def test_generate_from_description(self):
        description = "A sky realm of floating islands and crystal spires above the clouds"
        structures = generate_from_description(description, "skyland", 4)
        expected = generate_structures("skyland" + description[:50], description, 1.0, 4)

        assert [s.to_dict() for s in structures] == [s.to_dict() for s in expected]
        assert len(structures) == 6


if __name__ == "__main__":
    unittest.main(verbosity=2)
