"""
Unit tests for the exporters.
"""

import json
import sys
import tempfile
from pathlib import Path
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from buildgen.exporters import JSONExporter, McFunctionExporter
from buildgen.instructions import Instruction, annotate, setblock
from buildgen.structures import generate_structures


INSTRUCTIONS = (
    annotate([Instruction("forceload add -16 -16 16 16")], "Load build area", 2000)
    + annotate([setblock(0, 64, 0, "stone"), setblock(1, 64, 0, "stone")], "Base")
    + [setblock(2, 64, 0, "glass")]
)


class TestMcFunctionExporter(unittest.TestCase):
    """Tests for .mcfunction export."""

    def test_lines(self):
        assert McFunctionExporter().to_lines(INSTRUCTIONS) == [
            "# Load build area",
            "forceload add -16 -16 16 16",
            "# Base",
            "setblock 0 64 0 stone",
            "setblock 1 64 0 stone",
            "setblock 2 64 0 glass",
        ]

    def test_without_descriptions(self):
        exporter = McFunctionExporter(include_descriptions=False, header="Built by buildgen")
        assert exporter.to_text(INSTRUCTIONS).splitlines() == [
            "# Built by buildgen",
            "forceload add -16 -16 16 16",
            "setblock 0 64 0 stone",
            "setblock 1 64 0 stone",
            "setblock 2 64 0 glass",
        ]

    def test_export(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "data" / "build.mcfunction"
            McFunctionExporter().export(INSTRUCTIONS, path)

            text = path.read_text(encoding="utf-8")
            assert text.endswith("setblock 2 64 0 glass\n")


class TestJSONExporter(unittest.TestCase):
    """Tests for JSON export."""

    def test_instructions_keep_metadata(self):
        data = JSONExporter().to_dict(INSTRUCTIONS)

        assert data["instructions"][0] == {
            "text": "forceload add -16 -16 16 16",
            "description": "Load build area",
            "delay_ms": 2000,
        }
        assert data["instructions"][-1] == {"text": "setblock 2 64 0 glass"}
        assert "structures" not in data

    def test_structures(self):
        structures = generate_structures("export", "forest", 1.0, 2)
        data = json.loads(JSONExporter().to_text(structures=structures))

        assert len(data["structures"]) == 3
        first = data["structures"][0]
        assert set(first) == {
            "id", "name", "description", "position", "category",
            "instructions", "estimated_block_count", "tags",
        }
        assert first["position"] == {"x": 0, "y": 64, "z": 30, "relative_to_spawn": True}

    def test_export(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "build.json"
            JSONExporter(indent=None).export(path, INSTRUCTIONS)

            data = json.loads(path.read_text(encoding="utf-8"))
            assert len(data["instructions"]) == 4


if __name__ == "__main__":
    unittest.main(verbosity=2)
