"""
Procedural Build Generator
==========================

Turns high-level build requests into ordered Minecraft console commands.

Key Features:
- Parametric shapes (spheres, domes, cylinders, arches, stairs, ...) from a
  ``shape(args...)`` call syntax
- Built-in and custom character-grid voxel objects, plus small furniture
  components with variants
- Image-to-blocks conversion with nearest-color palette matching, wall,
  extrusion and luminosity relief modes, and two-silhouette statue carving
- Seeded, theme-aware generation of whole structure sets
- Greedy merging of single-block placements into fills (Numba JIT)
- Export to .mcfunction and JSON

Example Usage:
    from buildgen import resolve
    from buildgen.exporters import McFunctionExporter

    instructions = resolve([
        'hollowsphere(0, 80, 0, 6, "glass")',
        "castle_tower(20, 64, 20, 2)",
        'component("throne", 0, 64, 10)',
    ])
    McFunctionExporter().export(instructions, "build.mcfunction")
"""

__version__ = "1.0.0"
__author__ = "Build Generator Team"

from .errors import ImageSourceError, FetchError, FetchTimeout, DecodeError
from .instructions import Instruction
from .shapes import ShapeCommand, parse_shape_command, shape_to_instructions
from .voxels import VoxelDefinition, render
from .palette import find_closest_block
from .generator import ImageVoxelGenerator, ImageBuildOptions, fetch_and_build, carve_silhouettes
from .structures import GeneratedStructure, generate_structures, generate_from_description
from .greedy_fill import optimize_instructions
from .resolver import resolve
from .transport import send_instructions

__all__ = [
    "ImageSourceError",
    "FetchError",
    "FetchTimeout",
    "DecodeError",
    "Instruction",
    "ShapeCommand",
    "parse_shape_command",
    "shape_to_instructions",
    "VoxelDefinition",
    "render",
    "find_closest_block",
    "ImageVoxelGenerator",
    "ImageBuildOptions",
    "fetch_and_build",
    "carve_silhouettes",
    "GeneratedStructure",
    "generate_structures",
    "generate_from_description",
    "optimize_instructions",
    "resolve",
    "send_instructions",
]
