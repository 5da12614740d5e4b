"""
Voxel Layer Renderer

Renders character-grid objects into block placements.

A VoxelDefinition is a palette (one character per block id) plus a list of
layers. Axes follow the authoring order:
- layer index -> Y offset (index 0 is the lowest layer)
- row index -> Z offset
- character index -> X offset

The characters ' ', '.' and '_' are empty cells and are skipped whatever the
palette says. Built-in objects, components and AI-supplied definitions all go
through the single render() function below.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .instructions import Instruction, Number, fill, setblock

logger = logging.getLogger(__name__)

SKIP_CHARS = frozenset(" ._")


@dataclass(frozen=True)
class VoxelDefinition:
    """
    Character-grid description of a 3D object.

    Attributes:
        palette: Map from grid character to block id
        layers: Layers bottom to top, each a list of rows (strings)
    """
    palette: Mapping[str, str]
    layers: Sequence[Sequence[str]] = field(default_factory=list)

    @property
    def shape(self) -> tuple:
        """(width, height, depth) of the bounding grid."""
        width = max((len(row) for layer in self.layers for row in layer), default=0)
        depth = max((len(layer) for layer in self.layers), default=0)
        return (width, len(self.layers), depth)

    def with_palette(self, overrides: Mapping[str, str]) -> "VoxelDefinition":
        """Copy of this definition with some palette entries replaced."""
        merged = dict(self.palette)
        merged.update(overrides)
        return VoxelDefinition(merged, self.layers)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VoxelDefinition":
        """
        Build a definition from its JSON form.

        Args:
            data: ``{"palette": {char: block}, "layers": [[row, ...], ...]}``

        Returns:
            VoxelDefinition

        Raises:
            ValueError: If the palette or layers are missing or mistyped
        """
        palette = data.get("palette")
        layers = data.get("layers")
        if not isinstance(palette, Mapping):
            raise ValueError("voxel definition needs a 'palette' object")
        if not isinstance(layers, (list, tuple)):
            raise ValueError("voxel definition needs a 'layers' list")

        parsed_layers = []
        for index, layer in enumerate(layers):
            if isinstance(layer, str) or not all(isinstance(row, str) for row in layer):
                raise ValueError(f"layer {index} must be a list of strings")
            parsed_layers.append(list(layer))

        return cls({str(k): str(v) for k, v in palette.items()}, parsed_layers)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "palette": dict(self.palette),
            "layers": [list(layer) for layer in self.layers],
        }


def render(
    definition: VoxelDefinition,
    x: Number,
    y: Number,
    z: Number,
    scale: Optional[Number] = 1
) -> List[Instruction]:
    """
    Convert a voxel definition into placement instructions.

    Args:
        definition: The object to render
        x, y, z: World position of grid cell (0, 0, 0)
        scale: Blocks per grid cell along each axis; 0 or None means 1

    Returns:
        One setblock per cell at scale 1, otherwise one cube fill per cell
    """
    scale = scale or 1
    commands = []
    unknown = set()
    palette = definition.palette

    for ly, layer in enumerate(definition.layers):
        for lz, row in enumerate(layer):
            for lx, char in enumerate(row):
                if char in SKIP_CHARS:
                    continue

                block = palette.get(char)
                if not block:
                    unknown.add(char)
                    continue

                wx = x + lx * scale
                wy = y + ly * scale
                wz = z + lz * scale

                if scale == 1:
                    commands.append(setblock(wx, wy, wz, block))
                else:
                    commands.append(fill(
                        wx, wy, wz,
                        wx + scale - 1, wy + scale - 1, wz + scale - 1,
                        block,
                    ))

    if unknown:
        logger.warning(
            "Skipped voxel characters missing from palette: %s",
            ", ".join(repr(c) for c in sorted(unknown)),
        )

    return commands


def count_voxels(definition: VoxelDefinition) -> int:
    """Number of cells that would produce a block."""
    return sum(
        1
        for layer in definition.layers
        for row in layer
        for char in row
        if char not in SKIP_CHARS and definition.palette.get(char)
    )


def stack(count: int, layer: Sequence[str]) -> List[Sequence[str]]:
    """The same layer repeated ``count`` times, for authoring straight walls."""
    return [layer] * count
