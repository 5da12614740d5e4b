"""
Component Library

Small furniture and prop objects (throne, bed, car, rocket, ...) that planners
place with ``component(name, x, y, z, variant, scale)``.

A component is a voxel grid plus named color variants. A variant only
overrides palette entries, so every variant shares the base geometry and is
rendered by voxels.render().
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from .instructions import Instruction, Number
from .voxels import VoxelDefinition, render, stack

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Component:
    """
    A named voxel object with optional palette variants.

    Attributes:
        name: Registry name
        description: Short human-readable description
        layers: Layers bottom to top, rows along Z, characters along X
        palette: Base character -> block mapping
        variants: Variant name -> palette overrides
    """
    name: str
    description: str
    layers: Sequence[Sequence[str]]
    palette: Mapping[str, str]
    variants: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    @property
    def definition(self) -> VoxelDefinition:
        return VoxelDefinition(self.palette, self.layers)

    def variant_definition(self, variant: Optional[str] = None) -> VoxelDefinition:
        """
        Definition with a variant's palette merged over the base palette.

        Unknown variants fall back to the base palette.
        """
        if not variant:
            return self.definition
        overrides = self.variants.get(variant.lower())
        if overrides is None:
            logger.warning("Component %s has no variant %r, using base palette", self.name, variant)
            return self.definition
        return self.definition.with_palette(overrides)


THRONE = Component(
    name="throne",
    description="A royal throne with armrests and high back",
    layers=[
        # Y=0: Base/feet
        [
            "G.G",
            "GGG",
        ],
        # Y=1: Seat
        [
            "RRR",
            "RRR",
        ],
        # Y=2: Armrests and back start
        [
            "G.G",
            "RRR",
        ],
        # Y=3: Back
        [
            "...",
            "RGR",
        ],
        # Y=4: Back top with jewel
        [
            "...",
            "GDG",
        ],
    ],
    palette={
        "G": "gold_block",
        "R": "red_wool",
        "D": "diamond_block",
    },
    variants={
        "iron": {"G": "iron_block", "R": "blue_wool"},
        "emerald": {"G": "emerald_block", "R": "green_wool"},
        "obsidian": {"G": "obsidian", "R": "purple_wool", "D": "amethyst_block"},
    },
)


BATHTUB = Component(
    name="bathtub",
    description="A clawfoot bathtub filled with water",
    layers=[
        # Y=0: Feet/legs
        [
            "I....I",
            "......",
            "I....I",
        ],
        # Y=1: Tub base with water
        [
            "QQQQQQ",
            "QWWWWQ",
            "QQQQQQ",
        ],
        # Y=2: Tub sides
        [
            "Q....Q",
            "......",
            "Q....Q",
        ],
    ],
    palette={
        "Q": "quartz_block",
        "W": "water",
        "I": "iron_bars",
    },
)


CHAIR = Component(
    name="chair",
    description="A wooden chair",
    layers=[
        # Y=0: Legs
        [
            "P.P",
            "P.P",
        ],
        # Y=1: Seat
        [
            "PPP",
            "PPP",
        ],
        # Y=2: Back
        [
            "...",
            "PPP",
        ],
    ],
    palette={
        "P": "oak_planks",
    },
    variants={
        "spruce": {"P": "spruce_planks"},
        "dark_oak": {"P": "dark_oak_planks"},
        "birch": {"P": "birch_planks"},
    },
)


TABLE = Component(
    name="table",
    description="A wooden dining table",
    layers=[
        # Y=0: Legs
        [
            "F..F",
            "F..F",
        ],
        # Y=1: Top
        [
            "PPPP",
            "PPPP",
        ],
    ],
    palette={
        "P": "oak_planks",
        "F": "oak_fence",
    },
)


BED = Component(
    name="bed",
    description="A cozy bed with pillows",
    layers=[
        # Y=0: Frame
        [
            "PP",
            "PP",
            "PP",
            "PP",
        ],
        # Y=1: Mattress and pillows
        [
            "WW",  # Pillows (white)
            "RR",  # Red blanket
            "RR",
            "PP",  # Footboard
        ],
    ],
    palette={
        "P": "oak_planks",
        "W": "white_wool",
        "R": "red_wool",
    },
    variants={
        "blue": {"R": "blue_wool"},
        "green": {"R": "green_wool"},
        "pink": {"R": "pink_wool"},
    },
)


LAMP = Component(
    name="lamp",
    description="A tall floor lamp",
    layers=[
        ["S"],  # Base
        ["F"],  # Pole
        ["F"],  # Pole
        ["F"],  # Pole
        ["G"],  # Light
    ],
    palette={
        "S": "stone_slab",
        "F": "oak_fence",
        "G": "glowstone",
    },
)


FOUNTAIN = Component(
    name="fountain",
    description="A decorative water fountain",
    layers=[
        # Y=0: Base pool
        [
            ".SSSSS.",
            "SWWWWWS",
            "SWWWWWS",
            "SWWWWWS",
            "SWWWWWS",
            "SWWWWWS",
            ".SSSSS.",
        ],
        # Y=1: Pool walls and center column
        [
            ".S...S.",
            "S.....S",
            "...Q...",
            "...Q...",
            "...Q...",
            "S.....S",
            ".S...S.",
        ],
        # Y=2: Upper basin
        [
            ".......",
            ".......",
            "..QQQ..",
            "..QWQ..",
            "..QQQ..",
            ".......",
            ".......",
        ],
        # Y=3: Water spout
        [
            ".......",
            ".......",
            ".......",
            "...W...",
            ".......",
            ".......",
            ".......",
        ],
    ],
    palette={
        "S": "stone_bricks",
        "Q": "quartz_block",
        "W": "water",
    },
)


TREE = Component(
    name="tree",
    description="An oak tree with leaves",
    layers=[
        # Y=0-2: Trunk
        *stack(3, [
            ".....",
            ".....",
            "..L..",
            ".....",
            ".....",
        ]),
        # Y=3: Lower leaves and trunk
        [
            ".GGG.",
            "GGGGG",
            "GGLGG",
            "GGGGG",
            ".GGG.",
        ],
        # Y=4: Middle leaves and trunk
        [
            ".GGG.",
            "GGGGG",
            "GGLGG",
            "GGGGG",
            ".GGG.",
        ],
        # Y=5: Upper leaves
        [
            "..G..",
            ".GGG.",
            ".GGG.",
            ".GGG.",
            "..G..",
        ],
        # Y=6: Top
        [
            ".....",
            "..G..",
            ".GGG.",
            "..G..",
            ".....",
        ],
    ],
    palette={
        "L": "oak_log",
        "G": "oak_leaves",
    },
)


CAR = Component(
    name="car",
    description="A simple car",
    layers=[
        # Y=0: Wheels
        [
            "B.B",
            "...",
            "...",
            "...",
            "B.B",
            "...",
        ],
        # Y=1: Body
        [
            "RRR",
            "RRR",
            "RRR",
            "RRR",
            "RRR",
            "RRR",
        ],
        # Y=2: Cabin
        [
            "...",
            "GGG",
            "GGG",
            "GGG",
            "...",
            "...",
        ],
    ],
    palette={
        "R": "red_concrete",
        "B": "black_concrete",
        "G": "light_blue_stained_glass",
    },
    variants={
        "blue": {"R": "blue_concrete"},
        "yellow": {"R": "yellow_concrete"},
        "white": {"R": "white_concrete"},
    },
)


ROCKET = Component(
    name="rocket",
    description="A space rocket ready for launch",
    layers=[
        # Y=0-1: Engines/flames
        *stack(2, [
            "..O..",
            ".O.O.",
            "O...O",
            ".O.O.",
            "..O..",
        ]),
        # Y=2-3: Base fins
        *stack(2, [
            "R.W.R",
            ".WWW.",
            "WWWWW",
            ".WWW.",
            "R.W.R",
        ]),
        # Y=4-10: Body
        *stack(7, [
            "..W..",
            ".WWW.",
            "WWWWW",
            ".WWW.",
            "..W..",
        ]),
        # Y=11: Window section
        [
            "..W..",
            ".WBW.",
            "WBBBW",
            ".WBW.",
            "..W..",
        ],
        # Y=12-13: Nose cone
        *stack(2, [
            ".....",
            "..W..",
            ".WWW.",
            "..W..",
            ".....",
        ]),
        # Y=14: Tip
        [
            ".....",
            ".....",
            "..R..",
            ".....",
            ".....",
        ],
    ],
    palette={
        "W": "white_concrete",
        "R": "red_concrete",
        "B": "light_blue_stained_glass",
        "O": "orange_concrete",  # Engine flames
    },
)


WINDMILL = Component(
    name="windmill",
    description="A classic windmill with spinning blades",
    layers=[
        # Y=0-2: Base (wider)
        *stack(3, [
            ".SSSSS.",
            "SSSSSSS",
            "SSSSSSS",
            "SSSSSSS",
            "SSSSSSS",
            "SSSSSSS",
            ".SSSSS.",
        ]),
        # Y=3-8: Tower (narrowing)
        *stack(6, [
            "..SSS..",
            ".SSSSS.",
            "SSSSSSS",
            "SSSSSSS",
            "SSSSSSS",
            ".SSSSS.",
            "..SSS..",
        ]),
        # Y=9: Window level
        [
            "..SSS..",
            ".SGSGS.",
            "SGSSSGS",
            "SSSSSSS",
            "SGSSSGS",
            ".SGSGS.",
            "..SSS..",
        ],
        # Y=10-11: Roof
        [
            "...S...",
            "..SSS..",
            ".SSSSS.",
            "SSSSSSS",
            ".SSSSS.",
            "..SSS..",
            "...S...",
        ],
        [
            ".......",
            "...D...",
            "..DDD..",
            ".DDDDD.",
            "..DDD..",
            "...D...",
            ".......",
        ],
    ],
    palette={
        "S": "stone_bricks",
        "D": "dark_oak_planks",
        "G": "glass_pane",
    },
)


COMPONENTS: Dict[str, Component] = {
    component.name: component
    for component in (
        THRONE, BATHTUB, CHAIR, TABLE, BED, LAMP,
        FOUNTAIN, TREE, CAR, ROCKET, WINDMILL,
    )
}


def get_component(name: str) -> Optional[Component]:
    return COMPONENTS.get(name.lower())


def list_components() -> List[str]:
    return list(COMPONENTS)


def render_component(
    name: str,
    x: Number,
    y: Number,
    z: Number,
    variant: Optional[str] = None,
    scale: Number = 1
) -> List[Instruction]:
    """
    Render a component by name.

    Args:
        name: Component name, case-insensitive
        x, y, z: World position of the component's corner
        variant: Optional color variant, e.g. "emerald" for the throne
        scale: Blocks per grid cell

    Returns:
        Placement instructions, or an empty list for unknown components
    """
    component = get_component(name)
    if component is None:
        logger.warning("Unknown component: %s", name)
        return []
    return render(component.variant_definition(variant), x, y, z, scale)
