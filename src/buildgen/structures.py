"""
Procedural Structure Generator

Turns a free-text theme and a seed into a deterministic set of themed
structures placed around spawn.

Pipeline:
1. Hash the seed into one random.Random state shared by every step
2. Map the theme text to a material palette
3. Pick structure categories by weighted sampling (theme keywords boost)
4. Lay out positions on a loose spiral around spawn
5. Dispatch each category to a generator that composes shapes and voxels

Blocks are given as weighted patterns like ``70%stone,15%andesite,15%diorite``
so large surfaces get a natural, noisy texture.

Same seed, theme, scale and complexity always give the same structures.
"""

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from .instructions import Instruction, Number, annotate, fill, round_half_up, setblock
from .objects import STATUE
from .shapes import box, cylinder, pyramid, sphere
from .themes import PALETTES, detect_palette
from .voxels import render

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_STRUCTURES = 3
MAX_STRUCTURES = 10
SPAWN = (0, 64, 0)


class StructureCategory(Enum):
    """Kinds of structure a world can contain."""
    TOWER = "tower"
    FLOATING = "floating"
    ARCHITECTURAL = "architectural"
    MONUMENT = "monument"
    TERRAIN = "terrain"
    DECORATION = "decoration"
    MEGASTRUCTURE = "megastructure"
    UNDERGROUND = "underground"
    WATER = "water"
    ORGANIC = "organic"


@dataclass(frozen=True)
class StructurePosition:
    x: int
    y: int
    z: int
    relative_to_spawn: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "z": self.z, "relative_to_spawn": self.relative_to_spawn}


@dataclass(frozen=True)
class GeneratedStructure:
    """
    One generated structure and the instructions that build it.

    Attributes:
        id: Stable identifier derived from the seed and structure index
        name: Display name
        description: One-line summary with the rolled dimensions
        position: Anchor point
        category: Category the generator belongs to
        instructions: Ordered build instructions
        estimated_block_count: Rough number of blocks placed
        tags: Search tags, including the palette name
    """
    id: str
    name: str
    description: str
    position: StructurePosition
    category: StructureCategory
    instructions: Tuple[Instruction, ...]
    estimated_block_count: int
    tags: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "position": self.position.to_dict(),
            "category": self.category.value,
            "instructions": [instruction.to_dict() for instruction in self.instructions],
            "estimated_block_count": self.estimated_block_count,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class StructureParams:
    """Settings shared by every generator in one run."""
    theme: str
    scale: float
    seed_hash: int

    def structure_id(self, kind: str, index: int) -> str:
        return f"{kind}-{self.seed_hash:08x}-{index}"


# =============================================================================
# Random helpers
# =============================================================================

def seed_hash(seed: str) -> int:
    """
    32-bit string hash, h = 31h + c over UTF-16 code units.

    Characters outside the Basic Multilingual Plane count as two units.
    """
    data = seed.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (31 * h + unit) & 0xFFFFFFFF
    return h


def create_rng(seed: str) -> random.Random:
    return random.Random(seed_hash(seed))


def pick(rng: random.Random, items: Sequence[T]) -> T:
    return items[int(rng.random() * len(items))]


def pick_multiple(rng: random.Random, items: Sequence[T], count: int) -> List[T]:
    """Up to ``count`` distinct items in random order."""
    return rng.sample(list(items), min(count, len(items)))


def rand_range(rng: random.Random, start: Number, end: Number) -> Number:
    """Uniform integer step from ``start`` to ``end`` inclusive."""
    return math.floor(rng.random() * (end - start + 1)) + start


# =============================================================================
# Block patterns
# =============================================================================

def create_pattern(blocks: Sequence[str], weights: Optional[Sequence[int]] = None) -> str:
    """
    Weighted pattern string.

    Without weights, or with a mismatched number of them, the blocks are
    listed unweighted.
    """
    if not weights or len(weights) != len(blocks):
        return ",".join(blocks)
    return ",".join(f"{weight}%{block}" for block, weight in zip(blocks, weights))


def create_noise_pattern(primary: str, secondary: Sequence[str], ratio: float) -> str:
    """
    Pattern dominated by ``primary`` with the rest shared by ``secondary``.

    ``create_noise_pattern("stone", ["a", "b"], 0.7)`` gives
    ``70%stone,15%a,15%b``.
    """
    primary_weight = math.floor(ratio * 100)
    parts = [f"{primary_weight}%{primary}"]
    if secondary:
        secondary_weight = math.floor((100 - primary_weight) / len(secondary))
        parts.extend(f"{secondary_weight}%{block}" for block in secondary)
    return ",".join(parts)


# =============================================================================
# Instruction helpers
# =============================================================================

class _Commands:
    """Accumulates annotated instruction groups."""

    def __init__(self):
        self.items: List[Instruction] = []

    def add(
        self,
        instructions: Sequence[Instruction],
        description: str,
        delay_ms: Optional[int] = None,
        optional: bool = False
    ):
        self.items.extend(annotate(instructions, description, delay_ms, optional))

    def region(self, x1, y1, z1, x2, y2, z2, block: str, description: str,
               delay_ms: Optional[int] = None, optional: bool = False, modifier: Optional[str] = None):
        coords = [round_half_up(v) for v in (x1, y1, z1, x2, y2, z2)]
        self.add([fill(*coords, block, modifier)], description, delay_ms, optional)

    def point(self, x, y, z, block: str, description: str,
              delay_ms: Optional[int] = None, optional: bool = False):
        self.add([setblock(round_half_up(x), round_half_up(y), round_half_up(z), block)],
                 description, delay_ms, optional)


def _ellipsoid(cx: int, cy: int, cz: int, rx: int, ry: int, block: str) -> List[Instruction]:
    """Sphere squashed vertically to half-height ``ry``, one slice per level."""
    if ry <= 0:
        return [fill(cx - rx, cy, cz - rx, cx + rx, cy, cz + rx, block)]

    commands = []
    for dy in range(-ry, ry + 1):
        slice_r = math.floor(rx * math.sqrt(max(0.0, 1 - (dy / ry) ** 2)))
        commands.append(fill(cx - slice_r, cy + dy, cz - slice_r, cx + slice_r, cy + dy, cz + slice_r, block))
    return commands


def _polar(x: Number, z: Number, angle: float, distance: float) -> Tuple[int, int]:
    return (round_half_up(x + math.cos(angle) * distance), round_half_up(z + math.sin(angle) * distance))


# =============================================================================
# Generators
# =============================================================================

def spiral_tower(params: StructureParams, position: StructurePosition, index: int,
                 rng: random.Random) -> GeneratedStructure:
    """Tapering cylinder segments offset along a spiral, a crown dome and a ring of lights."""
    palette = PALETTES[params.theme]
    height = rand_range(rng, 40, 80) * params.scale
    base_radius = rand_range(rng, 8, 15) * params.scale
    turns = rand_range(rng, 2, 5)
    x, y, z = position.x, position.y, position.z
    out = _Commands()

    base_pattern = create_noise_pattern(
        pick(rng, palette.primary),
        pick_multiple(rng, palette.secondary, 2),
        0.7,
    )
    out.add(cylinder(x, y, z, base_radius, 5, base_pattern), "Create tower foundation", 100)

    segments = math.floor(height / 10)
    for i in range(segments):
        segment_y = y + 5 + i * 10
        segment_radius = base_radius - i * 0.5
        angle = math.radians(i * (360 / segments) * turns)
        sx, sz = _polar(x, z, angle, 2)

        segment_pattern = create_noise_pattern(
            pick(rng, palette.primary),
            [pick(rng, palette.detail)],
            0.8 - i * 0.02,
        )
        out.add(
            cylinder(sx, segment_y, sz, max(3, round_half_up(segment_radius)), 10, segment_pattern),
            f"Create spiral segment {i + 1}",
            50,
        )

        if rng.random() > 0.5 and segment_radius > 4:
            window_block = pick(rng, palette.secondary)
            wx, wz = _polar(x, z, rng.random() * math.pi * 2, segment_radius - 1)
            out.region(wx, segment_y + 2, wz, wx, segment_y + 6, wz, window_block, "Create window", 20)

    crown_y = round_half_up(y + height)
    crown_pattern = create_pattern([pick(rng, palette.special), pick(rng, palette.light)], [60, 40])
    out.add(
        sphere(x, crown_y, z, round_half_up(base_radius * 0.6), crown_pattern, hollow=True),
        "Create crown dome",
        100,
    )

    light_block = pick(rng, palette.light)
    for i in range(8):
        lx, lz = _polar(x, z, i / 8 * math.pi * 2, base_radius * 0.8)
        out.point(lx, crown_y + rand_range(rng, -3, 5), lz, light_block, f"Floating light {i + 1}", 10)

    return GeneratedStructure(
        id=params.structure_id("spiral-tower", index),
        name="Spiral Ascension Tower",
        description=f"A {round_half_up(height)}-block tall spiraling tower with {turns} turns, "
                    f"crowned with floating lights",
        position=position,
        category=StructureCategory.TOWER,
        instructions=tuple(out.items),
        estimated_block_count=round_half_up(math.pi * base_radius * base_radius * height * 0.3),
        tags=("tower", "spiral", "vertical", params.theme),
    )


def floating_island(params: StructureParams, position: StructurePosition, index: int,
                    rng: random.Random) -> GeneratedStructure:
    """Flattened stone body with a grassy top, hanging vines, trees and glow points."""
    palette = PALETTES[params.theme]
    radius = rand_range(rng, 20, 40) * params.scale
    thickness = rand_range(rng, 8, 15) * params.scale
    x, y, z = position.x, position.y, position.z
    out = _Commands()

    r = round_half_up(radius)
    t = round_half_up(thickness)

    stone_pattern = create_noise_pattern("stone", ["cobblestone", "andesite", "diorite"], 0.6)
    out.add(_ellipsoid(x, y - t, z, r, t, stone_pattern), "Create island body", 200)

    # The body's top surface sits at y
    surface_pattern = create_noise_pattern("grass_block", ["podzol", "coarse_dirt"], 0.85)
    out.region(x - r, y - 2, z - r, x + r, y, z + r, surface_pattern,
               "Add grass surface", 100, modifier="replace stone")

    vine_block = pick(rng, ["vine", "weeping_vines", *palette.organic])
    vine_count = rand_range(rng, 15, 30)
    for i in range(vine_count):
        vx, vz = _polar(x, z, rng.random() * math.pi * 2, rng.random() * radius * 0.8)
        length = rand_range(rng, 5, 20)
        out.region(vx, y - thickness - length, vz, vx, y - thickness + 2, vz, vine_block,
                   f"Create hanging vine {i + 1}", 10, optional=True)

    tree_count = rand_range(rng, 3, 8)
    for i in range(tree_count):
        tx, tz = _polar(x, z, rng.random() * math.pi * 2, rng.random() * radius * 0.6)
        log_block = pick(rng, palette.primary)
        leaf_block = pick(rng, palette.organic)
        tree_height = rand_range(rng, 6, 12)

        out.region(tx, y + 1, tz, tx, y + tree_height, tz, log_block,
                   f"Create tree {i + 1} trunk", 20, optional=True)
        out.add(sphere(tx, y + tree_height - 2, tz, rand_range(rng, 3, 5), leaf_block),
                f"Create tree {i + 1} canopy", 30, optional=True)

    glow_block = pick(rng, palette.light)
    glow_count = rand_range(rng, 5, 15)
    for i in range(glow_count):
        gx, gz = _polar(x, z, rng.random() * math.pi * 2, rng.random() * radius * 0.9)
        gy = y + rand_range(rng, -thickness + 3, 1)
        out.point(gx, gy, gz, glow_block, f"Glow point {i + 1}", 5, optional=True)

    return GeneratedStructure(
        id=params.structure_id("floating-island", index),
        name="Ethereal Floating Island",
        description=f"A {round_half_up(radius * 2)}-block wide floating island with hanging vines "
                    f"and {tree_count} custom trees",
        position=position,
        category=StructureCategory.FLOATING,
        instructions=tuple(out.items),
        estimated_block_count=round_half_up(math.pi * radius * radius * thickness * 0.4),
        tags=("floating", "island", "organic", params.theme),
    )


def organic_arch(params: StructureParams, position: StructurePosition, index: int,
                 rng: random.Random) -> GeneratedStructure:
    """Parabolic arch of wavy cylinder segments with a crystal apex and hanging lights."""
    palette = PALETTES[params.theme]
    height = rand_range(rng, 25, 50) * params.scale
    width = rand_range(rng, 30, 60) * params.scale
    thickness = rand_range(rng, 3, 6) * params.scale
    x, y, z = position.x, position.y, position.z
    out = _Commands()

    segments = max(1, math.floor(width / 3))
    pattern = create_noise_pattern(
        pick(rng, palette.primary),
        pick_multiple(rng, palette.secondary, 2),
        0.75,
    )

    for i in range(segments + 1):
        t = i / segments
        arch_x = x - width / 2 + t * width
        u = 2 * t - 1
        arch_y = y + height * (1 - u * u)
        wave = math.sin(t * math.pi * 4 + rng.random() * 2) * 2
        out.add(
            cylinder(round_half_up(arch_x), round_half_up(arch_y + wave), z,
                     round_half_up(thickness), round_half_up(thickness * 2), pattern),
            f"Create arch segment {i + 1}",
            30,
        )

    crystal_pattern = create_pattern([pick(rng, palette.special), pick(rng, palette.detail)], [70, 30])
    out.add(
        sphere(x, round_half_up(y + height + 2), z, round_half_up(thickness * 1.5), crystal_pattern),
        "Create apex decoration",
        50,
    )

    hang_count = rand_range(rng, 8, 15)
    hang_block = pick(rng, [*palette.light, *palette.special])
    for i in range(hang_count):
        t = rng.random()
        hang_x = x - width / 2 + t * width
        u = 2 * t - 1
        hang_y = y + height * (1 - u * u) - rand_range(rng, 2, 8)
        hang_z = z + rand_range(rng, -2, 2)
        out.point(hang_x, hang_y, hang_z, hang_block, f"Hanging element {i + 1}", 10, optional=True)

    pillar_pattern = create_noise_pattern(pick(rng, palette.primary), [pick(rng, palette.detail)], 0.85)
    pillar_radius = round_half_up(thickness * 1.5)
    half_width = round_half_up(width / 2)
    out.add(cylinder(x - half_width, y, z, pillar_radius, rand_range(rng, 5, 12), pillar_pattern),
            "Create left pillar", 50)
    out.add(cylinder(x + half_width, y, z, pillar_radius, rand_range(rng, 5, 12), pillar_pattern),
            "Create right pillar", 50)

    return GeneratedStructure(
        id=params.structure_id("organic-arch", index),
        name="Crystalline Gateway Arch",
        description=f"A {round_half_up(width)}-block wide organic arch reaching {round_half_up(height)} "
                    f"blocks high with hanging decorations",
        position=position,
        category=StructureCategory.ARCHITECTURAL,
        instructions=tuple(out.items),
        estimated_block_count=round_half_up(segments * math.pi * thickness * thickness * 4 + 500),
        tags=("arch", "gateway", "organic", params.theme),
    )


def monument(params: StructureParams, position: StructurePosition, index: int,
             rng: random.Random) -> GeneratedStructure:
    """Stepped base with corner pillars, a tapering spire, a crown and floating rings."""
    palette = PALETTES[params.theme]
    base_size = rand_range(rng, 30, 50) * params.scale
    height = rand_range(rng, 60, 100) * params.scale
    x, y, z = position.x, position.y, position.z
    out = _Commands()

    tiers = rand_range(rng, 3, 5)
    tier_height = 4
    base_pattern = create_noise_pattern(
        pick(rng, palette.primary),
        pick_multiple(rng, palette.detail, 2),
        0.8,
    )

    for tier in range(tiers):
        tier_size = round_half_up(base_size - tier * 5)
        tier_y = y + tier * tier_height
        out.add(
            box(x, tier_y, z, tier_size * 2 + 1, tier_height + 1, tier_size * 2 + 1, base_pattern, hollow=False),
            f"Create tier {tier + 1}",
            100,
        )

        pillar_block = pick(rng, palette.secondary)
        for dx, dz in ((-tier_size, -tier_size), (-tier_size, tier_size),
                       (tier_size, -tier_size), (tier_size, tier_size)):
            out.add(cylinder(x + dx, tier_y, z + dz, 2, tier_height + 2, pillar_block),
                    "Create corner pillar", 20)

    spire_base_y = y + tiers * tier_height
    spire_radius = round_half_up(base_size * 0.3)
    spire_pattern = create_noise_pattern(pick(rng, palette.primary), [pick(rng, palette.special)], 0.7)

    spire_segments = math.floor(height / 15)
    for i in range(spire_segments):
        segment_y = spire_base_y + i * 15
        segment_radius = spire_radius * (1 - (i / spire_segments) * 0.7)
        out.add(
            cylinder(x, segment_y, z, max(2, round_half_up(segment_radius)), 15, spire_pattern),
            f"Create spire segment {i + 1}",
            80,
        )

        if i > 0 and rng.random() > 0.4:
            ring_block = pick(rng, palette.detail)
            out.add(
                cylinder(x, segment_y, z, round_half_up(segment_radius + 2), 1, ring_block, hollow=True),
                "Add ring decoration",
                30,
            )

    crown_y = round_half_up(spire_base_y + height - 10)
    crown_pattern = create_pattern([pick(rng, palette.special), pick(rng, palette.light)], [50, 50])
    out.add(sphere(x, crown_y, z, rand_range(rng, 5, 8), crown_pattern), "Create glowing crown", 50)

    ring_count = rand_range(rng, 3, 6)
    for i in range(ring_count):
        ring_y = round_half_up(spire_base_y + (i + 1) * (height / (ring_count + 1)))
        ring_radius = spire_radius + rand_range(rng, 8, 15)
        ring_block = pick(rng, [*palette.light, *palette.secondary])
        out.add(cylinder(x, ring_y, z, ring_radius, 1, ring_block, hollow=True),
                f"Create floating ring {i + 1}", 40)

    return GeneratedStructure(
        id=params.structure_id("monument", index),
        name="Celestial Monument",
        description=f"A {tiers}-tiered monument reaching {round_half_up(height)} blocks "
                    f"with {ring_count} floating rings",
        position=position,
        category=StructureCategory.MONUMENT,
        instructions=tuple(out.items),
        estimated_block_count=round_half_up(
            base_size * base_size * tiers * 4 + math.pi * spire_radius * spire_radius * height * 0.3
        ),
        tags=("monument", "vertical", "majestic", params.theme),
    )


TERRAIN_TYPES = ("mountain", "crater", "ridge", "canyon")


def terrain_feature(params: StructureParams, position: StructurePosition, index: int,
                    rng: random.Random) -> GeneratedStructure:
    """Mountain or ridge, crater, or canyon."""
    palette = PALETTES[params.theme]
    radius = rand_range(rng, 40, 80) * params.scale
    height = rand_range(rng, 30, 60) * params.scale
    x, y, z = position.x, position.y, position.z
    out = _Commands()

    terrain_type = pick(rng, TERRAIN_TYPES)

    if terrain_type in ("mountain", "ridge"):
        pattern = create_noise_pattern("stone", ["cobblestone", "andesite", pick(rng, palette.primary)], 0.5)
        out.add(
            pyramid(x, y, z, round_half_up(radius) * 2, round_half_up(height), pattern),
            "Create mountain base shape",
            200,
        )

        cap = radius * 0.4
        out.region(x - cap, y + height * 0.7, z - cap, x + cap, y + height, z + cap, "snow_block",
                   "Add snow cap", 100, modifier="replace stone")

        if params.theme == "volcanic":
            crater_top = round_half_up(y + height - 3)
            out.add(cylinder(x, crater_top - 4, z, 3, 5, "magma_block,lava"), "Add volcanic crater", 50)

    elif terrain_type == "crater":
        rim_pattern = create_noise_pattern(
            pick(rng, palette.primary),
            pick_multiple(rng, palette.detail, 2),
            0.6,
        )
        out.add(cylinder(x, y, z, round_half_up(radius), rand_range(rng, 5, 10), rim_pattern, hollow=True),
                "Create crater rim", 150)

        interior_depth = rand_range(rng, 10, 20)
        out.add(cylinder(x, y - interior_depth + 1, z, round_half_up(radius * 0.8), interior_depth, "air"),
                "Carve crater interior", 150)

        floor_block = pick(rng, [*palette.light, *palette.special])
        out.add(cylinder(x, y - rand_range(rng, 15, 25), z, round_half_up(radius * 0.5), 2, floor_block),
                "Create special crater floor", 50)

    else:
        wall_pattern = create_noise_pattern("stone", ["cobblestone", pick(rng, palette.primary)], 0.65)
        length = radius * 2
        out.region(x - 10, y - height, z - length, x + 10, y, z + length, "air", "Carve canyon", 200)
        out.region(x - 12, y - height, z - length, x - 10, y, z + length, wall_pattern, "Add wall texture", 100)

    return GeneratedStructure(
        id=params.structure_id(f"terrain-{terrain_type}", index),
        name=f"{terrain_type.capitalize()} Formation",
        description=f"A {terrain_type} formation spanning {round_half_up(radius * 2)} blocks "
                    f"with {params.theme} theming",
        position=position,
        category=StructureCategory.TERRAIN,
        instructions=tuple(out.items),
        estimated_block_count=round_half_up(math.pi * radius * radius * height * 0.2),
        tags=("terrain", terrain_type, "landscape", params.theme),
    )


DECORATION_TYPES = ("garden", "plaza", "pathway", "fountain")

FLOWERS = (
    "poppy", "dandelion", "blue_orchid", "allium", "azure_bluet",
    "red_tulip", "orange_tulip", "white_tulip", "pink_tulip",
    "oxeye_daisy", "cornflower", "lily_of_the_valley",
)


def decoration(params: StructureParams, position: StructurePosition, index: int,
               rng: random.Random) -> GeneratedStructure:
    """Garden, plaza, pathway or fountain."""
    palette = PALETTES[params.theme]
    size = rand_range(rng, 20, 40) * params.scale
    x, y, z = position.x, position.y, position.z
    out = _Commands()

    decor_type = pick(rng, DECORATION_TYPES)

    if decor_type == "garden":
        ground_pattern = create_noise_pattern("grass_block", ["podzol", "moss_block"], 0.7)
        out.add(cylinder(x, y, z, round_half_up(size), 1, ground_pattern), "Create garden ground", 50)

        patch_count = rand_range(rng, 5, 12)
        for i in range(patch_count):
            px, pz = _polar(x, z, rng.random() * math.pi * 2, rng.random() * size * 0.8)
            flower = pick(rng, FLOWERS)
            out.add(cylinder(px, y + 1, pz, rand_range(rng, 2, 4), 1, flower),
                    f"Plant flower patch {i + 1}", 20, optional=True)

        out.point(x, y + 1, z, pick(rng, palette.special), "Place central decoration", 10)

    elif decor_type == "fountain":
        stone_pattern = create_noise_pattern(
            pick(rng, palette.primary),
            pick_multiple(rng, palette.detail, 2),
            0.8,
        )
        basin_radius = round_half_up(size * 0.5)
        out.add(cylinder(x, y, z, basin_radius, 3, stone_pattern, hollow=True), "Create fountain basin", 50)
        out.add(cylinder(x, y + 1, z, basin_radius - 1, 1, "water"), "Fill with water", 30)
        out.add(cylinder(x, y, z, 2, rand_range(rng, 8, 15), stone_pattern), "Create central spout", 30)

        stream_block = pick(rng, ["light_blue_stained_glass", "water"])
        out.add(cylinder(x, y + rand_range(rng, 6, 12), z, 3, 1, stream_block, hollow=True),
                "Add water effect", 20)

    elif decor_type == "plaza":
        paving_pattern = create_pattern(
            [pick(rng, palette.primary), pick(rng, palette.detail), "smooth_stone"],
            [50, 30, 20],
        )
        out.region(x - size, y, z - size, x + size, y, z + size, paving_pattern, "Create plaza paving", 80)

        lamp_block = pick(rng, palette.light)
        for i in range(4):
            lx, lz = _polar(x, z, i / 4 * math.pi * 2, size * 0.7)
            out.region(lx, y + 1, lz, lx, y + 5, lz, pick(rng, palette.primary), f"Create lamp post {i + 1}", 10)
            out.point(lx, y + 6, lz, lamp_block, f"Add lamp light {i + 1}", 5)

        width, _, depth = STATUE.shape
        out.add(render(STATUE, x - width // 2, y + 1, z - depth // 2), "Place plaza statue", 50)

    else:
        path_pattern = create_pattern(["gravel", "coarse_dirt", pick(rng, palette.detail)], [50, 30, 20])
        path_length = rand_range(rng, 30, 60)
        segments = math.floor(path_length / 5)
        path_x, path_z = float(x), float(z)
        angle = rng.random() * math.pi * 2

        for i in range(segments):
            angle += (rng.random() - 0.5) * 0.5
            path_x += math.cos(angle) * 5
            path_z += math.sin(angle) * 5
            out.add(cylinder(round_half_up(path_x), y, round_half_up(path_z), 2, 1, path_pattern),
                    f"Create path segment {i + 1}", 15, optional=True)

    return GeneratedStructure(
        id=params.structure_id(f"decoration-{decor_type}", index),
        name=f"{decor_type.capitalize()} Decoration",
        description=f"A {decor_type} spanning approximately {round_half_up(size * 2)} blocks",
        position=position,
        category=StructureCategory.DECORATION,
        instructions=tuple(out.items),
        estimated_block_count=round_half_up(size * size * 0.5),
        tags=("decoration", decor_type, params.theme),
    )


Generator = Callable[[StructureParams, StructurePosition, int, random.Random], GeneratedStructure]

GENERATORS: Dict[StructureCategory, Generator] = {
    StructureCategory.TOWER: spiral_tower,
    StructureCategory.FLOATING: floating_island,
    StructureCategory.ARCHITECTURAL: organic_arch,
    StructureCategory.MONUMENT: monument,
    StructureCategory.MEGASTRUCTURE: monument,
    StructureCategory.TERRAIN: terrain_feature,
    StructureCategory.DECORATION: decoration,
    StructureCategory.ORGANIC: decoration,
}


# =============================================================================
# Selection and layout
# =============================================================================

BASE_WEIGHTS: Tuple[Tuple[StructureCategory, float], ...] = (
    (StructureCategory.TOWER, 1),
    (StructureCategory.MONUMENT, 1),
    (StructureCategory.TERRAIN, 1),
    (StructureCategory.ORGANIC, 1),
    (StructureCategory.ARCHITECTURAL, 1),
    (StructureCategory.DECORATION, 1),
    (StructureCategory.MEGASTRUCTURE, 0.3),
    (StructureCategory.FLOATING, 0.5),
    (StructureCategory.UNDERGROUND, 0.3),
    (StructureCategory.WATER, 0.3),
)

CATEGORY_KEYWORDS: Tuple[Tuple[StructureCategory, Tuple[str, ...], float], ...] = (
    (StructureCategory.TOWER, ("tower", "spire"), 3),
    (StructureCategory.MONUMENT, ("monument", "statue"), 3),
    (StructureCategory.TERRAIN, ("mountain", "terrain"), 3),
    (StructureCategory.ORGANIC, ("organic", "natural"), 3),
    (StructureCategory.ARCHITECTURAL, ("city", "build"), 3),
    (StructureCategory.DECORATION, ("garden", "park"), 3),
    (StructureCategory.MEGASTRUCTURE, ("mega", "giant"), 3),
    (StructureCategory.FLOATING, ("float", "sky"), 3),
    (StructureCategory.UNDERGROUND, ("underground", "cave"), 2),
    (StructureCategory.WATER, ("water", "ocean"), 3),
)

CENTERPIECES = (StructureCategory.MONUMENT, StructureCategory.TOWER, StructureCategory.MEGASTRUCTURE)


def structure_count(complexity: float) -> int:
    """floor(complexity * 1.5) clamped to [3, 10]; NaN counts as the minimum."""
    try:
        count = math.floor(complexity * 1.5)
    except (ValueError, OverflowError):
        count = MAX_STRUCTURES if complexity > 0 else MIN_STRUCTURES
    return max(MIN_STRUCTURES, min(MAX_STRUCTURES, count))


def select_categories(theme: str, count: int, rng: random.Random) -> List[StructureCategory]:
    """
    Weighted draw of ``count`` categories.

    Most worlds open with a centerpiece (monument, tower or megastructure).
    Every draw halves the weight of the category it picked so the mix
    stays varied.
    """
    text = theme.lower()
    weights = dict(BASE_WEIGHTS)
    for category, keywords, boost in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            weights[category] = boost

    selected = []
    if rng.random() > 0.3:
        selected.append(pick(rng, CENTERPIECES))

    while len(selected) < count:
        roll = rng.random() * sum(weights.values())
        for category, weight in weights.items():
            roll -= weight
            if roll <= 0:
                selected.append(category)
                weights[category] *= 0.5
                break

    return selected


def generate_positions(
    count: int,
    rng: random.Random,
    spawn: Tuple[int, int, int] = SPAWN
) -> List[StructurePosition]:
    """First structure just ahead of spawn, the rest on a widening spiral."""
    sx, sy, sz = spawn
    positions = [StructurePosition(sx, sy, sz + 30)]

    for i in range(1, count):
        angle = i / count * math.pi * 2 + (rng.random() - 0.5) * 0.5
        distance = 100 + i * 50 + rng.random() * 50
        px, pz = _polar(sx, sz, angle, distance)
        positions.append(StructurePosition(px, sy + rand_range(rng, -10, 20), pz))

    return positions


def generate_structures(
    seed: str,
    theme: str,
    scale: float = 1.0,
    complexity: float = 5
) -> List[GeneratedStructure]:
    """
    Generate a themed set of structures.

    Args:
        seed: Any string; equal seeds give equal output
        theme: Free-text theme, matched against palette and category keywords
        scale: Multiplier for rolled dimensions
        complexity: Drives the structure count, floor(1.5x) clamped to [3, 10]

    Returns:
        Structures in placement order
    """
    hashed = seed_hash(seed)
    rng = random.Random(hashed)
    palette_name = detect_palette(theme)
    count = structure_count(complexity)

    categories = select_categories(theme, count, rng)
    positions = generate_positions(count, rng)
    params = StructureParams(palette_name, scale, hashed)

    structures = []
    for index, (category, position) in enumerate(zip(categories, positions)):
        generator = GENERATORS.get(category, spiral_tower)
        structures.append(generator(params, position, index, rng))

    logger.info(
        "Generated %d structures (palette: %s, %d instructions)",
        len(structures), palette_name, sum(len(s.instructions) for s in structures),
    )
    return structures


def generate_from_description(
    description: str,
    world_name: str,
    complexity: float = 5
) -> List[GeneratedStructure]:
    """Generate structures for a world; the seed is the world name plus the description's start."""
    return generate_structures(world_name + description[:50], description, 1.0, complexity)
