"""
Shape Rasterizer

Turns primitive shape calls such as ``sphere(0, 64, 0, 10, "stone")`` into
ordered fill instructions.

Every primitive is built from axis-aligned boxes only, so curved shapes are
approximated slice by slice:
- sphere / hollowsphere: one disc (square) per Y offset in [-r, r]
- dome / hollowdome: the upper half of the sphere
- cylinder / hollowcylinder: stacked squares, or four walls when hollow
- pyramid / hollowpyramid, cone: linear taper ending in an apex block
- arch: two pillars and a parabolic opening
- box, stairs, ring, floor, wall: direct boxes

The hollow sphere and hollow cylinder are not true circular shells. Their
silhouettes are part of the expected output and must stay as they are.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from .instructions import Instruction, fill

logger = logging.getLogger(__name__)

Param = Union[int, float, str, bool]

_CALL_PATTERN = re.compile(r"^(\w+)\s*\((.*)\)$")


@dataclass
class ShapeCommand:
    """A parsed ``name(param, ...)`` call."""
    shape: str
    params: List[Param] = field(default_factory=list)


def _coerce(token: str) -> Param:
    """Convert a DSL token to bool, int, float or leave it as a string."""
    if token == "true":
        return True
    if token == "false":
        return False
    try:
        return int(token)
    except ValueError:
        pass
    try:
        value = float(token)
    except ValueError:
        return token
    if math.isnan(value) or math.isinf(value):
        return token
    return value


def _split_params(body: str) -> List[str]:
    """Split on commas that are not inside single or double quotes."""
    tokens = []
    current = []
    in_quote = False
    quote_char = ""
    for char in body:
        if char in ("'", '"') and (not in_quote or char == quote_char):
            in_quote = not in_quote
            quote_char = char if in_quote else ""
            continue
        if char == "," and not in_quote:
            tokens.append("".join(current))
            current = []
            continue
        current.append(char)
    tokens.append("".join(current))
    return tokens


def parse_shape_command(text: str) -> Optional[ShapeCommand]:
    """
    Parse a shape-DSL call.

    Args:
        text: A line such as ``hollowsphere(0, 64, 0, 12, "glass")``

    Returns:
        ShapeCommand with a lowercased name, or None if the text is not a call
    """
    match = _CALL_PATTERN.match(text.strip())
    if match is None:
        return None

    name = match.group(1).lower()
    params: List[Param] = []
    for token in _split_params(match.group(2)):
        token = token.strip()
        if not token:
            continue
        params.append(_coerce(token))

    return ShapeCommand(name, params)


# =============================================================================
# Primitive rasterizers
# =============================================================================

def _levels(height: float) -> range:
    """Integer offsets 0 <= dy < height."""
    return range(max(0, math.ceil(height)))


def _shell_bands(cx, y, cz, outer: int, inner: int, block: str) -> List[Instruction]:
    """Cover the square ring between ``inner`` and ``outer`` with up to four fills."""
    bands = [
        fill(cx - outer, y, cz - outer, cx + outer, y, cz - inner - 1, block),
        fill(cx - outer, y, cz + inner + 1, cx + outer, y, cz + outer, block),
    ]
    if inner > 0:
        bands.append(fill(cx - outer, y, cz - inner, cx - inner - 1, y, cz + inner, block))
        bands.append(fill(cx + inner + 1, y, cz - inner, cx + outer, y, cz + inner, block))
    return bands


def sphere(cx, cy, cz, radius, block: str, hollow: bool = False) -> List[Instruction]:
    """
    Rasterize a sphere as one horizontal slice per Y offset.

    Hollow mode replaces each slice with up to four bands covering the ring
    between the slice radius and the inner radius ``r - 1``. Near the poles
    the band would invert, so those slices stay solid.

    Args:
        cx, cy, cz: Center
        radius: Radius, floored to an integer
        block: Block id or pattern
        hollow: Emit shell bands instead of solid discs

    Returns:
        2r + 1 slices worth of instructions, bottom to top
    """
    r = math.floor(radius)
    commands = []
    inner_r2 = (r - 1) ** 2

    for dy in range(-r, r + 1):
        y = cy + dy
        slice_r = math.isqrt(r * r - dy * dy)

        if slice_r == 0:
            commands.append(fill(cx, y, cz, cx, y, cz, block))
            continue

        if hollow:
            inner_slice_r2 = inner_r2 - dy * dy
            inner_slice_r = math.isqrt(inner_slice_r2) if inner_slice_r2 > 0 else 0

            if inner_slice_r < slice_r:
                commands.extend(_shell_bands(cx, y, cz, slice_r, inner_slice_r, block))
                continue

        commands.append(fill(cx - slice_r, y, cz - slice_r, cx + slice_r, y, cz + slice_r, block))

    return commands


def dome(cx, cy, cz, radius, block: str, hollow: bool = False) -> List[Instruction]:
    """Upper half of a sphere, from the equator (dy = 0) up to the top."""
    r = math.floor(radius)
    commands = []
    inner_r2 = (r - 1) ** 2

    for dy in range(0, r + 1):
        y = cy + dy
        slice_r = math.isqrt(r * r - dy * dy)

        if slice_r == 0:
            commands.append(fill(cx, y, cz, cx, y, cz, block))
            continue

        if hollow and dy > 0:
            inner_slice_r2 = inner_r2 - dy * dy
            inner_slice_r = math.isqrt(inner_slice_r2) if inner_slice_r2 > 0 else 0

            if inner_slice_r < slice_r - 1:
                commands.extend(_shell_bands(cx, y, cz, slice_r, inner_slice_r, block))
                continue

        commands.append(fill(cx - slice_r, y, cz - slice_r, cx + slice_r, y, cz + slice_r, block))

    return commands


def cylinder(cx, cy, cz, radius, height, block: str, hollow: bool = False) -> List[Instruction]:
    """
    Stack ``height`` square layers of half-width ``radius``.

    Hollow mode emits four two-block-thick walls per level.
    """
    r = math.floor(radius)
    commands = []

    for dy in _levels(height):
        y = cy + dy
        if hollow:
            commands.append(fill(cx - r, y, cz - r, cx + r, y, cz - r + 1, block))
            commands.append(fill(cx - r, y, cz + r - 1, cx + r, y, cz + r, block))
            commands.append(fill(cx - r, y, cz - r + 2, cx - r + 1, y, cz + r - 2, block))
            commands.append(fill(cx + r - 1, y, cz - r + 2, cx + r, y, cz + r - 2, block))
        else:
            commands.append(fill(cx - r, y, cz - r, cx + r, y, cz + r, block))

    return commands


def pyramid(cx, cy, cz, base_size, height, block: str, hollow: bool = False) -> List[Instruction]:
    """
    Square pyramid tapering linearly from ``base_size`` to an apex block.

    Hollow mode emits only the four edge rows on interior levels. The bottom
    and top levels stay solid.
    """
    half_base = math.floor(base_size / 2)
    commands = []

    for dy in _levels(height):
        y = cy + dy
        level_half = math.floor(half_base * (1 - dy / height))
        if level_half <= 0:
            commands.append(fill(cx, y, cz, cx, y, cz, block))
            break

        if hollow and 0 < dy < height - 1:
            commands.append(fill(cx - level_half, y, cz - level_half, cx + level_half, y, cz - level_half, block))
            commands.append(fill(cx - level_half, y, cz + level_half, cx + level_half, y, cz + level_half, block))
            commands.append(fill(cx - level_half, y, cz - level_half + 1, cx - level_half, y, cz + level_half - 1, block))
            commands.append(fill(cx + level_half, y, cz - level_half + 1, cx + level_half, y, cz + level_half - 1, block))
        else:
            commands.append(fill(cx - level_half, y, cz - level_half, cx + level_half, y, cz + level_half, block))

    return commands


def cone(cx, cy, cz, radius, height, block: str) -> List[Instruction]:
    """Radius-based taper with a square footprint."""
    commands = []

    for dy in _levels(height):
        y = cy + dy
        level_r = math.floor(radius * (1 - dy / height))
        if level_r <= 0:
            commands.append(fill(cx, y, cz, cx, y, cz, block))
            break
        commands.append(fill(cx - level_r, y, cz - level_r, cx + level_r, y, cz + level_r, block))

    return commands


def arch(cx, cy, cz, width, height, depth, block: str) -> List[Instruction]:
    """
    Two pillars up to 60% of the height, then a parabolic opening.

    At normalized height ``p`` above the pillars the opening half-width is
    ``floor(half_width * (1 - p^2) * 0.7)``. Once it drops to one block or
    less the whole span is filled, closing the crown.
    """
    half_width = math.floor(width / 2)
    pillar_height = math.floor(height * 0.6)
    z2 = cz + depth - 1
    commands = [
        fill(cx - half_width, cy, cz, cx - half_width + 2, cy + pillar_height, z2, block),
        fill(cx + half_width - 2, cy, cz, cx + half_width, cy + pillar_height, z2, block),
    ]

    arch_height = height - pillar_height
    for dy in _levels(arch_height):
        y = cy + pillar_height + dy
        progress = dy / arch_height
        gap_half = math.floor(half_width * (1 - progress * progress) * 0.7)

        if gap_half > 1:
            commands.append(fill(cx - half_width, y, cz, cx - gap_half, y, z2, block))
            commands.append(fill(cx + gap_half, y, cz, cx + half_width, y, z2, block))
        else:
            commands.append(fill(cx - half_width, y, cz, cx + half_width, y, z2, block))

    return commands


def box(cx, cy, cz, width, height, depth, block: str, hollow: bool = True) -> List[Instruction]:
    """One fill over the bounding box; the consumer hollows it via the modifier."""
    half_width = math.floor(width / 2)
    half_depth = math.floor(depth / 2)
    return [fill(
        cx - half_width, cy, cz - half_depth,
        cx + half_width, cy + height - 1, cz + half_depth,
        block,
        "hollow" if hollow else None,
    )]


_STAIR_STEPS: Dict[str, Tuple[int, int]] = {
    "north": (0, -1),
    "south": (0, 1),
    "east": (1, 0),
    "west": (-1, 0),
}


def stairs(cx, cy, cz, direction: str, width, height, block: str) -> List[Instruction]:
    """
    One row per step, centered on the start point and climbing one block per step.

    Unknown directions fall back to west.
    """
    dx, dz = _STAIR_STEPS.get(direction.lower(), _STAIR_STEPS["west"])
    half_width = math.floor(width / 2)
    commands = []

    for step in _levels(height):
        x = cx + dx * step
        z = cz + dz * step
        y = cy + step
        if dx != 0:
            commands.append(fill(x, y, z - half_width, x, y, z + half_width, block))
        else:
            commands.append(fill(x - half_width, y, z, x + half_width, y, z, block))

    return commands


def ring(cx, cy, cz, inner_radius, outer_radius, block: str) -> List[Instruction]:
    """Outer square fill followed by an air clear of the inner square."""
    outer = math.floor(outer_radius)
    inner = math.floor(inner_radius)
    commands = [fill(cx - outer, cy, cz - outer, cx + outer, cy, cz + outer, block)]
    if inner > 0:
        commands.append(fill(cx - inner, cy, cz - inner, cx + inner, cy, cz + inner, "air"))
    return commands


def floor(x1, z1, x2, z2, y, block: str) -> List[Instruction]:
    return [fill(x1, y, z1, x2, y, z2, block)]


def wall(x1, y1, z1, x2, y2, z2, block: str) -> List[Instruction]:
    return [fill(x1, y1, z1, x2, y2, z2, block)]


# =============================================================================
# Dispatch
# =============================================================================

@dataclass(frozen=True)
class _ShapeSpec:
    """
    Dispatch entry for one shape name.

    ``signature`` holds one kind per required parameter: "n" for numbers,
    "s" for strings. ``optional`` lists kinds of trailing parameters that
    may be omitted.
    """
    handler: Callable[..., List[Instruction]]
    signature: str
    optional: str = ""
    fixed: Tuple[Tuple[str, Param], ...] = ()


_SHAPES: Dict[str, _ShapeSpec] = {
    "sphere": _ShapeSpec(sphere, "nnnns"),
    "hollowsphere": _ShapeSpec(sphere, "nnnns", fixed=(("hollow", True),)),
    "dome": _ShapeSpec(dome, "nnnns"),
    "hollowdome": _ShapeSpec(dome, "nnnns", fixed=(("hollow", True),)),
    "cylinder": _ShapeSpec(cylinder, "nnnnns"),
    "hollowcylinder": _ShapeSpec(cylinder, "nnnnns", fixed=(("hollow", True),)),
    "tube": _ShapeSpec(cylinder, "nnnnns", fixed=(("hollow", True),)),
    "pyramid": _ShapeSpec(pyramid, "nnnnns"),
    "hollowpyramid": _ShapeSpec(pyramid, "nnnnns", fixed=(("hollow", True),)),
    "cone": _ShapeSpec(cone, "nnnnns"),
    "arch": _ShapeSpec(arch, "nnnnnns"),
    "box": _ShapeSpec(box, "nnnnnns", optional="b"),
    "building": _ShapeSpec(box, "nnnnnns", optional="b"),
    "stairs": _ShapeSpec(stairs, "nnnsnns"),
    "staircase": _ShapeSpec(stairs, "nnnsnns"),
    "ring": _ShapeSpec(ring, "nnnnns"),
    "donut": _ShapeSpec(ring, "nnnnns"),
    "floor": _ShapeSpec(floor, "nnnnns"),
    "platform": _ShapeSpec(floor, "nnnnns"),
    "wall": _ShapeSpec(wall, "nnnnnns"),
    "fill": _ShapeSpec(wall, "nnnnnns"),
}

SHAPE_NAMES: Tuple[str, ...] = tuple(_SHAPES)


def normalize_shape_name(name: str) -> str:
    """Lowercase and drop ``_``/``-`` so ``hollow_sphere`` finds ``hollowsphere``."""
    return name.lower().replace("_", "").replace("-", "")


def _matches(kind: str, value: Param) -> bool:
    if kind == "n":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if kind == "s":
        return isinstance(value, str)
    if kind == "b":
        return isinstance(value, bool)
    return False


def _check_params(name: str, spec: _ShapeSpec, params: Sequence[Param]) -> Optional[List[Param]]:
    """
    Validate positional parameters against a shape signature.

    Returns:
        The parameters to pass on, or None if the call is malformed
    """
    required = len(spec.signature)
    if len(params) < required:
        logger.warning(
            "Shape %r needs %d parameters, got %d; skipping", name, required, len(params)
        )
        return None

    accepted = list(params[:required])
    for position, (kind, value) in enumerate(zip(spec.signature, accepted)):
        if not _matches(kind, value):
            logger.warning(
                "Shape %r parameter %d has unexpected value %r; skipping", name, position + 1, value
            )
            return None

    for kind, value in zip(spec.optional, params[required:]):
        if not _matches(kind, value):
            logger.warning("Shape %r ignoring optional parameter %r", name, value)
            break
        accepted.append(value)

    return accepted


def rasterize(shape_name: str, params: Sequence[Param]) -> List[Instruction]:
    """
    Rasterize a named primitive.

    Never raises. Unknown names and malformed parameter lists produce an
    empty list and a warning.

    Args:
        shape_name: Shape name, case and ``_``/``-`` insensitive
        params: Positional parameters as parsed from the DSL

    Returns:
        Ordered list of instructions
    """
    name = normalize_shape_name(shape_name)
    spec = _SHAPES.get(name)
    if spec is None:
        logger.warning("Unknown shape: %s", shape_name)
        return []

    accepted = _check_params(name, spec, params)
    if accepted is None:
        return []

    return spec.handler(*accepted, **dict(spec.fixed))


def shape_to_instructions(command: ShapeCommand) -> List[Instruction]:
    """Rasterize a parsed ShapeCommand."""
    return rasterize(command.shape, command.params)
