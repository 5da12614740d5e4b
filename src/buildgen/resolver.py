"""
Command Resolver

The single entry point that turns a mixed list of build lines into one
ordered instruction list. A line can be:
- a custom voxel call, e.g. ``dragon(0, 64, 0, 2)``
- a built-in voxel object, e.g. ``lighthouse(10, 64, 10)``
- a component, e.g. ``component("throne", 0, 64, 0, "emerald")`` or ``throne(0, 64, 0)``
- a pixel-art image, e.g. ``image("heart", 0, 70, 0, 2)`` or ``star(0, 70, 0)``
- a shape, e.g. ``hollowsphere(0, 64, 0, 12, "glass")``
- a raw ``fill``/``setblock``/``forceload`` command, passed through verbatim

Names are tried in that order. Lines starting with ``// `` are comments;
``//pos1 ...`` style lines are not comments but are dropped like any other
unrecognized line.

Each line is classified into a request object first and then rendered, so
one bad line never affects the others.
"""

import functools
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .components import get_component, render_component
from .generator import ImageBuildOptions, build_builtin
from .greedy_fill import optimize_instructions
from .instructions import Instruction, Number
from .objects import get_object
from .pixel_art import get_pixel_art
from .shapes import Param, ShapeCommand, normalize_shape_name, parse_shape_command, shape_to_instructions
from .voxels import VoxelDefinition, render

logger = logging.getLogger(__name__)

RAW_PREFIXES = ("fill ", "setblock ", "forceload ")
IMAGE_CALLS = ("image", "pixelart")


@dataclass(frozen=True)
class VoxelRef:
    """Render a custom or built-in voxel definition."""
    name: str
    definition: VoxelDefinition
    x: Number
    y: Number
    z: Number
    scale: Number = 1


@dataclass(frozen=True)
class ComponentRef:
    name: str
    x: Number
    y: Number
    z: Number
    variant: Optional[str] = None
    scale: Number = 1


@dataclass(frozen=True)
class ImageRef:
    """Build a built-in pixel-art pattern standing upright."""
    name: str
    x: Number
    y: Number
    z: Number
    scale: int = 2
    depth: int = 1
    facing: str = "south"


@dataclass(frozen=True)
class ShapeRequest:
    command: ShapeCommand


@dataclass(frozen=True)
class RawPassthrough:
    text: str


Request = Union[VoxelRef, ComponentRef, ImageRef, ShapeRequest, RawPassthrough]


def is_comment(line: str) -> bool:
    """True for ``//`` followed by whitespace or nothing."""
    return line.startswith("//") and (len(line) == 2 or line[2].isspace())


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(params: Sequence[Param], index: int, default: Number) -> Number:
    """Parameter at ``index`` if it is a non-zero number, else the default."""
    if index < len(params) and _is_number(params[index]) and params[index]:
        return params[index]
    return default


def _string(params: Sequence[Param], index: int) -> Optional[str]:
    if index < len(params) and isinstance(params[index], str):
        return params[index]
    return None


def _coords(name: str, params: Sequence[Param], start: int) -> Optional[Tuple[Number, Number, Number]]:
    values = params[start:start + 3]
    if len(values) < 3 or not all(_is_number(v) for v in values):
        logger.warning("%s needs numeric x, y, z; got %r", name, list(values))
        return None
    return (values[0], values[1], values[2])


def _custom_key(name: str) -> str:
    return name.lower().replace("-", "_")


def prepare_custom_voxels(
    custom_voxels: Optional[Mapping[str, Union[VoxelDefinition, Mapping[str, Any]]]]
) -> Dict[str, VoxelDefinition]:
    """
    Normalize a caller-supplied voxel table.

    Keys are lowercased with ``-`` read as ``_``, since call names are word
    characters only. JSON-style dicts are converted. Invalid entries are
    logged and left out.
    """
    table: Dict[str, VoxelDefinition] = {}
    for name, value in (custom_voxels or {}).items():
        if isinstance(value, VoxelDefinition):
            table[_custom_key(name)] = value
            continue
        try:
            table[_custom_key(name)] = VoxelDefinition.from_dict(value)
        except (ValueError, AttributeError, TypeError) as e:
            logger.warning("Ignoring invalid custom voxel %r: %s", name, e)
    return table


def _lookup_custom(name: str, custom: Mapping[str, VoxelDefinition]) -> Optional[VoxelDefinition]:
    return custom.get(_custom_key(name))


def classify(line: str, custom: Optional[Mapping[str, VoxelDefinition]] = None) -> Optional[Request]:
    """
    Turn one non-comment line into a request.

    Args:
        line: Stripped input line
        custom: Prepared custom voxel table (see prepare_custom_voxels)

    Returns:
        A request, or None if the line should be dropped
    """
    command = parse_shape_command(line)
    if command is None:
        if line.startswith(RAW_PREFIXES):
            return RawPassthrough(line)
        return None

    name = command.shape
    key = normalize_shape_name(name)
    params = command.params

    definition = _lookup_custom(name, custom or {})
    if definition is None:
        definition = get_object(name)
    if definition is not None:
        coords = _coords(name, params, 0)
        if coords is None:
            return None
        return VoxelRef(name, definition, *coords, scale=_number(params, 3, 1))

    if name == "component" or get_component(name) is not None:
        offset = 1 if name == "component" else 0
        component_name = _string(params, 0) if offset else name
        if component_name is None:
            logger.warning("component() needs a name as its first parameter")
            return None
        coords = _coords(component_name, params, offset)
        if coords is None:
            return None
        return ComponentRef(
            component_name,
            *coords,
            variant=_string(params, offset + 3),
            scale=_number(params, offset + 4, 1),
        )

    if name in IMAGE_CALLS or get_pixel_art(key) is not None:
        offset = 1 if name in IMAGE_CALLS else 0
        image_name = _string(params, 0) if offset else key
        if image_name is None:
            logger.warning("%s() needs a pattern name as its first parameter", name)
            return None
        coords = _coords(image_name, params, offset)
        if coords is None:
            return None
        return ImageRef(
            image_name,
            *coords,
            scale=int(_number(params, offset + 3, 2)),
            depth=int(_number(params, offset + 4, 1)),
            facing=_string(params, offset + 5) or "south",
        )

    return ShapeRequest(command)


@functools.singledispatch
def render_request(request) -> List[Instruction]:
    raise TypeError(f"Unsupported request type: {type(request).__name__}")


@render_request.register
def _(request: VoxelRef) -> List[Instruction]:
    logger.debug("Building voxel %s at (%s, %s, %s) scale %s",
                 request.name, request.x, request.y, request.z, request.scale)
    return render(request.definition, request.x, request.y, request.z, request.scale)


@render_request.register
def _(request: ComponentRef) -> List[Instruction]:
    return render_component(request.name, request.x, request.y, request.z, request.variant, request.scale)


@render_request.register
def _(request: ImageRef) -> List[Instruction]:
    options = ImageBuildOptions(scale=request.scale, depth=request.depth, facing=request.facing)
    return build_builtin(request.name, (request.x, request.y, request.z), options).instructions


@render_request.register
def _(request: ShapeRequest) -> List[Instruction]:
    return shape_to_instructions(request.command)


@render_request.register
def _(request: RawPassthrough) -> List[Instruction]:
    return [Instruction(request.text)]


def resolve(
    raw_lines: Union[str, Iterable[str]],
    custom_voxels: Optional[Mapping[str, Union[VoxelDefinition, Mapping[str, Any]]]] = None,
    optimize: bool = False
) -> List[Instruction]:
    """
    Resolve build lines into one ordered instruction list.

    Never raises. Lines that cannot be resolved contribute nothing and are
    logged.

    Args:
        raw_lines: Lines to resolve, or one string that is split into lines
        custom_voxels: Extra voxel definitions by name (objects or JSON dicts)
        optimize: Merge runs of single-block placements into fills

    Returns:
        Instructions in input order
    """
    if isinstance(raw_lines, str):
        raw_lines = raw_lines.splitlines()

    custom = prepare_custom_voxels(custom_voxels)
    result: List[Instruction] = []

    for raw in raw_lines:
        line = raw.strip()
        if not line or is_comment(line):
            continue

        try:
            request = classify(line, custom)
            if request is None:
                logger.debug("Dropping unrecognized line: %s", line)
                continue
            result.extend(render_request(request))
        except Exception:
            logger.exception("Failed to resolve line: %s", line)

    if optimize:
        result = optimize_instructions(result)

    logger.debug("Resolved %d instructions", len(result))
    return result
