"""
Instruction Model

The universal output unit of every generator: one primitive world-editing
directive plus optional pacing metadata for the transport that executes it.

Only three textual shapes are ever produced here:
    fill x1 y1 z1 x2 y2 z2 block [modifier]
    setblock x y z block
    forceload add x1 z1 x2 z2
"""

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Union

Number = Union[int, float]


@dataclass(frozen=True)
class Instruction:
    """
    A single command line sent to the game console.

    Attributes:
        text: The command text, without a leading slash
        description: Human-readable label for logs and exports
        delay_ms: Minimum pause before the next instruction is sent
        optional: If True, a failure of this instruction must not abort the batch
    """
    text: str
    description: Optional[str] = None
    delay_ms: Optional[int] = None
    optional: bool = False

    @property
    def verb(self) -> str:
        """First word of the command text."""
        return self.text.split(" ", 1)[0]

    @property
    def has_metadata(self) -> bool:
        return self.description is not None or self.delay_ms is not None or self.optional

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-friendly dict, omitting unset metadata."""
        data: Dict[str, Any] = {"text": self.text}
        if self.description is not None:
            data["description"] = self.description
        if self.delay_ms is not None:
            data["delay_ms"] = self.delay_ms
        if self.optional:
            data["optional"] = True
        return data


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, with .5 going towards +infinity."""
    return int(math.floor(value + 0.5))


def format_number(value: Number) -> str:
    """Format a coordinate, writing integral floats without a fractional part."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def fill_text(
    x1: Number, y1: Number, z1: Number,
    x2: Number, y2: Number, z2: Number,
    block: str,
    modifier: Optional[str] = None
) -> str:
    coords = " ".join(format_number(v) for v in (x1, y1, z1, x2, y2, z2))
    text = f"fill {coords} {block}"
    if modifier:
        text += f" {modifier}"
    return text


def setblock_text(x: Number, y: Number, z: Number, block: str) -> str:
    coords = " ".join(format_number(v) for v in (x, y, z))
    return f"setblock {coords} {block}"


def forceload_text(x1: Number, z1: Number, x2: Number, z2: Number) -> str:
    coords = " ".join(format_number(v) for v in (x1, z1, x2, z2))
    return f"forceload add {coords}"


def fill(
    x1: Number, y1: Number, z1: Number,
    x2: Number, y2: Number, z2: Number,
    block: str,
    modifier: Optional[str] = None
) -> Instruction:
    """Create a region fill instruction."""
    return Instruction(fill_text(x1, y1, z1, x2, y2, z2, block, modifier))


def setblock(x: Number, y: Number, z: Number, block: str) -> Instruction:
    """Create a single block placement instruction."""
    return Instruction(setblock_text(x, y, z, block))


def forceload(x1: Number, z1: Number, x2: Number, z2: Number) -> Instruction:
    """Create a region-load hint so distant chunks accept edits."""
    return Instruction(forceload_text(x1, z1, x2, z2))


def annotate(
    instructions: Iterable[Instruction],
    description: Optional[str] = None,
    delay_ms: Optional[int] = None,
    optional: bool = False
) -> List[Instruction]:
    """
    Attach metadata to a group of instructions produced by one logical step.

    The description and optional flag apply to every instruction in the
    group. The delay is attached to the last one only, so the transport
    pauses once after the whole group has been sent.

    Args:
        instructions: Instructions produced by one shape or voxel call
        description: Label for the step
        delay_ms: Pause after the group
        optional: Whether failures within the group may be ignored

    Returns:
        New list of annotated instructions
    """
    items = list(instructions)
    annotated = []
    for i, instruction in enumerate(items):
        is_last = i == len(items) - 1
        annotated.append(replace(
            instruction,
            description=description if description is not None else instruction.description,
            delay_ms=delay_ms if (is_last and delay_ms is not None) else instruction.delay_ms,
            optional=optional or instruction.optional,
        ))
    return annotated
