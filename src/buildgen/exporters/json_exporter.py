"""
JSON Exporter

Writes instructions with their pacing metadata so an external transport
can replay them exactly. Structure batches keep their grouping and
metadata (id, name, position, tags).
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Sequence, Union

from ..instructions import Instruction
from ..structures import GeneratedStructure


class JSONExporter:
    """Export instructions and structures to JSON."""

    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent

    def to_dict(
        self,
        instructions: Iterable[Instruction] = (),
        structures: Optional[Sequence[GeneratedStructure]] = None
    ) -> Dict[str, Any]:
        """
        Build the JSON document.

        Args:
            instructions: Flat instruction list
            structures: Generated structures, each with its own instructions

        Returns:
            ``{"instructions": [...]}`` plus ``"structures"`` when given
        """
        data: Dict[str, Any] = {
            "instructions": [instruction.to_dict() for instruction in instructions],
        }
        if structures is not None:
            data["structures"] = [structure.to_dict() for structure in structures]
        return data

    def to_text(
        self,
        instructions: Iterable[Instruction] = (),
        structures: Optional[Sequence[GeneratedStructure]] = None
    ) -> str:
        return json.dumps(self.to_dict(instructions, structures), indent=self.indent) + "\n"

    def export(
        self,
        output_path: Union[str, Path],
        instructions: Iterable[Instruction] = (),
        structures: Optional[Sequence[GeneratedStructure]] = None
    ):
        """
        Write the JSON document to a file.

        Args:
            output_path: Output file path (.json)
            instructions: Flat instruction list
            structures: Optional generated structures
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.to_text(instructions, structures), encoding="utf-8")
