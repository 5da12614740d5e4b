"""
Minecraft Function Exporter

A .mcfunction file is one command per line, without leading slashes,
with ``#`` comment lines. Pacing metadata cannot be expressed and is
dropped; use the JSON exporter when a transport needs it.
"""

from pathlib import Path
from typing import Iterable, List, Union

from ..instructions import Instruction


class McFunctionExporter:
    """
    Export instructions as a Minecraft function file.

    Consecutive instructions sharing a description get a single comment
    line above the group.
    """

    def __init__(self, include_descriptions: bool = True, header: str = ""):
        """
        Initialize the exporter.

        Args:
            include_descriptions: Write descriptions as ``# ...`` comments
            header: Optional comment text for the top of the file
        """
        self.include_descriptions = include_descriptions
        self.header = header

    def to_lines(self, instructions: Iterable[Instruction]) -> List[str]:
        lines = []
        if self.header:
            lines.extend(f"# {line}" for line in self.header.splitlines())

        last_description = None
        for instruction in instructions:
            description = instruction.description
            if self.include_descriptions and description and description != last_description:
                lines.append(f"# {description}")
            last_description = description
            lines.append(instruction.text)

        return lines

    def to_text(self, instructions: Iterable[Instruction]) -> str:
        return "\n".join(self.to_lines(instructions)) + "\n"

    def export(self, instructions: Iterable[Instruction], output_path: Union[str, Path]):
        """
        Write instructions to a .mcfunction file.

        Args:
            instructions: Instructions in execution order
            output_path: Output file path
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.to_text(instructions), encoding="utf-8")
