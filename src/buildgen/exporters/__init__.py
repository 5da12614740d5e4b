"""
Export modules for instruction lists.

Supported formats:
- Minecraft function (.mcfunction) - Runnable with /function in a datapack
- JSON (.json) - Instructions with pacing metadata, optionally with structures
"""

from .mcfunction_exporter import McFunctionExporter
from .json_exporter import JSONExporter

__all__ = ["McFunctionExporter", "JSONExporter"]
