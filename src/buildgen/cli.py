"""
Command-Line Interface for buildgen

Usage:
    buildgen resolve plan.txt -o build.mcfunction
    buildgen generate --seed my-world --theme "volcanic spires" --format json
    buildgen image https://example.com/logo.png 0 65 0 --mode relief --max-depth 8
    buildgen carve front.png side.png 0 65 0 --block quartz_block
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from . import __version__
from .errors import ImageSourceError
from .exporters import JSONExporter, McFunctionExporter
from .generator import ImageBuildOptions, carve_silhouettes, fetch_and_build
from .greedy_fill import optimize_instructions
from .instructions import Instruction
from .resolver import resolve
from .structures import GeneratedStructure, generate_from_description, generate_structures

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="buildgen",
        description="Procedural build-command generator - shapes, voxel objects, images and themed worlds",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  buildgen resolve plan.txt -o build.mcfunction
      Resolve shape, voxel, component and image lines into commands

  buildgen generate --description "floating sky gardens" --world skyland
      Generate a themed set of structures for a world

  buildgen image heart 0 70 0 --scale 2
      Build a built-in pixel-art pattern

  buildgen image https://example.com/logo.png 0 65 50 --centered --forceload
      Fetch an image and stand it up centered on (0, 65, 50)

  buildgen carve front.png side.png 0 65 0 --max-size 48
      Carve a statue from two silhouettes

Image Modes:
  wall       - One block thick (default when --depth is 1)
  extrusion  - Constant --depth blocks thick
  relief     - Brighter pixels stand out up to --max-depth blocks
        """
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Output options shared by every subcommand
    output = argparse.ArgumentParser(add_help=False)
    output.add_argument(
        "-o", "--output",
        help="Output file (default: stdout)"
    )
    output.add_argument(
        "-f", "--format",
        choices=["mcfunction", "json"],
        default="mcfunction",
        help="Output format (default: mcfunction)"
    )
    output.add_argument(
        "--no-descriptions",
        action="store_true",
        help="Omit description comments in mcfunction output"
    )
    output.add_argument(
        "--optimize",
        action="store_true",
        help="Merge runs of single-block placements into fills"
    )

    # resolve
    resolve_parser = subparsers.add_parser(
        "resolve", parents=[output],
        help="Resolve build lines into commands"
    )
    resolve_parser.add_argument(
        "input",
        help="File with one build line per line, or - for stdin"
    )
    resolve_parser.add_argument(
        "--voxels",
        help="JSON file mapping names to custom voxel definitions"
    )

    # generate
    generate_parser = subparsers.add_parser(
        "generate", parents=[output],
        help="Generate themed structures"
    )
    generate_parser.add_argument("--seed", default="", help="Seed string")
    generate_parser.add_argument("--theme", default="", help="Free-text theme")
    generate_parser.add_argument("--scale", type=float, default=1.0, help="Size multiplier (default: 1.0)")
    generate_parser.add_argument("--complexity", type=float, default=5, help="Drives the structure count (default: 5)")
    generate_parser.add_argument("--description", help="World description; seeds and themes the run together with --world")
    generate_parser.add_argument("--world", default="world", help="World name used with --description")

    # image
    image_parser = subparsers.add_parser(
        "image", parents=[output],
        help="Build an image or built-in pixel-art pattern"
    )
    image_parser.add_argument("source", help="Image URL, local image file or pattern name (heart, star, smiley)")
    _add_position(image_parser)
    image_parser.add_argument("--mode", choices=["wall", "extrusion", "relief"], help="Projection mode")
    image_parser.add_argument("--depth", type=int, default=1, help="Extrusion depth (default: 1)")
    image_parser.add_argument("--max-depth", type=int, default=10, help="Relief depth for the brightest pixels (default: 10)")
    image_parser.add_argument("--invert", action="store_true", help="Relief: dark pixels stand out")
    image_parser.add_argument("--facing", choices=["north", "south", "east", "west"], default="south", help="Image facing (default: south)")
    image_parser.add_argument("--scale", type=int, default=1, help="Blocks per pixel (default: 1)")
    image_parser.add_argument("--max-size", type=int, default=100, help="Largest width/height in pixels (default: 100)")
    image_parser.add_argument("--timeout", type=float, help="Fetch timeout in seconds")
    image_parser.add_argument("--centered", action="store_true", help="Center the build horizontally on X Y Z")
    image_parser.add_argument("--forceload", action="store_true", help="Prepend a forceload hint for the build area")
    image_parser.add_argument("--resample", choices=["nearest", "bilinear", "bicubic", "lanczos"], default="nearest",
                              help="Downscaling filter (default: nearest)")

    # carve
    carve_parser = subparsers.add_parser(
        "carve", parents=[output],
        help="Carve a statue from front and side silhouettes"
    )
    carve_parser.add_argument("front", help="Front view image URL or file")
    carve_parser.add_argument("side", help="Side view image URL or file")
    _add_position(carve_parser)
    carve_parser.add_argument("--max-size", type=int, default=64, help="Largest width/height in pixels (default: 64)")
    carve_parser.add_argument("--block", help="Use one block for every voxel")
    carve_parser.add_argument("--timeout", type=float, help="Fetch timeout in seconds")

    return parser


def _add_position(parser: argparse.ArgumentParser):
    parser.add_argument("x", type=int)
    parser.add_argument("y", type=int)
    parser.add_argument("z", type=int)


def write_output(
    args,
    instructions: Sequence[Instruction],
    structures: Optional[Sequence[GeneratedStructure]] = None
):
    """Write instructions in the requested format to a file or stdout."""
    if args.format == "json":
        exporter = JSONExporter()
        text = exporter.to_text(instructions, structures)
    else:
        exporter = McFunctionExporter(include_descriptions=not args.no_descriptions)
        text = exporter.to_text(instructions)

    if args.output:
        path = Path(args.output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        logger.info("Wrote %d instructions to %s", len(instructions), path)
    else:
        sys.stdout.write(text)


def run_resolve(args) -> int:
    """Resolve a file of build lines."""
    if args.input == "-":
        lines = sys.stdin.read().splitlines()
    else:
        input_path = Path(args.input)
        if not input_path.exists():
            print(f"Error: Input file not found: {input_path}", file=sys.stderr)
            return 1
        lines = input_path.read_text(encoding="utf-8").splitlines()

    custom_voxels = None
    if args.voxels:
        try:
            custom_voxels = json.loads(Path(args.voxels).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            print(f"Error: Could not read voxel definitions: {e}", file=sys.stderr)
            return 1

    instructions = resolve(lines, custom_voxels, optimize=args.optimize)
    write_output(args, instructions)
    return 0


def run_generate(args) -> int:
    """Generate themed structures."""
    if args.description:
        structures = generate_from_description(args.description, args.world, args.complexity)
    else:
        structures = generate_structures(args.seed, args.theme, args.scale, args.complexity)

    for structure in structures:
        logger.info(
            "%s (%s) at %d,%d,%d: %d instructions, ~%d blocks",
            structure.name, structure.id,
            structure.position.x, structure.position.y, structure.position.z,
            len(structure.instructions), structure.estimated_block_count,
        )

    instructions = [i for structure in structures for i in structure.instructions]
    if args.optimize:
        instructions = optimize_instructions(instructions)

    write_output(args, instructions, structures)
    return 0


def run_image(args) -> int:
    """Build an image."""
    options = ImageBuildOptions(
        mode=args.mode,
        scale=args.scale,
        depth=args.depth,
        max_depth=args.max_depth,
        invert=args.invert,
        facing=args.facing,
        max_size=args.max_size,
        timeout=args.timeout,
        centered=args.centered,
        forceload=args.forceload,
        resample=args.resample,
    )

    result = asyncio.run(fetch_and_build(args.source, (args.x, args.y, args.z), options))
    logger.info("Image build: %dx%dx%d blocks, %d instructions", *result.dimensions, result.instruction_count)

    instructions = result.instructions
    if args.optimize:
        instructions = optimize_instructions(instructions)
    write_output(args, instructions)
    return 0


def run_carve(args) -> int:
    """Carve a statue from two silhouettes."""
    result = asyncio.run(carve_silhouettes(
        args.front,
        args.side,
        (args.x, args.y, args.z),
        max_size=args.max_size,
        block=args.block,
        timeout=args.timeout,
    ))

    instructions = result.instructions
    if args.optimize:
        instructions = optimize_instructions(instructions)
    write_output(args, instructions)
    return 0


COMMANDS = {
    "resolve": run_resolve,
    "generate": run_generate,
    "image": run_image,
    "carve": run_carve,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )

    try:
        return COMMANDS[args.command](args)
    except ImageSourceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
