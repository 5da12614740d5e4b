"""
Voxel Object Library

Hand-authored multi-layer objects rendered through voxels.render():
castle tower, cottage, ship, statue, lighthouse, mushroom house and airplane.

Each constant below is a VoxelDefinition. Rows run along Z (front to back),
characters along X, and layers go bottom to top.
"""

import logging
from typing import Dict, List, Optional

from .instructions import Instruction, Number
from .voxels import VoxelDefinition, render, stack

logger = logging.getLogger(__name__)


# Castle tower: battlements, windows and a door. 9 wide, 18 tall, 9 deep.
CASTLE_TOWER = VoxelDefinition(
    palette={
        "S": "stone_bricks",
        "M": "mossy_stone_bricks",
        "C": "cracked_stone_bricks",
        "D": "dark_oak_planks",
        "W": "glass_pane",
        "T": "stone_brick_stairs",
        "L": "lantern",
        "B": "polished_blackstone",
    },
    layers=[
        # Y=0-1: Foundation (slightly wider)
        *stack(2, [
            ".MMMMMMM.",
            "MMSSSSSMM",
            "MSSSSSSSM",
            "MSSSSSSSM",
            "MSSSSSSSM",
            "MSSSSSSSM",
            "MSSSSSSSM",
            "MMSSSSSMM",
            ".MMMMMMM.",
        ]),
        # Y=2: Door level
        [
            "..SSSSS..",
            ".SSSSSSS.",
            "SSS...SSS",
            "SSD...DSS",  # Door
            "SSD...DSS",
            "SSS...SSS",
            ".SSSSSSS.",
            "..SSSSS..",
            ".........",
        ],
        # Y=3-5: Lower tower
        *stack(3, [
            "..SCSCS..",
            ".SSSSSSS.",
            "SSS...SSS",
            "CS.....SC",
            "SS.....SS",
            "CS.....SC",
            "SSS...SSS",
            ".SSSSSSS.",
            "..SCSCS..",
        ]),
        # Y=6: Window level
        [
            "..SSSSS..",
            ".SSWSWSS.",
            "SSS...SSS",
            "SW.....WS",
            "SS.....SS",
            "SW.....WS",
            "SSS...SSS",
            ".SSWSWSS.",
            "..SSSSS..",
        ],
        # Y=7-10: Mid tower
        *stack(4, [
            "..SCSCS..",
            ".SSSSSSS.",
            "SSS...SSS",
            "CS.....SC",
            "SS.....SS",
            "CS.....SC",
            "SSS...SSS",
            ".SSSSSSS.",
            "..SCSCS..",
        ]),
        # Y=11: Upper window level
        [
            "..SSSSS..",
            ".SSWSWSS.",
            "SSW...WSS",
            "SW..L..WS",  # Lantern
            "SS.....SS",
            "SW.....WS",
            "SSW...WSS",
            ".SSWSWSS.",
            "..SSSSS..",
        ],
        # Y=12-14: Upper tower
        *stack(3, [
            "..SSSSS..",
            ".SSSSSSS.",
            "SSS...SSS",
            "SS.....SS",
            "SS.....SS",
            "SS.....SS",
            "SSS...SSS",
            ".SSSSSSS.",
            "..SSSSS..",
        ]),
        # Y=15: Battlement floor
        [
            ".BBBBBBB.",
            "BBBBBBBBB",
            "BBBBBBBBB",
            "BBBBBBBBB",
            "BBBBBBBBB",
            "BBBBBBBBB",
            "BBBBBBBBB",
            "BBBBBBBBB",
            ".BBBBBBB.",
        ],
        # Y=16-17: Battlements (crenellations)
        *stack(2, [
            ".S.S.S.S.",
            "S.......S",
            ".........",
            "S.......S",
            ".........",
            "S.......S",
            ".........",
            "S.......S",
            ".S.S.S.S.",
        ]),
    ],
)


# Cottage: chimney, windows and a pitched roof. 11 wide, 10 tall, 9 deep.
COTTAGE = VoxelDefinition(
    palette={
        "S": "stone_bricks",
        "W": "oak_planks",
        "L": "oak_log",
        "G": "glass_pane",
        "D": "oak_door",
        "R": "bricks",  # Roof
        "C": "cobblestone",  # Chimney
        "F": "campfire",
    },
    layers=[
        # Y=0: Foundation
        [
            "SSSSSSSSSSS",
            "SSSSSSSSSSS",
            "SSSSSSSSSSS",
            "SSSSSSSSSSS",
            "SSSSSSSSSSS",
            "SSSSSSSSSSS",
            "SSSSSSSSSSS",
            "SSSSSSSSSSS",
            "SSSSSSSSSSS",
        ],
        # Y=1: Floor level with door
        [
            "LWWWWWWWWWL",
            "W.........W",
            "W.........W",
            "W.........W",
            "...........",  # Door opening
            "W.........W",
            "W.........W",
            "W.........W",
            "LWWWWWWWWWL",
        ],
        # Y=2: Walls with windows
        [
            "LWGWWWWGWWL",
            "W.........W",
            "G.........G",
            "W.........W",
            "...........",
            "W.........W",
            "G.........G",
            "W.........W",
            "LWGWWWWGWWL",
        ],
        # Y=3: Upper walls
        [
            "LWWWWWWWWWL",
            "W.........W",
            "W.........W",
            "W.........W",
            "W.........W",
            "W.........W",
            "W.........W",
            "W.........W",
            "LWWWCWWWWWL",  # Chimney start
        ],
        # Y=4: Roof start
        [
            ".RRRRRRRRR.",
            "RRRRRRRRRRR",
            "RR.......RR",
            "RR.......RR",
            "RR.......RR",
            "RR.......RR",
            "RR.......RR",
            "RRRRRRRRRRR",
            ".RRRRCRRRR.",
        ],
        # Y=5: Roof middle
        [
            "..RRRRRRR..",
            ".RRRRRRRRR.",
            "RR.......RR",
            "R.........R",
            "R.........R",
            "R.........R",
            "RR.......RR",
            ".RRRRRRRRR.",
            "..RRRCRRRR.",
        ],
        # Y=6: Roof upper
        [
            "...RRRRR...",
            "..RRRRRRR..",
            ".RR.....RR.",
            "R.........R",
            "R.........R",
            "R.........R",
            ".RR.....RR.",
            "..RRRRRRR..",
            "...RRCRR...",
        ],
        # Y=7: Roof peak
        [
            "....RRR....",
            "...RRRRR...",
            "..RRRRRRR..",
            ".RRRRRRRRR.",
            ".RRRRRRRRR.",
            ".RRRRRRRRR.",
            "..RRRRRRR..",
            "...RRRRR...",
            "....RCR....",
        ],
        # Y=8-9: Chimney top
        *stack(2, [
            "...........",
            "...........",
            "...........",
            "...........",
            "...........",
            "...........",
            "...........",
            "...........",
            "....CCC....",
        ]),
    ],
)


# Sailing ship: hull, two masts and sails. 7 wide, 15 tall, 20 long.
SHIP = VoxelDefinition(
    palette={
        "W": "oak_planks",  # Hull
        "D": "dark_oak_planks",  # Deck details
        "L": "oak_log",  # Mast
        "S": "white_wool",  # Sails
        "R": "red_wool",  # Sail stripe
        "F": "oak_fence",  # Railings
        "B": "barrel",
    },
    layers=[
        # Y=0: Hull bottom (keel)
        [
            ".......",
            ".......",
            ".......",
            "...W...",
            "...W...",
            "...W...",
            "...W...",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "...W...",
            "...W...",
            "...W...",
            ".......",
            ".......",
            ".......",
        ],
        # Y=1: Lower hull
        [
            ".......",
            ".......",
            "...W...",
            "..WWW..",
            "..WWW..",
            ".WWWWW.",
            ".WWWWW.",
            ".WWWWW.",
            "WWWWWWW",
            "WWWWWWW",
            "WWWWWWW",
            "WWWWWWW",
            ".WWWWW.",
            ".WWWWW.",
            ".WWWWW.",
            "..WWW..",
            "..WWW..",
            "...W...",
            ".......",
            ".......",
        ],
        # Y=2: Mid hull
        [
            ".......",
            "...W...",
            "..WWW..",
            ".WW.WW.",
            ".W...W.",
            "WW...WW",
            "W.....W",
            "W.....W",
            "W.....W",
            "W..B..W",
            "W..B..W",
            "W.....W",
            "W.....W",
            "W.....W",
            "WW...WW",
            ".W...W.",
            ".WW.WW.",
            "..WWW..",
            "...W...",
            ".......",
        ],
        # Y=3: Deck level
        [
            ".......",
            "..FWF..",
            ".FWDWF.",
            "FWD.DWF",
            "WD...DW",
            "WD...DW",
            "W..L..W",  # Mast
            "WD...DW",
            "WD...DW",
            "WD...DW",
            "WD...DW",
            "WD...DW",
            "W..L..W",  # Mast
            "WD...DW",
            "WD...DW",
            "FWD.DWF",
            ".FWDWF.",
            "..FWF..",
            ".......",
            ".......",
        ],
        # Y=4-6: Masts
        *stack(3, [
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            "...L...",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            "...L...",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
        ]),
        # Y=7-9: Lower sails
        *stack(3, [
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".SSSSS.",
            ".SSLSS.",
            ".SSSSS.",
            ".SRSSS.",
            ".SSSSS.",
            ".SSSSS.",
            ".SSLSS.",
            ".SSSSS.",
            ".SRSSS.",
            ".SSSSS.",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
        ]),
        # Y=10-12: Upper masts and sails
        *stack(3, [
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            "..SSS..",
            "..SLS..",
            "..SSS..",
            "..SSS..",
            "..SSS..",
            "..SSS..",
            "..SLS..",
            "..SSS..",
            "..SSS..",
            "..SSS..",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
        ]),
        # Y=13-14: Mast tops
        *stack(2, [
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            "...L...",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            "...L...",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
        ]),
    ],
)


# Statue of a figure on a stone pedestal. 5 wide, 12 tall, 5 deep.
STATUE = VoxelDefinition(
    palette={
        "S": "smooth_stone",  # Pedestal
        "Q": "quartz_block",  # Statue body
        "G": "gold_block",  # Accents
        "C": "chiseled_stone_bricks",
    },
    layers=[
        # Y=0-1: Pedestal base
        *stack(2, [
            "SSSSS",
            "SCSCS",
            "SCSCS",
            "SCSCS",
            "SSSSS",
        ]),
        # Y=2: Pedestal top
        [
            ".SSS.",
            "SGGGS",
            "SGSGS",
            "SGGGS",
            ".SSS.",
        ],
        # Y=3-4: Feet/legs
        *stack(2, [
            ".....",
            ".Q.Q.",
            ".....",
            ".Q.Q.",
            ".....",
        ]),
        # Y=5-6: Lower body/robe
        *stack(2, [
            ".....",
            ".QQQ.",
            ".QQQ.",
            ".QQQ.",
            ".....",
        ]),
        # Y=7: Torso
        [
            ".....",
            ".QQQ.",
            "QQQQQ",
            ".QQQ.",
            ".....",
        ],
        # Y=8: Shoulders and arms
        [
            ".....",
            "QQQQQ",
            "Q.Q.Q",
            "QQQQQ",
            ".....",
        ],
        # Y=9: Neck
        [
            ".....",
            "..Q..",
            ".QQQ.",
            "..Q..",
            ".....",
        ],
        # Y=10: Head
        [
            ".....",
            ".QQQ.",
            ".QQQ.",
            ".QQQ.",
            ".....",
        ],
        # Y=11: Crown/top
        [
            "..G..",
            ".GQG.",
            "G.Q.G",
            ".GQG.",
            "..G..",
        ],
    ],
)


# Striped lighthouse with a light at the top. 7 wide, 18 tall, 7 deep.
LIGHTHOUSE = VoxelDefinition(
    palette={
        "W": "white_concrete",
        "R": "red_concrete",
        "S": "stone_bricks",
        "G": "glass",
        "L": "glowstone",
        "B": "polished_blackstone",
    },
    layers=[
        # Y=0-1: Foundation
        *stack(2, [
            ".SSSSS.",
            "SSSSSSS",
            "SSSSSSS",
            "SSSSSSS",
            "SSSSSSS",
            "SSSSSSS",
            ".SSSSS.",
        ]),
        # Y=2-4: Base (white)
        *stack(3, [
            "..WWW..",
            ".WWWWW.",
            "WWW.WWW",
            "WW...WW",
            "WWW.WWW",
            ".WWWWW.",
            "..WWW..",
        ]),
        # Y=5-7: Red stripe
        *stack(3, [
            "..RRR..",
            ".RRRRR.",
            "RRR.RRR",
            "RR...RR",
            "RRR.RRR",
            ".RRRRR.",
            "..RRR..",
        ]),
        # Y=8-10: White section
        *stack(3, [
            "..WWW..",
            ".WWWWW.",
            "WWW.WWW",
            "WW...WW",
            "WWW.WWW",
            ".WWWWW.",
            "..WWW..",
        ]),
        # Y=11-13: Red section
        *stack(3, [
            "...R...",
            "..RRR..",
            ".RR.RR.",
            "RR...RR",
            ".RR.RR.",
            "..RRR..",
            "...R...",
        ]),
        # Y=14: Glass observation deck
        [
            "..BBB..",
            ".BGGGB.",
            "BGG.GGB",
            "BG...GB",
            "BGG.GGB",
            ".BGGGB.",
            "..BBB..",
        ],
        # Y=15: Light level
        [
            "..BBB..",
            ".BLLB.",
            "BL.L.LB",
            "B.LLL.B",
            "BL.L.LB",
            ".BLLB.",
            "..BBB..",
        ],
        # Y=16-17: Roof
        [
            "...B...",
            "..BBB..",
            ".BBBBB.",
            "BBBBBBB",
            ".BBBBB.",
            "..BBB..",
            "...B...",
        ],
        [
            ".......",
            "...B...",
            "..BBB..",
            ".BBBBB.",
            "..BBB..",
            "...B...",
            ".......",
        ],
    ],
)


# Mushroom house with a door in the stem. 11 wide, 12 tall, 11 deep.
MUSHROOM_HOUSE = VoxelDefinition(
    palette={
        "M": "mushroom_stem",
        "R": "red_mushroom_block",
        "W": "white_concrete",  # Spots
        "D": "oak_door",
        "G": "glass_pane",
        "L": "lantern",
    },
    layers=[
        # Y=0-1: Stem base
        *stack(2, [
            "...........",
            "...........",
            "...........",
            "....MMM....",
            "...MMMMM...",
            "...MMMMM...",
            "...MMMMM...",
            "....MMM....",
            "...........",
            "...........",
            "...........",
        ]),
        # Y=2: Door level
        [
            "...........",
            "...........",
            "...........",
            "....M.M....",
            "...M...M...",
            "........... ",  # Door
            "...M...M...",
            "....MMM....",
            "...........",
            "...........",
            "...........",
        ],
        # Y=3-4: Inside stem
        *stack(2, [
            "...........",
            "...........",
            "...........",
            "....M.M....",
            "...M...M...",
            "...M.L.M...",  # Lantern inside
            "...M...M...",
            "....M.M....",
            "...........",
            "...........",
            "...........",
        ]),
        # Y=5: Cap start (wide)
        [
            "..RRRRRRR..",
            ".RRRRRRRRR.",
            "RRRRWRRWRRR",
            "RRRR.M.RRRR",
            "RRW..M..WRR",
            "RRR..M..RRR",
            "RRW..M..WRR",
            "RRRR.M.RRRR",
            "RRRRWRRWRRR",
            ".RRRRRRRRR.",
            "..RRRRRRR..",
        ],
        # Y=6-7: Cap middle
        *stack(2, [
            ".RRWRRRRWR.",
            "RRRRRRRRRR.",
            "RWRRRRRRRWR",
            "RRRR...RRRR",
            "RRR.....RRR",
            "RRR.....RRR",
            "RRR.....RRR",
            "RRRR...RRRR",
            "RWRRRRRRRWR",
            ".RRRRRRRRR.",
            ".RRWRRRRWR.",
        ]),
        # Y=8-9: Cap upper
        *stack(2, [
            "..RRWWWRR..",
            ".RRRRRRRR..",
            "RRRRRRRRRR.",
            "RRRR...RRRR",
            "WRR.....RRW",
            "WRR.....RRW",
            "WRR.....RRW",
            "RRRR...RRRR",
            "RRRRRRRRRR.",
            ".RRRRRRRR..",
            "..RRWWWRR..",
        ]),
        # Y=10: Cap top
        [
            "...RRRRR...",
            "..RRRRRRR..",
            ".RRRRWRRRR.",
            "RRRRRRRRRR.",
            "RRWRRRRRWRR",
            "RRRRRRRRRR.",
            "RRWRRRRRWRR",
            "RRRRRRRRRR.",
            ".RRRRWRRRR.",
            "..RRRRRRR..",
            "...RRRRR...",
        ],
        # Y=11: Cap peak
        [
            "...........",
            "...RRRRR...",
            "..RRWWWRR..",
            ".RRRRRRRR..",
            ".RWRRRRRW..",
            ".RRRRRRRR..",
            ".RWRRRRRW..",
            ".RRRRRRRR..",
            "..RRWWWRR..",
            "...RRRRR...",
            "...........",
        ],
    ],
)


# Airplane with wings and a tail fin. 7 wide, 5 tall, 15 long.
AIRPLANE = VoxelDefinition(
    palette={
        "W": "white_concrete",
        "B": "blue_concrete",
        "G": "glass",
        "R": "red_concrete",
        "I": "iron_block",
    },
    layers=[
        # Y=0: Landing gear
        [
            ".......",
            ".......",
            ".......",
            ".......",
            "..I.I..",
            "..I.I..",
            ".......",
            ".......",
            ".......",
            ".......",
            "..I.I..",
            ".......",
            ".......",
            ".......",
            ".......",
        ],
        # Y=1: Fuselage bottom
        [
            ".......",
            ".......",
            "...W...",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "...W...",
            ".......",
            ".......",
        ],
        # Y=2: Fuselage with wings
        [
            ".......",
            "...R...",
            "..WWW..",
            ".WGGGW.",
            "WWGGGWW",
            "WWWWWWW",
            "WWWWWWW",
            "WWWWWWW",
            "WWWWWWW",
            "WWWWWWW",
            "WWGGGWW",
            ".WGGGW.",
            "..WWW..",
            "...W...",
            ".......",
        ],
        # Y=3: Top with tail start
        [
            "...B...",
            "...B...",
            "...W...",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "..WWW..",
            "...W...",
            ".......",
            ".......",
        ],
        # Y=4: Tail fin
        [
            "...B...",
            "...B...",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
        ],
    ],
)


VOXEL_OBJECTS: Dict[str, VoxelDefinition] = {
    "castletower": CASTLE_TOWER,
    "tower": CASTLE_TOWER,
    "cottage": COTTAGE,
    "house": COTTAGE,
    "ship": SHIP,
    "boat": SHIP,
    "statue": STATUE,
    "lighthouse": LIGHTHOUSE,
    "mushroom": MUSHROOM_HOUSE,
    "mushroomhouse": MUSHROOM_HOUSE,
    "airplane": AIRPLANE,
    "plane": AIRPLANE,
}


def normalize_object_name(name: str) -> str:
    """Lowercase and strip ``_``/``-``: ``Castle_Tower`` -> ``castletower``."""
    return name.lower().replace("_", "").replace("-", "")


def get_object(name: str) -> Optional[VoxelDefinition]:
    """Look up a built-in object by any spelling of its name, or None."""
    return VOXEL_OBJECTS.get(normalize_object_name(name))


def build_object(name: str, x: Number, y: Number, z: Number, scale: Number = 1) -> List[Instruction]:
    """
    Render a built-in object.

    Args:
        name: Object name, e.g. "lighthouse" or "castle_tower"
        x, y, z: World position of the object's corner
        scale: Blocks per grid cell

    Returns:
        Placement instructions, or an empty list for unknown names
    """
    definition = get_object(name)
    if definition is None:
        logger.warning("Unknown voxel object: %s", name)
        return []
    return render(definition, x, y, z, scale)
