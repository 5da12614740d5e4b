"""
Theme material palettes.

Each theme groups block ids by the role they play in a structure:
- primary: main structural mass
- secondary: glass and accent surfaces
- detail: trims, rings and textures
- light: light sources
- organic: foliage and growth
- special: rare centerpiece blocks
"""

from dataclasses import dataclass
from typing import Dict, Tuple

DEFAULT_THEME = "ethereal"


@dataclass(frozen=True)
class MaterialPalette:
    """Role-tagged block ids for one theme."""
    primary: Tuple[str, ...]
    secondary: Tuple[str, ...]
    detail: Tuple[str, ...]
    light: Tuple[str, ...]
    organic: Tuple[str, ...]
    special: Tuple[str, ...]


PALETTES: Dict[str, MaterialPalette] = {
    "ethereal": MaterialPalette(
        primary=("white_concrete", "light_gray_concrete", "quartz_block"),
        secondary=("light_blue_stained_glass", "cyan_stained_glass", "white_stained_glass"),
        detail=("sea_lantern", "end_rod", "white_glazed_terracotta"),
        light=("sea_lantern", "end_rod", "glowstone"),
        organic=("azalea_leaves", "flowering_azalea_leaves", "moss_block"),
        special=("beacon", "end_crystal", "amethyst_block"),
    ),
    "obsidian": MaterialPalette(
        primary=("obsidian", "black_concrete", "crying_obsidian"),
        secondary=("purple_stained_glass", "magenta_stained_glass", "black_stained_glass"),
        detail=("purple_glazed_terracotta", "magenta_glazed_terracotta", "purpur_block"),
        light=("crying_obsidian", "shroomlight", "soul_lantern"),
        organic=("crimson_nylium", "warped_nylium", "nether_wart_block"),
        special=("dragon_egg", "end_portal_frame", "respawn_anchor"),
    ),
    "volcanic": MaterialPalette(
        primary=("blackstone", "basalt", "deepslate"),
        secondary=("magma_block", "orange_stained_glass", "red_stained_glass"),
        detail=("gilded_blackstone", "polished_blackstone", "cracked_deepslate_bricks"),
        light=("magma_block", "lava", "shroomlight"),
        organic=("crimson_stem", "nether_wart_block", "shroomlight"),
        special=("ancient_debris", "netherite_block", "lodestone"),
    ),
    "celestial": MaterialPalette(
        primary=("gold_block", "yellow_concrete", "honeycomb_block"),
        secondary=("yellow_stained_glass", "orange_stained_glass", "white_stained_glass"),
        detail=("gold_block", "raw_gold_block", "yellow_glazed_terracotta"),
        light=("glowstone", "sea_lantern", "jack_o_lantern"),
        organic=("hay_block", "honey_block", "bee_nest"),
        special=("beacon", "bell", "lightning_rod"),
    ),
    "aquatic": MaterialPalette(
        primary=("prismarine", "dark_prismarine", "prismarine_bricks"),
        secondary=("light_blue_stained_glass", "cyan_stained_glass", "blue_stained_glass"),
        detail=("sea_lantern", "blue_glazed_terracotta", "cyan_glazed_terracotta"),
        light=("sea_lantern", "conduit", "glow_lichen"),
        organic=("kelp", "seagrass", "coral_block"),
        special=("conduit", "heart_of_the_sea", "nautilus_shell"),
    ),
    "forest": MaterialPalette(
        primary=("dark_oak_log", "spruce_log", "oak_log"),
        secondary=("green_stained_glass", "lime_stained_glass", "brown_stained_glass"),
        detail=("moss_block", "mossy_cobblestone", "mossy_stone_bricks"),
        light=("shroomlight", "glow_lichen", "jack_o_lantern"),
        organic=("oak_leaves", "dark_oak_leaves", "azalea_leaves"),
        special=("bee_nest", "mushroom_stem", "brown_mushroom_block"),
    ),
    "crystalline": MaterialPalette(
        primary=("amethyst_block", "purpur_block", "white_concrete"),
        secondary=("pink_stained_glass", "magenta_stained_glass", "purple_stained_glass"),
        detail=("amethyst_cluster", "budding_amethyst", "calcite"),
        light=("amethyst_cluster", "end_rod", "sea_lantern"),
        organic=("chorus_flower", "chorus_plant", "pink_petals"),
        special=("amethyst_cluster", "tinted_glass", "budding_amethyst"),
    ),
    "mechanical": MaterialPalette(
        primary=("iron_block", "copper_block", "exposed_copper"),
        secondary=("gray_stained_glass", "light_gray_stained_glass", "orange_stained_glass"),
        detail=("redstone_lamp", "observer", "piston"),
        light=("redstone_lamp", "copper_bulb", "sea_lantern"),
        organic=("oxidized_copper", "weathered_copper", "cut_copper"),
        special=("beacon", "conduit", "lightning_rod"),
    ),
    "candy": MaterialPalette(
        primary=("pink_concrete", "magenta_concrete", "white_concrete"),
        secondary=("pink_stained_glass", "magenta_stained_glass", "light_blue_stained_glass"),
        detail=("pink_glazed_terracotta", "magenta_glazed_terracotta", "white_glazed_terracotta"),
        light=("sea_lantern", "glowstone", "pink_candle"),
        organic=("cherry_leaves", "pink_petals", "pearlescent_froglight"),
        special=("cake", "pink_candle", "magenta_candle"),
    ),
    "arctic": MaterialPalette(
        primary=("packed_ice", "blue_ice", "snow_block"),
        secondary=("light_blue_stained_glass", "white_stained_glass", "cyan_stained_glass"),
        detail=("ice", "frosted_ice", "powder_snow"),
        light=("sea_lantern", "end_rod", "verdant_froglight"),
        organic=("snow", "powder_snow", "white_wool"),
        special=("blue_ice", "beacon", "end_rod"),
    ),
}

# Checked in order; the first theme with a matching keyword wins
THEME_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("ethereal", ("ethereal", "heaven", "angel", "cloud", "sky", "divine", "pure", "light")),
    ("obsidian", ("obsidian", "dark", "shadow", "void", "gothic", "ender", "night")),
    ("volcanic", ("volcanic", "lava", "fire", "inferno", "magma", "nether", "hell", "flame")),
    ("celestial", ("celestial", "gold", "sun", "solar", "royal", "divine", "majestic")),
    ("aquatic", ("aquatic", "ocean", "water", "sea", "underwater", "atlantis", "coral")),
    ("forest", ("forest", "nature", "tree", "wood", "jungle", "green", "natural")),
    ("crystalline", ("crystal", "gem", "amethyst", "purple", "magic", "mystical", "enchanted")),
    ("mechanical", ("mechanical", "machine", "steampunk", "iron", "copper", "industrial")),
    ("candy", ("candy", "pink", "sweet", "barbie", "cute", "pastel", "bubblegum")),
    ("arctic", ("arctic", "ice", "snow", "frozen", "winter", "cold", "frost")),
)


def detect_palette(theme: str) -> str:
    """
    Pick the palette name for free-text theme.

    Matching is a case-insensitive substring test, so "lightning" matches
    the "light" keyword.

    Returns:
        A key of PALETTES, "ethereal" when nothing matches
    """
    text = theme.lower()
    for name, keywords in THEME_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return name
    return DEFAULT_THEME


def get_palette(theme: str) -> MaterialPalette:
    """Palette for free-text theme."""
    return PALETTES[detect_palette(theme)]
