"""Product presets: ink colours, handwriting fonts and the default config.

These are the choices offered by the editor UI; the engine itself accepts any
colour and any font family.
"""

from enum import Enum
from typing import List, NamedTuple, Tuple

from src.utils.validators import PaperType, RenderConfig

# Reference page raster (W, H); the engine always reads the real target size
REFERENCE_CANVAS_PX: Tuple[int, int] = (800, 1000)


class InkColor(str, Enum):
    BLACK = "#1a1a1a"
    BLUE = "#1e3a8a"
    RED = "#991b1b"
    PENCIL = "#525252"
    FOUNTAIN_BLUE = "#004aad"


class FontOption(NamedTuple):
    name: str
    family: str


HANDWRITING_FONTS: List[FontOption] = [
    FontOption("Caveat", '"Caveat", cursive'),
    FontOption("Patrick Hand", '"Patrick Hand", cursive'),
    FontOption("Indie Flower", '"Indie Flower", cursive'),
    FontOption("Shadows Into Light", '"Shadows Into Light", cursive'),
    FontOption("Homemade Apple", '"Homemade Apple", cursive'),
    FontOption("Reenie Beanie", '"Reenie Beanie", cursive'),
    FontOption("Zeyada", '"Zeyada", cursive'),
    FontOption("Dancing Script", '"Dancing Script", cursive'),
    FontOption("Gloria Hallelujah", '"Gloria Hallelujah", cursive'),
    # Chinese
    FontOption("Zhi Mang Xing (中文)", '"Zhi Mang Xing", cursive'),
    FontOption("Long Cang (中文)", '"Long Cang", cursive'),
    FontOption("Ma Shan Zheng (中文)", '"Ma Shan Zheng", cursive'),
    FontOption("Liu Jian Mao Cao (中文)", '"Liu Jian Mao Cao", cursive'),
]

DEFAULT_CONFIG = RenderConfig(
    font_family=HANDWRITING_FONTS[0].family,
    font_size=24,
    paper_type=PaperType.LINED,
    ink_color=InkColor.BLUE.value,
    line_height=1.5,
    letter_spacing=0,
    messiness=0.3,
    margins=40,
)


def font_option(name: str) -> FontOption:
    """Look up a handwriting font preset by display name (case-insensitive)."""
    wanted = name.strip().lower()
    for option in HANDWRITING_FONTS:
        if option.name.lower() == wanted or option.name.lower().split(" (")[0] == wanted:
            return option
    raise KeyError(f"Unknown handwriting font preset: {name!r}")
