"""Per-glyph humanization: jittered affine transform + ink compositing.

Each visible character gets its own random transform, sampled independently:
    - rotation  θ  ∈ [−0.2·m, 0.2·m] rad
    - y offset  dy ∈ [−5·m, 5·m] px
    - scale     k  ∈ [1 − 0.05·m, 1 + 0.05·m]
where m is messiness ∈ [0, 1]. At m = 0 the transform is exactly identity
plus translation, i.e. plain typeset text.

The transform is an explicit 2×3 matrix built per character:

    A = T(x, y + dy) · R(θ) · S(k)

applied to the glyph's local frame (origin at the glyph's left/bottom anchor).
Nothing is mutated between characters, so transforms never compound.

Rasterization:
    1. Pillow draws the glyph coverage into a small 'L' tile (anchor 'ld',
       i.e. the text bottom sits on the line, like a 'bottom' text baseline)
    2. cv2.warpAffine maps the tile into the canvas ROI covered by A
    3. The ink colour is alpha-composited through the warped coverage

The local cursor advances by each character's measured width, unaffected by
rotation or scale, so characters stay adjacent.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

import cv2
import numpy as np
from PIL import Image, ImageDraw

from src.utils import color as color_utils
from src.utils.validators import PaperType

from . import randomness
from .fonts import measure
from .layout import TextRun
from .paper import BLUEPRINT_INK_COLOR, coerce_paper_type

logger = logging.getLogger(__name__)

MAX_ROTATION_RAD = 0.2
MAX_OFFSET_Y_PX = 5.0
MAX_SCALE_DEV = 0.05
TILE_PAD_PX = 2


@dataclass(frozen=True)
class GlyphJitter:
    """Random perturbation of one glyph."""
    angle: float = 0.0
    dy: float = 0.0
    scale: float = 1.0

    @classmethod
    def sample(cls, rng, messiness: float) -> 'GlyphJitter':
        """Draw rotation, vertical offset and scale (in that order) from ``rng``."""
        angle = randomness.uniform_centered(rng, MAX_ROTATION_RAD * messiness)
        dy = randomness.uniform_centered(rng, MAX_OFFSET_Y_PX * messiness)
        scale = 1.0 + randomness.uniform_centered(rng, MAX_SCALE_DEV * messiness)
        return cls(angle, dy, scale)

    @property
    def is_identity(self) -> bool:
        return self.angle == 0.0 and self.dy == 0.0 and self.scale == 1.0


@dataclass(frozen=True)
class GlyphPlacement:
    """Record of one drawn glyph.

    Attributes
    ----------
    char : str
        The character
    x, y : float
        Glyph origin before jitter (y is the line's text bottom)
    line : int
        Line index from layout
    jitter : GlyphJitter
        Applied perturbation
    """
    char: str
    x: float
    y: float
    line: int
    jitter: GlyphJitter


def glyph_matrix(x: float, y: float, jitter: GlyphJitter) -> np.ndarray:
    """2×3 affine T(x, y + dy) · R(angle) · S(scale) for one glyph.

    Returns
    -------
    np.ndarray
        Matrix mapping glyph-local coordinates to canvas pixels, shape (2, 3)
    """
    c = math.cos(jitter.angle) * jitter.scale
    s = math.sin(jitter.angle) * jitter.scale
    return np.array([
        [c, -s, x],
        [s, c, y + jitter.dy],
    ], dtype=np.float64)


def effective_ink_color(ink_color: str, paper_type: Union[PaperType, str]) -> Tuple[float, float, float]:
    """Ink colour for a render pass; Blueprint paper always writes in white."""
    if coerce_paper_type(paper_type) == PaperType.BLUEPRINT:
        return color_utils.parse_color(BLUEPRINT_INK_COLOR)
    return color_utils.parse_color(ink_color)


class GlyphRenderer:
    """Draw text runs glyph by glyph with random jitter.

    Parameters
    ----------
    font : PIL.ImageFont.FreeTypeFont
        Active font (from FontResolver)
    rng : object with random(), optional
        Jitter source; process-wide generator if None
    """

    def __init__(self, font, rng=None):
        self.font = font
        self.rng = randomness.resolve(rng)
        self._tiles: Dict[str, Optional[Tuple[np.ndarray, float, float]]] = {}
        self._advances: Dict[str, float] = {}

    def advance(self, ch: str) -> float:
        """Measured advance width of one character (cached)."""
        width = self._advances.get(ch)
        if width is None:
            width = measure(self.font, ch)
            self._advances[ch] = width
        return width

    def _tile(self, ch: str) -> Optional[Tuple[np.ndarray, float, float]]:
        """Coverage tile for ``ch`` plus the anchor position inside it.

        Returns
        -------
        tuple or None
            (coverage (h, w) float32 [0,1], anchor_x, anchor_y), or None for
            characters without ink
        """
        if ch in self._tiles:
            return self._tiles[ch]

        x0, y0, x1, y1 = self.font.getbbox(ch, anchor="ld")
        tile = None
        if x1 > x0 and y1 > y0:
            pad = TILE_PAD_PX
            w = int(math.ceil(x1 - x0)) + 2 * pad
            h = int(math.ceil(y1 - y0)) + 2 * pad
            ax, ay = pad - x0, pad - y0
            img = Image.new("L", (w, h), 0)
            ImageDraw.Draw(img).text((ax, ay), ch, font=self.font, fill=255, anchor="ld")
            coverage = np.asarray(img, dtype=np.float32) / 255.0
            if coverage.any():
                tile = (coverage, float(ax), float(ay))
        self._tiles[ch] = tile
        return tile

    def draw_glyph(
        self,
        canvas: np.ndarray,
        ch: str,
        x: float,
        y: float,
        jitter: GlyphJitter,
        ink_rgb: Tuple[float, float, float]
    ) -> bool:
        """Composite one transformed glyph into ``canvas``.

        Returns
        -------
        bool
            True if any part of the glyph landed on the canvas
        """
        tile = self._tile(ch)
        if tile is None:
            return False
        coverage, ax, ay = tile
        th, tw = coverage.shape

        # tile pixel → glyph-local (anchor at origin) → canvas
        to_local = np.array([[1.0, 0.0, -ax], [0.0, 1.0, -ay], [0.0, 0.0, 1.0]])
        A = glyph_matrix(x, y, jitter) @ to_local

        corners = np.array([[0, 0, 1], [tw, 0, 1], [0, th, 1], [tw, th, 1]], dtype=np.float64)
        mapped = corners @ A.T
        canvas_h, canvas_w = canvas.shape[:2]
        rx0 = max(0, int(math.floor(mapped[:, 0].min())))
        ry0 = max(0, int(math.floor(mapped[:, 1].min())))
        rx1 = min(canvas_w, int(math.ceil(mapped[:, 0].max())) + 1)
        ry1 = min(canvas_h, int(math.ceil(mapped[:, 1].max())) + 1)
        if rx1 <= rx0 or ry1 <= ry0:
            return False

        A_roi = A.copy()
        A_roi[0, 2] -= rx0
        A_roi[1, 2] -= ry0
        warped = cv2.warpAffine(
            coverage,
            A_roi,
            (rx1 - rx0, ry1 - ry0),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=0.0,
        )
        color_utils.composite_mask(canvas[ry0:ry1, rx0:rx1], warped, ink_rgb)
        return True

    def draw_run(
        self,
        canvas: np.ndarray,
        run: TextRun,
        ink_rgb: Tuple[float, float, float],
        messiness: float
    ) -> List[GlyphPlacement]:
        """Draw every visible character of ``run``; whitespace only advances.

        Returns
        -------
        list of GlyphPlacement
            One record per drawn (non-whitespace) character
        """
        placements = []
        cursor_x = run.x
        for ch in run.text:
            if not ch.isspace():
                jitter = GlyphJitter.sample(self.rng, messiness)
                self.draw_glyph(canvas, ch, cursor_x, run.y, jitter, ink_rgb)
                placements.append(GlyphPlacement(ch, cursor_x, run.y, run.line, jitter))
            cursor_x += self.advance(ch)
        return placements
