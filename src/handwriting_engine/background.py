"""Paper background synthesis.

Paints the full canvas for a paper type before any text is drawn:
    - PLAIN: solid fill
    - LINED: fill + red margin rule at x = margins − 10 + horizontal rules
      every line_spacing px starting at the first text baseline
    - GRID: fill + vertical and horizontal lines every line_spacing px from 0
    - VINTAGE: fill + 20 translucent brown stains (5 % opacity, r ∈ [50, 150) px)
    - BLUEPRINT: fill only (ink override happens at text time)

Invariants:
    - Every pixel is written by the fill step, for every paper type
    - Never reads the page text
    - Stain placement uses the injected random source only
"""

import logging

import cv2
import numpy as np

from src.utils import color as color_utils
from src.utils.validators import PaperType, RenderConfig

from . import randomness
from .paper import (
    DEFAULT_PAPER_STYLES,
    MARGIN_RULE_COLOR,
    MARGIN_RULE_OFFSET_PX,
    RULE_WIDTH_PX,
    STAIN_COLOR,
    STAIN_COUNT,
    STAIN_OPACITY,
    STAIN_RADIUS_PX,
    PaperStyleTable,
    coerce_paper_type,
)
from .raster import RasterTarget

logger = logging.getLogger(__name__)

# Smallest rule pitch actually drawn; keeps degenerate font sizes from
# producing one rule per pixel row thousands of times over
MIN_RULE_PITCH_PX = 1.0


class BackgroundRenderer:
    """Paint paper backgrounds into a raster target.

    Parameters
    ----------
    styles : PaperStyleTable
        Paper presets, default DEFAULT_PAPER_STYLES
    rng : object with random(), optional
        Random source for vintage stains; process-wide generator if None
    """

    def __init__(self, styles: PaperStyleTable = DEFAULT_PAPER_STYLES, rng=None):
        if not isinstance(styles, PaperStyleTable):
            styles = PaperStyleTable(styles)
        self.styles = styles
        self.rng = randomness.resolve(rng)

    def paint(self, target: RasterTarget, config: RenderConfig) -> None:
        """Paint the background for ``config.paper_type`` over the whole target."""
        canvas = target.surface()
        paper_type = coerce_paper_type(config.paper_type)
        style = self.styles[paper_type]
        h, w = canvas.shape[:2]

        canvas[...] = np.asarray(color_utils.parse_color(style.background_color), dtype=canvas.dtype)

        if paper_type == PaperType.LINED:
            self._draw_margin_rule(canvas, config.margins)
            if style.line_color is not None:
                self._draw_horizontal_rules(
                    canvas,
                    start_y=config.margins + config.font_size,
                    pitch=config.line_spacing,
                    rgb=color_utils.parse_color(style.line_color),
                )
        elif paper_type == PaperType.GRID:
            if style.line_color is not None:
                self._draw_grid(canvas, config.line_spacing, color_utils.parse_color(style.line_color))
        elif paper_type == PaperType.VINTAGE:
            self._draw_stains(canvas)

        logger.debug(f"Painted {paper_type.value} background ({w}×{h}px)")

    def _draw_margin_rule(self, canvas: np.ndarray, margins: float) -> None:
        h, w = canvas.shape[:2]
        x = int(round(margins - MARGIN_RULE_OFFSET_PX))
        if not 0 <= x < w:
            return
        rgb = color_utils.parse_color(MARGIN_RULE_COLOR)
        cv2.line(canvas, (x, 0), (x, h - 1), rgb, RULE_WIDTH_PX, cv2.LINE_8)

    def _draw_horizontal_rules(self, canvas: np.ndarray, start_y: float, pitch: float, rgb) -> None:
        h, w = canvas.shape[:2]
        pitch = max(pitch, MIN_RULE_PITCH_PX)
        y = start_y
        while y < h:
            yi = int(round(y))
            cv2.line(canvas, (0, yi), (w - 1, yi), rgb, RULE_WIDTH_PX, cv2.LINE_8)
            y += pitch

    def _draw_grid(self, canvas: np.ndarray, pitch: float, rgb) -> None:
        h, w = canvas.shape[:2]
        pitch = max(pitch, MIN_RULE_PITCH_PX)
        x = 0.0
        while x < w:
            xi = int(round(x))
            cv2.line(canvas, (xi, 0), (xi, h - 1), rgb, RULE_WIDTH_PX, cv2.LINE_8)
            x += pitch
        y = 0.0
        while y < h:
            yi = int(round(y))
            cv2.line(canvas, (0, yi), (w - 1, yi), rgb, RULE_WIDTH_PX, cv2.LINE_8)
            y += pitch

    def _draw_stains(self, canvas: np.ndarray) -> None:
        """Overlay translucent disks; each is blended separately so overlaps darken."""
        h, w = canvas.shape[:2]
        rgb = color_utils.parse_color(STAIN_COLOR)
        r_min, r_max = STAIN_RADIUS_PX
        mask = np.zeros((h, w), dtype=np.uint8)
        for _ in range(STAIN_COUNT):
            radius = float(self.rng.random()) * (r_max - r_min) + r_min
            cx = float(self.rng.random()) * w
            cy = float(self.rng.random()) * h

            mask[...] = 0
            cv2.circle(mask, (int(round(cx)), int(round(cy))), int(round(radius)), 255, -1, cv2.LINE_AA)
            color_utils.composite_mask(canvas, mask.astype(np.float32) / 255.0, rgb, STAIN_OPACITY)
