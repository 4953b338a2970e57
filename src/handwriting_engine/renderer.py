"""Handwriting page renderer: background, layout and glyphs in one pass.

Control flow for one render call:
    1. Validate the target (InvalidTargetError before any pixel is touched)
    2. Resolve the paper style (UnknownPaperTypeError before any draw)
    3. Paint the background over the whole canvas
    4. Tokenize → layout against the target's actual width/height
    5. Draw each run glyph by glyph with the pass's effective ink colour

Usage:
    from src.handwriting_engine import HandwritingRenderer, RasterTarget
    from src.handwriting_engine.presets import DEFAULT_CONFIG
    from src.handwriting_engine import randomness

    target = RasterTarget(800, 1000)
    renderer = HandwritingRenderer(DEFAULT_CONFIG, rng=randomness.seeded(7))
    summary = renderer.render(target, "Dear diary,\\n今天天气很好。")

Notes:
    - Synchronous; renders into distinct targets may run in parallel
    - Rendering the same target from two threads must be serialized by the caller
    - With messiness = 0 the output does not depend on the random source
      except for vintage stains
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from src.utils.validators import RenderConfig

from . import randomness
from .background import BackgroundRenderer
from .errors import InvalidTargetError
from .fonts import FontResolver, default_resolver, measure
from .glyphs import GlyphPlacement, GlyphRenderer, effective_ink_color
from .layout import LayoutResult, layout_tokens
from .paper import DEFAULT_PAPER_STYLES, PaperStyleTable, coerce_paper_type
from .raster import RasterTarget
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass
class RenderSummary:
    """What a render call produced."""
    glyphs: List[GlyphPlacement] = field(default_factory=list)
    line_count: int = 0
    truncated: bool = False

    @property
    def glyph_count(self) -> int:
        return len(self.glyphs)


class HandwritingRenderer:
    """Render text as handwriting on simulated paper.

    Parameters
    ----------
    config : RenderConfig
        Font, paper, ink, spacing, messiness and margins
    styles : PaperStyleTable
        Paper presets, default DEFAULT_PAPER_STYLES
    rng : object with random(), optional
        Shared random source for glyph jitter and vintage stains
    font_resolver : FontResolver, optional
        Font lookup; process-wide resolver if None
    """

    def __init__(
        self,
        config: RenderConfig,
        styles: PaperStyleTable = DEFAULT_PAPER_STYLES,
        rng=None,
        font_resolver: Optional[FontResolver] = None
    ):
        if not isinstance(config, RenderConfig):
            raise TypeError(f"config must be a RenderConfig, got {type(config).__name__}")
        self.config = config
        self.rng = randomness.resolve(rng)
        self.background = BackgroundRenderer(styles, rng=self.rng)
        self.font_resolver = font_resolver or default_resolver()
        self.font = self.font_resolver.resolve(config.font_family, config.font_size)
        self.glyphs = GlyphRenderer(self.font, rng=self.rng)

    @property
    def styles(self) -> PaperStyleTable:
        return self.background.styles

    def measure(self, text: str) -> float:
        """Advance width of ``text`` under the active font (px)."""
        return measure(self.font, text)

    def paint_background(self, target: RasterTarget) -> None:
        """Paint only the paper for the configured paper type."""
        self.background.paint(target, self.config)

    def layout(self, text: str, width: float, height: float) -> LayoutResult:
        """Lay out ``text`` for a canvas of ``width`` × ``height`` px (no drawing)."""
        cfg = self.config
        return layout_tokens(
            tokenize(text),
            self.measure,
            canvas_width=width,
            canvas_height=height,
            font_size=cfg.font_size,
            line_height=cfg.line_height,
            margins=cfg.margins,
        )

    def render_text(self, target: RasterTarget, text: str) -> RenderSummary:
        """Draw ``text`` over whatever the target currently holds."""
        canvas = target.surface()
        h, w = canvas.shape[:2]
        cfg = self.config

        layout = self.layout(text, w, h)
        ink_rgb = effective_ink_color(cfg.ink_color, cfg.paper_type)

        summary = RenderSummary(line_count=layout.line_count, truncated=layout.truncated)
        for run in layout.runs:
            summary.glyphs.extend(self.glyphs.draw_run(canvas, run, ink_rgb, cfg.messiness))

        if layout.truncated:
            logger.info(
                f"Text truncated at canvas bottom: {len(layout.runs)} runs placed "
                f"on {layout.line_count} lines ({w}×{h}px)"
            )
        return summary

    def render(self, target: RasterTarget, text: str) -> RenderSummary:
        """Paint background, then text, into ``target``.

        Raises
        ------
        InvalidTargetError
            If the target has no usable drawing surface (nothing is drawn)
        UnknownPaperTypeError
            If the configured paper type is not a known preset (nothing is drawn)
        """
        canvas = target.surface()
        paper_type = coerce_paper_type(self.config.paper_type)

        self.paint_background(target)
        summary = self.render_text(target, text)

        logger.debug(
            f"Rendered {summary.glyph_count} glyphs on {summary.line_count} lines "
            f"({canvas.shape[1]}×{canvas.shape[0]}px, paper={paper_type.value})"
        )
        return summary


def render(target: RasterTarget, text: str, config: RenderConfig, rng=None) -> None:
    """Paint background then handwriting for ``text`` into ``target``.

    Parameters
    ----------
    target : RasterTarget
        Caller-owned canvas; wrap/overflow bounds come from its actual size
    text : str
        Page text, any length and script mixture
    config : RenderConfig
        Render configuration
    rng : object with random(), optional
        Random source; process-wide unseeded generator if None
    """
    if not isinstance(target, RasterTarget):
        raise InvalidTargetError(f"Expected a RasterTarget, got {type(target).__name__}")
    HandwritingRenderer(config, rng=rng).render(target, text)
