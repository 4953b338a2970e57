"""Handwriting rendering engine.

Paints a paper background and draws text as jittered, hand-written-looking
glyphs into a fixed-size raster target.

Modules:
    - paper: paper presets (PaperType → PaperStyle), total style table
    - background: paper synthesis (plain, lined, grid, vintage, blueprint)
    - tokenizer: words / whitespace runs / single CJK characters
    - layout: cursor walk with wrapping, newlines and bottom truncation
    - glyphs: per-character affine jitter and ink compositing
    - renderer: HandwritingRenderer and the render() entry point
    - raster: RasterTarget, PNG export
    - fonts: logical family → Pillow font with silent fallback
    - presets: ink colours, handwriting fonts, default config
    - randomness: injectable random source (seeded or process-wide)

Invariants:
    - Background covers every pixel before text is drawn
    - Wrap and overflow bounds come from the target's real size
    - messiness = 0 gives exactly regular typeset glyphs
    - Blueprint paper always writes in white ink

Used by:
    - scripts/render_page.py: CLI and batch page jobs
"""

from .errors import InvalidTargetError, RenderError, UnknownPaperTypeError
from .paper import DEFAULT_PAPER_STYLES, PaperStyle, PaperStyleTable, PaperType
from .raster import RasterTarget, encode_png, export_image
from .renderer import HandwritingRenderer, RenderSummary, render
from .tokenizer import tokenize

__all__ = [
    'DEFAULT_PAPER_STYLES',
    'HandwritingRenderer',
    'InvalidTargetError',
    'PaperStyle',
    'PaperStyleTable',
    'PaperType',
    'RasterTarget',
    'RenderError',
    'RenderSummary',
    'UnknownPaperTypeError',
    'encode_png',
    'export_image',
    'render',
    'tokenize',
]
