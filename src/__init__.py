"""Handwriting Page Renderer: text to simulated handwritten paper.

This package contains the rendering engine that paints a paper background and
lays out user text as jittered, hand-drawn-looking glyphs on a raster canvas,
plus the configuration, logging and I/O utilities around it.

Architecture layers (strict one-way dependency):
    scripts/ → src/handwriting_engine/ → src/utils/

Key invariants:
    - Geometry in pixels of the target canvas; no hard-coded page size
    - Canvases are sRGB float32 [0,1], shape (H, W, 3)
    - YAML-only configs, validated with pydantic
    - Randomness is injectable; nothing is seeded implicitly
"""

__version__ = "1.0.0"
