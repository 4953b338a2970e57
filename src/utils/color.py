"""Colour parsing and compositing for sRGB canvases.

Provides:
    - CSS-style colour strings → sRGB float triples (hex, rgb(), named colours)
    - sRGB float [0,1] ↔ uint8 [0,255] conversions
    - Alpha-over compositing of a flat colour through a coverage mask

Used by:
    - Background renderer: paper fills, rules, translucent stains
    - Glyph renderer: ink compositing through rasterized glyph coverage
    - Raster export: float canvas → uint8 image

Invariants:
    - Canvases are sRGB float32 [0,1], shape (H, W, 3)
    - Blending happens directly in sRGB (matches browser 2D canvas behaviour)
    - Masks are float32 coverage in [0,1], shape (H, W)
"""

from typing import Tuple, Union

import numpy as np
from PIL import ImageColor

RGB = Tuple[float, float, float]


def parse_color(value: Union[str, Tuple[int, int, int]]) -> RGB:
    """Parse a colour specification into sRGB floats.

    Parameters
    ----------
    value : str or tuple of int
        '#rgb', '#rrggbb', 'rgb(r, g, b)', a CSS colour name, or an
        (R, G, B) uint8 tuple

    Returns
    -------
    tuple of float
        (r, g, b) in [0, 1]

    Raises
    ------
    ValueError
        If the string is not a recognised colour

    Notes
    -----
    String parsing is delegated to PIL.ImageColor.getrgb; alpha, if present,
    is dropped.
    """
    if isinstance(value, tuple):
        if len(value) != 3:
            raise ValueError(f"Expected (R, G, B) tuple, got {value}")
        rgb = value
    else:
        try:
            rgb = ImageColor.getrgb(str(value).strip())[:3]
        except ValueError as e:
            raise ValueError(f"Unrecognised colour: {value!r}") from e
    return tuple(float(np.clip(c, 0, 255)) / 255.0 for c in rgb)


def is_valid_color(value: str) -> bool:
    """Return True if ``value`` parses as a colour."""
    try:
        parse_color(value)
    except ValueError:
        return False
    return True


def to_uint8(img: np.ndarray) -> np.ndarray:
    """Convert sRGB float [0,1] image to uint8 [0,255] (rounded, clipped)."""
    return np.clip(np.rint(img * 255.0), 0, 255).astype(np.uint8)


def to_float(img: np.ndarray) -> np.ndarray:
    """Convert uint8 [0,255] image to sRGB float32 [0,1]."""
    return img.astype(np.float32) / 255.0


def composite_mask(
    canvas: np.ndarray,
    mask: np.ndarray,
    rgb: RGB,
    opacity: float = 1.0
) -> None:
    """Alpha-over a flat colour onto ``canvas`` through ``mask`` (in place).

    Parameters
    ----------
    canvas : np.ndarray
        sRGB float canvas or canvas view, shape (H, W, 3)
    mask : np.ndarray
        Coverage in [0, 1], shape (H, W)
    rgb : tuple of float
        Paint colour in [0, 1]
    opacity : float
        Global opacity multiplier, default 1.0

    Notes
    -----
    out = canvas·(1 − a) + rgb·a, with a = mask·opacity.
    """
    if canvas.shape[:2] != mask.shape:
        raise ValueError(f"Mask shape {mask.shape} doesn't match canvas {canvas.shape[:2]}")
    a = (np.clip(mask, 0.0, 1.0) * float(opacity))[..., None].astype(np.float32)
    color = np.asarray(rgb, dtype=np.float32).reshape(1, 1, 3)
    canvas *= (1.0 - a)
    canvas += color * a
