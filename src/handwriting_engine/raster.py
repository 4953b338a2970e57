"""Raster target: the fixed-size pixel surface the engine draws into.

The surface is an sRGB float32 array of shape (H, W, 3) with values in [0, 1].
The caller owns it; the engine draws into it but never resizes or replaces it.

Export:
    - encode_png(target) → PNG byte stream (lossless)
    - export_image(target, filename) → atomic PNG write, returns the path
"""

import io
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from src.utils import color as color_utils, fs

from .errors import InvalidTargetError

DEFAULT_EXPORT_NAME = "handwriting.png"


class RasterTarget:
    """Fixed-size drawable canvas.

    Parameters
    ----------
    width, height : int
        Canvas size in pixels; a new white canvas is allocated

    Attributes
    ----------
    pixels : np.ndarray or None
        Canvas data, (H, W, 3) float32 sRGB [0,1]
    """

    def __init__(self, width: int, height: int):
        if int(width) <= 0 or int(height) <= 0:
            raise InvalidTargetError(f"Canvas size must be positive, got {width}×{height}")
        self.pixels = np.ones((int(height), int(width), 3), dtype=np.float32)

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> 'RasterTarget':
        """Wrap an existing array without copying (validated lazily by surface())."""
        target = cls.__new__(cls)
        target.pixels = pixels
        return target

    @property
    def width(self) -> int:
        return int(self.surface().shape[1])

    @property
    def height(self) -> int:
        return int(self.surface().shape[0])

    @property
    def size(self):
        """(W, H) in pixels."""
        return self.width, self.height

    def surface(self) -> np.ndarray:
        """Return the writable drawing surface.

        Raises
        ------
        InvalidTargetError
            If the canvas is missing, empty, not a contiguous writable
            (H, W, 3) float array
        """
        px = self.pixels
        if not isinstance(px, np.ndarray):
            raise InvalidTargetError(f"Target has no pixel buffer (got {type(px).__name__})")
        if px.ndim != 3 or px.shape[2] != 3:
            raise InvalidTargetError(f"Target must be (H, W, 3), got {px.shape}")
        if px.shape[0] == 0 or px.shape[1] == 0:
            raise InvalidTargetError(f"Target has zero size: {px.shape}")
        if px.dtype not in (np.float32, np.float64):
            raise InvalidTargetError(f"Target must be float sRGB [0,1], got {px.dtype}")
        if not px.flags.writeable:
            raise InvalidTargetError("Target pixel buffer is read-only")
        if not px.flags.c_contiguous:
            raise InvalidTargetError("Target pixel buffer must be C-contiguous")
        return px

    def to_uint8(self) -> np.ndarray:
        """Current contents as (H, W, 3) uint8."""
        return color_utils.to_uint8(self.surface())

    def to_image(self) -> Image.Image:
        """Current contents as an RGB PIL image."""
        return Image.fromarray(self.to_uint8())

    def __repr__(self) -> str:
        shape = getattr(self.pixels, 'shape', None)
        return f"RasterTarget(shape={shape})"


def encode_png(target: RasterTarget) -> bytes:
    """Serialize the target's current contents as PNG bytes."""
    buf = io.BytesIO()
    target.to_image().save(buf, format="PNG")
    return buf.getvalue()


def export_image(target: RasterTarget, filename: Union[str, Path] = DEFAULT_EXPORT_NAME) -> Path:
    """Write the target to ``filename`` as PNG (atomically).

    Parameters
    ----------
    target : RasterTarget
        Canvas to export
    filename : str or Path
        Output path; '.png' is appended when the name has no suffix

    Returns
    -------
    Path
        Path of the written file
    """
    path = Path(filename)
    if not path.suffix:
        path = path.with_suffix(".png")
    fs.atomic_save_image(target.to_uint8(), path, pil_kwargs={"format": "PNG"})
    return path
