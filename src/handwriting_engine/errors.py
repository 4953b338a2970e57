"""Error taxonomy for the handwriting engine.

The engine performs no I/O, so failures are immediate and synchronous:
    - InvalidTargetError: the raster target cannot provide a drawing surface
    - UnknownPaperTypeError: paper type outside the fixed enumeration

Everything else (empty text, over-wide tokens, vertical overflow) is a layout
edge case and never raises.
"""


class RenderError(Exception):
    """Base class for render failures."""


class InvalidTargetError(RenderError):
    """Raster target is unallocated or not a writable (H, W, 3) float surface."""


class UnknownPaperTypeError(RenderError, ValueError):
    """Paper type is not one of the known presets."""

    def __init__(self, paper_type):
        self.paper_type = paper_type
        super().__init__(f"Unknown paper type: {paper_type!r}")
