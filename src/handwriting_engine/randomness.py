"""Injectable random source for glyph jitter and paper stains.

Any object with a ``random()`` method returning a float in [0, 1) can be used
(numpy.random.Generator, numpy.random.RandomState, random.Random). When no
source is passed, a process-wide unseeded numpy Generator is used, so repeated
renders differ; pass ``seeded(n)`` for reproducible output.
"""

from typing import Optional

import numpy as np

_process_rng = np.random.default_rng()


def seeded(seed: Optional[int]):
    """Generator seeded with ``seed`` (unseeded when ``seed`` is None)."""
    return np.random.default_rng(seed)


def resolve(rng=None):
    """Return ``rng`` or the shared generator when ``rng`` is None."""
    if rng is None:
        return _process_rng
    if not callable(getattr(rng, "random", None)):
        raise TypeError(f"Random source must provide random(), got {type(rng).__name__}")
    return rng


def uniform_centered(rng, half_width: float) -> float:
    """Draw from [-half_width, half_width) as (u − 0.5)·2·half_width."""
    return (float(rng.random()) - 0.5) * 2.0 * half_width
