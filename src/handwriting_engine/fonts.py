"""Font resolution: logical family name → Pillow font object.

Family strings follow the CSS convention used by the editor
('"Caveat", cursive'): a comma-separated list of names, tried in order.
Generic families (cursive, serif, ...) carry no file and are skipped.
For each concrete name the resolver tries, in order:
    1. An explicit registry entry (name → font file)
    2. Common file names in each search directory
    3. Pillow's own lookup (absolute path or system font directories)
If nothing resolves, Pillow's bundled default font is used at the requested
size. The fallback is silent for callers; it is logged once at DEBUG.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from PIL import ImageFont

logger = logging.getLogger(__name__)

GENERIC_FAMILIES = frozenset({
    "serif", "sans-serif", "monospace", "cursive", "fantasy",
    "system-ui", "ui-serif", "ui-sans-serif", "ui-monospace", "emoji", "math",
})
FONT_SUFFIXES = (".ttf", ".otf", ".ttc")
# FreeType rejects sub-pixel sizes; smaller requests load at this size
MIN_LOAD_SIZE_PX = 1.0


def parse_family_list(family: str) -> List[str]:
    """Split a CSS-style family list into concrete font names.

    >>> parse_family_list('"Caveat", cursive')
    ['Caveat']
    """
    names = []
    for part in family.split(","):
        name = part.strip().strip('"').strip("'").strip()
        if name and name.lower() not in GENERIC_FAMILIES:
            names.append(name)
    return names


def _candidate_filenames(name: str) -> List[str]:
    if Path(name).suffix.lower() in FONT_SUFFIXES:
        return [name]
    compact = name.replace(" ", "")
    stems = [name, compact, f"{compact}-Regular", f"{name}-Regular"]
    out = []
    for stem in stems:
        for suffix in FONT_SUFFIXES:
            filename = stem + suffix
            if filename not in out:
                out.append(filename)
    return out


class FontResolver:
    """Resolve and cache fonts per (family, size).

    Parameters
    ----------
    search_paths : sequence of path
        Directories searched for font files (e.g. a project 'fonts/' folder)
    registry : dict, optional
        Font name → font file path, consulted before any search

    Notes
    -----
    Thread-safe; one resolver may be shared by renders running in parallel.
    """

    def __init__(
        self,
        search_paths: Sequence[Union[str, Path]] = (),
        registry: Optional[Dict[str, Union[str, Path]]] = None
    ):
        self.search_paths = [Path(p) for p in search_paths]
        self.registry = {k.lower(): Path(v) for k, v in (registry or {}).items()}
        self._cache: Dict[Tuple[str, float], ImageFont.ImageFont] = {}
        self._fallback_logged = set()
        self._lock = threading.Lock()

    def resolve(self, family: str, size: float):
        """Return a Pillow font for ``family`` at ``size`` px (never raises)."""
        key = (family, float(size))
        with self._lock:
            font = self._cache.get(key)
            if font is None:
                font = self._load(family, float(size))
                self._cache[key] = font
        return font

    def _load(self, family: str, size: float):
        size = max(size, MIN_LOAD_SIZE_PX)
        for name in parse_family_list(family):
            font = self._load_named(name, size)
            if font is not None:
                logger.debug(f"Resolved font family {name!r} at {size:g}px")
                return font

        if family not in self._fallback_logged:
            self._fallback_logged.add(family)
            logger.debug(f"Font family {family!r} not resolvable, using default font")
        return ImageFont.load_default(size=size)

    def _load_named(self, name: str, size: float):
        for path in self._candidate_paths(name):
            try:
                return ImageFont.truetype(str(path), size)
            except OSError:
                continue
        return None

    def _candidate_paths(self, name: str) -> Iterable[Union[str, Path]]:
        registered = self.registry.get(name.lower())
        if registered is not None:
            yield registered
        filenames = _candidate_filenames(name)
        for directory in self.search_paths:
            for filename in filenames:
                path = directory / filename
                if path.is_file():
                    yield path
        # Pillow searches system font directories for bare file names
        for filename in filenames:
            yield filename


def measure(font, text: str) -> float:
    """Advance width of ``text`` in px under ``font`` (0 for empty text)."""
    if not text:
        return 0.0
    return float(font.getlength(text))


_default_resolver = FontResolver()


def default_resolver() -> FontResolver:
    """Process-wide resolver with no extra search paths."""
    return _default_resolver
