"""Paper presets: colours for each paper type.

A PaperStyleTable maps every PaperType to exactly one PaperStyle. Totality
is checked when the table is built, so lookups of a valid PaperType can never
miss; lookups of anything else raise UnknownPaperTypeError.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Union

from src.utils.validators import PaperType

from .errors import UnknownPaperTypeError

# Fixed tones not carried by the style table
MARGIN_RULE_COLOR = "#f87171"
STAIN_COLOR = "#5c4033"
STAIN_OPACITY = 0.05
STAIN_COUNT = 20
STAIN_RADIUS_PX = (50.0, 150.0)
BLUEPRINT_INK_COLOR = "#ffffff"
RULE_WIDTH_PX = 1
MARGIN_RULE_OFFSET_PX = 10.0


@dataclass(frozen=True)
class PaperStyle:
    """Visual preset for one paper type.

    Attributes
    ----------
    display_name : str
        Human-readable name
    background_color : str
        Fill colour
    line_color : str or None
        Rule/grid colour; None when the paper has no rules
    """
    display_name: str
    background_color: str
    line_color: Optional[str] = None


def coerce_paper_type(value: Union[PaperType, str]) -> PaperType:
    """Convert ``value`` to a PaperType or raise UnknownPaperTypeError."""
    if isinstance(value, PaperType):
        return value
    try:
        return PaperType(str(value).strip().upper())
    except ValueError:
        raise UnknownPaperTypeError(value) from None


class PaperStyleTable(Mapping):
    """Immutable, total mapping PaperType → PaperStyle."""

    def __init__(self, styles: Mapping):
        table: Dict[PaperType, PaperStyle] = {}
        for key, style in styles.items():
            paper_type = coerce_paper_type(key)
            if paper_type in table:
                raise ValueError(f"Duplicate style for paper type {paper_type.value}")
            if not isinstance(style, PaperStyle):
                raise TypeError(f"Style for {paper_type.value} must be a PaperStyle, got {type(style).__name__}")
            table[paper_type] = style

        missing = [p.value for p in PaperType if p not in table]
        if missing:
            raise ValueError(f"Paper style table is missing entries for: {missing}")
        self._table = table

    def __getitem__(self, key: Union[PaperType, str]) -> PaperStyle:
        return self._table[coerce_paper_type(key)]

    def __contains__(self, key) -> bool:
        try:
            return coerce_paper_type(key) in self._table
        except UnknownPaperTypeError:
            return False

    def __iter__(self) -> Iterator[PaperType]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        names = ', '.join(p.value for p in self._table)
        return f"PaperStyleTable({names})"


DEFAULT_PAPER_STYLES = PaperStyleTable({
    PaperType.PLAIN: PaperStyle("Plain White", "#ffffff", None),
    PaperType.LINED: PaperStyle("Notebook Lined", "#fdfbf7", "#a5b4fc"),
    PaperType.GRID: PaperStyle("Graph Paper", "#ffffff", "#e2e8f0"),
    PaperType.VINTAGE: PaperStyle("Vintage Parchment", "#f5e6d3", "#d6c0a6"),
    PaperType.BLUEPRINT: PaperStyle("Blueprint", "#1e3a8a", "#60a5fa"),
})
