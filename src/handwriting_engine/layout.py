"""Line layout: place tokens left-to-right, top-to-bottom with wrapping.

Cursor model:
    - Start at (margins, margins + font_size); y is the text bottom line
    - line_spacing = font_size × line_height
    - Newline-bearing tokens are split on '\\n'; every fragment after the
      first starts a new line (x = margins, y += line_spacing)
    - Other tokens wrap when x + width > canvas_width − margins, unless the
      cursor is already at the line start (over-wide tokens overflow instead
      of looping)
    - Once y > canvas_height, all remaining text is dropped

Layout is pure: it only needs a width measurement function, so it can be
tested without fonts or pixels.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple

from .tokenizer import has_newline

MeasureFn = Callable[[str], float]


@dataclass(frozen=True)
class TextRun:
    """A token (or newline fragment) placed at its start cursor.

    Attributes
    ----------
    text : str
        Run content (never contains '\\n'; may be empty for blank lines)
    x, y : float
        Start x and text bottom line y (px)
    line : int
        Zero-based line index
    width : float
        Measured advance width (px)
    """
    text: str
    x: float
    y: float
    line: int
    width: float


@dataclass
class LayoutResult:
    """Output of layout_tokens.

    Attributes
    ----------
    runs : list of TextRun
        Placed runs in draw order
    line_count : int
        Number of lines holding at least one run (blank lines included)
    truncated : bool
        True if text was dropped below the canvas bottom
    cursor : tuple of float
        Final (x, y) cursor
    """
    runs: List[TextRun] = field(default_factory=list)
    line_count: int = 0
    truncated: bool = False
    cursor: Tuple[float, float] = (0.0, 0.0)


def layout_tokens(
    tokens: Sequence[str],
    measure: MeasureFn,
    canvas_width: float,
    canvas_height: float,
    font_size: float,
    line_height: float,
    margins: float
) -> LayoutResult:
    """Assign a start position to every token that fits on the page.

    Parameters
    ----------
    tokens : sequence of str
        Output of tokenizer.tokenize()
    measure : callable
        str → advance width in px under the active font
    canvas_width, canvas_height : float
        Target size (px)
    font_size : float
        Font size (px)
    line_height : float
        Line spacing multiplier
    margins : float
        Uniform margin (px)

    Returns
    -------
    LayoutResult
        Placed runs plus line count and truncation flag
    """
    line_spacing = font_size * line_height
    right_edge = canvas_width - margins
    x = margins
    y = margins + font_size
    line = 0
    result = LayoutResult()

    for token in tokens:
        if has_newline(token):
            for i, fragment in enumerate(token.split("\n")):
                if i > 0:
                    x = margins
                    y += line_spacing
                    line += 1
                if y > canvas_height:
                    result.truncated = True
                    break
                width = measure(fragment)
                result.runs.append(TextRun(fragment, x, y, line, width))
                x += width
            if result.truncated:
                break
            continue

        width = measure(token)
        if x + width > right_edge and x > margins:
            x = margins
            y += line_spacing
            line += 1

        if y > canvas_height:
            result.truncated = True
            break

        result.runs.append(TextRun(token, x, y, line, width))
        x += width

    result.line_count = result.runs[-1].line + 1 if result.runs else 0
    result.cursor = (x, y)
    return result
