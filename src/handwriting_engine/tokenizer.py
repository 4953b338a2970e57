"""Split page text into wrap units.

Tokens are one of:
    - a run of whitespace (may contain newlines)
    - a single CJK character
    - a run of any other non-whitespace characters (a Latin-style word)

Latin words wrap at word boundaries; CJK text has no spaces between words, so
each character is its own wrap candidate. Concatenating the tokens always
reproduces the input exactly.
"""

import re
from typing import List

# CJK punctuation, kana, ideographs (incl. Ext. A and compatibility
# ideographs), Hangul syllables and full-width forms. U+3000 (ideographic
# space) is whitespace and is matched by \s first.
CJK_RANGES = (
    "\u3001-\u303f"
    "\u3040-\u309f"
    "\u30a0-\u30ff"
    "\u3400-\u4dbf"
    "\u4e00-\u9fff"
    "\uac00-\ud7af"
    "\uf900-\ufaff"
    "\uff01-\uff60"
)

_CJK_CHAR = re.compile(f"[{CJK_RANGES}]")
_SPLIT = re.compile(f"(\\s+|[{CJK_RANGES}])")


def is_cjk(ch: str) -> bool:
    """True if ``ch`` is a single character wrapped on its own."""
    return len(ch) == 1 and _CJK_CHAR.match(ch) is not None


def tokenize(text: str) -> List[str]:
    """Split ``text`` into whitespace runs, single CJK characters and words.

    >>> tokenize("Hi 你好\\nthere")
    ['Hi', ' ', '你', '好', '\\n', 'there']
    """
    return [tok for tok in _SPLIT.split(text) if tok]


def has_newline(token: str) -> bool:
    """True if ``token`` is a whitespace run holding a line break."""
    return "\n" in token
