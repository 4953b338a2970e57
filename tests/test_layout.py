"""Tests for line layout (pure, font-free).

A fixed-width measure (10 px per character) stands in for the font so
positions can be checked exactly.

Test suites:
1. Cursor start and plain advance
2. Wrapping (word wrap, CJK per-character wrap, over-wide tokens)
3. Explicit newlines
4. Bottom truncation

Run:
    pytest tests/test_layout.py -v
"""

import pytest

from src.handwriting_engine.layout import LayoutResult, layout_tokens
from src.handwriting_engine.tokenizer import tokenize

CHAR_W = 10.0


def fixed_measure(text):
    return CHAR_W * len(text)


def run_layout(text, width=200, height=200, font_size=20, line_height=1.0, margins=10):
    return layout_tokens(
        tokenize(text),
        fixed_measure,
        canvas_width=width,
        canvas_height=height,
        font_size=font_size,
        line_height=line_height,
        margins=margins,
    )


# ============================================================================
# TEST SUITE 1: Cursor start and advance
# ============================================================================

def test_first_run_starts_at_margin_and_first_baseline():
    result = run_layout("ab cd")
    first = result.runs[0]
    assert (first.x, first.y, first.line) == (10, 30, 0)


def test_runs_advance_by_measured_width():
    result = run_layout("ab cd")
    assert [r.text for r in result.runs] == ["ab", " ", "cd"]
    assert [r.x for r in result.runs] == [10, 30, 40]
    assert all(r.y == 30 for r in result.runs)
    assert result.line_count == 1
    assert not result.truncated


def test_empty_text_has_no_runs():
    result = run_layout("")
    assert isinstance(result, LayoutResult)
    assert result.runs == []
    assert result.line_count == 0
    assert not result.truncated
    assert result.cursor == (10, 30)


# ============================================================================
# TEST SUITE 2: Wrapping
# ============================================================================

def test_word_wraps_when_exceeding_right_margin():
    # right edge = 60 - 10 = 50
    result = run_layout("abc de", width=60)
    by_text = {r.text: r for r in result.runs}
    # ' ' ends exactly on the edge and stays
    assert by_text[" "].x == 40 and by_text[" "].line == 0
    assert by_text["de"].x == 10
    assert by_text["de"].line == 1
    assert by_text["de"].y == 30 + 20


def test_token_ending_exactly_at_edge_does_not_wrap():
    # 'abcd' spans 10..50, right edge 50
    result = run_layout("abcd", width=60)
    assert result.runs[0].line == 0


def test_over_wide_token_at_line_start_overflows():
    result = run_layout("abcdefghij xy", width=60)
    first = result.runs[0]
    assert first.text == "abcdefghij"
    assert (first.x, first.line) == (10, 0)
    # Next token moves on to a fresh line rather than looping
    assert result.runs[-1].text == "xy"
    assert result.runs[-1].line >= 1


def test_cjk_wraps_after_every_third_character():
    # W = 2m + 3.5·char: three characters fit, the fourth does not
    text = "我们今天去公园散步吧"
    result = run_layout(text, width=2 * 10 + 3.5 * CHAR_W, height=500)

    assert len(result.runs) == 10
    assert all(len(r.text) == 1 for r in result.runs)
    assert "".join(r.text for r in result.runs) == text

    for i, run in enumerate(result.runs):
        assert run.line == i // 3
        assert run.x == 10 + (i % 3) * CHAR_W
        assert run.y == 30 + (i // 3) * 20
    assert result.line_count == 4


def test_line_spacing_uses_line_height_multiplier():
    result = run_layout("aaaa\nbbbb", font_size=20, line_height=1.5)
    assert result.runs[-1].y - result.runs[0].y == pytest.approx(30.0)


# ============================================================================
# TEST SUITE 3: Explicit newlines
# ============================================================================

def test_newline_moves_to_next_line_at_margin():
    result = run_layout("Hi\nBye", font_size=20, line_height=1.0, margins=10)
    hi = result.runs[0]
    bye = result.runs[-1]
    assert hi.text == "Hi" and bye.text == "Bye"
    assert bye.y - hi.y == 20
    assert bye.x == 10
    assert bye.line == hi.line + 1
    assert result.line_count == 2


def test_consecutive_newlines_leave_blank_lines():
    result = run_layout("a\n\nb")
    b = result.runs[-1]
    assert b.line == 2
    assert b.y == 30 + 2 * 20
    assert result.line_count == 3


def test_trailing_spaces_after_newline_advance_cursor():
    result = run_layout("a\n  b")
    b = result.runs[-1]
    # "\n  " splits into "" (line 0) and "  " (line 1)
    assert b.line == 1
    assert b.x == 10 + 2 * CHAR_W


def test_runs_never_contain_newlines():
    result = run_layout("one\ntwo\n\nthree four\n")
    assert all("\n" not in r.text for r in result.runs)


# ============================================================================
# TEST SUITE 4: Bottom truncation
# ============================================================================

def test_text_below_canvas_bottom_is_dropped():
    # Baselines at 30, 50, 70, 90...; height 75 keeps three lines
    result = run_layout("a\nb\nc\nd\ne", height=75)
    assert result.truncated
    assert [r.text for r in result.runs if r.text] == ["a", "b", "c"]
    assert all(r.y <= 75 for r in result.runs)


def test_baseline_exactly_at_bottom_is_kept():
    result = run_layout("a\nb\nc", height=70)
    assert not result.truncated
    assert result.runs[-1].text == "c"
    assert result.runs[-1].y == 70


def test_wrapped_overflow_truncates():
    result = run_layout("word " * 500, width=100, height=100)
    assert result.truncated
    assert max(r.y for r in result.runs) <= 100
    assert result.line_count == max(r.line for r in result.runs) + 1


def test_wrap_bounds_follow_target_size():
    narrow = run_layout("aa bb cc dd ee", width=60)
    wide = run_layout("aa bb cc dd ee", width=400)
    assert narrow.line_count > wide.line_count == 1
