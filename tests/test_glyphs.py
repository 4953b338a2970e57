"""Tests for per-glyph jitter, affine transforms and ink compositing.

Test cases:
    - Jitter bounds at full messiness (many draws)
    - Identity jitter at messiness 0
    - Draw order: angle, dy, scale
    - glyph_matrix composition (translate · rotate · scale)
    - Blueprint ink override
    - Glyph rasterization (ink lands above the line, off-canvas is a no-op)
    - Whitespace advances without drawing
"""

import math

import numpy as np
import pytest

from src.handwriting_engine import randomness
from src.handwriting_engine.fonts import default_resolver
from src.handwriting_engine.glyphs import (
    MAX_OFFSET_Y_PX,
    MAX_ROTATION_RAD,
    MAX_SCALE_DEV,
    GlyphJitter,
    GlyphRenderer,
    effective_ink_color,
    glyph_matrix,
)
from src.handwriting_engine.layout import TextRun
from src.utils.validators import PaperType


class SequenceRng:
    """Random source replaying fixed values."""

    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


@pytest.fixture(scope="module")
def font():
    return default_resolver().resolve('"Caveat", cursive', 32)


@pytest.fixture
def glyph_renderer(font):
    return GlyphRenderer(font, rng=randomness.seeded(0))


@pytest.fixture
def white_canvas():
    return np.ones((80, 120, 3), dtype=np.float32)


# ============================================================================
# JITTER
# ============================================================================

def test_jitter_bounds_at_full_messiness():
    rng = randomness.seeded(42)
    for _ in range(2000):
        j = GlyphJitter.sample(rng, 1.0)
        assert abs(j.angle) <= MAX_ROTATION_RAD
        assert abs(j.dy) <= MAX_OFFSET_Y_PX
        assert abs(j.scale - 1.0) <= MAX_SCALE_DEV


def test_jitter_scales_with_messiness():
    rng = randomness.seeded(3)
    for _ in range(500):
        j = GlyphJitter.sample(rng, 0.25)
        assert abs(j.angle) <= 0.25 * MAX_ROTATION_RAD
        assert abs(j.dy) <= 0.25 * MAX_OFFSET_Y_PX
        assert abs(j.scale - 1.0) <= 0.25 * MAX_SCALE_DEV


def test_zero_messiness_is_identity():
    rng = randomness.seeded(9)
    for _ in range(50):
        assert GlyphJitter.sample(rng, 0.0).is_identity


def test_draw_order_angle_dy_scale():
    j = GlyphJitter.sample(SequenceRng([0.0, 1.0, 0.75]), 1.0)
    assert j.angle == pytest.approx(-0.2)
    assert j.dy == pytest.approx(5.0)
    assert j.scale == pytest.approx(1.025)


# ============================================================================
# AFFINE MATRIX
# ============================================================================

def test_identity_matrix_is_pure_translation():
    m = glyph_matrix(12.0, 34.0, GlyphJitter())
    assert np.allclose(m, [[1, 0, 12], [0, 1, 34]])


def test_matrix_composition():
    j = GlyphJitter(angle=0.1, dy=-2.0, scale=1.05)
    m = glyph_matrix(5.0, 50.0, j)
    c, s = math.cos(0.1) * 1.05, math.sin(0.1) * 1.05
    assert np.allclose(m, [[c, -s, 5.0], [s, c, 48.0]])

    # Local origin lands on (x, y + dy); scale does not move it
    origin = m @ np.array([0.0, 0.0, 1.0])
    assert np.allclose(origin, [5.0, 48.0])


# ============================================================================
# INK COLOUR
# ============================================================================

@pytest.mark.parametrize("ink", ["red", "#000000", "#1e3a8a"])
def test_blueprint_always_white(ink):
    assert effective_ink_color(ink, PaperType.BLUEPRINT) == (1.0, 1.0, 1.0)
    assert effective_ink_color(ink, "blueprint") == (1.0, 1.0, 1.0)


def test_other_papers_keep_ink():
    assert effective_ink_color("red", PaperType.LINED) == (1.0, 0.0, 0.0)
    assert effective_ink_color("#000000", PaperType.VINTAGE) == (0.0, 0.0, 0.0)


# ============================================================================
# RASTERIZATION
# ============================================================================

def test_glyph_ink_sits_on_the_line(glyph_renderer, white_canvas):
    drawn = glyph_renderer.draw_glyph(white_canvas, "H", 10.0, 50.0, GlyphJitter(), (0.0, 0.0, 0.0))
    assert drawn
    inked_rows, inked_cols = np.nonzero(white_canvas[:, :, 0] < 0.5)
    assert inked_rows.size > 0
    assert inked_rows.max() <= 51
    assert inked_cols.min() >= 9


def test_off_canvas_glyph_is_noop(glyph_renderer, white_canvas):
    drawn = glyph_renderer.draw_glyph(white_canvas, "H", -500.0, 50.0, GlyphJitter(), (0.0, 0.0, 0.0))
    assert not drawn
    assert np.all(white_canvas == 1.0)


def test_partially_visible_glyph_is_clipped(glyph_renderer, white_canvas):
    drawn = glyph_renderer.draw_glyph(white_canvas, "W", 110.0, 90.0, GlyphJitter(0.1, 0.0, 1.0), (0.0, 0.0, 0.0))
    assert drawn
    assert white_canvas.min() >= 0.0


def test_draw_run_skips_whitespace(glyph_renderer, white_canvas):
    run = TextRun("a b", x=10.0, y=40.0, line=0, width=0.0)
    placements = glyph_renderer.draw_run(white_canvas, run, (0.0, 0.0, 0.0), messiness=0.5)
    assert [p.char for p in placements] == ["a", "b"]
    assert placements[0].x == 10.0
    expected_b = 10.0 + glyph_renderer.advance("a") + glyph_renderer.advance(" ")
    assert placements[1].x == pytest.approx(expected_b)
    assert all(p.y == 40.0 and p.line == 0 for p in placements)


def test_advance_is_cached(glyph_renderer):
    first = glyph_renderer.advance("m")
    assert first > 0
    assert glyph_renderer.advance("m") == first
    assert "m" in glyph_renderer._advances
