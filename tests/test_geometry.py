"""
Tests for map geometry helpers.

Run with: python -m pytest tests/test_geometry.py -v
"""

import pytest

from gamecore.geometry import (
    Vector2D,
    approach,
    bearing,
    clamp,
    normalize_heading,
    round_half_up,
    turn_toward,
)


class TestVector2D:

    def test_arithmetic(self):
        v = Vector2D(3, 4)
        assert v + Vector2D(1, 1) == Vector2D(4, 5)
        assert v - Vector2D(1, 1) == Vector2D(2, 3)
        assert 2 * v == Vector2D(6, 8)
        assert -v == Vector2D(-3, -4)
        assert v.magnitude == 5

    def test_normalized_zero_vector(self):
        assert Vector2D().normalized() == Vector2D(0.0, 0.0)

    @pytest.mark.parametrize("heading,expected", [
        (0, (0, -10)),     # up the screen
        (90, (10, 0)),     # right
        (180, (0, 10)),    # down
        (270, (-10, 0)),   # left
    ])
    def test_from_heading(self, heading, expected):
        v = Vector2D.from_heading(heading, 10)
        assert v.x == pytest.approx(expected[0], abs=1e-9)
        assert v.y == pytest.approx(expected[1], abs=1e-9)


class TestHeadings:

    def test_bearing_matches_compass(self):
        origin = Vector2D(0, 0)
        assert bearing(origin, Vector2D(0, -10)) == pytest.approx(0)
        assert bearing(origin, Vector2D(10, 0)) == pytest.approx(90)
        assert bearing(origin, Vector2D(0, 10)) == pytest.approx(180)
        assert bearing(origin, Vector2D(-10, 0)) == pytest.approx(270)

    def test_normalize_heading(self):
        assert normalize_heading(370) == 10
        assert normalize_heading(-10) == 350

    @pytest.mark.parametrize("current,target,max_turn,expected", [
        (0, 90, 20, 20),      # capped by turn rate
        (0, 15, 20, 15),      # capped by the gap
        (350, 10, 30, 10),    # across north, clockwise
        (10, 350, 5, 5),      # across north, counter-clockwise
        (0, 180, 10, 10),     # exact half turn goes clockwise
        (45, 45, 20, 45),
    ])
    def test_turn_toward(self, current, target, max_turn, expected):
        assert turn_toward(current, target, max_turn) == pytest.approx(expected)

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(-0.5) == 0
        assert round_half_up(1.49) == 1


class TestScalars:

    def test_approach(self):
        assert approach(0, 10, 4) == 4
        assert approach(10, 0, 4) == 6
        assert approach(9, 10, 4) == 10
        assert approach(5, 5, 4) == 5

    def test_clamp(self):
        assert clamp(-1, 0, 10) == 0
        assert clamp(11, 0, 10) == 10
        assert clamp(5, 0, 10) == 5
