"""
Plane geometry for the tactical combat map.

Map coordinates grow right (x) and down (y). Headings are compass-style
degrees: 0 points up the screen, 90 right, 180 down, 270 left. Converting a
heading to a math angle subtracts 90 degrees before applying cos/sin.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


FULL_CIRCLE_DEG = 360.0
HEADING_OFFSET_DEG = 90.0


@dataclass(frozen=True)
class Vector2D:
    """
    2D vector for map positions and displacements.

    Attributes:
        x: Horizontal component (right is positive).
        y: Vertical component (down is positive).
    """
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2D:
        return Vector2D(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vector2D:
        return self.__mul__(scalar)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Vector2D) -> float:
        return (self - other).magnitude

    def normalized(self) -> Vector2D:
        mag = self.magnitude
        if mag == 0:
            return Vector2D(0.0, 0.0)
        return Vector2D(self.x / mag, self.y / mag)

    @classmethod
    def from_heading(cls, heading_deg: float, length: float = 1.0) -> Vector2D:
        """Vector of the given length pointing along a compass heading."""
        radians = math.radians(heading_deg - HEADING_OFFSET_DEG)
        return cls(length * math.cos(radians), length * math.sin(radians))


def normalize_heading(heading_deg: float) -> float:
    """Wrap a heading into [0, 360)."""
    return heading_deg % FULL_CIRCLE_DEG


def bearing(from_pos: Vector2D, to_pos: Vector2D) -> float:
    """
    Compass heading from one point to another.

    Returns:
        Heading in degrees within [0, 360).
    """
    delta = to_pos - from_pos
    return normalize_heading(math.degrees(math.atan2(delta.y, delta.x)) + HEADING_OFFSET_DEG)


def round_half_up(value: float) -> int:
    """Round .5 toward +infinity, as game displays and arc buckets expect."""
    return math.floor(value + 0.5)


def turn_toward(current_deg: float, target_deg: float, max_turn_deg: float) -> float:
    """
    Rotate a heading toward a target by at most ``max_turn_deg``.

    Takes the shorter rotational direction; a gap of exactly 180 degrees
    turns clockwise.

    Args:
        current_deg: Current heading.
        target_deg: Desired heading.
        max_turn_deg: Largest rotation allowed.

    Returns:
        The new heading within [0, 360).
    """
    diff = (target_deg - current_deg) % FULL_CIRCLE_DEG
    if diff == 0:
        return normalize_heading(current_deg)

    direction = -1 if diff > 180 else 1
    gap = diff if diff <= 180 else FULL_CIRCLE_DEG - diff
    amount = min(max_turn_deg, gap)
    return normalize_heading(current_deg + amount * direction)


def approach(current: float, target: float, max_step: float) -> float:
    """Move a value toward a target by at most ``max_step``."""
    diff = target - current
    if diff == 0:
        return current
    return current + math.copysign(min(max_step, abs(diff)), diff)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
