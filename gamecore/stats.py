"""
Ship stat derivation.

Turns a ShipDesign into the numbers combat runs on: acceleration and top
speed from drives, power from engines, hit points from hull mass, and an
efficiency rating from how much hull space the design fills.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .catalog import Catalog, ComponentCategory, default_catalog
from .design import ShipDesign, installed_count, space_used


class Difficulty(Enum):
    """AI difficulty; raises the power each engine produces."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


BASE_POWER_PER_ENGINE = 8
DIFFICULTY_POWER_BONUS: dict[Difficulty, int] = {
    Difficulty.EASY: 0,
    Difficulty.MEDIUM: 1,
    Difficulty.HARD: 3,
}

ACCELERATION_PER_DRIVE = 2
SPEED_PER_ACCELERATION = 2

# Efficiency steps, as multiples of half the hull mass
EFFICIENCY_THRESHOLDS: tuple[tuple[float, int], ...] = (
    (2.0, 3),
    (1.5, 2),
)


@dataclass(frozen=True)
class ShipStats:
    """
    Combat statistics derived from a design.

    Attributes:
        max_acceleration: Speed change per turn (also scales turn rate).
        max_speed: Top speed.
        total_power: Power available each turn.
        power_per_engine: Power produced by each engine.
        efficiency: 1-3 rating of hull space usage.
        hp: Hit points (equal to hull mass).
        max_hp: Maximum hit points.
        hull_integrity: Starting hull integrity.
        max_hull_integrity: Maximum hull integrity.
        armor: Installed armor count; flat damage reduction per hit.
        space_used: Space taken by installed components.
        total_space: Space the hull offers at the design's tech level.
    """
    max_acceleration: float
    max_speed: float
    total_power: float
    power_per_engine: float
    efficiency: int
    hp: float
    max_hp: float
    hull_integrity: float
    max_hull_integrity: float
    armor: int
    space_used: float
    total_space: float

    @property
    def space_left(self) -> float:
        return self.total_space - self.space_used


def efficiency_rating(installed_space: float, hull_mass: float) -> int:
    """
    Rate hull usage: 3 at 2x half the hull mass or more, 2 at 1.5x, else 1.

    Args:
        installed_space: Space taken by installed components.
        hull_mass: Mass of the hull.
    """
    reference = hull_mass / 2
    for multiple, rating in EFFICIENCY_THRESHOLDS:
        if installed_space >= multiple * reference:
            return rating
    return 1


def parse_difficulty(value: Difficulty | str | None) -> Difficulty:
    if value is None:
        return Difficulty.EASY
    if isinstance(value, Difficulty):
        return value
    return Difficulty(str(value).lower())


def derive_stats(
    design: ShipDesign,
    difficulty: Difficulty | str = Difficulty.EASY,
    catalog: Optional[Catalog] = None,
) -> ShipStats:
    """
    Derive combat stats for a design.

    Args:
        design: The ship design.
        difficulty: Difficulty modifier for engine power.
        catalog: Component catalog; the packaged one if None.

    Returns:
        ShipStats for the design.

    Raises:
        UnknownReferenceError: If the design's hull is not in the catalog.
    """
    catalog = catalog or default_catalog()
    difficulty = parse_difficulty(difficulty)
    hull = catalog.hull(design.hull)

    drives = installed_count(design, ComponentCategory.DRIVES, catalog)
    engines = installed_count(design, ComponentCategory.ENGINES, catalog)
    armor = installed_count(design, ComponentCategory.ARMOR, catalog)

    max_acceleration = ACCELERATION_PER_DRIVE * drives
    power_per_engine = BASE_POWER_PER_ENGINE + DIFFICULTY_POWER_BONUS[difficulty]
    used = space_used(design, catalog)

    return ShipStats(
        max_acceleration=max_acceleration,
        max_speed=SPEED_PER_ACCELERATION * max_acceleration,
        total_power=power_per_engine * engines,
        power_per_engine=power_per_engine,
        efficiency=efficiency_rating(used, hull.mass),
        hp=hull.mass,
        max_hp=hull.mass,
        hull_integrity=hull.mass,
        max_hull_integrity=hull.mass,
        armor=armor,
        space_used=used,
        total_space=hull.total_space(design.tech_level),
    )
