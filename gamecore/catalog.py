"""
Hull and component catalog for the tactical space-combat game.

Components are a variant type tagged by ComponentCategory. Each variant
carries only the fields meaningful for its category:

- HullSpaceComponent: occupies hull space (drives, tractors, armor, ...)
- EngineComponent: hull space plus power output
- TechSectorComponent: occupies tech-sector space that scales with tech level
- SeekerComponent: occupies seeker-rack space
- WeaponComponent: beam or projectile weapon with firing statistics

The catalog is loaded from a JSON data file (``data/catalog.json`` by
default) in the same way fleet data is loaded for the simulator.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.json"

# Space per tech sector is (TECH_SECTOR_BASE + tech level)
TECH_SECTOR_BASE = 9
MIN_TECH_LEVEL = 1
MAX_TECH_LEVEL = 6


class UnknownReferenceError(KeyError):
    """Raised when a hull, component or design id is not in the catalog."""


class ComponentCategory(Enum):
    """Component categories in catalog order."""
    DRIVES = "drives"
    ENGINES = "engines"
    WARP = "warp"
    CARGO = "cargo"
    FIGHTERS = "fighters"
    TRACTORS = "tractors"
    MARINES = "marines"
    TRANSPORTERS = "transporters"
    ARMOR = "armor"
    BELTS = "belts"
    RACKS = "racks"
    SEEKERS = "seekers"
    WEAPONS = "weapons"


# Losing one of these systems counts as a critical hit
CRITICAL_CATEGORIES: frozenset[ComponentCategory] = frozenset({
    ComponentCategory.DRIVES,
    ComponentCategory.ENGINES,
    ComponentCategory.WARP,
})


class WeaponType(Enum):
    """How a weapon delivers its damage."""
    BEAM = "beam"              # Instant hit on firing
    PROJECTILE = "projectile"  # Spawns a homing projectile


# =============================================================================
# HULLS
# =============================================================================

@dataclass(frozen=True)
class Hull:
    """
    A ship hull.

    Attributes:
        id: Catalog identifier (e.g. 'sz4').
        name: Display name.
        size: Size class 1-5.
        mass: Hull mass; also the ship's hit points.
    """
    id: str
    name: str
    size: int
    mass: float

    def total_space(self, tech_level: int) -> float:
        return (TECH_SECTOR_BASE + tech_level) * 2 ** (self.size - 1)


# =============================================================================
# COMPONENT VARIANTS
# =============================================================================

@dataclass(frozen=True)
class ComponentSpec:
    """Fields shared by every component variant."""
    id: str
    name: str
    category: ComponentCategory
    cost: float

    def space_for(self, count: int, arcs: Optional[Sequence[int]], tech_level: int) -> float:
        """Space taken by ``count`` installed copies of this component."""
        return 0.0


@dataclass(frozen=True)
class HullSpaceComponent(ComponentSpec):
    space: float = 0.0

    def space_for(self, count: int, arcs: Optional[Sequence[int]], tech_level: int) -> float:
        return self.space * count


@dataclass(frozen=True)
class EngineComponent(HullSpaceComponent):
    power: float = 8.0


@dataclass(frozen=True)
class TechSectorComponent(ComponentSpec):
    tech_space: float = 1.0

    def space_for(self, count: int, arcs: Optional[Sequence[int]], tech_level: int) -> float:
        return self.tech_space * (TECH_SECTOR_BASE + tech_level) * count


@dataclass(frozen=True)
class SeekerComponent(ComponentSpec):
    """Seekers live in racks and take no hull space of their own."""


@dataclass(frozen=True)
class WeaponComponent(ComponentSpec):
    """
    A weapon.

    Attributes:
        weapon_type: BEAM applies damage on firing, PROJECTILE launches a seeker.
        range: Maximum firing distance in map units.
        damage: Damage per hit.
        space: Hull space for a single-arc mount.
        arc_bonus: Extra space per firing arc beyond the first.
        power_cost: Power drawn per shot.
        cooldown: Turns between shots.
        speed: Projectile speed per turn (projectile weapons only).
        color: Display color for the renderer.
    """
    weapon_type: WeaponType = WeaponType.BEAM
    range: float = 0.0
    damage: float = 0.0
    space: float = 0.0
    arc_bonus: float = 0.0
    power_cost: float = 0.0
    cooldown: int = 1
    speed: float = 0.0
    color: str = "#CC3333"

    @property
    def is_projectile(self) -> bool:
        return self.weapon_type is WeaponType.PROJECTILE

    def space_for(self, count: int, arcs: Optional[Sequence[int]], tech_level: int) -> float:
        if arcs and len(arcs) > 1:
            return (self.space + self.arc_bonus * (len(arcs) - 1)) * count
        return self.space * count

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.weapon_type.value,
            "range": self.range,
            "damage": self.damage,
            "space": self.space,
            "arc_bonus": self.arc_bonus,
            "cost": self.cost,
            "power_cost": self.power_cost,
            "cooldown": self.cooldown,
            "speed": self.speed,
            "color": self.color,
        }

    @classmethod
    def from_json(cls, weapon_id: str, data: dict) -> WeaponComponent:
        return cls(
            id=weapon_id,
            name=data.get("name", weapon_id),
            category=ComponentCategory.WEAPONS,
            cost=data.get("cost", 0),
            weapon_type=WeaponType(data.get("type", "beam")),
            range=data.get("range", 0.0),
            damage=data.get("damage", 0.0),
            space=data.get("space", 0.0),
            arc_bonus=data.get("arc_bonus", 0.0),
            power_cost=data.get("power_cost", 0.0),
            cooldown=int(data.get("cooldown", 1)),
            speed=data.get("speed", 0.0),
            color=data.get("color", "#CC3333"),
        )


TECH_SECTOR_CATEGORIES: frozenset[ComponentCategory] = frozenset({
    ComponentCategory.WARP,
    ComponentCategory.CARGO,
    ComponentCategory.FIGHTERS,
})


def component_from_json(category: ComponentCategory, component_id: str, data: dict) -> ComponentSpec:
    """
    Build the variant matching ``category`` from its JSON record.

    Args:
        category: The component's category.
        component_id: Catalog id (e.g. 'dr1').
        data: The component's JSON fields.

    Returns:
        A ComponentSpec subclass instance.
    """
    name = data.get("name", component_id)
    cost = data.get("cost", 0)

    if category is ComponentCategory.WEAPONS:
        return WeaponComponent.from_json(component_id, data)
    if category is ComponentCategory.ENGINES:
        return EngineComponent(
            id=component_id, name=name, category=category, cost=cost,
            space=data.get("space", 0.0), power=data.get("power", 8.0),
        )
    if category in TECH_SECTOR_CATEGORIES:
        return TechSectorComponent(
            id=component_id, name=name, category=category, cost=cost,
            tech_space=data.get("tech_space", 1.0),
        )
    if category is ComponentCategory.SEEKERS:
        return SeekerComponent(
            id=component_id, name=name, category=category, cost=cost,
        )
    return HullSpaceComponent(
        id=component_id, name=name, category=category, cost=cost,
        space=data.get("space", 0.0),
    )


def parse_category(value: Any) -> ComponentCategory:
    """
    Resolve a category name.

    Raises:
        UnknownReferenceError: If the name is not a known category.
    """
    if isinstance(value, ComponentCategory):
        return value
    try:
        return ComponentCategory(value)
    except ValueError:
        raise UnknownReferenceError(f"Unknown component category: {value!r}") from None


# =============================================================================
# CATALOG
# =============================================================================

@dataclass
class Catalog:
    """
    All hulls and components available to ship designs.

    Attributes:
        hulls: Hull id to Hull.
        components: Category to (component id to spec).
        default_designs: Raw JSON records of the built-in ship designs.
        map_width: Width of the combat map.
        map_height: Height of the combat map.
    """
    hulls: dict[str, Hull] = field(default_factory=dict)
    components: dict[ComponentCategory, dict[str, ComponentSpec]] = field(default_factory=dict)
    default_designs: list[dict] = field(default_factory=list)
    map_width: float = 1000.0
    map_height: float = 1000.0

    def hull(self, hull_id: str) -> Hull:
        try:
            return self.hulls[hull_id]
        except KeyError:
            raise UnknownReferenceError(f"Unknown hull: {hull_id!r}") from None

    def component(self, category: ComponentCategory | str, component_id: str) -> ComponentSpec:
        """
        Look up a component.

        Raises:
            UnknownReferenceError: If the category or id is unknown.
        """
        resolved = parse_category(category)
        spec = self.components.get(resolved, {}).get(component_id)
        if spec is None:
            raise UnknownReferenceError(
                f"Unknown component {component_id!r} in category {resolved.value!r}"
            )
        return spec

    def find_component(self, category: ComponentCategory | str, component_id: str) -> Optional[ComponentSpec]:
        """Like component(), but logs and returns None for unknown references."""
        try:
            return self.component(category, component_id)
        except UnknownReferenceError as e:
            logger.warning("Skipping component: %s", e)
            return None

    @classmethod
    def from_dict(cls, data: dict) -> Catalog:
        """Create a catalog from its JSON structure."""
        hulls = {
            hull_id: Hull(
                id=hull_id,
                name=hull_data.get("name", hull_id),
                size=int(hull_data["size"]),
                mass=hull_data["mass"],
            )
            for hull_id, hull_data in data.get("hulls", {}).items()
        }

        components: dict[ComponentCategory, dict[str, ComponentSpec]] = {}
        for category_name, entries in data.get("components", {}).items():
            category = parse_category(category_name)
            components[category] = {
                component_id: component_from_json(category, component_id, component_data)
                for component_id, component_data in entries.items()
            }

        map_data = data.get("map", {})
        return cls(
            hulls=hulls,
            components=components,
            default_designs=list(data.get("default_designs", [])),
            map_width=map_data.get("width", 1000.0),
            map_height=map_data.get("height", 1000.0),
        )


def load_catalog(filepath: str | Path | None = None) -> Catalog:
    """
    Load the component catalog from a JSON file.

    Args:
        filepath: Path to a catalog JSON file; the packaged catalog if None.

    Returns:
        The loaded Catalog.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    path = Path(filepath) if filepath is not None else DEFAULT_CATALOG_PATH
    with open(path, "r") as f:
        return Catalog.from_dict(json.load(f))


@lru_cache(maxsize=1)
def default_catalog() -> Catalog:
    """The packaged catalog, loaded once."""
    return load_catalog()
