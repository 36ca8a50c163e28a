"""
Combat state for the tactical space-combat simulator.

CombatState is the single mutable value a battle runs on. It holds the ship
list, projectiles in flight, transient visual effects and the turn counter.
Every combat operation receives it explicitly.

Snapshots (``to_dict`` / ``from_dict``) are plain JSON-compatible dicts so
the turn-resolving peer can push its authoritative state wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .catalog import ComponentCategory, WeaponComponent, parse_category
from .geometry import Vector2D


NUM_SHIELD_ARCS = 8
DEFAULT_MAP_WIDTH = 1000.0
DEFAULT_MAP_HEIGHT = 1000.0


def _record(data, what: str) -> dict:
    """Return ``data`` if it is a snapshot mapping, else raise TypeError."""
    if not isinstance(data, dict):
        raise TypeError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


class SystemStatus(Enum):
    ACTIVE = "active"
    DESTROYED = "destroyed"


class EffectType(Enum):
    """Transient visual events for the renderer."""
    BEAM = "beam"
    IMPACT = "impact"


# =============================================================================
# SHIP PARTS
# =============================================================================

@dataclass
class SystemComponent:
    """
    One installed non-weapon component, tracked for system hits.

    Attributes:
        category: Component category.
        component_id: Catalog id.
        name: Display name.
        status: ACTIVE until destroyed by a system hit.
    """
    category: ComponentCategory
    component_id: str
    name: str
    status: SystemStatus = SystemStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status is SystemStatus.ACTIVE

    def destroy(self) -> None:
        self.status = SystemStatus.DESTROYED

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "component_id": self.component_id,
            "name": self.name,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> SystemComponent:
        data = _record(data, "system")
        return cls(
            category=parse_category(data["category"]),
            component_id=data["component_id"],
            name=data.get("name", data["component_id"]),
            status=SystemStatus(data.get("status", "active")),
        )


@dataclass
class WeaponMount:
    """
    A weapon installed on a combat ship.

    Attributes:
        weapon: Catalog weapon statistics.
        cooldown_remaining: Turns until the weapon can fire again.
        target_id: Ship the weapon is ordered to fire at, if any.
        arcs: Firing arcs 1-8 from the design.
    """
    weapon: WeaponComponent
    cooldown_remaining: int = 0
    target_id: Optional[str] = None
    arcs: tuple[int, ...] = ()

    def tick_cooldown(self) -> None:
        if self.cooldown_remaining > 0:
            self.cooldown_remaining -= 1

    def is_ready(self, available_power: float) -> bool:
        """Off cooldown with enough power for one shot."""
        return self.cooldown_remaining == 0 and available_power >= self.weapon.power_cost

    def in_range(self, distance: float) -> bool:
        return distance <= self.weapon.range

    def to_dict(self) -> dict:
        return {
            "weapon": self.weapon.to_dict(),
            "cooldown_remaining": self.cooldown_remaining,
            "target_id": self.target_id,
            "arcs": list(self.arcs),
        }

    @classmethod
    def from_dict(cls, data: dict) -> WeaponMount:
        data = _record(data, "weapon mount")
        weapon_data = _record(data["weapon"], "weapon")
        return cls(
            weapon=WeaponComponent.from_json(weapon_data["id"], weapon_data),
            cooldown_remaining=int(data.get("cooldown_remaining", 0)),
            target_id=data.get("target_id") or None,
            arcs=tuple(data.get("arcs") or ()),
        )


@dataclass
class Orders:
    """Movement orders: what the helm steers toward each turn."""
    target_speed: float = 0.0
    target_heading: float = 0.0

    def to_dict(self) -> dict:
        return {"target_speed": self.target_speed, "target_heading": self.target_heading}

    @classmethod
    def from_dict(cls, data: dict) -> Orders:
        data = _record(data, "orders")
        return cls(
            target_speed=float(data.get("target_speed", 0.0)),
            target_heading=float(data.get("target_heading", 0.0)),
        )


# =============================================================================
# COMBAT SHIP
# =============================================================================

@dataclass
class CombatShip:
    """
    Runtime state of one ship in a battle.

    Created from a ShipDesign at battle start, mutated every turn, discarded
    at battle end.

    Attributes:
        id: Unique ship id within the battle.
        name: Display name.
        design_id: Design the ship was built from.
        owner: Owning player id (ships with different owners are enemies).
        is_player: True for the local player's side.
        x: Map x position.
        y: Map y position.
        heading: Compass heading in degrees.
        speed: Current speed.
        acceleration: Speed change per turn; turn rate is 10x this.
        max_speed: Top speed.
        power: Power available this turn.
        max_power: Power restored each turn.
        orders: Current movement orders.
        weapons: Weapon mounts.
        systems: Non-weapon components that system hits can destroy.
        hull_integrity: Remaining hull.
        max_hull_integrity: Starting hull.
        max_hp: Hit-point scale used by the destruction check.
        armor: Flat damage reduction per hit.
        critical_hits: Destroyed drives/engines/warp systems.
        shields: Absorption value per shield arc (always 8 entries).
        destroyed: Set once, never cleared.
        ai_assisted: Orders come from the autopilot.
    """
    id: str
    name: str
    owner: str
    design_id: str = ""
    is_player: bool = False
    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0
    speed: float = 0.0
    acceleration: float = 0.0
    max_speed: float = 0.0
    power: float = 0.0
    max_power: float = 0.0
    orders: Orders = field(default_factory=Orders)
    weapons: list[WeaponMount] = field(default_factory=list)
    systems: list[SystemComponent] = field(default_factory=list)
    hull_integrity: float = 0.0
    max_hull_integrity: float = 0.0
    max_hp: float = 0.0
    armor: int = 0
    critical_hits: int = 0
    shields: list[float] = field(default_factory=lambda: [0.0] * NUM_SHIELD_ARCS)
    destroyed: bool = False
    ai_assisted: bool = False

    def __post_init__(self) -> None:
        shields = list(self.shields)[:NUM_SHIELD_ARCS]
        shields.extend([0.0] * (NUM_SHIELD_ARCS - len(shields)))
        self.shields = [max(0.0, s) for s in shields]
        self.hull_integrity = max(0.0, min(self.hull_integrity, self.max_hull_integrity))

    @property
    def position(self) -> Vector2D:
        return Vector2D(self.x, self.y)

    @property
    def hp(self) -> float:
        """Alias for hull_integrity."""
        return self.hull_integrity

    @property
    def is_alive(self) -> bool:
        return not self.destroyed

    def distance_to(self, other: CombatShip) -> float:
        return self.position.distance_to(other.position)

    def active_systems(self) -> list[SystemComponent]:
        return [s for s in self.systems if s.is_active]

    def mark_destroyed(self) -> None:
        self.destroyed = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "owner": self.owner,
            "design_id": self.design_id,
            "is_player": self.is_player,
            "x": self.x,
            "y": self.y,
            "heading": self.heading,
            "speed": self.speed,
            "acceleration": self.acceleration,
            "max_speed": self.max_speed,
            "power": self.power,
            "max_power": self.max_power,
            "orders": self.orders.to_dict(),
            "weapons": [w.to_dict() for w in self.weapons],
            "systems": [s.to_dict() for s in self.systems],
            "hull_integrity": self.hull_integrity,
            "max_hull_integrity": self.max_hull_integrity,
            "max_hp": self.max_hp,
            "armor": self.armor,
            "critical_hits": self.critical_hits,
            "shields": list(self.shields),
            "destroyed": self.destroyed,
            "ai_assisted": self.ai_assisted,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CombatShip:
        data = _record(data, "ship")
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            owner=data["owner"],
            design_id=data.get("design_id", ""),
            is_player=bool(data.get("is_player", False)),
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            heading=float(data.get("heading", 0.0)),
            speed=float(data.get("speed", 0.0)),
            acceleration=float(data.get("acceleration", 0.0)),
            max_speed=float(data.get("max_speed", 0.0)),
            power=float(data.get("power", 0.0)),
            max_power=float(data.get("max_power", 0.0)),
            orders=Orders.from_dict(data.get("orders", {})),
            weapons=[WeaponMount.from_dict(w) for w in data.get("weapons", [])],
            systems=[SystemComponent.from_dict(s) for s in data.get("systems", [])],
            hull_integrity=float(data.get("hull_integrity", 0.0)),
            max_hull_integrity=float(data.get("max_hull_integrity", 0.0)),
            max_hp=float(data.get("max_hp", 0.0)),
            armor=int(data.get("armor", 0)),
            critical_hits=int(data.get("critical_hits", 0)),
            shields=[float(s) for s in data.get("shields", [])],
            destroyed=bool(data.get("destroyed", False)),
            ai_assisted=bool(data.get("ai_assisted", False)),
        )


# =============================================================================
# PROJECTILES AND EFFECTS
# =============================================================================

@dataclass
class Projectile:
    """
    A homing projectile in flight.

    Attributes:
        id: Unique id ('proj-N').
        owner_id: Ship that fired it.
        target_id: Ship it homes on.
        x: Map x position.
        y: Map y position.
        heading: Compass heading of travel.
        speed: Distance covered per turn.
        damage: Damage on impact.
        weapon: The weapon that launched it.
    """
    id: str
    owner_id: str
    target_id: str
    x: float
    y: float
    heading: float
    speed: float
    damage: float
    weapon: WeaponComponent

    @property
    def position(self) -> Vector2D:
        return Vector2D(self.x, self.y)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "target_id": self.target_id,
            "x": self.x,
            "y": self.y,
            "heading": self.heading,
            "speed": self.speed,
            "damage": self.damage,
            "weapon": self.weapon.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Projectile:
        data = _record(data, "projectile")
        weapon_data = _record(data["weapon"], "weapon")
        return cls(
            id=data["id"],
            owner_id=data["owner_id"],
            target_id=data["target_id"],
            x=float(data["x"]),
            y=float(data["y"]),
            heading=float(data.get("heading", 0.0)),
            speed=float(data["speed"]),
            damage=float(data["damage"]),
            weapon=WeaponComponent.from_json(weapon_data["id"], weapon_data),
        )


@dataclass
class Effect:
    """A visual event for the renderer; carries no simulation state."""
    effect_type: EffectType
    target_id: str
    source_id: Optional[str] = None
    weapon_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "type": self.effect_type.value,
            "target_id": self.target_id,
            "source_id": self.source_id,
            "weapon_id": self.weapon_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Effect:
        data = _record(data, "effect")
        return cls(
            effect_type=EffectType(data["type"]),
            target_id=data["target_id"],
            source_id=data.get("source_id"),
            weapon_id=data.get("weapon_id"),
        )


# =============================================================================
# COMBAT STATE
# =============================================================================

@dataclass
class CombatState:
    """
    Complete state of one battle.

    Attributes:
        ships: All ships in setup order, destroyed ones included.
        projectiles: Projectiles in flight.
        effects: Visual effects produced since the last clear.
        turn: Turn counter, starting at 1.
        next_projectile_id: Counter for projectile ids.
        map_width: Map width; positions are clamped to [0, map_width].
        map_height: Map height; positions are clamped to [0, map_height].
    """
    ships: list[CombatShip] = field(default_factory=list)
    projectiles: list[Projectile] = field(default_factory=list)
    effects: list[Effect] = field(default_factory=list)
    turn: int = 1
    next_projectile_id: int = 1
    map_width: float = DEFAULT_MAP_WIDTH
    map_height: float = DEFAULT_MAP_HEIGHT

    def get_ship(self, ship_id: Optional[str]) -> Optional[CombatShip]:
        if not ship_id:
            return None
        for ship in self.ships:
            if ship.id == ship_id:
                return ship
        return None

    def living_ships(self) -> list[CombatShip]:
        return [s for s in self.ships if s.is_alive]

    def enemies_of(self, ship: CombatShip) -> list[CombatShip]:
        """Living ships with a different owner."""
        return [s for s in self.ships if s.is_alive and s.owner != ship.owner]

    def living_count(self, is_player: bool) -> int:
        return sum(1 for s in self.ships if s.is_alive and s.is_player == is_player)

    def allocate_projectile_id(self) -> str:
        projectile_id = f"proj-{self.next_projectile_id}"
        self.next_projectile_id += 1
        return projectile_id

    def drain_effects(self) -> list[Effect]:
        """Return pending effects and clear them (called by the renderer)."""
        effects, self.effects = self.effects, []
        return effects

    def to_dict(self) -> dict:
        return {
            "ships": [s.to_dict() for s in self.ships],
            "projectiles": [p.to_dict() for p in self.projectiles],
            "effects": [e.to_dict() for e in self.effects],
            "turn": self.turn,
            "next_projectile_id": self.next_projectile_id,
            "map_width": self.map_width,
            "map_height": self.map_height,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CombatState:
        """
        Rebuild a state from a snapshot.

        Raises:
            KeyError, ValueError, TypeError: If the snapshot is malformed.
        """
        data = _record(data, "combat state")
        return cls(
            ships=[CombatShip.from_dict(s) for s in data.get("ships", [])],
            projectiles=[Projectile.from_dict(p) for p in data.get("projectiles", [])],
            effects=[Effect.from_dict(e) for e in data.get("effects", [])],
            turn=int(data.get("turn", 1)),
            next_projectile_id=int(data.get("next_projectile_id", 1)),
            map_width=float(data.get("map_width", DEFAULT_MAP_WIDTH)),
            map_height=float(data.get("map_height", DEFAULT_MAP_HEIGHT)),
        )
