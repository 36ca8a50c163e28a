"""
Damage resolution for weapon hits.

A hit is resolved in layers:

1. The attack bearing relative to the target's heading selects one of the
   eight 45-degree shield arcs, and that arc absorbs what it can.
2. Installed armor removes a flat amount per hit.
3. What is left depletes hull integrity. Damage beyond the remaining hull
   becomes system hits, each destroying one random active system.
4. Losing a drive, engine or warp system counts as a critical hit, and the
   ship is destroyed once critical hits reach its max_hp.

The random source is injected so tests can make system-hit selection
deterministic.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Optional

from .catalog import CRITICAL_CATEGORIES, WeaponComponent
from .geometry import Vector2D, bearing, normalize_heading, round_half_up
from .state import NUM_SHIELD_ARCS, CombatShip, SystemComponent

logger = logging.getLogger(__name__)


ARC_WIDTH_DEG = 360.0 / NUM_SHIELD_ARCS

# Each full block of excess damage beyond the hull adds one more system hit
SYSTEM_HIT_DAMAGE_STEP = 5


@dataclass
class DamageReport:
    """
    Outcome of one weapon hit.

    Attributes:
        target_id: Ship that was hit.
        arc: Shield arc index 0-7 that took the hit.
        incoming: Damage before any mitigation.
        shield_absorbed: Damage soaked by the shield arc.
        armor_absorbed: Damage removed by armor.
        hull_damage: Hull integrity actually lost.
        system_hits: Number of system hits rolled.
        destroyed_systems: Systems knocked out by this hit.
        critical_hits: Critical hits caused by this hit.
        target_destroyed: True if this hit destroyed the target.
        skipped: True if the target was already destroyed.
    """
    target_id: str
    arc: int = 0
    incoming: float = 0.0
    shield_absorbed: float = 0.0
    armor_absorbed: float = 0.0
    hull_damage: float = 0.0
    system_hits: int = 0
    destroyed_systems: list[SystemComponent] = field(default_factory=list)
    critical_hits: int = 0
    target_destroyed: bool = False
    skipped: bool = False

    @property
    def penetrated(self) -> bool:
        """True if any damage got past shields and armor."""
        return self.hull_damage > 0 or self.system_hits > 0


def shield_arc(origin: Vector2D, target: CombatShip) -> int:
    """
    Shield arc of ``target`` facing a hit coming from ``origin``.

    Arc 0 is dead ahead and indices increase clockwise.
    """
    relative = normalize_heading(bearing(target.position, origin) - target.heading)
    return round_half_up(relative / ARC_WIDTH_DEG) % NUM_SHIELD_ARCS


def system_hit_count(excess: float) -> int:
    """System hits caused by damage beyond what the hull could take."""
    if excess <= 0:
        return 0
    return math.floor(excess / SYSTEM_HIT_DAMAGE_STEP) + 1


class DamageResolver:
    """
    Applies weapon hits to combat ships.

    Args:
        rng: Random source for system-hit selection.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def apply_damage(
        self,
        attacker: Optional[CombatShip],
        target: CombatShip,
        weapon: WeaponComponent,
        origin: Optional[Vector2D] = None,
        damage: Optional[float] = None,
    ) -> DamageReport:
        """
        Resolve one hit against ``target``, mutating it in place.

        Args:
            attacker: Ship that fired, used as the hit origin.
            target: Ship being hit.
            weapon: Weapon that scored the hit.
            origin: Hit origin when there is no attacker (e.g. a projectile
                whose launcher is gone).
            damage: Damage override; the weapon's damage if None.

        Returns:
            DamageReport describing what happened.
        """
        report = DamageReport(target_id=target.id)
        if target.destroyed:
            report.skipped = True
            return report

        if origin is None:
            origin = attacker.position if attacker is not None else target.position
        remaining = weapon.damage if damage is None else damage
        report.incoming = remaining

        # Shields
        arc = shield_arc(origin, target)
        report.arc = arc
        absorbed = min(target.shields[arc], remaining)
        if absorbed > 0:
            target.shields[arc] -= absorbed
            remaining -= absorbed
            report.shield_absorbed = absorbed

        # Armor
        if remaining > 0 and target.armor > 0:
            blocked = min(float(target.armor), remaining)
            remaining -= blocked
            report.armor_absorbed = blocked

        if remaining <= 0:
            logger.debug("%s: hit on arc %d fully absorbed", target.id, arc)
            return report

        # Hull, then systems
        hull_damage = min(target.hull_integrity, remaining)
        target.hull_integrity -= hull_damage
        report.hull_damage = hull_damage

        report.system_hits = system_hit_count(remaining - hull_damage)
        for _ in range(report.system_hits):
            destroyed = self._destroy_random_system(target)
            if destroyed is None:
                break
            report.destroyed_systems.append(destroyed)
            if destroyed.category in CRITICAL_CATEGORIES:
                target.critical_hits += 1
                report.critical_hits += 1

        if target.critical_hits >= target.max_hp:
            target.mark_destroyed()
            report.target_destroyed = True

        logger.debug(
            "%s: %.1f damage on arc %d (shield %.1f, armor %.1f, hull %.1f, systems %d)",
            target.id, report.incoming, arc, report.shield_absorbed,
            report.armor_absorbed, report.hull_damage, report.system_hits,
        )
        return report

    def _destroy_random_system(self, target: CombatShip) -> Optional[SystemComponent]:
        active = target.active_systems()
        if not active:
            return None
        system = self.rng.choice(active)
        system.destroy()
        return system
