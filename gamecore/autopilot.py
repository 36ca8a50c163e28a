"""
Rule-based autopilot for AI-assisted ships.

Each AI-assisted ship keeps shooting at an enemy its weapons already track
or otherwise picks the nearest one. It closes fast while far away, slows
down once within 400 units, and points every weapon at the chosen target.
"""

from __future__ import annotations

import logging
from typing import Optional

from .geometry import FULL_CIRCLE_DEG, bearing, round_half_up
from .state import CombatShip, CombatState

logger = logging.getLogger(__name__)


CLOSE_RANGE = 400.0
APPROACH_SPEED = 100.0
ENGAGE_SPEED = 50.0


def select_target(state: CombatState, ship: CombatShip) -> Optional[CombatShip]:
    """
    Choose the primary target for ``ship``.

    Returns:
        The first living enemy a weapon already targets, else the nearest
        living enemy, else None.
    """
    enemies = state.enemies_of(ship)
    if not enemies:
        return None

    enemy_ids = {enemy.id for enemy in enemies}
    for mount in ship.weapons:
        if mount.target_id in enemy_ids:
            return state.get_ship(mount.target_id)

    return min(enemies, key=ship.distance_to)


def steer_toward(ship: CombatShip, target: CombatShip) -> None:
    """Set orders and weapon targets to engage ``target``."""
    heading = round_half_up(bearing(ship.position, target.position)) % FULL_CIRCLE_DEG
    distance = ship.distance_to(target)

    ship.orders.target_heading = heading
    ship.orders.target_speed = APPROACH_SPEED if distance > CLOSE_RANGE else ENGAGE_SPEED
    for mount in ship.weapons:
        mount.target_id = target.id


def generate_orders(state: CombatState) -> None:
    """Issue orders for every living AI-assisted ship."""
    for ship in state.ships:
        if ship.destroyed or not ship.ai_assisted:
            continue
        target = select_target(state, ship)
        if target is None:
            continue
        steer_toward(ship, target)
        logger.debug("%s engaging %s", ship.id, target.id)
