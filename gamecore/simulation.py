"""
Turn executor for the tactical space-combat simulator.

Each call to TurnExecutor.execute_turn advances a CombatState by one
discrete turn:

- Every living ship, in list order, regenerates power, turns and
  accelerates toward its orders, moves, then fires any weapon that is
  targeted, off cooldown, powered and in range.
- Projectiles then home on their targets and impact or fly on.
- The turn counter increments and the battle outcome is evaluated.

The executor keeps an event log of everything that happened, in the same
way the simulation timeline is recorded for replay, and notifies any
registered callbacks as events occur.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Optional

from .autopilot import generate_orders
from .catalog import WeaponComponent
from .damage import DamageReport, DamageResolver
from .geometry import Vector2D, approach, bearing, clamp, turn_toward
from .state import CombatShip, CombatState, Effect, EffectType, Projectile, WeaponMount

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

TURN_RATE_PER_ACCELERATION = 10.0  # degrees of turn per point of acceleration
MOVEMENT_SCALE = 0.1               # map units moved per point of speed
DEFAULT_MAX_TURNS = 200


# =============================================================================
# EVENTS AND OUTCOMES
# =============================================================================

class SimulationEventType(Enum):
    """Types of events that can occur during a turn."""
    # Turn flow
    TURN_STARTED = auto()
    TURN_ENDED = auto()
    BATTLE_DECIDED = auto()

    # Weapons
    WEAPON_FIRED = auto()
    PROJECTILE_LAUNCHED = auto()
    PROJECTILE_IMPACT = auto()
    PROJECTILE_FIZZLED = auto()

    # Damage
    SHIELD_ABSORBED = auto()
    DAMAGE_TAKEN = auto()
    SYSTEM_DESTROYED = auto()
    CRITICAL_HIT = auto()
    SHIP_DESTROYED = auto()


class BattleOutcome(Enum):
    """Possible battle outcomes, from the player's side."""
    ONGOING = "ongoing"
    PLAYER_VICTORY = "player_victory"
    PLAYER_DEFEAT = "player_defeat"
    MUTUAL_DESTRUCTION = "mutual_destruction"
    DRAW = "draw"


@dataclass
class SimulationEvent:
    """
    An event that occurred during a turn.

    Attributes:
        event_type: The type of event.
        turn: Turn number the event happened in.
        ship_id: ID of the acting ship (if applicable).
        target_id: ID of the target (if applicable).
        data: Additional event-specific data.
    """
    event_type: SimulationEventType
    turn: int
    ship_id: Optional[str] = None
    target_id: Optional[str] = None
    data: dict = field(default_factory=dict)

    def __str__(self) -> str:
        ship_str = f"[{self.ship_id}]" if self.ship_id else ""
        target_str = f" -> {self.target_id}" if self.target_id else ""
        return f"T{self.turn} {ship_str} {self.event_type.name}{target_str}"


@dataclass
class TurnResult:
    """
    Summary of one executed turn.

    Attributes:
        turn: The turn number that was executed.
        events: Events logged during the turn.
        damage_reports: Every hit resolved during the turn.
        outcome: Battle outcome after the turn.
    """
    turn: int
    events: list[SimulationEvent] = field(default_factory=list)
    damage_reports: list[DamageReport] = field(default_factory=list)
    outcome: BattleOutcome = BattleOutcome.ONGOING

    @property
    def is_decided(self) -> bool:
        return self.outcome is not BattleOutcome.ONGOING


def evaluate_outcome(state: CombatState) -> BattleOutcome:
    """Outcome from the living-ship count of each side."""
    players = state.living_count(is_player=True)
    enemies = state.living_count(is_player=False)
    if players == 0 and enemies == 0:
        return BattleOutcome.MUTUAL_DESTRUCTION
    if players == 0:
        return BattleOutcome.PLAYER_DEFEAT
    if enemies == 0:
        return BattleOutcome.PLAYER_VICTORY
    return BattleOutcome.ONGOING


# =============================================================================
# TURN EXECUTOR
# =============================================================================

class TurnExecutor:
    """
    Advances combat state one turn at a time.

    Usage:
        executor = TurnExecutor(rng=random.Random(42))
        executor.add_event_callback(print)
        result = executor.execute_turn(state)

    Args:
        resolver: Damage resolver; one sharing ``rng`` is created if None.
        rng: Random source for the default resolver.
    """

    def __init__(self, resolver: Optional[DamageResolver] = None, rng: Optional[random.Random] = None):
        self.resolver = resolver or DamageResolver(rng or random.Random())
        self.events: list[SimulationEvent] = []
        self._event_callbacks: list[Callable[[SimulationEvent], None]] = []
        self._turn_events: list[SimulationEvent] = []
        self._turn_reports: list[DamageReport] = []
        self._current_turn = 0
        self._in_turn = False

    def execute_turn(self, state: CombatState) -> TurnResult:
        """
        Execute one turn, mutating ``state`` in place.

        Returns:
            TurnResult for the executed turn.

        Raises:
            RuntimeError: If called while another turn is still executing.
        """
        if self._in_turn:
            raise RuntimeError("A turn is already being executed")

        self._in_turn = True
        try:
            return self._run_turn(state)
        finally:
            self._in_turn = False

    def _run_turn(self, state: CombatState) -> TurnResult:
        self._current_turn = state.turn
        self._turn_events = []
        self._turn_reports = []
        state.effects.clear()
        self._log_event(SimulationEventType.TURN_STARTED)

        for ship in state.ships:
            if ship.destroyed:
                continue
            self._update_ship(state, ship)
            self._fire_weapons(state, ship)

        self._advance_projectiles(state)

        result = TurnResult(turn=state.turn)
        state.turn += 1
        result.outcome = evaluate_outcome(state)
        self._log_event(SimulationEventType.TURN_ENDED)
        if result.is_decided:
            self._log_event(SimulationEventType.BATTLE_DECIDED, data={"outcome": result.outcome.value})
            logger.info("Battle decided after turn %d: %s", result.turn, result.outcome.value)

        result.events = self._turn_events
        result.damage_reports = self._turn_reports
        return result

    # -------------------------------------------------------------------------
    # Movement
    # -------------------------------------------------------------------------

    def _update_ship(self, state: CombatState, ship: CombatShip) -> None:
        ship.power = ship.max_power

        ship.heading = turn_toward(
            ship.heading,
            ship.orders.target_heading,
            ship.acceleration * TURN_RATE_PER_ACCELERATION,
        )

        speed = approach(ship.speed, ship.orders.target_speed, ship.acceleration)
        ship.speed = clamp(speed, 0.0, ship.max_speed)

        step = Vector2D.from_heading(ship.heading, ship.speed * MOVEMENT_SCALE)
        ship.x = clamp(ship.x + step.x, 0.0, state.map_width)
        ship.y = clamp(ship.y + step.y, 0.0, state.map_height)

    # -------------------------------------------------------------------------
    # Weapons
    # -------------------------------------------------------------------------

    def _fire_weapons(self, state: CombatState, ship: CombatShip) -> None:
        for index, mount in enumerate(ship.weapons):
            mount.tick_cooldown()
            if not mount.target_id:
                continue

            target = state.get_ship(mount.target_id)
            if target is None or target.destroyed:
                continue
            if not mount.is_ready(ship.power) or not mount.in_range(ship.distance_to(target)):
                continue

            ship.power -= mount.weapon.power_cost
            mount.cooldown_remaining = mount.weapon.cooldown

            if mount.weapon.is_projectile:
                self._launch_projectile(state, ship, target, mount)
            else:
                self._log_event(
                    SimulationEventType.WEAPON_FIRED, ship.id, target.id,
                    {"weapon": mount.weapon.id, "mount": index},
                )
                state.effects.append(Effect(EffectType.BEAM, target.id, ship.id, mount.weapon.id))
                self._apply_hit(state, ship, target, mount.weapon)

    def _launch_projectile(self, state: CombatState, ship: CombatShip, target: CombatShip,
                           mount: WeaponMount) -> None:
        projectile = Projectile(
            id=state.allocate_projectile_id(),
            owner_id=ship.id,
            target_id=target.id,
            x=ship.x,
            y=ship.y,
            heading=ship.heading,
            speed=mount.weapon.speed,
            damage=mount.weapon.damage,
            weapon=mount.weapon,
        )
        state.projectiles.append(projectile)
        self._log_event(
            SimulationEventType.PROJECTILE_LAUNCHED, ship.id, target.id,
            {"projectile": projectile.id, "weapon": mount.weapon.id},
        )

    # -------------------------------------------------------------------------
    # Projectiles
    # -------------------------------------------------------------------------

    def _advance_projectiles(self, state: CombatState) -> None:
        in_flight: list[Projectile] = []

        for projectile in state.projectiles:
            target = state.get_ship(projectile.target_id)
            if target is None or target.destroyed:
                self._log_event(
                    SimulationEventType.PROJECTILE_FIZZLED, projectile.owner_id,
                    projectile.target_id, {"projectile": projectile.id},
                )
                continue

            projectile.heading = bearing(projectile.position, target.position)
            if projectile.position.distance_to(target.position) <= projectile.speed:
                self._log_event(
                    SimulationEventType.PROJECTILE_IMPACT, projectile.owner_id,
                    target.id, {"projectile": projectile.id},
                )
                owner = state.get_ship(projectile.owner_id)
                origin = owner.position if owner is not None else projectile.position
                self._apply_hit(
                    state, owner, target, projectile.weapon,
                    origin=origin, damage=projectile.damage,
                )
                continue

            step = Vector2D.from_heading(projectile.heading, projectile.speed)
            projectile.x += step.x
            projectile.y += step.y
            in_flight.append(projectile)

        state.projectiles = in_flight

    # -------------------------------------------------------------------------
    # Damage
    # -------------------------------------------------------------------------

    def _apply_hit(
        self,
        state: CombatState,
        attacker: Optional[CombatShip],
        target: CombatShip,
        weapon: WeaponComponent,
        origin: Optional[Vector2D] = None,
        damage: Optional[float] = None,
    ) -> DamageReport:
        report = self.resolver.apply_damage(attacker, target, weapon, origin=origin, damage=damage)
        self._turn_reports.append(report)
        if report.skipped:
            return report

        attacker_id = attacker.id if attacker is not None else None
        state.effects.append(Effect(EffectType.IMPACT, target.id, attacker_id, weapon.id))

        if report.shield_absorbed > 0:
            self._log_event(
                SimulationEventType.SHIELD_ABSORBED, attacker_id, target.id,
                {"arc": report.arc, "absorbed": report.shield_absorbed},
            )
        if report.penetrated:
            self._log_event(
                SimulationEventType.DAMAGE_TAKEN, attacker_id, target.id,
                {"hull_damage": report.hull_damage, "system_hits": report.system_hits},
            )
        for system in report.destroyed_systems:
            self._log_event(
                SimulationEventType.SYSTEM_DESTROYED, attacker_id, target.id,
                {"system": system.component_id, "category": system.category.value},
            )
        if report.critical_hits:
            self._log_event(
                SimulationEventType.CRITICAL_HIT, attacker_id, target.id,
                {"critical_hits": target.critical_hits},
            )
        if report.target_destroyed:
            self._log_event(SimulationEventType.SHIP_DESTROYED, attacker_id, target.id)
            logger.info("%s destroyed on turn %d", target.name, self._current_turn)
        return report

    # -------------------------------------------------------------------------
    # Event Logging
    # -------------------------------------------------------------------------

    def add_event_callback(self, callback: Callable[[SimulationEvent], None]) -> None:
        """
        Register a callback to be called for each simulation event.

        Args:
            callback: Function that takes a SimulationEvent.
        """
        self._event_callbacks.append(callback)

    def remove_event_callback(self, callback: Callable[[SimulationEvent], None]) -> None:
        """Remove an event callback."""
        if callback in self._event_callbacks:
            self._event_callbacks.remove(callback)

    def _log_event(
        self,
        event_type: SimulationEventType,
        ship_id: Optional[str] = None,
        target_id: Optional[str] = None,
        data: Optional[dict] = None,
    ) -> SimulationEvent:
        """Log a simulation event and notify callbacks."""
        event = SimulationEvent(
            event_type=event_type,
            turn=self._current_turn,
            ship_id=ship_id,
            target_id=target_id,
            data=data or {},
        )
        self.events.append(event)
        self._turn_events.append(event)

        for callback in self._event_callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception("Event callback failed for %s", event.event_type.name)

        return event


# =============================================================================
# BATTLE LOOP
# =============================================================================

def run_battle(
    state: CombatState,
    executor: Optional[TurnExecutor] = None,
    max_turns: int = DEFAULT_MAX_TURNS,
) -> BattleOutcome:
    """
    Run autopilot orders and turns until the battle is decided.

    Args:
        state: Combat state to run; mutated in place.
        executor: Turn executor; a fresh one if None.
        max_turns: Turn limit, after which the battle is a draw.

    Returns:
        The final BattleOutcome.
    """
    executor = executor or TurnExecutor()
    outcome = evaluate_outcome(state)

    turns_run = 0
    while outcome is BattleOutcome.ONGOING and turns_run < max_turns:
        generate_orders(state)
        outcome = executor.execute_turn(state).outcome
        turns_run += 1

    if outcome is BattleOutcome.ONGOING:
        logger.info("Turn limit of %d reached, battle is a draw", max_turns)
        return BattleOutcome.DRAW
    return outcome
