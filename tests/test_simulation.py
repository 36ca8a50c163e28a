"""
Tests for the turn executor and battle loop.

This module tests:
- Power regeneration, turning, acceleration and movement
- Beam and projectile fire, cooldowns, range and power checks
- Projectile homing, impact and fizzling
- Event logging, callbacks and outcome evaluation
- Turn determinism and the re-entrancy guard

Run with: python -m pytest tests/test_simulation.py -v
"""

import random

import pytest

from gamecore.battle_setup import start_combat
from gamecore.catalog import ComponentCategory, WeaponComponent, WeaponType
from gamecore.simulation import (
    BattleOutcome,
    SimulationEventType,
    TurnExecutor,
    evaluate_outcome,
    run_battle,
)
from gamecore.state import CombatShip, CombatState, EffectType, Orders, SystemComponent, WeaponMount


# =============================================================================
# FIXTURES
# =============================================================================

BEAM = WeaponComponent(
    id="w_beam", name="Beam", category=ComponentCategory.WEAPONS, cost=0,
    weapon_type=WeaponType.BEAM, range=500, damage=2, power_cost=1, cooldown=1,
)

TORPEDO = WeaponComponent(
    id="w_torp", name="Torpedo", category=ComponentCategory.WEAPONS, cost=0,
    weapon_type=WeaponType.PROJECTILE, range=600, damage=5, power_cost=5,
    cooldown=3, speed=15,
)


def make_ship(ship_id, owner, x=100.0, y=100.0, is_player=True, **kwargs):
    defaults = dict(
        name=ship_id, heading=0.0, speed=0.0, acceleration=0.0, max_speed=0.0,
        power=10.0, max_power=10.0, hull_integrity=16.0, max_hull_integrity=16.0,
        max_hp=16.0,
    )
    defaults.update(kwargs)
    return CombatShip(id=ship_id, owner=owner, x=x, y=y, is_player=is_player, **defaults)


@pytest.fixture
def executor():
    return TurnExecutor(rng=random.Random(42))


@pytest.fixture
def duel():
    """Stationary player ship with one beam, 100 units from a stationary enemy."""
    shooter = make_ship("p1", "player1", weapons=[WeaponMount(BEAM, target_id="e1")])
    target = make_ship("e1", "player2", x=200.0, is_player=False)
    return CombatState(ships=[shooter, target])


# =============================================================================
# MOVEMENT
# =============================================================================

class TestMovement:

    def test_turn_rate_is_ten_times_acceleration(self, executor):
        ship = make_ship("p1", "player1", acceleration=2.0, max_speed=4.0,
                         orders=Orders(target_speed=0.0, target_heading=90.0))
        state = CombatState(ships=[ship, make_ship("e1", "player2", x=900, is_player=False)])
        executor.execute_turn(state)
        assert ship.heading == pytest.approx(20.0)

    def test_speed_approaches_order_and_caps(self, executor):
        ship = make_ship("p1", "player1", acceleration=2.0, max_speed=4.0,
                         orders=Orders(target_speed=10.0, target_heading=0.0))
        state = CombatState(ships=[ship, make_ship("e1", "player2", x=900, is_player=False)])
        speeds = []
        for _ in range(3):
            executor.execute_turn(state)
            speeds.append(ship.speed)
        assert speeds == [2.0, 4.0, 4.0]

    def test_position_advances_along_heading(self, executor):
        ship = make_ship("p1", "player1", heading=90.0, speed=10.0, max_speed=10.0,
                         orders=Orders(target_speed=10.0, target_heading=90.0))
        state = CombatState(ships=[ship, make_ship("e1", "player2", x=900, is_player=False)])
        executor.execute_turn(state)
        assert ship.x == pytest.approx(101.0)
        assert ship.y == pytest.approx(100.0)

    def test_position_clamped_to_map(self, executor):
        ship = make_ship("p1", "player1", x=999.9, heading=90.0, speed=10.0, max_speed=10.0,
                         orders=Orders(target_speed=10.0, target_heading=90.0))
        state = CombatState(ships=[ship, make_ship("e1", "player2", x=100, is_player=False)])
        executor.execute_turn(state)
        assert ship.x == 1000.0

    def test_destroyed_ships_do_not_move(self, executor):
        ship = make_ship("p1", "player1", acceleration=2.0, max_speed=4.0,
                         orders=Orders(target_speed=4.0, target_heading=90.0))
        ship.mark_destroyed()
        state = CombatState(ships=[ship, make_ship("e1", "player2", is_player=False)])
        executor.execute_turn(state)
        assert ship.heading == 0.0
        assert ship.speed == 0.0


# =============================================================================
# WEAPONS
# =============================================================================

class TestBeamWeapons:

    def test_beam_hits_immediately(self, executor, duel):
        shooter, target = duel.ships
        result = executor.execute_turn(duel)
        assert target.hull_integrity == 14.0
        assert shooter.power == 9.0
        assert shooter.weapons[0].cooldown_remaining == 1
        assert [e.effect_type for e in duel.effects] == [EffectType.BEAM, EffectType.IMPACT]
        types = [e.event_type for e in result.events]
        assert SimulationEventType.WEAPON_FIRED in types
        assert SimulationEventType.DAMAGE_TAKEN in types

    def test_power_regenerates_each_turn(self, executor, duel):
        shooter = duel.ships[0]
        shooter.power = 0.0
        executor.execute_turn(duel)
        assert shooter.power == 9.0

    def test_out_of_range(self, executor, duel):
        duel.ships[1].x = 700.0
        executor.execute_turn(duel)
        assert duel.ships[1].hull_integrity == 16.0

    def test_insufficient_power(self, executor, duel):
        duel.ships[0].max_power = 0.5
        executor.execute_turn(duel)
        assert duel.ships[1].hull_integrity == 16.0

    def test_untargeted_weapon_holds_fire(self, executor, duel):
        duel.ships[0].weapons[0].target_id = None
        executor.execute_turn(duel)
        assert duel.ships[1].hull_integrity == 16.0

    def test_cooldown_spaces_out_shots(self, executor, duel):
        slow = WeaponComponent(
            id="w_slow", name="Slow", category=ComponentCategory.WEAPONS, cost=0,
            range=500, damage=2, power_cost=1, cooldown=2,
        )
        duel.ships[0].weapons = [WeaponMount(slow, target_id="e1")]
        hulls = []
        for _ in range(3):
            executor.execute_turn(duel)
            hulls.append(duel.ships[1].hull_integrity)
        assert hulls == [14.0, 14.0, 12.0]

    def test_destroyed_target_is_not_fired_on(self, executor, duel):
        duel.ships[1].mark_destroyed()
        executor.execute_turn(duel)
        assert duel.ships[0].power == 10.0
        assert duel.ships[0].weapons[0].cooldown_remaining == 0


class TestProjectiles:

    @pytest.fixture
    def launch(self, duel):
        duel.ships[0].weapons = [WeaponMount(TORPEDO, target_id="e1")]
        return duel

    def test_launch_spawns_homing_projectile(self, executor, launch):
        result = executor.execute_turn(launch)
        assert len(launch.projectiles) == 1
        projectile = launch.projectiles[0]
        assert projectile.id == "proj-1"
        assert projectile.owner_id == "p1"
        assert projectile.target_id == "e1"
        # steered toward the target and flew one tick
        assert projectile.heading == pytest.approx(90.0)
        assert projectile.x == pytest.approx(115.0)
        assert launch.ships[1].hull_integrity == 16.0
        assert launch.ships[0].power == 5.0
        assert launch.next_projectile_id == 2
        assert any(e.event_type is SimulationEventType.PROJECTILE_LAUNCHED for e in result.events)

    def test_projectile_impacts(self, executor, launch):
        executor.execute_turn(launch)
        launch.ships[0].weapons[0].target_id = None
        events = []
        for _ in range(10):
            events.extend(executor.execute_turn(launch).events)
        assert launch.projectiles == []
        assert launch.ships[1].hull_integrity == 11.0
        assert any(e.event_type is SimulationEventType.PROJECTILE_IMPACT for e in events)

    def test_projectile_fizzles_when_target_gone(self, executor, launch):
        executor.execute_turn(launch)
        launch.ships[0].weapons[0].target_id = None
        launch.ships[1].mark_destroyed()
        result = executor.execute_turn(launch)
        assert launch.projectiles == []
        assert any(e.event_type is SimulationEventType.PROJECTILE_FIZZLED for e in result.events)

    def test_projectile_hits_after_launcher_is_gone(self, executor, launch):
        executor.execute_turn(launch)
        launch.ships[0].weapons[0].target_id = None
        launch.ships = [launch.ships[1]] + [make_ship("p2", "player1", x=0, y=0)]
        for _ in range(10):
            executor.execute_turn(launch)
        assert launch.ships[0].hull_integrity == 11.0


# =============================================================================
# TURN FLOW
# =============================================================================

class TestTurnFlow:

    def test_turn_counter_increments(self, executor, duel):
        result = executor.execute_turn(duel)
        assert result.turn == 1
        assert duel.turn == 2

    def test_effects_cleared_at_turn_start(self, executor, duel):
        executor.execute_turn(duel)
        assert duel.drain_effects()
        assert duel.effects == []
        duel.ships[0].weapons[0].target_id = None
        executor.execute_turn(duel)
        assert duel.effects == []

    def test_identical_states_give_identical_turns(self):
        def build():
            return start_combat(
                ["default-enterprise", "default-reliant"], ["default-reliant", "default-reliant"],
                rng=random.Random(7),
            )

        first, second = build(), build()
        for state in (first, second):
            for ship in state.ships:
                ship.ai_assisted = True
            run_battle(state, TurnExecutor(rng=random.Random(42)), max_turns=15)
        assert first.to_dict() == second.to_dict()

    def test_callbacks_receive_events(self, executor, duel):
        received = []
        executor.add_event_callback(received.append)
        executor.execute_turn(duel)
        assert received == executor.events
        executor.remove_event_callback(received.append)
        executor.execute_turn(duel)
        assert len(received) < len(executor.events)

    def test_failing_callback_does_not_stop_turn(self, executor, duel):
        def broken(event):
            raise RuntimeError("boom")

        executor.add_event_callback(broken)
        executor.execute_turn(duel)
        assert duel.turn == 2

    def test_reentrant_turn_is_refused(self, executor, duel):
        errors = []

        def reenter(event):
            if event.event_type is SimulationEventType.TURN_STARTED:
                try:
                    executor.execute_turn(duel)
                except RuntimeError as e:
                    errors.append(e)

        executor.add_event_callback(reenter)
        executor.execute_turn(duel)
        assert len(errors) == 1
        assert duel.turn == 2


class TestOutcome:

    def test_evaluate_outcome(self):
        player = make_ship("p1", "player1")
        enemy = make_ship("e1", "player2", is_player=False)
        state = CombatState(ships=[player, enemy])
        assert evaluate_outcome(state) is BattleOutcome.ONGOING
        enemy.mark_destroyed()
        assert evaluate_outcome(state) is BattleOutcome.PLAYER_VICTORY
        player.mark_destroyed()
        assert evaluate_outcome(state) is BattleOutcome.MUTUAL_DESTRUCTION
        enemy.destroyed = False
        assert evaluate_outcome(state) is BattleOutcome.PLAYER_DEFEAT

    def test_kill_decides_battle(self, executor, duel):
        target = duel.ships[1]
        target.hull_integrity = 1.0
        target.max_hp = 1.0
        target.systems = [SystemComponent(ComponentCategory.DRIVES, "dr1", "Drive")]
        result = executor.execute_turn(duel)
        assert target.destroyed
        assert result.outcome is BattleOutcome.PLAYER_VICTORY
        types = [e.event_type for e in result.events]
        assert SimulationEventType.CRITICAL_HIT in types
        assert SimulationEventType.SHIP_DESTROYED in types
        assert types[-1] is SimulationEventType.BATTLE_DECIDED


class TestRunBattle:

    def test_stops_when_decided(self, duel):
        target = duel.ships[1]
        target.hull_integrity = 1.0
        target.max_hp = 1.0
        target.systems = [SystemComponent(ComponentCategory.DRIVES, "dr1", "Drive")]
        outcome = run_battle(duel, TurnExecutor(rng=random.Random(42)), max_turns=50)
        assert outcome is BattleOutcome.PLAYER_VICTORY
        assert duel.turn == 2

    def test_turn_limit_is_a_draw(self):
        state = start_combat(["default-enterprise"], ["default-reliant"], rng=random.Random(42))
        outcome = run_battle(state, TurnExecutor(rng=random.Random(42)), max_turns=5)
        assert outcome is BattleOutcome.DRAW
        assert state.turn == 6
