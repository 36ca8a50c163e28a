"""
Battle setup and teardown.

``start_combat`` turns design ids from each side's fleet into CombatShips
placed on the map; ``end_combat`` hands the surviving design ids back to
their owners.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from .catalog import (
    Catalog,
    ComponentCategory,
    UnknownReferenceError,
    WeaponComponent,
    default_catalog,
    load_catalog,
)
from .config import Settings
from .design import DesignLibrary, ShipDesign, resolved_components
from .geometry import Vector2D
from .state import CombatShip, CombatState, Orders, SystemComponent, WeaponMount
from .stats import Difficulty, derive_stats, parse_difficulty

logger = logging.getLogger(__name__)


PLAYER_OWNER = "player1"
AI_OWNER = "player2"

PLAYER_BASE = Vector2D(200.0, 500.0)
AI_BASE = Vector2D(800.0, 500.0)
POSITION_VARIANCE = 50.0
LINE_SPACING = 100.0

# Starting headings face roughly toward the other side
HEADING_SPREAD = 45.0
AI_BASE_HEADING = 180.0
AI_START_SPEED = 50.0


def build_combat_ship(
    design: ShipDesign,
    ship_id: str,
    owner: str,
    is_player: bool,
    position: Vector2D,
    heading: float,
    difficulty: Difficulty = Difficulty.EASY,
    catalog: Optional[Catalog] = None,
) -> CombatShip:
    """
    Create the combat instance of a design.

    Args:
        design: Design to instantiate.
        ship_id: Id for the new ship.
        owner: Owning player id.
        is_player: True for the local player's side.
        position: Starting position.
        heading: Starting heading; also the initial heading order.
        difficulty: Difficulty applied to engine power.
        catalog: Component catalog; the packaged one if None.

    Returns:
        A CombatShip at full power and integrity.
    """
    catalog = catalog or default_catalog()
    stats = derive_stats(design, difficulty, catalog)

    weapons: list[WeaponMount] = []
    systems: list[SystemComponent] = []
    for installation, spec in resolved_components(design, catalog):
        for _ in range(installation.count):
            if isinstance(spec, WeaponComponent):
                weapons.append(WeaponMount(weapon=spec, arcs=installation.arcs or ()))
            elif spec.category is not ComponentCategory.WEAPONS:
                systems.append(SystemComponent(spec.category, spec.id, spec.name))

    return CombatShip(
        id=ship_id,
        name=design.name,
        owner=owner,
        design_id=design.id,
        is_player=is_player,
        x=position.x,
        y=position.y,
        heading=heading,
        speed=0.0,
        acceleration=stats.max_acceleration,
        max_speed=stats.max_speed,
        power=stats.total_power,
        max_power=stats.total_power,
        orders=Orders(target_speed=0.0 if is_player else AI_START_SPEED, target_heading=heading),
        weapons=weapons,
        systems=systems,
        hull_integrity=stats.hull_integrity,
        max_hull_integrity=stats.max_hull_integrity,
        max_hp=stats.max_hp,
        armor=stats.armor,
        shields=list(design.shields or ()),
        ai_assisted=not is_player,
    )


def _line_positions(base: Vector2D, count: int, rng: random.Random) -> list[Vector2D]:
    """Positions stacked vertically around ``base``, jittered by the variance."""
    positions = []
    for i in range(count):
        y = base.y + i * LINE_SPACING - (count - 1) * LINE_SPACING / 2
        positions.append(Vector2D(
            base.x + rng.uniform(-POSITION_VARIANCE, POSITION_VARIANCE),
            y + rng.uniform(-POSITION_VARIANCE / 2, POSITION_VARIANCE / 2),
        ))
    return positions


def _resolve_designs(
    design_ids: Sequence[str], library: DesignLibrary, catalog: Catalog,
) -> list[ShipDesign]:
    """Look up each design id, skipping unknown designs and unknown hulls."""
    designs = []
    for design_id in design_ids:
        design = library.get(design_id)
        if design is None:
            logger.warning("Design %r not found, ship skipped", design_id)
            continue
        try:
            catalog.hull(design.hull)
        except UnknownReferenceError as e:
            logger.warning("Design %r skipped: %s", design_id, e)
            continue
        designs.append(design)
    return designs


def start_combat(
    player_design_ids: Sequence[str],
    ai_design_ids: Sequence[str],
    library: Optional[DesignLibrary] = None,
    difficulty: Difficulty | str = Difficulty.EASY,
    rng: Optional[random.Random] = None,
    settings: Optional[Settings] = None,
) -> CombatState:
    """
    Create the combat state for a battle between two fleets.

    Player ships line up on the left facing right-ish, AI ships on the
    right facing left-ish. AI ships are autopilot-controlled and start
    with a speed order of 50. Difficulty only boosts AI engines.

    Args:
        player_design_ids: Design ids of the player's fleet.
        ai_design_ids: Design ids of the AI fleet.
        library: Design lookup; built-in designs only if None.
        difficulty: AI difficulty.
        rng: Random source for positions and headings.
        settings: Map size and catalog; defaults if None.

    Returns:
        A CombatState at turn 1. Designs that are unknown or reference an
        unknown hull are skipped with a warning.
    """
    settings = settings or Settings()
    rng = rng or random.Random(settings.seed)
    catalog = load_catalog(settings.catalog_path)
    library = library or DesignLibrary(catalog=catalog)
    difficulty = parse_difficulty(difficulty)

    player_designs = _resolve_designs(player_design_ids, library, catalog)
    ai_designs = _resolve_designs(ai_design_ids, library, catalog)

    player_heading = rng.uniform(0.0, HEADING_SPREAD)
    ai_heading = AI_BASE_HEADING - rng.uniform(0.0, HEADING_SPREAD)

    state = CombatState(map_width=settings.map_width, map_height=settings.map_height)

    for i, (design, position) in enumerate(
        zip(player_designs, _line_positions(PLAYER_BASE, len(player_designs), rng)), start=1
    ):
        state.ships.append(build_combat_ship(
            design, f"player-{i}", PLAYER_OWNER, True, position, player_heading,
            Difficulty.EASY, catalog,
        ))

    for i, (design, position) in enumerate(
        zip(ai_designs, _line_positions(AI_BASE, len(ai_designs), rng)), start=1
    ):
        state.ships.append(build_combat_ship(
            design, f"enemy-{i}", AI_OWNER, False, position, ai_heading,
            difficulty, catalog,
        ))

    logger.info(
        "Combat started: %d player ships vs %d AI ships (%s)",
        len(player_designs), len(ai_designs), difficulty.value,
    )
    return state


def end_combat(state: CombatState) -> dict[str, list[str]]:
    """
    Return surviving design ids keyed by owner.

    Owners whose whole fleet was destroyed map to an empty list.
    """
    survivors: dict[str, list[str]] = {}
    for ship in state.ships:
        fleet = survivors.setdefault(ship.owner, [])
        if not ship.destroyed:
            fleet.append(ship.design_id)
    return survivors
