"""Puzzle hint engine and Cosmic Balance space-combat simulator."""

from .hints import (
    HINT_TECHNIQUES,
    Technique,
    get_hint,
)

from .techniques import (
    HintCell,
    HintResult,
)

from .candidates import (
    build_candidate_map,
    count_candidates,
)

from .catalog import (
    Catalog,
    ComponentCategory,
    UnknownReferenceError,
    WeaponComponent,
    WeaponType,
    default_catalog,
    load_catalog,
)

from .design import (
    ComponentInstallation,
    DesignLibrary,
    ShipDesign,
)

from .stats import (
    Difficulty,
    ShipStats,
    derive_stats,
)

from .state import (
    CombatShip,
    CombatState,
    Effect,
    EffectType,
    Orders,
    Projectile,
    SystemComponent,
    WeaponMount,
)

from .damage import (
    DamageReport,
    DamageResolver,
)

from .simulation import (
    BattleOutcome,
    SimulationEvent,
    SimulationEventType,
    TurnExecutor,
    TurnResult,
    evaluate_outcome,
    run_battle,
)

from .autopilot import generate_orders

from .battle_setup import (
    end_combat,
    start_combat,
)

from .orders import (
    InvalidOrderError,
    apply_order_update,
    apply_snapshot,
    coerce_orders,
    receive_message,
)

from .config import Settings

__all__ = [
    # Hints
    "HINT_TECHNIQUES",
    "Technique",
    "get_hint",
    "HintCell",
    "HintResult",
    "build_candidate_map",
    "count_candidates",
    # Catalog and designs
    "Catalog",
    "ComponentCategory",
    "UnknownReferenceError",
    "WeaponComponent",
    "WeaponType",
    "default_catalog",
    "load_catalog",
    "ComponentInstallation",
    "DesignLibrary",
    "ShipDesign",
    "Difficulty",
    "ShipStats",
    "derive_stats",
    # Combat state
    "CombatShip",
    "CombatState",
    "Effect",
    "EffectType",
    "Orders",
    "Projectile",
    "SystemComponent",
    "WeaponMount",
    # Turn resolution
    "DamageReport",
    "DamageResolver",
    "BattleOutcome",
    "SimulationEvent",
    "SimulationEventType",
    "TurnExecutor",
    "TurnResult",
    "evaluate_outcome",
    "run_battle",
    "generate_orders",
    # Setup and sync
    "end_combat",
    "start_combat",
    "InvalidOrderError",
    "apply_order_update",
    "apply_snapshot",
    "coerce_orders",
    "receive_message",
    "Settings",
]
