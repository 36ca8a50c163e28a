"""
Order intake and peer-sync messages.

Two message shapes travel between peers:

- ``move``: one ship's movement orders and per-weapon targets, sent by the
  joining peer to the peer that resolves turns.
- ``move-update``: the resolving peer's full combat state, which replaces
  the receiver's state wholesale.

Orders are checked for type only. Whether a heading or speed is sensible
is left to the turn executor, which clamps what it has to.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from .state import CombatState, Orders

logger = logging.getLogger(__name__)


GAME_ID = "cosmicbalance"
MOVE_MESSAGE = "move"
STATE_UPDATE_MESSAGE = "move-update"


class InvalidOrderError(ValueError):
    """Raised when order values are missing or not numeric."""


def _number(data: dict, *keys: str) -> float:
    for key in keys:
        if key in data:
            value = data[key]
            # bool is an int subclass but never a valid order value
            if isinstance(value, bool) or not isinstance(value, (int, float, str)):
                raise InvalidOrderError(f"{key} must be a number, got {value!r}")
            try:
                return float(value)
            except ValueError:
                raise InvalidOrderError(f"{key} must be a number, got {value!r}") from None
    raise InvalidOrderError(f"Missing order field {keys[0]!r}")


def coerce_orders(data: Any) -> Orders:
    """
    Build Orders from input or wire data.

    Accepts ``target_speed``/``target_heading`` or their camelCase forms.

    Raises:
        InvalidOrderError: If a field is missing or not numeric.
    """
    if isinstance(data, Orders):
        return data
    if not isinstance(data, dict):
        raise InvalidOrderError(f"Orders must be a mapping, got {type(data).__name__}")
    return Orders(
        target_speed=_number(data, "target_speed", "targetSpeed"),
        target_heading=_number(data, "target_heading", "targetHeading"),
    )


def apply_order_update(state: CombatState, message: dict) -> bool:
    """
    Merge one ship's orders into the state (last write wins).

    Args:
        state: Combat state to update.
        message: A ``move`` message body.

    Returns:
        True if the ship was found and updated.

    Raises:
        InvalidOrderError: If the orders or weapon orders are malformed.
    """
    ship_id = message.get("ship_id") or message.get("shipId")
    ship = state.get_ship(ship_id)
    if ship is None:
        logger.warning("Order update for unknown ship %r ignored", ship_id)
        return False

    orders = message.get("orders")
    new_orders = coerce_orders(orders) if orders is not None else None

    # Validate everything before touching the ship
    weapon_orders = message.get("weapon_orders", message.get("weaponOrders")) or []
    if not isinstance(weapon_orders, list):
        raise InvalidOrderError(f"Weapon orders must be a list, got {weapon_orders!r}")

    targets: list[tuple[int, Optional[str]]] = []
    for order in weapon_orders:
        if not isinstance(order, dict):
            raise InvalidOrderError(f"Weapon order must be a mapping, got {order!r}")
        index = order.get("index")
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidOrderError(f"Weapon order index must be an integer, got {index!r}")
        target_id = order.get("target_id", order.get("targetId"))
        if target_id is not None and not isinstance(target_id, str):
            raise InvalidOrderError(f"Weapon target must be a ship id, got {target_id!r}")
        targets.append((index, target_id or None))

    if new_orders is not None:
        ship.orders = new_orders
    for index, target_id in targets:
        if 0 <= index < len(ship.weapons):
            ship.weapons[index].target_id = target_id

    return True


def apply_snapshot(payload: dict) -> CombatState:
    """
    Build the authoritative state pushed by the resolving peer.

    Raises:
        KeyError, ValueError, TypeError: If the snapshot is malformed.
    """
    return CombatState.from_dict(payload)


def receive_message(state: CombatState, raw: str | bytes) -> CombatState:
    """
    Handle one raw message from a peer.

    Malformed or unrelated messages are logged and discarded, leaving
    ``state`` untouched.

    Returns:
        The state to continue with: a new one for a snapshot, otherwise
        ``state`` itself.
    """
    try:
        message = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Discarding malformed message: %s", e)
        return state

    if not isinstance(message, dict) or message.get("game", GAME_ID) != GAME_ID:
        logger.debug("Ignoring message for another game")
        return state

    message_type: Optional[str] = message.get("type")
    if message_type == MOVE_MESSAGE:
        try:
            apply_order_update(state, message)
        except InvalidOrderError as e:
            logger.warning("Discarding invalid orders: %s", e)
        return state

    if message_type == STATE_UPDATE_MESSAGE:
        payload = message.get("combat_state", message.get("combatState"))
        if not isinstance(payload, dict):
            logger.warning("Discarding state update without a combat state")
            return state
        try:
            return apply_snapshot(payload)
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Discarding malformed state update: %s", e)
            return state

    logger.warning("Unknown message type %r discarded", message_type)
    return state
