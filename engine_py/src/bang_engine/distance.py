"""
Distance and targeting calculations.
"""

from .characters import character_of
from .constants import (
    CARD_MUSTANG, CARD_SCOPE, MAX_RANGE, MIN_RANGE, UNREACHABLE, WEAPON_RANGES
)
from .models import Player, RoomState


def seat_distance(state: RoomState, from_id: str, to_id: str) -> int:
    """Shortest number of steps around the circle of living players."""
    if from_id == to_id:
        return 0
    alive = [p.id for p in state.alive_players()]
    if from_id not in alive or to_id not in alive:
        return UNREACHABLE
    clockwise = (alive.index(to_id) - alive.index(from_id)) % len(alive)
    return min(clockwise, len(alive) - clockwise)


def effective_distance(state: RoomState, attacker: Player, defender: Player) -> int:
    base = seat_distance(state, attacker.id, defender.id)
    if base == UNREACHABLE:
        return UNREACHABLE
    if defender.has_equipment(CARD_MUSTANG):
        base += 1
    base += character_of(defender).defense_distance
    if attacker.has_equipment(CARD_SCOPE):
        base -= 1
    base -= character_of(attacker).attack_distance
    return max(1, base)


def weapon_range(player: Player) -> int:
    weapon = player.weapon
    if weapon is None:
        return MIN_RANGE
    if weapon.range is not None:
        return min(MAX_RANGE, max(MIN_RANGE, int(weapon.range)))
    return WEAPON_RANGES.get(weapon.weapon_name, MIN_RANGE)


def can_target(state: RoomState, attacker: Player, defender: Player) -> bool:
    return effective_distance(state, attacker, defender) <= weapon_range(attacker)


def within_reach(state: RoomState, attacker: Player, defender: Player, reach: int = 1) -> bool:
    """Fixed-distance check used by cards that ignore weapons."""
    return effective_distance(state, attacker, defender) <= reach


def has_volcanic(player: Player) -> bool:
    weapon = player.weapon
    return weapon is not None and weapon.weapon_name == 'volcanic'


def max_bangs_per_turn(player: Player) -> float:
    if character_of(player).unlimited_bangs or has_volcanic(player):
        return float('inf')
    return 1
