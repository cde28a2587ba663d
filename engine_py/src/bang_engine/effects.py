"""
Main-phase card effects.

Each playable card key maps to a handler. Handlers validate everything before
the card leaves the player's hand.
"""

import logging
from typing import Callable, Dict, List, Optional

from .characters import character_of
from .constants import (
    CARD_BANG, CARD_BARREL, CARD_BEER, CARD_CATBALOU, CARD_DUEL, CARD_DYNAMITE,
    CARD_GATLING, CARD_INDIANS, CARD_JAIL, CARD_MISSED, CARD_MUSTANG, CARD_PANIC,
    CARD_SALOON, CARD_SCOPE, CARD_STAGECOACH, CARD_WEAPON, CARD_WELLSFARGO,
    CHECK_BARREL, EVENT_ACTION_RESOLVED, EVENT_PASSIVE, PHASE_MAIN, ROLE_SHERIFF
)
from .deck import discard_card, draw_check, refill_empty_hand, try_draw
from .distance import can_target, max_bangs_per_turn, within_reach
from .errors import (
    ACTION_NOT_ALLOWED, BAD_TARGET, BANG_LIMIT, CARD_NOT_IN_HAND,
    DUPLICATE_EQUIPMENT, EFFECT_PENDING, FULL_HP, INVALID_SELECTION,
    MISSING_TARGET, OUT_OF_RANGE, PLAYER_DEAD, WRONG_CARD, GameError
)
from .models import (
    BangPending, Card, DuelPending, GatlingPending, IndiansPending, Player, RoomState
)
from .resolver import prompt_duel
from .turn import require_turn_holder

logger = logging.getLogger(__name__)


def _spend(state: RoomState, player: Player, card: Card):
    player.take_card(card.id)
    discard_card(state, card)


def _equip(state: RoomState, player: Player, card: Card):
    """Put a card in front of a player, replacing one of the same kind."""
    player.take_card(card.id)
    old = player.unequip(card.key)
    if old is not None:
        discard_card(state, old)
    player.equipment.append(card)


def _living_target(state: RoomState, player: Player, target_id: Optional[str]) -> Player:
    if target_id is None:
        raise GameError(MISSING_TARGET, "This card needs a target")
    target = state.get_player(target_id)
    if target is None or not target.is_alive:
        raise GameError(BAD_TARGET, "Target is not a living player")
    if target.id == player.id:
        raise GameError(BAD_TARGET, "You cannot target yourself")
    return target


def _others_in_seat_order(state: RoomState, player: Player) -> List[str]:
    start = state.index_of(player.id)
    count = len(state.players)
    order = [state.players[(start + step) % count] for step in range(1, count)]
    return [p.id for p in order if p.is_alive]


def _random_card(state: RoomState, target: Player) -> Card:
    pool = target.hand + target.equipment
    return target.take_any(state.rng.choice(pool).id)


# Equipment

def play_equipment(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    _equip(state, player, card)
    state.emit(EVENT_ACTION_RESOLVED, kind='equip', player_id=player.id, card=card.to_dict())


def play_dynamite(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    if target_id is not None and target_id != player.id:
        raise GameError(BAD_TARGET, "Dynamite can only be placed in front of yourself")
    if player.has_equipment(CARD_DYNAMITE):
        raise GameError(DUPLICATE_EQUIPMENT, "You already have dynamite")
    player.take_card(card.id)
    player.equipment.append(card)
    state.emit(EVENT_ACTION_RESOLVED, kind='equip', player_id=player.id, card=card.to_dict())


def play_jail(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    target = _living_target(state, player, target_id)
    if target.role == ROLE_SHERIFF:
        raise GameError(BAD_TARGET, "The sheriff cannot be jailed")
    player.take_card(card.id)
    old = target.unequip(CARD_JAIL)
    if old is not None:
        discard_card(state, old)
    target.equipment.append(card)
    state.emit(EVENT_ACTION_RESOLVED, kind='jail', player_id=player.id, target_id=target.id)


# Attacks

def play_bang(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    target = _living_target(state, player, target_id)
    if not can_target(state, player, target):
        raise GameError(OUT_OF_RANGE, "Target is out of range")
    if state.bangs_used_this_turn >= max_bangs_per_turn(player):
        raise GameError(BANG_LIMIT, "You already fired this turn")

    _spend(state, player, card)
    state.bangs_used_this_turn += 1
    state.emit(EVENT_ACTION_RESOLVED, kind='bang', attacker_id=player.id, target_id=target.id)

    if target.has_equipment(CARD_BARREL) or character_of(target).innate_barrel:
        check = draw_check(state, target, CHECK_BARREL)
        if check.favorable:
            state.emit(EVENT_ACTION_RESOLVED, kind='bang_dodged_barrel', target_id=target.id)
            return

    state.open_pending(BangPending(
        attacker_id=player.id,
        target_id=target.id,
        required_missed=character_of(player).missed_required,
    ))


def play_indians(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    targets = _others_in_seat_order(state, player)
    _spend(state, player, card)
    state.emit(EVENT_ACTION_RESOLVED, kind='indians', attacker_id=player.id, targets=targets)
    if targets:
        state.open_pending(IndiansPending(attacker_id=player.id, targets=targets))


def play_gatling(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    targets = _others_in_seat_order(state, player)
    _spend(state, player, card)
    state.emit(EVENT_ACTION_RESOLVED, kind='gatling', attacker_id=player.id, targets=targets)
    if targets:
        state.open_pending(GatlingPending(attacker_id=player.id, targets=targets))


def play_duel(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    target = _living_target(state, player, target_id)
    _spend(state, player, card)
    state.emit(EVENT_ACTION_RESOLVED, kind='duel', initiator_id=player.id, target_id=target.id)
    prompt_duel(state, DuelPending(initiator_id=player.id, target_id=target.id,
                                   responder_id=target.id))


# Healing and drawing

def play_beer(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    if len(state.alive_players()) <= 2:
        raise GameError(ACTION_NOT_ALLOWED, "Beer has no effect with two players left")
    if player.hp >= player.max_hp:
        raise GameError(FULL_HP, "You are already at full health")
    _spend(state, player, card)
    player.hp += 1
    state.emit(EVENT_ACTION_RESOLVED, kind='beer', player_id=player.id, hp=player.hp)


def play_saloon(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    _spend(state, player, card)
    for p in state.alive_players():
        p.hp = min(p.max_hp, p.hp + 1)
    state.emit(EVENT_ACTION_RESOLVED, kind='saloon', player_id=player.id)


def _draw_card_effect(count: int) -> Callable:
    def play(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
        _spend(state, player, card)
        drawn = try_draw(state, player, count)
        state.emit(EVENT_ACTION_RESOLVED, kind=card.key, player_id=player.id, count=len(drawn))
    return play


# Stealing and discarding

def play_panic(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    target = _living_target(state, player, target_id)
    if not within_reach(state, player, target):
        raise GameError(OUT_OF_RANGE, "Target is out of reach")
    if not target.hand and not target.equipment:
        raise GameError(BAD_TARGET, "Target has no cards")
    _spend(state, player, card)
    stolen = _random_card(state, target)
    player.hand.append(stolen)
    state.emit(EVENT_ACTION_RESOLVED, kind='panic', player_id=player.id, target_id=target.id)
    refill_empty_hand(state, target)


def play_catbalou(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    target = _living_target(state, player, target_id)
    if not within_reach(state, player, target):
        raise GameError(OUT_OF_RANGE, "Target is out of reach")
    if not target.hand and not target.equipment:
        raise GameError(BAD_TARGET, "Target has no cards")
    _spend(state, player, card)
    lost = _random_card(state, target)
    discard_card(state, lost)
    state.emit(EVENT_ACTION_RESOLVED, kind='catbalou', player_id=player.id, target_id=target.id,
               card=lost.to_dict())
    refill_empty_hand(state, target)


def play_missed(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    if character_of(player).substitutes:
        play_bang(state, player, card, target_id)
        return
    raise GameError(WRONG_CARD, "Missed can only be played in response to a shot")


def play_unknown(state: RoomState, player: Player, card: Card, target_id: Optional[str]):
    logger.warning(f"Room {state.code}: {player.id} played unknown card {card.key}")
    _spend(state, player, card)
    state.emit(EVENT_ACTION_RESOLVED, kind='discarded', player_id=player.id, card=card.to_dict())


PLAY_HANDLERS: Dict[str, Callable] = {
    CARD_BANG: play_bang,
    CARD_MISSED: play_missed,
    CARD_BEER: play_beer,
    CARD_SALOON: play_saloon,
    CARD_STAGECOACH: _draw_card_effect(2),
    CARD_WELLSFARGO: _draw_card_effect(3),
    CARD_PANIC: play_panic,
    CARD_CATBALOU: play_catbalou,
    CARD_INDIANS: play_indians,
    CARD_GATLING: play_gatling,
    CARD_DUEL: play_duel,
    CARD_WEAPON: play_equipment,
    CARD_BARREL: play_equipment,
    CARD_MUSTANG: play_equipment,
    CARD_SCOPE: play_equipment,
    CARD_JAIL: play_jail,
    CARD_DYNAMITE: play_dynamite,
}


def _require_active(state: RoomState, player_id: str) -> Player:
    player = require_turn_holder(state, player_id)
    if not player.is_alive:
        raise GameError(PLAYER_DEAD, "Eliminated players cannot act")
    if state.phase != PHASE_MAIN or state.pending is not None:
        raise GameError(EFFECT_PENDING, "Resolve the pending action first")
    return player


def play_card(state: RoomState, player_id: str, card_id: str, target_id: Optional[str] = None):
    """Play a card from hand during the main phase."""
    player = _require_active(state, player_id)
    card = player.find_card(card_id)
    if card is None:
        raise GameError(CARD_NOT_IN_HAND, "Card not in hand")
    handler = PLAY_HANDLERS.get(card.key, play_unknown)
    handler(state, player, card, target_id)

    refill_empty_hand(state, player)
    target = state.get_player(target_id)
    if target is not None and target.id != player.id:
        refill_empty_hand(state, target)


def heal_via_discard(state: RoomState, player_id: str, card_ids: List[str]):
    """Discard two cards to regain one life point."""
    player = state.get_player(player_id)
    if player is None or not player.is_alive:
        raise GameError(PLAYER_DEAD, "Eliminated players cannot act")
    if not character_of(player).discard_heal:
        raise GameError(ACTION_NOT_ALLOWED, "Your character cannot do that")
    if state.phase != PHASE_MAIN:
        raise GameError(EFFECT_PENDING, "Resolve the pending action first")
    if player.hp >= player.max_hp:
        raise GameError(FULL_HP, "You are already at full health")
    if len(card_ids) != 2 or len(set(card_ids)) != 2:
        raise GameError(INVALID_SELECTION, "Discard exactly two different cards")
    if any(player.find_card(card_id) is None for card_id in card_ids):
        raise GameError(CARD_NOT_IN_HAND, "Card not in hand")

    for card_id in card_ids:
        discard_card(state, player.take_card(card_id))
    player.hp += 1
    state.emit(EVENT_PASSIVE, player_id=player.id, name='discard_heal', hp=player.hp)
    refill_empty_hand(state, player)
