"""
Turn controller: game start, turn start checks, draw phase and turn hand-off.
"""

import logging
import time
from typing import List, Optional

from .characters import (
    DRAW_FROM_DISCARD, DRAW_PREVIEW, DRAW_STEAL, character_of
)
from .constants import (
    CARD_DYNAMITE, CARD_JAIL, CHECK_DYNAMITE, CHECK_JAIL, EVENT_ACTION_RESOLVED,
    EVENT_GAME_STARTED, EVENT_PASSIVE, EVENT_TURN_ENDED, EVENT_TURN_STARTED,
    PHASE_MAIN, REASON_JAILED, REASON_MANUAL, REASON_TIMEOUT, ROLE_SHERIFF
)
from .damage import apply_damage
from .deck import discard_card, draw_check, is_red, peek, refill_empty_hand, try_draw
from .errors import ACTION_NOT_ALLOWED, EFFECT_PENDING, NOT_YOUR_TURN, GameError
from .models import (
    Card, DiscardLimitPending, DrawChoicePending, DrawSourcePending, Player,
    RoomState, StealChoicePending
)
from .shuffle import assign_characters, assign_roles, deal_starting_hands
from .victory import check_game_over

logger = logging.getLogger(__name__)


def next_living_index(state: RoomState, from_index: int) -> Optional[int]:
    """Seat index of the next living player after from_index, wrapping around."""
    count = len(state.players)
    for step in range(1, count + 1):
        idx = (from_index + step) % count
        if state.players[idx].is_alive:
            return idx
    return None


def start_game(state: RoomState):
    """Deal roles, characters and cards, then hand the first turn to the sheriff."""
    assign_roles(state)
    assign_characters(state)
    deal_starting_hands(state)

    state.started = True
    state.ended = False
    state.winner = None
    state.winner_ids = []
    state.phase = PHASE_MAIN
    state.pending = None
    state.turn_index = next(i for i, p in enumerate(state.players) if p.role == ROLE_SHERIFF)

    logger.info(f"Room {state.code}: game started with {len(state.players)} players")
    state.emit(
        EVENT_GAME_STARTED,
        sheriff_id=state.players[state.turn_index].id,
        players=[
            {"id": p.id, "name": p.name, "character": p.character, "max_hp": p.max_hp}
            for p in state.players
        ],
    )
    for player in state.players:
        state.emit(EVENT_GAME_STARTED, to=player.id, role=player.role, character=player.character)
    start_turn(state)


def start_turn(state: RoomState):
    """
    Begin the turn of the player at turn_index.

    Dynamite is checked before jail. If either takes the turn away the next
    living player starts instead.
    """
    for _ in range(len(state.players) * 2 + 1):
        if check_game_over(state):
            return
        player = state.current_player()
        if not player.is_alive:
            nxt = next_living_index(state, state.turn_index)
            if nxt is None:
                return
            state.turn_index = nxt
            continue

        state.phase = PHASE_MAIN
        state.pending = None
        state.pending_ends_at = None
        state.bangs_used_this_turn = 0
        state.turn_ends_at = time.time() + state.rule_config.turn_timeout
        state.emit(EVENT_TURN_STARTED, player_id=player.id, turn_index=state.turn_index,
                   ends_at=state.turn_ends_at)

        if not resolve_dynamite(state, player):
            continue
        if not resolve_jail(state, player):
            nxt = next_living_index(state, state.turn_index)
            state.emit(EVENT_TURN_ENDED, reason=REASON_JAILED, player_id=player.id,
                       next_player_id=state.players[nxt].id)
            state.turn_index = nxt
            continue
        start_draw_phase(state, player)
        return
    logger.error(f"Room {state.code}: could not find a player able to take a turn")


def resolve_dynamite(state: RoomState, player: Player) -> bool:
    """Check dynamite at turn start. Returns False if the holder died."""
    if not player.has_equipment(CARD_DYNAMITE):
        return True
    check = draw_check(state, player, CHECK_DYNAMITE)
    if not check.favorable:
        discard_card(state, player.unequip(CARD_DYNAMITE))
        state.emit(EVENT_ACTION_RESOLVED, kind='dynamite_exploded', player_id=player.id)
        apply_damage(state, player, state.rule_config.dynamite_damage)
        return player.is_alive

    receiver = state.players[next_living_index(state, state.turn_index)]
    if receiver.id != player.id and not receiver.has_equipment(CARD_DYNAMITE):
        receiver.equipment.append(player.unequip(CARD_DYNAMITE))
    state.emit(EVENT_ACTION_RESOLVED, kind='dynamite_passed', player_id=player.id,
               to_id=receiver.id)
    return True


def resolve_jail(state: RoomState, player: Player) -> bool:
    """Check jail at turn start. Returns False if the turn is skipped."""
    jail = player.unequip(CARD_JAIL)
    if jail is None:
        return True
    check = draw_check(state, player, CHECK_JAIL)
    discard_card(state, jail)
    if check.favorable:
        state.emit(EVENT_ACTION_RESOLVED, kind='jail_escaped', player_id=player.id)
        return True
    state.emit(EVENT_ACTION_RESOLVED, kind='jail_skip_turn', player_id=player.id)
    return False


def start_draw_phase(state: RoomState, player: Player):
    draw_phase = character_of(player).draw_phase

    if draw_phase == DRAW_PREVIEW:
        offered = peek(state, 3)
        if offered:
            pending = DrawChoicePending(
                player_id=player.id,
                offered_ids=[card.id for card in offered],
                pick_count=min(state.rule_config.draw_phase_cards, len(offered)),
            )
            state.open_pending(pending, offered=[card.to_dict() for card in offered])
            return
    elif draw_phase == DRAW_STEAL:
        eligible = [p.id for p in state.alive_players() if p.id != player.id and p.hand]
        if eligible:
            state.open_pending(StealChoicePending(player_id=player.id, eligible_targets=eligible))
            return
    elif draw_phase == DRAW_FROM_DISCARD:
        if state.discard:
            state.open_pending(DrawSourcePending(player_id=player.id, can_use_discard=True),
                               top_discard=state.discard[-1].to_dict())
            return

    finish_draw(state, player)


def finish_draw(state: RoomState, player: Player, first_card: Optional[Card] = None):
    """Complete the draw phase, optionally with a first card obtained elsewhere."""
    drawn = []
    if first_card is not None:
        player.hand.append(first_card)
        drawn.append(first_card)
    drawn += try_draw(state, player, state.rule_config.draw_phase_cards - len(drawn))

    if character_of(player).reveal_second_draw and len(drawn) >= 2:
        second = drawn[1]
        bonus = is_red(second)
        state.emit(EVENT_PASSIVE, player_id=player.id, name='reveal_second_draw',
                   card=second.to_dict(), bonus=bonus)
        if bonus:
            drawn += try_draw(state, player, 1)

    state.emit(EVENT_ACTION_RESOLVED, kind='draw_phase', player_id=player.id, count=len(drawn))
    state.clear_pending()
    refill_empty_hand(state, player)


def require_turn_holder(state: RoomState, player_id: str) -> Player:
    player = state.current_player()
    if player is None or player.id != player_id:
        raise GameError(NOT_YOUR_TURN, "It is not your turn")
    return player


def end_turn(state: RoomState, player_id: str):
    player = require_turn_holder(state, player_id)
    if state.phase != PHASE_MAIN:
        raise GameError(EFFECT_PENDING, "Resolve the pending action first")
    excess = len(player.hand) - player.hp
    if excess > 0:
        state.open_pending(DiscardLimitPending(player_id=player.id, need=excess))
        return
    advance_turn(state, REASON_MANUAL)


def advance_turn(state: RoomState, reason: str):
    """Pass the turn to the next living player."""
    if state.ended:
        return
    if state.phase != PHASE_MAIN:
        raise GameError(ACTION_NOT_ALLOWED, "Cannot end the turn while an action is pending")
    previous = state.current_player()
    nxt = next_living_index(state, state.turn_index)
    if nxt is None or check_game_over(state):
        return
    state.turn_index = nxt
    logger.info(f"Room {state.code}: turn passes from {previous.id} to {state.players[nxt].id} ({reason})")
    state.emit(EVENT_TURN_ENDED, reason=reason, player_id=previous.id,
               next_player_id=state.players[nxt].id)
    start_turn(state)


def discard_random(state: RoomState, player: Player, count: int) -> List[Card]:
    discarded = []
    for _ in range(min(count, len(player.hand))):
        card = player.hand.pop(state.rng.randrange(len(player.hand)))
        discard_card(state, card)
        discarded.append(card)
    return discarded


def expire_turn(state: RoomState):
    """Turn timer ran out in the main phase: trim the hand and move on."""
    if state.ended or state.phase != PHASE_MAIN:
        return
    player = state.current_player()
    excess = len(player.hand) - player.hp
    if excess > 0:
        discarded = discard_random(state, player, excess)
        state.emit(EVENT_ACTION_RESOLVED, kind='timeout_discard', player_id=player.id,
                   cards=[card.to_dict() for card in discarded])
    advance_turn(state, REASON_TIMEOUT)
