"""
Action/response resolver.

Handles every answer to a pending request, either from the player it names or
from the scheduler once the response deadline has passed.
"""

import logging
from typing import Callable, Dict, List, Optional, Set, Type

from .characters import character_of
from .constants import (
    CARD_BANG, CARD_MISSED, EVENT_ACTION_RESOLVED, PHASE_WAITING,
    REASON_ELIMINATED, REASON_MANUAL, REASON_TIMEOUT, SOURCE_DECK, SOURCE_DISCARD
)
from .damage import apply_damage
from .deck import discard_card, refill_empty_hand, remove_from_deck, take_from_discard
from .errors import (
    ACTION_NOT_ALLOWED, BAD_TARGET, CARD_NOT_IN_HAND, INTERNAL, INVALID_SELECTION,
    NO_PENDING, NOT_YOUR_RESPONSE, WRONG_CARD, GameError
)
from .models import (
    BangPending, Card, DiscardLimitPending, DrawChoicePending, DrawSourcePending,
    DuelPending, GatlingPending, IndiansPending, Pending, Player, RoomState,
    StealChoicePending
)
from .turn import advance_turn, discard_random, finish_draw

logger = logging.getLogger(__name__)


def defensive_keys(player: Player) -> Set[str]:
    """Cards that cancel a shot for this player."""
    if character_of(player).substitutes:
        return {CARD_MISSED, CARD_BANG}
    return {CARD_MISSED}


def offensive_keys(player: Player) -> Set[str]:
    """Cards that count as a shot for this player."""
    if character_of(player).substitutes:
        return {CARD_BANG, CARD_MISSED}
    return {CARD_BANG}


def require_pending(state: RoomState, player_id: str, expected=None) -> Pending:
    pending = state.pending
    if pending is None or state.phase != PHASE_WAITING:
        raise GameError(NO_PENDING, "Nothing is waiting for an answer")
    if expected is not None and not isinstance(pending, expected):
        raise GameError(ACTION_NOT_ALLOWED, f"Cannot do that while waiting on {pending.kind}")
    if pending.actor_id != player_id:
        raise GameError(NOT_YOUR_RESPONSE, "It is not your response")
    return pending


def spend_response_card(state: RoomState, player: Player, card_id: str, allowed: Set[str]) -> Card:
    card = player.find_card(card_id)
    if card is None:
        raise GameError(CARD_NOT_IN_HAND, "Card not in hand")
    if card.key not in allowed:
        raise GameError(WRONG_CARD, f"{card.key} cannot answer this")
    player.take_card(card_id)
    discard_card(state, card)
    return card


def back_to_main(state: RoomState):
    """Close the pending request and return control to the turn holder."""
    if state.ended:
        state.pending = None
        state.pending_ends_at = None
        return
    state.clear_pending()
    current = state.current_player()
    if current is not None and not current.is_alive:
        advance_turn(state, REASON_ELIMINATED)


# Combat responses

def _respond_bang(state: RoomState, pending: BangPending, player: Player, card_id: Optional[str]):
    if card_id is None:
        state.clear_pending()
        state.emit(EVENT_ACTION_RESOLVED, kind='bang_hit', attacker_id=pending.attacker_id,
                   target_id=player.id)
        apply_damage(state, player, 1, pending.attacker_id)
        back_to_main(state)
        return

    spend_response_card(state, player, card_id, defensive_keys(player))
    pending.missed_so_far += 1
    if pending.missed_so_far < pending.required_missed:
        state.emit(EVENT_ACTION_RESOLVED, kind='bang_partial_missed', target_id=player.id,
                   missed_so_far=pending.missed_so_far, required=pending.required_missed)
        state.open_pending(pending)
        return
    state.emit(EVENT_ACTION_RESOLVED, kind='bang_missed', attacker_id=pending.attacker_id,
               target_id=player.id)
    back_to_main(state)


def continue_broadcast(state: RoomState, pending):
    """Move an indians or gatling request on to the next living target."""
    if state.ended:
        back_to_main(state)
        return
    pending.idx += 1
    while pending.idx < len(pending.targets):
        target = state.get_player(pending.targets[pending.idx])
        if target is not None and target.is_alive:
            state.open_pending(pending)
            return
        pending.idx += 1
    state.emit(EVENT_ACTION_RESOLVED, kind=f'{pending.kind}_done', attacker_id=pending.attacker_id)
    back_to_main(state)


def _respond_broadcast(state: RoomState, pending, player: Player, card_id: Optional[str], allowed: Set[str]):
    if card_id is None:
        state.emit(EVENT_ACTION_RESOLVED, kind=f'{pending.kind}_hit', target_id=player.id)
        apply_damage(state, player, 1, pending.attacker_id)
    else:
        spend_response_card(state, player, card_id, allowed)
        state.emit(EVENT_ACTION_RESOLVED, kind=f'{pending.kind}_avoided', target_id=player.id)
    continue_broadcast(state, pending)


def _respond_indians(state: RoomState, pending: IndiansPending, player: Player, card_id: Optional[str]):
    _respond_broadcast(state, pending, player, card_id, offensive_keys(player))


def _respond_gatling(state: RoomState, pending: GatlingPending, player: Player, card_id: Optional[str]):
    _respond_broadcast(state, pending, player, card_id, defensive_keys(player))


def prompt_duel(state: RoomState, pending: DuelPending):
    state.open_pending(pending)


def _lose_duel(state: RoomState, pending: DuelPending, loser: Player, kind: str):
    winner_id = pending.other_party()
    state.clear_pending()
    state.emit(EVENT_ACTION_RESOLVED, kind=kind, loser_id=loser.id, winner_id=winner_id)
    apply_damage(state, loser, 1, winner_id)
    back_to_main(state)


def _respond_duel(state: RoomState, pending: DuelPending, player: Player, card_id: Optional[str]):
    if card_id is None:
        _lose_duel(state, pending, player, 'duel_lose')
        return
    spend_response_card(state, player, card_id, offensive_keys(player))
    pending.responder_id = pending.other_party()
    state.emit(EVENT_ACTION_RESOLVED, kind='duel_continue', player_id=player.id,
               next_responder_id=pending.responder_id)
    prompt_duel(state, pending)


RESPONSE_HANDLERS: Dict[Type, Callable] = {
    BangPending: _respond_bang,
    IndiansPending: _respond_indians,
    GatlingPending: _respond_gatling,
    DuelPending: _respond_duel,
}


def respond(state: RoomState, player_id: str, card_id: Optional[str] = None):
    """Answer a combat request with a card, or pass when card_id is None."""
    pending = require_pending(state, player_id)
    handler = RESPONSE_HANDLERS.get(type(pending))
    if handler is None:
        raise GameError(ACTION_NOT_ALLOWED, f"{pending.kind} is not answered with a card")
    player = state.get_player(player_id)
    handler(state, pending, player, card_id)
    refill_empty_hand(state, player)


# Draw phase choices

def choose_draw(state: RoomState, player_id: str, card_ids: List[str]):
    """Keep the chosen previewed cards; the rest stay on top of the deck."""
    pending = require_pending(state, player_id, DrawChoicePending)
    if len(card_ids) != pending.pick_count or len(set(card_ids)) != len(card_ids):
        raise GameError(INVALID_SELECTION, f"Choose exactly {pending.pick_count} different cards")
    if any(card_id not in pending.offered_ids for card_id in card_ids):
        raise GameError(INVALID_SELECTION, "You can only keep offered cards")
    _keep_preview(state, pending, card_ids)


def _keep_preview(state: RoomState, pending: DrawChoicePending, card_ids: List[str]):
    player = state.get_player(pending.player_id)
    for card_id in card_ids:
        card = remove_from_deck(state, card_id)
        if card is None:
            raise GameError(INTERNAL, f"Offered card {card_id} left the deck")
        player.hand.append(card)
    state.emit(EVENT_ACTION_RESOLVED, kind='draw_phase', player_id=player.id, count=len(card_ids))
    state.clear_pending()
    refill_empty_hand(state, player)


def choose_target_or_skip(state: RoomState, player_id: str, target_id: Optional[str] = None):
    """Take the first draw from another player's hand, or skip to a normal draw."""
    pending = require_pending(state, player_id, StealChoicePending)
    player = state.get_player(player_id)
    first_card = None
    if target_id is not None:
        if target_id not in pending.eligible_targets:
            raise GameError(BAD_TARGET, "That player cannot be drawn from")
        victim = state.get_player(target_id)
        if victim is not None and victim.is_alive and victim.hand:
            first_card = victim.hand.pop(state.rng.randrange(len(victim.hand)))
            state.emit(EVENT_ACTION_RESOLVED, kind='draw_from_player', player_id=player.id,
                       target_id=victim.id)
            refill_empty_hand(state, victim)
    finish_draw(state, player, first_card)


def choose_draw_source(state: RoomState, player_id: str, source: str):
    """Take the first draw from the deck or the top of the discard pile."""
    pending = require_pending(state, player_id, DrawSourcePending)
    if source not in (SOURCE_DECK, SOURCE_DISCARD):
        raise GameError(INVALID_SELECTION, f"Unknown draw source {source}")
    player = state.get_player(player_id)
    first_card = None
    if source == SOURCE_DISCARD and pending.can_use_discard:
        first_card = take_from_discard(state)
        if first_card is not None:
            state.emit(EVENT_ACTION_RESOLVED, kind='draw_from_discard', player_id=player.id,
                       card=first_card.to_dict())
    finish_draw(state, player, first_card)


# Hand limit

def discard_to_limit(state: RoomState, player_id: str, card_ids: List[str]):
    pending = require_pending(state, player_id, DiscardLimitPending)
    player = state.get_player(player_id)
    if len(card_ids) != pending.need or len(set(card_ids)) != len(card_ids):
        raise GameError(INVALID_SELECTION, f"Discard exactly {pending.need} different cards")
    if any(player.find_card(card_id) is None for card_id in card_ids):
        raise GameError(CARD_NOT_IN_HAND, "Card not in hand")
    for card_id in card_ids:
        discard_card(state, player.take_card(card_id))
    state.emit(EVENT_ACTION_RESOLVED, kind='discard_to_limit', player_id=player.id, count=len(card_ids))
    state.clear_pending()
    advance_turn(state, REASON_MANUAL)


# Timeouts

def _timeout_bang(state: RoomState, pending: BangPending):
    target = state.get_player(pending.target_id)
    state.clear_pending()
    state.emit(EVENT_ACTION_RESOLVED, kind='bang_timeout_hit', attacker_id=pending.attacker_id,
               target_id=target.id)
    apply_damage(state, target, 1, pending.attacker_id)
    back_to_main(state)


def _timeout_broadcast(state: RoomState, pending):
    target = state.get_player(pending.actor_id)
    state.emit(EVENT_ACTION_RESOLVED, kind=f'{pending.kind}_timeout_hit', target_id=target.id)
    apply_damage(state, target, 1, pending.attacker_id)
    continue_broadcast(state, pending)


def _timeout_duel(state: RoomState, pending: DuelPending):
    _lose_duel(state, pending, state.get_player(pending.responder_id), 'duel_timeout_lose')


def _timeout_draw_choice(state: RoomState, pending: DrawChoicePending):
    _keep_preview(state, pending, pending.offered_ids[:pending.pick_count])


def _timeout_steal_choice(state: RoomState, pending: StealChoicePending):
    finish_draw(state, state.get_player(pending.player_id))


def _timeout_draw_source(state: RoomState, pending: DrawSourcePending):
    finish_draw(state, state.get_player(pending.player_id))


def _timeout_discard_limit(state: RoomState, pending: DiscardLimitPending):
    player = state.get_player(pending.player_id)
    discarded = discard_random(state, player, pending.need)
    state.emit(EVENT_ACTION_RESOLVED, kind='timeout_discard', player_id=player.id,
               cards=[card.to_dict() for card in discarded])
    state.clear_pending()
    advance_turn(state, REASON_TIMEOUT)


TIMEOUT_HANDLERS: Dict[Type, Callable] = {
    BangPending: _timeout_bang,
    IndiansPending: _timeout_broadcast,
    GatlingPending: _timeout_broadcast,
    DuelPending: _timeout_duel,
    DrawChoicePending: _timeout_draw_choice,
    StealChoicePending: _timeout_steal_choice,
    DrawSourcePending: _timeout_draw_source,
    DiscardLimitPending: _timeout_discard_limit,
}


def resolve_pending_timeout(state: RoomState):
    """Apply the default outcome for a pending request whose deadline passed."""
    pending = state.pending
    if pending is None:
        return
    handler = TIMEOUT_HANDLERS.get(type(pending))
    if handler is None:
        raise GameError(INTERNAL, f"No timeout rule for pending {pending.kind}")
    logger.info(f"Room {state.code}: {pending.kind} timed out for {pending.actor_id}")
    handler(state, pending)
