"""
Deck manager: drawing, discarding, reshuffling and draw checks.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .characters import character_of
from .constants import (
    CHECK_BARREL, CHECK_DYNAMITE, EVENT_DRAW_CHECK, EVENT_PASSIVE, RANKS, SUIT_DIAMONDS,
    SUIT_HEARTS, SUIT_SPADES, SUITS
)
from .errors import OutOfCards
from .models import Card, Player, RoomState
from .shuffle import shuffle_deck

logger = logging.getLogger(__name__)


def ensure_card_meta(state: RoomState, card: Card) -> Card:
    """Give a card a suit and rank if it somehow entered play without them."""
    if card.suit is None:
        card.suit = state.rng.choice(SUITS)
    if card.rank is None:
        card.rank = state.rng.choice(RANKS)
    return card


def reshuffle(state: RoomState):
    state.deck = shuffle_deck(state.discard, state.rng)
    state.discard = []
    logger.info(f"Room {state.code}: reshuffled {len(state.deck)} discards into the deck")


def draw(state: RoomState) -> Card:
    """Pop the top card, reshuffling the discard pile first if the deck is empty."""
    if not state.deck:
        if not state.discard:
            raise OutOfCards()
        reshuffle(state)
    return ensure_card_meta(state, state.deck.pop())


def try_draw(state: RoomState, player: Player, count: int) -> List[Card]:
    """Draw up to count cards into a player's hand, stopping quietly when both piles are empty."""
    drawn = []
    for _ in range(count):
        try:
            card = draw(state)
        except OutOfCards:
            logger.warning(f"Room {state.code}: no cards left, {player.id} drew {len(drawn)} of {count}")
            break
        player.hand.append(card)
        drawn.append(card)
    return drawn


def discard_card(state: RoomState, card: Card):
    state.discard.append(card)


def take_from_discard(state: RoomState) -> Optional[Card]:
    if not state.discard:
        return None
    return state.discard.pop()


def peek(state: RoomState, count: int) -> List[Card]:
    """
    Look at up to count cards from the top of the deck without removing them.

    When the deck is short, the shuffled discard pile is slid under it so the
    current top cards stay on top.
    """
    if len(state.deck) < count and state.discard:
        state.deck = shuffle_deck(state.discard, state.rng) + state.deck
        state.discard = []
    top = state.deck[-count:] if count else []
    for card in top:
        ensure_card_meta(state, card)
    return list(reversed(top))


def remove_from_deck(state: RoomState, card_id: str) -> Optional[Card]:
    for i, card in enumerate(state.deck):
        if card.id == card_id:
            return state.deck.pop(i)
    return None


def rank_value(rank: Optional[str]) -> Optional[int]:
    if rank is None:
        return None
    faces = {'A': 1, 'J': 11, 'Q': 12, 'K': 13}
    if rank.upper() in faces:
        return faces[rank.upper()]
    try:
        return int(rank)
    except ValueError:
        return None


def explodes(card: Card) -> bool:
    value = rank_value(card.rank)
    return card.suit == SUIT_SPADES and value is not None and 2 <= value <= 9


def is_hearts(card: Card) -> bool:
    return card.suit == SUIT_HEARTS


def is_red(card: Card) -> bool:
    return card.suit in (SUIT_HEARTS, SUIT_DIAMONDS)


def is_favorable(kind: str, card: Card) -> bool:
    """Whether a revealed card goes the checking player's way."""
    if kind == CHECK_DYNAMITE:
        return not explodes(card)
    return is_hearts(card)


@dataclass
class DrawCheck:
    kind: str
    drawn: List[Card] = field(default_factory=list)
    chosen: Optional[Card] = None
    favorable: bool = False


def draw_check(state: RoomState, player: Player, kind: str) -> DrawCheck:
    """
    Reveal cards for a dynamite, jail or barrel check.

    Revealed cards go straight to the discard pile. A lucky character reveals
    two and keeps the favorable one; when neither or both qualify the first
    card counts for dynamite and the second for jail and barrel.
    """
    lucky = character_of(player).lucky
    drawn = []
    for _ in range(2 if lucky else 1):
        try:
            card = draw(state)
        except OutOfCards:
            break
        discard_card(state, card)
        drawn.append(card)

    if not drawn:
        # Nothing to reveal: hazards fizzle and defenses fail
        logger.warning(f"Room {state.code}: {kind} check for {player.id} with empty piles")
        result = DrawCheck(kind=kind, favorable=kind != CHECK_BARREL)
    elif len(drawn) == 1:
        result = DrawCheck(kind=kind, drawn=drawn, chosen=drawn[0],
                           favorable=is_favorable(kind, drawn[0]))
    else:
        good = [card for card in drawn if is_favorable(kind, card)]
        if len(good) == 1:
            chosen = good[0]
        else:
            chosen = drawn[0] if kind == CHECK_DYNAMITE else drawn[1]
        result = DrawCheck(kind=kind, drawn=drawn, chosen=chosen,
                           favorable=is_favorable(kind, chosen))

    state.emit(
        EVENT_DRAW_CHECK,
        player_id=player.id,
        kind=kind,
        cards=[card.to_dict() for card in result.drawn],
        chosen=result.chosen.to_dict() if result.chosen else None,
        favorable=result.favorable,
        lucky=lucky,
    )
    return result


def refill_empty_hand(state: RoomState, player: Optional[Player]):
    """Draw one card for a living player whose character refills an empty hand."""
    if player is None or not player.is_alive or player.hand:
        return
    if not character_of(player).refill_on_empty:
        return
    if try_draw(state, player, 1):
        state.emit(EVENT_PASSIVE, player_id=player.id, name='empty_hand_draw')
