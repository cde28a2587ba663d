"""
Card catalog construction, shuffling and dealing utilities.
"""

import random
from typing import List, Optional

from .characters import CHARACTER_IDS, get_character
from .constants import DECK_COMPOSITION, RANKS, ROLE_SHERIFF, SUITS
from .models import Card, RoomState


def create_deck() -> List[Card]:
    """
    Build the 80-card catalog in a fixed order.

    Suits and ranks cycle through the card list so every card can take part
    in draw checks.
    """
    deck = []
    meta = 0
    for key, count, weapon_name, weapon_range in DECK_COMPOSITION:
        for _ in range(count):
            deck.append(Card(
                id=f"c{meta + 1}",
                key=key,
                suit=SUITS[meta % len(SUITS)],
                rank=RANKS[(meta // len(SUITS)) % len(RANKS)],
                weapon_name=weapon_name,
                range=weapon_range,
            ))
            meta += 1
    return deck


def shuffle_deck(cards: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Fisher-Yates shuffle into a new list.

    Args:
        cards: Cards to shuffle
        rng: Random source; the module RNG is used when omitted

    Returns:
        Shuffled copy of the cards
    """
    rng = rng or random
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def assign_roles(state: RoomState):
    roles = state.rule_config.get_roles(len(state.players))
    state.rng.shuffle(roles)
    for player, role in zip(state.players, roles):
        player.role = role


def assign_characters(state: RoomState):
    """Give each player a distinct character and set their life points."""
    names = state.rng.sample(CHARACTER_IDS, len(state.players))
    for player, name in zip(state.players, names):
        player.character = name
        player.max_hp = get_character(name).max_hp + (1 if player.role == ROLE_SHERIFF else 0)
        player.hp = player.max_hp
        player.is_alive = True


def deal_starting_hands(state: RoomState):
    """Shuffle a fresh catalog and deal each player as many cards as their life points."""
    state.discard = []
    state.deck = shuffle_deck(create_deck(), state.rng)
    for player in state.players:
        player.hand = []
        player.equipment = []
        for _ in range(player.max_hp):
            player.hand.append(state.deck.pop())
    state.card_total = count_cards(state)


def count_cards(state: RoomState) -> int:
    """Count every card in the deck, the discard pile, hands and equipment."""
    total = len(state.deck) + len(state.discard)
    for player in state.players:
        total += len(player.hand) + len(player.equipment)
    return total


def validate_deck_integrity(state: RoomState) -> bool:
    """Check that no card was created or lost and no card id is duplicated."""
    ids = [card.id for card in state.deck] + [card.id for card in state.discard]
    for player in state.players:
        ids.extend(card.id for card in player.hand)
        ids.extend(card.id for card in player.equipment)
    return len(ids) == state.card_total and len(set(ids)) == len(ids)
