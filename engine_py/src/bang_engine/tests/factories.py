"""
Builders for hand-arranged game states used across the tests.
"""

import random
import time
from typing import List, Optional

from bang_engine.constants import PHASE_MAIN, ROLE_DISTRIBUTION
from bang_engine.models import Card, Player, RoomState
from bang_engine.shuffle import count_cards, create_deck


def make_room(num_players: int = 4, hp: int = 4, roles: Optional[List[str]] = None,
              characters: Optional[List[Optional[str]]] = None, seed: int = 7) -> RoomState:
    """
    A started game with the sheriff at seat 0, empty hands and the unshuffled
    catalog as the deck. Players are p0..pN-1 with no character unless given.
    """
    roles = roles or ROLE_DISTRIBUTION[num_players]
    characters = characters or [None] * num_players
    room = RoomState(code="TEST01", rng=random.Random(seed))
    for i in range(num_players):
        room.players.append(Player(
            id=f"p{i}",
            name=f"Player {i}",
            seat=i,
            role=roles[i],
            character=characters[i],
            hp=hp,
            max_hp=hp,
        ))
    room.host_id = "p0"
    room.deck = create_deck()
    room.started = True
    room.phase = PHASE_MAIN
    room.turn_index = 0
    room.turn_ends_at = time.time() + room.rule_config.turn_timeout
    room.card_total = count_cards(room)
    return room


def _take_from_deck(room: RoomState, key: str, weapon_name: Optional[str] = None) -> Card:
    for card in room.deck:
        if card.key == key and (weapon_name is None or card.weapon_name == weapon_name):
            room.deck.remove(card)
            return card
    raise LookupError(f"No {key} left in the deck")


def give(room: RoomState, player_id: str, key: str, weapon_name: Optional[str] = None) -> Card:
    """Move a card of the given kind from the deck into a player's hand."""
    card = _take_from_deck(room, key, weapon_name)
    room.get_player(player_id).hand.append(card)
    return card


def equip(room: RoomState, player_id: str, key: str, weapon_name: Optional[str] = None) -> Card:
    """Move a card of the given kind from the deck into a player's equipment."""
    card = _take_from_deck(room, key, weapon_name)
    room.get_player(player_id).equipment.append(card)
    return card


def put_on_top(room: RoomState, suit: str, rank: str, key: str = 'beer') -> Card:
    """Place a card with a known suit and rank on top of the deck."""
    card = _take_from_deck(room, key)
    card.suit = suit
    card.rank = rank
    room.deck.append(card)
    return card


def kill(room: RoomState, player_id: str):
    player = room.get_player(player_id)
    room.discard.extend(player.hand + player.equipment)
    player.hand = []
    player.equipment = []
    player.hp = 0
    player.is_alive = False


def events_of(events, event_type: str, **match) -> list:
    return [
        e for e in events
        if e.type == event_type and all(e.data.get(k) == v for k, v in match.items())
    ]
