"""
Tests for seat distance, modifiers and weapon range.
"""

import itertools

from bang_engine.constants import PAUL_REGRET, ROSE_DOOLAN, UNREACHABLE, WILLY_THE_KID
from bang_engine.distance import (
    can_target, effective_distance, max_bangs_per_turn, seat_distance, weapon_range
)
from bang_engine.engine import play_card
from bang_engine.errors import OUT_OF_RANGE
from bang_engine.models import Card
from bang_engine.tests.factories import equip, give, kill, make_room


def test_seat_distance_is_shortest_way_round(room):
    assert seat_distance(room, "p0", "p0") == 0
    assert seat_distance(room, "p0", "p1") == 1
    assert seat_distance(room, "p0", "p2") == 2
    assert seat_distance(room, "p0", "p3") == 1


def test_dead_players_close_the_circle(room):
    kill(room, "p1")
    assert seat_distance(room, "p0", "p2") == 1
    assert seat_distance(room, "p0", "p1") == UNREACHABLE


def test_mustang_and_scope_modifiers(room):
    p0, p1 = room.players[0], room.players[1]
    equip(room, "p1", "mustang")
    assert effective_distance(room, p0, p1) == 2

    equip(room, "p0", "scope")
    assert effective_distance(room, p0, p1) == 1
    # Scope never brings distance below one
    assert effective_distance(room, p0, room.players[3]) == 1


def test_character_distance_modifiers():
    room = make_room(characters=[ROSE_DOOLAN, PAUL_REGRET, None, None])
    rose, paul, p2 = room.players[0], room.players[1], room.players[2]

    assert effective_distance(room, p2, paul) == 2
    assert effective_distance(room, rose, p2) == 1
    assert effective_distance(room, rose, paul) == 1


def test_effective_distance_is_at_least_one():
    room = make_room(num_players=7, characters=[ROSE_DOOLAN] + [None] * 6)
    equip(room, "p0", "scope")
    for a, b in itertools.permutations(room.players, 2):
        assert effective_distance(room, a, b) >= 1


def test_weapon_range(room):
    player = room.players[0]
    assert weapon_range(player) == 1

    equip(room, "p0", "weapon", "remington")
    assert weapon_range(player) == 3

    player.equipment = [Card(id="odd", key="weapon", weapon_name="custom", range=9)]
    assert weapon_range(player) == 5
    player.equipment = [Card(id="named", key="weapon", weapon_name="carabine")]
    assert weapon_range(player) == 4


def test_range_one_cannot_reach_distance_two(room):
    """Unarmed shooter against the opposite seat is rejected and keeps the card."""
    card = give(room, "p0", "bang")
    assert not can_target(room, room.players[0], room.players[2])

    result = play_card(room, "p0", card.id, "p2")

    assert not result.success
    assert result.error_code == OUT_OF_RANGE
    assert result.state.players[0].hand == [card]


def test_bang_allowance():
    room = make_room(characters=[WILLY_THE_KID, None, None, None])
    assert max_bangs_per_turn(room.players[0]) == float('inf')
    assert max_bangs_per_turn(room.players[1]) == 1

    equip(room, "p1", "weapon", "volcanic")
    assert max_bangs_per_turn(room.players[1]) == float('inf')
