"""
Tests for damage, eliminations and win conditions.
"""

from bang_engine.constants import (
    BART_CASSIDY, EL_GRINGO, EVENT_GAME_OVER, EVENT_PASSIVE, ROLE_DEPUTY,
    ROLE_OUTLAW, ROLE_RENEGADE, ROLE_SHERIFF, VULTURE_SAM, WINNER_OUTLAWS,
    WINNER_RENEGADE, WINNER_SHERIFF
)
from bang_engine.damage import apply_damage
from bang_engine.shuffle import count_cards
from bang_engine.tests.factories import equip, events_of, give, kill, make_room
from bang_engine.victory import check_game_over, evaluate_winner


def test_damage_reduces_life(room):
    target = room.players[1]
    apply_damage(room, target, 1, "p0")
    assert target.hp == 3
    assert target.is_alive


def test_overkill_clamps_at_zero_and_empties_the_player(room):
    target = room.players[2]
    target.hp = 1
    give(room, "p2", "beer")
    equip(room, "p2", "mustang")

    apply_damage(room, target, 3)

    assert target.hp == 0
    assert not target.is_alive
    assert target.hand == []
    assert target.equipment == []
    assert {c.key for c in room.discard} == {"beer", "mustang"}
    assert count_cards(room) == room.card_total


def test_killing_an_outlaw_pays_three_cards(room):
    assert room.players[1].role == ROLE_OUTLAW
    room.players[1].hp = 1

    apply_damage(room, room.players[1], 1, "p3")

    assert len(room.players[3].hand) == 3
    assert events_of(room.events, EVENT_PASSIVE, name='kill_reward_outlaw')


def test_sheriff_killing_a_deputy_loses_everything():
    room = make_room(num_players=5)
    deputy = room.players[4]
    assert deputy.role == ROLE_DEPUTY
    deputy.hp = 1
    give(room, "p0", "bang")
    equip(room, "p0", "barrel")

    apply_damage(room, deputy, 1, "p0")

    sheriff = room.players[0]
    assert sheriff.hand == []
    assert sheriff.equipment == []
    assert events_of(room.events, EVENT_PASSIVE, name='sheriff_killed_deputy_penalty')


def test_scavenger_takes_the_leftovers():
    room = make_room(characters=[None, None, None, VULTURE_SAM])
    victim = room.players[1]
    victim.hp = 1
    give(room, "p1", "missed")
    equip(room, "p1", "scope")

    apply_damage(room, victim, 1)

    vulture = room.players[3]
    assert sorted(c.key for c in vulture.hand) == ["missed", "scope"]
    assert room.discard == []


def test_steal_on_hit_takes_from_the_attacker():
    room = make_room(characters=[None, EL_GRINGO, None, None])
    give(room, "p0", "beer")
    gringo = room.players[1]

    apply_damage(room, gringo, 1, "p0")

    assert len(gringo.hand) == 1
    assert room.players[0].hand == []


def test_draw_on_hit_is_per_point():
    room = make_room(characters=[None, None, BART_CASSIDY, None])
    bart = room.players[2]

    apply_damage(room, bart, 2)

    assert bart.hp == 2
    assert len(bart.hand) == 2


def test_sheriff_death_with_renegade_and_outlaw_alive_means_outlaws_win(room):
    """Sheriff falls while an outlaw and the renegade still stand."""
    kill(room, "p2")
    room.players[0].hp = 1

    apply_damage(room, room.players[0], 1, "p1")

    assert room.ended
    assert room.winner == WINNER_OUTLAWS
    assert set(room.winner_ids) == {"p1", "p2"}
    assert room.pending is None


def test_renegade_alone_wins(room):
    kill(room, "p1")
    kill(room, "p2")
    room.players[0].hp = 1

    apply_damage(room, room.players[0], 1, "p3")

    assert room.winner == WINNER_RENEGADE
    assert room.winner_ids == ["p3"]


def test_sheriff_wins_when_outlaws_and_renegade_are_gone():
    room = make_room(num_players=5)
    for pid in ("p1", "p2"):
        kill(room, pid)
    assert room.players[3].role == ROLE_RENEGADE
    room.players[3].hp = 1

    apply_damage(room, room.players[3], 1, "p4")

    assert room.winner == WINNER_SHERIFF
    assert set(room.winner_ids) == {"p0", "p4"}


def test_game_ends_only_once(room):
    kill(room, "p0")
    assert check_game_over(room)
    assert check_game_over(room)
    assert len(events_of(room.events, EVENT_GAME_OVER)) == 1


def test_no_winner_while_factions_remain(room):
    assert room.players[0].role == ROLE_SHERIFF
    assert evaluate_winner(room) is None
    assert not check_game_over(room)
