"""
Tests for main-phase card plays and the discard-to-heal ability.
"""

import pytest

from bang_engine import engine
from bang_engine.constants import (
    CALAMITY_JANET, EVENT_PASSIVE, PHASE_WAITING, SID_KETCHUM, WILLY_THE_KID
)
from bang_engine.errors import (
    ACTION_NOT_ALLOWED, BAD_TARGET, BANG_LIMIT, DUPLICATE_EQUIPMENT, EFFECT_PENDING,
    FULL_HP, INVALID_SELECTION, MISSING_TARGET, NOT_YOUR_TURN, OUT_OF_RANGE, WRONG_CARD
)
from bang_engine.models import BangPending, Card
from bang_engine.shuffle import count_cards
from bang_engine.tests.factories import equip, events_of, give, kill, make_room


class TestEquipment:
    """Cards that stay in front of a player."""

    def setup_method(self):
        self.room = make_room()

    def test_weapon_replaces_the_old_one(self):
        old = equip(self.room, "p0", "weapon", "schofield")
        new = give(self.room, "p0", "weapon", "winchester")

        state = engine.play_card(self.room, "p0", new.id).state

        assert [c.id for c in state.players[0].equipment] == [new.id]
        assert state.discard[-1].id == old.id

    def test_second_dynamite_is_rejected(self):
        dynamite = give(self.room, "p0", "dynamite")
        state = engine.play_card(self.room, "p0", dynamite.id).state
        assert state.players[0].has_equipment("dynamite")

        spare = Card(id="spare", key="dynamite")
        state.players[0].hand.append(spare)
        result = engine.play_card(state, "p0", spare.id)
        assert result.error_code == DUPLICATE_EQUIPMENT

    def test_jail_cannot_hold_the_sheriff(self):
        jail = give(self.room, "p1", "jail")
        self.room.turn_index = 1

        result = engine.play_card(self.room, "p1", jail.id, "p0")

        assert result.error_code == BAD_TARGET

    def test_jail_replaces_existing_jail(self):
        first = equip(self.room, "p2", "jail")
        second = give(self.room, "p0", "jail")

        state = engine.play_card(self.room, "p0", second.id, "p2").state

        assert [c.id for c in state.players[2].equipment] == [second.id]
        assert state.discard[-1].id == first.id

    def test_jail_needs_a_target(self):
        jail = give(self.room, "p0", "jail")
        assert engine.play_card(self.room, "p0", jail.id).error_code == MISSING_TARGET


class TestBang:

    def test_one_bang_per_turn(self, room):
        first = give(room, "p0", "bang")
        second = give(room, "p0", "bang")
        state = engine.play_card(room, "p0", first.id, "p1").state
        state = engine.respond(state, "p1").state

        result = engine.play_card(state, "p0", second.id, "p3")

        assert result.error_code == BANG_LIMIT

    def test_unlimited_shooter(self):
        room = make_room(characters=[WILLY_THE_KID, None, None, None])
        first = give(room, "p0", "bang")
        second = give(room, "p0", "bang")
        state = engine.play_card(room, "p0", first.id, "p1").state
        state = engine.respond(state, "p1").state

        result = engine.play_card(state, "p0", second.id, "p3")

        assert result.success
        assert isinstance(result.state.pending, BangPending)

    def test_cannot_shoot_yourself_or_the_dead(self, room):
        bang = give(room, "p0", "bang")
        assert engine.play_card(room, "p0", bang.id, "p0").error_code == BAD_TARGET
        kill(room, "p1")
        assert engine.play_card(room, "p0", bang.id, "p1").error_code == BAD_TARGET

    def test_missed_is_not_an_action(self, room):
        missed = give(room, "p0", "missed")
        assert engine.play_card(room, "p0", missed.id, "p1").error_code == WRONG_CARD

    def test_substitute_shoots_with_missed(self):
        room = make_room(characters=[CALAMITY_JANET, None, None, None])
        missed = give(room, "p0", "missed")
        result = engine.play_card(room, "p0", missed.id, "p1")
        assert result.success
        assert isinstance(result.state.pending, BangPending)

    def test_no_play_while_waiting(self, room):
        bang = give(room, "p0", "bang")
        beer = give(room, "p0", "beer")
        state = engine.play_card(room, "p0", bang.id, "p1").state
        assert state.phase == PHASE_WAITING
        assert engine.play_card(state, "p0", beer.id).error_code == EFFECT_PENDING

    def test_only_the_turn_holder_plays(self, room):
        bang = give(room, "p1", "bang")
        assert engine.play_card(room, "p1", bang.id, "p0").error_code == NOT_YOUR_TURN


def test_beer_heals_one(room):
    room.players[0].hp = 2
    beer = give(room, "p0", "beer")

    state = engine.play_card(room, "p0", beer.id).state

    assert state.players[0].hp == 3
    assert state.players[0].hand == []


def test_beer_rules(room):
    beer = give(room, "p0", "beer")
    assert engine.play_card(room, "p0", beer.id).error_code == FULL_HP

    room.players[0].hp = 2
    kill(room, "p1")
    kill(room, "p2")
    assert engine.play_card(room, "p0", beer.id).error_code == ACTION_NOT_ALLOWED


def test_saloon_heals_everyone_up_to_max(room):
    room.players[0].hp = 3
    room.players[2].hp = 1
    saloon = give(room, "p0", "saloon")

    state = engine.play_card(room, "p0", saloon.id).state

    assert [p.hp for p in state.players] == [4, 4, 2, 4]


@pytest.mark.parametrize("key,count", [("stagecoach", 2), ("wellsfargo", 3)])
def test_draw_cards(room, key, count):
    card = give(room, "p0", key)
    state = engine.play_card(room, "p0", card.id).state
    assert len(state.players[0].hand) == count


def test_panic_steals_within_reach(room):
    loot = give(room, "p1", "beer")
    panic = give(room, "p0", "panic")

    state = engine.play_card(room, "p0", panic.id, "p1").state

    assert [c.id for c in state.players[0].hand] == [loot.id]
    assert state.players[1].hand == []


def test_panic_and_cat_balou_reach_only_one(room):
    give(room, "p2", "beer")
    panic = give(room, "p0", "panic")
    catbalou = give(room, "p0", "catbalou")

    assert engine.play_card(room, "p0", panic.id, "p2").error_code == OUT_OF_RANGE
    assert engine.play_card(room, "p0", catbalou.id, "p2").error_code == OUT_OF_RANGE


def test_cat_balou_discards_equipment(room):
    barrel = equip(room, "p3", "barrel")
    catbalou = give(room, "p0", "catbalou")

    state = engine.play_card(room, "p0", catbalou.id, "p3").state

    assert state.players[3].equipment == []
    assert state.discard[-1].id == barrel.id


def test_stealing_from_empty_player_is_rejected(room):
    panic = give(room, "p0", "panic")
    assert engine.play_card(room, "p0", panic.id, "p1").error_code == BAD_TARGET


def test_heal_via_discard():
    room = make_room(characters=[None, SID_KETCHUM, None, None])
    sid = room.players[1]
    sid.hp = 2
    a = give(room, "p1", "bang")
    b = give(room, "p1", "missed")

    one = engine.heal_via_discard(room, "p1", [a.id])
    assert one.error_code == INVALID_SELECTION
    twice = engine.heal_via_discard(room, "p1", [a.id, a.id])
    assert twice.error_code == INVALID_SELECTION

    result = engine.heal_via_discard(room, "p1", [a.id, b.id])
    state = result.state
    assert state.players[1].hp == 3
    assert state.players[1].hand == []
    assert events_of(result.events, EVENT_PASSIVE, name="discard_heal", player_id="p1")


def test_heal_via_discard_rules(room):
    a = give(room, "p1", "bang")
    b = give(room, "p1", "missed")
    assert engine.heal_via_discard(room, "p1", [a.id, b.id]).error_code == ACTION_NOT_ALLOWED

    room.players[1].character = SID_KETCHUM
    assert engine.heal_via_discard(room, "p1", [a.id, b.id]).error_code == FULL_HP


def test_cards_are_conserved_across_plays(room):
    for key in ("beer", "stagecoach", "panic", "catbalou"):
        give(room, "p0", key)
    give(room, "p1", "bang")
    give(room, "p3", "missed")
    room.players[0].hp = 3

    state = room
    for target in (None, None, "p1", "p3"):
        card = state.players[0].hand[0]
        state = engine.play_card(state, "p0", card.id, target).state
    assert count_cards(state) == state.card_total
