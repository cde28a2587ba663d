"""
Tests for the wire format, state views and the WebSocket endpoint.
"""

import asyncio

import orjson
import pytest
from fastapi.testclient import TestClient

from bang_engine import turn
from bang_engine.constants import KIT_CARLSON, ROLE_OUTLAW, ROLE_SHERIFF
from bang_engine.serialization import me_state, sanitize_state
from bang_engine.tests.factories import equip, give, kill, make_room
from bang_engine.ws import server
from bang_engine.ws.events import (
    ChooseDrawSourceEvent, DiscardToLimitEvent, EventType, PlayCardEvent, RespondEvent,
    create_error_event, decode_frame, encode_event, parse_inbound_event
)
from bang_engine.ws.server import Session, app


class TestInboundEvents:

    def test_camel_case_fields(self):
        event = parse_inbound_event({
            "type": "play_card", "roomCode": " abc234 ", "cardId": "c3", "targetId": "p1"
        })
        assert isinstance(event, PlayCardEvent)
        assert event.room_code == "ABC234"
        assert event.card_id == "c3"
        assert event.target_id == "p1"

    def test_respond_without_card_is_a_pass(self):
        event = parse_inbound_event({"type": "respond", "roomCode": "ABC234"})
        assert isinstance(event, RespondEvent)
        assert event.card_id is None

    @pytest.mark.parametrize("payload", [
        {},
        {"type": "fold"},
        {"type": "play_card", "roomCode": "ABC234"},
        {"type": "choose_draw_source", "roomCode": "ABC234", "source": "hand"},
        {"type": "heal_via_discard", "roomCode": "ABC234", "cardIds": ["c1"]},
        ["play_card"],
    ])
    def test_malformed_events_raise_value_error(self, payload):
        with pytest.raises(ValueError):
            parse_inbound_event(payload)

    def test_draw_source_defaults_to_deck(self):
        event = parse_inbound_event({"type": EventType.CHOOSE_DRAW_SOURCE.value, "roomCode": "X"})
        assert isinstance(event, ChooseDrawSourceEvent)
        assert event.source == "deck"

    def test_discarding_a_large_hand_is_accepted(self):
        card_ids = [f"c{i}" for i in range(1, 31)]
        event = parse_inbound_event(
            {"type": "discard_to_limit", "roomCode": "ABC234", "cardIds": card_ids}
        )
        assert isinstance(event, DiscardToLimitEvent)
        assert len(event.card_ids) == 30

    def test_frames_are_json(self):
        assert decode_frame('{"type": "end_turn"}') == {"type": "end_turn"}
        with pytest.raises(ValueError):
            decode_frame("not json")

    def test_unknown_error_codes_become_internal(self):
        event = create_error_event("SOMETHING_ELSE", "oops")
        assert orjson.loads(encode_event(event))["code"] == "INTERNAL"


class TestStateViews:

    def test_public_view_hides_hands_and_roles(self, room):
        give(room, "p1", "bang")
        give(room, "p1", "beer")
        equip(room, "p1", "mustang")

        view = sanitize_state(room, "p2")
        p0, p1, p2 = view["players"][:3]

        assert p1["hand_count"] == 2
        assert "hand" not in p1
        assert [c["key"] for c in p1["equipment"]] == ["mustang"]
        assert p0["role"] == ROLE_SHERIFF
        assert p1["role"] is None
        assert p2["role"] == ROLE_OUTLAW
        assert view["turn_player_id"] == "p0"
        assert view["deck_count"] == len(room.deck)

    def test_dead_players_and_finished_games_reveal_roles(self, room):
        kill(room, "p1")
        assert sanitize_state(room, "p3")["players"][1]["role"] == ROLE_OUTLAW
        assert sanitize_state(room, "p3")["players"][2]["role"] is None

        room.ended = True
        assert all(p["role"] for p in sanitize_state(room)["players"])

    def test_private_view_holds_the_hand(self, room):
        card = give(room, "p1", "bang")
        me = me_state(room, "p1")
        assert [c["id"] for c in me["hand"]] == [card.id]
        assert me["role"] == ROLE_OUTLAW
        assert me_state(room, "nobody") is None

    def test_preview_cards_only_go_to_the_drawer(self):
        room = make_room(characters=[KIT_CARLSON, None, None, None])
        turn.start_turn(room)

        public = sanitize_state(room, "p1")["pending"]
        assert public["offered_count"] == 3
        assert "offered_ids" not in public

        assert len(me_state(room, "p0")["offered"]) == 3
        assert "offered" not in me_state(room, "p1")

    def test_views_are_json_serializable(self, big_room):
        give(big_room, "p0", "bang")
        orjson.dumps(sanitize_state(big_room, "p0"))
        orjson.dumps(me_state(big_room, "p0"))


class TestWebSocket:

    def setup_method(self):
        self.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_create_then_join(self):
        with self.client.websocket_connect("/ws") as host:
            host.send_text(orjson.dumps({"type": "create_room", "name": "Ann"}).decode())
            created = host.receive_json()
            assert created["type"] == "room_created"
            code = created["data"]["room_code"]
            update = host.receive_json()
            assert update["type"] == "room_update"
            assert update["data"]["host_id"] == created["data"]["player_id"]

            with self.client.websocket_connect("/ws") as guest:
                guest.send_text(orjson.dumps(
                    {"type": "join_room", "roomCode": code.lower(), "name": "Bob"}
                ).decode())
                joined = guest.receive_json()
                assert joined["type"] == "joined"
                assert joined["data"]["room_code"] == code
                assert len(guest.receive_json()["data"]["players"]) == 2
                assert len(host.receive_json()["data"]["players"]) == 2

    def test_garbage_frame_is_reported(self):
        with self.client.websocket_connect("/ws") as ws:
            ws.send_text("{{{")
            error = ws.receive_json()
            assert error["type"] == "error"
            assert error["code"] == "INVALID_EVENT"

    def test_unknown_room(self):
        with self.client.websocket_connect("/ws") as ws:
            ws.send_text(orjson.dumps({"type": "join_room", "roomCode": "ZZZZZZ", "name": "Eve"}).decode())
            assert ws.receive_json()["code"] == "ROOM_NOT_FOUND"

    def test_commands_need_a_seat(self):
        with self.client.websocket_connect("/ws") as ws:
            ws.send_text(orjson.dumps({"type": "end_turn", "roomCode": "ZZZZZZ"}).decode())
            assert ws.receive_json()["code"] == "NOT_IN_ROOM"


class TestRoomLifetime:

    def teardown_method(self):
        server.repository.remove("TEST01")

    def test_started_room_closes_when_every_seat_drops(self, room):
        server.repository.save(room)

        for player in room.players:
            asyncio.run(server._drop_session(Session(player_id=player.id, room_code=room.code)))

        assert server.repository.get(room.code) is None

    def test_started_room_stays_while_someone_is_connected(self, room):
        server.repository.save(room)

        for player in room.players[:-1]:
            asyncio.run(server._drop_session(Session(player_id=player.id, room_code=room.code)))

        kept = server.repository.get(room.code)
        assert kept is not None
        assert [p.connected for p in kept.players] == [False, False, False, True]
