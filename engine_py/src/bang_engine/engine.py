"""
Public command API.

Every command works on a copy of the room and returns an ActionResult. A
rejected command leaves the original state untouched and reports the error
code instead of raising.
"""

import copy
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from . import effects, resolver, turn
from .constants import (
    EVENT_PLAYER_DISCONNECTED, EVENT_ROOM_UPDATE, PHASE_LOBBY, PHASE_MAIN, PHASE_WAITING
)
from .errors import (
    ACTION_NOT_ALLOWED, GAME_ALREADY_STARTED, GAME_NOT_STARTED, NOT_ENOUGH_PLAYERS, NOT_HOST,
    NOT_IN_ROOM, PLAYER_DEAD, ROOM_FULL, GameError
)
from .models import GameEvent, Player, RoomState
from .rules import RuleConfig, default_rules

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    success: bool
    state: RoomState
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    events: List[GameEvent] = field(default_factory=list)


def _run(state: RoomState, action: Callable, *args) -> ActionResult:
    new_state = copy.deepcopy(state)
    new_state.events = []
    try:
        action(new_state, *args)
    except GameError as e:
        logger.warning(f"Room {state.code}: rejected {action.__name__}: {e}")
        return ActionResult(False, state, e.code, e.message)
    return ActionResult(True, new_state, events=new_state.drain_events())


def _room_update(state: RoomState):
    state.emit(
        EVENT_ROOM_UPDATE,
        room_code=state.code,
        host_id=state.host_id,
        started=state.started,
        max_players=state.rule_config.max_players,
        players=[{"id": p.id, "name": p.name, "connected": p.connected} for p in state.players],
    )


# Lobby

def create_room(code: str, rule_config: Optional[RuleConfig] = None,
                seed: Optional[int] = None) -> RoomState:
    """Create an empty room."""
    return RoomState(
        code=code,
        rule_config=rule_config or default_rules,
        rng=random.Random(seed),
    )


def _join(state: RoomState, player_id: str, name: str):
    if state.started:
        raise GameError(GAME_ALREADY_STARTED, "Game already in progress")
    if state.get_player(player_id) is not None:
        raise GameError(ACTION_NOT_ALLOWED, "Already seated in this room")
    if len(state.players) >= state.rule_config.max_players:
        raise GameError(ROOM_FULL, "Room is full")
    state.players.append(Player(id=player_id, name=name, seat=len(state.players)))
    if state.host_id is None:
        state.host_id = player_id
    _room_update(state)


def join_room(state: RoomState, player_id: str, name: str) -> ActionResult:
    return _run(state, _join, player_id, name)


def _leave(state: RoomState, player_id: str):
    player = state.get_player(player_id)
    if player is None:
        raise GameError(NOT_IN_ROOM, "Not in this room")
    if state.started:
        player.connected = False
        state.emit(EVENT_PLAYER_DISCONNECTED, player_id=player_id)
    else:
        state.players.remove(player)
        for seat, p in enumerate(state.players):
            p.seat = seat
        if state.host_id == player_id:
            state.host_id = state.players[0].id if state.players else None
    _room_update(state)


def leave_room(state: RoomState, player_id: str) -> ActionResult:
    """Leave a lobby, or keep the seat but mark it disconnected once the game has begun."""
    return _run(state, _leave, player_id)


def _disconnect(state: RoomState, player_id: str):
    player = state.get_player(player_id)
    if player is None:
        raise GameError(NOT_IN_ROOM, "Not in this room")
    if not state.started:
        _leave(state, player_id)
        return
    player.connected = False
    state.emit(EVENT_PLAYER_DISCONNECTED, player_id=player_id)


def disconnect_player(state: RoomState, player_id: str) -> ActionResult:
    return _run(state, _disconnect, player_id)


def _start(state: RoomState, player_id: Optional[str]):
    if state.started:
        raise GameError(GAME_ALREADY_STARTED, "Game already in progress")
    if player_id is not None and player_id != state.host_id:
        raise GameError(NOT_HOST, "Only the host can start the game")
    if not state.rule_config.validate_player_count(len(state.players)):
        raise GameError(
            NOT_ENOUGH_PLAYERS,
            f"Need {state.rule_config.min_players}-{state.rule_config.max_players} players"
        )
    turn.start_game(state)


def start_game(state: RoomState, player_id: Optional[str] = None,
               seed: Optional[int] = None) -> ActionResult:
    """Start the game. When player_id is given only the host may start."""
    if seed is not None:
        state = copy.deepcopy(state)
        state.rng = random.Random(seed)
    return _run(state, _start, player_id)


# Game commands

def _in_game(action: Callable) -> Callable:
    def command(state: RoomState, player_id: str, *args):
        if not state.started or state.ended:
            raise GameError(GAME_NOT_STARTED, "No game in progress")
        player = state.get_player(player_id)
        if player is None:
            raise GameError(NOT_IN_ROOM, "Not in this room")
        if not player.is_alive:
            raise GameError(PLAYER_DEAD, "Eliminated players cannot act")
        action(state, player_id, *args)
    command.__name__ = action.__name__
    return command


_play_card = _in_game(effects.play_card)
_respond = _in_game(resolver.respond)
_choose_draw = _in_game(resolver.choose_draw)
_choose_target_or_skip = _in_game(resolver.choose_target_or_skip)
_choose_draw_source = _in_game(resolver.choose_draw_source)
_heal_via_discard = _in_game(effects.heal_via_discard)
_discard_to_limit = _in_game(resolver.discard_to_limit)
_end_turn = _in_game(turn.end_turn)


def play_card(state: RoomState, player_id: str, card_id: str,
              target_id: Optional[str] = None) -> ActionResult:
    return _run(state, _play_card, player_id, card_id, target_id)


def respond(state: RoomState, player_id: str, card_id: Optional[str] = None) -> ActionResult:
    """Answer the pending request with a card, or pass with card_id=None."""
    return _run(state, _respond, player_id, card_id)


def choose_draw(state: RoomState, player_id: str, card_ids: List[str]) -> ActionResult:
    return _run(state, _choose_draw, player_id, list(card_ids))


def choose_target_or_skip(state: RoomState, player_id: str,
                          target_id: Optional[str] = None) -> ActionResult:
    return _run(state, _choose_target_or_skip, player_id, target_id)


def choose_draw_source(state: RoomState, player_id: str, source: str) -> ActionResult:
    return _run(state, _choose_draw_source, player_id, source)


def heal_via_discard(state: RoomState, player_id: str, card_ids: List[str]) -> ActionResult:
    return _run(state, _heal_via_discard, player_id, list(card_ids))


def discard_to_limit(state: RoomState, player_id: str, card_ids: List[str]) -> ActionResult:
    return _run(state, _discard_to_limit, player_id, list(card_ids))


def end_turn(state: RoomState, player_id: str) -> ActionResult:
    return _run(state, _end_turn, player_id)


# Deadlines

def expire_pending(state: RoomState) -> ActionResult:
    return _run(state, resolver.resolve_pending_timeout)


def expire_turn(state: RoomState) -> ActionResult:
    return _run(state, turn.expire_turn)


def tick_room(state: RoomState, now: Optional[float] = None) -> Optional[ActionResult]:
    """Apply whichever deadline has passed. Returns None when nothing is due."""
    if not state.started or state.ended or state.phase == PHASE_LOBBY:
        return None
    now = time.time() if now is None else now
    if state.phase == PHASE_WAITING and state.pending is not None:
        if state.pending_ends_at is not None and now >= state.pending_ends_at:
            return expire_pending(state)
        return None
    if state.phase == PHASE_MAIN and state.turn_ends_at is not None and now >= state.turn_ends_at:
        return expire_turn(state)
    return None
