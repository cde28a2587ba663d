"""
FastAPI WebSocket server for the Wild West card game.
"""

import asyncio
import logging
import uuid
from collections import defaultdict
from contextlib import asynccontextmanager, suppress
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ..engine import (
    ActionResult, choose_draw, choose_draw_source, choose_target_or_skip,
    disconnect_player, discard_to_limit, end_turn, heal_via_discard, join_room,
    leave_room, play_card, respond, start_game
)
from ..errors import ACTION_NOT_ALLOWED, INTERNAL, INVALID_EVENT, NOT_IN_ROOM, ROOM_NOT_FOUND
from ..models import RoomState
from ..repository import RoomRepository
from ..rules import default_rules
from ..scheduler import run_scheduler
from ..serialization import me_state, sanitize_state
from .events import (
    ChooseDrawEvent, ChooseDrawSourceEvent, ChooseTargetOrSkipEvent, CreateRoomEvent,
    DiscardToLimitEvent, EndTurnEvent, HealViaDiscardEvent, JoinRoomEvent,
    LeaveRoomEvent, PlayCardEvent, RequestStateEvent, RespondEvent, StartGameEvent,
    create_error_event, create_joined_event, create_me_state_event,
    create_server_event, create_state_event, decode_frame, encode_event,
    parse_inbound_event
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

repository = RoomRepository()


@dataclass
class Session:
    """What a single connection is bound to."""
    player_id: Optional[str] = None
    room_code: Optional[str] = None


class ConnectionManager:
    """Manages WebSocket connections per room and seat."""

    def __init__(self):
        self.rooms: Dict[str, Dict[str, WebSocket]] = defaultdict(dict)

    def bind(self, room_code: str, player_id: str, websocket: WebSocket):
        self.rooms[room_code][player_id] = websocket
        logger.info(f"Player {player_id} connected to room {room_code}")

    def unbind(self, room_code: str, player_id: str):
        seats = self.rooms.get(room_code)
        if seats is None:
            return
        seats.pop(player_id, None)
        if not seats:
            del self.rooms[room_code]
        logger.info(f"Player {player_id} disconnected from room {room_code}")

    def count(self) -> int:
        return sum(len(seats) for seats in self.rooms.values())

    async def send(self, websocket: WebSocket, event: BaseModel):
        await websocket.send_text(encode_event(event))

    async def send_to_player(self, room_code: str, player_id: str, event: BaseModel):
        websocket = self.rooms.get(room_code, {}).get(player_id)
        if websocket is None:
            return
        try:
            await self.send(websocket, event)
        except Exception as e:
            logger.error(f"Error sending to player {player_id}: {e}")
            self.unbind(room_code, player_id)

    async def broadcast(self, room_code: str, event: BaseModel):
        for player_id in list(self.rooms.get(room_code, {})):
            await self.send_to_player(room_code, player_id, event)


manager = ConnectionManager()


async def publish_state(state: RoomState):
    """Send the public table view and each player's private view."""
    if not state.started:
        return
    for player in state.players:
        await manager.send_to_player(state.code, player.id, create_state_event(sanitize_state(state, player.id)))
        await manager.send_to_player(state.code, player.id, create_me_state_event(me_state(state, player.id)))


async def publish(room_code: str, result: ActionResult):
    """Deliver the events of a successful command, then the refreshed state."""
    for event in result.events:
        message = create_server_event(event.type, event.data)
        if event.to is None:
            await manager.broadcast(room_code, message)
        else:
            await manager.send_to_player(room_code, event.to, message)
    await publish_state(result.state)


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = asyncio.create_task(run_scheduler(repository, publish, default_rules.tick_interval))
    try:
        yield
    finally:
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task


# FastAPI app
app = FastAPI(title="Bang Game Engine", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "rooms": len(repository),
        "connections": manager.count(),
    }


async def send_error(websocket: WebSocket, code: str, message: str):
    await manager.send(websocket, create_error_event(code, message))


async def apply_result(websocket: WebSocket, result: ActionResult) -> bool:
    if not result.success:
        await send_error(websocket, result.error_code, result.error_message)
        return False
    repository.save(result.state)
    await publish(result.state.code, result)
    return True


# Lobby handlers

async def handle_create(websocket: WebSocket, session: Session, event: CreateRoomEvent):
    if session.room_code is not None:
        await send_error(websocket, ACTION_NOT_ALLOWED, "Already in a room")
        return
    room = repository.create()
    player_id = uuid.uuid4().hex[:8]
    result = join_room(room, player_id, event.name)
    if not result.success:
        repository.remove(room.code)
        await send_error(websocket, result.error_code, result.error_message)
        return
    session.player_id, session.room_code = player_id, room.code
    manager.bind(room.code, player_id, websocket)
    await manager.send(websocket, create_joined_event(room.code, player_id, created=True))
    await apply_result(websocket, result)


async def handle_join(websocket: WebSocket, session: Session, event: JoinRoomEvent):
    if session.room_code is not None:
        await send_error(websocket, ACTION_NOT_ALLOWED, "Already in a room")
        return
    room = repository.get(event.room_code)
    if room is None:
        await send_error(websocket, ROOM_NOT_FOUND, f"Room {event.room_code} does not exist")
        return
    player_id = uuid.uuid4().hex[:8]
    result = join_room(room, player_id, event.name)
    if not result.success:
        await send_error(websocket, result.error_code, result.error_message)
        return
    session.player_id, session.room_code = player_id, room.code
    manager.bind(room.code, player_id, websocket)
    await manager.send(websocket, create_joined_event(room.code, player_id))
    await apply_result(websocket, result)


async def handle_leave(websocket: WebSocket, session: Session, room: RoomState, event: LeaveRoomEvent):
    result = leave_room(room, session.player_id)
    if await apply_result(websocket, result):
        manager.unbind(room.code, session.player_id)
        session.player_id, session.room_code = None, None
        if result.state.is_abandoned():
            repository.remove(room.code)


async def handle_request_state(websocket: WebSocket, session: Session, room: RoomState,
                               event: RequestStateEvent):
    await manager.send(websocket, create_state_event(sanitize_state(room, session.player_id)))
    me = me_state(room, session.player_id)
    if me is not None:
        await manager.send(websocket, create_me_state_event(me))


# Game command handlers map an event onto the matching engine command

COMMANDS: Dict[type, Callable[[RoomState, str, object], ActionResult]] = {
    StartGameEvent: lambda room, pid, e: start_game(room, pid, e.seed),
    PlayCardEvent: lambda room, pid, e: play_card(room, pid, e.card_id, e.target_id),
    RespondEvent: lambda room, pid, e: respond(room, pid, e.card_id),
    ChooseDrawEvent: lambda room, pid, e: choose_draw(room, pid, e.card_ids),
    ChooseTargetOrSkipEvent: lambda room, pid, e: choose_target_or_skip(room, pid, e.target_id),
    ChooseDrawSourceEvent: lambda room, pid, e: choose_draw_source(room, pid, e.source),
    HealViaDiscardEvent: lambda room, pid, e: heal_via_discard(room, pid, e.card_ids),
    DiscardToLimitEvent: lambda room, pid, e: discard_to_limit(room, pid, e.card_ids),
    EndTurnEvent: lambda room, pid, e: end_turn(room, pid),
}

ROOM_HANDLERS = {
    LeaveRoomEvent: handle_leave,
    RequestStateEvent: handle_request_state,
}


async def handle_event(websocket: WebSocket, session: Session, event):
    """Route an inbound event."""
    if isinstance(event, CreateRoomEvent):
        await handle_create(websocket, session, event)
        return
    if isinstance(event, JoinRoomEvent):
        await handle_join(websocket, session, event)
        return

    room = repository.get(event.room_code)
    if room is None or session.room_code != event.room_code or session.player_id is None:
        await send_error(websocket, NOT_IN_ROOM, "Not in that room")
        return

    room_handler = ROOM_HANDLERS.get(type(event))
    if room_handler is not None:
        await room_handler(websocket, session, room, event)
        return

    command = COMMANDS.get(type(event))
    if command is None:
        raise ValueError(f"Unhandled event type: {event.type}")
    await apply_result(websocket, command(room, session.player_id, event))


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Main WebSocket endpoint."""
    await websocket.accept()
    session = Session()
    logger.info("WebSocket connection accepted")

    try:
        while True:
            raw_data = await websocket.receive_text()
            try:
                event = parse_inbound_event(decode_frame(raw_data))
                await handle_event(websocket, session, event)
            except ValueError as e:
                await send_error(websocket, INVALID_EVENT, str(e))
            except WebSocketDisconnect:
                raise
            except Exception:
                logger.exception("Error handling event")
                await send_error(websocket, INTERNAL, "Internal server error")
    except WebSocketDisconnect:
        logger.info("WebSocket disconnected")
    finally:
        await _drop_session(session)


async def _drop_session(session: Session):
    if session.room_code is None or session.player_id is None:
        return
    manager.unbind(session.room_code, session.player_id)
    room = repository.get(session.room_code)
    if room is None:
        return
    result = disconnect_player(room, session.player_id)
    if not result.success:
        return
    repository.save(result.state)
    if result.state.is_abandoned():
        repository.remove(room.code)
        return
    await publish(room.code, result)
