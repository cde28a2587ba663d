"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..constants import SOURCE_DECK, SOURCE_DISCARD


class EventType(str, Enum):
    """Inbound event types."""
    CREATE_ROOM = "create_room"
    JOIN_ROOM = "join_room"
    LEAVE_ROOM = "leave_room"
    START_GAME = "start_game"
    PLAY_CARD = "play_card"
    RESPOND = "respond"
    CHOOSE_DRAW = "choose_draw"
    CHOOSE_TARGET_OR_SKIP = "choose_target_or_skip"
    CHOOSE_DRAW_SOURCE = "choose_draw_source"
    HEAL_VIA_DISCARD = "heal_via_discard"
    DISCARD_TO_LIMIT = "discard_to_limit"
    END_TURN = "end_turn"
    REQUEST_STATE = "request_state"


class OutboundEventType(str, Enum):
    """Outbound event types produced by the transport itself."""
    ROOM_CREATED = "room_created"
    JOINED = "joined"
    GAME_STATE = "game_state"
    ME_STATE = "me_state"
    ERROR = "error"


class ErrorCode(str, Enum):
    """Error codes for client events."""
    INVALID_EVENT = "INVALID_EVENT"
    NOT_IN_ROOM = "NOT_IN_ROOM"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    NOT_HOST = "NOT_HOST"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    GAME_NOT_STARTED = "GAME_NOT_STARTED"
    GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    NOT_YOUR_RESPONSE = "NOT_YOUR_RESPONSE"
    PLAYER_DEAD = "PLAYER_DEAD"
    EFFECT_PENDING = "EFFECT_PENDING"
    NO_PENDING = "NO_PENDING"
    CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
    WRONG_CARD = "WRONG_CARD"
    MISSING_TARGET = "MISSING_TARGET"
    BAD_TARGET = "BAD_TARGET"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    DUPLICATE_EQUIPMENT = "DUPLICATE_EQUIPMENT"
    BANG_LIMIT = "BANG_LIMIT"
    FULL_HP = "FULL_HP"
    INVALID_SELECTION = "INVALID_SELECTION"
    OUT_OF_CARDS = "OUT_OF_CARDS"
    ACTION_NOT_ALLOWED = "ACTION_NOT_ALLOWED"
    INTERNAL = "INTERNAL"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model. Clients send camelCase keys."""
    model_config = ConfigDict(populate_by_name=True)

    type: EventType


class RoomEvent(BaseEvent):
    """Any event addressed to a room the connection already sits in."""
    room_code: str = Field(..., alias="roomCode", min_length=1, max_length=12)

    @field_validator('room_code')
    @classmethod
    def normalize_room_code(cls, v):
        return v.strip().upper()


class CreateRoomEvent(BaseEvent):
    type: EventType = EventType.CREATE_ROOM
    name: str = Field(..., min_length=1, max_length=30)


class JoinRoomEvent(RoomEvent):
    type: EventType = EventType.JOIN_ROOM
    name: str = Field(..., min_length=1, max_length=30)


class LeaveRoomEvent(RoomEvent):
    type: EventType = EventType.LEAVE_ROOM


class StartGameEvent(RoomEvent):
    type: EventType = EventType.START_GAME
    seed: Optional[int] = None


class PlayCardEvent(RoomEvent):
    type: EventType = EventType.PLAY_CARD
    card_id: str = Field(..., alias="cardId", min_length=1)
    target_id: Optional[str] = Field(default=None, alias="targetId")


class RespondEvent(RoomEvent):
    """Answer a pending request; no cardId means pass."""
    type: EventType = EventType.RESPOND
    card_id: Optional[str] = Field(default=None, alias="cardId")


class ChooseDrawEvent(RoomEvent):
    type: EventType = EventType.CHOOSE_DRAW
    card_ids: List[str] = Field(..., alias="cardIds", min_length=1, max_length=3)


class ChooseTargetOrSkipEvent(RoomEvent):
    type: EventType = EventType.CHOOSE_TARGET_OR_SKIP
    target_id: Optional[str] = Field(default=None, alias="targetId")


class ChooseDrawSourceEvent(RoomEvent):
    type: EventType = EventType.CHOOSE_DRAW_SOURCE
    source: str = Field(default=SOURCE_DECK)

    @field_validator('source')
    @classmethod
    def validate_source(cls, v):
        if v not in (SOURCE_DECK, SOURCE_DISCARD):
            raise ValueError(f"source must be '{SOURCE_DECK}' or '{SOURCE_DISCARD}'")
        return v


class HealViaDiscardEvent(RoomEvent):
    type: EventType = EventType.HEAL_VIA_DISCARD
    card_ids: List[str] = Field(..., alias="cardIds", min_length=2, max_length=2)


class DiscardToLimitEvent(RoomEvent):
    type: EventType = EventType.DISCARD_TO_LIMIT
    card_ids: List[str] = Field(..., alias="cardIds", min_length=1)


class EndTurnEvent(RoomEvent):
    type: EventType = EventType.END_TURN


class RequestStateEvent(RoomEvent):
    type: EventType = EventType.REQUEST_STATE


InboundEvent = Union[
    CreateRoomEvent,
    JoinRoomEvent,
    LeaveRoomEvent,
    StartGameEvent,
    PlayCardEvent,
    RespondEvent,
    ChooseDrawEvent,
    ChooseTargetOrSkipEvent,
    ChooseDrawSourceEvent,
    HealViaDiscardEvent,
    DiscardToLimitEvent,
    EndTurnEvent,
    RequestStateEvent,
]

EVENT_MODELS = {
    EventType.CREATE_ROOM: CreateRoomEvent,
    EventType.JOIN_ROOM: JoinRoomEvent,
    EventType.LEAVE_ROOM: LeaveRoomEvent,
    EventType.START_GAME: StartGameEvent,
    EventType.PLAY_CARD: PlayCardEvent,
    EventType.RESPOND: RespondEvent,
    EventType.CHOOSE_DRAW: ChooseDrawEvent,
    EventType.CHOOSE_TARGET_OR_SKIP: ChooseTargetOrSkipEvent,
    EventType.CHOOSE_DRAW_SOURCE: ChooseDrawSourceEvent,
    EventType.HEAL_VIA_DISCARD: HealViaDiscardEvent,
    EventType.DISCARD_TO_LIMIT: DiscardToLimitEvent,
    EventType.END_TURN: EndTurnEvent,
    EventType.REQUEST_STATE: RequestStateEvent,
}


# Outbound event models
class ServerEvent(BaseModel):
    """Any event sent to a client."""
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)
    timestamp: float = Field(default_factory=time.time)


class ErrorEvent(BaseModel):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: ErrorCode
    message: str
    timestamp: float = Field(default_factory=time.time)


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into the matching event model.

    Raises:
        ValueError: If the event type is unknown or the payload is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")
    event_type = data.get("type")
    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    try:
        return EVENT_MODELS[event_type].model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid event data: {e.errors()[0]['msg']}")


def decode_frame(raw: str) -> Dict[str, Any]:
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError:
        raise ValueError("Frame is not valid JSON")


def encode_event(event: BaseModel) -> str:
    return orjson.dumps(event.model_dump(mode="json")).decode()


def create_error_event(code: str, message: str) -> ErrorEvent:
    try:
        error_code = ErrorCode(code)
    except ValueError:
        error_code = ErrorCode.INTERNAL
    return ErrorEvent(code=error_code, message=message)


def create_server_event(event_type: str, data: Dict[str, Any]) -> ServerEvent:
    return ServerEvent(type=event_type, data=data)


def create_state_event(state: Dict[str, Any]) -> ServerEvent:
    return ServerEvent(type=OutboundEventType.GAME_STATE.value, data=state)


def create_me_state_event(me: Dict[str, Any]) -> ServerEvent:
    return ServerEvent(type=OutboundEventType.ME_STATE.value, data=me)


def create_joined_event(room_code: str, player_id: str, created: bool = False) -> ServerEvent:
    event_type = OutboundEventType.ROOM_CREATED if created else OutboundEventType.JOINED
    return ServerEvent(type=event_type.value, data={"room_code": room_code, "player_id": player_id})
