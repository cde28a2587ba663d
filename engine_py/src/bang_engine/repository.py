"""
In-memory room registry.
"""

import logging
import secrets
from typing import Dict, List, Optional

from .engine import create_room
from .models import RoomState
from .rules import RuleConfig

logger = logging.getLogger(__name__)

ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 6


def generate_room_code(length: int = ROOM_CODE_LENGTH) -> str:
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))


class RoomRepository:
    """Owns every live room, keyed by room code."""

    def __init__(self):
        self.rooms: Dict[str, RoomState] = {}

    def __len__(self) -> int:
        return len(self.rooms)

    def __contains__(self, code: str) -> bool:
        return code in self.rooms

    def get(self, code: str) -> Optional[RoomState]:
        return self.rooms.get(code)

    def create(self, rule_config: Optional[RuleConfig] = None,
               seed: Optional[int] = None) -> RoomState:
        code = generate_room_code()
        while code in self.rooms:
            code = generate_room_code()
        room = create_room(code, rule_config, seed)
        self.rooms[code] = room
        logger.info(f"Room {code} created")
        return room

    def save(self, room: RoomState):
        self.rooms[room.code] = room

    def remove(self, code: str) -> Optional[RoomState]:
        room = self.rooms.pop(code, None)
        if room is not None:
            logger.info(f"Room {code} removed")
        return room

    def all(self) -> List[RoomState]:
        return list(self.rooms.values())
