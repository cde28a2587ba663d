# engine_py/src/bang_engine/errors.py

class GameError(Exception):
    """Base exception for rejected game commands."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


# Lobby
NOT_IN_ROOM = "NOT_IN_ROOM"
ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
ROOM_FULL = "ROOM_FULL"
NOT_HOST = "NOT_HOST"
NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
GAME_NOT_STARTED = "GAME_NOT_STARTED"
GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"

# Turn and response ownership
NOT_YOUR_TURN = "NOT_YOUR_TURN"
NOT_YOUR_RESPONSE = "NOT_YOUR_RESPONSE"
PLAYER_DEAD = "PLAYER_DEAD"
EFFECT_PENDING = "EFFECT_PENDING"
NO_PENDING = "NO_PENDING"

# Card and target validation
CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
WRONG_CARD = "WRONG_CARD"
MISSING_TARGET = "MISSING_TARGET"
BAD_TARGET = "BAD_TARGET"
OUT_OF_RANGE = "OUT_OF_RANGE"
DUPLICATE_EQUIPMENT = "DUPLICATE_EQUIPMENT"
BANG_LIMIT = "BANG_LIMIT"
FULL_HP = "FULL_HP"
INVALID_SELECTION = "INVALID_SELECTION"

# Resources and transport
OUT_OF_CARDS = "OUT_OF_CARDS"
ACTION_NOT_ALLOWED = "ACTION_NOT_ALLOWED"
INVALID_EVENT = "INVALID_EVENT"
INTERNAL = "INTERNAL"


class OutOfCards(GameError):
    """Raised when both the draw pile and the discard pile are empty."""
    def __init__(self, message: str = "Deck and discard pile are both empty"):
        super().__init__(OUT_OF_CARDS, message)
