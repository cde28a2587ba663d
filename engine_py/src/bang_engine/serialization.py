"""
State serialization and sanitization utilities.
"""

from typing import Any, Dict, Optional

from .constants import ROLE_SHERIFF
from .models import DrawChoicePending, Player, RoomState


def _role_visible(state: RoomState, player: Player, viewer_id: Optional[str]) -> bool:
    return (
        player.role == ROLE_SHERIFF
        or not player.is_alive
        or state.ended
        or player.id == viewer_id
    )


def _serialize_player(state: RoomState, player: Player, viewer_id: Optional[str]) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "seat": player.seat,
        "connected": player.connected,
        "role": player.role if _role_visible(state, player, viewer_id) else None,
        "character": player.character,
        "hp": player.hp,
        "max_hp": player.max_hp,
        "is_alive": player.is_alive,
        "hand_count": len(player.hand),
        "equipment": [card.to_dict() for card in player.equipment],
    }


def sanitize_state(state: RoomState, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Public view of the room, safe to send to every seat.

    Hands are reduced to counts, hidden roles are blanked and pending
    requests are summarised without private cards.

    Args:
        state: Room state to sanitize
        viewer_id: Player receiving the view; their own role stays visible

    Returns:
        JSON-ready dictionary
    """
    current = state.current_player() if state.started else None
    return {
        "code": state.code,
        "host_id": state.host_id,
        "started": state.started,
        "ended": state.ended,
        "winner": state.winner,
        "winner_ids": list(state.winner_ids),
        "phase": state.phase,
        "turn_index": state.turn_index,
        "turn_player_id": current.id if current else None,
        "pending": state.pending.to_public() if state.pending else None,
        "turn_ends_at": state.turn_ends_at,
        "pending_ends_at": state.pending_ends_at,
        "bangs_used_this_turn": state.bangs_used_this_turn,
        "deck_count": len(state.deck),
        "discard_count": len(state.discard),
        "discard_top": state.discard[-1].to_dict() if state.discard else None,
        "players": [_serialize_player(state, p, viewer_id) for p in state.players],
    }


def me_state(state: RoomState, viewer_id: str) -> Optional[Dict[str, Any]]:
    """Private view for one player: their hand and anything only they may see."""
    player = state.get_player(viewer_id)
    if player is None:
        return None
    data = {
        "id": player.id,
        "role": player.role,
        "character": player.character,
        "hp": player.hp,
        "max_hp": player.max_hp,
        "is_alive": player.is_alive,
        "hand": [card.to_dict() for card in player.hand],
        "equipment": [card.to_dict() for card in player.equipment],
    }
    pending = state.pending
    if isinstance(pending, DrawChoicePending) and pending.player_id == viewer_id:
        offered = {card.id: card for card in state.deck}
        data["offered"] = [offered[cid].to_dict() for cid in pending.offered_ids if cid in offered]
    return data
