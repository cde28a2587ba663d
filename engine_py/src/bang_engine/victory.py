"""
Win condition evaluation.
"""

import logging
from typing import Optional

from .constants import (
    EVENT_GAME_OVER, PHASE_MAIN, ROLE_DEPUTY, ROLE_OUTLAW, ROLE_RENEGADE, ROLE_SHERIFF,
    WINNER_OUTLAWS, WINNER_RENEGADE, WINNER_SHERIFF
)
from .models import RoomState

logger = logging.getLogger(__name__)

WINNING_ROLES = {
    WINNER_SHERIFF: (ROLE_SHERIFF, ROLE_DEPUTY),
    WINNER_OUTLAWS: (ROLE_OUTLAW,),
    WINNER_RENEGADE: (ROLE_RENEGADE,),
}


def evaluate_winner(state: RoomState) -> Optional[str]:
    """Return the winning faction, or None while the game goes on."""
    alive = state.alive_players()
    sheriff_alive = any(p.role == ROLE_SHERIFF for p in alive)
    if not sheriff_alive:
        if len(alive) == 1 and alive[0].role == ROLE_RENEGADE:
            return WINNER_RENEGADE
        return WINNER_OUTLAWS
    if not any(p.role in (ROLE_OUTLAW, ROLE_RENEGADE) for p in alive):
        return WINNER_SHERIFF
    return None


def check_game_over(state: RoomState) -> bool:
    """End the game if a faction has won. Safe to call repeatedly."""
    if state.ended:
        return True
    if not state.started:
        return False
    winner = evaluate_winner(state)
    if winner is None:
        return False

    state.ended = True
    state.winner = winner
    state.winner_ids = [p.id for p in state.players if p.role in WINNING_ROLES[winner]]
    state.pending = None
    state.pending_ends_at = None
    state.turn_ends_at = None
    state.phase = PHASE_MAIN
    logger.info(f"Room {state.code}: game over, winner {winner}")
    state.emit(
        EVENT_GAME_OVER,
        winner=winner,
        winner_ids=list(state.winner_ids),
        roles={p.id: p.role for p in state.players},
    )
    return True
