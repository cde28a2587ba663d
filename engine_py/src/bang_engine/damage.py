"""
Damage application and elimination handling.
"""

import logging
from typing import Optional

from .characters import character_of
from .constants import (
    EVENT_ACTION_RESOLVED, EVENT_PASSIVE, EVENT_PLAYER_ELIMINATED,
    ROLE_DEPUTY, ROLE_OUTLAW, ROLE_SHERIFF
)
from .deck import discard_card, refill_empty_hand, try_draw
from .models import Player, RoomState
from .victory import check_game_over

logger = logging.getLogger(__name__)


def apply_damage(state: RoomState, target: Player, amount: int, cause_id: Optional[str] = None):
    """
    Apply damage one point at a time.

    Each point can trigger the target's on-hit ability. A point that brings
    life to zero eliminates the target and drops any remaining points.
    """
    if not target.is_alive or amount <= 0:
        return
    cause = state.get_player(cause_id)
    ability = character_of(target)
    taken = 0

    for _ in range(amount):
        target.hp -= 1
        taken += 1
        if target.hp <= 0:
            target.hp = 0
            target.is_alive = False
            break
        if ability.steals_on_hit and cause is not None and cause.id != target.id and cause.hand:
            stolen = cause.hand.pop(state.rng.randrange(len(cause.hand)))
            target.hand.append(stolen)
            state.emit(EVENT_PASSIVE, player_id=target.id, name='steal_on_hit', from_id=cause.id)
            refill_empty_hand(state, cause)
        if ability.draws_on_hit and try_draw(state, target, 1):
            state.emit(EVENT_PASSIVE, player_id=target.id, name='draw_on_hit')

    state.emit(
        EVENT_ACTION_RESOLVED,
        kind='damage',
        target_id=target.id,
        cause_id=cause_id,
        amount=taken,
        hp=target.hp,
    )
    if not target.is_alive:
        handle_death(state, target, cause)


def handle_death(state: RoomState, victim: Player, killer: Optional[Player] = None):
    """Rewards, penalties and looting after an elimination, then the win check."""
    logger.info(f"Room {state.code}: {victim.id} ({victim.role}) eliminated")
    if killer is not None and (killer.id == victim.id or not killer.is_alive):
        killer = None

    if killer is not None:
        if victim.role == ROLE_OUTLAW:
            try_draw(state, killer, state.rule_config.outlaw_bounty)
            state.emit(EVENT_PASSIVE, player_id=killer.id, name='kill_reward_outlaw', victim_id=victim.id)
        elif victim.role == ROLE_DEPUTY and killer.role == ROLE_SHERIFF:
            for card in killer.hand + killer.equipment:
                discard_card(state, card)
            killer.hand = []
            killer.equipment = []
            state.emit(EVENT_PASSIVE, player_id=killer.id, name='sheriff_killed_deputy_penalty')

    leftovers = victim.hand + victim.equipment
    victim.hand = []
    victim.equipment = []
    scavenger = next(
        (p for p in state.alive_players() if p.id != victim.id and character_of(p).scavenger),
        None,
    )
    if scavenger is not None and leftovers:
        scavenger.hand.extend(leftovers)
        state.emit(EVENT_PASSIVE, player_id=scavenger.id, name='vulture_loot',
                   victim_id=victim.id, count=len(leftovers))
    else:
        for card in leftovers:
            discard_card(state, card)

    state.emit(
        EVENT_PLAYER_ELIMINATED,
        player_id=victim.id,
        role=victim.role,
        killer_id=killer.id if killer else None,
    )
    check_game_over(state)
    if killer is not None:
        refill_empty_hand(state, killer)
