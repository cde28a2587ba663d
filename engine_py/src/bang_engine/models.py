"""Game models and data structures"""

import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .constants import (
    CARD_WEAPON, EVENT_ACTION_REQUIRED, PENDING_BANG, PENDING_DISCARD_LIMIT,
    PENDING_DRAW_CHOICE, PENDING_DRAW_SOURCE, PENDING_DUEL, PENDING_GATLING,
    PENDING_INDIANS, PENDING_STEAL_CHOICE, PHASE_LOBBY, PHASE_MAIN, PHASE_WAITING
)
from .rules import RuleConfig


@dataclass
class Card:
    id: str
    key: str
    suit: Optional[str] = None
    rank: Optional[str] = None
    weapon_name: Optional[str] = None
    range: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"id": self.id, "key": self.key, "suit": self.suit, "rank": self.rank}
        if self.key == CARD_WEAPON:
            data["weapon_name"] = self.weapon_name
            data["range"] = self.range
        return data


@dataclass
class Player:
    id: str
    name: str
    seat: int = 0
    connected: bool = True
    role: Optional[str] = None  # sheriff, deputy, outlaw, renegade
    character: Optional[str] = None
    hp: int = 0
    max_hp: int = 0
    is_alive: bool = True
    hand: List[Card] = field(default_factory=list)
    equipment: List[Card] = field(default_factory=list)

    def find_card(self, card_id: str) -> Optional[Card]:
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    def take_card(self, card_id: str) -> Optional[Card]:
        """Remove a card from hand by id."""
        for i, card in enumerate(self.hand):
            if card.id == card_id:
                return self.hand.pop(i)
        return None

    def equipped(self, key: str) -> Optional[Card]:
        for card in self.equipment:
            if card.key == key:
                return card
        return None

    def has_equipment(self, key: str) -> bool:
        return self.equipped(key) is not None

    def unequip(self, key: str) -> Optional[Card]:
        for i, card in enumerate(self.equipment):
            if card.key == key:
                return self.equipment.pop(i)
        return None

    def take_any(self, card_id: str) -> Optional[Card]:
        """Remove a card by id from hand or equipment."""
        card = self.take_card(card_id)
        if card is not None:
            return card
        for i, item in enumerate(self.equipment):
            if item.id == card_id:
                return self.equipment.pop(i)
        return None

    @property
    def weapon(self) -> Optional[Card]:
        return self.equipped(CARD_WEAPON)


@dataclass
class GameEvent:
    type: str
    data: Dict[str, Any] = field(default_factory=dict)
    to: Optional[str] = None  # None means broadcast to the whole room


# Pending requests. Each variant names exactly one player allowed to answer it.

@dataclass
class BangPending:
    attacker_id: str
    target_id: str
    required_missed: int = 1
    missed_so_far: int = 0
    kind: str = field(default=PENDING_BANG, init=False)

    @property
    def actor_id(self) -> str:
        return self.target_id

    def to_public(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "attacker_id": self.attacker_id,
            "target_id": self.target_id,
            "required_missed": self.required_missed,
            "missed_so_far": self.missed_so_far,
        }


@dataclass
class IndiansPending:
    attacker_id: str
    targets: List[str]
    idx: int = 0
    kind: str = field(default=PENDING_INDIANS, init=False)

    @property
    def actor_id(self) -> str:
        return self.targets[self.idx]

    def to_public(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "attacker_id": self.attacker_id,
            "targets": list(self.targets),
            "current": self.actor_id,
        }


@dataclass
class GatlingPending:
    attacker_id: str
    targets: List[str]
    idx: int = 0
    kind: str = field(default=PENDING_GATLING, init=False)

    @property
    def actor_id(self) -> str:
        return self.targets[self.idx]

    def to_public(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "attacker_id": self.attacker_id,
            "targets": list(self.targets),
            "current": self.actor_id,
        }


@dataclass
class DuelPending:
    initiator_id: str
    target_id: str
    responder_id: str
    kind: str = field(default=PENDING_DUEL, init=False)

    @property
    def actor_id(self) -> str:
        return self.responder_id

    def other_party(self) -> str:
        if self.responder_id == self.target_id:
            return self.initiator_id
        return self.target_id

    def to_public(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "initiator_id": self.initiator_id,
            "target_id": self.target_id,
            "responder_id": self.responder_id,
        }


@dataclass
class DrawChoicePending:
    player_id: str
    offered_ids: List[str]
    pick_count: int = 2
    kind: str = field(default=PENDING_DRAW_CHOICE, init=False)

    @property
    def actor_id(self) -> str:
        return self.player_id

    def to_public(self) -> Dict[str, Any]:
        # Offered cards stay hidden from the table
        return {
            "kind": self.kind,
            "player_id": self.player_id,
            "offered_count": len(self.offered_ids),
            "pick_count": self.pick_count,
        }


@dataclass
class StealChoicePending:
    player_id: str
    eligible_targets: List[str]
    kind: str = field(default=PENDING_STEAL_CHOICE, init=False)

    @property
    def actor_id(self) -> str:
        return self.player_id

    def to_public(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "player_id": self.player_id,
            "eligible_targets": list(self.eligible_targets),
        }


@dataclass
class DrawSourcePending:
    player_id: str
    can_use_discard: bool = True
    kind: str = field(default=PENDING_DRAW_SOURCE, init=False)

    @property
    def actor_id(self) -> str:
        return self.player_id

    def to_public(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "player_id": self.player_id,
            "can_use_discard": self.can_use_discard,
        }


@dataclass
class DiscardLimitPending:
    player_id: str
    need: int
    kind: str = field(default=PENDING_DISCARD_LIMIT, init=False)

    @property
    def actor_id(self) -> str:
        return self.player_id

    def to_public(self) -> Dict[str, Any]:
        return {"kind": self.kind, "player_id": self.player_id, "need": self.need}


Pending = Union[
    BangPending,
    IndiansPending,
    GatlingPending,
    DuelPending,
    DrawChoicePending,
    StealChoicePending,
    DrawSourcePending,
    DiscardLimitPending,
]

PENDING_TYPES = (
    BangPending, IndiansPending, GatlingPending, DuelPending,
    DrawChoicePending, StealChoicePending, DrawSourcePending, DiscardLimitPending,
)


@dataclass
class RoomState:
    code: str
    players: List[Player] = field(default_factory=list)  # seat order
    host_id: Optional[str] = None
    started: bool = False
    ended: bool = False
    winner: Optional[str] = None
    winner_ids: List[str] = field(default_factory=list)
    deck: List[Card] = field(default_factory=list)  # top of the deck is the end of the list
    discard: List[Card] = field(default_factory=list)  # top of the pile is the end of the list
    turn_index: int = 0
    phase: str = PHASE_LOBBY  # lobby|main|waiting
    pending: Optional[Pending] = None
    bangs_used_this_turn: int = 0
    turn_ends_at: Optional[float] = None
    pending_ends_at: Optional[float] = None
    card_total: int = 0  # established when the deck is dealt
    rule_config: RuleConfig = field(default_factory=RuleConfig)
    rng: random.Random = field(default_factory=random.Random)
    events: List[GameEvent] = field(default_factory=list)

    def get_player(self, player_id: Optional[str]) -> Optional[Player]:
        if player_id is None:
            return None
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def index_of(self, player_id: str) -> int:
        for i, player in enumerate(self.players):
            if player.id == player_id:
                return i
        return -1

    def current_player(self) -> Optional[Player]:
        if not self.players or not 0 <= self.turn_index < len(self.players):
            return None
        return self.players[self.turn_index]

    def alive_players(self) -> List[Player]:
        return [p for p in self.players if p.is_alive]

    def is_abandoned(self) -> bool:
        """True once no seated player is still connected."""
        return not any(p.connected for p in self.players)

    def emit(self, event_type: str, to: Optional[str] = None, **data):
        self.events.append(GameEvent(type=event_type, data=data, to=to))

    def drain_events(self) -> List[GameEvent]:
        events, self.events = self.events, []
        return events

    def open_pending(self, pending: Pending, **private):
        """Suspend the main phase until the pending request is answered.

        Extra keyword data is only sent to the player who must answer.
        """
        self.pending = pending
        self.phase = PHASE_WAITING
        self.pending_ends_at = time.time() + self.rule_config.response_timeout
        self.emit(
            EVENT_ACTION_REQUIRED,
            to=pending.actor_id,
            kind=pending.kind,
            pending=pending.to_public(),
            ends_at=self.pending_ends_at,
            **private,
        )

    def clear_pending(self):
        self.pending = None
        self.pending_ends_at = None
        if self.started:
            self.phase = PHASE_MAIN
