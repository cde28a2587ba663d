"""
Character capability table.

Every character is described by data: the rules engines ask the table what a
character is able to do instead of checking names at each call site.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .constants import (
    BART_CASSIDY, BLACK_JACK, CALAMITY_JANET, EL_GRINGO, JESSE_JONES,
    JOURDONNAIS, KIT_CARLSON, LUCKY_DUKE, PAUL_REGRET, PEDRO_RAMIREZ,
    ROSE_DOOLAN, SID_KETCHUM, SLAB_THE_KILLER, SUZY_LAFAYETTE, VULTURE_SAM,
    WILLY_THE_KID
)
from .models import Player

# Draw phase variants
DRAW_STANDARD = 'standard'
DRAW_PREVIEW = 'preview'          # look at three, keep two
DRAW_STEAL = 'steal'              # first card may come from another hand
DRAW_FROM_DISCARD = 'discard'     # first card may come from the discard pile


@dataclass(frozen=True)
class Character:
    name: str
    max_hp: int = 4
    defense_distance: int = 0     # added to distance when others target this player
    attack_distance: int = 0      # subtracted from distance when this player targets
    unlimited_bangs: bool = False
    missed_required: int = 1      # missed cards a target needs against this attacker
    substitutes: bool = False     # bang and missed are interchangeable
    innate_barrel: bool = False
    lucky: bool = False           # draw checks reveal two cards and keep the better one
    draws_on_hit: bool = False
    steals_on_hit: bool = False
    refill_on_empty: bool = False
    scavenger: bool = False
    discard_heal: bool = False
    draw_phase: str = DRAW_STANDARD
    reveal_second_draw: bool = False


BASIC = Character(name='basic')

CHARACTERS: Dict[str, Character] = {
    BART_CASSIDY: Character(BART_CASSIDY, draws_on_hit=True),
    BLACK_JACK: Character(BLACK_JACK, reveal_second_draw=True),
    CALAMITY_JANET: Character(CALAMITY_JANET, substitutes=True),
    EL_GRINGO: Character(EL_GRINGO, max_hp=3, steals_on_hit=True),
    JESSE_JONES: Character(JESSE_JONES, draw_phase=DRAW_STEAL),
    JOURDONNAIS: Character(JOURDONNAIS, innate_barrel=True),
    KIT_CARLSON: Character(KIT_CARLSON, draw_phase=DRAW_PREVIEW),
    LUCKY_DUKE: Character(LUCKY_DUKE, lucky=True),
    PAUL_REGRET: Character(PAUL_REGRET, max_hp=3, defense_distance=1),
    PEDRO_RAMIREZ: Character(PEDRO_RAMIREZ, draw_phase=DRAW_FROM_DISCARD),
    ROSE_DOOLAN: Character(ROSE_DOOLAN, attack_distance=1),
    SID_KETCHUM: Character(SID_KETCHUM, discard_heal=True),
    SLAB_THE_KILLER: Character(SLAB_THE_KILLER, missed_required=2),
    SUZY_LAFAYETTE: Character(SUZY_LAFAYETTE, refill_on_empty=True),
    VULTURE_SAM: Character(VULTURE_SAM, scavenger=True),
    WILLY_THE_KID: Character(WILLY_THE_KID, unlimited_bangs=True),
}

CHARACTER_IDS: List[str] = list(CHARACTERS)


def get_character(name: Optional[str]) -> Character:
    return CHARACTERS.get(name, BASIC) if name else BASIC


def character_of(player: Player) -> Character:
    return get_character(player.character)
