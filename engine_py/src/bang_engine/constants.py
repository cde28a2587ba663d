"""Game constants: cards, roles, characters, phases and event names"""

from typing import Dict, List, Optional, Tuple

# Phases
PHASE_LOBBY = 'lobby'
PHASE_MAIN = 'main'
PHASE_WAITING = 'waiting'

# Card keys
CARD_BANG = 'bang'
CARD_MISSED = 'missed'
CARD_BEER = 'beer'
CARD_STAGECOACH = 'stagecoach'
CARD_WELLSFARGO = 'wellsfargo'
CARD_SALOON = 'saloon'
CARD_PANIC = 'panic'
CARD_CATBALOU = 'catbalou'
CARD_INDIANS = 'indians'
CARD_GATLING = 'gatling'
CARD_DUEL = 'duel'
CARD_BARREL = 'barrel'
CARD_MUSTANG = 'mustang'
CARD_SCOPE = 'scope'
CARD_JAIL = 'jail'
CARD_DYNAMITE = 'dynamite'
CARD_WEAPON = 'weapon'

EQUIPMENT_KEYS = {CARD_BARREL, CARD_MUSTANG, CARD_SCOPE, CARD_JAIL, CARD_DYNAMITE, CARD_WEAPON}

# (key, count, weapon_name, range)
DECK_COMPOSITION: List[Tuple[str, int, Optional[str], Optional[int]]] = [
    (CARD_BANG, 25, None, None),
    (CARD_MISSED, 12, None, None),
    (CARD_BEER, 6, None, None),
    (CARD_STAGECOACH, 2, None, None),
    (CARD_WELLSFARGO, 1, None, None),
    (CARD_SALOON, 1, None, None),
    (CARD_PANIC, 4, None, None),
    (CARD_CATBALOU, 4, None, None),
    (CARD_INDIANS, 2, None, None),
    (CARD_GATLING, 1, None, None),
    (CARD_DUEL, 3, None, None),
    (CARD_BARREL, 2, None, None),
    (CARD_MUSTANG, 2, None, None),
    (CARD_SCOPE, 1, None, None),
    (CARD_JAIL, 3, None, None),
    (CARD_DYNAMITE, 1, None, None),
    (CARD_WEAPON, 2, 'volcanic', 1),
    (CARD_WEAPON, 3, 'schofield', 2),
    (CARD_WEAPON, 2, 'remington', 3),
    (CARD_WEAPON, 2, 'carabine', 4),
    (CARD_WEAPON, 1, 'winchester', 5),
]

WEAPON_RANGES: Dict[str, int] = {
    'volcanic': 1,
    'schofield': 2,
    'remington': 3,
    'carabine': 4,
    'winchester': 5,
}
MIN_RANGE = 1
MAX_RANGE = 5
UNREACHABLE = 999

# Suits and ranks used by draw checks
SUIT_SPADES = 'spades'
SUIT_HEARTS = 'hearts'
SUIT_DIAMONDS = 'diamonds'
SUIT_CLUBS = 'clubs'
SUITS = [SUIT_SPADES, SUIT_HEARTS, SUIT_DIAMONDS, SUIT_CLUBS]
RANKS = ['A', '2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K']

# Draw check kinds
CHECK_DYNAMITE = 'dynamite'
CHECK_JAIL = 'jail'
CHECK_BARREL = 'barrel'

# Roles
ROLE_SHERIFF = 'sheriff'
ROLE_DEPUTY = 'deputy'
ROLE_OUTLAW = 'outlaw'
ROLE_RENEGADE = 'renegade'

ROLE_DISTRIBUTION: Dict[int, List[str]] = {
    4: [ROLE_SHERIFF, ROLE_OUTLAW, ROLE_OUTLAW, ROLE_RENEGADE],
    5: [ROLE_SHERIFF, ROLE_OUTLAW, ROLE_OUTLAW, ROLE_RENEGADE, ROLE_DEPUTY],
    6: [ROLE_SHERIFF, ROLE_OUTLAW, ROLE_OUTLAW, ROLE_OUTLAW, ROLE_RENEGADE, ROLE_DEPUTY],
    7: [ROLE_SHERIFF, ROLE_OUTLAW, ROLE_OUTLAW, ROLE_OUTLAW, ROLE_RENEGADE,
        ROLE_DEPUTY, ROLE_DEPUTY],
}

# Winning factions
WINNER_SHERIFF = 'sheriff'
WINNER_OUTLAWS = 'outlaws'
WINNER_RENEGADE = 'renegade'

# Characters
BART_CASSIDY = 'bart_cassidy'
BLACK_JACK = 'black_jack'
CALAMITY_JANET = 'calamity_janet'
EL_GRINGO = 'el_gringo'
JESSE_JONES = 'jesse_jones'
JOURDONNAIS = 'jourdonnais'
KIT_CARLSON = 'kit_carlson'
LUCKY_DUKE = 'lucky_duke'
PAUL_REGRET = 'paul_regret'
PEDRO_RAMIREZ = 'pedro_ramirez'
ROSE_DOOLAN = 'rose_doolan'
SID_KETCHUM = 'sid_ketchum'
SLAB_THE_KILLER = 'slab_the_killer'
SUZY_LAFAYETTE = 'suzy_lafayette'
VULTURE_SAM = 'vulture_sam'
WILLY_THE_KID = 'willy_the_kid'

# Pending kinds
PENDING_BANG = 'bang'
PENDING_INDIANS = 'indians'
PENDING_GATLING = 'gatling'
PENDING_DUEL = 'duel'
PENDING_DRAW_CHOICE = 'draw_choice'
PENDING_STEAL_CHOICE = 'steal_choice'
PENDING_DRAW_SOURCE = 'draw_source'
PENDING_DISCARD_LIMIT = 'discard_limit'

# Draw sources
SOURCE_DECK = 'deck'
SOURCE_DISCARD = 'discard'

# Turn end reasons
REASON_MANUAL = 'manual'
REASON_TIMEOUT = 'timeout'
REASON_ELIMINATED = 'eliminated'
REASON_JAILED = 'jailed'

# Outbound event types
EVENT_ROOM_UPDATE = 'room_update'
EVENT_GAME_STARTED = 'game_started'
EVENT_TURN_STARTED = 'turn_started'
EVENT_TURN_ENDED = 'turn_ended'
EVENT_ACTION_REQUIRED = 'action_required'
EVENT_ACTION_RESOLVED = 'action_resolved'
EVENT_DRAW_CHECK = 'draw_check'
EVENT_PASSIVE = 'passive_triggered'
EVENT_PLAYER_ELIMINATED = 'player_eliminated'
EVENT_PLAYER_DISCONNECTED = 'player_disconnected'
EVENT_GAME_OVER = 'game_over'
