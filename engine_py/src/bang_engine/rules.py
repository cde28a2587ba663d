"""
Game rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator

from .constants import ROLE_DISTRIBUTION


class RuleConfig(BaseModel):
    """Configuration for table size, timers and rule constants."""

    min_players: int = Field(
        default=4,
        ge=4,
        le=7,
        description="Minimum number of players required to start"
    )
    max_players: int = Field(
        default=7,
        ge=4,
        le=7,
        description="Maximum number of seats in a room"
    )
    turn_timeout: float = Field(
        default=30,
        gt=0,
        le=600,
        description="Seconds a player has to finish the main phase"
    )
    response_timeout: float = Field(
        default=12,
        gt=0,
        le=300,
        description="Seconds a player has to answer a pending request"
    )
    tick_interval: float = Field(
        default=0.5,
        gt=0,
        le=10,
        description="Seconds between scheduler sweeps"
    )
    dynamite_damage: int = Field(
        default=3,
        ge=1,
        le=5,
        description="Damage dealt when dynamite explodes"
    )
    outlaw_bounty: int = Field(
        default=3,
        ge=0,
        le=5,
        description="Cards drawn by whoever eliminates an outlaw"
    )
    draw_phase_cards: int = Field(
        default=2,
        ge=1,
        le=3,
        description="Cards drawn during the draw phase"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't fall below minimum."""
        min_players = info.data.get('min_players', 4)
        if v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    def validate_player_count(self, player_count: int) -> bool:
        """Check if a player count is valid for this configuration."""
        return self.min_players <= player_count <= self.max_players

    def get_roles(self, player_count: int) -> list:
        """Get the role set dealt for a table of the given size."""
        if player_count not in ROLE_DISTRIBUTION:
            raise ValueError(f"Unsupported player count: {player_count}")
        return list(ROLE_DISTRIBUTION[player_count])


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
