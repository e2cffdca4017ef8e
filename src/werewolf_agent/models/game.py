"""Game type definitions shared by players and prompts"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Roles a player can be dealt"""

    VILLAGER = "villager"
    WEREWOLF = "werewolf"
    SEER = "seer"
    WITCH = "witch"


class GamePhase(str, Enum):
    PREPARING = "preparing"
    NIGHT = "night"
    DAY = "day"
    VOTING = "voting"
    ENDED = "ended"


class PersonalityType(str, Enum):
    AGGRESSIVE = "aggressive"
    CONSERVATIVE = "conservative"
    CUNNING = "cunning"


class PlayerInfo(BaseModel):
    """Public information about a seat at the table"""

    id: int = Field(description="Player number")
    is_alive: bool = Field(default=True, description="Whether the player is still in the game")


class Speech(BaseModel):
    player_id: int = Field(description="Speaker's player number")
    content: str = Field(description="What was said")
    type: str = Field(default="player", description="player, system or last_words")


class Vote(BaseModel):
    voter_id: int
    target_id: int


class PlayerContext(BaseModel):
    """Everything a player can see when asked for a decision"""

    round: int = Field(default=1, description="Current day/night round")
    current_phase: GamePhase = Field(default=GamePhase.DAY)
    alive_players: List[PlayerInfo] = Field(default_factory=list)
    all_speeches: Dict[int, List[Speech]] = Field(default_factory=dict, description="Speeches keyed by round")
    all_votes: Dict[int, List[Vote]] = Field(default_factory=dict, description="Votes keyed by round")


class PotionUsage(BaseModel):
    heal: bool = False
    poison: bool = False


class WitchContext(PlayerContext):
    """Context for the witch's night action"""

    killed_tonight: Optional[int] = Field(default=None, description="Player killed by the werewolves tonight")
    potion_used: PotionUsage = Field(default_factory=PotionUsage)


class Investigation(BaseModel):
    target: int
    is_good: bool


class SeerContext(PlayerContext):
    """Context for the seer, including earlier investigation results"""

    investigated_players: Dict[int, Investigation] = Field(
        default_factory=dict, description="Investigation results keyed by round"
    )
