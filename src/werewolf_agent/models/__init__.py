"""Game types and structured response schemas."""

from .game import (
    GamePhase,
    Investigation,
    PersonalityType,
    PlayerContext,
    PlayerInfo,
    PotionUsage,
    Role,
    SeerContext,
    Speech,
    Vote,
    WitchContext,
)
from .credentials import Credential, ModelSelection
from .responses import (
    ROLE_SCHEMA_MAP,
    NightActionResponse,
    SeerNightAction,
    SpeechResponse,
    VotingResponse,
    WerewolfNightAction,
    WitchNightAction,
)

__all__ = [
    "Credential",
    "ModelSelection",
    "GamePhase",
    "Investigation",
    "PersonalityType",
    "PlayerContext",
    "PlayerInfo",
    "PotionUsage",
    "Role",
    "SeerContext",
    "Speech",
    "Vote",
    "WitchContext",
    "ROLE_SCHEMA_MAP",
    "NightActionResponse",
    "SeerNightAction",
    "SpeechResponse",
    "VotingResponse",
    "WerewolfNightAction",
    "WitchNightAction",
]
