"""
Structured response schemas.

These models are the ``output_type`` of every generation request.  A
night action schema exists only for roles that act at night; the
:data:`ROLE_SCHEMA_MAP` table is the single place that decides which
roles those are.
"""

from typing import Dict, Literal, Type, Union

from pydantic import BaseModel, Field

from .game import Role


class SpeechResponse(BaseModel):
    """A public statement during the day"""

    speech: str = Field(description="Your speech, 20-50 words of natural conversation that every player hears")


class VotingResponse(BaseModel):
    """A day vote"""

    target: int = Field(description="Number of the player you vote to eliminate")
    reason: str = Field(description="Short reason for your vote")


class WerewolfNightAction(BaseModel):
    action: Literal["kill"] = Field(default="kill", description="Always 'kill'")
    target: int = Field(description="Number of the player to kill")
    reason: str = Field(description="Why this player should die")


class SeerNightAction(BaseModel):
    action: Literal["investigate"] = Field(default="investigate", description="Always 'investigate'")
    target: int = Field(description="Number of the player to investigate")
    reason: str = Field(description="Why you want to check this player")


class WitchNightAction(BaseModel):
    """The witch may use the antidote, the poison, both or neither"""

    action: Literal["using", "idle"] = Field(description="'using' if any potion is used, otherwise 'idle'")
    heal_target: int = Field(default=0, description="Player to save with the antidote, 0 for none")
    heal_reason: str = Field(default="", description="Why you save this player")
    poison_target: int = Field(default=0, description="Player to poison, 0 for none")
    poison_reason: str = Field(default="", description="Why you poison this player")


NightActionResponse = Union[WerewolfNightAction, SeerNightAction, WitchNightAction]

ROLE_SCHEMA_MAP: Dict[Role, Type[BaseModel]] = {
    Role.WEREWOLF: WerewolfNightAction,
    Role.SEER: SeerNightAction,
    Role.WITCH: WitchNightAction,
}
