"""Exception types raised by the werewolf_agent package."""

from __future__ import annotations

from typing import Optional


class WerewolfAgentError(Exception):
    """Base class for all werewolf_agent errors."""


class PlayerNotFoundError(WerewolfAgentError, KeyError):
    """Raised when a player id has no registered session."""

    def __init__(self, player_id: int):
        self.player_id = player_id
        super().__init__(f"Player {player_id} not found. Please create the player first.")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class AbilityUnavailableError(WerewolfAgentError):
    """Raised when a player cannot perform a night action."""


class GenerationError(WerewolfAgentError):
    """Raised when the language model could not produce a usable response.

    :param function_id: the generation step that failed (e.g. ``vote-generation``)
    :param cause: the underlying exception, if any
    :param fallback: whether the failure happened in the text fallback path
    """

    def __init__(self, function_id: str, cause: Optional[BaseException] = None, fallback: bool = False):
        self.function_id = function_id
        self.cause = cause
        self.fallback = fallback
        stage = f"{function_id} (fallback)" if fallback else function_id
        super().__init__(f"Failed to generate {stage}: {cause}")
