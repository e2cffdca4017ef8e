"""
agents
======

The AI player and the machinery behind it.

:class:`BaseAgent` implements the generation pipeline: structured
output through pydantic-ai, with a single fallback to free text and
JSON extraction when the model cannot produce a valid object.
:class:`PlayerAgent` builds on it to play one seat of a Werewolf game.
:class:`ProviderRegistry` turns a provider name into a pydantic-ai model.

Usage example:

    >>> from werewolf_agent.agents import PlayerAgent
    >>> from werewolf_agent.config import PlayerConfig
    >>> player = PlayerAgent(PlayerConfig())
    >>> player.set_api_key("sk-...", provider="openrouter", model="openai/gpt-4o-mini")
    >>> await player.start_game("game-1", "seer", player_id=3, teammates=[])
    >>> response = await player.speak(context)
"""

from .base import BaseAgent, clean_parsed_object, extract_json_object
from .player import PlayerAgent
from .providers import PROVIDERS, ProviderRegistry

__all__ = [
    "BaseAgent",
    "PlayerAgent",
    "ProviderRegistry",
    "PROVIDERS",
    "clean_parsed_object",
    "extract_json_object",
]
