"""
Player configuration.

A :class:`PlayerConfig` bundles everything a single AI player needs:
the language model settings (``ai``), how the player behaves at the
table (``game``) and whether it prints a summary of game events
(``logging``).  The :class:`~werewolf_agent.manager.PlayerManager`
holds one default configuration and derives a per-player copy from it
when a player is created.

Configuration can be built in code or read from the environment with
:func:`load_player_config`.  A ``.env`` file in the working directory
is honoured.

ENVIRONMENT VARIABLES:
    AI_PROVIDER             openai | minimax | openrouter | custom | ollama
    AI_MODEL                model name understood by the provider
    AI_API_KEY              API key (may also be pushed at runtime)
    AI_BASE_URL             override the provider endpoint
    AI_MAX_TOKENS           maximum output tokens per generation
    AI_TEMPERATURE          sampling temperature
    PLAYER_PERSONALITY      free text personality label
    PLAYER_STRATEGY         aggressive | conservative | cunning | balanced
    PLAYER_LOGGING_ENABLED  true/false
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Optional

from dotenv import load_dotenv


@dataclass
class AIConfig:
    """Language model settings for a player"""

    provider: str = "openrouter"
    model: str = "openai/gpt-4o-mini"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    max_tokens: int = 1500
    temperature: float = 0.8


@dataclass
class GameConfig:
    """Table behaviour for a player"""

    personality: str = ""
    strategy: Optional[str] = "balanced"


@dataclass
class LoggingConfig:
    enabled: bool = True


@dataclass
class PlayerConfig:
    """Complete configuration for one AI player"""

    ai: AIConfig = field(default_factory=AIConfig)
    game: GameConfig = field(default_factory=GameConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def with_personality(self, personality: Optional[str] = None) -> "PlayerConfig":
        """Return a copy of this config with ``personality`` merged into the game section.

        Each section is copied one level deep, so later edits to this
        config do not reach the copy.  An empty or missing personality
        keeps the current one.
        """
        game = replace(self.game, personality=personality or self.game.personality)
        return replace(self, ai=replace(self.ai), game=game, logging=replace(self.logging))


DEFAULT_PLAYER_CONFIG = PlayerConfig()

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_number(name: str, default, cast):
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return cast(value)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {name}: {value!r}") from exc


def load_player_config(dotenv: bool = True) -> PlayerConfig:
    """Build a :class:`PlayerConfig` from environment variables.

    :param dotenv: load a ``.env`` file first (existing variables win)
    :returns: the configuration, with defaults for anything unset
    :raises ValueError: if a numeric variable cannot be parsed
    """
    if dotenv:
        load_dotenv()

    defaults = DEFAULT_PLAYER_CONFIG
    ai = AIConfig(
        provider=os.getenv("AI_PROVIDER") or defaults.ai.provider,
        model=os.getenv("AI_MODEL") or defaults.ai.model,
        api_key=os.getenv("AI_API_KEY") or None,
        base_url=os.getenv("AI_BASE_URL") or None,
        max_tokens=_env_number("AI_MAX_TOKENS", defaults.ai.max_tokens, int),
        temperature=_env_number("AI_TEMPERATURE", defaults.ai.temperature, float),
    )
    game = GameConfig(
        personality=os.getenv("PLAYER_PERSONALITY", defaults.game.personality),
        strategy=os.getenv("PLAYER_STRATEGY", defaults.game.strategy) or None,
    )
    logging_config = LoggingConfig(enabled=_env_bool("PLAYER_LOGGING_ENABLED", defaults.logging.enabled))
    return PlayerConfig(ai=ai, game=game, logging=logging_config)
