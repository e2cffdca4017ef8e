"""
AI player.

A :class:`PlayerAgent` is one seat at the table.  It is unbound until
:meth:`PlayerAgent.start_game` deals it a role, and from then on it
answers the game's questions (speak, vote, use a night ability) by
prompting a language model through the pipeline in
:mod:`werewolf_agent.agents.base`.

Speaking and voting never fail for lack of a role or an API key: the
player returns a fixed fallback answer instead.  Night actions are
stricter and raise :class:`~werewolf_agent.errors.AbilityUnavailableError`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic_ai.models import Model

from werewolf_agent import prompts, telemetry
from werewolf_agent.agents.base import BaseAgent
from werewolf_agent.agents.providers import PROVIDERS, ProviderRegistry
from werewolf_agent.config import PlayerConfig
from werewolf_agent.errors import AbilityUnavailableError
from werewolf_agent.models.credentials import Credential, ModelSelection
from werewolf_agent.models.game import PersonalityType, PlayerContext, Role
from werewolf_agent.models.responses import (
    ROLE_SCHEMA_MAP,
    NightActionResponse,
    SpeechResponse,
    VotingResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_SPEECH = "I need to think carefully about the current situation."
DEFAULT_VOTE_TARGET = 1
DEFAULT_VOTE_REASON = "Default vote for player 1"
LAST_WORDS = "Sad to leave the game so soon. I hope the good side wins!"

SPEECH_FORMAT = (
    "\n\nReturn JSON with the following field:\n"
    "- speech: what you say (20-50 words of natural conversation that every player hears)\n\n"
    "Return the JSON result directly, without any other explanation."
)
VOTE_FORMAT = "\n\nNote: return the vote strictly as JSON with the fields target and reason."


class PlayerAgent(BaseAgent):
    """Language model backed Werewolf player.

    :param config: per-player configuration (see :class:`~werewolf_agent.config.PlayerConfig`)
    :param providers: provider registry used to build models
    """

    def __init__(self, config: PlayerConfig, providers: ProviderRegistry = PROVIDERS):
        super().__init__(config)
        self.providers = providers
        self.game_id: Optional[str] = None
        self.player_id: Optional[int] = None
        self.role: Optional[Union[Role, str]] = None
        self.teammates: Optional[List[int]] = None
        self.credential: Optional[Credential] = None

    @property
    def name(self) -> str:
        return f"Player {self.player_id}" if self.player_id is not None else "Player"

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def set_api_key(
        self,
        api_key: str,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        """Set the runtime credential, replacing any previous one."""
        self.set_credential(Credential(api_key=api_key, provider=provider, model=model, base_url=base_url))

    def set_credential(self, credential: Credential) -> None:
        self.credential = credential
        logger.info("[%s] Runtime API key set (%s)", self.name, credential.describe())

    def effective_api_key(self) -> Optional[str]:
        if self.credential and self.credential.api_key:
            return self.credential.api_key
        return self.config.ai.api_key

    def has_api_key(self) -> bool:
        return bool(self.effective_api_key())

    def resolve_model_selection(self) -> ModelSelection:
        """Runtime credential values win over the static config."""
        runtime = self.credential or Credential(api_key="")
        ai = self.config.ai
        return ModelSelection(
            provider=runtime.provider or ai.provider,
            model=runtime.model or ai.model,
            api_key=self.effective_api_key(),
            base_url=runtime.base_url or ai.base_url,
        )

    def get_model(self) -> Model:
        return self.providers.create_model(self.resolve_model_selection())

    # ------------------------------------------------------------------
    # Game lifecycle
    # ------------------------------------------------------------------

    async def start_game(
        self,
        game_id: str,
        role: Union[Role, str],
        player_id: int,
        teammates: Optional[List[int]] = None,
    ) -> None:
        """Bind this player to a game.

        Calling it again rebinds every field.  Role names that are not
        a known :class:`Role` are kept as given; such a player can speak
        and vote but has no night action.
        """
        self.game_id = game_id
        self.role = _coerce_role(role)
        self.player_id = player_id
        self.teammates = list(teammates or [])

        telemetry.create_game_session(
            game_id,
            {"player_id": player_id, "role": _role_value(self.role), "teammates": self.teammates},
        )

        if self.config.logging.enabled:
            logger.info("[%s] Started game %s as %s", self.name, game_id, _role_value(self.role))
            if self.teammates:
                logger.info("[%s] Teammates: %s", self.name, ", ".join(str(t) for t in self.teammates))

    async def speak(self, context: PlayerContext) -> SpeechResponse:
        if not self.role:
            logger.warning("[%s] speak: no role assigned, returning fallback", self.name)
            return SpeechResponse(speech=DEFAULT_SPEECH)
        if not self.has_api_key():
            logger.warning("[%s] speak: no API key set, returning fallback", self.name)
            return SpeechResponse(speech=DEFAULT_SPEECH)

        return await self.generate("speech-generation", SpeechResponse, self._build_speech_prompt(context))

    async def vote(self, context: PlayerContext) -> VotingResponse:
        if not self.role:
            logger.warning("[%s] vote: no role assigned, returning fallback", self.name)
            return VotingResponse(target=DEFAULT_VOTE_TARGET, reason=DEFAULT_VOTE_REASON)
        if not self.has_api_key():
            logger.warning("[%s] vote: no API key set, returning fallback", self.name)
            return VotingResponse(target=DEFAULT_VOTE_TARGET, reason=DEFAULT_VOTE_REASON)

        return await self.generate("vote-generation", VotingResponse, self._build_vote_prompt(context))

    async def use_ability(self, context: PlayerContext) -> NightActionResponse:
        """Decide this player's night action.

        :raises AbilityUnavailableError: without a role or API key, or
            for a role that has no night action
        :raises GenerationError: if the model gives no usable answer
        """
        if not self.role or not self.has_api_key():
            raise AbilityUnavailableError("I have no special ability to use.")
        if self.role == Role.VILLAGER:
            raise AbilityUnavailableError("Villager has no night action, should be skipped")

        schema = ROLE_SCHEMA_MAP.get(self.role)
        if schema is None:
            raise AbilityUnavailableError(f"Unknown role: {_role_value(self.role)}")

        return await self.generate("ability-generation", schema, prompts.get_night_action(self, context))

    async def last_words(self) -> str:
        return LAST_WORDS

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_status(self) -> Dict[str, Any]:
        return {
            "game_id": self.game_id,
            "player_id": self.player_id,
            "role": _role_value(self.role),
            "teammates": self.teammates,
            "is_alive": True,
            "config": {"personality": self.config.game.personality},
        }

    def get_role(self) -> Optional[Union[Role, str]]:
        return self.role

    def get_player_id(self) -> Optional[int]:
        return self.player_id

    def get_teammates(self) -> Optional[List[int]]:
        return self.teammates

    def get_game_id(self) -> Optional[str]:
        return self.game_id

    def get_personality_prompt(self) -> str:
        """Personality preamble for prompts, empty when no strategy is configured."""
        strategy = self.config.game.strategy
        if not strategy:
            return ""
        # "balanced" players are presented as cunning
        personality = PersonalityType.CUNNING.value if strategy == "balanced" else strategy
        return prompts.get_personality(personality) + "\n\n"

    # ------------------------------------------------------------------
    # Prompt building
    # ------------------------------------------------------------------

    def _build_speech_prompt(self, context: PlayerContext) -> str:
        return prompts.get_speech(self, context) + SPEECH_FORMAT

    def _build_vote_prompt(self, context: PlayerContext) -> str:
        check_results = None
        if self.role == Role.SEER:
            check_results = seer_check_results(context)
        voting = prompts.get_voting(self, context, check_results=check_results)
        return self.get_personality_prompt() + voting + VOTE_FORMAT


def seer_check_results(context: PlayerContext) -> Dict[str, str]:
    """Map investigated player number to ``"good"`` or ``"werewolf"``."""
    investigated = getattr(context, "investigated_players", None) or {}
    return {
        str(investigation.target): "good" if investigation.is_good else "werewolf"
        for investigation in investigated.values()
    }


def _coerce_role(role: Union[Role, str, None]) -> Optional[Union[Role, str]]:
    if role is None or isinstance(role, Role):
        return role
    try:
        return Role(role)
    except ValueError:
        return role


def _role_value(role: Optional[Union[Role, str]]) -> Optional[str]:
    return role.value if isinstance(role, Role) else role
