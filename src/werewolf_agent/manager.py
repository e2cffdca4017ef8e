"""
Player registry.

:class:`PlayerManager` owns every live :class:`~werewolf_agent.agents.player.PlayerAgent`
in the process, keyed by player number.  It derives each player's
configuration from a default :class:`~werewolf_agent.config.PlayerConfig`
and can push one API credential to all current and future players.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from werewolf_agent.agents.player import PlayerAgent
from werewolf_agent.agents.providers import PROVIDERS, ProviderRegistry
from werewolf_agent.config import DEFAULT_PLAYER_CONFIG, PlayerConfig
from werewolf_agent.errors import PlayerNotFoundError
from werewolf_agent.models.credentials import Credential

logger = logging.getLogger(__name__)


class PlayerManager:
    """Registry of AI players.

    :param default_config: template for every player's configuration
    :param providers: provider registry handed to each new player
    """

    def __init__(self, default_config: PlayerConfig = DEFAULT_PLAYER_CONFIG, providers: ProviderRegistry = PROVIDERS):
        self.default_config = default_config
        self.providers = providers
        self._players: Dict[int, PlayerAgent] = {}
        self._configs: Dict[int, PlayerConfig] = {}
        self._global_credential: Optional[Credential] = None

    def create_player(self, player_id: int, personality: Optional[str] = None) -> PlayerAgent:
        """Return the player for ``player_id``, creating it if needed.

        An existing player is returned unchanged; ``personality`` is
        then ignored.
        """
        existing = self._players.get(player_id)
        if existing is not None:
            logger.warning("Player %s already exists, returning existing instance", player_id)
            return existing

        config = self.default_config.with_personality(personality)
        player = PlayerAgent(config, providers=self.providers)
        self._players[player_id] = player
        self._configs[player_id] = config

        if self._global_credential and self._global_credential.api_key:
            player.set_credential(self._global_credential)

        logger.info("Created player %s with personality: %s", player_id, config.game.personality or "default")
        return player

    def remove_player(self, player_id: int) -> bool:
        removed = self._players.pop(player_id, None) is not None
        self._configs.pop(player_id, None)
        if removed:
            logger.info("Removed player %s", player_id)
        else:
            logger.warning("Player %s not found", player_id)
        return removed

    def get_player(self, player_id: int) -> PlayerAgent:
        """Look up a player.

        :raises PlayerNotFoundError: if the player was never created or was removed
        """
        try:
            return self._players[player_id]
        except KeyError:
            raise PlayerNotFoundError(player_id) from None

    def get_player_config(self, player_id: int) -> PlayerConfig:
        try:
            return self._configs[player_id]
        except KeyError:
            raise PlayerNotFoundError(player_id) from None

    def has_player(self, player_id: int) -> bool:
        return player_id in self._players

    def get_player_ids(self) -> List[int]:
        return sorted(self._players)

    def get_player_count(self) -> int:
        return len(self._players)

    def get_all_statuses(self) -> List[Dict[str, Any]]:
        return [
            {"player_id": player_id, "status": player.get_status()}
            for player_id, player in self._players.items()
        ]

    def clear(self) -> None:
        """Drop every player.  The global credential is kept."""
        self._players.clear()
        self._configs.clear()
        logger.info("Cleared all players")

    def health_check(self) -> Dict[str, Any]:
        active = sum(1 for player in self._players.values() if player.get_status()["game_id"])
        return {
            "total": len(self._players),
            "active": active,
            "player_ids": self.get_player_ids(),
        }

    def set_api_key_for_all(
        self,
        api_key: str,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        """Use this credential for every current and future player."""
        credential = Credential(api_key=api_key, provider=provider, model=model, base_url=base_url)
        self._global_credential = credential
        for player in self._players.values():
            player.set_credential(credential)
        logger.info("Set API key for all %d players (%s)", len(self._players), credential.describe())

    def get_global_credential(self) -> Optional[Credential]:
        return self._global_credential
