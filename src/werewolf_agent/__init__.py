"""
werewolf_agent package.

AI players for the Werewolf social deduction game.  The main entry
point is :class:`PlayerManager`, which creates and tracks one
:class:`PlayerAgent` per seat.  See ``werewolf_agent.agents`` for the
generation pipeline and ``werewolf_agent.models`` for the game types
and response schemas.
"""

from .agents import PlayerAgent
from .config import PlayerConfig, load_player_config
from .errors import AbilityUnavailableError, GenerationError, PlayerNotFoundError, WerewolfAgentError
from .manager import PlayerManager
from .models import Role

__all__ = [
    "PlayerManager",
    "PlayerAgent",
    "PlayerConfig",
    "load_player_config",
    "Role",
    "WerewolfAgentError",
    "PlayerNotFoundError",
    "AbilityUnavailableError",
    "GenerationError",
]
