"""Pytest configuration and fixtures for werewolf_agent tests."""

import sys
from pathlib import Path

import logfire
import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

# Keep telemetry local during tests
logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def config():
    """A player config without an API key."""
    from werewolf_agent.config import PlayerConfig

    return PlayerConfig()


@pytest.fixture
def keyed_config():
    """A player config that already carries an API key."""
    from werewolf_agent.config import AIConfig, PlayerConfig

    return PlayerConfig(ai=AIConfig(provider="openai", model="gpt-4o-mini", api_key="sk-config"))


@pytest.fixture
def manager(config):
    from werewolf_agent.manager import PlayerManager

    return PlayerManager(config)


@pytest.fixture
def player(keyed_config):
    from werewolf_agent.agents.player import PlayerAgent

    return PlayerAgent(keyed_config)


@pytest.fixture
def player_context():
    from werewolf_agent.models import PlayerContext, PlayerInfo, Speech

    return PlayerContext(
        round=2,
        alive_players=[PlayerInfo(id=i) for i in range(1, 7)],
        all_speeches={
            1: [
                Speech(player_id=1, content="I think player 4 is quiet."),
                Speech(player_id=4, content="I am just a villager."),
            ]
        },
    )


@pytest.fixture
def seer_context(player_context):
    from werewolf_agent.models import Investigation, SeerContext

    return SeerContext(
        **player_context.model_dump(),
        investigated_players={
            1: Investigation(target=4, is_good=False),
            2: Investigation(target=5, is_good=True),
        },
    )


@pytest.fixture
def witch_context(player_context):
    from werewolf_agent.models import PotionUsage, WitchContext

    return WitchContext(
        **player_context.model_dump(),
        killed_tonight=3,
        potion_used=PotionUsage(heal=False, poison=True),
    )
