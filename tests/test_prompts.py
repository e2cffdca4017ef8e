"""Tests for prompt templates."""

import pytest

from werewolf_agent import prompts
from werewolf_agent.models import PersonalityType, Role, Speech


class StubPlayer:
    def __init__(self, role, player_id=3, teammates=None):
        self.role = role
        self.player_id = player_id
        self.teammates = teammates or []

    def get_role(self):
        return self.role

    def get_player_id(self):
        return self.player_id

    def get_teammates(self):
        return self.teammates

    def get_personality_prompt(self):
        return ""


def test_personality_templates_cover_every_type():
    assert set(prompts.PERSONALITY_TEMPLATES) == set(PersonalityType)


def test_unknown_personality_is_named():
    assert prompts.get_personality("chaotic") == "PERSONALITY: chaotic."


def test_format_speeches_orders_rounds():
    speeches = {
        2: [Speech(player_id=1, content="second")],
        1: [Speech(player_id=2, content="first"), Speech(player_id=0, content="Night fell.", type="system")],
    }
    lines = prompts.format_speeches(speeches).splitlines()
    assert lines == [
        "[Round 1] Player 2: first",
        "[Round 1] System: Night fell.",
        "[Round 2] Player 1: second",
    ]
    assert prompts.format_speeches(speeches, limit_rounds=1) == "[Round 2] Player 1: second"
    assert prompts.format_speeches({}) == "No one has spoken yet."


def test_witch_night_prompt(witch_context):
    prompt = prompts.get_night_action(StubPlayer(Role.WITCH), witch_context)
    assert "attacked: Player 3" in prompt
    assert "Antidote: available. Poison: used." in prompt
    assert "poison_target" in prompt


def test_seer_night_prompt_lists_checked_players(seer_context):
    prompt = prompts.get_night_action(StubPlayer(Role.SEER), seer_context)
    assert "Player 4 (werewolf)" in prompt
    assert '"investigate"' in prompt


def test_villager_has_no_night_prompt(player_context):
    with pytest.raises(ValueError):
        prompts.get_night_action(StubPlayer(Role.VILLAGER), player_context)


def test_werewolf_vote_prompt(player_context):
    prompt = prompts.get_voting(StubPlayer(Role.WEREWOLF, teammates=[5]), player_context)
    assert "teammates: 5" in prompt
    assert "without exposing your teammates" in prompt
    assert "Alive players: 1, 2, 3, 4, 5, 6." in prompt
