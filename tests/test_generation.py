"""Tests for the structured generation pipeline."""

from unittest.mock import AsyncMock

import pytest
from pydantic_ai.exceptions import UnexpectedModelBehavior
from pydantic_ai.models.test import TestModel as StubModel  # not a test class

from werewolf_agent.agents.base import (
    build_fallback_prompt,
    clean_parsed_object,
    extract_json_object,
    is_no_object_error,
)
from werewolf_agent.errors import GenerationError
from werewolf_agent.models import SpeechResponse, VotingResponse, WitchNightAction


class TestJsonHelpers:
    """Tests for fallback JSON extraction and cleaning."""

    def test_extracts_object_from_prose(self):
        text = 'Here you go: {"target": 2, "reason": "x", "extra": "y"} hope that helps'
        assert extract_json_object(text) == {"target": 2, "reason": "x", "extra": "y"}

    def test_extracts_nested_object(self):
        text = '```json\n{"speech": "hi", "meta": {"tone": "calm"}}\n```'
        assert extract_json_object(text)["meta"] == {"tone": "calm"}

    def test_no_object_raises(self):
        with pytest.raises(ValueError, match="No JSON object"):
            extract_json_object("I vote for player 3")

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError):
            extract_json_object("{target: 2}")

    def test_clean_drops_extra_and_null_fields(self):
        parsed = {"target": 2, "reason": None, "extra": "y"}
        assert clean_parsed_object(parsed, VotingResponse) == {"target": 2}

    def test_clean_does_not_coerce(self):
        parsed = {"target": "2", "reason": "x"}
        assert clean_parsed_object(parsed, VotingResponse) == {"target": "2", "reason": "x"}

    def test_fallback_prompt_names_fields(self):
        prompt = build_fallback_prompt("Vote now.", VotingResponse)
        assert prompt.startswith("Vote now.")
        assert '"target"' in prompt and '"reason"' in prompt
        assert "Only output the JSON object." in prompt

    def test_no_object_signature(self):
        assert is_no_object_error(UnexpectedModelBehavior("Exceeded maximum retries"))
        assert is_no_object_error(RuntimeError("No object generated: response did not match schema"))
        assert not is_no_object_error(RuntimeError("connection reset"))


class TestStructuredGeneration:
    """Structured output through pydantic-ai."""

    @pytest.mark.asyncio
    async def test_structured_success(self, player, monkeypatch):
        monkeypatch.setattr(player, "get_model", lambda: StubModel())
        result = await player.generate("speech-generation", SpeechResponse, "Say something.")
        assert isinstance(result, SpeechResponse)
        assert isinstance(result.speech, str)

    @pytest.mark.asyncio
    async def test_settings_come_from_config(self, player, monkeypatch):
        generate_object = AsyncMock(return_value=SpeechResponse(speech="ok"))
        monkeypatch.setattr(player, "get_model", lambda: "model")
        monkeypatch.setattr(player, "_generate_object", generate_object)

        await player.generate("speech-generation", SpeechResponse, "prompt")
        await player.generate("speech-generation", SpeechResponse, "prompt", max_tokens=50, temperature=0.0)

        first, second = (call.args[3] for call in generate_object.await_args_list)
        assert first == {"max_tokens": player.config.ai.max_tokens, "temperature": player.config.ai.temperature}
        assert second == {"max_tokens": 50, "temperature": 0.0}

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self, player, monkeypatch):
        generate_text = AsyncMock()
        monkeypatch.setattr(player, "get_model", lambda: "model")
        monkeypatch.setattr(player, "_generate_object", AsyncMock(side_effect=RuntimeError("401 unauthorized")))
        monkeypatch.setattr(player, "_generate_text", generate_text)

        with pytest.raises(GenerationError) as excinfo:
            await player.generate("vote-generation", VotingResponse, "prompt")

        assert excinfo.value.function_id == "vote-generation"
        assert excinfo.value.fallback is False
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert "vote-generation" in str(excinfo.value)
        generate_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_model_build_failure_is_generation_error(self, player, monkeypatch):
        def broken():
            raise RuntimeError("missing api key")

        monkeypatch.setattr(player, "get_model", broken)
        with pytest.raises(GenerationError, match="missing api key"):
            await player.generate("speech-generation", SpeechResponse, "prompt")


class TestFallbackGeneration:
    """Text fallback when no structured object is produced."""

    @pytest.fixture
    def no_object(self, player, monkeypatch):
        monkeypatch.setattr(
            player,
            "_generate_object",
            AsyncMock(side_effect=UnexpectedModelBehavior("Exceeded maximum retries (1) for output validation")),
        )

    @pytest.mark.asyncio
    async def test_fallback_cleans_response(self, player, monkeypatch, no_object):
        text = 'Sure! {"target": 2, "reason": "x", "extra": "y"} Good luck.'
        monkeypatch.setattr(player, "get_model", lambda: StubModel(custom_output_text=text))

        result = await player.generate("vote-generation", VotingResponse, "Vote now.")

        assert isinstance(result, VotingResponse)
        assert result.target == 2
        assert result.reason == "x"
        assert result.model_fields_set == {"target", "reason"}
        assert not hasattr(result, "extra")

    @pytest.mark.asyncio
    async def test_fallback_prompt_sent_to_text_model(self, player, monkeypatch, no_object):
        generate_text = AsyncMock(return_value='{"action": "idle", "heal_target": null}')
        monkeypatch.setattr(player, "get_model", lambda: "model")
        monkeypatch.setattr(player, "_generate_text", generate_text)

        result = await player.generate("ability-generation", WitchNightAction, "Witch, act.")

        prompt = generate_text.await_args.args[1]
        assert prompt.startswith("Witch, act.")
        assert '"poison_target"' in prompt
        assert result.action == "idle"
        assert result.model_fields_set == {"action"}

    @pytest.mark.asyncio
    async def test_fallback_without_json_raises(self, player, monkeypatch, no_object):
        monkeypatch.setattr(player, "get_model", lambda: StubModel(custom_output_text="I vote for 3."))

        with pytest.raises(GenerationError) as excinfo:
            await player.generate("vote-generation", VotingResponse, "Vote now.")

        assert excinfo.value.fallback is True
        assert "(fallback)" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_fallback_backend_error_raises(self, player, monkeypatch, no_object):
        monkeypatch.setattr(player, "get_model", lambda: "model")
        monkeypatch.setattr(player, "_generate_text", AsyncMock(side_effect=RuntimeError("timeout")))

        with pytest.raises(GenerationError, match="timeout"):
            await player.generate("speech-generation", SpeechResponse, "Speak.")

    @pytest.mark.asyncio
    async def test_end_to_end_vote_via_fallback(self, player, player_context, monkeypatch, no_object):
        await player.start_game("game-1", "villager", 3, [])
        text = '{"target": 4, "reason": "Player 4 dodged every question."}'
        monkeypatch.setattr(player, "get_model", lambda: StubModel(custom_output_text=text))

        vote = await player.vote(player_context)

        assert vote.target == 4
        assert vote.reason == "Player 4 dodged every question."

    @pytest.mark.asyncio
    async def test_fallback_null_required_field_is_readable(self, player, player_context, monkeypatch, no_object):
        await player.start_game("game-1", "villager", 3, [])
        monkeypatch.setattr(player, "get_model", lambda: "model")
        monkeypatch.setattr(player, "_generate_text", AsyncMock(return_value='{"target": 2, "reason": null}'))

        vote = await player.vote(player_context)

        assert isinstance(vote, VotingResponse)
        assert vote.model_fields_set == {"target"}
        assert {name: getattr(vote, name) for name in VotingResponse.model_fields} == {"target": 2, "reason": None}

    @pytest.mark.asyncio
    async def test_fallback_missing_speech_is_readable(self, player, monkeypatch, no_object):
        monkeypatch.setattr(player, "get_model", lambda: "model")
        monkeypatch.setattr(player, "_generate_text", AsyncMock(return_value='{"words": "hello"}'))

        speech = await player.generate("speech-generation", SpeechResponse, "Speak.")

        assert speech.speech is None
        assert speech.model_fields_set == set()
