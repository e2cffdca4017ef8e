"""
Base definitions for AI players.

This module holds the generation pipeline shared by every decision an
AI player makes.  :class:`BaseAgent` asks a pydantic-ai model for an
object that matches a response schema.  If the model cannot produce
one (pydantic-ai raises :class:`~pydantic_ai.exceptions.UnexpectedModelBehavior`
once output validation retries are exhausted) the request is repeated
once as free text with explicit JSON instructions, and the first JSON
object in the reply is projected onto the schema's fields.

Every other failure is raised as :class:`~werewolf_agent.errors.GenerationError`
naming the step that failed.  Nothing is retried beyond that single
structured-to-text degradation.

Sub-classes implement :meth:`BaseAgent.get_model` to choose the
language model for each request.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic_ai import Agent
from pydantic_ai.exceptions import UnexpectedModelBehavior
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from werewolf_agent.config import PlayerConfig
from werewolf_agent.errors import GenerationError
from werewolf_agent.telemetry import generation_span

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

NO_OBJECT_MESSAGE = "No object generated"

# Greedy: first "{" through the last "}" in the text
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def is_no_object_error(exc: BaseException) -> bool:
    """Whether ``exc`` means the model produced no valid structured object."""
    return isinstance(exc, UnexpectedModelBehavior) or NO_OBJECT_MESSAGE in str(exc)


def describe_schema(schema: Type[BaseModel]) -> str:
    """JSON description of the schema's fields, used in fallback prompts."""
    properties = schema.model_json_schema().get("properties", {})
    return json.dumps(properties, indent=2, ensure_ascii=False)


def build_fallback_prompt(prompt: str, schema: Type[BaseModel]) -> str:
    return (
        f"{prompt}\n\n"
        "IMPORTANT: You must respond with a valid JSON object that matches this exact schema:\n"
        f"{describe_schema(schema)}\n\n"
        "Do not include any text before or after the JSON. Only output the JSON object."
    )


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse the first top-level JSON object found in ``text``.

    :raises ValueError: if no object is present or it is not valid JSON
    """
    match = _JSON_OBJECT_RE.search(text or "")
    if not match:
        raise ValueError("No JSON object found in response")
    parsed = json.loads(match.group(0))
    if not isinstance(parsed, dict):
        raise ValueError("Response JSON is not an object")
    return parsed


def clean_parsed_object(obj: Dict[str, Any], schema: Type[BaseModel]) -> Dict[str, Any]:
    """Keep only the schema's fields, dropping unknown keys and null values.

    Values are passed through as-is; no type coercion happens here.
    """
    return {
        key: obj[key]
        for key in schema.model_fields
        if key in obj and obj[key] is not None
    }


def build_partial_result(schema: Type[T], cleaned: Dict[str, Any]) -> T:
    """Build a ``schema`` instance from cleaned fallback fields without validation.

    Required fields missing from ``cleaned`` are set to ``None`` so every
    attribute can be read; only the fields the model actually returned
    are reported in ``model_fields_set``.
    """
    values = {name: None for name, field in schema.model_fields.items() if field.is_required()}
    values.update(cleaned)
    return schema.model_construct(_fields_set=set(cleaned), **values)


class BaseAgent:
    """Base class for language model backed players.

    :param config: the player's configuration; ``config.ai`` supplies
        the default token limit and temperature for every request
    """

    def __init__(self, config: PlayerConfig):
        self.config = config

    @property
    def name(self) -> str:
        return type(self).__name__

    def get_model(self) -> Model:
        """Return the pydantic-ai model for the next request.

        Sub-classes must implement this.
        """
        raise NotImplementedError

    def _model_settings(self, max_tokens: Optional[int] = None, temperature: Optional[float] = None) -> ModelSettings:
        return ModelSettings(
            max_tokens=max_tokens or self.config.ai.max_tokens,
            temperature=temperature if temperature is not None else self.config.ai.temperature,
        )

    async def _generate_object(self, model: Model, schema: Type[T], prompt: str, settings: ModelSettings) -> T:
        agent = Agent(model, output_type=schema)
        result = await agent.run(prompt, model_settings=settings)
        return result.output

    async def _generate_text(self, model: Model, prompt: str, settings: ModelSettings) -> str:
        agent = Agent(model, output_type=str)
        result = await agent.run(prompt, model_settings=settings)
        return result.output

    async def generate(
        self,
        function_id: str,
        schema: Type[T],
        prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> T:
        """Generate a ``schema`` instance for ``prompt``.

        :param function_id: name of the calling step, used in logs and errors
        :param schema: the response model to produce
        :param prompt: the full prompt text
        :param max_tokens: override ``config.ai.max_tokens`` for this call
        :param temperature: override ``config.ai.temperature`` for this call
        :raises GenerationError: if neither structured nor fallback generation succeeds
        """
        settings = self._model_settings(max_tokens, temperature)
        logger.debug("[%s] %s prompt:\n%s", self.name, function_id, prompt)

        with generation_span(function_id, player=self.name, schema=schema.__name__):
            try:
                model = self.get_model()
            except Exception as exc:  # noqa: BLE001 surfaced as a generation failure
                logger.error("[%s] %s: could not build model: %s", self.name, function_id, exc)
                raise GenerationError(function_id, exc) from exc

            try:
                output = await self._generate_object(model, schema, prompt, settings)
            except Exception as exc:  # noqa: BLE001 classified below
                if is_no_object_error(exc):
                    logger.warning(
                        "[%s] %s: structured generation failed, falling back to text generation",
                        self.name,
                        function_id,
                    )
                    return await self._generate_with_fallback(function_id, model, schema, prompt, settings)
                logger.error("[%s] %s failed: %s", self.name, function_id, exc)
                raise GenerationError(function_id, exc) from exc

        logger.debug("[%s] %s result: %s", self.name, function_id, output)
        return output

    async def _generate_with_fallback(
        self,
        function_id: str,
        model: Model,
        schema: Type[T],
        prompt: str,
        settings: ModelSettings,
    ) -> T:
        try:
            text = await self._generate_text(model, build_fallback_prompt(prompt, schema), settings)
            logger.debug("[%s] %s raw fallback response: %s", self.name, function_id, text)
            cleaned = clean_parsed_object(extract_json_object(text), schema)
        except Exception as exc:  # noqa: BLE001 every fallback failure is reported the same way
            logger.error("[%s] %s fallback failed: %s", self.name, function_id, exc)
            raise GenerationError(function_id, exc, fallback=True) from exc

        logger.debug("[%s] %s parsed fallback result: %s", self.name, function_id, cleaned)
        return build_partial_result(schema, cleaned)
