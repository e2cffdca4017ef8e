"""
Model providers.

Maps a provider name (``openai``, ``openrouter``, ``minimax``,
``custom``, ``ollama``) to a factory that builds a pydantic-ai model.
All supported backends speak the OpenAI chat completions protocol, so
every factory returns an :class:`~pydantic_ai.models.openai.OpenAIChatModel`
pointed at a different endpoint.

Unknown provider names resolve to the registry's default entry
(OpenRouter), so a typo in configuration still produces a working
player rather than an error.  New backends are added with
:meth:`ProviderRegistry.register`.
"""

from __future__ import annotations

import asyncio
import logging
import os
import weakref
from typing import Callable, Dict, List, Optional

import httpx
from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from werewolf_agent.models.credentials import ModelSelection

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
MINIMAX_BASE_URL = "https://api.minimaxi.com/v1"
OLLAMA_BASE_URL = "http://localhost:11434/v1"

OPENROUTER_HEADERS = {
    "HTTP-Referer": "https://github.com/werewolf-agent",
    "X-Title": "AI Werewolf Game",
}

ModelFactory = Callable[[ModelSelection], Model]


_HTTP_CLIENTS: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, httpx.AsyncClient]" = weakref.WeakKeyDictionary()


def _new_openrouter_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(headers=OPENROUTER_HEADERS, timeout=httpx.Timeout(600, connect=5))


def _openrouter_http_client() -> httpx.AsyncClient:
    """HTTP client for OpenRouter, shared per running event loop.

    Pooled connections are bound to the loop that opened them, so each
    loop gets its own client.  Outside a running loop a fresh client is
    returned.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return _new_openrouter_http_client()
    client = _HTTP_CLIENTS.get(loop)
    if client is None:
        client = _HTTP_CLIENTS[loop] = _new_openrouter_http_client()
    return client


def create_openai_model(selection: ModelSelection) -> Model:
    provider = OpenAIProvider(
        base_url=selection.base_url,
        api_key=selection.api_key or os.getenv("OPENAI_API_KEY"),
    )
    return OpenAIChatModel(selection.model, provider=provider)


def create_minimax_model(selection: ModelSelection) -> Model:
    provider = OpenAIProvider(
        base_url=selection.base_url or MINIMAX_BASE_URL,
        api_key=selection.api_key or os.getenv("MINIMAX_API_KEY"),
    )
    return OpenAIChatModel(selection.model, provider=provider)


def create_openrouter_model(selection: ModelSelection) -> Model:
    provider = OpenAIProvider(
        base_url=selection.base_url or OPENROUTER_BASE_URL,
        api_key=selection.api_key or os.getenv("OPENROUTER_API_KEY"),
        http_client=_openrouter_http_client(),
    )
    return OpenAIChatModel(selection.model, provider=provider)


def create_custom_model(selection: ModelSelection) -> Model:
    """OpenAI compatible endpoint without the OpenRouter attribution headers."""
    provider = OpenAIProvider(
        base_url=selection.base_url or OPENROUTER_BASE_URL,
        api_key=selection.api_key or os.getenv("OPENROUTER_API_KEY"),
    )
    return OpenAIChatModel(selection.model, provider=provider)


def create_ollama_model(selection: ModelSelection) -> Model:
    provider = OpenAIProvider(base_url=selection.base_url or OLLAMA_BASE_URL, api_key=selection.api_key)
    return OpenAIChatModel(selection.model, provider=provider)


class ProviderRegistry:
    """Provider name to model factory lookup with an explicit default."""

    def __init__(self, default: str):
        self._factories: Dict[str, ModelFactory] = {}
        self.default = default

    def register(self, name: str, factory: ModelFactory) -> None:
        self._factories[name.lower()] = factory

    def names(self) -> List[str]:
        return sorted(self._factories)

    def resolve(self, name: Optional[str]) -> ModelFactory:
        """Return the factory for ``name``, or the default factory if unknown."""
        key = (name or "").lower()
        if key in self._factories:
            return self._factories[key]
        if key:
            logger.warning("Unknown provider '%s', using default provider '%s'", name, self.default)
        return self._factories[self.default]

    def create_model(self, selection: ModelSelection) -> Model:
        return self.resolve(selection.provider)(selection)


def default_registry() -> ProviderRegistry:
    registry = ProviderRegistry(default="openrouter")
    registry.register("openai", create_openai_model)
    registry.register("minimax", create_minimax_model)
    registry.register("openrouter", create_openrouter_model)
    registry.register("custom", create_custom_model)
    registry.register("ollama", create_ollama_model)
    return registry


PROVIDERS = default_registry()
