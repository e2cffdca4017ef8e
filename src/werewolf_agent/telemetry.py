"""
Logfire telemetry for AI players.

Telemetry is optional: nothing in this module is required for a
player to work, and failures while emitting events are logged rather
than raised.  Call :func:`configure_telemetry` once at process start
to send traces (including pydantic-ai model calls) to Logfire.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import logfire

logger = logging.getLogger(__name__)


def configure_telemetry(
    service_name: str = "werewolf-agent",
    environment: Optional[str] = None,
    send_to_logfire: Any = "if-token-present",
) -> None:
    """Configure Logfire and instrument pydantic-ai.

    :param service_name: service name reported on every span
    :param environment: deployment environment label
    :param send_to_logfire: forwarded to :func:`logfire.configure`
    """
    logfire.configure(
        service_name=service_name,
        environment=environment,
        send_to_logfire=send_to_logfire,
    )
    logfire.instrument_pydantic_ai()


def create_game_session(game_id: str, metadata: Dict[str, Any]) -> None:
    """Record the start of a game for one player.

    Fire-and-forget: errors are logged and never reach the caller.
    """
    try:
        logfire.info(
            "Game session created",
            game_id=game_id,
            **metadata,
        )
    except Exception:  # noqa: BLE001 telemetry must not break the game
        logger.warning("Failed to create telemetry session for game %s", game_id, exc_info=True)


@contextmanager
def generation_span(function_id: str, **attributes: Any) -> Iterator[Any]:
    """Trace one generation request."""
    with logfire.span(f"player.{function_id}", function_id=function_id, **attributes) as span:
        yield span
