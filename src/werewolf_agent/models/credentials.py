"""Credential dataclasses
=========================

The API key, provider, model and endpoint a player uses to reach its
language model.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Credential:
    """API credential pushed to players at runtime"""

    api_key: str
    provider: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None

    def describe(self) -> str:
        """Human readable summary that never includes the key itself."""
        return (
            f"provider: {self.provider or 'default'}, "
            f"model: {self.model or 'default'}, "
            f"baseURL: {self.base_url or 'default'}"
        )


@dataclass(frozen=True)
class ModelSelection:
    """The provider/model/key/endpoint actually used for one request"""

    provider: str
    model: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
