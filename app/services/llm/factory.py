"""
LLM Client Factory - Provider selection and instantiation.

Single point of configuration for the generative AI provider. Clients
hold a pooled HTTP connection, so one instance per provider is shared
across requests and closed on shutdown.
"""
from typing import Dict

from .clients.base import BaseLLMClient
from .clients.gemini import GeminiClient
from app.core.config import settings

_clients: Dict[str, BaseLLMClient] = {}


def create_llm_client(provider: str | None = None) -> BaseLLMClient:
    """
    Build a new LLM client.

    Args:
        provider: Override provider (defaults to settings.LLM_PROVIDER)

    Raises:
        ValueError: If provider not recognized or API key missing
    """
    p = provider or settings.LLM_PROVIDER
    if p == "gemini":
        return GeminiClient()
    raise ValueError(f"Unknown LLM provider: {p}. Use 'gemini'.")


def get_llm_client(provider: str | None = None) -> BaseLLMClient:
    """Shared client for the configured provider (FastAPI dependency)."""
    p = provider or settings.LLM_PROVIDER
    if p not in _clients:
        _clients[p] = create_llm_client(p)
    return _clients[p]


async def close_llm_clients() -> None:
    for client in list(_clients.values()):
        await client.close()
    _clients.clear()
