"""LLM Infrastructure Package - Shared LLM client utilities."""
from .factory import get_llm_client, create_llm_client, close_llm_clients
from .clients import BaseLLMClient, GeminiClient, text_content

__all__ = [
    "get_llm_client",
    "create_llm_client",
    "close_llm_clients",
    "BaseLLMClient",
    "GeminiClient",
    "text_content",
]
