"""LLM Clients Package - Provider implementations."""
from .base import BaseLLMClient, text_content, USER_ROLE, MODEL_ROLE
from .gemini import GeminiClient

__all__ = [
    "BaseLLMClient",
    "GeminiClient",
    "text_content",
    "USER_ROLE",
    "MODEL_ROLE",
]
