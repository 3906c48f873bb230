"""
Base LLM Client - Abstract interface for generative AI providers.

Clients return None on any failure (transport error, non-2xx status,
missing candidates) after logging it. Callers decide what the user sees.
Nothing is retried.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

USER_ROLE = "user"
MODEL_ROLE = "model"


def text_content(text: str, role: str = USER_ROLE) -> Dict[str, Any]:
    """One conversation turn in generateContent format."""
    return {"role": role, "parts": [{"text": text}]}


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM clients.

    Separates infrastructure (API calls) from domain logic (prompts).
    """

    @abstractmethod
    async def generate_content(
        self,
        contents: List[Dict[str, Any]],
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> Optional[str]:
        """
        Multi-turn text generation.

        Args:
            contents: Conversation turns, oldest first (see text_content)
            generation_config: Provider generation options (e.g. response schema)

        Returns:
            Text of the first candidate, or None on failure
        """
        pass

    @abstractmethod
    async def generate_image(self, prompt: str) -> Optional[str]:
        """
        Generate one image.

        Returns:
            Base64-encoded PNG bytes, or None on failure
        """
        pass

    async def call(
        self,
        prompt: str,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> Optional[str]:
        """Single-turn convenience wrapper around generate_content."""
        return await self.generate_content([text_content(prompt)], generation_config)

    async def close(self) -> None:
        """Release network resources."""
        pass
