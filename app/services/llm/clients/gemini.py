"""
Gemini / Imagen REST client (httpx).

Endpoints:
- {base}/models/{model}:generateContent  -> candidates[0].content.parts[0].text
- {base}/models/{image_model}:predict     -> predictions[0].bytesBase64Encoded

The API key travels as the `key` query parameter.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from .base import BaseLLMClient
from app.core.config import settings

logger = logging.getLogger(__name__)


class GeminiClient(BaseLLMClient):
    """
    Google Generative Language API client.

    One pooled httpx.AsyncClient per instance (created lazily unless
    injected).
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        image_model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key or settings.GEMINI_API_KEY
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY not set in environment")

        self.model = model or settings.GEMINI_MODEL
        self.image_model = image_model or settings.IMAGEN_MODEL
        self.base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.LLM_TIMEOUT_SECONDS
        self._client = http_client

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client (reuse connections)."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _post(self, url: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            response = await self._get_client().post(
                url, params={"key": self.api_key}, json=payload
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Gemini API returned %s for %s: %s",
                e.response.status_code, url, e.response.text[:500]
            )
        except httpx.HTTPError as e:
            logger.error("Gemini API request to %s failed: %s", url, e)
        except ValueError as e:
            logger.error("Gemini API returned invalid JSON from %s: %s", url, e)
        return None

    async def generate_content(
        self,
        contents: List[Dict[str, Any]],
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> Optional[str]:
        payload: Dict[str, Any] = {"contents": contents}
        if generation_config:
            payload["generationConfig"] = generation_config

        data = await self._post(f"{self.base_url}/models/{self.model}:generateContent", payload)
        if data is None:
            return None

        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            logger.error("Gemini response had no usable candidate: %s", str(data)[:500])
            return None

    async def generate_image(self, prompt: str) -> Optional[str]:
        payload = {"instances": {"prompt": prompt}, "parameters": {"sampleCount": 1}}

        data = await self._post(f"{self.base_url}/models/{self.image_model}:predict", payload)
        if data is None:
            return None

        try:
            encoded = data["predictions"][0]["bytesBase64Encoded"]
        except (KeyError, IndexError, TypeError):
            logger.error("Imagen response had no image: %s", str(data)[:500])
            return None
        return encoded or None

    async def close(self) -> None:
        """Close HTTP client (cleanup)."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
