"""LLM service for Ollama integration."""

import json
import logging
from typing import Any

import httpx

from src.config import get_settings
from src.services.errors import AIServiceUnavailableError

logger = logging.getLogger(__name__)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code block, if the model added one."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


class LLMService:
    """Service for interacting with Ollama LLM."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.base_url = self.settings.ollama_base_url
        self.model = self.settings.llm_model
        self.timeout = 120.0  # 2 minutes for LLM responses

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 2048,
    ) -> str:
        """Generate a response from the LLM.

        Raises AIServiceUnavailableError when Ollama cannot be reached or errors.
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/api/chat",
                    json={
                        "model": self.model,
                        "messages": messages,
                        "stream": False,
                        "format": "json",
                        "options": {
                            "temperature": temperature,
                            "num_predict": max_tokens,
                        },
                    },
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling Ollama: {e}")
            raise AIServiceUnavailableError(f"LLM service unavailable: {e}") from e

        try:
            content = data["message"]["content"]
        except (KeyError, TypeError) as e:
            logger.error(f"Unexpected Ollama response shape: {data!r}")
            raise AIServiceUnavailableError(f"LLM returned an unexpected response: {e}") from e
        if not isinstance(content, str):
            raise AIServiceUnavailableError("LLM returned an unexpected response: no text content")
        return content

    async def generate_json(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.1,
        max_tokens: int = 2048,
    ) -> Any:
        """Generate structured JSON response from the LLM.

        Raises json.JSONDecodeError if the model did not answer with JSON.
        """
        result = await self.generate(
            prompt=prompt,
            system_prompt=system_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        cleaned = strip_code_fences(result)
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse LLM response as JSON: {e}")
            logger.warning(f"Raw response: {result}")
            raise
