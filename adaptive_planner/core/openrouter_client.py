"""OpenRouter (OpenAI-compatible chat completions) client over HTTP."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Union

import requests

from .config import Config
from .exceptions import AIServiceError

logger = logging.getLogger(__name__)


def strip_code_fence(content: str) -> str:
    """Remove a surrounding ```json ... ``` fence if the model added one."""
    cleaned = content.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.replace("```json", "").replace("```", "").strip()
    return cleaned


class OpenRouterClient:
    """Same chat() contract as OllamaClient, backed by a hosted endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "openai/gpt-3.5-turbo",
        base_url: str = "https://openrouter.ai/api/v1",
        temperature: float = 0.7,
        max_tokens: int = 1024,
        timeout: int = 30,
        app_title: str = "Adaptive Planner",
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.app_title = app_title

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "https://localhost",
            "X-Title": self.app_title,
        }

    def chat(
        self,
        messages: List[Dict[str, str]],
        return_json: bool = True,
        temperature: Optional[float] = None,
    ) -> Union[Dict[str, Any], List[Any], str]:
        if not self.api_key:
            raise AIServiceError("OpenRouter API key is not configured")

        body = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": self.max_tokens,
        }
        try:
            response = requests.post(
                f"{self.base_url}/chat/completions",
                headers=self._headers(),
                json=body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except requests.exceptions.RequestException as e:
            logger.error("OpenRouter request failed: %s", e)
            raise AIServiceError(f"OpenRouter request failed: {e}") from e
        except (KeyError, IndexError, ValueError) as e:
            logger.error("Unexpected OpenRouter payload: %s", e)
            raise AIServiceError(f"Unexpected OpenRouter payload: {e}") from e

        if not content:
            raise AIServiceError("OpenRouter returned an empty message")
        if not return_json:
            return content
        try:
            return json.loads(strip_code_fence(content))
        except json.JSONDecodeError as e:
            logger.error("JSON decode error: %s", e)
            raise AIServiceError(f"OpenRouter reply was not valid JSON: {e}") from e


def create_ai_client(config: Config):
    """Build the chat client selected by ``config.ai_provider``."""
    if config.ai_provider == "openrouter":
        return OpenRouterClient(
            api_key=config.openrouter.api_key,
            model=config.openrouter.model,
            base_url=config.openrouter.base_url,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.openrouter.timeout,
        )
    # imported lazily so the ollama package is only touched when selected
    from .ollama_client import OllamaClient

    return OllamaClient(
        host=config.ollama.host,
        model=config.ollama.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )
