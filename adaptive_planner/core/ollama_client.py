"""
Ollama API client

Related classes:
  - config.Config: provides host/model/generation settings
  - journal.analyzer.JournalAnalyzer, tasks.breakdown.TaskBreakdownService: callers

The client answers in JSON by default; callers pass return_json=False for raw text.
"""

import json
import logging
from typing import Any, Dict, List, Union

import ollama

from .exceptions import AIServiceError


class OllamaClient:
    """Chat client for a local Ollama server"""

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "qwen3:8b",
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ):
        self.host = host
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.logger = logging.getLogger(__name__)

        self.client = ollama.Client(host=host)

    def chat(
        self,
        messages: List[Dict[str, str]],
        return_json: bool = True,
        temperature: float | None = None,
    ) -> Union[Dict[str, Any], List[Any], str]:
        """
        Send a chat conversation

        Args:
            messages: [{"role": "user", "content": "..."}]
            return_json: decode the reply as JSON
            temperature: per-call override of the configured temperature

        Returns:
            Decoded JSON (return_json=True) or the reply text

        Raises:
            AIServiceError: the request failed or the reply was not valid JSON
        """
        try:
            response = self.client.chat(
                model=self.model,
                messages=messages,
                stream=False,
                format="json" if return_json else "",
                options={
                    "temperature": self.temperature if temperature is None else temperature,
                    "num_predict": self.max_tokens,
                },
            )
            content = response["message"]["content"]
            if return_json:
                return json.loads(content)
            return content

        except json.JSONDecodeError as e:
            self.logger.error(f"JSON decode error: {e}")
            raise AIServiceError(f"Ollama reply was not valid JSON: {e}") from e
        except Exception as e:
            self.logger.error(f"Ollama chat error: {e}")
            raise AIServiceError(f"Ollama chat failed: {e}") from e
