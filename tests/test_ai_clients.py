"""
Chat client tests (Ollama / OpenRouter) with the network mocked out
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from adaptive_planner.core.config import Config, OllamaConfig, OpenRouterConfig
from adaptive_planner.core.exceptions import AIServiceError
from adaptive_planner.core.ollama_client import OllamaClient
from adaptive_planner.core.openrouter_client import (
    OpenRouterClient,
    create_ai_client,
    strip_code_fence,
)

MESSAGES = [{"role": "user", "content": "hello"}]


def openrouter_response(content):
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = {"choices": [{"message": {"content": content}}]}
    return response


class TestOllamaClient:
    """OllamaClient.chat against a mocked ollama.Client"""

    @pytest.fixture
    def backend(self):
        with patch("adaptive_planner.core.ollama_client.ollama.Client") as client_cls:
            yield client_cls.return_value

    @pytest.fixture
    def client(self, backend):
        return OllamaClient(host="http://ollama:11434", model="test-model", temperature=0.5, max_tokens=64)

    def test_chat_json_response(self, client, backend):
        backend.chat.return_value = {"message": {"content": '{"mood": "Positive"}'}}

        assert client.chat(MESSAGES) == {"mood": "Positive"}

        kwargs = backend.chat.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["format"] == "json"
        assert kwargs["options"] == {"temperature": 0.5, "num_predict": 64}

    def test_chat_text_response_with_temperature_override(self, client, backend):
        backend.chat.return_value = {"message": {"content": "plain text"}}

        assert client.chat(MESSAGES, return_json=False, temperature=0.1) == "plain text"

        kwargs = backend.chat.call_args.kwargs
        assert kwargs["format"] == ""
        assert kwargs["options"]["temperature"] == 0.1

    def test_invalid_json_raises_ai_service_error(self, client, backend):
        backend.chat.return_value = {"message": {"content": "not json"}}
        with pytest.raises(AIServiceError, match="not valid JSON"):
            client.chat(MESSAGES)

    def test_connection_error_raises_ai_service_error(self, client, backend):
        backend.chat.side_effect = ConnectionError("refused")
        with pytest.raises(AIServiceError, match="Ollama chat failed"):
            client.chat(MESSAGES)


class TestOpenRouterClient:
    """OpenRouterClient.chat against a mocked requests.post"""

    @pytest.fixture
    def client(self):
        return OpenRouterClient(api_key="secret", model="test/model", base_url="https://router.test/api/v1/")

    def test_chat_json_strips_code_fence(self, client):
        with patch("adaptive_planner.core.openrouter_client.requests.post") as post:
            post.return_value = openrouter_response('```json\n{"mood": "Neutral"}\n```')
            assert client.chat(MESSAGES) == {"mood": "Neutral"}

        args, kwargs = post.call_args
        assert args[0] == "https://router.test/api/v1/chat/completions"
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["json"]["model"] == "test/model"
        assert kwargs["json"]["messages"] == MESSAGES

    def test_chat_text_response(self, client):
        with patch("adaptive_planner.core.openrouter_client.requests.post") as post:
            post.return_value = openrouter_response("1. Plan\n2. Do")
            assert client.chat(MESSAGES, return_json=False, temperature=0.2) == "1. Plan\n2. Do"
        assert post.call_args.kwargs["json"]["temperature"] == 0.2

    def test_missing_api_key(self):
        client = OpenRouterClient(api_key="")
        with patch("adaptive_planner.core.openrouter_client.requests.post") as post:
            with pytest.raises(AIServiceError, match="API key"):
                client.chat(MESSAGES)
        post.assert_not_called()

    def test_http_error_is_mapped(self, client):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("401 Unauthorized")
        with patch("adaptive_planner.core.openrouter_client.requests.post", return_value=response):
            with pytest.raises(AIServiceError, match="request failed"):
                client.chat(MESSAGES)

    def test_timeout_is_mapped(self, client):
        with patch(
            "adaptive_planner.core.openrouter_client.requests.post",
            side_effect=requests.exceptions.Timeout("slow"),
        ):
            with pytest.raises(AIServiceError):
                client.chat(MESSAGES)

    def test_unexpected_payload(self, client):
        response = MagicMock()
        response.raise_for_status.return_value = None
        response.json.return_value = {"choices": []}
        with patch("adaptive_planner.core.openrouter_client.requests.post", return_value=response):
            with pytest.raises(AIServiceError, match="Unexpected"):
                client.chat(MESSAGES)

    def test_empty_content(self, client):
        with patch("adaptive_planner.core.openrouter_client.requests.post") as post:
            post.return_value = openrouter_response("")
            with pytest.raises(AIServiceError, match="empty"):
                client.chat(MESSAGES)

    def test_invalid_json(self, client):
        with patch("adaptive_planner.core.openrouter_client.requests.post") as post:
            post.return_value = openrouter_response("Sure! Here you go")
            with pytest.raises(AIServiceError, match="not valid JSON"):
                client.chat(MESSAGES)


def test_strip_code_fence():
    assert strip_code_fence('```json\n["a"]\n```') == '["a"]'
    assert strip_code_fence('  ["a"]  ') == '["a"]'


def test_create_ai_client_selects_provider():
    config = Config(
        ai_provider="openrouter",
        openrouter=OpenRouterConfig(api_key="k", model="m", timeout=5),
        temperature=0.3,
        max_tokens=99,
    )
    client = create_ai_client(config)
    assert isinstance(client, OpenRouterClient)
    assert client.api_key == "k"
    assert client.timeout == 5
    assert client.max_tokens == 99

    with patch("adaptive_planner.core.ollama_client.ollama.Client"):
        client = create_ai_client(Config(ollama=OllamaConfig(host="http://h:1", model="x")))
    assert isinstance(client, OllamaClient)
    assert client.host == "http://h:1"
    assert client.model == "x"
