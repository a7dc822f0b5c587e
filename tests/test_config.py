"""Config loading from YAML and environment variables"""

from adaptive_planner.core.config import Config

YAML_TEXT = """
ai:
  provider: openrouter
  max_tokens: 256
  temperature: 0.2

ollama:
  host: http://gpu-box:11434

openrouter:
  model: meta/llama
  api_key_env: TEST_ROUTER_KEY
  timeout: 12

database:
  path: /tmp/planner.db
  avatar_dir: /tmp/avatars

notifications:
  check_interval_seconds: 5

log:
  level: DEBUG
"""


def test_from_yaml_missing_file_uses_defaults(tmp_path):
    config = Config.from_yaml(tmp_path / "missing.yaml")
    assert config == Config()
    assert config.ollama.model == "qwen3:8b"
    assert config.notifications.max_queue_size == 20


def test_from_yaml_reads_sections(tmp_path, monkeypatch):
    monkeypatch.setenv("TEST_ROUTER_KEY", "from-env")
    path = tmp_path / "app_config.yaml"
    path.write_text(YAML_TEXT, encoding="utf-8")

    config = Config.from_yaml(path)

    assert config.ai_provider == "openrouter"
    assert config.max_tokens == 256
    assert config.temperature == 0.2
    assert config.ollama.host == "http://gpu-box:11434"
    assert config.ollama.model == "qwen3:8b"
    assert config.openrouter.model == "meta/llama"
    assert config.openrouter.api_key == "from-env"
    assert config.openrouter.timeout == 12
    assert config.db_path == "/tmp/planner.db"
    assert config.avatar_dir == "/tmp/avatars"
    assert config.notifications.check_interval_seconds == 5
    assert config.notifications.max_queue_size == 20
    assert config.log_level == "DEBUG"
    assert config.log_file == "logs/adaptive_planner.log"


def test_from_yaml_empty_file(tmp_path, monkeypatch):
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert Config.from_yaml(path) == Config()


def test_from_env(monkeypatch):
    monkeypatch.setenv("AI_PROVIDER", "openrouter")
    monkeypatch.setenv("OPENROUTER_API_KEY", "abc")
    monkeypatch.setenv("OPENROUTER_TIMEOUT", "7")
    monkeypatch.setenv("REMINDER_MAX_QUEUE", "3")
    monkeypatch.setenv("ADAPTIVE_PLANNER_DB_PATH", "/data/p.db")
    monkeypatch.setenv("TEMPERATURE", "0.9")
    monkeypatch.delenv("OLLAMA_MODEL", raising=False)

    config = Config.from_env()

    assert config.ai_provider == "openrouter"
    assert config.openrouter.api_key == "abc"
    assert config.openrouter.timeout == 7
    assert config.notifications.max_queue_size == 3
    assert config.db_path == "/data/p.db"
    assert config.temperature == 0.9
    assert config.ollama.model == "qwen3:8b"
