"""
Configuration module

Related classes:
  - ollama_client.OllamaClient / openrouter_client.OpenRouterClient: AI settings
  - server.dependencies: builds repositories and services from this config
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


@dataclass
class OllamaConfig:
    """Ollama API settings"""

    host: str = "http://localhost:11434"
    model: str = "qwen3:8b"


@dataclass
class OpenRouterConfig:
    """OpenRouter (OpenAI-compatible) API settings"""

    base_url: str = "https://openrouter.ai/api/v1"
    model: str = "openai/gpt-3.5-turbo"
    api_key: str = ""
    timeout: int = 30


@dataclass
class NotificationConfig:
    """Reminder scheduler settings"""

    check_interval_seconds: int = 30
    max_queue_size: int = 20


@dataclass
class Config:
    """Application settings"""

    # provider: "ollama" or "openrouter"
    ai_provider: str = "ollama"
    ollama: OllamaConfig = None  # type: ignore
    openrouter: OpenRouterConfig = None  # type: ignore
    notifications: NotificationConfig = None  # type: ignore

    db_path: Optional[str] = None
    avatar_dir: str = "data/avatars"

    log_level: str = "INFO"
    log_file: str = "logs/adaptive_planner.log"

    max_tokens: int = 1024
    temperature: float = 0.7

    def __post_init__(self):
        if self.ollama is None:
            self.ollama = OllamaConfig()
        if self.openrouter is None:
            self.openrouter = OpenRouterConfig()
        if self.notifications is None:
            self.notifications = NotificationConfig()

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """Load settings from a YAML file

        Args:
            config_path: settings file (defaults to config/app_config.yaml)

        Returns:
            Config: settings instance, defaults when the file does not exist
        """
        if config_path is None:
            project_root = Path(__file__).parent.parent.parent
            config_path = project_root / "config" / "app_config.yaml"

        if not Path(config_path).exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data: Dict[str, Any] = yaml.safe_load(f) or {}

        ai_data = yaml_data.get("ai", {})
        ollama_data = yaml_data.get("ollama", {})
        openrouter_data = yaml_data.get("openrouter", {})
        notification_data = yaml_data.get("notifications", {})
        database_data = yaml_data.get("database", {})
        log_data = yaml_data.get("log", {})

        return cls(
            ai_provider=ai_data.get("provider", "ollama"),
            ollama=OllamaConfig(
                host=ollama_data.get("host", "http://localhost:11434"),
                model=ollama_data.get("model", "qwen3:8b"),
            ),
            openrouter=OpenRouterConfig(
                base_url=openrouter_data.get("base_url", "https://openrouter.ai/api/v1"),
                model=openrouter_data.get("model", "openai/gpt-3.5-turbo"),
                # the key itself never lives in the YAML file
                api_key=os.getenv(openrouter_data.get("api_key_env", "OPENROUTER_API_KEY"), ""),
                timeout=openrouter_data.get("timeout", 30),
            ),
            notifications=NotificationConfig(
                check_interval_seconds=notification_data.get("check_interval_seconds", 30),
                max_queue_size=notification_data.get("max_queue_size", 20),
            ),
            db_path=database_data.get("path"),
            avatar_dir=database_data.get("avatar_dir", "data/avatars"),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", "logs/adaptive_planner.log"),
            max_tokens=ai_data.get("max_tokens", 1024),
            temperature=ai_data.get("temperature", 0.7),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """Load settings from environment variables"""
        return cls(
            ai_provider=os.getenv("AI_PROVIDER", "ollama"),
            ollama=OllamaConfig(
                host=os.getenv("OLLAMA_HOST", "http://localhost:11434"),
                model=os.getenv("OLLAMA_MODEL", "qwen3:8b"),
            ),
            openrouter=OpenRouterConfig(
                base_url=os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1"),
                model=os.getenv("OPENROUTER_MODEL", "openai/gpt-3.5-turbo"),
                api_key=os.getenv("OPENROUTER_API_KEY", ""),
                timeout=int(os.getenv("OPENROUTER_TIMEOUT", "30")),
            ),
            notifications=NotificationConfig(
                check_interval_seconds=int(os.getenv("REMINDER_CHECK_INTERVAL", "30")),
                max_queue_size=int(os.getenv("REMINDER_MAX_QUEUE", "20")),
            ),
            db_path=os.getenv("ADAPTIVE_PLANNER_DB_PATH"),
            avatar_dir=os.getenv("ADAPTIVE_PLANNER_AVATAR_DIR", "data/avatars"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/adaptive_planner.log"),
            max_tokens=int(os.getenv("MAX_TOKENS", "1024")),
            temperature=float(os.getenv("TEMPERATURE", "0.7")),
        )
