"""User configuration manager."""
import json
import os
from dataclasses import dataclass, asdict
from typing import Optional

from brokeagain.utils.exceptions import ConfigError
from brokeagain.utils.paths import app_data_dir
from .settings import get_settings

API_KEY_ENV = "GEMINI_API_KEY"


@dataclass
class Config:
    """User configuration."""
    gemini_api_key: str = ""
    log_level: str = "INFO"
    budget_limit: Optional[float] = None

    @property
    def llm_enabled(self) -> bool:
        return bool(self.gemini_api_key)


class ConfigManager:
    """Manages user configuration stored as JSON in the data directory."""

    def __init__(self):
        self.config_dir = app_data_dir()
        self.config_file = self.config_dir / get_settings().config_file

    def load_config(self) -> Config:
        """Load configuration, applying environment overrides."""
        config = Config()

        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    config = Config(**json.load(f))
            except (OSError, ValueError, TypeError) as e:
                raise ConfigError(f"Failed to load configuration: {e}")

        env_key = os.getenv(API_KEY_ENV)
        if env_key:
            config.gemini_api_key = env_key

        return config

    def save_config(self, config: Config) -> None:
        """Save configuration to disk."""
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(asdict(config), f, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}")

    def validate_config(self, config: Config) -> tuple[bool, str]:
        """Validate configuration values."""
        if config.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return False, f"Unknown log level: {config.log_level}"

        if config.budget_limit is not None and config.budget_limit <= 0:
            return False, "Budget limit must be positive"

        if not config.gemini_api_key:
            return True, "Configuration is valid (Gemini API key missing, AI features disabled)"

        return True, "Configuration is valid"
