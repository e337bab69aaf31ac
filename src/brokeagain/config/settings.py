"""Application settings loader from YAML configuration."""
import os
import yaml
from pathlib import Path
from dataclasses import dataclass
from decimal import Decimal


@dataclass
class AppSettings:
    """Application-wide settings loaded from config.yaml."""

    # App info
    app_name: str
    app_version: str

    # Logging
    log_level: str
    log_max_file_size_mb: int
    log_backup_count: int

    # Budget
    default_budget_limit: Decimal

    # LLM
    llm_model_name: str
    llm_extraction_max_tokens: int
    llm_suggestion_max_tokens: int
    llm_max_retries: int
    llm_initial_delay_seconds: float
    llm_backoff_factor: float

    # Suggestions
    suggestion_top_categories: int
    suggestion_recent_expenses: int
    suggestion_max_workers: int

    # Extraction
    extraction_max_items: int
    extraction_max_amount: Decimal
    extraction_description_max_length: int

    # Paths (relative to the application data directory)
    config_file: str
    database_file: str

    @classmethod
    def load(cls, config_path: Path = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            env_path = os.getenv("BROKEAGAIN_CONFIG")
            config_path = Path(env_path) if env_path else Path(__file__).parent / "config.yaml"

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        return cls(
            app_name=config["app"]["name"],
            app_version=config["app"]["version"],
            log_level=config["logging"]["level"],
            log_max_file_size_mb=config["logging"]["max_file_size_mb"],
            log_backup_count=config["logging"]["backup_count"],
            default_budget_limit=Decimal(str(config["budget"]["default_limit"])),
            llm_model_name=config["llm"]["model_name"],
            llm_extraction_max_tokens=config["llm"]["extraction_max_tokens"],
            llm_suggestion_max_tokens=config["llm"]["suggestion_max_tokens"],
            llm_max_retries=config["llm"]["max_retries"],
            llm_initial_delay_seconds=config["llm"]["initial_delay_seconds"],
            llm_backoff_factor=config["llm"]["backoff_factor"],
            suggestion_top_categories=config["suggestions"]["top_categories"],
            suggestion_recent_expenses=config["suggestions"]["recent_expenses_per_category"],
            suggestion_max_workers=config["suggestions"]["max_workers"],
            extraction_max_items=config["extraction"]["max_items"],
            extraction_max_amount=Decimal(str(config["extraction"]["max_amount"])),
            extraction_description_max_length=config["extraction"]["description_max_length"],
            config_file=config["paths"]["config_file"],
            database_file=config["paths"]["database_file"]
        )


# Global settings instance
_settings: AppSettings = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings
