"""Application settings loader from YAML configuration."""
import yaml
from pathlib import Path
from dataclasses import dataclass


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

    # Gemini
    gemini_model_name: str
    gemini_thinking_budget: int
    gemini_search_grounding: bool

    # Coordinate resolver
    resolver_jitter: float

    # Export
    export_directory: str
    export_filename_prefix: str

    @classmethod
    def load(cls, config_path: Path = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            # Default to config.yaml shipped inside the package
            config_path = Path(__file__).parent.parent / "config.yaml"

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
            gemini_model_name=config["gemini"]["model_name"],
            gemini_thinking_budget=config["gemini"]["thinking_budget"],
            gemini_search_grounding=config["gemini"]["search_grounding"],
            resolver_jitter=float(config["resolver"]["jitter"]),
            export_directory=config["export"]["directory"],
            export_filename_prefix=config["export"]["filename_prefix"]
        )


# Global settings instance
_settings: AppSettings = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings
