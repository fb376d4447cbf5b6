"""Runtime configuration assembled from settings and environment."""
import os
from dataclasses import dataclass
from typing import Optional

from .settings import AppSettings, get_settings

# Checked in order; the first non-empty variable wins.
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


@dataclass
class Config:
    """System configuration."""
    gemini_api_key: Optional[str] = None
    model_name: str = "gemini-2.5-flash"
    thinking_budget: int = 0
    search_grounding: bool = True
    log_level: str = "INFO"
    export_directory: str = "."
    export_filename_prefix: str = "rpee-reporte"


class ConfigManager:
    """Builds the runtime configuration.

    The API credential is supplied out of band through the environment and is
    never written to disk.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self.settings = settings

    def load_config(self) -> Config:
        """Load configuration from settings file and environment."""
        settings = self.settings or get_settings()
        return Config(
            gemini_api_key=self._read_api_key(),
            model_name=settings.gemini_model_name,
            thinking_budget=settings.gemini_thinking_budget,
            search_grounding=settings.gemini_search_grounding,
            log_level=os.getenv("RPEE_LOG_LEVEL", settings.log_level),
            export_directory=settings.export_directory,
            export_filename_prefix=settings.export_filename_prefix
        )

    def validate_config(self, config: Config) -> tuple[bool, str]:
        """Validate configuration values."""
        if not config.gemini_api_key:
            return False, "Gemini API key is required (set GEMINI_API_KEY)"

        if not config.model_name:
            return False, "Gemini model name is required"

        if config.thinking_budget < 0:
            return False, "Thinking budget cannot be negative"

        return True, "Configuration is valid"

    @staticmethod
    def _read_api_key() -> Optional[str]:
        for name in API_KEY_ENV_VARS:
            value = os.getenv(name)
            if value:
                return value.strip()
        return None
