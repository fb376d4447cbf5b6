"""Configuration module."""
from .manager import ConfigManager, Config
from .settings import AppSettings, get_settings

__all__ = ["ConfigManager", "Config", "AppSettings", "get_settings"]
