"""
Configuration module for the outfit generator.

This module provides centralized configuration management using pydantic-settings.
All environment variables and configuration values should be accessed through this module.

Usage:
    from config import get_settings

    settings = get_settings()
    table = settings.catalog_table
"""

from config.constants import DEFAULT_OUTFIT_CONFIG, OutfitConfig
from config.settings import Settings, get_settings

__all__ = ["DEFAULT_OUTFIT_CONFIG", "OutfitConfig", "Settings", "get_settings"]
