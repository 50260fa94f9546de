"""Configuration Package

Purpose: Centralized configuration management for dynapi
"""

from .settings import DynamicAPISettings, get_settings, reset_settings

__all__ = ["DynamicAPISettings", "get_settings", "reset_settings"]
