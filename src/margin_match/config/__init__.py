"""Configuration management for margin offset matching."""

from .config_manager import MarginConfigManager, MarginMatchingConfig

__all__ = ["MarginConfigManager", "MarginMatchingConfig"]
