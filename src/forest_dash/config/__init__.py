"""Configuration for Forest Dash."""

from .settings import Settings, LevelSettings, DifficultyTier, get_settings

__all__ = ["Settings", "LevelSettings", "DifficultyTier", "get_settings"]
