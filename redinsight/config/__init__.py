"""Configuration package for RedInsight."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
