"""Configuration module for Muhasebi."""

from muhasebi.config.settings import RiskTrendConfig, Settings, get_settings

__all__ = ["Settings", "RiskTrendConfig", "get_settings"]
