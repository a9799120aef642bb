"""Configuration module for rules.d core."""

from rulesd_core.config.settings import Settings, configure_logging

__all__ = ["Settings", "configure_logging"]
