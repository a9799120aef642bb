"""API v1 routes."""

from rulesd_server.api.v1 import bundles, health, rules

__all__ = ["bundles", "health", "rules"]
