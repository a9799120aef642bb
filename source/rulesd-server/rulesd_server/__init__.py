"""rules.d Server - FastAPI REST API and MCP stdio server for rules.d."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("rulesd")
except PackageNotFoundError:
    __version__ = "0.1.0"  # fallback for development
