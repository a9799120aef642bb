"""rules.d CLI - Command-line interface for the rules.d engine."""

from importlib.metadata import version, PackageNotFoundError

from rulesd_cli.main import cli_main, main

try:
    __version__ = version("rulesd")
except PackageNotFoundError:
    __version__ = "0.1.0"  # fallback for development

__all__ = ["cli_main", "main", "__version__"]
