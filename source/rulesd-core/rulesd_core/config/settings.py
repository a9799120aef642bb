"""Configuration and settings for rules.d core."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import dotenv

from rulesd_core.rules.engine import RuleEngine
from rulesd_core.rules.store import DEFAULT_EXCLUDE_DIRS

dotenv.load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _find_project_root(start_path: Path | None = None) -> Path | None:
    """Find the project root by looking for .git directory."""
    current = Path(start_path or Path.cwd()).resolve()
    for parent in [current, *list(current.parents)]:
        git_dir = parent / ".git"
        if git_dir.exists():
            return parent
    return None


def _parse_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return max(1, int(value))
    except ValueError:
        return default


def _parse_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Global settings for rules.d core.

    Attributes:
        rules_dir: Root directory of the rule corpus.
        max_workers: Number of threads reading rule files at load time.
        exclude_dirs: Directory names skipped during discovery.
        log_level: Logging level name for entry points.
    """

    rules_dir: Path
    max_workers: int = 1
    exclude_dirs: frozenset[str] = field(default_factory=lambda: DEFAULT_EXCLUDE_DIRS)
    log_level: str = "WARNING"

    @classmethod
    def from_environment(cls, *, start_path: Path | None = None) -> "Settings":
        """Create settings from RULESD_* environment variables.

        Without RULESD_RULES_DIR the corpus root is the enclosing git
        repository, or the current directory outside of one.
        """
        rules_dir = os.environ.get("RULESD_RULES_DIR")
        if rules_dir:
            root = Path(rules_dir).expanduser()
        else:
            root = _find_project_root(start_path) or Path(start_path or Path.cwd())

        return cls(
            rules_dir=root,
            max_workers=_parse_int(os.environ.get("RULESD_MAX_WORKERS"), 1),
            exclude_dirs=DEFAULT_EXCLUDE_DIRS | frozenset(
                _parse_list(os.environ.get("RULESD_EXCLUDE_DIRS"))
            ),
            log_level=os.environ.get("RULESD_LOG_LEVEL", "WARNING").upper(),
        )

    @property
    def has_rules_dir(self) -> bool:
        return self.rules_dir.is_dir()

    def create_engine(self) -> RuleEngine:
        """Create an uninitialized engine for the configured corpus."""
        return RuleEngine(
            self.rules_dir,
            exclude_dirs=self.exclude_dirs,
            max_workers=self.max_workers,
        )


def configure_logging(level: str | int = "WARNING") -> None:
    """Configure root logging for an entry point."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("rulesd_core").setLevel(level)
