"""Rule sources for rules.d.

This module provides the sources a RuleIndex is built from:
- RuleStore: Abstract base class defining the source interface
- FileRuleStore: Discovers and reads rule documents under a corpus root
- MemoryRuleStore: In-memory documents for testing
"""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable

from rulesd_core.rules.errors import RuleLoadError
from rulesd_core.rules.models import Rule
from rulesd_core.rules.parser import RuleParser


logger = logging.getLogger(__name__)

# File name patterns of rule documents
RULE_FILE_PATTERNS = ("rules.md", "*-rules.md")

# Directories never searched for rule documents
DEFAULT_EXCLUDE_DIRS = frozenset({
    "node_modules",
    "dist",
    "build",
    ".git",
    ".venv",
    "venv",
    "__pycache__",
})


class RuleStore(ABC):
    """Abstract base class for rule sources.

    A store produces the full list of rules once; the index built from it
    is never updated afterwards.
    """

    @abstractmethod
    def load_rules(self) -> list[Rule]:
        """Load every rule from the source.

        Individual documents that cannot be read are skipped; this method
        only raises for errors that make the whole source unusable.

        Returns:
            Rules in a deterministic discovery order.
        """
        ...


def discover_rule_files(
    root: Path,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
) -> list[Path]:
    """Find rule documents under a corpus root.

    Matches ``rules.md`` and ``*-rules.md`` at any depth, skipping any path
    that passes through an excluded directory. A file matched by both
    patterns is returned once.

    Args:
        root: Corpus root directory.
        exclude_dirs: Directory names to skip.

    Returns:
        Absolute file paths sorted by their path relative to ``root``.
    """
    if not root.is_dir():
        return []

    root = root.resolve()
    excluded = set(exclude_dirs)
    seen: set[Path] = set()
    found: dict[Path, str] = {}

    for pattern in RULE_FILE_PATTERNS:
        for file_path in root.rglob(pattern):
            if not file_path.is_file():
                continue
            relative = file_path.relative_to(root)
            if excluded.intersection(relative.parts[:-1]):
                continue
            resolved = file_path.resolve()
            if resolved not in seen:
                seen.add(resolved)
                found[file_path] = relative.as_posix()

    return sorted(found, key=lambda p: found[p])


class FileRuleStore(RuleStore):
    """File-based rule source.

    Reads every rule document under ``root``. Files may be read by a thread
    pool; results are always returned in discovery order.

    Attributes:
        root: Corpus root directory.
        exclude_dirs: Directory names skipped during discovery.
        max_workers: Number of reader threads (1 reads sequentially).
    """

    def __init__(
        self,
        root: Path,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
        max_workers: int = 1,
        parser: RuleParser | None = None,
    ):
        """Initialize the file rule store.

        Args:
            root: Corpus root directory.
            exclude_dirs: Directory names skipped during discovery.
            max_workers: Number of reader threads.
            parser: Parser used for each document.
        """
        self.root = Path(root)
        self.exclude_dirs = frozenset(exclude_dirs)
        self.max_workers = max(1, max_workers)
        self.parser = parser or RuleParser()

    def discover(self) -> list[Path]:
        return discover_rule_files(self.root, self.exclude_dirs)

    def load_rules(self) -> list[Rule]:
        """Load all rules from disk."""
        if not self.root.is_dir():
            logger.warning(f"Rules directory not found: {self.root}")
            return []

        root = self.root.resolve()
        files = self.discover()
        logger.debug(f"Discovered {len(files)} rule files under {root}")

        if self.max_workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                # map() yields in input order, whatever the completion order
                results = list(executor.map(lambda p: self._load_rule(p, root), files))
        else:
            results = [self._load_rule(p, root) for p in files]

        rules = [rule for rule in results if rule is not None]
        logger.info(f"Loaded {len(rules)} rules from {root}")
        return rules

    def _load_rule(self, file_path: Path, root: Path) -> Rule | None:
        try:
            return self.parser.parse_file(file_path, root)
        except RuleLoadError as e:
            logger.warning(f"Skipping rule file {file_path}: {e}")
        except Exception as e:
            logger.error(f"Unexpected error loading rule {file_path}: {e}")
        return None


class MemoryRuleStore(RuleStore):
    """In-memory rule source for testing.

    Holds ``(path, raw_text)`` pairs and parses them on load, in the order
    they were added.
    """

    def __init__(
        self,
        documents: dict[str, str] | Iterable[tuple[str, str]] | None = None,
        parser: RuleParser | None = None,
    ) -> None:
        """Initialize the memory store."""
        if isinstance(documents, dict):
            documents = documents.items()
        self._documents: dict[str, str] = dict(documents or ())
        self.parser = parser or RuleParser()

    def add(self, path: str, raw_text: str) -> None:
        """Add or replace a document."""
        self._documents[path] = raw_text

    def load_rules(self) -> list[Rule]:
        """Parse all documents held in memory."""
        return [
            self.parser.parse_content(path, raw_text)
            for path, raw_text in self._documents.items()
        ]

    def clear(self) -> None:
        """Remove all documents."""
        self._documents.clear()
