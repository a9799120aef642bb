"""Rule document parser for rules.d.

This module turns rule documents (Markdown with optional YAML frontmatter)
into structured metadata. It supports:
- YAML frontmatter parsing, with malformed headers treated as absent
- Inference of id, title, category, language and tags from the file path
  and body when the frontmatter does not declare them
- File size limits when reading from disk

Language names are matched as whole tokens, so "go" is not found inside
"good" and "java" is not found inside "javascript". Suffixed forms such as
"python3" or "pythonic" are not recognized either; declare the language in
the frontmatter for those documents.
"""

import logging
import re
from datetime import date, datetime
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

from rulesd_core.rules.errors import RuleLoadError
from rulesd_core.rules.models import (
    FALLBACK_TAG,
    UNIVERSAL_LANGUAGE,
    Applicability,
    Reference,
    Rule,
    RuleCategory,
    RuleDifficulty,
    RuleMetadata,
    RulePriority,
)


logger = logging.getLogger(__name__)

# Maximum rule file size (1MB)
MAX_RULE_FILE_SIZE = 1 * 1024 * 1024

# Language name -> canonical token. Order matters for filename matching.
LANGUAGE_LEXICON: dict[str, str] = {
    "python": "python",
    "javascript": "javascript",
    "typescript": "typescript",
    "golang": "go",
    "go": "go",
    "rust": "rust",
    "java": "java",
    "csharp": "csharp",
    "c#": "csharp",
}

# Keyword -> tags added when the keyword appears in the filename or body.
KEYWORD_TAGS: dict[str, tuple[str, ...]] = {
    "performance": ("performance", "optimization"),
    "security": ("security",),
    "testing": ("testing", "tdd", "unit-tests"),
    "accessibility": ("accessibility", "a11y"),
    "maintainability": ("maintainability",),
    "best-practices": ("best-practices",),
}


def _language_pattern(name: str) -> re.Pattern[str]:
    # Whole-token match: "java" must not match inside "javascript".
    return re.compile(rf"(?<![a-z0-9#+]){re.escape(name)}(?![a-z0-9#+])")


class RuleParser:
    """Parser for rule documents.

    Extraction never fails on malformed input: a frontmatter block that is
    not valid YAML, or not a mapping, is ignored and every field is
    inferred from the path and body instead.

    Example rule file format:
    ```markdown
    ---
    id: python-rules
    priority: high
    tags: [python, testing]
    applicability:
      frameworks: [django, flask]
    related: [testing-rules]
    ---

    # Python Development Rules

    Follow PEP 8...
    ```
    """

    # Pattern to match YAML frontmatter between --- delimiters
    FRONTMATTER_PATTERN = re.compile(
        r"\A---[ \t]*\n(?:(.*?)\n)?---[ \t]*(?:\n|\Z)", re.DOTALL
    )

    # Pattern to match the first level-1 Markdown heading
    TITLE_PATTERN = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)

    LANGUAGE_PATTERNS = {
        name: _language_pattern(name) for name in LANGUAGE_LEXICON
    }

    def parse_file(self, file_path: Path, root: Path) -> Rule:
        """Read and parse a rule file.

        Args:
            file_path: Absolute path to the rule file.
            root: Corpus root; the rule's path is recorded relative to it.

        Returns:
            Parsed Rule object.

        Raises:
            RuleLoadError: If the file is too large or cannot be read.
        """
        try:
            file_size = file_path.stat().st_size
        except OSError as e:
            raise RuleLoadError(f"Failed to stat rule file: {file_path}") from e

        if file_size > MAX_RULE_FILE_SIZE:
            raise RuleLoadError(
                f"Rule file exceeds size limit ({file_size} > {MAX_RULE_FILE_SIZE}): {file_path}"
            )

        try:
            raw_text = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise RuleLoadError(f"Failed to read rule file (encoding error): {file_path}") from e
        except OSError as e:
            raise RuleLoadError(f"Failed to read rule file: {file_path}") from e

        try:
            relative = file_path.relative_to(root).as_posix()
        except ValueError:
            relative = file_path.as_posix()

        return self.parse_content(relative, raw_text)

    def parse_content(self, path: str, raw_text: str) -> Rule:
        """Parse a rule document already in memory.

        Args:
            path: Path of the document relative to the corpus root.
            raw_text: Full document text.

        Returns:
            Rule with extracted metadata and the Markdown body.
        """
        header, body = self.split_frontmatter(raw_text)
        metadata = self._build_metadata(path, header or {}, body)
        return Rule(metadata=metadata, content=body, file_path=path)

    def extract_metadata(self, path: str, raw_text: str) -> RuleMetadata:
        """Extract metadata from a rule document.

        Args:
            path: Path of the document relative to the corpus root.
            raw_text: Full document text.

        Returns:
            Fully populated RuleMetadata.
        """
        return self.parse_content(path, raw_text).metadata

    def split_frontmatter(self, raw_text: str) -> tuple[dict[str, Any] | None, str]:
        """Split a document into its frontmatter mapping and body.

        Returns:
            Tuple of (header, body). ``header`` is None when the document
            has no usable frontmatter, in which case ``body`` is the whole
            text.
        """
        text = raw_text.lstrip("\ufeff").replace("\r\n", "\n")

        match = self.FRONTMATTER_PATTERN.match(text)
        if not match:
            return None, text.strip()

        try:
            header = yaml.safe_load(match.group(1) or "")
        except (yaml.YAMLError, ValueError) as e:
            logger.debug(f"Ignoring malformed frontmatter: {e}")
            return None, text.strip()

        if header is None:
            header = {}
        if not isinstance(header, dict):
            logger.debug(
                f"Ignoring frontmatter that is not a mapping ({type(header).__name__})"
            )
            return None, text.strip()

        return header, text[match.end():].strip()

    def _build_metadata(self, path: str, header: dict[str, Any], body: str) -> RuleMetadata:
        pure_path = PurePosixPath(path)
        stem = pure_path.name[:-3] if pure_path.name.endswith(".md") else pure_path.stem
        lower_stem = stem.lower()
        lower_body = body.lower()

        rule_id = _as_str(header.get("id")) or self._default_id(stem)

        return RuleMetadata(
            id=rule_id,
            title=(
                _as_str(header.get("title"))
                or self._extract_title(body)
                or self._format_title(stem)
            ),
            category=self._parse_category(header.get("category"), pure_path, rule_id),
            language=(
                self._parse_language(header.get("language"))
                or self._infer_language(lower_stem, lower_body)
            ),
            tags=self._parse_tags(header.get("tags")) or self._generate_tags(lower_stem, lower_body),
            priority=self._parse_priority(header.get("priority"), rule_id),
            description=_as_str(header.get("description")),
            subcategory=_as_str(header.get("subcategory")),
            difficulty=self._parse_difficulty(header.get("difficulty"), rule_id),
            applicability=self._parse_applicability(header.get("applicability"), rule_id),
            prerequisites=_as_str_tuple(header.get("prerequisites")),
            related=_as_str_tuple(header.get("related")),
            outcomes=_as_str_tuple(header.get("outcomes")),
            version=_as_str(header.get("version")),
            last_updated=_as_str(header.get("lastUpdated")),
            author=_as_str(header.get("author")),
            references=self._parse_references(header.get("references"), rule_id),
        )

    def _default_id(self, stem: str) -> str:
        return re.sub(r"[\s_]+", "-", stem.strip().lower()) or "rules"

    def _extract_title(self, body: str) -> str | None:
        for match in self.TITLE_PATTERN.finditer(body):
            title = match.group(1).strip()
            if title:
                return title
        return None

    def _format_title(self, stem: str) -> str:
        words = stem.replace("-", " ").split(" ")
        return " ".join(word[:1].upper() + word[1:] for word in words)

    def _parse_category(self, value: Any, path: PurePosixPath, rule_id: str) -> RuleCategory:
        declared = _as_str(value)
        if declared:
            try:
                return RuleCategory(declared.lower())
            except ValueError:
                logger.warning(
                    f"Invalid category '{declared}' in rule '{rule_id}', inferring from path"
                )
        return self._infer_category(path)

    def _infer_category(self, path: PurePosixPath) -> RuleCategory:
        if len(path.parts) > 1:
            try:
                return RuleCategory(path.parts[0])
            except ValueError:
                pass
        return RuleCategory.GENERAL

    def _parse_language(self, value: Any) -> str | tuple[str, ...] | None:
        tokens = _as_str_tuple(value)
        if not tokens:
            return None
        languages = _unique(LANGUAGE_LEXICON.get(t.lower(), t.lower()) for t in tokens)
        return languages[0] if len(languages) == 1 else languages

    def _infer_language(self, lower_stem: str, lower_body: str) -> str | tuple[str, ...]:
        for name, token in LANGUAGE_LEXICON.items():
            if self.LANGUAGE_PATTERNS[name].search(lower_stem):
                return token

        found = _unique(
            token
            for name, token in LANGUAGE_LEXICON.items()
            if self.LANGUAGE_PATTERNS[name].search(lower_body)
        )
        return found if found else UNIVERSAL_LANGUAGE

    def _parse_tags(self, value: Any) -> tuple[str, ...] | None:
        tokens = _as_str_tuple(value)
        if not tokens:
            return None
        return _unique(t.lower() for t in tokens)

    def _generate_tags(self, lower_stem: str, lower_body: str) -> tuple[str, ...]:
        tags: list[str] = []
        for keyword, keyword_tags in KEYWORD_TAGS.items():
            if keyword in lower_stem or keyword in lower_body:
                tags.extend(keyword_tags)

        # Every rule must be discoverable by at least one tag
        if not tags:
            tags.append(FALLBACK_TAG)

        return _unique(tags)

    def _parse_priority(self, value: Any, rule_id: str) -> RulePriority:
        declared = _as_str(value)
        if declared is None:
            return RulePriority.MEDIUM
        try:
            return RulePriority(declared.lower())
        except ValueError:
            logger.warning(
                f"Invalid priority value '{declared}' in rule '{rule_id}', defaulting to 'medium'"
            )
            return RulePriority.MEDIUM

    def _parse_difficulty(self, value: Any, rule_id: str) -> RuleDifficulty | None:
        declared = _as_str(value)
        if declared is None:
            return None
        try:
            return RuleDifficulty(declared.lower())
        except ValueError:
            logger.warning(f"Invalid difficulty '{declared}' in rule '{rule_id}', ignoring")
            return None

    def _parse_applicability(self, value: Any, rule_id: str) -> Applicability | None:
        if value is None:
            return None
        if not isinstance(value, dict):
            logger.warning(f"Invalid applicability in rule '{rule_id}', expected a mapping")
            return None
        return Applicability(
            scenarios=_as_str_tuple(value.get("scenarios")) or (),
            frameworks=_as_str_tuple(value.get("frameworks")) or (),
            environments=_as_str_tuple(value.get("environments")) or (),
        )

    def _parse_references(self, value: Any, rule_id: str) -> tuple[Reference, ...] | None:
        if value is None:
            return None
        if not isinstance(value, list):
            logger.warning(f"Invalid references in rule '{rule_id}', expected a list")
            return None

        references = []
        for item in value:
            if isinstance(item, dict) and item.get("title") and item.get("url"):
                references.append(Reference(
                    title=str(item["title"]),
                    url=str(item["url"]),
                    description=_as_str(item.get("description")),
                ))
            else:
                logger.debug(f"Skipping malformed reference in rule '{rule_id}': {item!r}")
        return tuple(references)


def _as_str(value: Any) -> str | None:
    """Coerce a scalar frontmatter value to a stripped string."""
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (list, dict)):
        return None
    text = str(value).strip()
    return text or None


def _as_str_tuple(value: Any) -> tuple[str, ...] | None:
    """Coerce a list or comma-separated frontmatter value to a tuple of strings."""
    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [_as_str(v) or "" for v in value]
    else:
        items = [_as_str(value) or ""]
    return tuple(item.strip() for item in items if item and item.strip())


def _unique(values) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


_default_parser = RuleParser()


def extract_metadata(path: str, raw_text: str) -> RuleMetadata:
    """Extract metadata from one rule document. Never raises on malformed input."""
    return _default_parser.extract_metadata(path, raw_text)
