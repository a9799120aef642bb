"""Pytest configuration and fixtures for rules.d CLI tests."""

import os
from unittest.mock import patch

import pytest
from rich.console import Console


CORPUS = {
    "rules.md": "# General AI Operations\n\nState assumptions explicitly.\n",
    "coding/python-rules.md": (
        "---\nid: python-rules\npriority: high\ntags: [python, security]\n"
        "related: [testing-rules]\n---\n# Python Development Rules\n\nFollow PEP 8.\n"
    ),
    "coding/testing-rules.md": "# Testing Rules\n\nWrite the test first.\n",
}


@pytest.fixture
def rules_dir(tmp_path):
    """Create a small rule corpus."""
    root = tmp_path / "corpus"
    for relative, text in CORPUS.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def console():
    """Console that records output instead of writing to a terminal."""
    return Console(record=True, width=200, force_terminal=False, color_system=None)


@pytest.fixture
def run_cli(rules_dir, console):
    """Run the CLI against the sample corpus and return (exit code, output)."""
    from rulesd_cli.main import cli_main

    def _run(*argv: str) -> tuple[int, str]:
        with patch.dict(os.environ, {}, clear=True):
            code = cli_main(["--rules-dir", str(rules_dir), *argv], out=console)
        return code, console.export_text()

    return _run
