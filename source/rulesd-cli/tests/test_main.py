"""Tests for the rules.d CLI."""

import json

import pytest

from rulesd_cli.main import build_parser, parse_args


class TestParseArgs:
    """Tests for argument parsing."""

    def test_recommend_arguments(self) -> None:
        args = parse_args(["recommend", "-t", "coding", "-l", "python", "-p", "security", "performance"])

        assert args.command == "recommend"
        assert args.type == "coding"
        assert args.language == "python"
        assert args.priorities == ["security", "performance"]

    def test_invalid_scenario_type_exits_2(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["recommend", "-t", "cooking"])

        assert exc_info.value.code == 2
        assert "invalid choice" in capsys.readouterr().err

    def test_invalid_priority_exits_2(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["recommend", "-t", "coding", "-p", "speed"])
        assert exc_info.value.code == 2

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCommands:
    """Tests for running subcommands."""

    def test_list(self, run_cli) -> None:
        code, output = run_cli("list")

        assert code == 0
        assert "python-rules" in output
        assert "testing-rules" in output

    def test_list_filtered_by_tag(self, run_cli) -> None:
        code, output = run_cli("list", "-t", "security")

        assert code == 0
        assert "python-rules" in output
        assert "testing-rules" not in output

    def test_list_no_match(self, run_cli) -> None:
        code, output = run_cli("list", "-c", "devops")

        assert code == 0
        assert "No rules found." in output

    def test_get(self, run_cli) -> None:
        code, output = run_cli("get", "python-rules")

        assert code == 0
        assert "Follow PEP 8." in output
        start = output.index("{")
        end = output.index("}\n", start) + 1
        assert json.loads(output[start:end])["priority"] == "high"

    def test_get_unknown_rule(self, run_cli) -> None:
        code, output = run_cli("get", "nope")

        assert code == 1
        assert "Rule not found: nope" in output

    def test_recommend(self, run_cli) -> None:
        code, output = run_cli("recommend", "-t", "coding", "-l", "python", "-p", "security")

        assert code == 0
        assert "Bundle: python-coding-bundle" in output
        assert "security-focused" in output
        assert output.index("python-rules") < output.index("testing-rules")

    def test_bundles(self, run_cli) -> None:
        code, output = run_cli("bundles")

        assert code == 0
        for key in ("python-web-development", "devops-cicd"):
            assert key in output

    def test_search(self, run_cli) -> None:
        code, output = run_cli("search", "pep 8")

        assert code == 0
        assert "python-rules" in output
        assert "testing-rules" not in output

    def test_related(self, run_cli) -> None:
        code, output = run_cli("related", "python-rules")

        assert code == 0
        assert "testing-rules" in output

    def test_prerequisites_none(self, run_cli) -> None:
        code, output = run_cli("prerequisites", "python-rules")

        assert code == 0
        assert "No rules found." in output

    def test_related_unknown_rule(self, run_cli) -> None:
        code, _ = run_cli("related", "nope")
        assert code == 1

    def test_missing_rules_dir(self, tmp_path, console) -> None:
        from rulesd_cli.main import cli_main

        code = cli_main(["--rules-dir", str(tmp_path / "missing"), "list"], out=console)

        assert code == 0
        assert "rules directory not found" in console.export_text()


class TestValidateCommand:
    """Tests for the validate subcommand."""

    def test_valid_corpus(self, run_cli) -> None:
        code, output = run_cli("validate", "--quiet")

        assert code == 0
        assert "Validated 3 rules: 3 passed, 0 failed." in output
        assert "Warnings:" not in output

    def test_failing_document(self, rules_dir, run_cli) -> None:
        (rules_dir / "coding" / "broken-rules.md").write_text("no title here\n", encoding="utf-8")

        code, output = run_cli("validate")

        assert code == 1
        assert "coding/broken-rules.md: Missing title" in output
        assert "1 failed." in output
