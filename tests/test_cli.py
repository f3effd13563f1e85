"""
Tests for the agent-readiness CLI — scan and init.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from agent_readiness import __version__
from agent_readiness.cli import cli

README = "# Demo\n\n" + "Everything an agent needs to know about this repo. " * 15


@pytest.fixture
def runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def repo(make_repo):
    return make_repo({
        "README.md": README,
        "LICENSE": "MIT",
        ".editorconfig": "root = true\n",
        "package.json": json.dumps({"name": "demo", "scripts": {"test": "vitest"}}),
        "package-lock.json": "{}",
    })


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


# ─── scan ────────────────────────────────────────────────────────────


class TestScanCommand:
    def test_json_output(self, runner, repo):
        result = runner.invoke(cli, ["scan", str(repo), "--format", "json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert data["repoName"] == "repo"
        assert data["projectInfo"]["detectedTypes"] == ["node"]
        assert len(data["pillars"]) == 7
        assert data["levelResult"]["level"] >= 1
        skipped = [r for rs in data["results"].values() for r in rs if r.get("skipped")]
        assert skipped

    def test_json_to_file(self, runner, repo, tmp_path):
        out = tmp_path / "report.json"
        result = runner.invoke(cli, ["scan", str(repo), "--format", "json", "-o", str(out)])
        assert result.exit_code == 0
        assert json.loads(out.read_text(encoding="utf-8"))["repoName"] == "repo"

    def test_html_output(self, runner, repo):
        result = runner.invoke(cli, ["scan", str(repo), "--format", "html"])
        assert result.exit_code == 0
        assert "window.__READINESS_REPORT__" in result.output

    def test_ci_output(self, runner, repo):
        result = runner.invoke(cli, ["scan", str(repo), "--ci"])
        assert result.exit_code == 0
        assert "=== AGENT READINESS ===" in result.output
        assert "--- Pillar Summary ---" in result.output

    def test_ci_env_var(self, runner, repo):
        result = runner.invoke(cli, ["scan", str(repo)], env={"CI": "true"})
        assert result.exit_code == 0
        assert "=== AGENT READINESS ===" in result.output

    def test_rich_output(self, runner, repo):
        result = runner.invoke(cli, ["scan", str(repo), "--no-color"])
        assert result.exit_code == 0
        assert "PILLAR SUMMARY" in result.output

    def test_min_level_not_reached_exits_1(self, runner, repo):
        result = runner.invoke(cli, ["scan", str(repo), "--ci", "--min-level", "5"])
        assert result.exit_code == 1

    def test_min_level_reached(self, runner, repo):
        result = runner.invoke(cli, ["scan", str(repo), "--ci", "--min-level", "1"])
        assert result.exit_code == 0

    def test_min_level_out_of_range(self, runner, repo):
        result = runner.invoke(cli, ["scan", str(repo), "--min-level", "9"])
        assert result.exit_code == 2

    def test_missing_path(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", str(tmp_path / "nope")])
        assert result.exit_code == 2

    def test_disabled_pillar_from_config(self, runner, repo):
        (repo / ".agent-readiness.yml").write_text(
            "pillars:\n  security: false\ncriteria:\n  linter: false\n", encoding="utf-8"
        )
        result = runner.invoke(cli, ["scan", str(repo), "--format", "json"])
        data = json.loads(result.stdout)

        assert "security" not in data["results"]
        style_ids = [r["criterionId"] for r in data["results"]["style-linting"]]
        assert "linter" not in style_ids

    def test_ai_without_key_warns_and_continues(self, runner, repo):
        result = runner.invoke(cli, ["scan", str(repo), "--format", "json", "--ai"])
        assert result.exit_code == 0
        assert "AI evaluation disabled" in result.stderr
        data = json.loads(result.stdout)
        skipped = [r for rs in data["results"].values() for r in rs if r.get("skipped")]
        assert skipped

    def test_web_serves_report(self, runner, repo):
        with patch("agent_readiness.server.serve_report") as serve:
            result = runner.invoke(cli, ["scan", str(repo), "--ci", "--web"])
        assert result.exit_code == 0
        serve.assert_called_once()
        assert serve.call_args.args[0].repo_name == "repo"


# ─── init ────────────────────────────────────────────────────────────


class TestInitCommand:
    def test_creates_config(self, runner, make_repo):
        repo = make_repo({})
        result = runner.invoke(cli, ["init", str(repo)])
        assert result.exit_code == 0
        assert "Created config file" in result.output
        assert (repo / ".agent-readiness.yml").is_file()

    def test_refuses_existing(self, runner, make_repo):
        repo = make_repo({".agent-readiness.yml": "aiEnabled: false\n"})
        result = runner.invoke(cli, ["init", str(repo)])
        assert result.exit_code == 1
        assert "already exists" in result.output
        assert (repo / ".agent-readiness.yml").read_text() == "aiEnabled: false\n"
