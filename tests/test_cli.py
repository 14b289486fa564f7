"""Tests for the claude-skills CLI: list, install, enforce."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from claude_skills.cli import main
from claude_skills.errors import CatalogUnreachable, RateLimited
from claude_skills.models import CatalogResult, FetchFailure, SkillDescriptor


def catalog(*dir_names: str, failures: tuple[str, ...] = ()) -> CatalogResult:
    return CatalogResult(
        skills=[
            SkillDescriptor.from_content(d, f"---\nname: {d}\ndescription: {d} rules\n---\n")
            for d in dir_names
        ],
        failures=[FetchFailure(dir_name=f, reason="HTTP 404") for f in failures],
    )


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fake_client():
    """Patch CatalogClient so fetch_skills returns whatever the test sets."""
    with patch("claude_skills.cli.CatalogClient") as cls:
        instance = cls.return_value
        instance.fetch_skills.return_value = catalog("alpha", "beta")
        yield instance


class TestListCommand:
    def test_lists_skills(self, runner, fake_client):
        result = runner.invoke(main, ["list"])
        assert result.exit_code == 0
        assert "Alpha" in result.output
        assert "beta rules" in result.output

    def test_rate_limited_exits_1(self, runner, fake_client):
        fake_client.fetch_skills.side_effect = RateLimited(403)
        result = runner.invoke(main, ["list"])
        assert result.exit_code == 1
        assert "Rate limited" in result.output

    def test_bad_repo_slug(self, runner, fake_client):
        result = runner.invoke(main, ["list", "--repo", "nope"])
        assert result.exit_code == 2


class TestInstallCommand:
    def test_install_all(self, runner, fake_client, tmp_path: Path):
        result = runner.invoke(main, ["install", "--all", "--dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / ".claude/skills/alpha/SKILL.md").exists()
        assert (tmp_path / ".claude/skills/beta/SKILL.md").exists()
        assert "2 skill(s) installed" in result.output

    def test_four_of_five_after_partial_fetch(self, runner, fake_client, tmp_path: Path):
        fake_client.fetch_skills.return_value = catalog(
            "a", "b", "d", "e", failures=("c",)
        )
        result = runner.invoke(main, ["install", "--all", "--dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "Skipped" in result.output
        installed = sorted(p.parent.name for p in tmp_path.glob(".claude/skills/*/SKILL.md"))
        assert installed == ["a", "b", "d", "e"]

    def test_install_by_name_warns_unknown(self, runner, fake_client, tmp_path: Path):
        result = runner.invoke(
            main, ["install", "--skill", "beta", "--skill", "ghost", "--dir", str(tmp_path)]
        )
        assert result.exit_code == 0, result.output
        assert "ghost" in result.output
        assert (tmp_path / ".claude/skills/beta/SKILL.md").exists()
        assert not (tmp_path / ".claude/skills/alpha").exists()

    def test_interactive_selection(self, runner, fake_client, tmp_path: Path):
        result = runner.invoke(main, ["install", "--dir", str(tmp_path)], input="1\n")
        assert result.exit_code == 0, result.output
        assert (tmp_path / ".claude/skills/alpha/SKILL.md").exists()
        assert not (tmp_path / ".claude/skills/beta").exists()

    def test_empty_selection_writes_nothing(self, runner, fake_client, tmp_path: Path):
        result = runner.invoke(main, ["install", "--dir", str(tmp_path)], input="\n")
        assert result.exit_code == 0
        assert "No skills selected" in result.output
        assert not (tmp_path / ".claude").exists()

    def test_cancel_writes_nothing(self, runner, fake_client, tmp_path: Path):
        result = runner.invoke(main, ["install", "--dir", str(tmp_path)], input="")
        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert not (tmp_path / ".claude").exists()

    def test_unreachable_aborts_before_writes(self, runner, fake_client, tmp_path: Path):
        fake_client.fetch_skills.side_effect = CatalogUnreachable("boom")
        result = runner.invoke(main, ["install", "--all", "--dir", str(tmp_path)])
        assert result.exit_code == 1
        assert not (tmp_path / ".claude").exists()

    def test_install_with_enforce(self, runner, fake_client, tmp_path: Path):
        result = runner.invoke(main, ["install", "--all", "--enforce", "--dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        settings = json.loads((tmp_path / ".claude/settings.json").read_text())
        assert len(settings["hooks"]["UserPromptSubmit"]) == 1
        assert (tmp_path / "CLAUDE.md").exists()


class TestEnforceCommand:
    def test_enforce_twice(self, runner, tmp_path: Path):
        first = runner.invoke(main, ["enforce", "--dir", str(tmp_path)])
        assert first.exit_code == 0, first.output
        second = runner.invoke(main, ["enforce", "--dir", str(tmp_path)])
        assert second.exit_code == 0
        assert "already present" in second.output

        settings = json.loads((tmp_path / ".claude/settings.json").read_text())
        assert len(settings["hooks"]["UserPromptSubmit"]) == 1
        assert (tmp_path / ".claude/hooks/skill-forced-eval-hook.sh").exists()

    def test_corrupt_settings_exits_1(self, runner, tmp_path: Path):
        settings = tmp_path / ".claude" / "settings.json"
        settings.parent.mkdir(parents=True)
        settings.write_text("{broken")
        result = runner.invoke(main, ["enforce", "--dir", str(tmp_path)])
        assert result.exit_code == 1
        assert settings.read_text() == "{broken"
        assert (tmp_path / "CLAUDE.md").exists()
