"""Tests for the claude-skills installer — layout, overwrite, per-skill failures."""

from pathlib import Path
from unittest.mock import patch

import pytest

from claude_skills.errors import InstallFailed
from claude_skills.installer import install_skill, install_skills, skill_path
from claude_skills.models import SkillDescriptor


@pytest.fixture
def skills() -> list[SkillDescriptor]:
    return [
        SkillDescriptor.from_content("react-hooks", "---\nname: react-hooks\n---\nUse hooks.\n"),
        SkillDescriptor.from_content("ts-strict", "---\nname: ts-strict\n---\nBe strict.\n"),
    ]


class TestInstall:
    """Test writing skills into a project."""

    def test_writes_canonical_paths(self, tmp_path: Path, skills):
        report = install_skills(skills, tmp_path)
        assert report.ok
        assert [s.dir_name for s in report.installed] == ["react-hooks", "ts-strict"]
        for skill in skills:
            path = tmp_path / ".claude" / "skills" / skill.dir_name / "SKILL.md"
            assert path.read_text() == skill.content

    def test_reinstall_is_byte_identical(self, tmp_path: Path, skills):
        install_skills(skills, tmp_path)
        first = {s.dir_name: skill_path(tmp_path, s.dir_name).read_bytes() for s in skills}
        install_skills(skills, tmp_path)
        second = {s.dir_name: skill_path(tmp_path, s.dir_name).read_bytes() for s in skills}
        assert first == second

    def test_overwrites_existing_file(self, tmp_path: Path, skills):
        path = skill_path(tmp_path, "react-hooks")
        path.parent.mkdir(parents=True)
        path.write_text("a much longer stale body that should disappear entirely\n" * 10)
        install_skill(skills[0], tmp_path)
        assert path.read_text() == skills[0].content

    def test_leaves_no_temp_files(self, tmp_path: Path, skills):
        install_skills(skills, tmp_path)
        leftovers = list((tmp_path / ".claude" / "skills").rglob("*.tmp"))
        assert leftovers == []

    def test_unrelated_files_untouched(self, tmp_path: Path, skills):
        other = tmp_path / ".claude" / "skills" / "mine" / "SKILL.md"
        other.parent.mkdir(parents=True)
        other.write_text("local skill")
        install_skills(skills, tmp_path)
        assert other.read_text() == "local skill"

    def test_empty_selection_rejected(self, tmp_path: Path):
        with pytest.raises(ValueError, match="No skills"):
            install_skills([], tmp_path)


class TestInstallFailures:
    """Test that one failing skill does not stop the others."""

    def test_failure_is_isolated(self, tmp_path: Path, skills):
        # A regular file where the skill directory should go.
        blocker = tmp_path / ".claude" / "skills" / "react-hooks"
        blocker.parent.mkdir(parents=True)
        blocker.write_text("not a directory")

        report = install_skills(skills, tmp_path)
        assert not report.ok
        assert [f.dir_name for f in report.failed] == ["react-hooks"]
        assert [s.dir_name for s in report.installed] == ["ts-strict"]
        assert skill_path(tmp_path, "ts-strict").exists()

    def test_install_skill_raises_install_failed(self, tmp_path: Path, skills):
        with patch("claude_skills.installer._atomic_write", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(InstallFailed) as excinfo:
                install_skill(skills[1], tmp_path)
        assert excinfo.value.dir_name == "ts-strict"
        assert "Permission denied" in str(excinfo.value)
