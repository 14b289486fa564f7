"""Tests for the CLAUDE.md skill_evaluation block."""

import stat
from pathlib import Path

from claude_skills.claude_md import RULE_BLOCK, RULE_MARKER, ensure_rule_block, patch_document


class TestPatchDocument:
    def test_empty_document_gets_block_only(self):
        assert patch_document("") == RULE_BLOCK + "\n"

    def test_whitespace_only_counts_as_empty(self):
        assert patch_document("\n\n  \n") == RULE_BLOCK + "\n"

    def test_appends_after_trimmed_content(self):
        result = patch_document("# Project\n\nSome rules.\n\n\n")
        assert result == "# Project\n\nSome rules.\n\n" + RULE_BLOCK + "\n"

    def test_marker_present_is_noop(self):
        assert patch_document("# Notes\nskill_evaluation:\n  custom: yes\n") is None


class TestEnsureRuleBlock:
    def test_creates_missing_file(self, tmp_path: Path):
        assert ensure_rule_block(tmp_path) is True
        assert (tmp_path / "CLAUDE.md").read_text() == RULE_BLOCK + "\n"

    def test_twice_keeps_one_marker(self, tmp_path: Path):
        (tmp_path / "CLAUDE.md").write_text("# My project\n")
        assert ensure_rule_block(tmp_path) is True
        after_first = (tmp_path / "CLAUDE.md").read_bytes()
        assert ensure_rule_block(tmp_path) is False
        text = (tmp_path / "CLAUDE.md").read_text()
        assert text.count(RULE_MARKER) == 1
        assert text.startswith("# My project\n")
        assert (tmp_path / "CLAUDE.md").read_bytes() == after_first

    def test_existing_file_mode_preserved(self, tmp_path: Path):
        path = tmp_path / "CLAUDE.md"
        path.write_text("# Private notes\n")
        path.chmod(0o600)
        assert ensure_rule_block(tmp_path) is True
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_new_file_is_world_readable(self, tmp_path: Path):
        ensure_rule_block(tmp_path)
        assert stat.S_IMODE((tmp_path / "CLAUDE.md").stat().st_mode) == 0o644
