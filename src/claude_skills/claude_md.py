"""Append the skill-evaluation rule to a project's CLAUDE.md."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger("claude_skills.claude_md")

CLAUDE_MD = "CLAUDE.md"
RULE_MARKER = "skill_evaluation:"

RULE_BLOCK = """\
skill_evaluation:
  mandatory: true
  rule: |
    BEFORE writing ANY code, you MUST:
    1. List EVERY skill from the system-reminder's available skills section
    2. For each skill, write: [skill-name] → ACTIVATE / SKIP — [one-line reason]
    3. Call Skill(name) for every skill marked ACTIVATE
    4. Only THEN proceed to implementation
    If you skip this evaluation, your response is INCOMPLETE and WRONG."""


def patch_document(existing: str, block: str = RULE_BLOCK, marker: str = RULE_MARKER) -> str | None:
    """Return ``existing`` with ``block`` appended, or None if ``marker`` is present."""
    if marker in existing:
        return None
    trimmed = existing.rstrip()
    if not trimmed:
        return block + "\n"
    return f"{trimmed}\n\n{block}\n"


def ensure_rule_block(project_root: Path) -> bool:
    """Make sure CLAUDE.md carries the skill-evaluation block exactly once.

    Args:
        project_root: Root of the consuming project.

    Returns:
        bool: True if CLAUDE.md was written, False if the block was already there.
    """
    path = project_root / CLAUDE_MD
    created = not path.exists()
    existing = "" if created else path.read_text(encoding="utf-8")

    updated = patch_document(existing)
    if updated is None:
        logger.info("%s already has the skill_evaluation block", path)
        return False

    path.write_text(updated, encoding="utf-8")
    if created:
        path.chmod(0o644)
    logger.info("Appended skill_evaluation block to %s", path)
    return True
