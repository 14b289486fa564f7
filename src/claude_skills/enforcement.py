"""Wire forced skill evaluation into a project.

Three artifacts, each patched idempotently:
    .claude/hooks/skill-forced-eval-hook.sh   (always rewritten)
    .claude/settings.json                     (UserPromptSubmit + PreToolUse)
    CLAUDE.md                                 (skill_evaluation block)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from .claude_md import ensure_rule_block
from .errors import SettingsCorrupt
from .hook import write_hook_script
from .settings import ensure_command_hook, ensure_prompt_hook, settings_path_for

logger = logging.getLogger("claude_skills.enforcement")

PROMPT_EVENT = "UserPromptSubmit"
PRETOOL_EVENT = "PreToolUse"
PRETOOL_MATCHER = "Edit|Write|NotebookEdit"
PRETOOL_TIMEOUT_S = 15
PRETOOL_MARKER = "REMINDER"
PRETOOL_PROMPT = (
    "REMINDER: This project has skills installed in .claude/skills/. "
    "Before writing code you MUST evaluate and activate relevant skills using "
    "the Skill() tool. If you have not done this yet in the current conversation, "
    "STOP and do it now before proceeding with this edit. Always return 'approve'."
)


class EnforcementReport(BaseModel):
    """What enabling enforcement changed. None means the step did not run."""

    hook_path: str
    prompt_hook_added: Optional[bool] = None
    pretool_hook_added: Optional[bool] = None
    claude_md_updated: bool = False
    settings_error: Optional[str] = None


def enable_enforcement(project_root: Path, python: str = sys.executable) -> EnforcementReport:
    """Install the hook script and patch settings.json and CLAUDE.md.

    A corrupt settings.json skips only the settings step; the error is
    recorded on the report and CLAUDE.md is still patched.

    Args:
        project_root: Root of the consuming project.
        python: Interpreter the hook script runs.

    Returns:
        EnforcementReport: Per-artifact outcome.
    """
    project_root = project_root.resolve()
    hook_path = write_hook_script(project_root, python)
    report = EnforcementReport(hook_path=str(hook_path))

    settings_path = settings_path_for(project_root)
    try:
        report.prompt_hook_added = ensure_command_hook(settings_path, PROMPT_EVENT, hook_path)
        report.pretool_hook_added = ensure_prompt_hook(
            settings_path,
            PRETOOL_EVENT,
            prompt=PRETOOL_PROMPT,
            marker=PRETOOL_MARKER,
            matcher=PRETOOL_MATCHER,
            timeout=PRETOOL_TIMEOUT_S,
        )
    except SettingsCorrupt as exc:
        logger.error("%s", exc)
        report.settings_error = str(exc)

    report.claude_md_updated = ensure_rule_block(project_root)
    return report
