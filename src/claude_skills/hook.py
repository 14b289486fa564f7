"""UserPromptSubmit hook — forced skill evaluation.

Two halves live here:

  - the generator, which writes ``.claude/hooks/skill-forced-eval-hook.sh``
    into a project;
  - the runtime that script executes (``python -m claude_skills.hook``),
    which re-scans ``.claude/skills/*/SKILL.md`` on every prompt and prints

        {"additionalContext": "<instruction text>"}

    on one line.

The runtime never fails the agent's turn: every error path still exits 0.
"""

from __future__ import annotations

import json
import logging
import os
import shlex
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import SKILL_FILENAME, SKILLS_DIR
from .models import parse_frontmatter

logger = logging.getLogger("claude_skills.hook")

HOOK_FILENAME = "skill-forced-eval-hook.sh"
HOOKS_DIR = Path(".claude") / "hooks"
PROJECT_DIR_ENV = "CLAUDE_PROJECT_DIR"

_SCRIPT_TEMPLATE = """\
#!/usr/bin/env bash
# UserPromptSubmit hook that forces explicit skill evaluation.
# Generated by claude-skills; run `claude-skills enforce` to regenerate.

cat > /dev/null

export {env}="${{{env}:-.}}"

if ! {python} -m claude_skills.hook 2>/dev/null; then
  # Interpreter or package gone: emit the protocol without the skill list.
  cat <<'PAYLOAD'
{fallback}
PAYLOAD
fi
exit 0
"""


def hook_path_for(project_root: Path) -> Path:
    return project_root.resolve() / HOOKS_DIR / HOOK_FILENAME


def render_hook_script(python: str = sys.executable) -> str:
    """Render the hook shell script.

    Args:
        python: Interpreter that has claude_skills importable. If it is
            missing when the hook fires, the script prints the protocol
            with no project skills listed.
    """
    return _SCRIPT_TEMPLATE.format(
        env=PROJECT_DIR_ENV,
        python=shlex.quote(python),
        fallback=static_payload(),
    )


def write_hook_script(project_root: Path, python: str = sys.executable) -> Path:
    """Write the executable hook script into ``.claude/hooks/``.

    Returns:
        Path: Absolute path of the script.
    """
    path = hook_path_for(project_root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_hook_script(python), encoding="utf-8")
    path.chmod(0o755)
    return path


# ── Runtime ───────────────────────────────────────────────────────────


def discover_skills(project_root: Path) -> list[tuple[str, str]]:
    """Find installed skills as (name, description) pairs.

    Skills are visited in lexicographic path order so the same set of
    installed skills always renders the same list. Unreadable files are
    skipped.
    """
    pairs: list[tuple[str, str]] = []
    pattern = f"{SKILLS_DIR}/*/{SKILL_FILENAME}"
    for skill_file in sorted(project_root.glob(pattern)):
        try:
            content = skill_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping %s: %s", skill_file, exc)
            continue
        fields = parse_frontmatter(content, skill_file.parent.name)
        pairs.append((fields["name"], fields["description"]))
    return pairs


def build_instruction(skills: Sequence[tuple[str, str]]) -> str:
    """Render the three-step evaluation protocol around a skill list."""
    lines = [
        "INSTRUCTION: MANDATORY SKILL ACTIVATION SEQUENCE",
        "",
        "<available_skills>",
        "System skills (from system-reminder):",
        "  - Check system-reminder for built-in skills",
    ]
    if skills:
        lines.append("Project skills:")
        for name, description in skills:
            lines.append(f"  - {name}: {description}" if description else f"  - {name}")
    lines += [
        "</available_skills>",
        "",
        "Step 1 - EVALUATE (do this in your response):",
        "For each skill in <available_skills>, state: [skill-name] - YES/NO - [reason]",
        "",
        "Step 2 - ACTIVATE (do this immediately after Step 1):",
        "IF any skills are YES -> Use Skill(skill-name) tool for EACH relevant skill NOW",
        "IF no skills are YES -> State 'No skills needed' and proceed",
        "",
        "Step 3 - IMPLEMENT:",
        "Only after Step 2 is complete, proceed with implementation.",
        "",
        "CRITICAL: You MUST call Skill() tool in Step 2. Do NOT skip to implementation.",
    ]
    return "\n".join(lines)


def render_payload(project_root: Path) -> str:
    """One-line JSON payload for the current state of ``project_root``."""
    instruction = build_instruction(discover_skills(project_root))
    return json.dumps({"additionalContext": instruction}, ensure_ascii=False)


def static_payload() -> str:
    """Payload with the protocol only; ASCII-escaped so it can be embedded in shell."""
    return json.dumps({"additionalContext": build_instruction([])})


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Hook entry point. Prints the payload and returns 0 no matter what."""
    root = Path(argv[0]) if argv else Path(os.environ.get(PROJECT_DIR_ENV) or ".")
    try:
        payload = render_payload(root)
    except Exception as exc:  # the agent's turn must never be blocked
        logger.debug("Skill discovery failed: %s", exc)
        payload = static_payload()
    print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
