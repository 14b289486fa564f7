"""claude-skills — install shared Claude skills into a project.

Fetches SKILL.md bundles from a GitHub catalog, writes them into
.claude/skills/, and can wire up a hook that makes the agent
evaluate those skills before it edits code.
"""

__version__ = "0.1.0"

SKILLS_DIR = ".claude/skills"
SKILL_FILENAME = "SKILL.md"
