"""Error types raised across the fetch → install → patch pipeline."""

from __future__ import annotations


class ClaudeSkillsError(Exception):
    """Base class for all claude-skills errors."""


class RateLimited(ClaudeSkillsError, ConnectionError):
    """GitHub refused the catalog listing because the quota is exhausted."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(
            f"GitHub API rate limit exceeded (HTTP {status_code}). "
            "Try again later, run `gh auth login`, or set GITHUB_TOKEN."
        )


class CatalogUnreachable(ClaudeSkillsError, ConnectionError):
    """The catalog listing could not be retrieved."""


class InstallFailed(ClaudeSkillsError, OSError):
    """Writing one skill into the project failed."""

    def __init__(self, dir_name: str, reason: str) -> None:
        self.dir_name = dir_name
        self.reason = reason
        super().__init__(f"Failed to install {dir_name}: {reason}")


class SettingsCorrupt(ClaudeSkillsError, ValueError):
    """An existing settings.json is not valid JSON."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"{path} is not valid JSON ({reason}); left untouched.")
