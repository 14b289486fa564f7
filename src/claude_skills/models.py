"""claude-skills data models — catalog coordinates, skill descriptors, reports.

A skill is one directory in the remote catalog holding a single SKILL.md.
The SKILL.md starts with a YAML front-matter block:

    ---
    name: react-hooks
    description: Rules for writing React hooks
    category: Frontend
    ---

which is the only structure this package ever reads from a skill.
"""

from __future__ import annotations

import os
import re
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import InstallFailed

DEFAULT_OWNER = "Spardutti"
DEFAULT_REPO = "claude-skills"
DEFAULT_REF = "main"
DEFAULT_CATEGORY = "General"

_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---", re.DOTALL)
_FIELD_LINE_RE = re.compile(r"^(name|description|category):[ \t]*(.+?)[ \t]*\r?$", re.MULTILINE)


def parse_frontmatter(content: str, fallback_name: str) -> dict[str, str]:
    """Extract name, description and category from a SKILL.md header.

    Shared by the catalog fetch and the hook runtime so both read skills
    the same way.

    Args:
        content: Full SKILL.md text.
        fallback_name: Used as the name when the header has none.

    Returns:
        dict with ``name``, ``description`` and ``category`` keys. A missing
        or unparsable header yields the fallbacks, never an error.
    """
    fields = {"name": fallback_name, "description": "", "category": DEFAULT_CATEGORY}

    match = _FRONTMATTER_RE.match(content)
    if not match:
        return fields

    header = match.group(1)
    try:
        raw = yaml.safe_load(header)
    except yaml.YAMLError:
        raw = None
    if not isinstance(raw, dict):
        # Plain "key: value" lines that YAML rejects, e.g. "description: Use when: ..."
        raw = {key: _unquote(value) for key, value in _FIELD_LINE_RE.findall(header)}

    for key in fields:
        value = raw.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            fields[key] = text
    return fields


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


class CatalogSource(BaseModel):
    """Where the skill catalog lives on GitHub."""

    owner: str = DEFAULT_OWNER
    repo: str = DEFAULT_REPO
    ref: str = DEFAULT_REF
    path: str = Field(default="skills", description="Catalog root inside the repository")

    @classmethod
    def from_env(cls, repo: Optional[str] = None, ref: Optional[str] = None) -> "CatalogSource":
        """Build a source from explicit values, then CLAUDE_SKILLS_* env vars.

        Args:
            repo: ``owner/name`` slug; overrides CLAUDE_SKILLS_REPO.
            ref: Branch, tag or sha; overrides CLAUDE_SKILLS_REF.

        Raises:
            ValueError: If the slug is not ``owner/name``.
        """
        slug = repo or os.environ.get("CLAUDE_SKILLS_REPO")
        ref = ref or os.environ.get("CLAUDE_SKILLS_REF") or DEFAULT_REF
        if not slug:
            return cls(ref=ref)

        owner, sep, name = slug.strip().partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"Repository must look like 'owner/name': got '{slug}'")
        return cls(owner=owner, repo=name, ref=ref)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def contents_url(self) -> str:
        """GitHub contents API URL listing the catalog root."""
        return (
            f"https://api.github.com/repos/{self.owner}/{self.repo}"
            f"/contents/{self.path}?ref={self.ref}"
        )

    def raw_url(self, dir_name: str) -> str:
        """Raw download URL for one skill's SKILL.md."""
        return (
            f"https://raw.githubusercontent.com/{self.owner}/{self.repo}"
            f"/{self.ref}/{self.path}/{dir_name}/SKILL.md"
        )


class SkillDescriptor(BaseModel):
    """One skill fetched from the catalog. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    dir_name: str = Field(description="Catalog directory; the install identity")
    name: str
    description: str = ""
    category: str = DEFAULT_CATEGORY
    content: str = Field(description="Full SKILL.md text, written verbatim")

    @field_validator("dir_name")
    @classmethod
    def validate_dir_name(cls, v: str) -> str:
        """A single, non-empty path component."""
        if not v or v in (".", "..") or "/" in v or "\\" in v:
            raise ValueError(f"Skill directory must be a single path component: got '{v}'")
        return v

    @classmethod
    def from_content(cls, dir_name: str, content: str) -> "SkillDescriptor":
        """Build a descriptor from a SKILL.md body and its catalog directory."""
        return cls(dir_name=dir_name, content=content, **parse_frontmatter(content, dir_name))


class FetchFailure(BaseModel):
    """A catalog directory whose SKILL.md could not be fetched."""

    dir_name: str
    reason: str


class CatalogResult(BaseModel):
    """Skills available in the catalog, in listing order, plus skipped ones."""

    skills: list[SkillDescriptor] = Field(default_factory=list)
    failures: list[FetchFailure] = Field(default_factory=list)

    def by_dir_name(self) -> dict[str, SkillDescriptor]:
        return {s.dir_name: s for s in self.skills}


class InstallReport(BaseModel):
    """Outcome of installing a selection of skills."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    installed: list[SkillDescriptor] = Field(default_factory=list)
    failed: list[InstallFailed] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

