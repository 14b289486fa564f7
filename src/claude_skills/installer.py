"""claude-skills installer — write fetched skills into a project.

Layout written:
    <project>/
        .claude/
            skills/
                react-hooks/
                    SKILL.md
                ...

Each install replaces SKILL.md wholesale. There is no merge and no
cross-skill transaction: a failed skill is reported and the rest proceed.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable

from . import SKILL_FILENAME, SKILLS_DIR
from .errors import InstallFailed
from .models import InstallReport, SkillDescriptor

logger = logging.getLogger("claude_skills.installer")


def skills_root(project_root: Path) -> Path:
    return project_root / SKILLS_DIR


def skill_path(project_root: Path, dir_name: str) -> Path:
    """Canonical SKILL.md path for a skill inside a project."""
    return skills_root(project_root) / dir_name / SKILL_FILENAME


def _atomic_write(path: Path, content: str) -> None:
    """Write via a temp file in the same directory, then rename over."""
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


def install_skill(skill: SkillDescriptor, project_root: Path) -> Path:
    """Install a single skill.

    Args:
        skill: The skill to write.
        project_root: Root of the consuming project.

    Returns:
        Path: The written SKILL.md.

    Raises:
        InstallFailed: If the directory or file cannot be written.
    """
    target = skill_path(project_root, skill.dir_name)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        _atomic_write(target, skill.content)
    except OSError as exc:
        raise InstallFailed(skill.dir_name, exc.strerror or str(exc)) from exc

    logger.info("Installed %s -> %s", skill.name, target)
    return target


def install_skills(skills: Iterable[SkillDescriptor], project_root: Path) -> InstallReport:
    """Install a selection of skills into a project.

    Args:
        skills: Non-empty selection of skills.
        project_root: Root of the consuming project.

    Returns:
        InstallReport: Installed skills and per-skill failures.

    Raises:
        ValueError: If the selection is empty.
    """
    selection = list(skills)
    if not selection:
        raise ValueError("No skills selected to install")

    report = InstallReport()
    for skill in selection:
        try:
            install_skill(skill, project_root)
        except InstallFailed as exc:
            logger.warning("%s", exc)
            report.failed.append(exc)
        else:
            report.installed.append(skill)
    return report
