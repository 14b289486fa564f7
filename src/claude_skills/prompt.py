"""Interactive skill picker for the terminal."""

from __future__ import annotations

import re
from typing import Sequence

import click
from rich.console import Console
from rich.table import Table

from .models import SkillDescriptor

CATEGORY_ORDER = ("Frontend", "TypeScript", "Backend", "Quality", "General")

_RANGE_RE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


def human_name(skill: SkillDescriptor) -> str:
    """'react-hooks' -> 'React Hooks'."""
    return " ".join(word[:1].upper() + word[1:] for word in skill.name.replace("-", " ").split())


def strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text


def order_by_category(skills: Sequence[SkillDescriptor]) -> list[SkillDescriptor]:
    """Group skills by category in display order, keeping catalog order inside a group.

    Unknown categories follow the known ones, alphabetically.
    """
    known = {c: i for i, c in enumerate(CATEGORY_ORDER)}
    extra = sorted({s.category for s in skills} - set(known))
    rank = {**known, **{c: len(known) + i for i, c in enumerate(extra)}}
    return sorted(skills, key=lambda s: rank[s.category])


def skills_table(skills: Sequence[SkillDescriptor], title: str = "Available Skills") -> Table:
    """Numbered table; row numbers match :func:`parse_selection` input."""
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Category", style="green")
    table.add_column("Skill", style="cyan bold")
    table.add_column("Description")

    previous = None
    for i, skill in enumerate(skills, start=1):
        category = skill.category if skill.category != previous else ""
        previous = skill.category
        desc = strip_quotes(skill.description)
        table.add_row(
            str(i),
            category,
            human_name(skill),
            desc[:80] + ("..." if len(desc) > 80 else ""),
        )
    return table


def parse_selection(text: str, count: int) -> list[int]:
    """Parse '1,3-5' or 'all' into zero-based indexes, in input order.

    Raises:
        ValueError: On anything that is not a valid number or range.
    """
    text = text.strip().lower()
    if not text:
        return []
    if text in ("all", "*"):
        return list(range(count))

    picked: list[int] = []
    for part in (p.strip() for p in text.split(",")):
        if not part:
            continue
        match = _RANGE_RE.match(part)
        if match:
            start, end = int(match.group(1)), int(match.group(2))
        elif part.isdigit():
            start = end = int(part)
        else:
            raise ValueError(f"Not a number or range: '{part}'")
        if start < 1 or end > count or start > end:
            raise ValueError(f"Out of range (1-{count}): '{part}'")
        for n in range(start, end + 1):
            if n - 1 not in picked:
                picked.append(n - 1)
    return picked


def prompt_skill_selection(
    skills: Sequence[SkillDescriptor], console: Console
) -> list[SkillDescriptor]:
    """Show the catalog and ask which skills to install.

    Returns an empty list when nothing is chosen.

    Raises:
        click.Abort: If the user cancels (Ctrl-C / EOF).
    """
    ordered = order_by_category(skills)
    console.print(skills_table(ordered))

    while True:
        answer = click.prompt(
            "Select skills to install (e.g. 1,3-5 or 'all'; empty for none)",
            default="",
            show_default=False,
        )
        try:
            indexes = parse_selection(answer, len(ordered))
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")
            continue
        return [ordered[i] for i in indexes]
