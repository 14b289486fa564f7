"""claude-skills CLI — pull shared skills into a project from the terminal.

Commands:
    list        Show the skills published in the catalog
    install     Pick skills from the catalog and write them into .claude/skills/
    enforce     Install the forced-evaluation hook and CLAUDE.md rule
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import click
from rich.console import Console

from . import SKILLS_DIR, SKILL_FILENAME, __version__
from .enforcement import enable_enforcement
from .errors import CatalogUnreachable, RateLimited
from .installer import install_skills
from .models import CatalogResult, CatalogSource, SkillDescriptor
from .prompt import order_by_category, prompt_skill_selection, skills_table
from .remote import CatalogClient

console = Console()

repo_option = click.option(
    "--repo", default=None, metavar="OWNER/NAME",
    help="Catalog repository (default: CLAUDE_SKILLS_REPO or Spardutti/claude-skills).",
)
ref_option = click.option(
    "--ref", default=None, help="Branch, tag or commit (default: CLAUDE_SKILLS_REF or main).",
)
dir_option = click.option(
    "--dir", "directory", default=".", type=click.Path(file_okay=False),
    help="Project root to install into.",
)


@click.group()
@click.version_option(__version__, prog_name="claude-skills")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def main(verbose: bool) -> None:
    """claude-skills — install shared Claude skills into your project.

    Fetches skills from a GitHub catalog, writes them to .claude/skills/,
    and can force the agent to evaluate them before every edit.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )


def _fetch_catalog(repo: Optional[str], ref: Optional[str]) -> CatalogResult:
    """Fetch the catalog or exit with a readable error."""
    try:
        source = CatalogSource.from_env(repo, ref)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--repo") from exc

    client = CatalogClient(source)
    console.print(f"\n  Fetching available skills from [cyan]{source.slug}[/cyan]...\n")
    try:
        result = client.fetch_skills()
    except RateLimited as exc:
        console.print(f"[red]Rate limited:[/red] {exc}")
        sys.exit(1)
    except CatalogUnreachable as exc:
        console.print(f"[red]Catalog unreachable:[/red] {exc}")
        sys.exit(1)

    for failure in result.failures:
        console.print(f"[yellow]Skipped:[/yellow] {failure.dir_name} ({failure.reason})")
    return result


def _pick_by_name(result: CatalogResult, names: Sequence[str]) -> list[SkillDescriptor]:
    """Resolve --skill values against directory names, then display names."""
    by_dir = result.by_dir_name()
    by_name = {s.name: s for s in result.skills}
    picked: list[SkillDescriptor] = []
    for name in names:
        skill = by_dir.get(name) or by_name.get(name)
        if skill is None:
            console.print(f"[yellow]Warning:[/yellow] skill '{name}' is not in the catalog")
        elif skill not in picked:
            picked.append(skill)
    return picked


def _report_enforcement(project: Path) -> bool:
    """Enable enforcement and print what changed. Returns False on a settings error."""
    report = enable_enforcement(project)
    hook_rel = Path(report.hook_path).relative_to(project)
    console.print(f"  Hook installed: {hook_rel}")

    if report.settings_error:
        console.print(f"[red]Settings not updated:[/red] {report.settings_error}")
    else:
        for label, added in (
            ("UserPromptSubmit hook", report.prompt_hook_added),
            ("PreToolUse reminder", report.pretool_hook_added),
        ):
            state = "[green]added[/green]" if added else "[dim]already present[/dim]"
            console.print(f"  {label}: {state} (.claude/settings.json)")

    state = "[green]updated[/green]" if report.claude_md_updated else "[dim]already present[/dim]"
    console.print(f"  CLAUDE.md skill_evaluation block: {state}")
    return report.settings_error is None


@main.command("list")
@repo_option
@ref_option
def list_skills(repo: Optional[str], ref: Optional[str]) -> None:
    """Show the skills published in the catalog."""
    result = _fetch_catalog(repo, ref)
    if not result.skills:
        console.print("[dim]No skills found.[/dim]")
        return
    console.print(skills_table(order_by_category(result.skills)))


@main.command()
@dir_option
@click.option("--all", "all_", is_flag=True, help="Install every skill without prompting.")
@click.option("--skill", "names", multiple=True, help="Skill to install (repeatable); skips the prompt.")
@click.option("--enforce", is_flag=True, help="Also install the forced-evaluation hook.")
@repo_option
@ref_option
def install(
    directory: str,
    all_: bool,
    names: tuple[str, ...],
    enforce: bool,
    repo: Optional[str],
    ref: Optional[str],
) -> None:
    """Pick skills from the catalog and write them into .claude/skills/."""
    project = Path(directory).resolve()
    result = _fetch_catalog(repo, ref)
    if not result.skills:
        console.print("[dim]No skills found.[/dim]")
        return

    if all_:
        selected = list(result.skills)
    elif names:
        selected = _pick_by_name(result, names)
    else:
        try:
            selected = prompt_skill_selection(result.skills, console)
        except click.Abort:
            console.print("\n  Cancelled.\n")
            return

    if not selected:
        console.print("\n  No skills selected.")
        return

    console.print()
    report = install_skills(selected, project)
    for skill in report.installed:
        console.print(
            f"  [green]Installed:[/green] {skill.name} → "
            f"{SKILLS_DIR}/{skill.dir_name}/{SKILL_FILENAME}"
        )
    for failure in report.failed:
        console.print(f"  [red]Install failed:[/red] {failure}")
    console.print(f"\n  Done! {len(report.installed)} skill(s) installed.\n")

    settings_ok = _report_enforcement(project) if enforce else True
    if not report.ok or not settings_ok:
        sys.exit(1)


@main.command()
@dir_option
def enforce(directory: str) -> None:
    """Install the forced-evaluation hook and CLAUDE.md rule.

    Safe to re-run: existing registrations and the CLAUDE.md block are
    detected and left alone.
    """
    project = Path(directory).resolve()
    project.mkdir(parents=True, exist_ok=True)
    if not _report_enforcement(project):
        sys.exit(1)


if __name__ == "__main__":
    main()
