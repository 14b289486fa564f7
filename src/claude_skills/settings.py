"""Claude settings.json hook registration.

Settings shape (only the parts this module touches):

    {
      "hooks": {
        "UserPromptSubmit": [
          {"hooks": [{"type": "command", "command": "/abs/path/hook.sh"}]}
        ],
        "PreToolUse": [
          {"matcher": "Edit|Write", "hooks": [{"type": "prompt", "prompt": "..."}]}
        ]
      },
      ...every other key is preserved as-is...
    }

Settings are loaded fresh, transformed by pure functions, and written back
only when something changed.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

from .errors import SettingsCorrupt

logger = logging.getLogger("claude_skills.settings")

SETTINGS_RELPATH = Path(".claude") / "settings.json"


def settings_path_for(project_root: Path) -> Path:
    return project_root / SETTINGS_RELPATH


def load_settings(path: Path) -> dict[str, Any]:
    """Load settings.json.

    Args:
        path: Path to settings.json.

    Returns:
        dict: Parsed settings; ``{}`` when the file is missing or holds
        valid JSON that is not an object.

    Raises:
        SettingsCorrupt: If the file exists but is not valid JSON.
    """
    if not path.exists():
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SettingsCorrupt(str(path), str(exc)) from exc

    if not isinstance(data, dict):
        logger.warning("%s is not a JSON object, starting from {}", path)
        return {}
    return data


def save_settings(path: Path, settings: dict[str, Any]) -> None:
    """Write settings with two-space indentation and a trailing newline."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings, indent=2) + "\n", encoding="utf-8")


def _event_hooks(settings: dict[str, Any], event: str) -> list[dict[str, Any]]:
    """Every hook dict registered under an event, flattened."""
    hooks = settings.get("hooks")
    if not isinstance(hooks, dict):
        return []
    entries = hooks.get(event)
    if not isinstance(entries, list):
        return []

    found: list[dict[str, Any]] = []
    for entry in entries:
        if not isinstance(entry, dict) or not isinstance(entry.get("hooks"), list):
            continue
        found.extend(h for h in entry["hooks"] if isinstance(h, dict))
    return found


def find_hook(
    settings: dict[str, Any], event: str, predicate: Callable[[dict[str, Any]], bool]
) -> Optional[dict[str, Any]]:
    """Return the first hook under ``event`` matching ``predicate``."""
    for hook in _event_hooks(settings, event):
        if predicate(hook):
            return hook
    return None


def command_endswith(filename: str) -> Callable[[dict[str, Any]], bool]:
    def predicate(hook: dict[str, Any]) -> bool:
        command = hook.get("command")
        return isinstance(command, str) and command.endswith(filename)

    return predicate


def prompt_contains(marker: str) -> Callable[[dict[str, Any]], bool]:
    def predicate(hook: dict[str, Any]) -> bool:
        prompt = hook.get("prompt")
        return hook.get("type") == "prompt" and isinstance(prompt, str) and marker in prompt

    return predicate


def add_hook_entry(settings: dict[str, Any], event: str, entry: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``settings`` with ``entry`` appended under ``event``.

    A missing (or malformed) ``hooks`` object or event list is created;
    existing entries and sibling keys are kept untouched.
    """
    updated = copy.deepcopy(settings)
    hooks = updated.get("hooks")
    if not isinstance(hooks, dict):
        hooks = {}
        updated["hooks"] = hooks

    entries = hooks.get(event)
    if isinstance(entries, list):
        entries.append(entry)
    else:
        hooks[event] = [entry]
    return updated


def ensure_command_hook(settings_path: Path, event: str, hook_path: Path) -> bool:
    """Register a command hook once under ``event``.

    A registration counts as present when any command under the event ends
    with the hook script's filename.

    Args:
        settings_path: Path to settings.json.
        event: Hook event name, e.g. ``UserPromptSubmit``.
        hook_path: Absolute path of the hook script.

    Returns:
        bool: True if settings.json was written, False if already registered.

    Raises:
        SettingsCorrupt: If settings.json exists but is not valid JSON.
    """
    settings = load_settings(settings_path)
    command = str(hook_path)

    existing = find_hook(settings, event, command_endswith(hook_path.name))
    if existing is not None:
        if existing.get("command") != command:
            logger.warning(
                "%s already registers %s at %s; leaving it as-is",
                event, hook_path.name, existing.get("command"),
            )
        return False

    entry = {"hooks": [{"type": "command", "command": command}]}
    save_settings(settings_path, add_hook_entry(settings, event, entry))
    logger.info("Registered %s hook %s", event, command)
    return True


def ensure_prompt_hook(
    settings_path: Path,
    event: str,
    prompt: str,
    marker: str,
    matcher: Optional[str] = None,
    timeout: Optional[int] = None,
) -> bool:
    """Register a prompt hook once under ``event``, detected by ``marker``.

    Returns:
        bool: True if settings.json was written, False if already registered.

    Raises:
        SettingsCorrupt: If settings.json exists but is not valid JSON.
    """
    settings = load_settings(settings_path)
    if find_hook(settings, event, prompt_contains(marker)) is not None:
        return False

    hook: dict[str, Any] = {"type": "prompt", "prompt": prompt}
    if timeout is not None:
        hook["timeout"] = timeout
    entry: dict[str, Any] = {"hooks": [hook]}
    if matcher is not None:
        entry = {"matcher": matcher, **entry}

    save_settings(settings_path, add_hook_entry(settings, event, entry))
    logger.info("Registered %s prompt hook", event)
    return True
