"""Interactive terminal prompts."""

import os
import shlex
import subprocess
import sys
import tempfile
from pathlib import Path

import questionary

ACTION_SUBMIT = "Submit"
ACTION_CANCEL = "Cancel"

DEFAULT_EDITOR = "vi"


class PromptCancelled(Exception):
    """Raised when the user dismisses a prompt (Ctrl-C / Ctrl-D)."""


def _required(value: str) -> bool | str:
    return bool(value.strip()) or "Value is required"


def ask_text(message: str) -> str:
    """Ask for a required single line of text."""
    answer = questionary.text(message, validate=_required).ask()
    if answer is None:
        raise PromptCancelled(message)
    return answer.strip()


def ask_select(message: str, choices: list[str]) -> str:
    """Ask the user to pick exactly one of the choices."""
    answer = questionary.select(message, choices=choices).ask()
    if answer is None:
        raise PromptCancelled(message)
    return answer


def get_editor() -> str:
    """Get the editor command from $VISUAL or $EDITOR."""
    return os.environ.get("VISUAL") or os.environ.get("EDITOR") or DEFAULT_EDITOR


def launch_editor(initial: str) -> str:
    """Open the user's editor on a temporary Markdown file.

    Returns:
        File content after the editor exits, trailing newlines removed
    """
    with tempfile.NamedTemporaryFile(
        mode="w+", suffix=".md", prefix="jcomment-", delete=False
    ) as tmp:
        tmp.write(initial)
        tmp_path = Path(tmp.name)

    try:
        subprocess.run([*shlex.split(get_editor()), str(tmp_path)], check=True)
        return tmp_path.read_text().rstrip("\n")
    finally:
        tmp_path.unlink(missing_ok=True)


def ask_editor(message: str, default: str = "") -> str:
    """Edit text in an external editor, pre-populated with default.

    Blank results are rejected and the editor is opened again.
    """
    text = default
    while True:
        print(f"{message}: opening {get_editor()}...")
        text = launch_editor(text)
        if text.strip():
            return text
        print("Error: Comment body cannot be empty", file=sys.stderr)
