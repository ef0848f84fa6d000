# mountainsnail/util/prompt.py
"""
Small input() based prompts. Each one loops until it gets a usable answer;
an empty answer takes the default when there is one.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, TypeVar

from mountainsnail.errors import ConfigurationError

T = TypeVar("T")


def prompt_bool(prompt: str, default: bool) -> bool:
    d = "Y/n" if default else "y/N"
    while True:
        ans = input(f"{prompt} [{d}]: ").strip().lower()
        if not ans:
            return default
        if ans in ("y", "yes"):
            return True
        if ans in ("n", "no"):
            return False


def prompt_str(prompt: str, default: str = "") -> str:
    if default:
        ans = input(f"{prompt} [{default}]: ").strip()
        return ans if ans else default
    return input(f"{prompt}: ").strip()


def prompt_choice(prompt: str, choices: Sequence[str], default: Optional[int] = None) -> int:
    """Numbered menu; returns the 0-based index of the chosen item."""
    for i, c in enumerate(choices, start=1):
        print(f"  {i}) {c}")
    hint = f" [{default + 1}]" if default is not None else ""
    while True:
        ans = input(f"{prompt}{hint}: ").strip()
        if not ans and default is not None:
            return default
        if ans.isdigit() and 1 <= int(ans) <= len(choices):
            return int(ans) - 1
        # Also accept the item text itself
        lowered = [c.lower() for c in choices]
        if ans.lower() in lowered:
            return lowered.index(ans.lower())
        print(f"Please enter a number between 1 and {len(choices)}.")


def prompt_value(prompt: str, default: str, convert: Callable[[str], T]) -> T:
    """Ask until `convert` accepts the answer; its ConfigurationError message is shown on rejection."""
    while True:
        ans = prompt_str(prompt, default=default)
        try:
            return convert(ans)
        except ConfigurationError as e:
            print(e)
