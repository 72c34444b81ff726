"""Shell and git utilities.

Provides a thin wrapper around subprocess for git calls, plus an output
formatting helper for the CLI.
"""

from __future__ import annotations

import os
import subprocess


def git(*args: str, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "ls-remote", "--tags", url).
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail.

    Returns:
        Stripped stdout from the git command.

    Raises:
        subprocess.CalledProcessError: On non-zero exit when check is True.
    """
    result = subprocess.run(
        ["git", *args],
        capture_output=True,
        text=True,
        check=check,
        # never block on a credentials prompt for a private remote
        env=_non_interactive_env(),
    )
    return result.stdout.strip()


def _non_interactive_env() -> dict[str, str]:
    env = dict(os.environ)
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate the phases of an update run in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")
