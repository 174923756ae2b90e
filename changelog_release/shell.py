"""Shell and git utilities.

Provides simple wrappers around subprocess calls for running git
operations, plus output formatting helpers.
"""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Mapping
from typing import NoReturn

from .exceptions import GitError


def git(*args: str, env: Mapping[str, str] | None = None, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "status", "--short").
        env: Extra environment variables layered over the current
             environment (e.g., GIT_AUTHOR_NAME for commits).
        check: If True (default), raise GitError on non-zero exit. Set to
               False for commands that may legitimately fail (e.g., ref lookup).

    Returns:
        Stripped stdout from the git command.
    """
    full_env = {**os.environ, **env} if env else None
    try:
        result = subprocess.run(
            ["git", *args], capture_output=True, text=True, check=check, env=full_env
        )
    except subprocess.CalledProcessError as exc:
        raise GitError(f"git {_subcommand(args)} failed", stderr=exc.stderr) from exc
    return result.stdout.strip()


def _subcommand(args: tuple[str, ...]) -> str:
    """Name the git subcommand, skipping global options such as "-c key=value"."""
    rest = iter(args)
    for arg in rest:
        if arg in ("-c", "-C"):
            next(rest, None)
        elif not arg.startswith("-"):
            return arg
    return "command"


def step(msg: str) -> None:
    """Print a progress line for a pipeline stage."""
    print(f"- {msg}")


def fatal(msg: str) -> NoReturn:
    """Print an error message and exit with code 1.

    Use for unrecoverable errors that should halt the pipeline.
    """
    print(f"ERROR: {msg}")
    sys.exit(1)
