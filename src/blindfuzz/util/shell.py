"""
Host shell selection for target invocation.

Targets are handed to the platform's command interpreter so that the
command string may use redirections, pipes or arguments exactly as the
user typed them:

- Windows: ``cmd.exe /c <command>``
- everything else: ``sh -c <command>``
"""

import shlex
import sys
from pathlib import Path

WINDOWS_SHELL = ("cmd.exe", "/c")
POSIX_SHELL = ("sh", "-c")


def is_windows(platform=None):
    """Return True if ``platform`` (default: ``sys.platform``) is Windows."""
    if platform is None:
        platform = sys.platform
    return platform.lower().startswith("win")


def shell_wrapper(platform=None):
    """
    Get the interpreter prefix for the host platform.

    Args:
        platform: Platform string as found in ``sys.platform`` (optional)

    Returns:
        Tuple of argv words that precede the command string
    """
    return WINDOWS_SHELL if is_windows(platform) else POSIX_SHELL


def resolve_invocation(command, platform=None):
    """
    Wrap a target command string into a full argv list.

    Example:
        resolve_invocation("./target --strict") -> ['sh', '-c', './target --strict']
    """
    return list(shell_wrapper(platform)) + [command]


def command_program(command, platform=None):
    """
    Extract the program part of a command string.

    ``"./target --strict"`` -> ``"./target"``. A command that cannot be
    split (unbalanced quotes) is returned unchanged.
    """
    try:
        words = shlex.split(command, posix=not is_windows(platform))
    except ValueError:
        return command
    return words[0] if words else command


def command_exists(command, working_directory=".", platform=None):
    """
    Check that the target of ``command`` exists relative to ``working_directory``.

    The whole command string is tried first so that paths containing
    spaces keep working, then its first word.
    """
    base = Path(working_directory)
    if (base / command).exists():
        return True
    program = command_program(command, platform)
    return bool(program) and (base / program).exists()
