"""Git command runner and repository utilities.

Contains:
- run_git: Run a git command, raising on failure
- run_git_quiet: Run an inventory query, returning "" on failure
- get_repo_root: Get the root directory of the current git repository
- unquote_path: Decode a path git printed in C-quoted form
"""

import subprocess
from pathlib import Path
from typing import Optional

from gitsage.git.exceptions import GitCommandError, GitError, NotARepositoryError

# Prefix for commands whose output names paths. Non-ASCII paths are printed
# as-is; paths with control characters, quotes or backslashes stay quoted.
PLAIN_PATHS = ["-c", "core.quotePath=false"]

_C_ESCAPES = {
    "a": 7,
    "b": 8,
    "t": 9,
    "n": 10,
    "v": 11,
    "f": 12,
    "r": 13,
    '"': 34,
    "\\": 92,
}


def run_git(
    args: list[str],
    input_text: Optional[str] = None,
    strip: bool = True,
    cwd: Optional[Path] = None,
) -> str:
    """Run a git command and return its output.

    Arguments are passed as an argv list, never through a shell.

    Args:
        args: List of arguments to pass to git.
        input_text: Optional text written to the command's stdin.
        strip: Whether to strip surrounding whitespace from stdout.
        cwd: Directory to run git in. Defaults to the current directory.

    Returns:
        The stdout of the git command.

    Raises:
        GitCommandError: If the command exits non-zero.
        GitError: If git is not installed.
    """
    try:
        result = subprocess.run(
            ["git"] + args,
            input=input_text,
            capture_output=True,
            cwd=cwd,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise GitCommandError(args, e.returncode, stderr)
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")

    return result.stdout.strip() if strip else result.stdout


def run_git_quiet(args: list[str], cwd: Optional[Path] = None) -> str:
    """Run a read-only inventory query, treating failure as "no data".

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run git in.

    Returns:
        The stripped stdout, or an empty string if the command failed.

    Raises:
        GitError: If git is not installed.
    """
    try:
        return run_git(args, cwd=cwd)
    except GitCommandError:
        return ""


def get_repo_root() -> Path:
    """Get the root directory of the current git repository.

    Returns:
        Path to the repository root.

    Raises:
        NotARepositoryError: If not in a git repository.
    """
    try:
        root = run_git(["rev-parse", "--show-toplevel"])
    except GitCommandError:
        raise NotARepositoryError(
            "Not in a git repository. Please run this command from within a git repo."
        )
    return Path(root)


def unquote_path(path: str) -> str:
    """Decode a path that git printed in C-quoted form.

    Git wraps a path in double quotes when it contains special characters,
    escaping them as \\t, \\", \\\\ or octal byte sequences such as \\303\\251.
    Unquoted paths are returned unchanged.

    Args:
        path: A path as printed by git.

    Returns:
        The decoded path.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    decoded = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\":
            decoded.extend(char.encode("utf-8"))
            i += 1
            continue

        escape = body[i + 1:i + 2]
        octal = body[i + 1:i + 4]
        if escape in _C_ESCAPES:
            decoded.append(_C_ESCAPES[escape])
            i += 2
        elif len(octal) == 3 and all(c in "01234567" for c in octal):
            decoded.append(int(octal, 8))
            i += 4
        else:
            decoded.extend(b"\\")
            i += 1

    return decoded.decode("utf-8", errors="surrogateescape")
