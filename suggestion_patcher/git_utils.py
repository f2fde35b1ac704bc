"""
Git integration — locate the GitHub repository the working tree belongs to.
"""

import json
import re
import shlex
import subprocess

# https://github.com/owner/name(.git), git@github.com:owner/name(.git),
# ssh://git@github.com/owner/name(.git)
_REMOTE_PATTERN = re.compile(
    r"(?:[:/])(?P<owner>[A-Za-z0-9_.-]+)/(?P<name>[A-Za-z0-9_.-]+?)(?:\.git)?/?$"
)


def _run(cmd: str, cwd: str | None = None) -> tuple[bool, str]:
    """Run a command and return ``(success, stdout)``."""
    try:
        result = subprocess.run(
            shlex.split(cmd),
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        output = result.stdout.strip() if result.returncode == 0 else (
            result.stdout + result.stderr).strip()
        return result.returncode == 0, output
    except Exception as e:
        return False, str(e)


def _run_git(cmd: str, cwd: str | None = None) -> tuple[bool, str]:
    return _run(f"git {cmd}", cwd=cwd)


def get_remote_url(remote: str = "origin", cwd: str | None = None) -> str | None:
    """Return the URL of *remote*, or ``None`` when it is not configured."""
    ok, output = _run_git(f"remote get-url {remote}", cwd=cwd)
    return output if ok and output else None


def parse_repo_slug(url: str) -> str | None:
    """Extract ``owner/name`` from a GitHub remote URL."""
    match = _REMOTE_PATTERN.search(url.strip())
    if not match:
        return None
    return f"{match.group('owner')}/{match.group('name')}"


def gh_repo_slug(cwd: str | None = None) -> str | None:
    """Ask the ``gh`` CLI for the current repository as ``owner/name``."""
    ok, output = _run("gh repo view --json owner,name", cwd=cwd)
    if not ok:
        return None
    try:
        data = json.loads(output)
        return f"{data['owner']['login']}/{data['name']}"
    except (ValueError, KeyError, TypeError):
        return None
