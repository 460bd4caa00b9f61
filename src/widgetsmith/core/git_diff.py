"""
Change detection against a base branch using git.
"""
import subprocess
from pathlib import Path

from widgetsmith.support.models import FileChanges


def run_git(args: list[str], cwd: Path | None = None) -> str:
    """
    Run a git command and return its stripped stdout.
    Returns an empty string when git is unavailable or the command fails.
    """
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
        )
    except OSError:
        return ""

    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def parse_name_status(output: str) -> FileChanges:
    """
    Parse `git diff --name-status` output into status buckets.
    Renames are recorded under their new path.
    """
    changes = FileChanges()

    for line in output.splitlines():
        if not line.strip():
            continue
        status, _, rest = line.partition("\t")
        if not rest:
            continue
        paths = rest.split("\t")

        if status == "A":
            changes.added.append(paths[0])
        elif status == "M":
            changes.modified.append(paths[0])
        elif status == "D":
            changes.deleted.append(paths[0])
        elif status.startswith("R"):
            changes.renamed.append(paths[-1])

    return changes


def get_changed_files(base_branch: str = "main", cwd: Path | None = None) -> FileChanges:
    """
    Get the files changed on this branch compared to the base branch.
    Outside a git repository every bucket is empty.
    """
    output = run_git(["diff", "--name-status", f"{base_branch}...HEAD"], cwd=cwd)
    if not output:
        return FileChanges()
    return parse_name_status(output)


def get_current_branch(cwd: Path | None = None) -> str:
    return run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=cwd)


def is_git_repository(cwd: Path | None = None) -> bool:
    return run_git(["rev-parse", "--is-inside-work-tree"], cwd=cwd) == "true"
