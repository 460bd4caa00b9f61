"""
Unit tests for git change detection.
"""
from unittest.mock import MagicMock, patch

from widgetsmith.core.git_diff import (
    get_changed_files,
    get_current_branch,
    is_git_repository,
    parse_name_status,
    run_git,
)


def test_parse_name_status_buckets():
    output = "\n".join([
        "A\tpackages/sections/src/target/Foo/Body.tsx",
        "M\tpackages/sections/src/target/Bar/Body.tsx",
        "D\tpackages/sections/src/drug/Old/index.ts",
        "R100\tapps/old.tsx\tapps/new.tsx",
        "",
        "garbage line",
    ])

    changes = parse_name_status(output)

    assert changes.added == ["packages/sections/src/target/Foo/Body.tsx"]
    assert changes.modified == ["packages/sections/src/target/Bar/Body.tsx"]
    assert changes.deleted == ["packages/sections/src/drug/Old/index.ts"]
    assert changes.renamed == ["apps/new.tsx"]


@patch("widgetsmith.core.git_diff.subprocess.run")
def test_get_changed_files_uses_three_dot_diff(mock_run):
    mock_run.return_value = MagicMock(returncode=0, stdout="A\tx/y.tsx\n")

    changes = get_changed_files("develop")

    args = mock_run.call_args[0][0]
    assert args == ["git", "diff", "--name-status", "develop...HEAD"]
    assert changes.added == ["x/y.tsx"]


@patch("widgetsmith.core.git_diff.subprocess.run")
def test_get_changed_files_without_repository(mock_run):
    mock_run.return_value = MagicMock(returncode=128, stdout="", stderr="fatal: not a git repository")

    changes = get_changed_files()

    assert changes.added == []
    assert changes.modified == []
    assert changes.deleted == []
    assert changes.renamed == []


@patch("widgetsmith.core.git_diff.subprocess.run", side_effect=FileNotFoundError("git"))
def test_run_git_missing_binary(mock_run):
    assert run_git(["status"]) == ""
    assert is_git_repository() is False


@patch("widgetsmith.core.git_diff.subprocess.run")
def test_branch_helpers(mock_run):
    mock_run.return_value = MagicMock(returncode=0, stdout="feature/foo\n")
    assert get_current_branch() == "feature/foo"

    mock_run.return_value = MagicMock(returncode=0, stdout="true\n")
    assert is_git_repository() is True
