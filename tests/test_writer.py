"""Tests for gitsage.split.writer module."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from gitsage.git.exceptions import GitCommandError, GitError
from gitsage.split.index import StagingSet
from gitsage.split.models import CommitType
from gitsage.split.patch import InvalidPatchError
from gitsage.split.stager import StageOutcome, StageResult
from gitsage.split.writer import create_commit, format_commit_message


class TestFormatCommitMessage:
    """Tests for format_commit_message function."""

    def test_formats_type_and_message(self):
        """Test the "<type>: <message>" format."""
        assert format_commit_message(CommitType.FEAT, "add parser") == "feat: add parser"

    def test_accepts_string_type(self):
        """Test string types are accepted."""
        assert format_commit_message("fix", "handle null") == "fix: handle null"

    def test_unknown_type_raises(self):
        """Test unknown types are rejected."""
        with pytest.raises(ValueError):
            format_commit_message("wip", "stuff")

    def test_empty_message_raises(self):
        """Test empty messages are rejected."""
        with pytest.raises(ValueError):
            format_commit_message("fix", "  ")


class TestCreateCommit:
    """Tests for create_commit function."""

    def test_commits_with_message_file(self, mock_index):
        """Test the message is written to a file passed to git commit."""
        written = {}

        def fake_commit(message_file: Path) -> str:
            written["text"] = message_file.read_text(encoding="utf-8")
            written["path"] = message_file
            return "abc123"

        mock_index.commit.side_effect = fake_commit

        commit_hash = create_commit(mock_index, CommitType.FEAT, "add parser")

        assert commit_hash == "abc123"
        assert written["text"] == "feat: add parser\n"
        assert not written["path"].exists()

    def test_shell_metacharacters_pass_verbatim(self, mocker, temp_dir):
        """Test quotes and substitutions reach git unchanged, as argv plus file."""
        seen = {}

        def fake_run(args, **kwargs):
            if args[1] == "commit":
                seen["args"] = args
                seen["message"] = Path(args[-1]).read_text(encoding="utf-8")
            return MagicMock(stdout="deadbeef\n")

        mocker.patch("subprocess.run", side_effect=fake_run)
        message = "quote \"it\" and $(whoami) `id`; echo 'x'"

        commit_hash = create_commit(StagingSet(temp_dir), "fix", message)

        assert commit_hash == "deadbeef"
        assert seen["args"][:4] == ["git", "commit", "--quiet", "-F"]
        assert seen["message"] == f"fix: {message}\n"

    def test_commit_failure_propagates(self, mock_index):
        """Test commit errors are not swallowed."""
        mock_index.commit.side_effect = GitCommandError(["commit"], 1, "nothing to commit")

        with pytest.raises(GitCommandError):
            create_commit(mock_index, "fix", "something")

    def test_hunks_are_applied_first(self, mocker, mock_index, parser_hunk):
        """Test hunks are staged as a patch before committing."""
        mock_stage = mocker.patch(
            "gitsage.split.writer.stage_patch",
            return_value=StageResult(outcome=StageOutcome.STAGED),
        )

        create_commit(mock_index, "feat", "add parser", hunks=[parser_hunk])

        mock_stage.assert_called_once_with(mock_index, [parser_hunk])
        mock_index.commit.assert_called_once()

    def test_invalid_hunks_raise_without_commit(self, mocker, mock_index, parser_hunk):
        """Test an invalid patch aborts before committing."""
        mocker.patch(
            "gitsage.split.writer.stage_patch",
            return_value=StageResult(outcome=StageOutcome.INVALID_PATCH),
        )

        with pytest.raises(InvalidPatchError):
            create_commit(mock_index, "feat", "add parser", hunks=[parser_hunk])

        mock_index.commit.assert_not_called()

    def test_real_index_commit_returns_head(self, mocker, temp_dir):
        """Test the StagingSet reads the new HEAD after committing."""
        mock_run = mocker.patch(
            "subprocess.run", return_value=MagicMock(stdout="0123abcd\n")
        )

        assert create_commit(StagingSet(temp_dir), "chore", "tidy") == "0123abcd"
        assert mock_run.call_args.args[0] == ["git", "rev-parse", "HEAD"]

    def test_git_missing_propagates(self, mocker, temp_dir):
        """Test environmental errors propagate unchanged."""
        mocker.patch("subprocess.run", side_effect=FileNotFoundError())

        with pytest.raises(GitError) as exc_info:
            create_commit(StagingSet(temp_dir), "chore", "tidy")

        assert "not installed" in str(exc_info.value)

    def test_called_process_error_becomes_git_error(self, mocker, temp_dir):
        """Test a failing commit surfaces as GitCommandError."""
        mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(1, "git", stderr="hook failed"),
        )

        with pytest.raises(GitCommandError) as exc_info:
            create_commit(StagingSet(temp_dir), "chore", "tidy")

        assert exc_info.value.stderr == "hook failed"
