"""Tests for gitsage.split.patch and gitsage.split.scratch modules."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from gitsage.git.exceptions import GitCommandError
from gitsage.split.index import StagingSet
from gitsage.split.patch import (
    apply_patch_to_index,
    check_patch,
    combine_hunks,
    context_window,
    extract_error_line,
    validate_patch,
)
from gitsage.split.scratch import SCRATCH_PREFIX, scratch_file


def _patch_paths(mock_run) -> list[Path]:
    """Patch file paths passed to git apply in recorded calls."""
    return [Path(c.args[0][-1]) for c in mock_run.call_args_list]


class TestScratchFile:
    """Tests for scratch_file context manager."""

    def test_writes_and_removes(self):
        """Test the file holds the content and is removed afterwards."""
        with scratch_file("hello\n") as path:
            assert path.name.startswith(SCRATCH_PREFIX)
            assert path.read_text(encoding="utf-8") == "hello\n"
        assert not path.exists()

    def test_removed_on_exception(self):
        """Test the file is removed when the block raises."""
        with pytest.raises(RuntimeError):
            with scratch_file("x") as path:
                raise RuntimeError("boom")
        assert not path.exists()

    def test_unique_names(self):
        """Test two scratch files never share a name."""
        with scratch_file("a") as first, scratch_file("b") as second:
            assert first != second


class TestCombineHunks:
    """Tests for combine_hunks function."""

    def test_joins_in_order(self):
        """Test hunks are concatenated in order."""
        assert combine_hunks(["a\n", "b\n"]) == "a\nb\n"

    def test_adds_missing_newlines(self):
        """Test every hunk is newline-terminated."""
        assert combine_hunks(["a", "b"]) == "a\nb\n"

    def test_skips_empty(self):
        """Test empty hunk strings are ignored."""
        assert combine_hunks(["", "a\n"]) == "a\n"


class TestDiagnostics:
    """Tests for error line extraction and context windows."""

    def test_extract_error_line(self):
        """Test a line number is pulled from git apply errors."""
        assert extract_error_line("error: corrupt patch at line 7") == 7

    def test_extract_error_line_missing(self):
        """Test errors without a line number."""
        assert extract_error_line("error: patch does not apply") is None

    def test_context_window(self):
        """Test two lines either side of the target are shown."""
        text = "\n".join(f"l{i}" for i in range(1, 11))

        window = context_window(text, 5)

        assert len(window) == 5
        assert window[2].startswith(">")
        assert window[2].endswith("| l5")
        assert window[0].endswith("| l3")
        assert window[-1].endswith("| l7")

    def test_context_window_at_start(self):
        """Test the window is clipped at the first line."""
        window = context_window("a\nb\nc\nd", 1)

        assert len(window) == 3
        assert window[0].startswith(">")

    def test_context_window_out_of_range(self):
        """Test out-of-range lines give no window."""
        assert context_window("a\nb", 10) == []


class TestCheckPatch:
    """Tests for check_patch and validate_patch."""

    def test_valid_patch(self, mocker, temp_dir, parser_hunk):
        """Test a clean dry-run reports success and removes the file."""
        mock_run = mocker.patch("subprocess.run", return_value=MagicMock(stdout=""))
        index = StagingSet(temp_dir)

        result = check_patch(index, parser_hunk)

        assert result.ok
        args = mock_run.call_args.args[0]
        assert args[:4] == ["git", "apply", "--check", "--cached"]
        assert not _patch_paths(mock_run)[0].exists()

    def test_invalid_patch_reports_context(self, mocker, temp_dir):
        """Test a failed dry-run reports the error line and context."""
        mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(
                128, "git", stderr="error: corrupt patch at line 3"
            ),
        )
        index = StagingSet(temp_dir)

        result = check_patch(index, "a\nb\nc\nd\ne\n")

        assert not result.ok
        assert result.line == 3
        assert "corrupt patch" in result.error
        assert any(line.startswith(">") for line in result.context)

    def test_scratch_file_removed_on_failure(self, mocker, temp_dir):
        """Test the patch file is removed when git apply fails."""
        mock_run = mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(1, "git", stderr="error: bad"),
        )

        check_patch(StagingSet(temp_dir), "garbage\n")

        assert not _patch_paths(mock_run)[0].exists()

    def test_validate_patch_prints_diagnostics(self, mocker, temp_dir, capsys):
        """Test validate_patch prints the error and context to stderr."""
        mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(
                1, "git", stderr="error: corrupt patch at line 2"
            ),
        )

        assert validate_patch(StagingSet(temp_dir), "x\ny\nz\n") is False

        err = capsys.readouterr().err
        assert "Patch validation failed" in err
        assert "around line 2" in err

    def test_validate_patch_without_line_number(self, mocker, temp_dir, capsys):
        """Test a missing line number still yields False, without context."""
        mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(1, "git", stderr="error: no"),
        )

        assert validate_patch(StagingSet(temp_dir), "x\n") is False
        assert "around line" not in capsys.readouterr().err


class TestApplyPatchToIndex:
    """Tests for apply_patch_to_index function."""

    def test_applies_cached(self, mocker, temp_dir, parser_hunk):
        """Test the patch is applied with --cached."""
        mock_run = mocker.patch("subprocess.run", return_value=MagicMock(stdout=""))

        apply_patch_to_index(StagingSet(temp_dir), parser_hunk)

        args = mock_run.call_args.args[0]
        assert args[:3] == ["git", "apply", "--cached"]
        assert mock_run.call_args.kwargs["cwd"] == temp_dir

    def test_failure_propagates(self, mocker, temp_dir):
        """Test apply failures raise and still remove the file."""
        mock_run = mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(1, "git", stderr="error: bad"),
        )

        with pytest.raises(GitCommandError):
            apply_patch_to_index(StagingSet(temp_dir), "bad\n")

        assert not _patch_paths(mock_run)[0].exists()
