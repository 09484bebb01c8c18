"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from gitsage.split.index import StagingSet


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_repo_root(temp_dir):
    """Create a mock git repository root directory."""
    git_dir = temp_dir / ".git"
    git_dir.mkdir()
    return temp_dir


@pytest.fixture
def mock_index(mock_repo_root):
    """A StagingSet stand-in whose git operations are mocks."""
    index = MagicMock(spec=StagingSet)
    index.repo_root = mock_repo_root
    index.resolve.side_effect = lambda path: mock_repo_root / path
    index.staged_files.return_value = []
    index.is_empty.return_value = False
    index.commit.return_value = "abc123"
    index.staged_patch.return_value = ""
    return index


@pytest.fixture
def parser_hunk():
    """A single-file hunk adding a parser module."""
    return """diff --git a/p.ts b/p.ts
new file mode 100644
index 0000000..3b18e51
--- /dev/null
+++ b/p.ts
@@ -0,0 +1,3 @@
+export function parse(input: string) {
+  return input.split(",");
+}
"""


@pytest.fixture
def readme_hunk():
    """A single-file hunk modifying the README."""
    return """diff --git a/README.md b/README.md
index 1234567..89abcde 100644
--- a/README.md
+++ b/README.md
@@ -1,3 +1,4 @@
 # Project

 Some text.
+More text.
"""


@pytest.fixture
def sample_diff(parser_hunk, readme_hunk):
    """Sample staged diff with two files."""
    return parser_hunk + readme_hunk


@pytest.fixture
def sample_groups_payload(parser_hunk, readme_hunk):
    """Classifier payload with two commit groups."""
    return [
        {"type": "feat", "message": "add parser", "hunks": [parser_hunk]},
        {"type": "docs", "message": "extend readme", "hunks": [readme_hunk]},
    ]
