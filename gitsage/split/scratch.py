"""Scratch files for patches and commit messages.

Contains:
- scratch_file: Write text to a uniquely named temp file for one git call
"""

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

SCRATCH_PREFIX = "gitsage_"


@contextmanager
def scratch_file(content: str, suffix: str = ".patch") -> Iterator[Path]:
    """Write content to a uniquely named temporary file.

    The file is removed when the block exits, whether normally or by an
    exception.

    Args:
        content: Text to write.
        suffix: File name suffix.

    Yields:
        Path to the temporary file.
    """
    fd, name = tempfile.mkstemp(prefix=SCRATCH_PREFIX, suffix=suffix)
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        yield path
    finally:
        path.unlink(missing_ok=True)
