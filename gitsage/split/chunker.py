"""Diff chunking for the commit classifier.

Contains:
- split_diff_into_chunks: Split a unified diff into line-aligned chunks
"""


def split_diff_into_chunks(diff: str, max_chunk_size: int) -> list[str]:
    """Split a unified diff into size-bounded, line-aligned chunks.

    A chunk is closed before a line is added when the accumulated length plus
    that line would exceed max_chunk_size. Lines are never split, so a single
    line longer than max_chunk_size becomes its own oversized chunk. Every
    chunk ends with a newline.

    Args:
        diff: The unified diff text.
        max_chunk_size: Maximum chunk size in characters. Must be positive.

    Returns:
        Chunks in original order. Empty input yields no chunks.

    Raises:
        ValueError: If max_chunk_size is not positive.
    """
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be positive")

    chunks: list[str] = []
    current = ""

    for line in diff.split("\n"):
        if current and len(current) + len(line) > max_chunk_size:
            chunks.append(current)
            current = ""
        current += line + "\n"

    if current.strip():
        chunks.append(current)

    return chunks
