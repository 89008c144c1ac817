"""Front matter and body scanner for post files.

A post file is a YAML header fenced by two separator lines, followed by a
Markdown body::

    ---
    title: Hello
    published: 2024-01-01
    short: A first post
    tags: [intro]
    ---
    Body text...

The scanner works line by line on raw bytes. It never trims whitespace inside
a line, since the body is handed to the Markdown renderer which cares about
indentation and blank lines. Each scan is bounded by a size ceiling; input past
the ceiling is silently dropped and the separator check reports the damage.

Key functions:
- scan_header: Extract the front matter block.
- scan_body: Extract the body block.
- scan: Run both scans over an in-memory file.
"""

from __future__ import annotations

import io
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

SEPARATOR = b"---"

# A kilobyte leaves plenty of room for a long title, short and tag list.
MAX_HEADER_SIZE = 1_000
MAX_FILE_SIZE = 5_000_000


class ScanError(ValueError):
    """Base class for scanner failures."""


class MissingSeparatorError(ScanError):
    """The file does not hold exactly two separator lines."""

    def __init__(self) -> None:
        super().__init__("missing separator lines")


class MissingBlockError(ScanError):
    """The header or body block is empty.

    Attributes:
        block: Either "header" or "body".
    """

    def __init__(self, block: str) -> None:
        self.block = block
        super().__init__(f"missing {block}")


@dataclass(frozen=True)
class ScanResult:
    header: bytes
    body: bytes


def is_separator(line: bytes) -> bool:
    return line.startswith(SEPARATOR)


def _iter_lines(stream: BinaryIO, max_size: int) -> Iterator[bytes]:
    """Yield the lines found in the first ``max_size`` bytes of ``stream``.

    Lines are split on newlines with a trailing carriage return dropped. A
    final line without a newline is still yielded.
    """
    data = stream.read(max_size)
    if not data:
        return
    lines = data.split(b"\n")
    if lines[-1] == b"":
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith(b"\r") else line


def scan_header(stream: BinaryIO) -> bytes:
    """Extract the front matter block from the start of a post file.

    Blank lines are dropped. The scan stops at the second separator line.

    Args:
        stream: Binary stream positioned at the start of the file.

    Returns:
        The header block with surrounding whitespace stripped.

    Raises:
        MissingSeparatorError: If the header is not fenced by two separators.
        MissingBlockError: If the header block is empty.
    """
    separators = 0
    lines: list[bytes] = []
    for line in _iter_lines(stream, MAX_HEADER_SIZE):
        if is_separator(line):
            separators += 1
            if separators == 2:
                break
            continue
        if not line.strip():
            continue
        if separators == 0:
            # Text in front of the opening separator.
            raise MissingSeparatorError()
        lines.append(line)

    if separators != 2:
        raise MissingSeparatorError()
    block = b"\n".join(lines).strip()
    if not block:
        raise MissingBlockError("header")
    return block


def scan_body(stream: BinaryIO) -> bytes:
    """Extract the body block following the front matter.

    Every line after the second separator is kept, blank lines included.
    Separator lines are counted over the whole scanned portion, so a third
    separator anywhere in the file is an error.

    Args:
        stream: Binary stream positioned at the start of the file.

    Returns:
        The body block with surrounding whitespace stripped.

    Raises:
        MissingSeparatorError: If the file does not hold exactly two separators.
        MissingBlockError: If the body block is empty.
    """
    separators = 0
    lines: list[bytes] = []
    for line in _iter_lines(stream, MAX_FILE_SIZE):
        if is_separator(line):
            separators += 1
            continue
        if separators == 2:
            lines.append(line)

    if separators != 2:
        raise MissingSeparatorError()
    block = b"\n".join(lines).strip()
    if not block:
        raise MissingBlockError("body")
    return block


def scan(data: bytes) -> ScanResult:
    """Scan an in-memory post file into its header and body blocks.

    Args:
        data: Raw file content.

    Returns:
        ScanResult holding both blocks.
    """
    header = scan_header(io.BytesIO(data))
    body = scan_body(io.BytesIO(data))
    return ScanResult(header=header, body=body)
