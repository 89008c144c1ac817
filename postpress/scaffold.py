"""Example site scaffold for postpress.

The example site shipped in ``postpress/example`` shows every feature: the
base layout, the post template, site meta, tag and feed pages, and a couple of
posts.
"""

from __future__ import annotations

from pathlib import Path

from .utils import write_file

EXAMPLE_DIR = Path(__file__).parent / "example"


def write_example(target: Path) -> list[Path]:
    """Copy the example site into ``target``.

    File contents are stripped of surrounding whitespace on the way.

    Args:
        target: Directory to write into, created as needed.

    Returns:
        The written files.
    """
    written: list[Path] = []
    for src_path in sorted(EXAMPLE_DIR.rglob("*")):
        if src_path.is_dir():
            continue
        dest_path = target / src_path.relative_to(EXAMPLE_DIR)
        write_file(dest_path, src_path.read_bytes().strip())
        written.append(dest_path)
    return written
