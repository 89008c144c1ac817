"""Utility functions for postpress.

This module contains small helpers shared by the rest of the code base:
string canonicalization, date normalization and file system helpers.

Key functions:
    titlecase: Capitalize the first letter of every word.
    as_utc: Normalize dates and datetimes to aware UTC datetimes.
    is_hidden_path: Check if a relative path has a dot-prefixed segment.
    is_template: Check if a path is a rendered template.
    is_page: Check if a path is a template listed among the site pages.
    to_destination: Convert a relative path to a posix destination path.
    relative_within: Locate a path relative to a root directory.
    write_file: Write bytes, creating parent directories.
    copy_file: Copy a file byte for byte, creating parent directories.
"""

from __future__ import annotations

import re
import shutil
from datetime import date, datetime, timezone
from pathlib import Path, PurePath, PurePosixPath

_WORD_START_RE = re.compile(r"\b(\w)")

TEMPLATE_SUFFIXES = (".html", ".xml", ".txt")
PAGE_SUFFIX = ".html"

ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


def titlecase(text: str) -> str:
    """Uppercase the first letter of every word, leaving the rest untouched.

    Unlike ``str.title`` the remaining letters keep their case and an
    underscore does not start a new word.

    Args:
        text: Text to capitalize.

    Returns:
        Text with each word capitalized.

    Examples:
        >>> titlecase("hello world")
        'Hello World'

        >>> titlecase("site_name")
        'Site_name'

        >>> titlecase("iPhone tips")
        'IPhone Tips'
    """
    return _WORD_START_RE.sub(lambda m: m.group(1).upper(), text)


def as_utc(value: date | datetime) -> datetime:
    """Normalize a date or datetime to an aware datetime.

    Plain dates become midnight UTC, naive datetimes are taken as UTC and
    aware datetimes are returned unchanged.
    """
    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_hidden_path(rel: PurePath) -> bool:
    """Check if a relative path is hidden (any segment starts with a dot).

    Args:
        rel: Path relative to the source directory.

    Returns:
        True if any path component starts with ".".
    """
    return any(part.startswith(".") for part in rel.parts)


def is_template(path: PurePath) -> bool:
    """Check if a path is rendered through the template engine.

    Args:
        path: Path to check.

    Returns:
        True for .html, .xml and .txt files.
    """
    return path.suffix in TEMPLATE_SUFFIXES


def is_page(path: PurePath) -> bool:
    """Check if a template path produces an HTML page.

    Args:
        path: Path to check.

    Returns:
        True for .html files.
    """
    return path.suffix == PAGE_SUFFIX


def to_destination(rel: PurePath) -> PurePosixPath:
    """Convert a relative host path to a posix destination path."""
    return PurePosixPath(*rel.parts)


def url_for(destination: PurePosixPath) -> str:
    """Return the site-root-relative URL of a destination path.

    Examples:
        >>> url_for(PurePosixPath("blog/hello/index.html"))
        '/blog/hello/index.html'
    """
    return "/" + destination.as_posix().lstrip("/")


def write_file(path: Path, data: bytes) -> None:
    """Write bytes to a file, creating parent directories as needed.

    Args:
        path: Target file.
        data: Content to write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)


def copy_file(source: Path, dest: Path) -> None:
    """Copy a file byte for byte, without its metadata.

    Args:
        source: File to copy.
        dest: Target file, parent directories are created as needed.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, dest)


def relative_within(path: Path, root: Path) -> Path | None:
    """Return ``path`` relative to ``root``, or None when it lies outside.

    Both paths are resolved first, so relative and absolute spellings of the
    same directory agree.
    """
    try:
        return path.resolve().relative_to(root.resolve())
    except ValueError:
        return None
