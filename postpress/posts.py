"""Post model for postpress.

A post is a ``post.md`` file made of a YAML header and a Markdown body (see
the scanner module for the file grammar). Only the header is kept in memory;
the body is read again from disk every time it is rendered so that large
sites never hold every body at once.

Key classes:
- Post: A validated post with its front matter and output location.
- BlankPost: The empty post used as template context when a site has none.

Key functions:
- sort_posts: Order posts newest day first, then by title.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path, PurePosixPath

from markupsafe import Markup

from .errors import PostError
from .frontmatter import FrontMatterError, decode_front_matter
from .renderers import render_markdown
from .scanner import ScanError, scan_body, scan_header
from .utils import ZERO_TIME, titlecase, url_for


@dataclass(eq=False)
class Post:
    """A validated post.

    Attributes:
        source: Path to the ``post.md`` file.
        destination: Output path relative to the output directory.
        title: Post title, capitalized.
        published: Aware publishing datetime.
        short: Short description of the post.
        tags: Lower-cased tags, sorted. Duplicates are kept as written.
    """

    source: Path
    destination: PurePosixPath
    title: str
    published: datetime
    short: str
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_file(cls, source: Path, destination: PurePosixPath) -> Post:
        """Read and validate a post file.

        The header and body are both scanned so that a post with a broken
        body never reaches the index, but only the header is kept.

        Args:
            source: Path to the post file.
            destination: Relative output path for the rendered post.

        Returns:
            The validated Post.

        Raises:
            PostError: If the file is malformed or misses a required field.
            OSError: If the file cannot be read.
        """
        with open(source, "rb") as f:
            try:
                header = scan_header(f)
            except ScanError as exc:
                raise PostError(source, f"read head: {exc}", exc) from exc
            f.seek(0)
            try:
                scan_body(f)
            except ScanError as exc:
                raise PostError(source, f"read body: {exc}", exc) from exc

        try:
            front = decode_front_matter(header)
        except FrontMatterError as exc:
            raise PostError(source, f"read head: {exc}", exc) from exc

        if not front.title:
            raise PostError(source, "header is missing the title field")
        if front.published is None or front.published == ZERO_TIME:
            raise PostError(source, "header is missing the published field")
        if not front.short:
            raise PostError(source, "header is missing the short field")
        if not front.tags:
            raise PostError(source, "header is missing the tags field")

        return cls(
            source=source,
            destination=destination,
            title=titlecase(front.title),
            published=front.published,
            short=front.short,
            tags=sorted(tag.lower() for tag in front.tags),
        )

    @property
    def directory(self) -> str:
        """First directory segment of the destination, or "" at the root."""
        parts = self.destination.parent.parts
        return parts[0] if parts else ""

    def link(self) -> str:
        """Return the site-root-relative URL of the rendered post."""
        return url_for(self.destination)

    def markdown(self) -> str:
        """Read the post body from disk, as Markdown source.

        Raises:
            PostError: If the body can no longer be scanned.
            OSError: If the file cannot be read.
        """
        with open(self.source, "rb") as f:
            try:
                body = scan_body(f)
            except ScanError as exc:
                raise PostError(self.source, f"read body: {exc}", exc) from exc
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PostError(self.source, f"read body: {exc}", exc) from exc

    def body(self) -> Markup:
        """Read the post body from disk and render it to HTML."""
        return Markup(render_markdown(self.markdown()))

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"Post({self.link()!r}, {self.title!r})"


class BlankPost:
    """Empty stand-in for the current post when a site has no posts.

    Every field holds its empty value, so templates can reference them
    without failing, and the instance is falsy.
    """

    source = None
    destination = PurePosixPath()
    title = ""
    published = ZERO_TIME
    short = ""
    tags: tuple[str, ...] = ()
    directory = ""

    def link(self) -> str:
        return ""

    def markdown(self) -> str:
        return ""

    def body(self) -> Markup:
        return Markup("")

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return "BlankPost()"


BLANK_POST = BlankPost()


def post_sort_key(post: Post) -> str:
    """Return the day a post was published on, as YYYYMMDD."""
    # %Y is not zero-padded below year 1000.
    published = post.published
    return f"{published.year:04d}{published:%m%d}"


def sort_posts(posts: Iterable[Post]) -> list[Post]:
    """Sort posts by publishing day, newest first, then by title.

    Times within a day are ignored. Titles compare case-sensitively.

    Args:
        posts: Posts to sort.

    Returns:
        A new sorted list.
    """
    by_title = sorted(posts, key=lambda p: p.title)
    return sorted(by_title, key=post_sort_key, reverse=True)
