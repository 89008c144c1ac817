"""Tag and page indexes for postpress.

Templates list posts per tag and build navigation or sitemaps from the list
of rendered pages. Both indexes are rebuilt from scratch on every run and
have fixed orderings, so identical input renders identically.

Key classes:
- Tag: A tag with the posts carrying it.

Key functions:
- build_tags: Group posts by tag.
- build_pages: List the URLs of every rendered HTML page.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from .posts import Post, sort_posts
from .utils import is_page, titlecase, url_for


@dataclass
class Tag:
    """A tag and the posts carrying it.

    Attributes:
        title: Tag name, capitalized.
        posts: Posts carrying the tag, in post order.
    """

    title: str
    posts: list[Post] = field(default_factory=list)

    def __iter__(self) -> Iterator[Post]:
        return iter(self.posts)

    def __len__(self) -> int:
        return len(self.posts)


def sort_tags(tags: Iterable[Tag]) -> list[Tag]:
    """Sort tags by title, case-sensitively."""
    return sorted(tags, key=lambda t: t.title)


def sort_pages(pages: Iterable[str]) -> list[str]:
    """Sort page URLs, case-sensitively."""
    return sorted(pages)


def build_tags(posts: Iterable[Post]) -> list[Tag]:
    """Group posts by tag.

    A post is listed once per tag even when the tag is repeated in its
    header.

    Args:
        posts: Posts to index.

    Returns:
        Sorted list of Tag, each holding its posts sorted by the post order.
    """
    index: dict[str, list[Post]] = {}
    for post in posts:
        for tag in dict.fromkeys(post.tags):
            index.setdefault(tag, []).append(post)
    return sort_tags(
        Tag(title=titlecase(name), posts=sort_posts(tagged))
        for name, tagged in index.items()
    )


def build_pages(
    templates: Iterable[PurePosixPath], posts: Sequence[Post]
) -> list[str]:
    """List the URLs of every page the render phase writes.

    Only HTML templates are listed; XML and text templates such as feeds are
    left out, as are static files.

    Args:
        templates: Destination paths of the page templates.
        posts: All posts.

    Returns:
        Sorted list of site-root-relative URLs.
    """
    urls = [url_for(dest) for dest in templates if is_page(dest)]
    urls.extend(post.link() for post in posts)
    return sort_pages(urls)
