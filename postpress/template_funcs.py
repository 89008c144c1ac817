"""Template helper functions for postpress.

TEMPLATE_FUNCS maps each helper name to a pure function. The template engine
installs every entry both as a global and as a filter, so these forms are
equivalent::

    {{ shortdate(current.published) }}
    {{ current.published | shortdate }}
    {% for post in posts | postslimit(5) %}

The value a helper works on always comes first, which keeps the filter form
readable.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, timezone
from types import MappingProxyType
from urllib.parse import quote

from markupsafe import Markup

from .posts import Post
from .utils import as_utc

# Characters kept verbatim in a URL path segment, on top of letters, digits
# and "-._~".
_SEGMENT_SAFE = "$&+:=@"


def _utc(t: date | datetime) -> datetime:
    return as_utc(t).astimezone(timezone.utc)


def atomdate(t: date | datetime) -> str:
    """Format a time as RFC 3339 in UTC, as used by Atom feeds."""
    t = _utc(t)
    return f"{t.year:04d}-{t:%m-%dT%H:%M:%S}Z"


def shortdate(t: date | datetime) -> str:
    """Format a time as YYYY-MM-DD in UTC."""
    t = _utc(t)
    return f"{t.year:04d}-{t:%m-%d}"


def prettydate(t: date | datetime) -> str:
    """Format a time as "Monday, 02 January 2006" in UTC."""
    t = _utc(t)
    return f"{t:%A, %d %B} {t.year:04d}"


def prettyduration(d: timedelta) -> str:
    """Describe a duration in words, in its largest whole unit.

    Hours are the largest unit, so two days read as "48 hours".

    Examples:
        >>> prettyduration(timedelta(seconds=0.5))
        'instant'

        >>> prettyduration(timedelta(minutes=90))
        '1 hour'
    """
    total = d.total_seconds()
    seconds, minutes, hours = int(total), int(total / 60), int(total / 3600)
    if seconds < 1:
        return "instant"
    if seconds == 1:
        return "1 second"
    if seconds < 60:
        return f"{seconds} seconds"
    if minutes == 1:
        return "1 minute"
    if minutes < 60:
        return f"{minutes} minutes"
    if hours == 1:
        return "1 hour"
    return f"{hours} hours"


def safehtml(s: str) -> Markup:
    """Mark a string as safe markup so it is not escaped."""
    return Markup(s)


def postslimit(posts: Sequence[Post], limit: int) -> list[Post]:
    """Return at most ``limit`` leading posts."""
    return list(posts[: max(limit, 0)])


def postsbydir(posts: Iterable[Post], directory: str) -> list[Post]:
    """Return the posts whose top-level output directory is ``directory``."""
    return [post for post in posts if post.directory == directory]


def slugify(s: str) -> str:
    """Convert text to a URL-safe slug.

    The text is lower-cased, spaces become underscores and the result is
    percent-encoded as a URL path segment.

    Examples:
        >>> slugify("Hello World!")
        'hello_world%21'
    """
    return quote(s.lower().replace(" ", "_"), safe=_SEGMENT_SAFE)


TEMPLATE_FUNCS = MappingProxyType(
    {
        "atomdate": atomdate,
        "shortdate": shortdate,
        "prettydate": prettydate,
        "prettyduration": prettyduration,
        "safehtml": safehtml,
        "postslimit": postslimit,
        "postsbydir": postsbydir,
        "slugify": slugify,
    }
)
