"""Markdown rendering for postpress.

Post bodies are rendered to HTML with mistune. Headings get anchor ids made
from their text, and fenced code blocks are highlighted with Pygments. When a
fence names no language the lexer is guessed from the code.

Key functions:
- render_markdown: Render Markdown text to an HTML string.
"""

from __future__ import annotations

import re

import mistune
from mistune.util import escape
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

PLUGINS = [
    "strikethrough",
    "footnotes",
    "table",
    "url",
    "task_lists",
    "def_list",
]

HIGHLIGHT_STYLE = "monokai"

_TAG_RE = re.compile(r"<[^>]+>")
_NON_WORD_RE = re.compile(r"[^\w\s-]")
_SPACING_RE = re.compile(r"[-\s]+")


def anchor_id(text: str) -> str:
    """Turn rendered heading text into an anchor id.

    Examples:
        >>> anchor_id("Hello <em>World</em>!")
        'hello-world'
    """
    plain = _NON_WORD_RE.sub("", _TAG_RE.sub("", text).lower())
    return _SPACING_RE.sub("-", plain.strip()).strip("-")


def _lexer_for(code: str, lang: str) -> Lexer:
    if lang:
        return get_lexer_by_name(lang, stripall=True)
    return guess_lexer(code, stripall=True)


class _PostRenderer(mistune.HTMLRenderer):
    """HTML renderer for post bodies.

    One instance renders one document; anchor ids are unique within it.
    """

    def __init__(self):
        super().__init__(escape=False)
        self._seen_ids: dict[str, int] = {}

    def _unique_id(self, text: str) -> str:
        base = anchor_id(text) or "section"
        count = self._seen_ids.get(base)
        self._seen_ids[base] = 0 if count is None else count + 1
        return base if count is None else f"{base}-{count + 1}"

    def heading(self, text: str, level: int, **attrs) -> str:
        return f'<h{level} id="{self._unique_id(text)}">{text}</h{level}>\n'

    def block_code(self, code: str, info: str | None = None) -> str:
        """Highlight a fenced code block.

        A language Pygments does not know falls back to a plain escaped
        ``<pre>`` block tagged with the language name.
        """
        lang = info.split()[0] if info and info.strip() else ""
        try:
            lexer = _lexer_for(code, lang)
        except ClassNotFound:
            css_class = f' class="language-{escape(lang)}"' if lang else ""
            return f"<pre><code{css_class}>{escape(code)}</code></pre>\n"
        formatter = HtmlFormatter(style=HIGHLIGHT_STYLE, noclasses=True, linenos="table")
        return highlight(code, lexer, formatter)


def render_markdown(text: str) -> str:
    """Render Markdown text to HTML.

    Args:
        text: Markdown source.

    Returns:
        Rendered HTML.
    """
    markdown = mistune.create_markdown(renderer=_PostRenderer(), plugins=PLUGINS)
    return markdown(text)
