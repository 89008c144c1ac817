"""Template engine for postpress.

Templates are Jinja2. Every site has one base layout (``.postpress/layout.html``)
holding the shared page chrome as named blocks and macros. Every post and page
is rendered through a template derived from that base: the derivation shares
the base's environment, helper functions and named fragments, and adds the
page's own source as the template that gets executed. A typical page::

    {% extends "layout.html" %}
    {% block content %}<h1>{{ current.title }}</h1>{% endblock %}

Key classes:
- TemplateParams: The parameter bundle handed to every template.
- BaseLayout: The shared base layout.
- DerivedTemplate: A post or page template derived from the base.

Key functions:
- load_base: Load and parse the base layout.
- derive: Derive a template from the base.
- execute: Render a template and write the result.

Design principles:
- The helper library is injected when the environment is built, never looked
  up from module state at render time.
- A derived template only holds its own source and a reference to its base;
  the base is resolved through the environment loader when rendering.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    StrictUndefined,
    Template,
    TemplateSyntaxError,
    select_autoescape,
)

from .config import Meta
from .errors import BuildError, TemplateError
from .index import Tag
from .posts import BLANK_POST, BlankPost, Post
from .template_funcs import TEMPLATE_FUNCS
from .utils import write_file

__all__ = [
    "BaseLayout",
    "DerivedTemplate",
    "TemplateParams",
    "derive",
    "execute",
    "load_base",
]


@dataclass
class TemplateParams:
    """Parameter bundle passed to every template of a run.

    Only ``current`` changes between executions: it is the post being
    rendered, or the newest post while rendering other pages.

    Attributes:
        time: Time the run started, in UTC.
        meta: Site meta data.
        posts: All posts, in post order.
        tags: All tags, sorted by title.
        pages: URLs of all rendered HTML pages, sorted.
        current: The current post, BLANK_POST when the site has none.
    """

    time: datetime
    meta: Meta
    posts: list[Post] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    pages: list[str] = field(default_factory=list)
    current: Post | BlankPost = BLANK_POST

    def context(self) -> dict[str, Any]:
        """Return the variables exposed to templates."""
        return {
            "time": self.time,
            "meta": self.meta,
            "posts": self.posts,
            "tags": self.tags,
            "pages": self.pages,
            "current": self.current,
        }


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "TemplateNotFound":
        return f"Template not found: {error_msg}"
    if error_type == "TypeError":
        return f"Type error: {error_msg}"
    if error_type == "AttributeError":
        return f"Attribute error: {error_msg}"

    return f"{error_type}: {error_msg}"


def _read_source(path: Path, name: str) -> str:
    with open(path, "rb") as f:
        data = f.read()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise TemplateError(path, name, f"not valid UTF-8: {exc}", exc) from exc


def _parse(env: Environment, path: Path, name: str) -> Template:
    try:
        return env.get_template(name)
    except TemplateSyntaxError as exc:
        raise TemplateError(
            path, name, f"syntax error on line {exc.lineno}: {exc.message}", exc
        ) from exc


class _Renderable:
    path: Path
    name: str
    template: Template

    def render(self, params: TemplateParams) -> str:
        """Render the template against the parameter bundle.

        Args:
            params: Parameter bundle for the run.

        Returns:
            The rendered text.

        Raises:
            TemplateError: If rendering fails.
        """
        try:
            return self.template.render(params.context())
        except (OSError, BuildError):
            raise
        except TemplateSyntaxError as exc:
            raise TemplateError(
                self.path,
                exc.name or self.name,
                f"syntax error on line {exc.lineno}: {exc.message}",
                exc,
            ) from exc
        except Exception as exc:
            raise TemplateError(
                self.path, self.name, _format_error_message(exc), exc
            ) from exc


class BaseLayout(_Renderable):
    """The shared base layout every other template derives from.

    Attributes:
        path: Path to the layout file.
        name: Name the layout is registered under (its file name).
        source: Layout source text.
        environment: Jinja2 environment holding the helper library.
        template: The parsed layout.
    """

    def __init__(
        self,
        path: Path,
        source: str,
        funcs: Mapping[str, Callable[..., Any]] = TEMPLATE_FUNCS,
    ):
        self.path = path
        self.name = path.name
        self.source = source
        self.environment = Environment(
            loader=DictLoader({self.name: source}),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
        )
        self.environment.globals.update(funcs)
        self.environment.filters.update(funcs)
        self.template = _parse(self.environment, path, self.name)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"BaseLayout({self.name!r})"


class DerivedTemplate(_Renderable):
    """A template derived from the base layout.

    The derived environment is an overlay of the base environment: it shares
    the helpers and can reach the base under its name, and it adds this
    template's own source.

    Attributes:
        base: The layout this template derives from.
        path: Path to the template file.
        name: Name the template is registered under.
        source: Template source text.
        environment: Overlay environment of the base.
        template: The parsed template.
    """

    def __init__(self, base: BaseLayout, path: Path, source: str, name: str | None = None):
        self.base = base
        self.path = path
        self.name = name or path.name
        self.source = source
        if self.name == base.name:
            raise TemplateError(path, self.name, "name clashes with the base layout")
        self.environment = base.environment.overlay(
            loader=ChoiceLoader(
                [DictLoader({self.name: source}), base.environment.loader]
            )
        )
        self.template = _parse(self.environment, path, self.name)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"DerivedTemplate({self.name!r}, base={self.base.name!r})"


def load_base(
    path: Path, funcs: Mapping[str, Callable[..., Any]] = TEMPLATE_FUNCS
) -> BaseLayout:
    """Load and parse the base layout.

    Args:
        path: Path to the layout file.
        funcs: Helper functions to install.

    Returns:
        The parsed BaseLayout.

    Raises:
        TemplateError: If the layout does not parse.
        OSError: If the file cannot be read.
    """
    return BaseLayout(path, _read_source(path, path.name), funcs)


def derive(base: BaseLayout, path: Path, name: str | None = None) -> DerivedTemplate:
    """Derive a template from the base layout.

    Args:
        base: The shared base layout.
        path: Path to the template file.
        name: Optional name to register the template under, defaults to the
            file name.

    Returns:
        The parsed DerivedTemplate.

    Raises:
        TemplateError: If the template does not parse.
        OSError: If the file cannot be read.
    """
    template_name = name or path.name
    return DerivedTemplate(base, path, _read_source(path, template_name), template_name)


def execute(
    template: BaseLayout | DerivedTemplate, params: TemplateParams, destination: Path
) -> None:
    """Render a template and write the result to ``destination``.

    The output is rendered fully in memory and stripped of surrounding
    whitespace before a single write, so a failed render leaves no file.

    Args:
        template: Template to render.
        params: Parameter bundle for the run.
        destination: Output file, parent directories are created as needed.
    """
    rendered = template.render(params)
    write_file(destination, rendered.strip().encode("utf-8"))
