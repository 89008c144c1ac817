"""Site building functionality for postpress.

This module contains the Generator, which turns a source directory into a
static site in two phases:

1. read_source: load the site meta and the templates, walk the source tree
   once and sort every file into posts, page templates and static files.
2. write_output: render every post and page template against one shared
   parameter bundle and copy the static files.

Source layout::

    .postpress/meta.yaml     optional site meta data
    .postpress/layout.html   base layout, required
    .postpress/post.html     post template, optional
    blog/hello/post.md       post, written to blog/hello/index.html
    index.html               page template (.html, .xml and .txt)
    style.css                anything else is copied as is

Any path with a dot-prefixed segment is skipped, as is the output directory
when it lies inside the sources. Page templates are registered under their
URL (`/index.html`), so a page may share the base layout's file name.

Key classes:
- Generator: Two phase site generator.
- SourceFile: A source file and its output path.
- BuildResult: Summary of a finished build.

Key functions:
- build_site: Run both phases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath

from .config import CONFIG_DIR, META_FILE, Meta, load_meta
from .index import build_pages, build_tags
from .posts import Post, sort_posts
from .templates import (
    BaseLayout,
    DerivedTemplate,
    TemplateParams,
    derive,
    execute,
    load_base,
)
from .utils import (
    copy_file,
    is_hidden_path,
    is_template,
    relative_within,
    to_destination,
    url_for,
)

POST_SOURCE = "post.md"
POST_DESTINATION = "index.html"
LAYOUT_FILE = "layout.html"
POST_TEMPLATE_FILE = "post.html"


@dataclass
class SourceFile:
    """A source file and where it goes.

    Attributes:
        source: Path to the source file.
        destination: Output path relative to the output directory.
    """

    source: Path
    destination: PurePosixPath


@dataclass
class BuildResult:
    """Result of a site build.

    Attributes:
        output_dir: Directory the site was written to.
        posts: All posts, in post order.
        pages: URLs of all rendered HTML pages.
        templates: Number of page templates rendered.
        files: Number of static files copied.
    """

    output_dir: Path
    posts: list[Post] = field(default_factory=list)
    pages: list[str] = field(default_factory=list)
    templates: int = 0
    files: int = 0


class Generator:
    """Loads a site's sources, then renders and writes them.

    read_source must complete before write_output is called.

    Attributes:
        meta: Site meta data.
        layout: The base layout.
        post_template: Template used to render posts.
        posts: Posts found in the source tree.
        templates: Page templates found in the source tree.
        files: Static files found in the source tree.
    """

    def __init__(self) -> None:
        self.meta = Meta()
        self.layout: BaseLayout | None = None
        self.post_template: BaseLayout | DerivedTemplate | None = None
        self.posts: list[Post] = []
        self.templates: list[SourceFile] = []
        self.files: list[SourceFile] = []

    def read_source(self, source_dir: Path, exclude: Path | None = None) -> None:
        """Load the templates and sort the source tree.

        Args:
            source_dir: Root directory of the site sources.
            exclude: Directory left out of the walk, usually the output
                directory when it lies inside the sources.

        Raises:
            PostError: If a post is malformed.
            TemplateError: If the layout or post template does not parse.
            MetaError: If the meta file is malformed.
            OSError: If a file cannot be read, the layout included.
        """
        config_dir = source_dir / CONFIG_DIR
        self.meta = load_meta(config_dir / META_FILE)
        self.layout = load_base(config_dir / LAYOUT_FILE)
        post_template_path = config_dir / POST_TEMPLATE_FILE
        if post_template_path.exists():
            self.post_template = derive(self.layout, post_template_path)
        else:
            self.post_template = self.layout

        skipped = relative_within(exclude, source_dir) if exclude is not None else None
        skipped_parts = skipped.parts if skipped is not None else ()
        for path in sorted(source_dir.rglob("*")):
            if path.is_dir():
                continue
            rel = path.relative_to(source_dir)
            if is_hidden_path(rel):
                continue
            if skipped_parts and rel.parts[: len(skipped_parts)] == skipped_parts:
                continue
            destination = to_destination(rel)

            if rel.name == POST_SOURCE:
                self.posts.append(
                    Post.from_file(path, destination.with_name(POST_DESTINATION))
                )
            elif is_template(rel):
                self.templates.append(SourceFile(path, destination))
            else:
                self.files.append(SourceFile(path, destination))

    def load_params(self, now: datetime | None = None) -> TemplateParams:
        """Build the parameter bundle shared by every template of the run.

        Args:
            now: Time of the run, defaults to the current UTC time.

        Returns:
            TemplateParams with sorted posts, tags and pages.
        """
        posts = sort_posts(self.posts)
        return TemplateParams(
            time=now or datetime.now(timezone.utc),
            meta=self.meta,
            posts=posts,
            tags=build_tags(posts),
            pages=build_pages((f.destination for f in self.templates), posts),
        )

    def write_output(self, output_dir: Path, now: datetime | None = None) -> BuildResult:
        """Render the posts and page templates and copy the static files.

        Args:
            output_dir: Directory to write the site into.
            now: Time of the run, defaults to the current UTC time.

        Returns:
            BuildResult summarizing what was written.

        Raises:
            TemplateError: If a template fails to parse or render.
            PostError: If a post body can no longer be read.
            OSError: If a file cannot be read or written.
        """
        params = self.load_params(now)

        for post in params.posts:
            params.current = post
            execute(self.post_template, params, output_dir / post.destination)

        if params.posts:
            params.current = params.posts[0]

        for page in self.templates:
            template = derive(self.layout, page.source, name=url_for(page.destination))
            execute(template, params, output_dir / page.destination)

        for static in self.files:
            copy_file(static.source, output_dir / static.destination)

        return BuildResult(
            output_dir=output_dir,
            posts=params.posts,
            pages=params.pages,
            templates=len(self.templates),
            files=len(self.files),
        )


def build_site(source_dir: Path, output_dir: Path) -> BuildResult:
    """Build the site in ``source_dir`` into ``output_dir``.

    An output directory inside the sources is skipped while reading them.

    Args:
        source_dir: Root directory of the site sources.
        output_dir: Directory to write the site into.

    Returns:
        BuildResult summarizing what was written.
    """
    generator = Generator()
    generator.read_source(source_dir, exclude=output_dir)
    return generator.write_output(output_dir)
