"""postpress static site generator.

This package builds a static site from a directory of Markdown posts with YAML
front matter, Jinja2 page templates and static files.

Modules, leaves first:
- scanner: Splits a post file into its front matter and body blocks.
- frontmatter: Strict YAML decoding of the front matter.
- posts: The post model and its ordering.
- index: Tag and page indexes.
- template_funcs: Helper functions available to templates.
- templates: Base layout loading, template derivation and rendering.
- build: The two phase generator.

The CLI module provides the command line front end.
"""

__all__ = ["__version__"]
__version__ = "0.2.0"
