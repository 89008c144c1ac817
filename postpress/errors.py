"""Error types for postpress.

Every failure that aborts a build derives from BuildError, which carries the
offending file so the CLI can point the user at it. Lower level parsing errors
(ScanError, FrontMatterError) are attached as ``original_error``.
"""

from __future__ import annotations

from pathlib import Path


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


class PostError(BuildError):
    """A post file is malformed or misses a required front matter field."""


class MetaError(BuildError):
    """The site meta or config file could not be decoded."""


class TemplateError(BuildError):
    """A template failed to parse or render.

    Attributes:
        template_name: Name the template is registered under.
    """

    def __init__(
        self,
        source_path: Path,
        template_name: str,
        message: str,
        original_error: Exception | None = None,
    ):
        self.template_name = template_name
        super().__init__(source_path, f"template {template_name!r}: {message}", original_error)
