"""Strict front matter decoding for postpress.

The header block of a post is decoded with PyYAML into a fixed set of fields.
Decoding is strict: unknown fields, duplicate keys and values of the wrong
shape are errors instead of being silently dropped.

Key classes:
- FrontMatter: The decoded header fields, before validation.
- StrictSafeLoader / StrictBaseLoader: YAML loaders rejecting duplicate keys.

Key functions:
- decode_front_matter: Decode a header block into a FrontMatter.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any

import yaml
from yaml.constructor import ConstructorError

from .utils import as_utc


class FrontMatterError(ValueError):
    """The header block could not be decoded."""


def _check_unique_keys(node: yaml.Node) -> None:
    if not isinstance(node, yaml.MappingNode):
        return
    seen: set[str] = set()
    for key_node, _ in node.value:
        if not isinstance(key_node, yaml.ScalarNode):
            continue
        if key_node.value in seen:
            raise ConstructorError(
                "while constructing a mapping",
                node.start_mark,
                f"found duplicate key {key_node.value!r}",
                key_node.start_mark,
            )
        seen.add(key_node.value)


class StrictSafeLoader(yaml.SafeLoader):
    """SafeLoader that rejects mappings with duplicate keys."""

    def construct_mapping(self, node, deep=False):
        _check_unique_keys(node)
        return super().construct_mapping(node, deep=deep)


class StrictBaseLoader(yaml.BaseLoader):
    """BaseLoader (every scalar stays a string) that rejects duplicate keys."""

    def construct_mapping(self, node, deep=False):
        _check_unique_keys(node)
        return super().construct_mapping(node, deep=deep)


@dataclass
class FrontMatter:
    """Decoded header fields of a post.

    Missing fields keep their empty defaults; presence is checked by the
    post model.
    """

    title: str = ""
    published: datetime | None = None
    short: str = ""
    tags: list[str] = field(default_factory=list)


FIELD_NAMES = tuple(f.name for f in fields(FrontMatter))


def _string(name: str, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise FrontMatterError(f"field {name!r} must be a string")


def _string_list(name: str, value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise FrontMatterError(f"field {name!r} must be a list of strings")
    items = []
    for item in value:
        if item is None:
            raise FrontMatterError(f"field {name!r} holds an empty item")
        items.append(_string(name, item))
    return items


def _timestamp(name: str, value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return as_utc(value)
    if isinstance(value, str):
        try:
            return as_utc(datetime.fromisoformat(value.strip()))
        except ValueError as exc:
            raise FrontMatterError(f"field {name!r} is not a valid date: {value!r}") from exc
    raise FrontMatterError(f"field {name!r} is not a valid date: {value!r}")


def decode_front_matter(block: bytes) -> FrontMatter:
    """Decode a header block into its fields.

    Args:
        block: Raw header bytes as returned by the scanner.

    Returns:
        FrontMatter with every field present in the block filled in.

    Raises:
        FrontMatterError: On invalid UTF-8 or YAML, a non-mapping document,
            an unknown or duplicate key, or a value of the wrong type.
    """
    try:
        text = block.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FrontMatterError(f"header is not valid UTF-8: {exc}") from exc
    try:
        data = yaml.load(text, Loader=StrictSafeLoader)
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"invalid YAML: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError("header must be a mapping of fields")
    for key in data:
        if key not in FIELD_NAMES:
            raise FrontMatterError(f"unknown field {key!r}")

    return FrontMatter(
        title=_string("title", data.get("title")),
        published=_timestamp("published", data.get("published")),
        short=_string("short", data.get("short")),
        tags=_string_list("tags", data.get("tags")),
    )
