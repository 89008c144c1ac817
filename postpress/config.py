"""Configuration and site meta loading for postpress.

Both files live in the hidden ``.postpress`` directory of a site and both are
optional:

- ``meta.yaml``: a flat mapping of strings made available to every template
  as ``meta``. Keys are capitalized on load, so ``title: My Blog`` is read in
  templates as ``{{ meta.Title }}``.
- ``config.yaml``: build settings such as the output directory, merged over
  DEFAULT_CONFIG.

Key classes:
- Meta: Read-only mapping of site meta data.

Key functions:
- load_meta: Load the site meta file.
- load_config: Load the build configuration.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import MetaError
from .frontmatter import StrictBaseLoader
from .utils import titlecase

CONFIG_DIR = ".postpress"
META_FILE = "meta.yaml"
CONFIG_FILE = "config.yaml"

DEFAULT_CONFIG = {
    "output_dir": "public",
    "address": "127.0.0.1:8080",
}


class Meta(Mapping[str, str]):
    """Read-only mapping of site meta data with capitalized keys.

    Keys missing from the file read as "" through attribute access, so
    templates can use ``{{ meta.Author }}`` on sites that never set it.
    Subscripting keeps plain mapping semantics.
    """

    def __init__(self, mapping: Mapping[str, str] | None = None):
        self._mapping = dict(mapping or {})

    def __getitem__(self, key: str) -> str:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __getattr__(self, name: str) -> str:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._mapping.get(name, "")

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"Meta({self._mapping!r})"


def _read_text(path: Path) -> str:
    with open(path, "rb") as f:
        data = f.read()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MetaError(path, f"not valid UTF-8: {exc}", exc) from exc


def load_meta(path: Path) -> Meta:
    """Load site meta data from a YAML file.

    A missing file is not an error and gives an empty Meta. Every value must
    be a plain scalar; it is kept as the literal text written in the file.

    Args:
        path: Path to the meta file.

    Returns:
        Meta with capitalized keys.

    Raises:
        MetaError: If the file is not UTF-8 or not a flat mapping, repeats a
            key, or holds two keys that only differ by capitalization.
    """
    try:
        text = _read_text(path)
    except FileNotFoundError:
        return Meta()
    try:
        loaded = yaml.load(text, Loader=StrictBaseLoader)
    except yaml.YAMLError as exc:
        raise MetaError(path, f"invalid YAML: {exc}", exc) from exc

    if loaded is None or loaded == "":
        return Meta()
    if not isinstance(loaded, dict):
        raise MetaError(path, "meta must be a mapping of strings")

    meta: dict[str, str] = {}
    for key, value in loaded.items():
        if not isinstance(value, str):
            raise MetaError(path, f"meta value for {key!r} must be a string")
        canonical = titlecase(key)
        if canonical in meta:
            raise MetaError(path, f"duplicate meta key {canonical!r}")
        meta[canonical] = value
    return Meta(meta)


def load_config(source_dir: Path) -> dict[str, Any]:
    """Load build configuration from ``.postpress/config.yaml``.

    Args:
        source_dir: Root directory of the site sources.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        MetaError: If the file is not UTF-8, not a mapping or holds unknown
            keys.
    """
    config_path = source_dir / CONFIG_DIR / CONFIG_FILE
    config = DEFAULT_CONFIG.copy()
    if not config_path.exists():
        return config
    try:
        loaded = yaml.safe_load(_read_text(config_path)) or {}
    except yaml.YAMLError as exc:
        raise MetaError(config_path, f"invalid YAML: {exc}", exc) from exc
    if not isinstance(loaded, dict):
        raise MetaError(config_path, "config must be a mapping")
    for key in loaded:
        if key not in DEFAULT_CONFIG:
            raise MetaError(config_path, f"unknown config key {key!r}")
    config.update({key: str(value) for key, value in loaded.items()})
    return config
