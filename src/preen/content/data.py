"""Data loader — reads the optional data file handed to the template.

The file is re-read on every call so edits show up on the next request.
A missing or malformed file never blocks rendering: the template simply
sees no data.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from preen._errors import DataLoadError

if TYPE_CHECKING:
    from preen._types import DataMap

logger = logging.getLogger("preen.data")


def load_data(path: Path | None) -> DataMap:
    """Return the parsed contents of *path* as a dict.

    Returns an empty dict when no path is configured, when the file does
    not exist, or when it cannot be parsed (a warning is logged).

    """
    if path is None or not path.exists():
        return {}

    try:
        return parse_data_file(path)
    except DataLoadError as exc:
        logger.warning("Failed to load data file %s: %s", path, exc)
        return {}


def parse_data_file(path: Path) -> DataMap:
    """Parse a data file by suffix: ``.yaml``/``.yml``, ``.toml``, else JSON.

    Raises:
        DataLoadError: If the file cannot be read, does not parse, or its
            top-level value is not a mapping.

    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DataLoadError(str(exc)) from exc

    suffix = path.suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        elif suffix == ".toml":
            data = tomllib.loads(text)
        else:
            data = json.loads(text)
    except (ValueError, RecursionError, yaml.YAMLError) as exc:
        # json.JSONDecodeError and tomllib.TOMLDecodeError are ValueErrors;
        # deeply nested documents exhaust the recursion limit
        raise DataLoadError(str(exc)) from exc

    if not isinstance(data, dict):
        msg = f"expected a mapping at the top level, got {type(data).__name__}"
        raise DataLoadError(msg)

    return {str(k): v for k, v in data.items()}
