"""Reading checker data files from a directory.

A checker's data lives at ``<directory>/<subdir>/<filename><ext>``. The
subdirectory is a logical name which can be relocated at run time through
subdir rewrites, e.g. ``{"excel/": "excel-v2/"}``.
"""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from checkhub.format import Format, extension
from checkhub.hub.errors import UnsupportedFormatError

logger = logging.getLogger(__name__)


def _clean(path: str) -> str:
    return path.replace("\\", "/")


def rewrite_subdir(subdir: str, rewrites: Mapping[str, str] | None) -> str:
    """Apply the first rewrite whose key prefixes *subdir*."""
    if not rewrites:
        return subdir
    cleaned = _clean(subdir)
    for old, new in rewrites.items():
        old = _clean(old)
        if cleaned.startswith(old):
            rewritten = _clean(new) + cleaned[len(old):]
            logger.debug("Rewrote subdir '%s' -> '%s'", subdir, rewritten)
            return rewritten
    return subdir


def resolve_path(
    directory: str | Path,
    subdir: str,
    filename: str,
    fmt: Format,
    rewrites: Mapping[str, str] | None = None,
) -> Path:
    """Return the physical path of a data file."""
    subdir = rewrite_subdir(subdir, rewrites)
    base = Path(directory)
    if subdir:
        base = base / subdir
    return base / f"{filename}{extension(fmt)}"


def load_file(path: str | Path, fmt: Format) -> Any:
    """Parse a data file.

    Returns:
        Parsed JSON/YAML document, a list of row dicts for CSV, or the raw
        text for TEXT.

    Raises:
        FileNotFoundError: if *path* does not exist.
        UnsupportedFormatError: for formats without a parser here.
    """
    fmt = Format(fmt)
    path = Path(path)
    if fmt not in (Format.JSON, Format.YAML, Format.CSV, Format.TEXT):
        raise UnsupportedFormatError(fmt.value)

    text = path.read_text(encoding="utf-8")
    if fmt == Format.JSON:
        return json.loads(text)
    elif fmt == Format.YAML:
        return yaml.safe_load(text)
    elif fmt == Format.CSV:
        return list(csv.DictReader(text.splitlines()))
    return text
