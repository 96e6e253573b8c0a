"""Data formats a checker can load its backing data from."""

from enum import Enum
from pathlib import Path


class Format(str, Enum):
    """Serialization formats understood by the loaders."""

    JSON = "json"
    YAML = "yaml"
    CSV = "csv"
    TEXT = "text"
    BIN = "bin"
    XLSX = "xlsx"
    XML = "xml"


_EXTENSIONS = {
    Format.JSON: ".json",
    Format.YAML: ".yaml",
    Format.CSV: ".csv",
    Format.TEXT: ".txt",
    Format.BIN: ".binpb",
    Format.XLSX: ".xlsx",
    Format.XML: ".xml",
}

# Extra spellings accepted when inferring a format from a file name
_ALIASES = {
    ".yml": Format.YAML,
    ".txtpb": Format.TEXT,
    ".bin": Format.BIN,
}


def extension(fmt: Format) -> str:
    """Return the file extension used for *fmt*, including the dot."""
    return _EXTENSIONS[Format(fmt)]


def from_path(path: str | Path) -> Format:
    """Infer the format of a data file from its extension."""
    suffix = Path(path).suffix.lower()
    for fmt, ext in _EXTENSIONS.items():
        if ext == suffix:
            return fmt
    if suffix in _ALIASES:
        return _ALIASES[suffix]
    raise ValueError(f"Unknown data file extension: {suffix or path}")
