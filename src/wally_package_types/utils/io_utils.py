"""
Centralized file I/O utilities.

- Single place for encoding handling
- Path.open() with newline="" so line endings are read and written untouched
"""

from pathlib import Path
from typing import Union

from .config import DEFAULT_FILE_ENCODING, MODULE_FILE_EXTENSIONS


def read_source_file(path: Union[Path, str]) -> str:
    """Read source file with standard encoding."""
    p = Path(path) if not isinstance(path, Path) else path
    with p.open("r", encoding=DEFAULT_FILE_ENCODING, newline="") as handle:
        return handle.read()


def write_source_file(path: Union[Path, str], contents: str) -> None:
    """Overwrite source file in place with standard encoding."""
    p = Path(path) if not isinstance(path, Path) else path
    with p.open("w", encoding=DEFAULT_FILE_ENCODING, newline="") as handle:
        handle.write(contents)


def is_module_file(path: Union[Path, str]) -> bool:
    """True if the path names a Luau script (.lua or .luau)."""
    return Path(path).suffix in MODULE_FILE_EXTENSIONS


def detect_newline(source: str) -> str:
    """Line ending used by the source: "\\r\\n" if it has any, else "\\n"."""
    return "\r\n" if "\r\n" in source else "\n"
