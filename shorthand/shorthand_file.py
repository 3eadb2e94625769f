from __future__ import annotations
import logging
import os
from typing import Iterable, Optional

from shorthand.shorthand_datatypes import FileReadError, FileWriteError

logger = logging.getLogger(__name__)


def resolve_path(name: str, base_dir: Optional[str] = None) -> str:
    name = name.strip()
    # Home directory
    if name.startswith("~"):
        return os.path.expanduser(name)
    # Absolute filesystem path
    if os.path.isabs(name):
        return os.path.normpath(name)
    # Default: relative to the configured base directory (or CWD)
    base = base_dir or os.getcwd()
    return os.path.normpath(os.path.join(base, name))


def read_text(name: str, *, base_dir: Optional[str] = None, encoding: str = "utf-8") -> str:
    path = resolve_path(name, base_dir)
    logger.debug("reading %s", path)
    try:
        with open(path, "r", encoding=encoding) as f:
            return f.read()
    except (OSError, ValueError) as e:
        raise FileReadError(name, e) from e


def write_text(name: str, data: str, *, base_dir: Optional[str] = None, encoding: str = "utf-8") -> None:
    path = resolve_path(name, base_dir)
    logger.debug("writing %d characters to %s", len(data), path)
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding=encoding) as f:
            f.write(data)
    except (OSError, ValueError) as e:
        raise FileWriteError(name, e) from e


def write_lines(name: str, lines: Iterable[str], *, base_dir: Optional[str] = None, encoding: str = "utf-8") -> None:
    """Write each item followed by a newline."""
    path = resolve_path(name, base_dir)
    logger.debug("writing lines to %s", path)
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding=encoding) as f:
            for line in lines:
                f.write(line)
                f.write("\n")
    except (OSError, ValueError) as e:
        raise FileWriteError(name, e) from e
