"""Newline-separated username and password lists."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from trident.services.exceptions import WordlistError

logger = logging.getLogger(__name__)


def read_lines(path: str | Path) -> List[str]:
    """Read a whole file into memory and return its non-empty lines in order.

    A trailing carriage return is dropped from every line, so CRLF files load
    the same as LF files. Bytes that are not valid UTF-8 become U+FFFD.
    Duplicates are kept.
    """

    try:
        with open(path, "r", encoding="utf-8", errors="replace", newline="") as handle:
            content = handle.read()
    except OSError as exc:
        raise WordlistError(f"error reading lines from {path}", str(path), cause=exc) from exc

    lines = []
    for line in content.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if line:
            lines.append(line)

    logger.debug("Loaded %d lines from %s", len(lines), path)
    return lines
