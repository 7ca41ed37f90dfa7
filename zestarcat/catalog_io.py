"""Plain, gzip and bzip2 catalogue files behind one text reader."""

from __future__ import annotations

import bz2
import gzip
from pathlib import Path
from typing import TextIO

ENCODING = "latin-1"


def open_catalog(path: Path | str) -> TextIO:
    """Open a catalogue file for reading text, decompressing by extension."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".bz2":
        return bz2.open(path, "rt", encoding=ENCODING)
    if suffix == ".gz":
        return gzip.open(path, "rt", encoding=ENCODING)
    return path.open("r", encoding=ENCODING)


def read_catalog_text(path: Path | str) -> str:
    with open_catalog(path) as handle:
        return handle.read()


__all__ = ["open_catalog", "read_catalog_text"]
