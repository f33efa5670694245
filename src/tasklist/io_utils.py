"""UTF-8 text file helpers, including an atomic replace-on-write."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

PathLike = Path | str


def read_text(path: PathLike) -> str:
    """Read *path* as UTF-8 text."""
    p = path if isinstance(path, Path) else Path(path)
    return p.read_text(encoding="utf-8")


def write_text_atomic(path: PathLike, text: str) -> None:
    """Write *text* to *path* via a sibling temp file and ``os.replace``.

    Readers see either the old content or the new content, never a partial write.
    """
    p = path if isinstance(path, Path) else Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=p.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp_name, p)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
