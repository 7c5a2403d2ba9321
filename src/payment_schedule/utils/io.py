"""Reading inputs that may be given as a file path or as inline text."""

from __future__ import annotations

from pathlib import Path


def read_source(source: str | Path, encoding: str = "utf-8") -> str:
    """Return the content of ``source``.

    A ``Path``, or a single-line string naming an existing file, is read from
    disk. Any other string is taken to be the content itself.
    """
    if isinstance(source, Path):
        return source.read_text(encoding=encoding)
    if "\n" not in source:
        try:
            is_file = Path(source).is_file()
        except (OSError, ValueError):
            # Too long or otherwise not usable as a path name
            is_file = False
        if is_file:
            return Path(source).read_text(encoding=encoding)
    return source
