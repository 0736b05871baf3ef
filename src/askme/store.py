"""Line-file persistence: one record per line, rewritten wholesale on save."""

from __future__ import annotations

import fcntl
import logging
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from askme.codec import ParseError
from askme.errors import StorageError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger("askme.store")

T = TypeVar("T")


def read_lines(path: Path | str) -> list[str]:
    """Return the non-empty lines of path. A missing file reads as empty."""
    path = Path(path)
    if not path.exists():
        return []
    try:
        with path.open(encoding="utf-8", newline="") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            text = f.read()
    except OSError as exc:
        msg = f"cannot read {path}: {exc}"
        raise StorageError(msg) from exc
    # not splitlines(): text fields may contain form feeds and unicode line separators
    lines = (line.removesuffix("\r") for line in text.split("\n"))
    return [line for line in lines if line]


def write_lines(path: Path | str, lines: Iterable[str]) -> None:
    """Replace the contents of path with lines, one per line."""
    path = Path(path)
    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write to tmp then rename; truncate only once the lock is held
        with tmp.open("a", encoding="utf-8", newline="\n") as f:
            fcntl.flock(f, fcntl.LOCK_EX)
            f.truncate(0)
            for line in lines:
                f.write(line + "\n")
        tmp.replace(path)
    except OSError as exc:
        msg = f"cannot write {path}: {exc}"
        raise StorageError(msg) from exc


def load_records(path: Path | str, decode: Callable[[str], T]) -> list[T]:
    """Decode every line of path, skipping (and logging) malformed ones."""
    records: list[T] = []
    for line in read_lines(path):
        try:
            records.append(decode(line))
        except ParseError as exc:
            logger.warning("skipping malformed line in %s: %s", path, exc)
    return records
