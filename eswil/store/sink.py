"""Durable, append-only, tab-separated output store."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional, TextIO

logger = logging.getLogger(__name__)


def truncate_torn_tail(path: Path) -> int:
    """Cut an unterminated trailing line off *path*.

    A process killed mid-write can leave half a record at the end of the
    file; appending after it would glue two records together.  Returns the
    number of bytes removed.
    """
    if not path.exists():
        return 0
    with path.open("rb+") as fh:
        size = fh.seek(0, os.SEEK_END)
        if size == 0:
            return 0
        fh.seek(size - 1)
        if fh.read(1) == b"\n":
            return 0

        # Walk back to the last newline.
        pos = size
        chunk = 4096
        keep = 0
        while pos > 0:
            start = max(0, pos - chunk)
            fh.seek(start)
            block = fh.read(pos - start)
            idx = block.rfind(b"\n")
            if idx >= 0:
                keep = start + idx + 1
                break
            pos = start
        fh.truncate(keep)
        fh.flush()
        os.fsync(fh.fileno())
    removed = size - keep
    logger.warning("Removed %d byte(s) of torn trailing record from %s", removed, path)
    return removed


class OutputSink:
    """Append records as tab-joined lines, syncing to disk every *sync_every*.

    Use as a context manager::

        with OutputSink(path, append=True) as sink:
            sink.write(record.to_fields())

    Only one thread may write; the pipeline delivers results to the caller's
    thread, so the caller is the single writer.
    """

    def __init__(self, path: Path, append: bool = True, sync_every: int = 16) -> None:
        if sync_every < 1:
            raise ValueError(f"sync_every must be at least 1, got {sync_every}")
        self.path = Path(path)
        self.append = append
        self.sync_every = sync_every
        self.written = 0
        self._since_sync = 0
        self._fh: Optional[TextIO] = None

    def open(self) -> "OutputSink":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.append:
            truncate_torn_tail(self.path)
        mode = "a" if self.append else "w"
        self._fh = self.path.open(mode, encoding="utf-8", newline="\n")
        return self

    def write(self, fields: Iterable[str]) -> None:
        if self._fh is None:
            raise RuntimeError(f"sink for {self.path} is not open")
        self._fh.write("\t".join(fields) + "\n")
        self.written += 1
        self._since_sync += 1
        if self._since_sync >= self.sync_every:
            self.sync()

    def sync(self) -> None:
        """Force everything written so far to stable storage."""
        if self._fh is None:
            return
        self._fh.flush()
        os.fsync(self._fh.fileno())
        self._since_sync = 0

    def close(self) -> None:
        if self._fh is None:
            return
        try:
            self.sync()
        finally:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> "OutputSink":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()
