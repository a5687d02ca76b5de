"""Checkpoint/resume: which ids a previous run already wrote."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import FrozenSet, Iterable, List, Tuple

from eswil.models import WordRecord

logger = logging.getLogger(__name__)


def load_processed_ids(path: Path) -> FrozenSet[int]:
    """Return the ids recorded in the definition store at *path*.

    A missing store means nothing has been done yet.  Only newline-terminated
    lines count; an unterminated trailing line is a torn write and its
    record is fetched again.  Lines whose first field is not an id are
    ignored with a warning.
    """
    path = Path(path)
    if not path.exists():
        return frozenset()

    ids = set()
    with path.open("r", encoding="utf-8", newline="") as fh:
        for line_no, line in enumerate(fh, start=1):
            if not line.endswith("\n"):
                logger.warning("%s:%d: ignoring unterminated trailing line", path, line_no)
                break
            id_field = line.split("\t", 1)[0].strip()
            if not id_field:
                continue
            if not id_field.isdigit():
                logger.warning("%s:%d: ignoring line without an id", path, line_no)
                continue
            ids.add(int(id_field))

    logger.info("Loaded %d processed id(s) from %s", len(ids), path)
    return frozenset(ids)


def split_pending(
    words: Iterable[WordRecord], processed: FrozenSet[int]
) -> Tuple[List[WordRecord], List[WordRecord]]:
    """Partition *words* into ``(pending, done)`` against *processed*."""
    pending: List[WordRecord] = []
    done: List[WordRecord] = []
    for word in words:
        (done if word.id in processed else pending).append(word)
    return pending, done
