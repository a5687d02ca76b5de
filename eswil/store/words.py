"""Reader for the word store (``<id>\\t<word>`` lines)."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List

from eswil.errors import StoreFormatError
from eswil.models import WordRecord


def iter_words(path: Path) -> Iterator[WordRecord]:
    """Yield every :class:`WordRecord` in *path*, skipping blank lines.

    Raises:
        StoreFormatError: On a line without a tab or with a non-numeric id.
    """
    with Path(path).open("r", encoding="utf-8", newline="") as fh:
        for line_no, raw in enumerate(fh, start=1):
            line = raw.strip()
            if not line:
                continue
            id_field, sep, word = line.partition("\t")
            if not sep or not id_field.isdigit():
                raise StoreFormatError(path, line_no, line)
            yield WordRecord(id=int(id_field), text=word)


def read_words(path: Path) -> List[WordRecord]:
    return list(iter_words(path))
