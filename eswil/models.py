"""Data models shared by the scraper and the stores."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

SESSION_COOKIE = "PHPSESSID"
FAILURE_MARKER = "#FETCH-FAILED#"

# (label, done, total) reported once per completed unit of work.
ProgressCallback = Callable[[str, int, int], None]


@dataclass(frozen=True)
class Session:
    """The server-issued session token shared by every request of a run."""

    token: str

    @property
    def cookie_header(self) -> str:
        return f"{SESSION_COOKIE}={self.token}"


@dataclass(frozen=True)
class LetterCount:
    letter: str
    total: int


@dataclass(frozen=True)
class WordRecord:
    """A single dictionary entry as listed on a letter page."""

    id: int
    text: str

    def to_fields(self) -> Tuple[str, ...]:
        return (str(self.id), self.text)


@dataclass(frozen=True)
class DefinitionRecord:
    """A word with its definition body, or ``None`` when the fetch failed."""

    id: int
    word: str
    definition: Optional[str]

    @property
    def failed(self) -> bool:
        return self.definition is None

    def to_fields(self) -> Tuple[str, ...]:
        body = FAILURE_MARKER if self.definition is None else self.definition
        return (str(self.id), self.word, body)


@dataclass(frozen=True)
class FetchTask:
    """One remote page request.

    ``page`` is the page index sent as the ``offset`` form field; the first
    entry on that page sits at ``page * page_size``.
    """

    letter: str
    page: int = 0
    word_id: Optional[int] = None


@dataclass
class PhaseSummary:
    """Counters reported at the end of a phase."""

    planned: int = 0
    fetched: int = 0
    skipped: int = 0
    failed: int = 0
    records: int = 0
