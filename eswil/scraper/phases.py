"""The three scraping phases: count discovery, page walk, definitions.

Each phase takes a :class:`ScrapeContext` holding everything a task needs
(HTTP client, session, retry policy, progress callback).  Workers only read
the context; results come back to the calling thread through the pipeline,
which is the only place the sink is written and progress is reported.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence, TypeVar

import httpx

from eswil.config import settings
from eswil.errors import ScrapeError
from eswil.models import (
    DefinitionRecord,
    FetchTask,
    LetterCount,
    PhaseSummary,
    ProgressCallback,
    Session,
    WordRecord,
)
from eswil.scraper.extractor import extract_count, extract_definition, extract_words
from eswil.scraper.markup import Document
from eswil.scraper.pagination import LETTERS, PAGE_SIZE, count_tasks, page_tasks
from eswil.scraper.pipeline import BoundedPipeline
from eswil.scraper.retry import RetryPolicy
from eswil.scraper.transport import fetch_document
from eswil.store.checkpoint import split_pending
from eswil.store.sink import OutputSink

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Definitions are fetched through the listing endpoint with a fixed letter.
DEFINITION_LETTER = "A"


def _no_progress(label: str, done: int, total: int) -> None:
    pass


@dataclass(frozen=True)
class ScrapeContext:
    client: httpx.Client
    session: Session
    retry: RetryPolicy = field(default_factory=RetryPolicy.from_settings)
    progress: ProgressCallback = _no_progress


# ---------------------------------------------------------------------------
# Single-task operations (run on worker threads)
# ---------------------------------------------------------------------------

def _attempt(ctx: ScrapeContext, task: FetchTask, extract: Callable[[Document], T]) -> T:
    return extract(fetch_document(ctx.client, ctx.session, task))


def fetch_count(ctx: ScrapeContext, task: FetchTask) -> LetterCount:
    total = ctx.retry.call(_attempt, ctx, task, extract_count)
    return LetterCount(letter=task.letter, total=total)


def fetch_words(ctx: ScrapeContext, task: FetchTask) -> List[WordRecord]:
    return ctx.retry.call(_attempt, ctx, task, extract_words)


def fetch_definition(ctx: ScrapeContext, word: WordRecord) -> DefinitionRecord:
    """Fetch one definition; a failure is recorded instead of raised."""
    task = FetchTask(letter=DEFINITION_LETTER, word_id=word.id)
    try:
        body = ctx.retry.call(_attempt, ctx, task, extract_definition)
    except ScrapeError as exc:
        logger.error("Definition of %d (%r) failed: %s", word.id, word.text, exc)
        return DefinitionRecord(id=word.id, word=word.text, definition=None)
    return DefinitionRecord(id=word.id, word=word.text, definition=body)


# ---------------------------------------------------------------------------
# Phases (run on the calling thread)
# ---------------------------------------------------------------------------

def discover_counts(
    ctx: ScrapeContext,
    alphabet: str = LETTERS,
    concurrency: Optional[int] = None,
) -> Dict[str, int]:
    """Return the entry total of every letter in *alphabet*.

    Letters complete in any order; the progress label is the alphabet with
    finished letters replaced by ``-``.  Any failure is fatal: the page walk
    cannot be planned from partial counts.
    """
    tasks = count_tasks(alphabet)
    position = {task.letter: i for i, task in enumerate(tasks)}
    remaining = [task.letter for task in tasks]
    pipeline = BoundedPipeline(concurrency or settings.count_concurrency)

    counts: Dict[str, int] = {}
    for _, found in pipeline.unordered(tasks, partial(fetch_count, ctx)):
        counts[found.letter] = found.total
        remaining[position[found.letter]] = "-"
        logger.debug("Letter %s has %d entries", found.letter, found.total)
        ctx.progress("".join(remaining), len(counts), len(tasks))

    logger.info("Discovered %d entries across %d letters", sum(counts.values()), len(counts))
    return counts


def scrape_words(
    ctx: ScrapeContext,
    counts: Mapping[str, int],
    sink: OutputSink,
    concurrency: Optional[int] = None,
    page_size: int = PAGE_SIZE,
    alphabet: str = LETTERS,
) -> PhaseSummary:
    """Walk every listing page and write one ``<id>\\t<word>`` line per entry."""
    tasks = page_tasks(counts, page_size, alphabet)
    total = sum(counts.values())
    pipeline = BoundedPipeline(concurrency or settings.listing_concurrency)
    summary = PhaseSummary(planned=len(tasks))

    for task, words in pipeline.ordered(tasks, partial(fetch_words, ctx)):
        for word in words:
            sink.write(word.to_fields())
        summary.fetched += 1
        summary.records += len(words)
        ctx.progress(words[-1].text if words else task.letter, summary.records, total)

    if summary.records != total:
        logger.warning("Listed %d words but the counts promised %d", summary.records, total)
    return summary


def _warn_duplicate_ids(words: Sequence[WordRecord]) -> None:
    duplicates = [i for i, n in Counter(w.id for w in words).items() if n > 1]
    if duplicates:
        logger.warning(
            "%d id(s) occur more than once in the word store, e.g. %s",
            len(duplicates),
            sorted(duplicates)[:10],
        )


def scrape_definitions(
    ctx: ScrapeContext,
    words: Sequence[WordRecord],
    processed: FrozenSet[int],
    sink: OutputSink,
    concurrency: Optional[int] = None,
) -> PhaseSummary:
    """Fetch the definition of every word not yet in *processed*.

    Already processed words are never fetched; they count towards progress
    up front.  Every fetched word yields exactly one line, with the failure
    marker in place of the body when its fetch failed.
    """
    _warn_duplicate_ids(words)
    pending, done = split_pending(words, processed)
    summary = PhaseSummary(planned=len(words), skipped=len(done))
    total = len(words)
    completed = len(done)
    if completed:
        logger.info("Skipping %d already processed word(s)", completed)
        ctx.progress("", completed, total)

    pipeline = BoundedPipeline(concurrency or settings.definition_concurrency)
    for word, record in pipeline.ordered(pending, partial(fetch_definition, ctx)):
        sink.write(record.to_fields())
        summary.records += 1
        if record.failed:
            summary.failed += 1
        else:
            summary.fetched += 1
        completed += 1
        ctx.progress(word.text, completed, total)

    return summary
