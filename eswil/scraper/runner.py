"""High-level runners wiring the phases to a client, a session and the stores.

Each ``run_*`` function opens its own HTTP client for the duration of the
run and closes it on exit (success or error).  A session is acquired once
per run and shared by every request.  Progress is reported through
``progress_for(phase)``, which returns the callback for a named phase.
"""

from __future__ import annotations

import dataclasses
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Iterator, Optional, Tuple

from eswil.config import settings
from eswil.models import PhaseSummary, ProgressCallback
from eswil.scraper.pagination import LETTERS
from eswil.scraper.phases import (
    ScrapeContext,
    discover_counts,
    scrape_definitions,
    scrape_words,
)
from eswil.scraper.retry import RetryPolicy
from eswil.scraper.session import acquire_session
from eswil.scraper.transport import build_client
from eswil.store.checkpoint import load_processed_ids
from eswil.store.sink import OutputSink
from eswil.store.words import read_words

ProgressFactory = Callable[[str], ProgressCallback]


def _silent(phase: str) -> ProgressCallback:
    return lambda label, done, total: None


@contextmanager
def open_context(max_connections: int, retry: Optional[RetryPolicy] = None) -> Iterator[ScrapeContext]:
    """Yield a :class:`ScrapeContext` with a live client and a fresh session."""
    with build_client(max_connections) as client:
        session = acquire_session(client)
        yield ScrapeContext(
            client=client,
            session=session,
            retry=retry or RetryPolicy.from_settings(),
        )


def run_counts(
    alphabet: str = LETTERS,
    concurrency: Optional[int] = None,
    progress_for: ProgressFactory = _silent,
) -> Dict[str, int]:
    """Discover the entry total of every letter."""
    concurrency = concurrency or settings.count_concurrency
    with open_context(concurrency) as ctx:
        ctx = dataclasses.replace(ctx, progress=progress_for("counts"))
        return discover_counts(ctx, alphabet, concurrency)


def run_words(
    words_path: Optional[Path] = None,
    alphabet: str = LETTERS,
    concurrency: Optional[int] = None,
    progress_for: ProgressFactory = _silent,
) -> Tuple[Dict[str, int], PhaseSummary]:
    """Discover counts, then walk every listing page into a fresh word store."""
    words_path = Path(words_path or settings.words_path)
    concurrency = concurrency or settings.listing_concurrency

    with open_context(max(concurrency, settings.count_concurrency)) as ctx:
        counts = discover_counts(
            dataclasses.replace(ctx, progress=progress_for("counts")), alphabet
        )
        with OutputSink(words_path, append=False, sync_every=settings.sync_every) as sink:
            summary = scrape_words(
                dataclasses.replace(ctx, progress=progress_for("words")),
                counts,
                sink,
                concurrency,
                alphabet=alphabet,
            )
    return counts, summary


def run_definitions(
    words_path: Optional[Path] = None,
    definitions_path: Optional[Path] = None,
    concurrency: Optional[int] = None,
    progress_for: ProgressFactory = _silent,
) -> PhaseSummary:
    """Fetch the definition of every word in the word store not yet recorded.

    The word store is read and the checkpoint loaded before any request is
    made, so a missing or malformed word store fails fast.
    """
    words_path = Path(words_path or settings.words_path)
    definitions_path = Path(definitions_path or settings.definitions_path)
    concurrency = concurrency or settings.definition_concurrency

    words = read_words(words_path)
    processed = load_processed_ids(definitions_path)

    with open_context(concurrency) as ctx:
        with OutputSink(definitions_path, append=True, sync_every=settings.sync_every) as sink:
            return scrape_definitions(
                dataclasses.replace(ctx, progress=progress_for("definitions")),
                words,
                processed,
                sink,
                concurrency,
            )
