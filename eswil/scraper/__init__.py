"""Scraper package — session, fetch, retry, extraction and the scraping phases."""

from eswil.models import (
    DefinitionRecord,
    FetchTask,
    LetterCount,
    PhaseSummary,
    Session,
    WordRecord,
)
from eswil.scraper.pipeline import BoundedPipeline
from eswil.scraper.retry import RetryPolicy
from eswil.scraper.runner import run_counts, run_definitions, run_words
from eswil.scraper.session import acquire_session

__all__ = [
    "BoundedPipeline",
    "DefinitionRecord",
    "FetchTask",
    "LetterCount",
    "PhaseSummary",
    "RetryPolicy",
    "Session",
    "WordRecord",
    "acquire_session",
    "run_counts",
    "run_definitions",
    "run_words",
]
