"""eswil CLI — entry-point for the dictionary scrape.

Usage:
    python cli/main.py --help

Each command maps to a scraping mode:
    counts  → per-letter entry totals (printed, nothing written)
    words   → counts, then the full page walk into the word store
    defs    → definitions for every word in the word store, resumable
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from eswil.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import logging
from typing import Optional

import typer
from tqdm.contrib.logging import logging_redirect_tqdm

from cli.progress import ProgressBars
from eswil.config import settings
from eswil.errors import ScrapeError
from eswil.models import PhaseSummary
from eswil.scraper.pagination import LETTERS

app = typer.Typer(
    name="eswil",
    help="Scrape the eswil.ijp.pan.pl dictionary.",
)


def configure_logging(level_name: str) -> None:
    """Configure root logging and keep httpx quiet unless debugging."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s [%(module)s-%(funcName)s()::%(lineno)d] %(message)s",
        datefmt="%d/%b/%Y %H:%M:%S",
        force=True,
    )
    if level <= logging.INFO:
        for noisy in ("httpx", "httpcore"):
            lg = logging.getLogger(noisy)
            lg.setLevel(logging.WARNING)
            lg.propagate = False


def _fail(prefix: str, exc: BaseException) -> None:
    typer.echo(f"[{prefix}] Fatal: {exc}", err=True)
    raise typer.Exit(1)


def _echo_summary(prefix: str, summary: PhaseSummary) -> None:
    typer.echo(
        f"[{prefix}] Planned: {summary.planned}  fetched: {summary.fetched}  "
        f"skipped: {summary.skipped}  failed: {summary.failed}  "
        f"lines written: {summary.records}"
    )


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Logging level."),
) -> None:
    """Scrape the dictionary's word list and definitions."""
    configure_logging(log_level)


# ---------------------------------------------------------------------------
# counts
# ---------------------------------------------------------------------------
@app.command("counts")
def counts_cmd(
    letters: str = typer.Option(LETTERS, help="Letters to count."),
    concurrency: Optional[int] = typer.Option(None, min=1, help="Simultaneous requests."),
    no_progress: bool = typer.Option(False, "--no-progress", help="Hide progress bars."),
) -> None:
    """Print the number of entries under each letter."""
    from eswil.scraper.runner import run_counts

    with ProgressBars(disable=no_progress) as bars, logging_redirect_tqdm():
        try:
            counts = run_counts(letters, concurrency, progress_for=bars.phase)
        except ScrapeError as exc:
            _fail("counts", exc)

    for letter in letters:
        if letter in counts:
            typer.echo(f"{letter}\t{counts[letter]}")
    typer.echo(f"[counts] Total: {sum(counts.values())}")


# ---------------------------------------------------------------------------
# words
# ---------------------------------------------------------------------------
@app.command("words")
def words_cmd(
    words_file: Optional[Path] = typer.Option(None, help="Word store to (re)create."),
    letters: str = typer.Option(LETTERS, help="Letters to list."),
    concurrency: Optional[int] = typer.Option(None, min=1, help="Simultaneous requests."),
    no_progress: bool = typer.Option(False, "--no-progress", help="Hide progress bars."),
) -> None:
    """List every dictionary entry into the word store."""
    from eswil.scraper.runner import run_words

    path = words_file or settings.words_path
    typer.echo(f"[words] Writing {str(path)!r} …")
    with ProgressBars(disable=no_progress) as bars, logging_redirect_tqdm():
        try:
            counts, summary = run_words(path, letters, concurrency, progress_for=bars.phase)
        except (ScrapeError, OSError) as exc:
            _fail("words", exc)

    typer.echo(f"[words] Letters: {len(counts)}  entries announced: {sum(counts.values())}")
    _echo_summary("words", summary)


# ---------------------------------------------------------------------------
# defs
# ---------------------------------------------------------------------------
@app.command("defs")
def defs_cmd(
    words_file: Optional[Path] = typer.Option(None, help="Word store to read."),
    output_file: Optional[Path] = typer.Option(None, help="Definition store to append to."),
    concurrency: Optional[int] = typer.Option(None, min=1, help="Simultaneous requests."),
    no_progress: bool = typer.Option(False, "--no-progress", help="Hide progress bars."),
) -> None:
    """Fetch definitions for every word not yet in the definition store."""
    from eswil.scraper.runner import run_definitions

    path = output_file or settings.definitions_path
    typer.echo(f"[defs] Appending to {str(path)!r} …")
    with ProgressBars(disable=no_progress) as bars, logging_redirect_tqdm():
        try:
            summary = run_definitions(words_file, path, concurrency, progress_for=bars.phase)
        except (ScrapeError, OSError) as exc:
            _fail("defs", exc)

    _echo_summary("defs", summary)
    if summary.failed:
        typer.echo(f"[defs] {summary.failed} definition(s) failed; see the failure markers.")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
