"""Content extraction: turns a fetched :class:`Document` into typed values.

Three policies, one per page shape the site serves:

* :func:`extract_count`       — the ``X-Y/Z`` summary of a letter listing.
* :func:`extract_words`       — the entries on one listing page.
* :func:`extract_definition`  — the body of a single entry.

Unexpected markup is a permanent error: retrying will not change it.
"""

from __future__ import annotations

import re
from typing import List

from eswil.errors import MalformedResponseError, MissingElementError
from eswil.scraper.markup import (
    Document,
    child_elements,
    child_texts,
    first_without_attr,
    inner_html,
)
from eswil.models import WordRecord

LISTING_ID = "listaHasel"
DEFINITION_ID = "haslo"

_SUMMARY_RE = re.compile(r"(\d+)-(\d+)/(\d+)")
_ENTRY_HREF_RE = re.compile(r"javascript:\s*haslo\((\d+)")
_BREAKS_RE = re.compile(r"\s*[\t\r\n]+\s*")


def extract_count(doc: Document) -> int:
    """Return the total entry count ``Z`` from the listing's ``X-Y/Z`` summary."""
    listing = doc.require_id(LISTING_ID)
    for text in child_texts(listing):
        text = text.strip()
        if not text:
            continue
        match = _SUMMARY_RE.search(text)
        if match is None:
            raise MalformedResponseError(f"no pagination summary in {text[:80]!r}")
        return int(match.group(3))
    raise MalformedResponseError(f"#{LISTING_ID} has no pagination summary")


def extract_words(doc: Document) -> List[WordRecord]:
    """Return the entries listed on one page.

    Every entry is a direct ``div`` child of the listing; the last ``div`` is
    the page navigation and is dropped.  Each entry holds two anchors: the one
    carrying an ``id`` plays audio, the other links to the entry.
    """
    listing = doc.require_id(LISTING_ID)
    entries = child_elements(listing, "div")[:-1]

    words: List[WordRecord] = []
    for entry in entries:
        anchor = first_without_attr(entry, "a", "id")
        if anchor is None:
            raise MissingElementError(f"#{LISTING_ID} > div > a:not([id])")
        href = anchor.get("href") or ""
        match = _ENTRY_HREF_RE.search(href)
        if match is None:
            raise MalformedResponseError(f"entry link without an id: {href!r}")
        words.append(
            WordRecord(id=int(match.group(1)), text=normalise_whitespace(anchor.get_text()))
        )
    return words


def extract_definition(doc: Document) -> str:
    """Return the inner markup of the definition body on a single line."""
    body = doc.require_id(DEFINITION_ID)
    return normalise_whitespace(inner_html(body))


def normalise_whitespace(text: str) -> str:
    """Trim *text* and collapse every run of tabs and newlines to a single space."""
    return _BREAKS_RE.sub(" ", text.strip())
