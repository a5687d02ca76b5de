"""Error taxonomy for the scraper.

Every failure raised by the scraping layers is a :class:`ScrapeError`.  The
``transient`` class attribute tells the retry executor whether another
attempt could help:

* transient  — :class:`TransportError` (connection, timeout, protocol, I/O,
  throttling and server-side 5xx responses).
* permanent  — everything about the *content* of a response
  (:class:`MalformedResponseError`, :class:`MissingElementError`,
  :class:`EncodingError`), a session bootstrap with no session cookie
  (:class:`MissingCookieError`) and unreadable local stores
  (:class:`StoreFormatError`).
"""

from __future__ import annotations

import httpx


class ScrapeError(Exception):
    """Base class for every scraper failure."""

    transient: bool = False


class TransportError(ScrapeError):
    """The request could not be completed; worth retrying."""

    transient = True


class MalformedResponseError(ScrapeError):
    """The response arrived but is not the document we expected."""


class MissingElementError(ScrapeError):
    """An expected markup anchor is absent from the document."""

    def __init__(self, selector: str) -> None:
        super().__init__(f"element {selector!r} not found in document")
        self.selector = selector


class MissingCookieError(ScrapeError):
    """The bootstrap response carried no session cookie."""

    def __init__(self, name: str) -> None:
        super().__init__(f"no {name!r} cookie in bootstrap response")
        self.name = name


class EncodingError(ScrapeError):
    """The response body is not valid text."""


class StoreFormatError(ScrapeError):
    """A line in a local store cannot be parsed."""

    def __init__(self, path: object, line_no: int, line: str) -> None:
        super().__init__(f"{path}:{line_no}: malformed line {line!r}")
        self.line_no = line_no


def is_transient(exc: BaseException) -> bool:
    """Return ``True`` if *exc* is worth another attempt."""
    if isinstance(exc, ScrapeError):
        return exc.transient
    return isinstance(exc, (httpx.TransportError, OSError))
