"""HTTP transport: the form POST every dictionary page is served from."""

from __future__ import annotations

from typing import Dict, Optional

import httpx

from eswil.config import settings
from eswil.errors import EncodingError, MalformedResponseError, TransportError
from eswil.models import FetchTask, Session
from eswil.scraper.markup import Document

# Statuses the server uses when it is overloaded or throttling us.
_RETRYABLE_STATUSES = frozenset({408, 425, 429, 500, 502, 503, 504})


def build_client(max_connections: int = 32) -> httpx.Client:
    """Return an ``httpx.Client`` shared by every request of a run.

    The connection pool is sized to the concurrency bound so no request
    waits on a pooled connection.
    """
    return httpx.Client(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.request_timeout,
        follow_redirects=True,
        limits=httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_connections,
        ),
    )


def build_form(letter: str, page: int, word_id: Optional[int] = None) -> Dict[str, str]:
    """Return the form fields the listing endpoint expects."""
    return {
        "idHasla": str(word_id or 0),
        "uklad": "poziomy",
        "offset": str(page),
        "litera": letter,
        "Wsposob": "0",
        "Whaslo": "",
        "Wkolejnosc": "a fronte",
        "czesc": "str",
        "str": "3",
        "skala": "100",
        "nowyFiltr": "",
        "hSz": "0",
    }


def check_status(response: httpx.Response) -> None:
    """Raise the taxonomy error matching a non-2xx *response*."""
    if response.is_success:
        return
    message = f"HTTP {response.status_code} from {response.request.url}"
    if response.status_code in _RETRYABLE_STATUSES:
        raise TransportError(message)
    raise MalformedResponseError(message)


def send(client: httpx.Client, method: str, url: str, **kwargs) -> httpx.Response:
    """Send one request, mapping httpx failures onto the error taxonomy.

    Raises:
        TransportError: On connection, timeout or protocol failures.
        EncodingError: If the body cannot be decoded (e.g. corrupt gzip).
        MalformedResponseError: On any other request failure, such as a
            redirect loop.
    """
    try:
        return client.request(method, url, **kwargs)
    except (httpx.TransportError, OSError) as exc:
        raise TransportError(f"{type(exc).__name__}: {exc}") from exc
    except httpx.DecodingError as exc:
        raise EncodingError(f"undecodable response body: {exc}") from exc
    except httpx.RequestError as exc:
        raise MalformedResponseError(f"{type(exc).__name__}: {exc}") from exc


def post_form(client: httpx.Client, session: Session, task: FetchTask) -> bytes:
    """POST the form for *task* and return the raw response body.

    Raises:
        TransportError: On connection, timeout or protocol failures, or a
            status the server uses for transient trouble.
        EncodingError: If the body cannot be decoded.
        MalformedResponseError: On any other error status or request failure.
    """
    response = send(
        client,
        "POST",
        settings.endpoint_url,
        data=build_form(task.letter, task.page, task.word_id),
        headers={
            "User-Agent": settings.user_agent,
            "Cookie": session.cookie_header,
        },
    )
    check_status(response)
    return response.content


def fetch_document(client: httpx.Client, session: Session, task: FetchTask) -> Document:
    """Fetch *task* and parse the body into a :class:`Document`."""
    return Document.parse(post_form(client, session, task))
