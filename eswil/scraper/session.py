"""Session bootstrap: obtains the ``PHPSESSID`` every later request carries."""

from __future__ import annotations

import logging

import httpx

from eswil.config import settings
from eswil.errors import MissingCookieError
from eswil.models import SESSION_COOKIE, Session
from eswil.scraper.transport import check_status, send

logger = logging.getLogger(__name__)


def acquire_session(client: httpx.Client) -> Session:
    """Open the dictionary once and capture the session cookie.

    Not retried: without a session no other request can succeed, so a
    failure here aborts the run before anything is written.

    Raises:
        TransportError: If the bootstrap request fails.
        MalformedResponseError: On an error status or a redirect loop.
        MissingCookieError: If no non-empty session cookie was set.
    """
    response = send(client, "GET", settings.bootstrap_url)
    check_status(response)

    # The cookie may be set on a redirect rather than on the final page.
    for hop in [*response.history, response]:
        for cookie in hop.cookies.jar:
            if cookie.name == SESSION_COOKIE and cookie.value:
                logger.info("Acquired a session from %s", hop.request.url)
                return Session(token=cookie.value)

    raise MissingCookieError(SESSION_COOKIE)
