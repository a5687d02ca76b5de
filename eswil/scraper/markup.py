"""Small typed query layer over a parsed HTML document.

The extraction rules in :mod:`eswil.scraper.extractor` only need a handful of
queries (element by id, direct children by tag, first descendant lacking an
attribute).  Keeping them here, away from the network and retry layers, lets
the rules be tested against captured markup.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, ParserRejectedMarkup, Tag

from eswil.errors import EncodingError, MalformedResponseError, MissingElementError


class Document:
    """A parsed response body."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    @classmethod
    def parse(cls, body: Union[bytes, str]) -> "Document":
        """Parse *body* into a :class:`Document`.

        Raises:
            EncodingError: If *body* is bytes that are not valid UTF-8.
            MalformedResponseError: If the body is empty or the parser rejects it.
        """
        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise EncodingError(f"response body is not valid UTF-8: {exc}") from exc
        if not body.strip():
            raise MalformedResponseError("empty response body")
        try:
            soup = BeautifulSoup(body, "html.parser")
        except ParserRejectedMarkup as exc:
            raise MalformedResponseError(f"unparseable markup: {exc}") from exc
        return cls(soup)

    def find_id(self, element_id: str) -> Optional[Tag]:
        return self._soup.find(id=element_id)

    def require_id(self, element_id: str) -> Tag:
        """Return the element with *element_id* or raise :class:`MissingElementError`."""
        element = self.find_id(element_id)
        if element is None:
            raise MissingElementError(f"#{element_id}")
        return element


def child_elements(parent: Tag, name: str) -> List[Tag]:
    """Return the direct children of *parent* whose tag is *name*."""
    return [c for c in parent.children if isinstance(c, Tag) and c.name == name]


def child_texts(parent: Tag) -> Iterator[str]:
    """Yield the text of every direct child node (elements and bare text)."""
    for node in parent.children:
        if isinstance(node, Tag):
            yield node.get_text()
        elif isinstance(node, NavigableString):
            yield str(node)


def first_without_attr(parent: Tag, name: str, attr: str) -> Optional[Tag]:
    """Return the first *name* descendant of *parent* that has no *attr*."""
    for element in parent.find_all(name):
        if not element.has_attr(attr):
            return element
    return None


def inner_html(element: Tag) -> str:
    return element.decode_contents()
