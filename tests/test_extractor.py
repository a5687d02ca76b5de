"""Tests for the markup query layer and the three extraction policies.

All tests run against fixed captured-style markup; no network is involved.
"""

from __future__ import annotations

import pytest

from eswil.errors import EncodingError, MalformedResponseError, MissingElementError
from eswil.models import WordRecord
from eswil.scraper.extractor import (
    extract_count,
    extract_definition,
    extract_words,
    normalise_whitespace,
)
from eswil.scraper.markup import Document, child_elements, first_without_attr


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_LISTING_HTML = """\
<html>
<body>
<div id="listaHasel">
  <span class="licznik">1-3/250</span>
  <div class="haslo"><a id="odtworz101" href="javascript: odtworz(101)">&#9835;</a><a href="javascript: haslo(101, 0)">ABAK</a></div>
  <div class="haslo"><a id="odtworz102" href="javascript: odtworz(102)">&#9835;</a><a href="javascript: haslo(102, 0)">ABDYKACYJA</a></div>
  <div class="haslo"><a href="javascript: haslo(103, 0)">
    ABECADŁO
  </a></div>
  <div class="nawigacja"><a href="#">&raquo;</a></div>
</div>
</body>
</html>
"""

_DEFINITION_HTML = """\
<html>
<body>
<div id="haslo">
   <b>ABAK</b>
   <i>m</i>
   deska do liczenia
</div>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Document / markup helpers
# ---------------------------------------------------------------------------

class TestDocument:
    def test_parses_utf8_bytes(self) -> None:
        doc = Document.parse(_LISTING_HTML.encode("utf-8"))
        assert doc.find_id("listaHasel") is not None

    def test_invalid_utf8_raises_encoding_error(self) -> None:
        with pytest.raises(EncodingError):
            Document.parse(b"<html>\xff\xfe</html>")

    def test_empty_body_is_malformed(self) -> None:
        with pytest.raises(MalformedResponseError):
            Document.parse(b"   ")

    def test_require_id_missing_raises(self) -> None:
        doc = Document.parse("<html><body></body></html>")
        with pytest.raises(MissingElementError) as info:
            doc.require_id("haslo")
        assert info.value.selector == "#haslo"

    def test_child_elements_only_direct_children(self) -> None:
        doc = Document.parse("<div id='x'><div><div>nested</div></div><span></span><div></div></div>")
        assert len(child_elements(doc.require_id("x"), "div")) == 2

    def test_first_without_attr_skips_audio_anchor(self) -> None:
        doc = Document.parse('<p id="p"><a id="audio" href="#a">a</a><a href="#b">b</a></p>')
        anchor = first_without_attr(doc.require_id("p"), "a", "id")
        assert anchor is not None
        assert anchor["href"] == "#b"


# ---------------------------------------------------------------------------
# count policy
# ---------------------------------------------------------------------------

class TestExtractCount:
    def test_reads_total_from_summary(self) -> None:
        assert extract_count(Document.parse(_LISTING_HTML)) == 250

    def test_summary_as_bare_text_node(self) -> None:
        doc = Document.parse('<div id="listaHasel">\n 1-200/4711 <div></div></div>')
        assert extract_count(doc) == 4711

    def test_missing_listing_raises(self) -> None:
        with pytest.raises(MissingElementError):
            extract_count(Document.parse("<html><body><p>Sesja wygasła</p></body></html>"))

    def test_summary_without_numbers_is_malformed(self) -> None:
        doc = Document.parse('<div id="listaHasel"><span>brak haseł</span></div>')
        with pytest.raises(MalformedResponseError):
            extract_count(doc)

    def test_empty_listing_is_malformed(self) -> None:
        with pytest.raises(MalformedResponseError):
            extract_count(Document.parse('<div id="listaHasel">  </div>'))


# ---------------------------------------------------------------------------
# word-listing policy
# ---------------------------------------------------------------------------

class TestExtractWords:
    def test_extracts_entries_and_drops_trailing_navigation(self) -> None:
        words = extract_words(Document.parse(_LISTING_HTML))
        assert words == [
            WordRecord(id=101, text="ABAK"),
            WordRecord(id=102, text="ABDYKACYJA"),
            WordRecord(id=103, text="ABECADŁO"),
        ]

    def test_only_navigation_yields_nothing(self) -> None:
        doc = Document.parse('<div id="listaHasel"><span>0-0/0</span><div class="nawigacja"></div></div>')
        assert extract_words(doc) == []

    def test_entry_without_plain_anchor_raises(self) -> None:
        doc = Document.parse(
            '<div id="listaHasel"><div><a id="x" href="javascript: haslo(1)">A</a></div><div></div></div>'
        )
        with pytest.raises(MissingElementError):
            extract_words(doc)

    def test_anchor_without_entry_id_is_malformed(self) -> None:
        doc = Document.parse('<div id="listaHasel"><div><a href="/szukaj">A</a></div><div></div></div>')
        with pytest.raises(MalformedResponseError):
            extract_words(doc)

    def test_missing_listing_raises(self) -> None:
        with pytest.raises(MissingElementError):
            extract_words(Document.parse(_DEFINITION_HTML))


# ---------------------------------------------------------------------------
# definition policy
# ---------------------------------------------------------------------------

class TestExtractDefinition:
    def test_returns_inner_markup_on_one_line(self) -> None:
        body = extract_definition(Document.parse(_DEFINITION_HTML))
        assert body == "<b>ABAK</b> <i>m</i> deska do liczenia"
        assert "\n" not in body

    def test_missing_definition_raises(self) -> None:
        with pytest.raises(MissingElementError):
            extract_definition(Document.parse(_LISTING_HTML))

    def test_normalise_whitespace(self) -> None:
        assert normalise_whitespace("  a\n\n  b\r\nc  ") == "a b c"
        assert normalise_whitespace("one  line") == "one  line"

    def test_normalise_whitespace_removes_tabs(self) -> None:
        assert normalise_whitespace("a\tb \t c") == "a b c"

    def test_definition_with_tab_stays_one_field(self) -> None:
        doc = Document.parse('<div id="haslo"><b>ABAK</b>\tdeska</div>')
        body = extract_definition(doc)
        assert "\t" not in body
        assert body == "<b>ABAK</b> deska"
