"""Highlighting selected text inside note markup."""

import pytest
from bs4 import BeautifulSoup

from cognicanvas.editor import HighlightNotFound, mark_text


def _marks(html: str) -> list:
    return BeautifulSoup(html, "html.parser").find_all("mark")


def test_single_text_node():
    html = mark_text("<p>The limit exists here</p>", "limit exists", snippet_id="s1")

    marks = _marks(html)
    assert len(marks) == 1
    assert marks[0].get_text() == "limit exists"
    assert marks[0]["data-snippet-id"] == "s1"
    assert BeautifulSoup(html, "html.parser").get_text() == "The limit exists here"


def test_selection_spanning_inline_markup():
    html = mark_text("<p>The <b>limit</b> exists here</p>", "limit exists")

    marks = _marks(html)
    assert [m.get_text() for m in marks] == ["limit", " exists"]
    assert marks[0].parent.name == "b"
    assert BeautifulSoup(html, "html.parser").get_text() == "The limit exists here"


def test_selection_spanning_paragraphs():
    html = mark_text("<p>end of one</p><p>start of two</p>", "onestart")
    assert [m.get_text() for m in _marks(html)] == ["one", "start"]


def test_entities_match_decoded_text():
    html = mark_text("<p>a &amp; b</p>", "a & b")

    assert _marks(html)[0].get_text() == "a & b"
    assert "a &amp; b" in html


def test_occurrence_selects_later_match():
    html = mark_text("<p>x y x</p>", "x", occurrence=1)

    assert html.startswith("<p>x y <mark")


def test_non_editable_fragments_are_skipped():
    content = (
        '<div contenteditable="false" data-fragment="code"><pre><code>limit</code></pre></div>'
        "<p>limit</p>"
    )

    html = mark_text(content, "limit")

    mark = _marks(html)[0]
    assert mark.parent.name == "p"


def test_existing_highlights_are_not_searched_again():
    once = mark_text("<p>limit and limit</p>", "limit")
    twice = mark_text(once, "limit")

    assert len(_marks(twice)) == 2
    assert twice.endswith("and <mark class=\"important-highlight bg-yellow-200 dark:bg-yellow-800 px-1 rounded\">limit</mark></p>")


def test_whitespace_is_exact():
    with pytest.raises(HighlightNotFound):
        mark_text("<p>limit exists</p>", "limit  exists")


def test_missing_occurrence():
    with pytest.raises(HighlightNotFound):
        mark_text("<p>x</p>", "x", occurrence=1)
