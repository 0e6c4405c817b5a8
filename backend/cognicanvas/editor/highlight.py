"""
Marking important passages inside note content.

The selected text is located in the concatenated editable text of the note
and every text node it overlaps gets its own <mark>. A selection that spans
bold text and plain text therefore becomes two adjacent marks rather than a
mark that would need to cross element boundaries.
"""

from bs4 import BeautifulSoup, NavigableString, Tag

HIGHLIGHT_CLASS = "important-highlight bg-yellow-200 dark:bg-yellow-800 px-1 rounded"

_SKIP_TAGS = {"script", "style", "button", "code", "pre"}


class HighlightNotFound(LookupError):
    """The text does not occur in the editable part of the content."""


def _is_editable(node: NavigableString) -> bool:
    for parent in node.parents:
        if not isinstance(parent, Tag) or parent.name == "[document]":
            continue
        if parent.name in _SKIP_TAGS:
            return False
        if parent.get("contenteditable") == "false":
            return False
        if parent.name == "mark" and "important-highlight" in (parent.get("class") or []):
            return False
    return True


def _text_nodes(soup: BeautifulSoup) -> list[NavigableString]:
    # type() check drops Comment, CData, Doctype and friends
    return [
        node
        for node in soup.find_all(string=True)
        if type(node) is NavigableString and _is_editable(node)
    ]


def _find_occurrence(haystack: str, needle: str, occurrence: int) -> int:
    start = -1
    position = 0
    for _ in range(occurrence + 1):
        start = haystack.find(needle, position)
        if start == -1:
            return -1
        position = start + len(needle)
    return start


def _wrap(soup: BeautifulSoup, node: NavigableString, lo: int, hi: int, snippet_id: str | None):
    text = str(node)
    attrs = {"class": HIGHLIGHT_CLASS}
    if snippet_id:
        attrs["data-snippet-id"] = snippet_id
    mark = soup.new_tag("mark", attrs=attrs)
    mark.string = text[lo:hi]

    if text[:lo]:
        node.insert_before(NavigableString(text[:lo]))
    node.insert_before(mark)
    if text[hi:]:
        node.insert_before(NavigableString(text[hi:]))
    node.extract()


def mark_text(
    content: str,
    text: str,
    occurrence: int = 0,
    snippet_id: str | None = None,
) -> str:
    """
    Wrap the occurrence-th match of text in highlight marks and return the new HTML.

    Matching is exact (whitespace included) against decoded text, so
    "a &amp; b" in the markup matches the selection "a & b". Text inside
    non-editable fragments, code, and existing highlights is not searched.

    Raises HighlightNotFound if there is no such occurrence.
    """
    if not text:
        raise HighlightNotFound("Nothing to highlight")

    soup = BeautifulSoup(content or "", "html.parser")
    spans = []
    position = 0
    for node in _text_nodes(soup):
        length = len(str(node))
        spans.append((node, position, position + length))
        position += length

    full_text = "".join(str(node) for node, _, _ in spans)
    start = _find_occurrence(full_text, text, occurrence)
    if start == -1:
        raise HighlightNotFound(f"'{text}' not found in note")
    end = start + len(text)

    for node, node_start, node_end in spans:
        lo = max(node_start, start)
        hi = min(node_end, end)
        if lo < hi:
            _wrap(soup, node, lo - node_start, hi - node_start, snippet_id)

    return str(soup)
