"""
Note content as a structured document.

The stored note content is an HTML string. Editing operations parse it into a
tree, act on fragments by id, and serialize back once at the end:

    doc = Document.from_html(note.content)
    doc.insert(new_fragment("code", code="print(1)", language="python"))
    note.content = doc.to_html()

Anything in the content that is not a fragment (paragraphs, inline markup,
highlights) is carried through untouched.
"""

import logging

from bs4 import BeautifulSoup, NavigableString, Tag

from cognicanvas.editor.fragments import (
    RESIZABLE,
    Fragment,
    FragmentNotFound,
    InvalidFragment,
    parse,
    render,
)

logger = logging.getLogger(__name__)


def _nodes(markup: str) -> list:
    return list(BeautifulSoup(markup, "html.parser").contents)


class Document:
    """Parsed note content."""

    def __init__(self, soup: BeautifulSoup):
        self._soup = soup

    @classmethod
    def from_html(cls, content: str | None) -> "Document":
        return cls(BeautifulSoup(content or "", "html.parser"))

    def to_html(self) -> str:
        return str(self._soup)

    def blocks(self) -> list:
        """Top-level nodes, ignoring whitespace-only text between them."""
        return [
            node
            for node in self._soup.contents
            if isinstance(node, Tag) or (isinstance(node, NavigableString) and node.strip())
        ]

    def fragments(self) -> list[Fragment]:
        """All well-formed fragments in document order. Malformed ones are skipped."""
        found = []
        for element in self._soup.find_all(attrs={"data-fragment": True}):
            try:
                found.append(parse(element))
            except InvalidFragment as e:
                logger.warning("Skipping malformed fragment element <%s>: %s", element.name, e)
        return found

    def _element(self, fragment_id: str) -> Tag:
        element = self._soup.find(attrs={"data-fragment": True, "data-fragment-id": fragment_id})
        if element is None:
            raise FragmentNotFound(f"Fragment {fragment_id} not found")
        return element

    def find(self, fragment_id: str) -> Fragment:
        return parse(self._element(fragment_id))

    def insert(self, fragment: Fragment, index: int | None = None) -> Fragment:
        """
        Insert a fragment before the top-level block at index, or append.

        Quotes are followed by an empty paragraph so the caret has somewhere
        to go after them.
        """
        markup = render(fragment)
        if fragment.kind == "quote":
            markup += "<p><br></p>"
        new_nodes = _nodes(markup)

        blocks = self.blocks()
        if index is None or index >= len(blocks):
            for node in new_nodes:
                self._soup.append(node)
        else:
            anchor = blocks[max(index, 0)]
            for node in new_nodes:
                anchor.insert_before(node)
        return fragment

    def remove(self, fragment_id: str) -> Fragment | None:
        """
        Remove a fragment. A quote is unwrapped into a plain paragraph that
        keeps its content; every other kind is dropped entirely.

        Malformed fragment elements are removed too; None is returned for them.
        """
        element = self._element(fragment_id)
        try:
            fragment = parse(element)
        except InvalidFragment:
            fragment = None

        if element.get("data-fragment") == "quote":
            paragraph = self._soup.new_tag("p")
            for child in list(element.contents):
                if isinstance(child, Tag) and child.name == "button":
                    continue
                paragraph.append(child.extract())
            element.replace_with(paragraph)
        else:
            element.decompose()
        return fragment

    def update(
        self,
        fragment_id: str,
        *,
        width: int | None = None,
        rotation: int | None = None,
    ) -> Fragment:
        """Resize (width in px, height auto) or rotate an image; drawings only resize."""
        element = self._element(fragment_id)
        fragment = parse(element)

        if fragment.kind not in RESIZABLE:
            raise InvalidFragment(f"A {fragment.kind} fragment cannot be resized or rotated")
        if rotation is not None and fragment.kind != "image":
            raise InvalidFragment("Only images can be rotated")

        if width is not None:
            fragment.payload["width"] = width
        if rotation is not None:
            fragment.payload["rotation"] = rotation % 360

        replacement = _nodes(render(fragment))
        for node in replacement:
            element.insert_before(node)
        element.decompose()
        return fragment
