"""
Structural fragments of a note's content.

A fragment is a typed block (heading, list, quote, code, image, drawing, pdf)
that is rendered into note HTML with two data attributes:

    data-fragment     the kind
    data-fragment-id  a stable id

Control buttons inside a fragment carry data-action ("delete", "resize",
"rotate") and the same data-fragment-id, so a client can handle every control
with one delegated listener on the editor container.

render() and parse() are inverses for everything a fragment carries.
"""

import html
import re
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from bs4 import Tag

KINDS = ("heading", "list", "quote", "code", "image", "drawing", "pdf")
RESIZABLE = ("image", "drawing")

_ALLOWED_SRC = re.compile(r"^(data:image/[a-zA-Z0-9.+-]+[;,]|https?://|/)")
_HEADING_TAG = re.compile(r"^h([1-6])$")

_DELETE_BTN = "p-1 rounded-full bg-red-500 text-white"


class InvalidFragment(ValueError):
    """Fragment kind or payload is not acceptable."""


class FragmentNotFound(LookupError):
    """No fragment with the given id exists in the document."""


@dataclass
class Fragment:
    """A typed block with its payload."""

    kind: str
    payload: dict[str, Any]
    id: str = field(default_factory=lambda: uuid4().hex)


def _require(payload: dict[str, Any], key: str) -> Any:
    if payload.get(key) is None:
        raise InvalidFragment(f"'{key}' is required")
    return payload[key]


def _check_src(src: str) -> str:
    if not _ALLOWED_SRC.match(src):
        raise InvalidFragment("Unsupported image source")
    return src


def _normalize(kind: str, payload: dict[str, Any]) -> dict[str, Any]:
    if kind == "heading":
        level = int(payload.get("level") or 2)
        if not 1 <= level <= 3:
            raise InvalidFragment("Heading level must be 1-3")
        return {"text": str(_require(payload, "text")), "level": level}
    if kind == "list":
        items = [str(item) for item in _require(payload, "items")]
        if not items:
            raise InvalidFragment("A list needs at least one item")
        return {"items": items, "ordered": bool(payload.get("ordered", False))}
    if kind == "quote":
        return {"text": str(payload.get("text") or "Your quote here...")}
    if kind == "code":
        return {
            "code": str(_require(payload, "code")),
            "language": payload.get("language") or None,
            "title": payload.get("title") or None,
        }
    if kind == "image":
        width = payload.get("width")
        return {
            "src": _check_src(str(_require(payload, "src"))),
            "alt": str(payload.get("alt") or "Inserted image"),
            "width": int(width) if width else None,
            "rotation": int(payload.get("rotation") or 0) % 360,
        }
    if kind == "drawing":
        src = str(_require(payload, "src"))
        if not src.startswith("data:image/"):
            raise InvalidFragment("Drawing must be an image data URL")
        width = payload.get("width")
        return {"src": src, "width": int(width) if width else None}
    if kind == "pdf":
        size = int(_require(payload, "size_bytes"))
        if size < 0:
            raise InvalidFragment("size_bytes must be non-negative")
        return {"filename": str(_require(payload, "filename")), "size_bytes": size}
    raise InvalidFragment(f"Unknown fragment kind '{kind}'")


def new_fragment(kind: str, **payload: Any) -> Fragment:
    """Validate a payload and create a fragment with a fresh id."""
    return Fragment(kind=kind, payload=_normalize(kind, payload))


# =============================================================================
# RENDERING
# =============================================================================


def _esc(value: Any) -> str:
    return html.escape(str(value), quote=True)


def _button(action: str, fragment_id: str, css: str, title: str, glyph: str) -> str:
    return (
        f'<button type="button" class="{action}-btn {css}" title="{_esc(title)}" '
        f'contenteditable="false" data-action="{action}" data-fragment-id="{fragment_id}">'
        f"{glyph}</button>"
    )


def _img_style(width: int | None, rotation: int = 0) -> str:
    style = []
    if width:
        style.append(f"width: {width}px; height: auto;")
    if rotation:
        style.append(f"transform: rotate({rotation}deg);")
    return " ".join(style)


def render(fragment: Fragment) -> str:
    """Render a fragment into an HTML string."""
    fid = _esc(fragment.id)
    p = fragment.payload
    attrs = f'data-fragment="{fragment.kind}" data-fragment-id="{fid}"'

    if fragment.kind == "heading":
        level = p["level"]
        return f"<h{level} {attrs}>{_esc(p['text'])}</h{level}>"

    if fragment.kind == "list":
        tag = "ol" if p["ordered"] else "ul"
        css = "list-decimal" if p["ordered"] else "list-disc"
        items = "".join(f"<li>{_esc(item)}</li>" for item in p["items"])
        return f'<{tag} class="{css} pl-6 my-2" {attrs}>{items}</{tag}>'

    if fragment.kind == "quote":
        return (
            f'<blockquote class="border-l-4 border-slate-300 pl-4 py-2 my-4 italic relative group" {attrs}>'
            f"{_esc(p['text'])}"
            f"{_button('delete', fid, 'absolute top-2 right-2 ' + _DELETE_BTN, 'Remove quote', '×')}"
            f"</blockquote>"
        )

    if fragment.kind == "code":
        title = f'<h4 class="code-title text-sm font-medium mb-2">{_esc(p["title"])}</h4>' if p["title"] else ""
        language = (
            f'<div class="code-language text-xs text-slate-500 mb-2 font-mono">{_esc(p["language"])}</div>'
            if p["language"]
            else ""
        )
        return (
            f'<div class="code-block my-4 p-4 bg-slate-100 rounded-lg border relative group" '
            f'contenteditable="false" {attrs}>'
            f"{_button('delete', fid, 'absolute top-2 right-2 ' + _DELETE_BTN, 'Delete code block', '×')}"
            f"{title}{language}"
            f'<pre class="text-sm font-mono whitespace-pre-wrap overflow-x-auto"><code>{_esc(p["code"])}</code></pre>'
            f"</div>"
        )

    if fragment.kind == "image":
        width_attr = f' data-width="{p["width"]}"' if p["width"] else ""
        return (
            f'<div class="image-container my-4 relative group" contenteditable="false" {attrs}>'
            f'<div class="image-controls absolute top-2 right-2 flex gap-1">'
            f"{_button('delete', fid, _DELETE_BTN, 'Delete image', '×')}"
            f"{_button('resize', fid, 'p-1 rounded-full bg-blue-500 text-white', 'Resize image', '⤢')}"
            f"{_button('rotate', fid, 'p-1 rounded-full bg-green-500 text-white', 'Rotate image', '↻')}"
            f"</div>"
            f'<img src="{_esc(p["src"])}" alt="{_esc(p["alt"])}" class="max-w-full h-auto rounded-lg my-4"'
            f' style="{_img_style(p["width"], p["rotation"])}"{width_attr} data-rotation="{p["rotation"]}" />'
            f"</div>"
        )

    if fragment.kind == "drawing":
        width_attr = f' data-width="{p["width"]}"' if p["width"] else ""
        return (
            f'<div class="drawing-container my-4 relative group" contenteditable="false" {attrs}>'
            f'<div class="drawing-controls absolute top-2 right-2 flex gap-1">'
            f"{_button('delete', fid, _DELETE_BTN, 'Delete drawing', '×')}"
            f"{_button('resize', fid, 'p-1 rounded-full bg-blue-500 text-white', 'Resize drawing', '⤢')}"
            f"</div>"
            f'<img src="{_esc(p["src"])}" alt="Drawing" class="max-w-full h-auto rounded-lg my-4 border"'
            f' style="{_img_style(p["width"])}"{width_attr} />'
            f"</div>"
        )

    if fragment.kind == "pdf":
        size_kb = round(p["size_bytes"] / 1024)
        return (
            f'<div class="pdf-container my-4 p-4 bg-slate-100 rounded-lg border relative group" '
            f'contenteditable="false" {attrs} data-filename="{_esc(p["filename"])}" data-size="{p["size_bytes"]}">'
            f'<div class="pdf-controls absolute top-2 right-2">'
            f"{_button('delete', fid, _DELETE_BTN, 'Delete PDF', '×')}"
            f"</div>"
            f'<span class="pdf-name font-medium">{_esc(p["filename"])}</span>'
            f'<p class="text-sm text-slate-600">PDF attachment - {size_kb} KB</p>'
            f"</div>"
        )

    raise InvalidFragment(f"Unknown fragment kind '{fragment.kind}'")


# =============================================================================
# PARSING
# =============================================================================


def _own_text(element: Tag) -> str:
    """Text of an element, ignoring any embedded control buttons."""
    return "".join(
        node.get_text() if isinstance(node, Tag) else str(node)
        for node in element.children
        if not (isinstance(node, Tag) and node.name == "button")
    )


def _int_attr(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidFragment(f"Expected a number, got {value!r}") from None


def parse(element: Tag) -> Fragment:
    """Rebuild a Fragment from its rendered element.

    Note content is saved verbatim by clients, so any attribute may be
    malformed; such elements raise InvalidFragment.
    """
    kind = element.get("data-fragment")
    fragment_id = element.get("data-fragment-id")
    if kind not in KINDS or not fragment_id:
        raise InvalidFragment("Element is not a fragment")

    if kind == "heading":
        match = _HEADING_TAG.match(element.name)
        if match is None:
            raise InvalidFragment(f"<{element.name}> is not a heading")
        payload = {"text": element.get_text(), "level": int(match.group(1))}
    elif kind == "list":
        payload = {
            "items": [li.get_text() for li in element.find_all("li", recursive=False)],
            "ordered": element.name == "ol",
        }
    elif kind == "quote":
        payload = {"text": _own_text(element)}
    elif kind == "code":
        code = element.find("code")
        title = element.find(class_="code-title")
        language = element.find(class_="code-language")
        payload = {
            "code": code.get_text() if code else "",
            "language": language.get_text() if language else None,
            "title": title.get_text() if title else None,
        }
    elif kind in RESIZABLE:
        img = element.find("img")
        if img is None:
            raise InvalidFragment("Image fragment has no <img>")
        width = img.get("data-width")
        payload = {"src": img.get("src", ""), "width": _int_attr(width) if width else None}
        if kind == "image":
            payload["alt"] = img.get("alt", "Inserted image")
            payload["rotation"] = _int_attr(img.get("data-rotation") or 0)
    else:
        payload = {
            "filename": element.get("data-filename", ""),
            "size_bytes": _int_attr(element.get("data-size") or 0),
        }

    return Fragment(kind=kind, payload=payload, id=fragment_id)


def sanitize_paste(text: str) -> str:
    """Turn pasted plain text into safe inline HTML."""
    return html.escape(text).replace("\r\n", "\n").replace("\n", "<br>")
