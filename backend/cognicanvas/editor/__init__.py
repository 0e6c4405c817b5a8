"""Rich note content: structural fragments, the document model and highlights."""

from cognicanvas.editor.document import Document
from cognicanvas.editor.fragments import (
    Fragment,
    FragmentNotFound,
    InvalidFragment,
    new_fragment,
    sanitize_paste,
)
from cognicanvas.editor.highlight import HighlightNotFound, mark_text

__all__ = [
    "Document",
    "Fragment",
    "FragmentNotFound",
    "HighlightNotFound",
    "InvalidFragment",
    "mark_text",
    "new_fragment",
    "sanitize_paste",
]
