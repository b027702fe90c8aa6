"""
SRM Guide - Text Utilities
===========================
Small stateless helpers shared by the chat, search and record-store
layers: whitespace normalisation, snippet truncation and
case-insensitive containment.
"""

from __future__ import annotations

import re
import unicodedata


# ── Zero-width / formatting characters ────────────────────────────────
# Stripped before a query is matched so pasted text with hidden marks still hits.
_INVISIBLE_RE = re.compile(r"[\ufeff\u200b\u200c\u200d\u200e\u200f\u00ad\u2060]")
_WHITESPACE_RE = re.compile(r"\s+")

SNIPPET_LENGTH = 150
_ELLIPSIS = "..."


def normalise_query(text: str) -> str:
    """
    Canonicalise free text typed by a student.

    Steps:
        1. Unicode NFC normalisation.
        2. Strip zero-width and soft-hyphen characters.
        3. Collapse whitespace runs to one space and trim.
    """
    text = unicodedata.normalize("NFC", text)
    text = _INVISIBLE_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def is_blank(text: str | None) -> bool:
    """Return True for ``None``, empty, or whitespace-only input."""
    return text is None or not text.strip()


def contains_ci(haystack: str | None, needle: str) -> bool:
    """Case-insensitive substring test; ``None`` never matches."""
    if haystack is None:
        return False
    return needle.casefold() in haystack.casefold()


def truncate_snippet(text: str, length: int = SNIPPET_LENGTH) -> str:
    """
    Cut *text* to *length* characters and append ``"..."``.

    The ellipsis is always appended, matching how question previews are
    rendered on the community board.
    """
    return text[:length] + _ELLIPSIS
