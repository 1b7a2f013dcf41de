# src/pipeline/html_output.py - v2
"""Normalize and sanity-check generated HTML."""

from __future__ import annotations

import re

# ```html ... ``` (or a bare ``` fence) wrapping the whole answer.
_FENCE_RE = re.compile(r"^```[\w-]*[ \t]*\r?\n(?P<body>.*?)\r?\n?```$", re.DOTALL)

# A fenced block anywhere in the answer, e.g. after a lead-in sentence.
_EMBEDDED_FENCE_RE = re.compile(
    r"^```[\w-]*[ \t]*\r?\n(?P<body>.*?)\r?\n```[ \t]*$", re.DOTALL | re.MULTILINE,
)

# An opening fence line on its own.
_OPEN_FENCE_RE = re.compile(r"^```[\w-]*[ \t]*$", re.MULTILINE)

_HTML_MARKERS: tuple[str, ...] = ("<html", "<!doctype html")


class InvalidOutputShape(Exception):
    """Raised when generated text does not look like an HTML document."""


def _has_html_marker(text: str) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in _HTML_MARKERS)


def strip_code_fences(text: str) -> str:
    """Extract the HTML from a fenced answer, then trim whitespace.

    Handles a fence wrapping the whole text, a fenced HTML block surrounded
    by prose, and an opening fence that is never closed (truncated answer).
    Unfenced text is returned trimmed.
    """
    text = text.strip()
    match = _FENCE_RE.match(text)
    if match:
        return match.group("body").strip()

    for block in _EMBEDDED_FENCE_RE.finditer(text):
        if _has_html_marker(block.group("body")):
            return block.group("body").strip()

    opening = _OPEN_FENCE_RE.search(text)
    if opening and "```" not in text[opening.end():]:
        rest = text[opening.end():].strip()
        if not rest or _has_html_marker(rest) or opening.start() == 0:
            return rest
    return text


def validate_html(text: str) -> None:
    """Check that text is non-empty and carries a top-level HTML marker.

    Raises:
        InvalidOutputShape: If the check fails.
    """
    if not text:
        raise InvalidOutputShape("Generated output is empty")
    if not _has_html_marker(text):
        preview = text[:80].replace("\n", " ")
        raise InvalidOutputShape(f"Generated output has no <html> element: {preview!r}")


def normalize_html(text: str, validate: bool = True) -> str:
    """Strip fences and whitespace; validate the result unless told not to."""
    html = strip_code_fences(text)
    if validate:
        validate_html(html)
    return html
