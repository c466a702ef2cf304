"""Text canonicalisation used by rule matching and listing extraction."""

import re
from typing import Any

_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: Any) -> str:
    """Lower-case text, treating None as an empty string."""
    if text is None:
        return ""
    return str(text).lower()


def collapse_whitespace(text: Any) -> str:
    """Collapse whitespace runs to single spaces and trim, keeping case."""
    if text is None:
        return ""
    return _WHITESPACE_RE.sub(" ", str(text)).strip()


def normalize_whitespace(text: Any) -> str:
    """Lower-case, collapse whitespace runs and trim."""
    return collapse_whitespace(normalize(text))
