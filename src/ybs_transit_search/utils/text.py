"""Text processing utilities for bilingual (English/Myanmar) stop names."""

import re

_WHITESPACE_RE = re.compile(r"\s+")
_PUNCTUATION_RE = re.compile(r"[(),.\-/]")
# Myanmar block plus Extended-A and Extended-B
_MYANMAR_RE = re.compile(r"[\u1000-\u109f\ua9e0-\ua9ff\uaa60-\uaa7f]")


def normalize_name(text: str | None) -> str:
    """Normalize a stop name for index keys and queries.

    Lowercases, trims, collapses whitespace runs to a single space and drops
    the punctuation characters ``( ) , . - /``. The same function is applied
    to indexed names and to user queries so both sides compare equal.

    Args:
        text: Raw name or query, may be None

    Returns:
        Normalized text, empty string for empty input
    """
    if not text:
        return ""

    text = _WHITESPACE_RE.sub(" ", text.lower().strip())
    text = _PUNCTUATION_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def is_myanmar_text(text: str) -> bool:
    """Check if text is mostly written in Myanmar script.

    Args:
        text: Input text to check

    Returns:
        True if more than half of the letters are Myanmar characters
    """
    if not text:
        return False

    letters = [c for c in text if not c.isspace() and not c.isdigit()]
    if not letters:
        return False

    myanmar_chars = len(_MYANMAR_RE.findall(text))
    return myanmar_chars / len(letters) > 0.5
