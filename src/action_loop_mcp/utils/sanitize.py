"""Text cleaning for chip values and titles taken from caller records."""

import re

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_WHITESPACE = re.compile(r"\s+")


def clean_label(text: str | None, max_length: int = 80) -> str:
    """
    Clean an untrusted label before it goes into a chip.

    Removes control characters, collapses runs of whitespace and truncates
    to max_length (with a trailing ellipsis). None becomes an empty string.

    Args:
        text: Text to clean (may be None)
        max_length: Maximum length before truncation

    Returns:
        Cleaned single-line text
    """
    if text is None:
        return ""

    text = _CONTROL_CHARS.sub(" ", text)
    text = _WHITESPACE.sub(" ", text).strip()

    if len(text) > max_length:
        text = text[:max_length].rstrip() + "..."

    return text


def capitalize_first(text: str) -> str:
    """Uppercase the first character only ("buy" -> "Buy", "iPhone" stays)."""
    if not text:
        return text
    return text[0].upper() + text[1:]
