"""Text sanitization utilities."""

import re

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def sanitize_text(text: str | None, max_length: int = 500) -> str | None:
    """
    Strip control characters from untrusted provider text and cap its length.

    Apply to: names, headlines, publishers, sector/industry, descriptions.
    """
    if text is None:
        return None
    text = _CONTROL_CHARS.sub("", text)
    if len(text) > max_length:
        text = text[:max_length] + "..."
    return text.strip()


def excerpt(text: str | None, length: int = 150) -> str:
    """
    Leading excerpt of a long description, always followed by "...".

    Returns an empty string when there is no text.
    """
    if not text:
        return ""
    return _CONTROL_CHARS.sub("", text)[:length] + "..."
