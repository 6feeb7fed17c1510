"""Message content sanitizing."""

import re

import bleach

ALLOWED_TAGS = frozenset({"b", "i", "em", "strong", "br"})
DEFAULT_MAX_LENGTH = 2000

# C0 controls except tab and newline, plus DEL and C1 controls.
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")


def sanitize_content(content: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Clean user supplied message content.

    Control characters are removed, markup is reduced to a few inline
    formatting tags without attributes, surrounding whitespace is trimmed
    and the result is capped at ``max_length`` characters. Stripped
    block-level tags such as ``<div>`` leave a line break behind.

    Returns:
        Sanitized content, possibly empty
    """
    if not content:
        return ""
    cleaned = CONTROL_CHARS.sub("", content)
    cleaned = bleach.clean(cleaned, tags=ALLOWED_TAGS, attributes={}, strip=True)
    return cleaned.strip()[:max_length]
