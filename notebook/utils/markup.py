"""Plain-text helpers for serialized editor markup"""
import html
import re

import bleach

_WHITESPACE = re.compile(r"\s+")
# Block-level closers become spaces so words from adjacent paragraphs do not merge
_BLOCK_BREAK = re.compile(r"</(p|div|li|h[1-6]|blockquote|pre|tr)>|<br\s*/?>", re.IGNORECASE)


def markup_to_plain_text(markup: str) -> str:
    """
    Strip every tag from editor markup and return readable text.

    Example:
        "<h1>Plan</h1><p>Ship &amp; test</p>" -> "Plan Ship & test"
    """
    if not markup:
        return ""

    spaced = _BLOCK_BREAK.sub(" ", markup)
    stripped = bleach.clean(spaced, tags=set(), attributes={}, strip=True, strip_comments=True)
    text = html.unescape(stripped)
    return _WHITESPACE.sub(" ", text).strip()
