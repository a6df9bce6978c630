"""Cleanup of generated free text before it reaches the renderer."""
from __future__ import annotations

import re

_FORMATTING_SYMBOLS = re.compile(r"[*#`|]")
_BULLET_GLYPHS = re.compile(r"[•●▪]")
_TABS_AND_CR = re.compile(r"[\t\r]")
_SPACE_RUNS = re.compile(r" {2,}")


def sanitize(text: str) -> str:
    """Strip markdown/table symbols and bullet glyphs, keeping line breaks.

    Applying it twice gives the same result as applying it once.
    """

    if not text:
        return text
    text = _FORMATTING_SYMBOLS.sub("", text)
    text = _BULLET_GLYPHS.sub("", text)
    text = _TABS_AND_CR.sub("", text)
    text = _SPACE_RUNS.sub(" ", text)
    return text.strip()
