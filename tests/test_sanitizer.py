"""Tests for the generated-text sanitizer."""
from __future__ import annotations

import pytest

from travelplan.core.sanitizer import sanitize

SAMPLES = [
    "**Bold** #Heading",
    "| Day | Cost |\n|-----|------|\n| 1 | 500 |",
    "• First\n● Second\n▪ Third",
    "Tabs\tand\r\ncarriage returns",
    "  lots    of     spaces  ",
    "`code` and ### headings\n\nNew paragraph",
    "Already clean text.\nSecond line.",
    "",
]


def test_removes_markdown_symbols() -> None:
    cleaned = sanitize("**Bold** #Heading")
    assert "*" not in cleaned
    assert "#" not in cleaned
    assert cleaned == "Bold Heading"


def test_removes_table_pipes_and_backticks() -> None:
    assert sanitize("| a | `b` |") == "a b"


def test_removes_bullet_glyphs() -> None:
    assert sanitize("• one\n● two\n▪ three") == "one\n two\n three"


def test_preserves_newlines() -> None:
    assert sanitize("Day 1: Beach\n\nDay 2: Forts") == "Day 1: Beach\n\nDay 2: Forts"


def test_strips_tabs_and_carriage_returns() -> None:
    assert sanitize("Morning:\tswim\r\nEvening: dinner") == "Morning:swim\nEvening: dinner"


def test_collapses_space_runs_and_trims() -> None:
    assert sanitize("   too     many   spaces   ") == "too many spaces"


def test_empty_text_is_returned_unchanged() -> None:
    assert sanitize("") == ""


@pytest.mark.parametrize("text", SAMPLES)
def test_sanitize_is_idempotent(text: str) -> None:
    once = sanitize(text)
    assert sanitize(once) == once


def test_clean_text_is_untouched() -> None:
    text = "Already clean text.\nSecond line."
    assert sanitize(text) == text
