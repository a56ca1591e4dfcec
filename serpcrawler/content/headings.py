#!/usr/bin/env python3
"""
Heading extraction module.

This module extracts the document outline (h1-h6 elements or ATX Markdown
headings) from raw content. Extraction runs on the original document,
before any destructive cleaning.
"""

import html
import re
from dataclasses import dataclass

_HTML_HEADING = re.compile(r"<(h[1-6])\b[^>]*>(.*?)</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")
_MARKDOWN_HEADING = re.compile(r"^[ \t]{0,3}(#{1,6})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$")
_FENCE = re.compile(r"^[ \t]{0,3}(```|~~~)")


@dataclass(frozen=True)
class Heading:
    """A heading with its level (1-6) and lightly normalized text."""
    level: int
    text: str

    def __post_init__(self):
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be between 1 and 6, got {self.level}")

    @property
    def tag(self):
        return f"h{self.level}"

    def to_dict(self):
        return {"tag": self.tag, "text": self.text}


def extract_html_headings(document):
    """
    Extract h1-h6 elements in document order.

    Nested markup inside a heading is removed, entities are decoded and
    whitespace is collapsed. Headings left empty are skipped.

    Args:
        document: Raw HTML

    Returns:
        list: Heading instances
    """
    headings = []
    for match in _HTML_HEADING.finditer(document):
        text = html.unescape(_TAG.sub("", match.group(2)))
        text = _WHITESPACE.sub(" ", text).strip()
        if text:
            headings.append(Heading(int(match.group(1)[1]), text))
    return headings


def iter_markdown_headings(document):
    """
    Yield (level, raw text, line index) for each ATX heading line.

    Lines inside fenced code blocks are ignored.
    """
    in_fence = None
    for index, line in enumerate(document.splitlines()):
        fence = _FENCE.match(line)
        if fence:
            if in_fence is None:
                in_fence = fence.group(1)
            elif fence.group(1) == in_fence:
                in_fence = None
            continue
        if in_fence is not None:
            continue

        match = _MARKDOWN_HEADING.match(line)
        if match and match.group(2).strip():
            yield len(match.group(1)), match.group(2).strip(), index


def extract_markdown_headings(document, clean_text=None):
    """
    Extract ATX headings (# through ######) in document order.

    Args:
        document: Raw Markdown
        clean_text: Optional callable used to clean the heading text, so that
            emphasis, links and inline code are normalized

    Returns:
        list: Heading instances
    """
    headings = []
    for level, text, _ in iter_markdown_headings(document):
        if clean_text is not None:
            text = clean_text(text)
        if text:
            headings.append(Heading(level, text))
    return headings
