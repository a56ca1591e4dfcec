#!/usr/bin/env python3
"""
HTML stripping module.

This module contains the HtmlStripper class that removes scripts, styles,
media, forms, comments and boilerplate containers from HTML and reduces the
remaining markup to bare tags. Work is bounded by a ProcessingBudget: large
documents are processed in chunks and, once the time budget runs out, the
text processed so far is returned instead of raising.
"""

import html
import logging
import re
import time

from bs4 import BeautifulSoup, SoupStrainer

from ..core.budget import ProcessingBudget
from . import markup
from .filter import ContentFilter

logger = logging.getLogger(__name__)

MEDIA_ELEMENTS = [
    "img", "svg", "path", "symbol", "picture", "source", "video", "audio",
    "iframe", "canvas", "noscript", "object", "embed",
]

FORM_ELEMENTS = [
    "form", "fieldset", "select", "datalist", "option", "textarea", "button", "input",
]

BOILERPLATE_CONTAINERS = ["div", "section", "aside", "nav", "header", "footer", "ul"]

FALLBACK_ELEMENTS = ["p", "li", "h1", "h2", "h3", "h4", "h5", "h6"]

# Characters parsed at a time by the fallback, between deadline checks
FALLBACK_CHUNK_SIZE = 100_000

_SCRIPT = re.compile(r"<script\b[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_STYLE = re.compile(r"<style\b[^>]*>.*?</style\s*>", re.IGNORECASE | re.DOTALL)
_WHITESPACE_RUN = re.compile(r"\s{2,}")


def _remove_head(text):
    return markup.remove_elements(text, "head")


class HtmlStripper:
    """
    Remove non-content markup from HTML.

    An instance holds only configuration; each call to strip() starts a new
    Deadline, so a single stripper may be shared between threads. The
    timed_out attribute reports whether the most recent call on this
    instance ran out of time.
    """

    def __init__(self, budget=None, content_filter=None, strip_forms=True,
                 remove_boilerplate=True, clock=time.monotonic):
        """
        Initialize an HtmlStripper instance.

        Args:
            budget: ProcessingBudget bounding time and chunk size
            content_filter: ContentFilter deciding which containers are boilerplate
            strip_forms: Also remove forms and form controls
            remove_boilerplate: Remove containers whose class names match the filter
            clock: Monotonic clock, injectable for tests
        """
        self.budget = budget or ProcessingBudget()
        self.content_filter = content_filter or ContentFilter()
        self.strip_forms = strip_forms
        self.remove_boilerplate = remove_boilerplate
        self.clock = clock
        self.timed_out = False

    @property
    def removable_elements(self):
        if self.strip_forms:
            return MEDIA_ELEMENTS + FORM_ELEMENTS
        return list(MEDIA_ELEMENTS)

    def strip(self, document):
        """
        Strip an HTML document.

        Args:
            document: Raw HTML

        Returns:
            str: Simplified markup with bare tags and collapsed whitespace
        """
        deadline = self.budget.start(clock=self.clock)

        if len(document) > self.budget.max_chunk_size * 2:
            result = self._strip_large(document, deadline)
        else:
            result = self._strip_document(document, deadline)

        self.timed_out = deadline.tripped
        if self.timed_out:
            logger.warning(
                "Processing budget of %.1fs exhausted, returning partially cleaned content",
                self.budget.max_processing_time,
            )
        return result

    def _strip_document(self, document, deadline):
        text = markup.safe_sub(markup.COMMENT, "", document, name="comments")
        text = markup.safe_sub(_SCRIPT, "", text, name="scripts")
        text = markup.safe_sub(_STYLE, "", text, name="styles")
        text = markup.apply_stage("remove <head>", _remove_head, text)

        text = self._remove_non_content(text, deadline)
        if not deadline.expired():
            text = self._remove_boilerplate(text, deadline)
        if not deadline.expired():
            text = markup.apply_stage("attributes", markup.strip_attributes, text)
        text = markup.remove_empty_pairs(text, deadline=deadline)

        text = markup.safe_sub(_WHITESPACE_RUN, " ", text, name="whitespace").strip()
        return self._fallback_extract(text, deadline)

    def _strip_large(self, document, deadline):
        # Chunk boundaries may fall inside a comment
        text = markup.safe_sub(markup.COMMENT, "", document, name="comments")
        text = markup.safe_sub(_SCRIPT, "", text, name="scripts")
        text = markup.safe_sub(_STYLE, "", text, name="styles")
        text = markup.apply_stage("remove <head>", _remove_head, text)

        chunks = markup.split_into_chunks(text, self.budget.max_chunk_size)
        logger.info("Processing %d characters of HTML in %d chunks", len(text), len(chunks))

        processed = []
        for chunk in chunks:
            if deadline.expired():
                processed.append(chunk)
                continue
            processed.append(self._strip_chunk(chunk, deadline))

        result = "".join(processed)
        result = markup.safe_sub(_WHITESPACE_RUN, " ", result, name="whitespace").strip()
        return self._fallback_extract(result, deadline)

    def _strip_chunk(self, chunk, deadline):
        chunk = self._remove_non_content(chunk, deadline)
        if not deadline.expired():
            chunk = self._remove_boilerplate(chunk, deadline)
        return markup.apply_stage("attributes", markup.strip_attributes, chunk)

    def _remove_non_content(self, text, deadline):
        for tag in self.removable_elements:
            if deadline.expired():
                break
            text = markup.apply_stage(
                f"remove <{tag}>", lambda value, tag=tag: markup.remove_elements(value, tag), text
            )
        return text

    def _remove_boilerplate(self, text, deadline):
        if not self.remove_boilerplate or self.content_filter.class_pattern is None:
            return text

        for tag in BOILERPLATE_CONTAINERS:
            if deadline.expired():
                break
            text = markup.apply_stage(
                f"boilerplate <{tag}>",
                lambda value, tag=tag: markup.remove_elements(
                    value, tag, predicate=self.content_filter.is_boilerplate
                ),
                text,
            )
        return text

    def _fallback_extract(self, text, deadline):
        """
        Keep only paragraphs, headings and list items of an oversized document.

        The text is parsed FALLBACK_CHUNK_SIZE characters at a time. Once the
        deadline expires, the pieces not yet parsed are appended unchanged.
        """
        if len(text) <= self.budget.fallback_threshold or deadline.expired():
            return text

        chunks = markup.split_into_chunks(text, min(self.budget.max_chunk_size, FALLBACK_CHUNK_SIZE))
        logger.info("Document still %d characters after stripping, keeping text blocks only",
                    len(text))

        blocks = []
        for index, chunk in enumerate(chunks):
            chunk_blocks = None if deadline.expired() else self._text_blocks(chunk, deadline)
            if chunk_blocks is None:
                logger.info("Text block extraction stopped after %d of %d pieces", index, len(chunks))
                return " ".join(blocks + ["".join(chunks[index:])])
            blocks.extend(chunk_blocks)

        if not blocks:
            return text
        return " ".join(blocks)

    def _text_blocks(self, chunk, deadline):
        """Return the text blocks of one piece, or None if the deadline expired first."""
        soup = BeautifulSoup(chunk, "html.parser", parse_only=SoupStrainer(FALLBACK_ELEMENTS))

        blocks = []
        for element in soup.find_all(FALLBACK_ELEMENTS):
            if deadline.expired():
                return None
            # Nested matches are covered by their outermost ancestor
            if element.find_parent(FALLBACK_ELEMENTS) is not None:
                continue
            content = html.escape(element.get_text(" ", strip=True), quote=False)
            if content:
                blocks.append(f"<{element.name}>{content}</{element.name}>")
        return blocks
