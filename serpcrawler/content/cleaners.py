#!/usr/bin/env python3
"""
Content cleaner module.

This module ties the strippers, the heading extractor and the normalizer
into two cleaners, one per input format, and provides create_cleaner() to
pick the right one. Both cleaners expose the same two operations:
clean() and extract_headings().
"""

import time
from dataclasses import dataclass, field, replace
from enum import Enum

from ..core.budget import ProcessingBudget
from ..core.errors import InvalidInput, UnsupportedFormat
from . import markup
from .filter import ContentFilter
from .headings import extract_html_headings, extract_markdown_headings
from .html_stripper import HtmlStripper
from .markdown_stripper import LINK_POLICIES, LINK_POLICY_DROP, MarkdownStripper
from .normalizer import TextNormalizer


class DocumentFormat(Enum):
    HTML = "html"
    MARKDOWN = "markdown"

    @classmethod
    def from_value(cls, value):
        """
        Resolve a format from an enum member or a case-insensitive name.

        Raises:
            UnsupportedFormat: If the value names neither html nor markdown
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnsupportedFormat(value)


@dataclass(frozen=True)
class Document:
    """
    An immutable input document.

    Raises:
        InvalidInput: If the content is empty or larger than max_content_length bytes
    """
    content: str
    format: DocumentFormat
    max_content_length: int = ProcessingBudget.max_content_length

    def __post_init__(self):
        if not isinstance(self.content, str) or not self.content.strip():
            raise InvalidInput("Content cannot be empty.")
        size = len(self.content.encode("utf-8", errors="surrogatepass"))
        if size > self.max_content_length:
            raise InvalidInput(
                f"Content of {size} bytes exceeds maximum allowed length of "
                f"{self.max_content_length} bytes."
            )
        object.__setattr__(self, "format", DocumentFormat.from_value(self.format))

    @classmethod
    def create(cls, content, document_format, budget=None):
        budget = budget or ProcessingBudget()
        return cls(content, document_format, max_content_length=budget.max_content_length)


@dataclass(frozen=True)
class CleaningOptions:
    """Configuration for the cleaning pipeline."""

    min_line_length: int = 1
    merge_threshold: int = 500
    link_policy: str = LINK_POLICY_DROP
    strip_forms: bool = True
    remove_boilerplate: bool = True
    keep_headings_in_body: bool = False
    content_filter: ContentFilter = field(default_factory=ContentFilter, compare=False)

    def __post_init__(self):
        if self.link_policy not in LINK_POLICIES:
            raise ValueError(f"Unknown link policy {self.link_policy!r}, expected one of {LINK_POLICIES}")

    def normalizer(self):
        return TextNormalizer(min_line_length=self.min_line_length,
                              merge_threshold=self.merge_threshold)


class HtmlCleaner:
    """Cleaner for HTML documents: HtmlStripper, markup flattening, TextNormalizer."""

    def __init__(self, document, budget=None, options=None, clock=time.monotonic):
        self.document = document
        self.budget = budget or ProcessingBudget()
        self.options = options or CleaningOptions()
        self.clock = clock
        self.partial = False

    def clean(self):
        """
        Clean the document.

        Returns:
            str: Newline-joined plain text lines without heading text
        """
        stripper = HtmlStripper(
            budget=self.budget,
            content_filter=self.options.content_filter,
            strip_forms=self.options.strip_forms,
            remove_boilerplate=self.options.remove_boilerplate,
            clock=self.clock,
        )
        stripped = stripper.strip(self.document.content)
        self.partial = stripper.timed_out

        text = markup.markup_to_text(stripped, keep_headings=self.options.keep_headings_in_body)
        return self.options.normalizer().normalize(text)

    def extract_headings(self):
        """
        Extract h1-h6 headings from the original document.

        Returns:
            list: Heading instances in document order
        """
        return extract_html_headings(self.document.content)


class MarkdownCleaner:
    """Cleaner for Markdown documents: MarkdownStripper, TextNormalizer."""

    def __init__(self, document, budget=None, options=None):
        self.document = document
        self.budget = budget or ProcessingBudget()
        self.options = options or CleaningOptions()
        self.partial = False

    def _stripper(self, options):
        return MarkdownStripper(
            content_filter=options.content_filter,
            link_policy=options.link_policy,
            remove_boilerplate=options.remove_boilerplate,
            keep_headings=options.keep_headings_in_body,
        )

    def clean(self):
        """
        Clean the document.

        Returns:
            str: Newline-joined plain text lines without heading lines
        """
        text = self._stripper(self.options).strip(self.document.content)
        return self.options.normalizer().normalize(text)

    def extract_headings(self):
        """
        Extract # headings from the original document.

        Heading text goes through the same cleaning pipeline, so emphasis,
        links and inline code inside a heading are normalized.

        Returns:
            list: Heading instances in document order
        """
        return extract_markdown_headings(self.document.content, clean_text=self._clean_heading_text)

    def _clean_heading_text(self, text):
        options = replace(self.options, min_line_length=1, keep_headings_in_body=True)
        stripped = self._stripper(options).strip(text)
        return options.normalizer().normalize(stripped)


_CLEANERS = {
    DocumentFormat.HTML: HtmlCleaner,
    DocumentFormat.MARKDOWN: MarkdownCleaner,
}


def create_cleaner(document_format, content, budget=None, options=None):
    """
    Build the cleaner for a format.

    Args:
        document_format: DocumentFormat or its name ("html" / "markdown")
        content: Raw document text
        budget: ProcessingBudget, defaults apply when omitted
        options: CleaningOptions, defaults apply when omitted

    Returns:
        HtmlCleaner or MarkdownCleaner

    Raises:
        UnsupportedFormat: If the format is not html or markdown
        InvalidInput: If the content is empty or too large
    """
    document_format = DocumentFormat.from_value(document_format)
    budget = budget or ProcessingBudget()
    document = Document.create(content, document_format, budget=budget)
    return _CLEANERS[document_format](document, budget=budget, options=options)


def clean_content(content, document_format, budget=None, options=None):
    """Shortcut for create_cleaner(...).clean()."""
    return create_cleaner(document_format, content, budget=budget, options=options).clean()
