"""
Content processing module for cleaning HTML and Markdown documents.

This package contains the components of the cleaning pipeline: the heading
extractor, the HTML and Markdown strippers, the text normalizer and the
cleaner selector, plus conversion between HTML and Markdown.
"""

from .cleaners import (
    CleaningOptions,
    Document,
    DocumentFormat,
    HtmlCleaner,
    MarkdownCleaner,
    clean_content,
    create_cleaner,
)
from .filter import ContentFilter
from .headings import Heading, extract_html_headings, extract_markdown_headings
from .html_stripper import HtmlStripper
from .markdown import convert_document, html_to_markdown, markdown_to_html, save_cleaned_document
from .markdown_stripper import MarkdownStripper
from .normalizer import TextNormalizer

__all__ = [
    "CleaningOptions",
    "ContentFilter",
    "Document",
    "DocumentFormat",
    "Heading",
    "HtmlCleaner",
    "HtmlStripper",
    "MarkdownCleaner",
    "MarkdownStripper",
    "TextNormalizer",
    "clean_content",
    "convert_document",
    "create_cleaner",
    "extract_html_headings",
    "extract_markdown_headings",
    "html_to_markdown",
    "markdown_to_html",
    "save_cleaned_document",
]
