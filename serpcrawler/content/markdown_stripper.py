#!/usr/bin/env python3
"""
Markdown stripping module.

Scraping APIs often return "markdown" that still carries fragments of the
original HTML. The MarkdownStripper removes that HTML first and then the
Markdown syntax itself, leaving plain text with its line structure intact.
"""

import html
import re

from . import markup
from .filter import ContentFilter

LINK_POLICY_DROP = "drop"
LINK_POLICY_LABEL = "label"
LINK_POLICIES = (LINK_POLICY_DROP, LINK_POLICY_LABEL)

STRUCTURAL_SECTIONS = ["head", "script", "style", "nav", "footer", "header", "aside"]

BOILERPLATE_CONTAINERS = ["div", "section", "ul"]

_BLOCK_TAG = re.compile(r"</?(?:p|div|span|section|article)\b[^>]*>", re.IGNORECASE)
_BREAK_TAG = re.compile(r"<br\s*/?>", re.IGNORECASE)
_RULE_TAG = re.compile(r"<hr\s*/?>", re.IGNORECASE)
_HEADING_TAG = re.compile(r"<h([1-6])>(.*?)</h\1\s*>", re.IGNORECASE | re.DOTALL)
_ANY_TAG = re.compile(r"<[^>]+>")

_IMAGE = re.compile(r"!\[[^\]\n]*\]\([^)\n]*\)")
_LINK = re.compile(r"\[([^\]\n]*)\]\([^)\n]*\)")
_FENCED_CODE = re.compile(r"^[ \t]{0,3}(```|~~~).*?^[ \t]{0,3}\1[^\n]*$", re.MULTILINE | re.DOTALL)
_HEADING_LINE = re.compile(r"^[ \t]{0,3}#{1,6}[ \t]+.*$", re.MULTILINE)
_HEADING_MARKER = re.compile(r"^[ \t]{0,3}#{1,6}[ \t]+", re.MULTILINE)
_STRONG = re.compile(r"(\*\*|__)(?=\S)(.+?)(?<=\S)\1")
_EMPHASIS_STAR = re.compile(r"\*(?=\S)(.+?)(?<=\S)\*")
_EMPHASIS_UNDERSCORE = re.compile(r"(?<!\w)_(?=\S)(.+?)(?<=\S)_(?!\w)")
_INLINE_CODE = re.compile(r"`([^`\n]*)`")


class MarkdownStripper:
    """
    Remove embedded HTML and Markdown syntax from Markdown content.

    The order of the stages matters: HTML sections are removed before tags
    are flattened, images before links, and fenced code before inline code.
    """

    def __init__(self, content_filter=None, link_policy=LINK_POLICY_DROP,
                 remove_boilerplate=True, keep_headings=False):
        """
        Initialize a MarkdownStripper instance.

        Args:
            content_filter: ContentFilter deciding which containers are boilerplate
            link_policy: "drop" removes [text](url) entirely, "label" keeps the text
            remove_boilerplate: Remove containers whose class names match the filter
            keep_headings: Keep the text of # heading lines instead of removing the lines
        """
        if link_policy not in LINK_POLICIES:
            raise ValueError(f"Unknown link policy {link_policy!r}, expected one of {LINK_POLICIES}")
        self.content_filter = content_filter or ContentFilter()
        self.link_policy = link_policy
        self.remove_boilerplate = remove_boilerplate
        self.keep_headings = keep_headings

    def strip(self, document):
        """
        Strip a Markdown document.

        Args:
            document: Raw Markdown, possibly containing HTML

        Returns:
            str: Plain text, one block per line, blank lines between paragraphs
        """
        text = document.replace("\r\n", "\n").replace("\r", "\n")
        text = self.strip_html(text)
        text = self.strip_markdown(text)
        text = markup.remove_control_characters(text)
        return markup.collapse_whitespace(text)

    def strip_html(self, text):
        """Remove or flatten HTML embedded in Markdown."""
        for tag in STRUCTURAL_SECTIONS:
            text = markup.apply_stage(
                f"remove <{tag}>", lambda value, tag=tag: markup.remove_elements(value, tag), text
            )

        text = markup.safe_sub(markup.COMMENT, "", text, name="comments")

        if self.remove_boilerplate and self.content_filter.class_pattern is not None:
            for tag in BOILERPLATE_CONTAINERS:
                text = markup.apply_stage(
                    f"boilerplate <{tag}>",
                    lambda value, tag=tag: markup.remove_elements(
                        value, tag, predicate=self.content_filter.is_boilerplate
                    ),
                    text,
                )

        text = markup.apply_stage("remove <svg>", lambda value: markup.remove_elements(value, "svg"), text)
        text = markup.apply_stage("attributes", markup.strip_attributes, text)

        text = markup.safe_sub(_BLOCK_TAG, "\n", text, name="block tags")
        text = markup.safe_sub(_BREAK_TAG, "\n", text, name="line breaks")
        text = markup.safe_sub(_RULE_TAG, "\n---\n", text, name="rules")
        # HTML headings inside Markdown are folded into the body text
        text = markup.safe_sub(_HEADING_TAG, r"\n\2\n", text, name="html headings")
        text = markup.safe_sub(_ANY_TAG, "", text, name="remaining tags")
        return html.unescape(text)

    def strip_markdown(self, text):
        """Remove Markdown syntax, keeping the readable text."""
        text = markup.safe_sub(_IMAGE, "", text, name="images")
        if self.link_policy == LINK_POLICY_LABEL:
            text = markup.safe_sub(_LINK, r"\1", text, name="links")
        else:
            text = markup.safe_sub(_LINK, "", text, name="links")

        text = markup.safe_sub(_FENCED_CODE, "", text, name="code blocks")
        if self.keep_headings:
            text = markup.safe_sub(_HEADING_MARKER, "", text, name="heading markers")
        else:
            text = markup.safe_sub(_HEADING_LINE, "", text, name="headings")

        text = markup.safe_sub(_STRONG, r"\2", text, name="bold")
        text = markup.safe_sub(_EMPHASIS_STAR, r"\1", text, name="italic")
        text = markup.safe_sub(_EMPHASIS_UNDERSCORE, r"\1", text, name="italic")
        return markup.safe_sub(_INLINE_CODE, r"\1", text, name="inline code")
