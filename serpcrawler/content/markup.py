#!/usr/bin/env python3
"""
Low-level markup helpers.

This module contains the regex building blocks shared by the HTML and
Markdown strippers: guarded substitutions, nesting-aware element removal,
attribute stripping, boundary-safe chunking and markup-to-text conversion.
"""

import html
import logging
import re

logger = logging.getLogger(__name__)

# Elements that never have a closing tag
VOID_ELEMENTS = frozenset([
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "param", "source", "track", "wbr",
])

# Tags rendered as line breaks when markup is flattened to text
BLOCK_ELEMENTS = (
    "address", "article", "aside", "blockquote", "dd", "details", "div", "dl",
    "dt", "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "li", "main", "nav", "ol", "p", "pre", "section", "summary",
    "table", "tr", "ul",
)

HEADING_ELEMENTS = ("h1", "h2", "h3", "h4", "h5", "h6")

# Maximum distance past the nominal chunk end allowed to finish a closing tag
CHUNK_BOUNDARY_SLACK = 100

COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_OPEN_TAG = re.compile(r"<([a-z][a-z0-9]*(?::[a-z][a-z0-9]*)?)\b[^>]*>", re.IGNORECASE)
_EMPTY_PAIR = re.compile(r"<([a-z][a-z0-9]*(?::[a-z][a-z0-9]*)?)>\s*</\1>", re.IGNORECASE)
_ANY_TAG = re.compile(r"<[^>]+>")
_BLOCK_TAG = re.compile(
    r"</?(?:%s)\b[^>]*>|<br\s*/?>|<hr\b[^>]*>" % "|".join(BLOCK_ELEMENTS), re.IGNORECASE
)
_CELL_TAG = re.compile(r"</?t[dh]\b[^>]*>", re.IGNORECASE)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")
_HORIZONTAL_SPACE = re.compile(r"[^\S\n]+")
_SPACE_AROUND_NEWLINE = re.compile(r" ?\n ?")
_MANY_NEWLINES = re.compile(r"\n{3,}")

# Errors a single regex stage may raise on pathological input
STAGE_ERRORS = (re.error, RecursionError, MemoryError, ValueError)

_element_patterns = {}


def apply_stage(name, transform, text):
    """
    Run one text transform, keeping the input if the transform fails.

    Args:
        name: Stage name used in the log message
        transform: Callable taking and returning a string
        text: Input text

    Returns:
        str: Transformed text, or the unchanged input if the stage failed
    """
    if not text:
        return text
    try:
        result = transform(text)
    except STAGE_ERRORS as e:
        logger.warning("Skipping cleaning stage %r: %s", name, e)
        return text
    if result is None:
        logger.warning("Skipping cleaning stage %r: transform returned nothing", name)
        return text
    return result


def safe_sub(pattern, replacement, text, name=None):
    """Guarded pattern.sub(); see apply_stage()."""
    return apply_stage(name or pattern.pattern, lambda value: pattern.sub(replacement, value), text)


def _element_pattern(tag):
    pattern = _element_patterns.get(tag)
    if pattern is None:
        pattern = re.compile(
            r"<(?P<close>/?)%s(?![a-z0-9:-])(?P<attrs>[^>]*)>" % re.escape(tag), re.IGNORECASE
        )
        _element_patterns[tag] = pattern
    return pattern


def _closing_positions(pattern, text):
    """Map the start of each opening tag to the end of its closing tag."""
    closing = {}
    stack = []
    for match in pattern.finditer(text):
        if match.group("close"):
            if stack:
                closing[stack.pop()] = match.end()
        elif not match.group("attrs").rstrip().endswith("/"):
            stack.append(match.start())
    return closing


def remove_elements(text, tag, predicate=None):
    """
    Remove every element of the given tag together with its content.

    Opening and closing tags are paired by nesting, so the whole outer
    element is removed. Void elements and self-closing tags lose only the
    tag itself. An element that is never closed loses only its opening tag.

    Args:
        text: Markup to process
        tag: Tag name, e.g. "video"
        predicate: Optional callable receiving the raw attribute string of an
            opening tag; only elements for which it returns True are removed

    Returns:
        str: Markup without the matching elements
    """
    pattern = _element_pattern(tag)
    closing = {} if tag.lower() in VOID_ELEMENTS else _closing_positions(pattern, text)
    pieces = []
    emitted = 0

    for match in pattern.finditer(text):
        # Closing tags, and anything inside an element already removed
        if match.group("close") or match.start() < emitted:
            continue
        if predicate is not None and not predicate(match.group("attrs")):
            continue

        pieces.append(text[emitted:match.start()])
        emitted = closing.get(match.start(), match.end())

    pieces.append(text[emitted:])
    return "".join(pieces)


def strip_attributes(text):
    """Rewrite every opening tag to its bare form, e.g. <div class="x"> -> <div>."""
    return _OPEN_TAG.sub(lambda match: f"<{match.group(1).lower()}>", text)


def remove_empty_pairs(text, max_passes=3, deadline=None):
    """
    Remove element pairs that contain only whitespace.

    Removing an inner element can leave its parent empty, so the pass is
    repeated up to max_passes times or until nothing changes.
    """
    for _ in range(max_passes):
        if deadline is not None and deadline.expired():
            break
        previous = text
        text = safe_sub(_EMPTY_PAIR, "", text, name="empty elements")
        if text == previous:
            break
    return text


def _chunk_boundary(document, start, end):
    closing = document.rfind("</", start, end)
    if closing > start:
        tag_end = document.find(">", closing)
        if tag_end != -1 and tag_end < end + CHUNK_BOUNDARY_SLACK:
            return tag_end + 1

    last_open = document.rfind("<", start, end)
    last_close = document.rfind(">", start, end)
    if last_open > last_close:
        # The nominal end falls inside a tag
        if last_open > start:
            return last_open
        tag_end = document.find(">", end)
        return len(document) if tag_end == -1 else tag_end + 1

    return end


def split_into_chunks(document, max_chunk_size):
    """
    Split markup into chunks of roughly max_chunk_size characters.

    Chunks end just after the nearest closing tag before the size limit, so
    no tag is ever cut in half.

    Args:
        document: Markup to split
        max_chunk_size: Nominal chunk size in characters

    Returns:
        list: Chunks whose concatenation equals the input
    """
    length = len(document)
    if length <= max_chunk_size:
        return [document]

    chunks = []
    start = 0
    while start < length:
        end = min(start + max_chunk_size, length)
        if end < length:
            end = _chunk_boundary(document, start, end)
        chunks.append(document[start:end])
        start = end

    return chunks


def remove_control_characters(text):
    """Drop C0 control characters other than tab and newline, plus DEL."""
    return _CONTROL_CHARS.sub("", text)


def collapse_whitespace(text):
    """
    Collapse horizontal whitespace to single spaces while keeping line breaks.

    Runs of three or more newlines become a single blank line.
    """
    text = _HORIZONTAL_SPACE.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE.sub("\n", text)
    return _MANY_NEWLINES.sub("\n\n", text).strip()


def markup_to_text(markup, keep_headings=False):
    """
    Flatten simplified markup to plain text.

    Block-level tags become line breaks, table cells become spaces, every
    other tag is dropped and HTML entities are decoded.

    Args:
        markup: Markup, typically the output of HtmlStripper.strip()
        keep_headings: Keep h1-h6 text in the output instead of removing it

    Returns:
        str: Plain text with one block per line
    """
    text = markup.replace("\r\n", "\n").replace("\r", "\n")
    if not keep_headings:
        for tag in HEADING_ELEMENTS:
            text = apply_stage(f"remove <{tag}>", lambda value, tag=tag: remove_elements(value, tag), text)

    text = safe_sub(_BLOCK_TAG, "\n", text, name="block tags")
    text = safe_sub(_CELL_TAG, " ", text, name="table cells")
    text = safe_sub(_ANY_TAG, "", text, name="remaining tags")
    text = html.unescape(text)
    text = remove_control_characters(text)
    return collapse_whitespace(text)
