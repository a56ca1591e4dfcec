#!/usr/bin/env python3
"""
Document format conversion module.

This module contains functions for converting documents between HTML and
Markdown and for saving fetched or cleaned content to files.
"""

import hashlib
import os
import re
from urllib.parse import urlparse

import html2text
import markdown
from bs4 import BeautifulSoup

from .cleaners import DocumentFormat


def html_to_markdown(html_content, url="", content_filter=None):
    """
    Convert HTML content to markdown format.

    Args:
        html_content: HTML content to convert
        url: URL of the page (for reference)
        content_filter: Optional ContentFilter applied before conversion

    Returns:
        str: Markdown formatted content
    """
    if content_filter is not None:
        soup = BeautifulSoup(html_content, "html.parser")
        html_content = str(content_filter.apply_to_soup(soup))

    # Configure html2text
    h = html2text.HTML2Text()
    h.ignore_links = False
    h.ignore_images = False
    h.ignore_tables = False
    h.ignore_emphasis = False
    h.body_width = 0  # Don't wrap lines

    markdown_content = h.handle(html_content)

    # Add URL as reference at the top
    if url:
        markdown_content = f"# Page from: {url}\n\n{markdown_content}"

    return markdown_content


def markdown_to_html(markdown_content):
    """
    Render Markdown as an HTML fragment.

    Tables, fenced code and the other "extra" syntax are supported.
    """
    return markdown.markdown(markdown_content, extensions=["extra"])


def convert_document(document, target_format, content_filter=None):
    """
    Convert a Document to another format.

    Args:
        document: Document to convert
        target_format: DocumentFormat or its name
        content_filter: Optional ContentFilter applied to HTML before conversion

    Returns:
        str: Converted content, or the content unchanged if it is already
        in the target format

    Raises:
        UnsupportedFormat: If target_format names neither html nor markdown
    """
    target_format = DocumentFormat.from_value(target_format)

    if document.format == target_format:
        return document.content
    if target_format == DocumentFormat.MARKDOWN:
        return html_to_markdown(document.content, content_filter=content_filter)
    return markdown_to_html(document.content)


def filename_for_url(url, extension=".md"):
    """
    Build a file name from the path and query of a URL.

    Args:
        url: Source URL
        extension: File extension including the dot

    Returns:
        str: File name of at most 250 characters
    """
    parsed_url = urlparse(url)
    path = parsed_url.path

    # Handle root path
    if not path or path == "/":
        path = "index"
    else:
        path = path.rstrip("/")
        path = re.sub(r"[^a-zA-Z0-9_-]", "_", path)

    if parsed_url.query:
        query_str = re.sub(r"[^a-zA-Z0-9_-]", "_", parsed_url.query)
        path = f"{path}__{query_str}"

    filename = f"{path}{extension}"

    # Ensure filename is not too long
    if len(filename) > 250:
        filename = (
            filename[:240] + hashlib.md5(filename.encode()).hexdigest()[:10] + extension
        )

    return filename


def save_cleaned_document(output_dir, url, content, extension=".txt"):
    """
    Save content to a file in a per-domain directory.

    Args:
        output_dir: Base directory
        url: URL of the page (used for the domain directory and filename)
        content: Content to save
        extension: File extension including the dot

    Returns:
        str: Path to the saved file
    """
    domain = urlparse(url).netloc.replace(":", "_") or "local"
    domain_dir = os.path.join(output_dir, domain)
    if not os.path.exists(domain_dir):
        os.makedirs(domain_dir)

    file_path = os.path.join(domain_dir, filename_for_url(url, extension))

    with open(file_path, "w", encoding="utf-8") as f:
        f.write(content)

    return file_path
