#!/usr/bin/env python3
"""
URL handling and normalization module.

This module contains functions for validating and normalizing URLs and for
removing duplicates from search result lists.
"""

import urllib.parse


def is_valid_url(url):
    """
    Check that a URL has an http(s) scheme and a host.

    Args:
        url: URL to check

    Returns:
        bool: True if the URL can be fetched
    """
    if not isinstance(url, str) or not url.strip():
        return False
    parsed = urllib.parse.urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def normalize_url(url, keep_fragments=False, keep_query=True):
    """
    Normalize a URL to avoid duplicates.

    Args:
        url: The URL to normalize
        keep_fragments: Whether to keep URL fragments (#)
        keep_query: Whether to keep query parameters

    Returns:
        str: Normalized URL
    """
    parsed = urllib.parse.urlparse(url.strip())

    # Scheme and host are case-insensitive
    normalized = f"{parsed.scheme.lower()}://{parsed.netloc.lower()}"

    # Handle path
    if parsed.path:
        # Ensure path starts with / and remove trailing /
        path = parsed.path if parsed.path.startswith("/") else "/" + parsed.path
        path = path[:-1] if path.endswith("/") and len(path) > 1 else path
        normalized += path
    else:
        normalized += "/"

    # Handle query parameters if requested
    if keep_query and parsed.query:
        normalized += f"?{parsed.query}"

    # Handle fragments if requested
    if keep_fragments and parsed.fragment:
        normalized += f"#{parsed.fragment}"

    return normalized


def dedupe_urls(urls):
    """
    Remove duplicate URLs while keeping the first occurrence of each.

    Two URLs are duplicates when their normalized forms are equal; the
    original spelling of the first one is kept.

    Args:
        urls: Iterable of URLs

    Returns:
        list: Unique URLs in their original order
    """
    seen = set()
    unique = []
    for url in urls:
        key = normalize_url(url)
        if key in seen:
            continue
        seen.add(key)
        unique.append(url)
    return unique
