"""
Utility modules for URL handling, HTTP response processing and languages.

This package contains utility functions for normalizing URLs, classifying
HTTP response codes and mapping analysis languages to country codes.
"""

from .http import extract_retry_after, handle_response_code, should_retry
from .language import Language
from .url import dedupe_urls, is_valid_url, normalize_url

__all__ = [
    "Language",
    "normalize_url",
    "is_valid_url",
    "dedupe_urls",
    "handle_response_code",
    "extract_retry_after",
    "should_retry",
]
