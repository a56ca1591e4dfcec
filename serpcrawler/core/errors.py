#!/usr/bin/env python3
"""
Error types raised by the crawler and the content cleaning pipeline.

Structural errors (bad input, unknown format) are raised to the caller
immediately. Problems inside a single cleaning stage are never raised;
they are logged and the stage is skipped.
"""


class SerpCrawlerError(Exception):
    """Base class for all errors raised by this package."""


class InvalidInput(SerpCrawlerError, ValueError):
    """Content is empty or larger than the configured maximum."""


class UnsupportedFormat(SerpCrawlerError, ValueError):
    """A document format outside of html/markdown was requested."""

    def __init__(self, value):
        super().__init__(f"Unsupported format: {value!r}")
        self.value = value


class ServiceError(SerpCrawlerError, RuntimeError):
    """
    An external API call failed.

    Args:
        message: Human readable description
        status_code: HTTP status of the last response, if any
    """

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code
