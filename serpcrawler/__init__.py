"""
SERP crawler package.

This package cleans HTML and Markdown documents into plain text, extracts
their headings, collects top search result URLs for a keyword and runs
LLM keyword analysis over the cleaned pages.
"""

__version__ = "1.0.0"

from .content.cleaners import CleaningOptions, DocumentFormat, clean_content, create_cleaner
from .content.filter import ContentFilter
from .core.budget import ProcessingBudget
from .core.crawler import SerpCrawler
from .core.errors import InvalidInput, SerpCrawlerError, ServiceError, UnsupportedFormat
from .core.rate_controller import RequestRateController
from .utils.language import Language

__all__ = [
    "SerpCrawler",
    "ProcessingBudget",
    "CleaningOptions",
    "ContentFilter",
    "DocumentFormat",
    "Language",
    "RequestRateController",
    "clean_content",
    "create_cleaner",
    "SerpCrawlerError",
    "InvalidInput",
    "UnsupportedFormat",
    "ServiceError",
]
