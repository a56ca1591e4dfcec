"""
Core module containing the crawler building blocks.

This package contains the processing budget, the request rate controller
and the error types. The SerpCrawler facade lives in core.crawler.
"""

from .budget import Deadline, ProcessingBudget
from .errors import InvalidInput, SerpCrawlerError, ServiceError, UnsupportedFormat
from .rate_controller import RequestRateController

__all__ = [
    "ProcessingBudget",
    "Deadline",
    "RequestRateController",
    "SerpCrawlerError",
    "InvalidInput",
    "UnsupportedFormat",
    "ServiceError",
]
