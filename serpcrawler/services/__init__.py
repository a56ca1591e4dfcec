"""
External service clients.

This package contains the client for the scraping and search results API and
the client for the LLM analysis API.
"""

from .brightdata import BrightDataClient
from .openrouter import OpenRouterClient

__all__ = ["BrightDataClient", "OpenRouterClient"]
