#!/usr/bin/env python3
"""
Main crawler module.

This module contains the SerpCrawler class that ties together the search
results client, the content cleaners and the LLM analysis client: it finds
the top ranking pages for a keyword, fetches and cleans them, extracts their
headings and runs keyword analysis over their content.
"""

import logging

from ..content.cleaners import CleaningOptions, DocumentFormat, create_cleaner
from ..services.brightdata import BrightDataClient
from ..services.openrouter import OpenRouterClient
from ..utils.language import Language
from .budget import ProcessingBudget
from .errors import InvalidInput

logger = logging.getLogger(__name__)


class SerpCrawler:
    """
    Facade over search, fetching, cleaning and analysis.

    This class manages:
    - Top URL lookup for a keyword
    - Fetching and cleaning of pages
    - Heading extraction
    - Keyword and phrase analysis
    """

    def __init__(self, serp_client, analysis_client=None, budget=None, cleaning_options=None):
        """
        Initialize the crawler.

        Args:
            serp_client: BrightDataClient used for search and page fetches
            analysis_client: OpenRouterClient used for analysis (optional)
            budget: ProcessingBudget for the cleaners
            cleaning_options: CleaningOptions for the cleaners
        """
        self.serp_client = serp_client
        self.analysis_client = analysis_client
        self.budget = budget or ProcessingBudget()
        self.cleaning_options = cleaning_options or CleaningOptions()

    @classmethod
    def from_config(cls, config):
        """
        Build a crawler and its clients from a Configuration.

        Args:
            config: cli.config.Configuration instance

        Returns:
            SerpCrawler: Configured crawler
        """
        serp_client = BrightDataClient(
            serp_key=config.serp_key,
            serp_zone=config.serp_zone,
            crawl_key=config.crawl_key,
            crawl_zone=config.crawl_zone,
            max_retries=config.max_retries,
            request_timeout=config.request_timeout,
            serp_timeout=config.serp_timeout,
            max_pages=config.max_serp_pages,
        )
        serp_client.rate_controller.min_delay = config.request_delay
        serp_client.rate_controller.current_delay = config.request_delay

        analysis_client = None
        if config.openrouter_key:
            analysis_client = OpenRouterClient(config.openrouter_key, model=config.model)

        return cls(
            serp_client,
            analysis_client=analysis_client,
            budget=config.budget(),
            cleaning_options=config.cleaning_options(),
        )

    def _analysis(self):
        if self.analysis_client is None:
            raise InvalidInput("No analysis API key configured.")
        return self.analysis_client

    @staticmethod
    def available_languages():
        """Return the names of the supported languages."""
        return Language.available()

    def get_top_urls(self, keyword, max_results=20, language=Language.ENGLISH):
        """
        Return the top ranking URLs for a keyword.

        Args:
            keyword: Search phrase
            max_results: Maximum number of URLs
            language: Language or its name, selects the search country

        Returns:
            list: URLs in ranking order
        """
        language = Language.from_value(language)
        return self.serp_client.get_top_urls(keyword, max_results, language.country_code)

    def _cleaner(self, content, data_format):
        return create_cleaner(data_format, content, budget=self.budget,
                              options=self.cleaning_options)

    def clean_content(self, content, data_format):
        """
        Clean an HTML or Markdown document.

        Args:
            content: Raw document
            data_format: "html" or "markdown"

        Returns:
            str: Cleaned text
        """
        cleaner = self._cleaner(content, data_format)
        text = cleaner.clean()
        if cleaner.partial:
            logger.warning("Processing budget exhausted, returning partially cleaned text")
        return text

    def extract_headings(self, content, data_format):
        """
        Extract headings from an HTML or Markdown document.

        Returns:
            list: {"tag": "h1".."h6", "text": ...} dictionaries in document order
        """
        return [heading.to_dict() for heading in self._cleaner(content, data_format).extract_headings()]

    def fetch_and_clean_urls(self, urls, data_format="html"):
        """
        Fetch and clean a list of pages.

        Args:
            urls: Page URLs
            data_format: Format the pages are fetched in

        Returns:
            list: {"url": ..., "content": ...} dictionaries; content is None
            for pages that could not be fetched

        Raises:
            InvalidInput: If urls is empty
        """
        if not urls:
            raise InvalidInput("URLs list cannot be empty.")
        data_format = DocumentFormat.from_value(data_format)

        result = []
        for url in urls:
            content = self.serp_client.fetch_url(url, data_format.value)
            cleaned = None
            if content and content.strip():
                cleaned = self.clean_content(content, data_format)
            result.append({"url": url, "content": cleaned})
        return result

    def get_headers_from_urls(self, urls):
        """
        Fetch pages as HTML and extract their headings.

        Pages that could not be fetched are left out.

        Returns:
            list: {"url": ..., "headings": [...]} dictionaries

        Raises:
            InvalidInput: If urls is empty
        """
        if not urls:
            raise InvalidInput("URLs list cannot be empty.")

        result = []
        for url in urls:
            content = self.serp_client.fetch_url(url)
            if not content or not content.strip():
                logger.info("Skipping %s, nothing fetched", url)
                continue
            result.append({
                "url": url,
                "headings": self.extract_headings(content, DocumentFormat.HTML),
            })
        return result

    def get_headers_for_keyword(self, keyword, max_urls=20, language=Language.ENGLISH):
        """Extract headings from the top ranking pages for a keyword."""
        urls = self.get_top_urls(keyword, max_urls, language)
        return self.get_headers_from_urls(urls)

    def analyze_text(self, keyword, texts, language=Language.ENGLISH):
        """
        Run keyword analysis over already collected texts.

        Args:
            keyword: Central keyword
            texts: List of {"url": ..., "content": ...} dictionaries
            language: Language or its name

        Returns:
            dict: Analysis result
        """
        language = Language.from_value(language)
        return self._analysis().analyze_keyword(keyword, texts, language.value)

    def process_connection_phrase(self, phrase, content, language=Language.ENGLISH):
        """Extract the parts of content related to a phrase."""
        language = Language.from_value(language)
        return self._analysis().extract_phrase_content(phrase, content, language.value)

    def make_keyword_analysis(self, keyword, max_urls=20, language=Language.ENGLISH):
        """
        Full keyword analysis over the top ranking pages.

        Each page is fetched as Markdown, cleaned and reduced to the passages
        related to the keyword; the reduced texts are then analyzed together.

        Args:
            keyword: Central keyword
            max_urls: Maximum number of pages that contribute to the analysis
            language: Language or its name

        Returns:
            dict: Analysis result
        """
        language = Language.from_value(language)
        analysis = self._analysis()
        urls = self.get_top_urls(keyword, max_urls, language)

        texts = []
        for url in urls:
            if len(texts) >= max_urls:
                break
            content = self.serp_client.fetch_url(url, DocumentFormat.MARKDOWN.value)
            if not content:
                continue
            try:
                cleaned = self.clean_content(content, DocumentFormat.MARKDOWN)
            except InvalidInput as e:
                logger.warning("Skipping %s: %s", url, e)
                continue
            if not cleaned:
                continue

            extracted = analysis.extract_phrase_content(keyword, cleaned, language.value)
            if extracted:
                texts.append({"url": url, "content": extracted})

        logger.info("Analyzing %r over %d pages", keyword, len(texts))
        return analysis.analyze_keyword(keyword, texts, language.value)
