#!/usr/bin/env python3
"""
Scraping and search results client.

This module contains the BrightDataClient class that fetches pages through
the scraping API (as raw HTML or pre-rendered Markdown) and collects organic
result URLs from Google search pages served by the SERP zone.
"""

import logging
import urllib.parse

import requests

from ..core.errors import ServiceError, UnsupportedFormat
from ..core.rate_controller import RequestRateController
from ..utils.http import extract_retry_after, should_retry
from ..utils.url import dedupe_urls

logger = logging.getLogger(__name__)

API_URL = "https://api.brightdata.com/request"
SEARCH_URL = "https://www.google.com/search"

DATA_FORMATS = ("html", "markdown")


class BrightDataClient:
    """
    Client for the scraping API.

    The crawl zone is used for page fetches and the SERP zone for search
    result pages; each zone has its own API key.
    """

    def __init__(self, serp_key, serp_zone, crawl_key, crawl_zone, max_retries=2,
                 request_timeout=320, serp_timeout=180, max_pages=10,
                 rate_controller=None, session=None):
        """
        Initialize the client.

        Args:
            serp_key: API key for the SERP zone
            serp_zone: Name of the SERP zone
            crawl_key: API key for the crawl zone
            crawl_zone: Name of the crawl zone
            max_retries: Retries for transient failures
            request_timeout: Timeout of page fetches in seconds
            serp_timeout: Timeout of search requests in seconds
            max_pages: Maximum number of search result pages followed
            rate_controller: RequestRateController, a fresh one when omitted
            session: requests.Session, a fresh one when omitted
        """
        self.serp_key = serp_key
        self.serp_zone = serp_zone
        self.crawl_key = crawl_key
        self.crawl_zone = crawl_zone
        self.max_retries = max_retries
        self.request_timeout = request_timeout
        self.serp_timeout = serp_timeout
        self.max_pages = max_pages
        self.rate_controller = rate_controller or RequestRateController()
        self.session = session or requests.Session()

    def _post(self, key, payload, timeout):
        """
        POST a payload to the API, retrying transient failures.

        Returns:
            requests.Response: The last response received

        Raises:
            ServiceError: If no response was received after all retries
        """
        headers = {
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }
        attempt = 0
        while True:
            self.rate_controller.wait()
            try:
                response = self.session.post(API_URL, json=payload, headers=headers,
                                             timeout=timeout)
            except requests.RequestException as e:
                self.rate_controller.register_response(None)
                if not should_retry(None, attempt, self.max_retries):
                    raise ServiceError(f"Request for {payload['url']} failed: {e}") from e
                attempt += 1
                delay = self.rate_controller.backoff_delay(attempt)
                logger.warning("Request for %s failed (%s), retrying in %.1fs",
                               payload["url"], e, delay)
                self.rate_controller.pause(delay)
                continue

            handling = self.rate_controller.register_response(response.status_code)
            if handling["success"] or not should_retry(response.status_code, attempt,
                                                       self.max_retries):
                return response

            attempt += 1
            delay = self.rate_controller.backoff_delay(
                attempt, extract_retry_after(response.headers)
            )
            logger.warning("%s, retrying in %.1fs", handling["reason"], delay)
            self.rate_controller.pause(delay)

    def fetch_url(self, url, data_format="html"):
        """
        Fetch a page through the crawl zone.

        Args:
            url: Page URL
            data_format: "html" for the raw page, "markdown" for a Markdown rendering

        Returns:
            str: Page content, or None if the API did not return it

        Raises:
            UnsupportedFormat: If data_format is neither html nor markdown
            ServiceError: If the API could not be reached
        """
        if data_format not in DATA_FORMATS:
            raise UnsupportedFormat(data_format)

        payload = {"zone": self.crawl_zone, "url": url, "format": "raw"}
        if data_format == "markdown":
            payload["data_format"] = "markdown"

        response = self._post(self.crawl_key, payload, self.request_timeout)
        if response.status_code != 200:
            logger.warning("Could not fetch %s (status %s)", url, response.status_code)
            return None

        logger.debug("Fetched %s (%d characters)", url, len(response.text))
        return response.text

    def get_top_urls(self, keyword, max_results=20, country_code="pl"):
        """
        Collect organic result URLs for a keyword.

        Result pages are followed through the pagination link until
        max_results unique URLs are collected, there is no next page, or
        max_pages pages were read.

        Args:
            keyword: Search phrase
            max_results: Maximum number of URLs returned
            country_code: Country the search is localized to

        Returns:
            list: Unique URLs in ranking order

        Raises:
            ServiceError: If a request fails or the first page has no organic results
        """
        urls = []
        page_url = f"{SEARCH_URL}?q={urllib.parse.quote_plus(keyword)}"

        for page in range(self.max_pages):
            data = self._search_page(page_url, country_code)
            organic = data.get("organic") or []
            if not organic and page == 0:
                raise ServiceError(f"Unable to get top URLs for {keyword!r}")

            urls = dedupe_urls(urls + [item["link"] for item in organic
                                       if isinstance(item, dict) and item.get("link")])
            if len(urls) >= max_results:
                break

            page_url = (data.get("pagination") or {}).get("next_page_link")
            if not page_url:
                break

        logger.info("Collected %d URLs for %r", min(len(urls), max_results), keyword)
        return urls[:max_results]

    def _search_page(self, page_url, country_code):
        payload = {
            "zone": self.serp_zone,
            "url": f"{page_url}&gl={country_code}&brd_json=1",
            "format": "raw",
        }
        response = self._post(self.serp_key, payload, self.serp_timeout)
        if response.status_code != 200:
            raise ServiceError(f"Search request failed with status code {response.status_code}",
                               status_code=response.status_code)
        try:
            data = response.json()
        except ValueError as e:
            raise ServiceError(f"Search response is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ServiceError("Search response is not a JSON object")
        return data
