#!/usr/bin/env python3
"""
HTTP response handling module.

This module contains functions for classifying API response codes,
reading Retry-After headers and deciding whether a request is retried.
"""

import email.utils
import time

# Statuses retried with exponential backoff
RETRY_STATUS_CODES = frozenset([408, 425, 429, 449, 500, 502, 503, 504])

RATE_LIMIT_STATUS_CODES = frozenset([420, 429, 430, 503])


def _handling(success, action, reason, rate_limited=False):
    return {'success': success, 'action': action, 'reason': reason, 'rate_limited': rate_limited}


def handle_response_code(url, response_code):
    """
    Determine if a response code indicates success or failure and provide handling recommendations.

    Args:
        url: The URL that was requested (used only in the reason text)
        response_code: The HTTP status code, or None if no response was received

    Returns:
        dict: A dictionary with handling information including:
            - 'success': Boolean indicating if the response is successful
            - 'action': 'process', 'retry', 'throttle_and_retry' or 'skip'
            - 'reason': String explaining the reason for the action
            - 'rate_limited': Boolean indicating if this appears to be a rate limiting response
    """
    target = f" for {url}" if url else ""

    # Connection error or timeout
    if response_code is None or not isinstance(response_code, int):
        return _handling(False, 'retry', f"No response received{target}")

    if 200 <= response_code < 300:
        return _handling(True, 'process', f"Successful response ({response_code}){target}")

    if response_code in RATE_LIMIT_STATUS_CODES:
        return _handling(False, 'throttle_and_retry', f"Rate limited ({response_code}){target}",
                         rate_limited=True)

    if response_code in RETRY_STATUS_CODES:
        return _handling(False, 'retry', f"Transient error ({response_code}){target}")

    if response_code in (401, 403):
        return _handling(False, 'skip', f"Not authorized ({response_code}){target}, check the API key")

    # Other client errors and unknown codes are not worth retrying
    category = get_response_category(response_code).replace('_', ' ').capitalize()
    return _handling(False, 'skip', f"{category} ({response_code}){target}")


def extract_retry_after(response_headers):
    """
    Extract Retry-After value from response headers.

    Args:
        response_headers: Mapping of HTTP response headers

    Returns:
        int: Retry-After value in seconds, or None if not present
    """
    if not response_headers:
        return None

    # Look for Retry-After header (case-insensitive)
    for header, value in response_headers.items():
        if header.lower() != 'retry-after':
            continue
        try:
            # First try to parse as integer (seconds)
            return max(0, int(value))
        except (TypeError, ValueError):
            pass
        # If that fails, try to parse as HTTP date
        parsed_date = email.utils.parsedate_tz(str(value))
        if parsed_date is None:
            return None
        return max(1, int(email.utils.mktime_tz(parsed_date) - time.time()))

    return None


_CATEGORIES = {1: 'informational', 2: 'success', 3: 'redirect', 4: 'client_error', 5: 'server_error'}


def get_response_category(response_code):
    """Return the category name of a status code ('unknown' for anything outside 100-599)."""
    if not isinstance(response_code, int):
        return 'unknown'
    return _CATEGORIES.get(response_code // 100, 'unknown')


def should_retry(response_code, retry_count=0, max_retries=2):
    """
    Determine if a request should be retried based on the response code.

    Args:
        response_code: HTTP status code, or None if no response was received
        retry_count: Number of retries already made
        max_retries: Maximum number of retries

    Returns:
        bool: True if the request should be retried, False otherwise
    """
    # Don't retry if we've reached the maximum
    if retry_count >= max_retries:
        return False

    # Network failures are transient more often than not
    if response_code is None:
        return True

    if response_code in RETRY_STATUS_CODES:
        return True

    # Any other 5xx
    return 500 <= response_code < 600
