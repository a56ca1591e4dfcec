#!/usr/bin/env python3
"""
Rate controller module for outbound API requests.

This module contains the RequestRateController class that spaces out
consecutive requests to the same API and computes exponential backoff
delays for retries. Each API client owns its own controller.
"""

import logging
import threading
import time

from ..utils.http import handle_response_code

logger = logging.getLogger(__name__)


class RequestRateController:
    """
    Enforces a minimum delay between requests and adapts it to server responses.

    Rate-limited responses double the current delay (up to max_delay); a run
    of successful responses relaxes it back toward min_delay.
    """
    def __init__(self, min_delay=1.0, max_delay=30.0, base_backoff=1.0,
                 recovery_threshold=5, clock=time.monotonic, sleep=time.sleep):
        """
        Initialize the rate controller with the specified parameters.

        Args:
            min_delay: Minimum delay between requests in seconds
            max_delay: Maximum delay between requests in seconds
            base_backoff: Backoff unit in seconds; retry n waits base_backoff * 2 ** n
            recovery_threshold: Consecutive successes needed before the delay is relaxed
            clock: Monotonic clock, injectable for tests
            sleep: Sleep function, injectable for tests
        """
        if min_delay < 0:
            raise ValueError("min_delay must not be negative")
        if max_delay < min_delay:
            logger.warning("max_delay (%s) is less than min_delay (%s), using %s",
                           max_delay, min_delay, min_delay)
            max_delay = min_delay

        # Delay settings
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.current_delay = min_delay
        self.base_backoff = base_backoff
        self.recovery_threshold = recovery_threshold

        self._clock = clock
        self._sleep = sleep
        self._last_request_time = None
        self._consecutive_successes = 0

        # Stats tracking
        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'rate_limited_requests': 0,
            'server_errors': 0,
            'client_errors': 0,
        }

        # Lock for thread safety
        self.lock = threading.RLock()

    def wait(self):
        """
        Block until the current delay has passed since the previous request.

        Returns:
            float: Seconds slept
        """
        with self.lock:
            slept = 0.0
            if self._last_request_time is not None:
                elapsed = self._clock() - self._last_request_time
                if elapsed < self.current_delay:
                    slept = self.current_delay - elapsed
                    self._sleep(slept)
            self._last_request_time = self._clock()
            return slept

    def backoff_delay(self, attempt, retry_after=None):
        """
        Compute the delay before a retry.

        Args:
            attempt: Retry number, starting at 1
            retry_after: Server supplied Retry-After in seconds (optional)

        Returns:
            float: Seconds to wait, never more than max_delay
        """
        delay = self.base_backoff * (2 ** max(0, attempt))
        if retry_after is not None and retry_after > delay:
            delay = retry_after
        return min(self.max_delay, delay)

    def pause(self, seconds):
        """Sleep for a retry backoff without holding the lock."""
        if seconds > 0:
            self._sleep(seconds)

    def register_response(self, status_code):
        """
        Register a response for rate control decision making.

        Args:
            status_code: HTTP status code, or None for a network failure

        Returns:
            dict: Handling information from handle_response_code()
        """
        handling = handle_response_code(None, status_code)

        with self.lock:
            self.stats['total_requests'] += 1

            if handling['success']:
                self.stats['successful_requests'] += 1
                self._consecutive_successes += 1
                if (self._consecutive_successes >= self.recovery_threshold
                        and self.current_delay > self.min_delay):
                    self.current_delay = max(self.min_delay, self.current_delay / 2)
                    self._consecutive_successes = 0
                    logger.debug("Relaxed request delay to %.2fs", self.current_delay)
                return handling

            self._consecutive_successes = 0
            if handling['rate_limited']:
                self.stats['rate_limited_requests'] += 1
                self.current_delay = min(self.max_delay, max(self.current_delay, 0.5) * 2)
                logger.info("Rate limiting detected (%s), request delay now %.2fs",
                            status_code, self.current_delay)
            elif isinstance(status_code, int) and 500 <= status_code < 600:
                self.stats['server_errors'] += 1
            elif isinstance(status_code, int) and 400 <= status_code < 500:
                self.stats['client_errors'] += 1

            return handling

    def get_stats(self):
        """Return a copy of the request statistics with the current delay."""
        with self.lock:
            stats = dict(self.stats)
            stats['current_delay'] = self.current_delay
            return stats
