#!/usr/bin/env python3
"""
Processing budget module.

This module contains the limits applied to a single cleaning operation and
the Deadline helper used to check elapsed wall time between stages.
"""

import time
from dataclasses import dataclass


@dataclass(frozen=True)
class ProcessingBudget:
    """
    Limits for one cleaning operation.

    Attributes:
        max_processing_time: Wall-clock seconds before remaining stages are skipped
        max_chunk_size: Characters per chunk when a large document is split
        max_content_length: Maximum accepted document size in UTF-8 bytes
        fallback_threshold: Size above which only paragraphs, headings and
            list items are kept
    """
    max_processing_time: float = 5.0
    max_chunk_size: int = 500_000
    max_content_length: int = 20_000_000
    fallback_threshold: int = 1_000_000

    def __post_init__(self):
        if self.max_processing_time < 0:
            raise ValueError("max_processing_time must not be negative")
        if self.max_chunk_size <= 0:
            raise ValueError("max_chunk_size must be positive")
        if self.max_content_length <= 0:
            raise ValueError("max_content_length must be positive")
        if self.fallback_threshold <= 0:
            raise ValueError("fallback_threshold must be positive")

    def start(self, clock=time.monotonic):
        """Start a Deadline for this budget."""
        return Deadline(self.max_processing_time, clock=clock)


class Deadline:
    """
    Tracks elapsed time against a limit.

    This is a cooperative check: callers ask expired() between stages and
    return what they have so far once it reports True.
    """

    def __init__(self, limit, clock=time.monotonic):
        self.limit = limit
        self._clock = clock
        self._started = clock()
        self._expired = False

    @property
    def elapsed(self):
        return self._clock() - self._started

    def expired(self):
        # Sticky once tripped
        if not self._expired and self.elapsed >= self.limit:
            self._expired = True
        return self._expired

    @property
    def tripped(self):
        """True if expired() has reported True at least once."""
        return self._expired
