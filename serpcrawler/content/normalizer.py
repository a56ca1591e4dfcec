#!/usr/bin/env python3
"""
Text normalization module.

This module contains the TextNormalizer class, the final stage shared by
both cleaners. It trims, filters and de-duplicates lines and then merges
short lines forward into denser paragraphs.
"""

SENTENCE_END = "!?:;"


class TextNormalizer:
    """
    Turn stripped text into a compact list of paragraphs.

    Merging is a single pass: a short line absorbs only its immediate
    successor. Running normalize() on its own output can therefore merge
    lines again, so the operation is not idempotent.
    """

    def __init__(self, min_line_length=1, merge_threshold=500):
        """
        Initialize a TextNormalizer instance.

        Args:
            min_line_length: Lines shorter than this (after trimming) are dropped.
                1 drops only empty lines; 50 reproduces the legacy plain-text policy.
            merge_threshold: Lines shorter than this are merged with the next line
        """
        if min_line_length < 0:
            raise ValueError("min_line_length must not be negative")
        if merge_threshold < 0:
            raise ValueError("merge_threshold must not be negative")
        self.min_line_length = max(1, min_line_length)
        self.merge_threshold = merge_threshold

    def normalize(self, text):
        """
        Normalize stripped text.

        Args:
            text: Text with one block per line

        Returns:
            str: Newline-joined merged lines
        """
        lines = (line.strip() for line in text.split("\n"))
        lines = [line for line in lines if len(line) >= self.min_line_length]
        lines = list(dict.fromkeys(lines))
        return "\n".join(self.merge_short_lines(lines))

    def merge_short_lines(self, lines):
        """
        Merge every line shorter than the threshold with the following line.

        Args:
            lines: Trimmed, non-empty lines

        Returns:
            list: Merged lines
        """
        merged = []
        index = 0
        count = len(lines)

        while index < count:
            line = lines[index]
            if len(line) < self.merge_threshold and index + 1 < count:
                merged.append(join_sentences(line, lines[index + 1]))
                index += 2
            else:
                merged.append(line)
                index += 1

        return merged


def join_sentences(first, second):
    """Join two lines so the first still reads as a finished sentence."""
    head = first.rstrip(" .")
    if not head:
        return second
    separator = " " if head[-1] in SENTENCE_END else ". "
    return f"{head}{separator}{second}"
