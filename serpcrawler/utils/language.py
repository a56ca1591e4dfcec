#!/usr/bin/env python3
"""
Supported analysis languages and their search country codes.
"""

from enum import Enum


class Language(Enum):
    ENGLISH = "english"
    POLISH = "polish"
    GERMAN = "german"
    FRENCH = "french"
    SPANISH = "spanish"
    ITALIAN = "italian"
    UKRAINIAN = "ukrainian"
    CZECH = "czech"
    PORTUGUESE = "portuguese"

    @property
    def country_code(self):
        """Country code passed to the search engine (gl parameter)."""
        return _COUNTRY_CODES[self]

    @classmethod
    def from_country_code(cls, code):
        """Return the language for a country code, or None if it is unknown."""
        code = (code or "").strip().lower()
        for language, country_code in _COUNTRY_CODES.items():
            if country_code == code:
                return language
        return None

    @classmethod
    def from_value(cls, value):
        """
        Resolve a language from a member, a name ("english") or a country code ("us").

        Raises:
            ValueError: If the value matches no language
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        try:
            return cls(text)
        except ValueError:
            language = cls.from_country_code(text)
            if language is None:
                raise ValueError(
                    f"Unknown language {value!r}, expected one of: {', '.join(cls.available())}"
                )
            return language

    @classmethod
    def available(cls):
        return [language.value for language in cls]


_COUNTRY_CODES = {
    Language.ENGLISH: "us",
    Language.POLISH: "pl",
    Language.GERMAN: "de",
    Language.FRENCH: "fr",
    Language.SPANISH: "es",
    Language.ITALIAN: "it",
    Language.UKRAINIAN: "ua",
    Language.CZECH: "cz",
    Language.PORTUGUESE: "pt",
}
