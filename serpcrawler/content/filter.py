#!/usr/bin/env python3
"""
Content filtering module.

This module contains the ContentFilter class that decides which page regions
count as boilerplate (navigation, headers, footers, sidebars, cookie banners
and ads) and should be dropped before text is extracted.
"""

import re


MENU_KEYWORDS = ["menu", "nav", "navbar", "navigation"]
HEADER_KEYWORDS = ["header"]
FOOTER_KEYWORDS = ["footer"]
SIDEBAR_KEYWORDS = ["sidebar", "widget"]
PROMOTION_KEYWORDS = ["cookie", "popup", "banner", "ad", "ads", "advert"]

# Pulls the value of a class attribute out of a raw attribute string
_CLASS_ATTRIBUTE = re.compile(
    r"""\bclass\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>"']+))""", re.IGNORECASE
)


class ContentFilter:
    """
    Filter to control which page regions survive cleaning.

    Containers whose class attribute mentions one of the excluded keywords
    are removed together with their content. Each group of keywords can be
    switched back on with the matching include_* flag.
    """

    def __init__(self, include_headers=False, include_menus=False, include_footers=False,
                 include_sidebars=False, include_promotions=False, custom_exclude_classes=None):
        """
        Initialize a ContentFilter instance.

        Args:
            include_headers: Whether to keep header containers
            include_menus: Whether to keep menu/navigation containers
            include_footers: Whether to keep footer containers
            include_sidebars: Whether to keep sidebar and widget containers
            include_promotions: Whether to keep cookie banners, popups and ads
            custom_exclude_classes: Additional class keywords to exclude
        """
        self.include_headers = include_headers
        self.include_menus = include_menus
        self.include_footers = include_footers
        self.include_sidebars = include_sidebars
        self.include_promotions = include_promotions
        self.custom_exclude_classes = list(custom_exclude_classes or [])
        self._pattern = None

    def get_excluded_keywords(self):
        """
        Return class-name keywords for containers that should be excluded.

        Returns:
            list: Keywords in a stable order without duplicates
        """
        excluded = []

        if not self.include_menus:
            excluded.extend(MENU_KEYWORDS)
        if not self.include_headers:
            excluded.extend(HEADER_KEYWORDS)
        if not self.include_footers:
            excluded.extend(FOOTER_KEYWORDS)
        if not self.include_sidebars:
            excluded.extend(SIDEBAR_KEYWORDS)
        if not self.include_promotions:
            excluded.extend(PROMOTION_KEYWORDS)

        excluded.extend(keyword.strip().lower() for keyword in self.custom_exclude_classes
                        if keyword.strip())

        return list(dict.fromkeys(excluded))

    def get_excluded_selectors(self):
        """
        Return CSS selectors for elements that should be excluded.

        Returns:
            list: CSS selectors usable with BeautifulSoup.select()
        """
        excluded = []

        if not self.include_menus:
            excluded.extend(['nav', '[role="navigation"]'])
        if not self.include_headers:
            excluded.append('header')
        if not self.include_footers:
            excluded.append('footer')
        if not self.include_sidebars:
            excluded.append('aside')

        excluded.extend(f".{keyword}" for keyword in self.get_excluded_keywords())
        return excluded

    @property
    def class_pattern(self):
        """Compiled pattern matching a class value that names a boilerplate keyword."""
        if self._pattern is None:
            keywords = self.get_excluded_keywords()
            if not keywords:
                return None
            alternatives = "|".join(re.escape(keyword) for keyword in
                                    sorted(keywords, key=len, reverse=True))
            # Hyphens and underscores separate words in class names ("site-footer")
            self._pattern = re.compile(
                rf"(?<![a-z0-9])(?:{alternatives})(?![a-z0-9])", re.IGNORECASE
            )
        return self._pattern

    def is_boilerplate(self, attributes):
        """
        Check a raw tag attribute string for an excluded class.

        Args:
            attributes: Attribute text of a tag, e.g. ' id="x" class="main-menu"'

        Returns:
            bool: True if the element should be removed
        """
        pattern = self.class_pattern
        if pattern is None or not attributes:
            return False

        match = _CLASS_ATTRIBUTE.search(attributes)
        if not match:
            return False

        class_value = next(group for group in match.groups() if group is not None)
        return bool(pattern.search(class_value))

    def apply_to_soup(self, soup):
        """
        Apply the content filter to a BeautifulSoup object.

        Args:
            soup: BeautifulSoup object to filter

        Returns:
            BeautifulSoup: Filtered BeautifulSoup object
        """
        for selector in self.get_excluded_selectors():
            for element in soup.select(selector):
                element.decompose()

        return soup

    def __str__(self):
        """String representation of the content filter settings."""
        included = []

        if self.include_headers:
            included.append("headers")
        if self.include_menus:
            included.append("menus")
        if self.include_footers:
            included.append("footers")
        if self.include_sidebars:
            included.append("sidebars")
        if self.include_promotions:
            included.append("promotions")

        if included:
            included_str = ", ".join(included)
            return f"ContentFilter(Includes: {included_str})"
        else:
            return "ContentFilter(Excludes: headers, menus, footers, sidebars, promotions)"
