from bs4 import BeautifulSoup

from serpcrawler.content.filter import ContentFilter


def test_default_keywords_exclude_all_boilerplate_groups() -> None:
    assert ContentFilter().get_excluded_keywords() == [
        "menu", "nav", "navbar", "navigation",
        "header",
        "footer",
        "sidebar", "widget",
        "cookie", "popup", "banner", "ad", "ads", "advert",
    ]


def test_include_flags_and_custom_classes() -> None:
    content_filter = ContentFilter(include_menus=True, include_promotions=True,
                                   custom_exclude_classes=[" Comments ", "", "footer"])

    keywords = content_filter.get_excluded_keywords()

    assert "menu" not in keywords
    assert "cookie" not in keywords
    assert keywords[-1] == "comments"
    assert keywords.count("footer") == 1


def test_is_boilerplate_matches_whole_class_words() -> None:
    content_filter = ContentFilter()

    assert content_filter.is_boilerplate(' class="site-footer"')
    assert content_filter.is_boilerplate(" class='nav'")
    assert content_filter.is_boilerplate(" class=ads")
    assert content_filter.is_boilerplate(' id="x" class="cookie_banner wide"')
    assert not content_filter.is_boilerplate(' class="download"')
    assert not content_filter.is_boilerplate(' class="masthead main-content"')
    assert not content_filter.is_boilerplate(' id="menu"')
    assert not content_filter.is_boilerplate("")


def test_class_pattern_is_none_when_everything_is_included() -> None:
    content_filter = ContentFilter(include_headers=True, include_menus=True, include_footers=True,
                                   include_sidebars=True, include_promotions=True)

    assert content_filter.class_pattern is None
    assert not content_filter.is_boilerplate(' class="footer"')


def test_apply_to_soup_removes_excluded_elements() -> None:
    soup = BeautifulSoup(
        '<div><nav>Navigation</nav><p class="ad">Buy now</p><p>Keep me</p><footer>Foot</footer></div>',
        "html.parser",
    )

    text = ContentFilter().apply_to_soup(soup).get_text()

    assert text == "Keep me"


def test_str_lists_included_regions() -> None:
    assert str(ContentFilter(include_footers=True)) == "ContentFilter(Includes: footers)"
