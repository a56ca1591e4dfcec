from pathlib import Path

import pytest

from serpcrawler.content.cleaners import Document
from serpcrawler.content.filter import ContentFilter
from serpcrawler.content.markdown import (
    convert_document,
    filename_for_url,
    html_to_markdown,
    markdown_to_html,
    save_cleaned_document,
)
from serpcrawler.core.errors import UnsupportedFormat


def test_html_to_markdown() -> None:
    markdown = html_to_markdown('<h1>Title</h1><p>Read <a href="https://x.com">this</a></p>')

    assert "# Title" in markdown
    assert "[this](https://x.com)" in markdown


def test_html_to_markdown_adds_source_url() -> None:
    assert html_to_markdown("<p>x</p>", url="https://x.com").startswith("# Page from: https://x.com")


def test_html_to_markdown_applies_content_filter() -> None:
    markdown = html_to_markdown("<nav>Menu</nav><p>Body</p>", content_filter=ContentFilter())

    assert "Menu" not in markdown
    assert "Body" in markdown


def test_convert_document() -> None:
    html_document = Document("<p>Hello</p>", "html")
    markdown_document = Document("# Hello", "markdown")

    assert convert_document(html_document, "html") == "<p>Hello</p>"
    assert convert_document(html_document, "markdown").strip() == "Hello"
    assert convert_document(markdown_document, "markdown") == "# Hello"
    assert convert_document(markdown_document, "html") == "<h1>Hello</h1>"
    with pytest.raises(UnsupportedFormat):
        convert_document(html_document, "pdf")


def test_filename_for_url() -> None:
    assert filename_for_url("https://x.com/") == "index.md"
    assert filename_for_url("https://x.com/search?q=1", ".txt") == "_search__q_1.txt"

    long_name = filename_for_url("https://x.com/" + "a" * 400)
    assert len(long_name) <= 253
    assert long_name.endswith(".md")


def test_save_cleaned_document(tmp_path: Path) -> None:
    path = save_cleaned_document(str(tmp_path), "https://ex.com:8080/page", "content")

    assert Path(path) == tmp_path / "ex.com_8080" / "_page.txt"
    assert Path(path).read_text(encoding="utf-8") == "content"


def test_markdown_to_html() -> None:
    html = markdown_to_html("# Title\n\nSome **bold** text.\n\n- one\n- two\n\n| a | b |\n|---|---|\n| 1 | 2 |")

    assert "<h1>Title</h1>" in html
    assert "<p>Some <strong>bold</strong> text.</p>" in html
    assert "<li>one</li>" in html
    assert "<td>1</td>" in html
