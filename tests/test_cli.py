import json
from pathlib import Path

import pytest
from pytest import MonkeyPatch

from serpcrawler.__main__ import main
from serpcrawler.cli.argument_parser import infer_format, parse_args
from serpcrawler.cli.config import CREDENTIAL_VARIABLES
from serpcrawler.services.brightdata import BrightDataClient

HTML_PAGE = (
    "<html><head><title>T</title></head>"
    "<body><h1>Main Title</h1><p>Paragraph text here.</p></body></html>"
)


@pytest.fixture
def no_credentials(monkeypatch: MonkeyPatch) -> None:
    for variable in CREDENTIAL_VARIABLES.values():
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture
def serp_credentials(monkeypatch: MonkeyPatch, no_credentials: None) -> None:
    for variable in ("BRIGHTDATA_SERP_KEY", "BRIGHTDATA_SERP_ZONE",
                     "BRIGHTDATA_CRAWL_KEY", "BRIGHTDATA_CRAWL_ZONE"):
        monkeypatch.setenv(variable, "value")


def test_infer_format() -> None:
    assert infer_format("notes.md") == "markdown"
    assert infer_format("NOTES.MARKDOWN") == "markdown"
    assert infer_format("page.html") == "html"
    assert infer_format("page") == "html"


def test_clean_command_prints_text(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    page = tmp_path / "page.html"
    page.write_text(HTML_PAGE, encoding="utf-8")

    assert main(["clean", str(page)]) == 0
    assert capsys.readouterr().out == "Paragraph text here.\n"


def test_clean_command_writes_output_file(tmp_path: Path) -> None:
    page = tmp_path / "notes.md"
    page.write_text("# Notes\n\n**Important** point", encoding="utf-8")
    output = tmp_path / "out.txt"

    assert main(["clean", str(page), "--output", str(output)]) == 0
    assert output.read_text(encoding="utf-8") == "Important point"


def test_headings_command_prints_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    page = tmp_path / "page.html"
    page.write_text(HTML_PAGE, encoding="utf-8")

    assert main(["headings", str(page)]) == 0
    assert json.loads(capsys.readouterr().out) == [{"tag": "h1", "text": "Main Title"}]


def test_convert_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    page = tmp_path / "page.html"
    page.write_text("<nav>Menu</nav><h1>Title</h1><p>Hello <b>world</b></p>", encoding="utf-8")

    assert main(["convert", str(page)]) == 0
    out = capsys.readouterr().out
    assert "# Title" in out
    assert "Hello **world**" in out
    assert "Menu" not in out


def test_empty_file_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    page = tmp_path / "empty.html"
    page.write_text("   ", encoding="utf-8")

    assert main(["clean", str(page)]) == 1
    assert "Error" in capsys.readouterr().err


def test_missing_file_exits_with_error(tmp_path: Path) -> None:
    assert main(["clean", str(tmp_path / "missing.html")]) == 1


def test_argument_errors_exit_with_status_2() -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["clean", "page.html", "--format", "pdf"])
    assert excinfo.value.code == 2

    with pytest.raises(SystemExit) as excinfo:
        parse_args(["fetch", "not-a-url"])
    assert excinfo.value.code == 2

    with pytest.raises(SystemExit) as excinfo:
        parse_args(["urls", "kw", "--language", "klingon"])
    assert excinfo.value.code == 2


def test_urls_command_requires_credentials(no_credentials: None,
                                           capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["urls", "shoes"]) == 1
    assert "BRIGHTDATA_SERP_KEY" in capsys.readouterr().err


def test_urls_command_prints_results(monkeypatch: MonkeyPatch, serp_credentials: None,
                                     capsys: pytest.CaptureFixture[str]) -> None:
    searches = []

    def fake_get_top_urls(self, keyword, max_results=20, country_code="pl"):
        searches.append((keyword, max_results, country_code))
        return ["https://a.com", "https://b.com"]

    monkeypatch.setattr(BrightDataClient, "get_top_urls", fake_get_top_urls)

    assert main(["urls", "shoes", "--language", "pl", "--max-results", "2"]) == 0
    assert capsys.readouterr().out == "https://a.com\nhttps://b.com\n"
    assert searches == [("shoes", 2, "pl")]


def test_fetch_command_saves_cleaned_pages(monkeypatch: MonkeyPatch, serp_credentials: None,
                                           tmp_path: Path) -> None:
    monkeypatch.setattr(BrightDataClient, "fetch_url",
                        lambda self, url, data_format="html": "<p>Hello page</p>")

    assert main(["fetch", "https://example.com/a/b", "--output-dir", str(tmp_path)]) == 0
    saved = tmp_path / "example.com" / "_a_b.txt"
    assert saved.read_text(encoding="utf-8") == "Hello page"


def test_save_config_option(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("BRIGHTDATA_SERP_KEY", "secret")
    page = tmp_path / "page.html"
    page.write_text(HTML_PAGE, encoding="utf-8")
    config_path = tmp_path / "config.json"

    assert main(["clean", str(page), "--merge-threshold", "10", "--save-config", str(config_path)]) == 0
    saved = json.loads(config_path.read_text())
    assert saved["merge_threshold"] == 10
    assert "secret" not in config_path.read_text()


def test_convert_command_renders_markdown_as_html(tmp_path: Path,
                                                  capsys: pytest.CaptureFixture[str]) -> None:
    page = tmp_path / "notes.md"
    page.write_text("# Notes\n\nSome *text*", encoding="utf-8")

    assert main(["convert", str(page)]) == 0
    out = capsys.readouterr().out
    assert "<h1>Notes</h1>" in out
    assert "<em>text</em>" in out
