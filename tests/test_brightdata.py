from __future__ import annotations

import pytest
import requests

from serpcrawler.core.errors import ServiceError, UnsupportedFormat
from serpcrawler.core.rate_controller import RequestRateController
from serpcrawler.services.brightdata import API_URL, BrightDataClient

from fakes import FakeClock, FakeResponse, FakeSession


def make_client(responses: list, **kwargs) -> tuple[BrightDataClient, FakeSession, FakeClock]:
    clock = FakeClock()
    session = FakeSession(responses)
    controller = RequestRateController(min_delay=0, clock=clock, sleep=clock.sleep)
    client = BrightDataClient("serp-key", "serp-zone", "crawl-key", "crawl-zone",
                              rate_controller=controller, session=session, **kwargs)
    return client, session, clock


def test_fetch_url_posts_crawl_payload() -> None:
    client, session, _ = make_client([FakeResponse(200, "<html>page</html>")])

    assert client.fetch_url("https://example.com") == "<html>page</html>"

    call = session.calls[0]
    assert call["url"] == API_URL
    assert call["json"] == {"zone": "crawl-zone", "url": "https://example.com", "format": "raw"}
    assert call["headers"]["Authorization"] == "Bearer crawl-key"
    assert call["timeout"] == 320


def test_fetch_url_markdown_format() -> None:
    client, session, _ = make_client([FakeResponse(200, "# page")])

    assert client.fetch_url("https://example.com", "markdown") == "# page"
    assert session.calls[0]["json"]["data_format"] == "markdown"


def test_fetch_url_rejects_unknown_format() -> None:
    client, session, _ = make_client([])

    with pytest.raises(UnsupportedFormat):
        client.fetch_url("https://example.com", "pdf")
    assert session.calls == []


def test_fetch_url_returns_none_for_client_errors() -> None:
    client, session, _ = make_client([FakeResponse(404, "missing")])

    assert client.fetch_url("https://example.com") is None
    assert len(session.calls) == 1


def test_fetch_url_retries_transient_errors() -> None:
    client, session, clock = make_client([FakeResponse(503, ""), FakeResponse(200, "ok")])

    assert client.fetch_url("https://example.com") == "ok"
    assert len(session.calls) == 2
    assert clock.sleeps == [2.0]


def test_fetch_url_honours_retry_after() -> None:
    client, _, clock = make_client([
        FakeResponse(429, "", headers={"Retry-After": "7"}),
        FakeResponse(200, "ok"),
    ])

    assert client.fetch_url("https://example.com") == "ok"
    assert clock.sleeps == [7]


def test_fetch_url_gives_up_after_max_retries() -> None:
    client, session, _ = make_client([FakeResponse(500, "")] * 3)

    assert client.fetch_url("https://example.com") is None
    assert len(session.calls) == 3


def test_network_errors_raise_service_error() -> None:
    error = requests.ConnectionError("connection refused")
    client, session, clock = make_client([error, error, error])

    with pytest.raises(ServiceError):
        client.fetch_url("https://example.com")
    assert len(session.calls) == 3
    assert clock.sleeps == [2.0, 4.0]


def test_get_top_urls_follows_pagination_and_dedupes() -> None:
    next_page = "https://www.google.com/search?q=best+shoes&start=10"
    client, session, _ = make_client([
        FakeResponse(200, {
            "organic": [{"link": "https://a.com"}, {"link": "https://b.com"}, {"title": "no link"}],
            "pagination": {"next_page_link": next_page},
        }),
        FakeResponse(200, {"organic": [{"link": "https://b.com/"}, {"link": "https://c.com"}]}),
    ])

    urls = client.get_top_urls("best shoes", max_results=3, country_code="us")

    assert urls == ["https://a.com", "https://b.com", "https://c.com"]
    assert session.calls[0]["json"]["url"] == "https://www.google.com/search?q=best+shoes&gl=us&brd_json=1"
    assert session.calls[0]["json"]["zone"] == "serp-zone"
    assert session.calls[0]["headers"]["Authorization"] == "Bearer serp-key"
    assert session.calls[0]["timeout"] == 180
    assert session.calls[1]["json"]["url"] == next_page + "&gl=us&brd_json=1"


def test_get_top_urls_stops_at_max_results() -> None:
    client, session, _ = make_client([
        FakeResponse(200, {
            "organic": [{"link": "https://a.com"}, {"link": "https://b.com"}, {"link": "https://c.com"}],
            "pagination": {"next_page_link": "https://www.google.com/search?q=x&start=10"},
        }),
    ])

    assert client.get_top_urls("x", max_results=2) == ["https://a.com", "https://b.com"]
    assert len(session.calls) == 1


def test_get_top_urls_page_limit() -> None:
    pages = [
        FakeResponse(200, {
            "organic": [{"link": f"https://site{i}.com"}],
            "pagination": {"next_page_link": f"https://www.google.com/search?q=x&start={i + 1}0"},
        })
        for i in range(5)
    ]
    client, session, _ = make_client(pages, max_pages=2)

    assert client.get_top_urls("x", max_results=10) == ["https://site0.com", "https://site1.com"]
    assert len(session.calls) == 2


def test_get_top_urls_without_results_raises() -> None:
    client, _, _ = make_client([FakeResponse(200, {"organic": []})])

    with pytest.raises(ServiceError):
        client.get_top_urls("nothing")


def test_get_top_urls_http_error_raises() -> None:
    client, _, _ = make_client([FakeResponse(404, "not found")])

    with pytest.raises(ServiceError) as excinfo:
        client.get_top_urls("x")
    assert excinfo.value.status_code == 404
