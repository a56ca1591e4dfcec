import email.utils
import time

from serpcrawler.utils.http import (
    extract_retry_after,
    get_response_category,
    handle_response_code,
    should_retry,
)


def test_handle_response_code_actions() -> None:
    assert handle_response_code("https://a.com", 200)["action"] == "process"
    assert handle_response_code(None, 200)["success"]

    throttled = handle_response_code(None, 429)
    assert throttled["action"] == "throttle_and_retry"
    assert throttled["rate_limited"]

    assert handle_response_code(None, 500)["action"] == "retry"
    assert handle_response_code(None, None)["action"] == "retry"
    assert handle_response_code(None, 403)["action"] == "skip"

    not_found = handle_response_code("https://a.com/x", 404)
    assert not_found["action"] == "skip"
    assert not_found["reason"] == "Client error (404) for https://a.com/x"


def test_response_categories() -> None:
    assert get_response_category(101) == "informational"
    assert get_response_category(204) == "success"
    assert get_response_category(301) == "redirect"
    assert get_response_category(404) == "client_error"
    assert get_response_category(503) == "server_error"
    assert get_response_category(None) == "unknown"


def test_extract_retry_after_seconds_and_dates() -> None:
    assert extract_retry_after({"Retry-After": "5"}) == 5
    assert extract_retry_after({"retry-after": "not a date"}) is None
    assert extract_retry_after({}) is None
    assert extract_retry_after(None) is None

    future = email.utils.formatdate(time.time() + 60, usegmt=True)
    assert 50 <= extract_retry_after({"Retry-After": future}) <= 61


def test_should_retry() -> None:
    assert should_retry(503)
    assert should_retry(None)
    assert should_retry(501)
    assert not should_retry(404)
    assert not should_retry(502, retry_count=2, max_retries=2)
