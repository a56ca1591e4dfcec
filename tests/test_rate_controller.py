from __future__ import annotations

from serpcrawler.core.rate_controller import RequestRateController

from fakes import FakeClock


def make_controller(**kwargs) -> tuple[RequestRateController, FakeClock]:
    clock = FakeClock()
    return RequestRateController(clock=clock, sleep=clock.sleep, **kwargs), clock


def test_wait_enforces_minimum_delay() -> None:
    controller, clock = make_controller(min_delay=1.0)

    assert controller.wait() == 0.0
    assert controller.wait() == 1.0
    clock.advance(5)
    assert controller.wait() == 0.0
    assert clock.sleeps == [1.0]


def test_backoff_delay_grows_exponentially_and_is_capped() -> None:
    controller, _ = make_controller(max_delay=5.0)

    assert controller.backoff_delay(1) == 2.0
    assert controller.backoff_delay(2) == 4.0
    assert controller.backoff_delay(3) == 5.0
    assert controller.backoff_delay(1, retry_after=4) == 4
    assert controller.backoff_delay(1, retry_after=60) == 5.0


def test_backoff_unit_doubles_per_retry() -> None:
    controller, _ = make_controller(base_backoff=0.5)

    assert controller.backoff_delay(1) == 1.0
    assert controller.backoff_delay(2) == 2.0
    assert controller.backoff_delay(3) == 4.0


def test_rate_limited_responses_raise_the_delay() -> None:
    controller, _ = make_controller(min_delay=1.0, max_delay=3.0)

    handling = controller.register_response(429)
    assert handling["action"] == "throttle_and_retry"
    assert controller.current_delay == 2.0

    controller.register_response(503)
    assert controller.current_delay == 3.0
    assert controller.get_stats()["rate_limited_requests"] == 2


def test_successes_relax_the_delay() -> None:
    controller, _ = make_controller(min_delay=1.0, recovery_threshold=2)
    controller.register_response(429)

    controller.register_response(200)
    assert controller.current_delay == 2.0
    controller.register_response(200)
    assert controller.current_delay == 1.0


def test_stats_count_error_categories() -> None:
    controller, _ = make_controller()

    for status in (200, 500, 404, None):
        controller.register_response(status)

    stats = controller.get_stats()
    assert stats["total_requests"] == 4
    assert stats["successful_requests"] == 1
    assert stats["server_errors"] == 1
    assert stats["client_errors"] == 1
    assert stats["current_delay"] == 1.0


def test_max_delay_below_min_delay_is_corrected() -> None:
    controller, _ = make_controller(min_delay=2.0, max_delay=1.0)

    assert controller.max_delay == 2.0


def test_pause_skips_zero_delays() -> None:
    controller, clock = make_controller()

    controller.pause(0)
    controller.pause(1.5)

    assert clock.sleeps == [1.5]
