"""Unit tests – HTTP transport (request building, error mapping, retry loop)."""
from __future__ import annotations

import asyncio
import json
import random
import time
from datetime import UTC, date, datetime, timedelta
from email.utils import format_datetime

import httpx
import pytest
import respx
from structlog.testing import capture_logs

from rynko.adapters.http import USER_AGENT, HttpxHttpClient, RetryingHttpClient, encode_query
from rynko.kernel.errors import (
    ApiError,
    NetworkError,
    RequestTimeoutError,
    RynkoError,
    UnknownError,
)
from rynko.kernel.time import FrozenClock
from rynko.resilience.retry import RetryPolicy

BASE_URL = "https://api.test"
API_KEY = "sk_test_123"

NO_JITTER = RetryPolicy(max_jitter_ms=0)


def _client(**kwargs) -> RetryingHttpClient:
    return RetryingHttpClient(BASE_URL, API_KEY, **kwargs)


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------


class TestHeaders:
    @respx.mock
    def test_default_headers_sent(self) -> None:
        route = respx.get(f"{BASE_URL}/ping").mock(return_value=httpx.Response(200, json={}))

        async def run() -> None:
            async with _client() as client:
                await client.get("/ping")

        asyncio.run(run())
        sent = route.calls.last.request
        assert sent.headers["authorization"] == f"Bearer {API_KEY}"
        assert sent.headers["content-type"] == "application/json"
        assert sent.headers["user-agent"] == USER_AGENT

    @respx.mock
    def test_custom_headers_layered_on_top(self) -> None:
        route = respx.get(f"{BASE_URL}/ping").mock(return_value=httpx.Response(200, json={}))

        async def run() -> None:
            async with _client(headers={"X-Team": "acme", "User-Agent": "my-app/2.0"}) as client:
                await client.get("/ping")

        asyncio.run(run())
        sent = route.calls.last.request
        assert sent.headers["x-team"] == "acme"
        assert sent.headers["user-agent"] == "my-app/2.0"
        assert sent.headers["authorization"] == f"Bearer {API_KEY}"

    def test_custom_headers_cannot_remove_authorization(self) -> None:
        client = _client(headers={"Authorization": None, "authorization": ""})
        assert client.headers["authorization"] == f"Bearer {API_KEY}"


class TestUrlBuilding:
    def test_absolute_path_resolves_against_host(self) -> None:
        client = RetryingHttpClient("https://api.test/v2/", API_KEY)
        assert str(client.build_url("/api/v1/documents/jobs")) == "https://api.test/api/v1/documents/jobs"

    def test_relative_path_resolves_against_base_path(self) -> None:
        client = RetryingHttpClient("https://api.test/api/", API_KEY)
        assert str(client.build_url("templates")) == "https://api.test/api/templates"

    def test_none_query_entries_are_dropped(self) -> None:
        url = _client().build_url("/jobs", {"status": "completed", "templateId": None, "limit": 10})
        assert dict(url.params) == {"status": "completed", "limit": "10"}

    def test_dates_rendered_as_iso_8601(self) -> None:
        when = datetime(2025, 1, 15, 10, 30, tzinfo=UTC)
        url = _client().build_url("/jobs", {"dateFrom": when, "day": date(2025, 1, 15)})
        assert url.params["dateFrom"] == "2025-01-15T10:30:00+00:00"
        assert url.params["day"] == "2025-01-15"

    def test_query_order_preserved_and_bools_lowercase(self) -> None:
        pairs = encode_query({"b": True, "a": False, "c": 1.5})
        assert pairs == [("b", "true"), ("a", "false"), ("c", "1.5")]


# ---------------------------------------------------------------------------
# Response decoding and error mapping
# ---------------------------------------------------------------------------


class TestResponseDecoding:
    @respx.mock
    def test_wrapped_body_returned_verbatim(self) -> None:
        body = {"success": True, "data": {"id": "u1"}, "meta": {"total": 1}}
        respx.get(f"{BASE_URL}/api/auth/verify").mock(return_value=httpx.Response(200, json=body))

        async def run() -> object:
            async with _client() as client:
                return await client.get("/api/auth/verify")

        assert asyncio.run(run()) == body

    @respx.mock
    def test_empty_body_returns_none(self) -> None:
        respx.delete(f"{BASE_URL}/things/1").mock(return_value=httpx.Response(204))

        async def run() -> object:
            async with _client() as client:
                return await client.delete("/things/1")

        assert asyncio.run(run()) is None

    @respx.mock
    def test_api_error_carries_server_fields(self, sleeper) -> None:
        route = respx.get(f"{BASE_URL}/api/templates/missing").mock(
            return_value=httpx.Response(
                404,
                json={"success": False, "error": "ERR_TMPL_001", "message": "Template not found", "statusCode": 404},
            )
        )

        async def run() -> None:
            async with _client(retry=RetryPolicy(), sleep=sleeper) as client:
                await client.get("/api/templates/missing")

        with pytest.raises(ApiError) as exc_info:
            asyncio.run(run())
        err = exc_info.value
        assert err.code == "ERR_TMPL_001"
        assert err.message == "Template not found"
        assert err.status_code == 404
        assert route.call_count == 1
        assert sleeper.calls == []

    @respx.mock
    def test_api_error_fallbacks_for_non_json_body(self) -> None:
        respx.post(f"{BASE_URL}/x").mock(return_value=httpx.Response(400, text="<html>bad</html>"))

        async def run() -> None:
            async with _client() as client:
                await client.post("/x", {"a": 1})

        with pytest.raises(ApiError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.message == "HTTP 400"
        assert exc_info.value.code == "ApiError"

    @respx.mock
    def test_network_failure_maps_to_network_error(self) -> None:
        respx.get(f"{BASE_URL}/x").mock(side_effect=httpx.ConnectError("connection refused"))

        async def run() -> None:
            async with _client() as client:
                await client.get("/x")

        with pytest.raises(NetworkError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.code == "NetworkError"
        assert exc_info.value.status_code == 0
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @respx.mock
    def test_timeout_maps_to_408(self) -> None:
        respx.get(f"{BASE_URL}/slow").mock(side_effect=httpx.ReadTimeout("timed out"))

        async def run() -> None:
            async with _client(timeout_ms=50) as client:
                await client.get("/slow")

        with pytest.raises(RequestTimeoutError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.code == "TimeoutError"
        assert exc_info.value.status_code == 408
        assert exc_info.value.message == "Request timeout"

    @respx.mock
    def test_slow_response_abandoned_after_timeout(self, sleeper) -> None:
        calls = 0

        async def hang(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        respx.get(f"{BASE_URL}/slow").mock(side_effect=hang)

        async def run() -> None:
            async with _client(timeout_ms=100, retry=RetryPolicy(max_attempts=2), sleep=sleeper) as client:
                await client.get("/slow")

        started = time.monotonic()
        with pytest.raises(RequestTimeoutError) as exc_info:
            asyncio.run(run())
        elapsed = time.monotonic() - started

        assert exc_info.value.status_code == 408
        assert calls == 2
        assert len(sleeper.calls) == 1
        assert elapsed < 2.0

    @respx.mock
    def test_slow_response_without_retry_single_attempt(self, sleeper) -> None:
        calls = 0

        async def hang(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        respx.get(f"{BASE_URL}/slow").mock(side_effect=hang)

        async def run() -> None:
            async with _client(timeout_ms=100, retry=None, sleep=sleeper) as client:
                await client.get("/slow")

        started = time.monotonic()
        with pytest.raises(RequestTimeoutError):
            asyncio.run(run())
        assert time.monotonic() - started < 2.0
        assert calls == 1
        assert sleeper.calls == []

    @respx.mock
    def test_unexpected_exception_maps_to_unknown_error(self) -> None:
        respx.get(f"{BASE_URL}/x").mock(side_effect=RuntimeError("boom"))

        async def run() -> None:
            async with _client() as client:
                await client.get("/x")

        with pytest.raises(UnknownError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.code == "UnknownError"
        assert exc_info.value.status_code == 0

    @respx.mock
    def test_single_attempt_client_never_retries(self) -> None:
        route = respx.get(f"{BASE_URL}/x").mock(return_value=httpx.Response(503))

        async def run() -> None:
            async with HttpxHttpClient(BASE_URL, API_KEY) as client:
                await client.get("/x")

        with pytest.raises(ApiError):
            asyncio.run(run())
        assert route.call_count == 1


# ---------------------------------------------------------------------------
# Retry loop
# ---------------------------------------------------------------------------


class TestRetryLoop:
    @respx.mock
    def test_retries_on_503_then_succeeds(self, sleeper) -> None:
        route = respx.get(f"{BASE_URL}/x").mock(
            side_effect=[httpx.Response(503), httpx.Response(200, json={"ok": True})]
        )

        async def run() -> object:
            async with _client(retry=RetryPolicy(), sleep=sleeper) as client:
                return await client.get("/x")

        assert asyncio.run(run()) == {"ok": True}
        assert route.call_count == 2
        assert len(sleeper.calls) == 1
        assert 0 <= sleeper.calls[0] <= 30.0

    @pytest.mark.parametrize("retry", [None, RetryPolicy(max_attempts=1)])
    @respx.mock
    def test_single_attempt_policy_never_sleeps(self, retry, sleeper) -> None:
        route = respx.get(f"{BASE_URL}/x").mock(return_value=httpx.Response(429))

        async def run() -> None:
            async with _client(retry=retry, sleep=sleeper) as client:
                await client.get("/x")

        with pytest.raises(ApiError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.status_code == 429
        assert route.call_count == 1
        assert sleeper.calls == []

    @respx.mock
    def test_exhaustion_raises_last_api_error(self, sleeper) -> None:
        route = respx.get(f"{BASE_URL}/x").mock(
            return_value=httpx.Response(429, json={"error": "ERR_RATE_001", "message": "Slow down"})
        )

        async def run() -> None:
            async with _client(retry=RetryPolicy(max_attempts=3), sleep=sleeper) as client:
                await client.get("/x")

        with pytest.raises(ApiError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.code == "ERR_RATE_001"
        assert route.call_count == 3
        assert len(sleeper.calls) == 2

    @respx.mock
    def test_exponential_backoff_without_jitter(self, sleeper) -> None:
        respx.get(f"{BASE_URL}/x").mock(
            side_effect=[httpx.Response(504)] * 4 + [httpx.Response(200, json={})]
        )

        async def run() -> None:
            async with _client(retry=NO_JITTER, sleep=sleeper) as client:
                await client.get("/x")

        asyncio.run(run())
        assert sleeper.calls == [1.0, 2.0, 4.0, 8.0]

    @respx.mock
    def test_backoff_capped_at_max_delay(self, sleeper) -> None:
        policy = RetryPolicy(max_attempts=4, initial_delay_ms=1000, max_delay_ms=2500, max_jitter_ms=1000)
        respx.get(f"{BASE_URL}/x").mock(side_effect=[httpx.Response(503)] * 3 + [httpx.Response(200, json={})])

        async def run() -> None:
            async with _client(retry=policy, sleep=sleeper) as client:
                await client.get("/x")

        asyncio.run(run())
        assert all(s <= 2.5 for s in sleeper.calls)
        assert sleeper.calls[2] == 2.5

    @respx.mock
    def test_retry_after_seconds_preferred(self, sleeper) -> None:
        respx.get(f"{BASE_URL}/x").mock(
            side_effect=[httpx.Response(429, headers={"Retry-After": "2"}), httpx.Response(200, json={})]
        )

        async def run() -> None:
            async with _client(retry=RetryPolicy(), sleep=sleeper, rng=random.Random(7)) as client:
                await client.get("/x")

        asyncio.run(run())
        assert 2.0 <= sleeper.calls[0] <= 3.0

    @respx.mock
    def test_retry_after_capped_at_max_delay(self, sleeper) -> None:
        respx.get(f"{BASE_URL}/x").mock(
            side_effect=[httpx.Response(503, headers={"Retry-After": "120"}), httpx.Response(200, json={})]
        )

        async def run() -> None:
            async with _client(retry=RetryPolicy(), sleep=sleeper) as client:
                await client.get("/x")

        asyncio.run(run())
        assert sleeper.calls == [30.0]

    @respx.mock
    def test_retry_after_http_date(self, sleeper) -> None:
        clock = FrozenClock(datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC))
        retry_at = format_datetime(clock.now() + timedelta(seconds=5), usegmt=True)
        respx.get(f"{BASE_URL}/x").mock(
            side_effect=[httpx.Response(503, headers={"Retry-After": retry_at}), httpx.Response(200, json={})]
        )

        async def run() -> None:
            async with _client(retry=NO_JITTER, sleep=sleeper, clock=clock) as client:
                await client.get("/x")

        asyncio.run(run())
        assert sleeper.calls == [5.0]

    @respx.mock
    def test_network_errors_are_retried(self, sleeper) -> None:
        route = respx.get(f"{BASE_URL}/x").mock(
            side_effect=[httpx.ConnectError("reset"), httpx.ReadTimeout("slow"), httpx.Response(200, json=[1])]
        )

        async def run() -> object:
            async with _client(retry=NO_JITTER, sleep=sleeper) as client:
                return await client.get("/x")

        assert asyncio.run(run()) == [1]
        assert route.call_count == 3
        assert sleeper.calls == [1.0, 2.0]

    @respx.mock
    def test_timeout_on_last_attempt_surfaces(self, sleeper) -> None:
        respx.get(f"{BASE_URL}/x").mock(side_effect=httpx.ReadTimeout("slow"))

        async def run() -> None:
            async with _client(retry=RetryPolicy(max_attempts=2), sleep=sleeper) as client:
                await client.get("/x")

        with pytest.raises(RequestTimeoutError):
            asyncio.run(run())
        assert len(sleeper.calls) == 1

    @respx.mock
    def test_body_resent_unchanged(self, sleeper) -> None:
        route = respx.post(f"{BASE_URL}/api/v1/documents/generate").mock(
            side_effect=[httpx.Response(503), httpx.Response(200, json={"jobId": "job_1"})]
        )
        body = {"templateId": "tmpl_1", "format": "pdf", "variables": {"n": 1}}

        async def run() -> None:
            async with _client(retry=RetryPolicy(), sleep=sleeper) as client:
                await client.post("/api/v1/documents/generate", body)

        asyncio.run(run())
        first, second = (call.request for call in route.calls)
        assert first.content == second.content
        assert json.loads(second.content) == body

    @respx.mock
    def test_non_retryable_status_not_retried(self, sleeper) -> None:
        route = respx.get(f"{BASE_URL}/x").mock(return_value=httpx.Response(500))

        async def run() -> None:
            async with _client(retry=RetryPolicy(), sleep=sleeper) as client:
                await client.get("/x")

        with pytest.raises(RynkoError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.status_code == 500
        assert route.call_count == 1

    @respx.mock
    def test_retries_are_logged_without_api_key(self, sleeper) -> None:
        respx.get(f"{BASE_URL}/x").mock(side_effect=[httpx.Response(503), httpx.Response(200, json={})])

        async def run() -> None:
            async with _client(retry=RetryPolicy(), sleep=sleeper) as client:
                await client.get("/x")

        with capture_logs() as logs:
            asyncio.run(run())
        retries = [entry for entry in logs if entry["event"] == "retrying request"]
        assert len(retries) == 1
        assert retries[0]["status_code"] == 503
        assert retries[0]["attempt"] == 1
        assert API_KEY not in repr(logs)
