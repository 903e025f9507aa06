"""
Unit tests for the deadline race and HTTP helpers (no network: httpx.MockTransport).
Run from repo root: python -m pytest client/tests/test_transport.py -v
"""
import asyncio
import json

import httpx
import pytest

from foodsafe.transport.deadline import run_with_deadline
from foodsafe.transport.http import post_json, post_multipart


def _other_tasks():
    return {t for t in asyncio.all_tasks() if t is not asyncio.current_task()}


def test_deadline_returns_result_and_releases_timer():
    async def scenario():
        async def issue():
            await asyncio.sleep(0)
            return {"ok": True}

        result = await run_with_deadline(issue, 5.0)
        return result, _other_tasks()

    result, leftover = asyncio.run(scenario())
    assert result == {"ok": True}
    assert leftover == set()


def test_deadline_expiry_cancels_request_without_late_resolution():
    state = {"finished": False, "cancelled": False}

    async def scenario():
        async def issue():
            try:
                await asyncio.sleep(1.0)
                state["finished"] = True
            except asyncio.CancelledError:
                state["cancelled"] = True
                raise

        with pytest.raises(TimeoutError):
            await run_with_deadline(issue, 0.01)
        leftover = _other_tasks()
        await asyncio.sleep(0.05)
        return leftover

    leftover = asyncio.run(scenario())
    assert leftover == set()
    assert state == {"finished": False, "cancelled": True}


def test_deadline_propagates_request_error_and_releases_timer():
    async def scenario():
        async def issue():
            raise ConnectionError("boom")

        with pytest.raises(ConnectionError):
            await run_with_deadline(issue, 5.0)
        return _other_tasks()

    assert asyncio.run(scenario()) == set()


def test_deadline_caller_cancel_disposes_both_tasks():
    async def scenario():
        async def issue():
            await asyncio.sleep(10)

        outer = asyncio.ensure_future(run_with_deadline(issue, 10.0))
        await asyncio.sleep(0.01)
        outer.cancel()
        with pytest.raises(asyncio.CancelledError):
            await outer
        return _other_tasks()

    assert asyncio.run(scenario()) == set()


def test_caller_cancel_during_slow_request_cleanup_is_not_a_timeout():
    """Timer already fired, request still cleaning up: caller cancel wins over TimeoutError."""
    async def scenario():
        async def issue():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                await asyncio.sleep(0.1)
                raise

        outer = asyncio.ensure_future(run_with_deadline(issue, 0.01))
        await asyncio.sleep(0.05)
        outer.cancel()
        try:
            await outer
        except asyncio.CancelledError:
            outcome = "cancelled"
        except TimeoutError:
            outcome = "timeout"
        await asyncio.sleep(0.2)
        return outcome, _other_tasks()

    outcome, leftover = asyncio.run(scenario())
    assert outcome == "cancelled"
    assert leftover == set()


def test_repeated_calls_leave_no_timers():
    async def scenario():
        async def issue():
            return 1

        for _ in range(20):
            await run_with_deadline(issue, 30.0)
        return _other_tasks()

    assert asyncio.run(scenario()) == set()


def test_post_json_sends_body_and_decodes():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"hits": []})

    out = asyncio.run(post_json("http://api.test/", "/ingredients/resolve", {"ingredients_text": "rice"},
                                deadline=5, transport=httpx.MockTransport(handler)))
    assert out == {"hits": []}
    assert seen["url"] == "http://api.test/ingredients/resolve"
    assert seen["body"] == {"ingredients_text": "rice"}


def test_post_json_non_success_raises_status_error():
    def handler(request):
        return httpx.Response(503, text="maintenance")

    with pytest.raises(httpx.HTTPStatusError) as exc:
        asyncio.run(post_json("http://api.test", "/x", {}, deadline=5, transport=httpx.MockTransport(handler)))
    assert exc.value.response.status_code == 503
    assert exc.value.response.text == "maintenance"


def test_post_json_issues_exactly_one_request_on_failure():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(httpx.ConnectError):
        asyncio.run(post_json("http://api.test", "/x", {}, deadline=5, transport=httpx.MockTransport(handler)))
    assert len(calls) == 1


def test_post_multipart_uses_field_and_filename():
    seen = {}

    def handler(request):
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = request.read()
        return httpx.Response(200, json=[])

    out = asyncio.run(post_multipart("http://api.test", "/classify/resolve", "file", "photo.jpg",
                                     b"\xff\xd8jpeg", "image/jpeg", deadline=5,
                                     transport=httpx.MockTransport(handler)))
    assert out == []
    assert seen["content_type"].startswith("multipart/form-data")
    assert b'name="file"' in seen["body"]
    assert b'filename="photo.jpg"' in seen["body"]
    assert b"\xff\xd8jpeg" in seen["body"]
