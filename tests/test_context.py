"""Tests for per-call identity propagation."""

import threading

import pytest

from sus_client.clients.context import RequestContext, request_context


def test_get_creates_empty_context_lazily() -> None:
    assert not RequestContext.is_set()

    context = RequestContext.get()

    assert context.auth_token is None
    assert RequestContext.is_set()


def test_set_and_clear_auth_token() -> None:
    RequestContext.set_auth_token("abc")
    assert RequestContext.get().auth_token == "abc"

    previous = RequestContext.clear()

    assert previous is not None and previous.auth_token == "abc"
    assert not RequestContext.is_set()
    assert RequestContext.get().auth_token is None


def test_setters_keep_other_fields() -> None:
    RequestContext.set_auth_token("abc")
    RequestContext.set_ip_address("10.0.0.1")
    RequestContext.set_user_agent("shop-frontend")

    context = RequestContext.get()
    assert (context.auth_token, context.ip_address, context.user_agent) == ("abc", "10.0.0.1", "shop-frontend")


def test_request_context_clears_on_error() -> None:
    with pytest.raises(RuntimeError):
        with request_context("abc", ip_address="10.0.0.1") as context:
            assert context.auth_token == "abc"
            assert RequestContext.get().ip_address == "10.0.0.1"
            raise RuntimeError("boom")

    assert not RequestContext.is_set()


def test_auth_token_is_not_visible_across_threads() -> None:
    ready = threading.Barrier(2)
    seen: dict[str, str | None] = {}

    def worker(name: str) -> None:
        with request_context(f"token-{name}"):
            ready.wait()
            seen[name] = RequestContext.get().auth_token
            ready.wait()

    threads = [threading.Thread(target=worker, args=(name,)) for name in ("a", "b")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert seen == {"a": "token-a", "b": "token-b"}
    assert RequestContext.get().auth_token is None
