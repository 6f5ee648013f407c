"""Per-call identity carried implicitly down to the request executor.

Endpoint methods set the caller's auth token before delegating to the
executor, which reads it back without it being threaded through every call.
Values live in a :class:`contextvars.ContextVar`, so each thread (and each
asyncio task) sees only its own context. A thread reused for another call
keeps whatever was left behind, so every ``set_*`` must be paired with
:meth:`RequestContext.clear`; :func:`request_context` does both.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Iterator, Optional

_current: ContextVar[Optional["RequestContext"]] = ContextVar("sus_request_context", default=None)


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller for the call currently executing."""

    auth_token: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    @staticmethod
    def get() -> RequestContext:
        context = _current.get()
        if context is None:
            context = RequestContext()
            _current.set(context)
        return context

    @staticmethod
    def current() -> RequestContext:
        """Read the context without installing one when none is set."""

        return _current.get() or RequestContext()

    @staticmethod
    def clear() -> Optional[RequestContext]:
        """Drop the current context, returning whatever was set."""

        context = _current.get()
        _current.set(None)
        return context

    @staticmethod
    def set_auth_token(auth_token: Optional[str]) -> None:
        _current.set(replace(RequestContext.get(), auth_token=auth_token))

    @staticmethod
    def set_ip_address(ip_address: Optional[str]) -> None:
        _current.set(replace(RequestContext.get(), ip_address=ip_address))

    @staticmethod
    def set_user_agent(user_agent: Optional[str]) -> None:
        _current.set(replace(RequestContext.get(), user_agent=user_agent))

    @staticmethod
    def is_set() -> bool:
        return _current.get() is not None


@contextmanager
def request_context(
    auth_token: Optional[str] = None,
    *,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> Iterator[RequestContext]:
    """Install a caller identity for the duration of the block, then clear it."""

    _current.set(RequestContext(auth_token=auth_token, ip_address=ip_address, user_agent=user_agent))
    try:
        yield RequestContext.get()
    finally:
        RequestContext.clear()
