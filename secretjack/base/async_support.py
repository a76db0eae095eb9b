"""
Async support for Secretjack.

Provides an ``async_wrap`` decorator that converts a synchronous method into
an awaitable coroutine using :func:`asyncio.to_thread`, so secrets can be
resolved from async code without blocking the event loop while the canonical
implementation stays synchronous.

Usage::

    class SecretResolver:
        def get_secret_value(self, raw_key: str) -> str | None: ...

        aget_secret_value = async_wrap(get_secret_value)

    # Then in async code:
    value = await resolver.aget_secret_value("vendor/key")
"""

from __future__ import annotations

import asyncio
import functools
from typing import Any, Callable, Coroutine, TypeVar

T = TypeVar("T")


def async_wrap(
    fn: Callable[..., T],
) -> Callable[..., Coroutine[Any, Any, T]]:
    """Return an async version of *fn* that runs it in a thread.

    The wrapper preserves the original function's signature and docstring.

    Args:
        fn: A synchronous callable to wrap.

    Returns:
        An async callable with the same parameters and return type.
    """

    @functools.wraps(fn)
    async def _wrapper(*args: Any, **kwargs: Any) -> T:
        return await asyncio.to_thread(fn, *args, **kwargs)

    return _wrapper
