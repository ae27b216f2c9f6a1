"""Bridge between click's synchronous callbacks and the async store layer."""

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

T = TypeVar("T")


def coro(command: Callable[..., Awaitable[T]]) -> Callable[..., T]:
    """Run an ``async def`` click callback on a fresh event loop.

    Apply below the click decorators so click sees a plain function::

        @click.command()
        @filter_options
        @coro
        async def count(**options) -> None: ...
    """

    @wraps(command)
    def run_command(*args: Any, **kwargs: Any) -> T:
        return asyncio.run(command(*args, **kwargs))

    return run_command
