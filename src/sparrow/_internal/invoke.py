"""Invoke helpers — call sync or async callables uniformly.

Handlers and lifecycle hooks can be ``def`` or ``async def``. Any code
that calls a user-provided callable goes through :func:`invoke` so the
sync/async check lives in exactly one place.
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable.

    ::

        def timing(request, response, next):
            next()

        async def load_user(request, response, next):
            request.locals["user"] = await users.get(request.query.get("id"))
            await next()
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
