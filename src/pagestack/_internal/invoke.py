"""Invoke helpers — call sync or async callables uniformly.

Platform operations, adapter overrides, restore handlers and legacy
callbacks can all be ``def`` or ``async def``. Any code that calls one of
them goes through this helper so the sync/async check lives in exactly
one place.

Usage::

    from pagestack._internal.invoke import invoke

    result = await invoke(handler, route, context)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it's awaitable.

    Works with both sync and async callables::

        def restore(route, context):
            return {"succeeded": True}

        async def restore(route, context):
            await reload_data(route.url)
            return {"succeeded": True}
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
