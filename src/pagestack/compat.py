"""Legacy callback delivery for navigation results.

Navigation operations return a ``NavResult`` or raise ``NavigationError``.
Call sites written for the callback style can still pass ``success``,
``fail`` and ``complete`` keyword callbacks; this adapter translates the
outcome into those calls and otherwise behaves exactly like the wrapped
operation (same return value, same exception).

Usage::

    await navigator.open("/pages/detail/detail?id=3", fail=show_toast)
"""

from collections.abc import Callable
from functools import wraps
from typing import Any

from pagestack._internal.invoke import invoke
from pagestack._internal.types import AsyncOperation
from pagestack.errors import NavigationError
from pagestack.platform import NavResult


async def _notify(callback: Callable[..., Any] | None, result: NavResult) -> None:
    if callback is not None:
        await invoke(callback, result)


def support_callbacks(operation: AsyncOperation) -> AsyncOperation:
    """Accept ``success``/``fail``/``complete`` callbacks on *operation*.

    ``success`` or ``fail`` fires first depending on the outcome, then
    ``complete``. Discarded calls count as failures.
    """

    @wraps(operation)
    async def wrapper(
        *args: Any,
        success: Callable[..., Any] | None = None,
        fail: Callable[..., Any] | None = None,
        complete: Callable[..., Any] | None = None,
        **kwargs: Any,
    ) -> Any:
        try:
            result = await operation(*args, **kwargs)
        except NavigationError as exc:
            await _notify(fail, exc.result)
            await _notify(complete, exc.result)
            raise
        if isinstance(result, NavResult):
            await _notify(success if result.succeeded else fail, result)
            await _notify(complete, result)
        return result

    return wrapper
