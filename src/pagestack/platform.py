"""Host platform surface.

The navigator never touches the host's page stack directly. It talks to a
``Platform`` (raw open/replace/back/reset/switch-tab primitives plus a
view of the live page stack) through a ``PlatformBridge`` that applies
application overrides and normalises results.

Platform operations may be ``def`` or ``async def`` and may return a
``NavResult``, a mapping with ``succeeded``/``err_msg`` (or ``errMsg``)
keys, or ``None`` for plain success. A failure may also be raised as
``NavigationError``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from pagestack._internal.invoke import invoke
from pagestack.config import ADAPTER_OPERATIONS
from pagestack.errors import NavigationError


@dataclass(frozen=True, slots=True)
class NavResult:
    """Outcome of a navigation operation, e.g. ``NavResult(True, "ok")``."""

    succeeded: bool
    err_msg: str = "ok"

    @classmethod
    def coerce(cls, value: Any) -> NavResult:
        """Normalise a platform return value into a ``NavResult``."""
        if value is None:
            return OK
        if isinstance(value, NavResult):
            return value
        if isinstance(value, Mapping):
            err_msg = value.get("err_msg", value.get("errMsg", "ok"))
            return cls(succeeded=bool(value.get("succeeded", True)), err_msg=str(err_msg))
        msg = f"Platform operations must return NavResult, a mapping or None, got {type(value).__name__}"
        raise TypeError(msg)


OK = NavResult(succeeded=True, err_msg="ok")


class PageHandle(Protocol):
    """A live physical page. Only its route (path, no leading slash) is read."""

    route: str


class Platform(Protocol):
    """Raw navigation primitives of the host platform."""

    def open(self, url: str) -> Any: ...

    def replace(self, url: str) -> Any: ...

    def back(self, delta: int) -> Any: ...

    def reset(self, url: str) -> Any: ...

    def switch_tab(self, url: str) -> Any: ...

    def pages(self) -> Sequence[PageHandle]:
        """Return the live physical stack, newest last."""
        ...


class PlatformBridge:
    """Dispatches physical operations to the platform or its overrides.

    Two calling conventions, mirroring the host's callback styles:

    - ``attempt()`` always returns a ``NavResult``, failures included.
    - ``call()`` raises ``NavigationError`` on failure.
    """

    __slots__ = ("_operations", "_platform")

    def __init__(
        self,
        platform: Platform,
        overrides: Mapping[str, Callable[..., Any]] | None = None,
    ) -> None:
        self._platform = platform
        overrides = overrides or {}
        self._operations: dict[str, Callable[..., Any]] = {
            name: overrides.get(name) or getattr(platform, name) for name in ADAPTER_OPERATIONS
        }

    def pages(self) -> list[PageHandle]:
        return list(self._platform.pages())

    async def attempt(self, operation: str, *args: Any) -> NavResult:
        try:
            raw = await invoke(self._operations[operation], *args)
        except NavigationError as exc:
            return exc.result
        return NavResult.coerce(raw)

    async def call(self, operation: str, *args: Any) -> NavResult:
        result = await self.attempt(operation, *args)
        if not result.succeeded:
            raise NavigationError(result)
        return result
