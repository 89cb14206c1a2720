"""In-memory host platform for tests.

Behaves like a depth-capped host page stack:

- ``open`` on a full stack fails with a "limit exceed" result.
- Every call suspends once before acting, like a real platform call.
- Pages torn down by replace/back/reset/switch-tab are reported to the
  attached navigator's ``on_page_unload``, one call per page. Calls run
  concurrently, or one after another with ``concurrent_teardown=False``.
- ``user_back()`` plays the user's back gesture: the top page is
  reported torn down while it is still listed in ``pages()``, and leaves
  the stack once the notification is handled or the next operation runs.

Usage::

    platform = FakePlatform(max_depth=5)
    navigator = Navigator(platform, NavigatorConfig(max_physical_depth=5))
    platform.attach(navigator)

    await navigator.open("/pages/a/a")
    assert platform.urls == ["/pages/index/index", "/pages/a/a"]
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import anyio

from pagestack.platform import OK, NavResult
from pagestack.urls import page_path

LIMIT_EXCEEDED = "navigateTo:fail webview count limit exceed"


@dataclass(slots=True, eq=False)
class FakePage:
    """A live page: its route (no leading slash) and the url it was opened with."""

    route: str
    url: str

    @classmethod
    def from_url(cls, url: str) -> FakePage:
        return cls(route=page_path(url).lstrip("/"), url=url)


class FakePlatform:
    __test__ = False  # Tell pytest this is not a test class
    """Depth-capped in-memory page stack implementing ``Platform``."""

    def __init__(
        self,
        root: str = "/pages/index/index",
        *,
        max_depth: int = 10,
        concurrent_teardown: bool = True,
    ) -> None:
        self.max_depth = max_depth
        self.concurrent_teardown = concurrent_teardown
        self.stack: list[FakePage] = [FakePage.from_url(root)]
        self.calls: list[tuple[str, Any]] = []
        self.unload_listener: Callable[[], Awaitable[Any]] | None = None
        self._failures: defaultdict[str, deque[NavResult]] = defaultdict(deque)
        self._departing: FakePage | None = None

    def attach(self, navigator: Any) -> None:
        """Report torn-down pages to *navigator*."""
        self.unload_listener = navigator.on_page_unload

    def fail_next(self, operation: str, err_msg: str, *, times: int = 1) -> None:
        """Make the next *times* calls of *operation* fail with *err_msg*."""
        for _ in range(times):
            self._failures[operation].append(NavResult(succeeded=False, err_msg=err_msg))

    @property
    def urls(self) -> list[str]:
        return [page.url for page in self.stack]

    def pages(self) -> list[FakePage]:
        return list(self.stack)

    def _unmount_departing(self) -> None:
        departing, self._departing = self._departing, None
        if departing is not None and departing in self.stack:
            self.stack.remove(departing)

    async def _begin(self, operation: str, argument: Any) -> NavResult | None:
        await anyio.sleep(0)
        self._unmount_departing()
        self.calls.append((operation, argument))
        queued = self._failures[operation]
        if queued:
            return queued.popleft()
        return None

    async def _teardown(self, count: int) -> None:
        listener = self.unload_listener
        if listener is None or count <= 0:
            return
        if not self.concurrent_teardown:
            for _ in range(count):
                await listener()
            return
        async with anyio.create_task_group() as tg:
            for _ in range(count):
                tg.start_soon(listener)

    # -- Platform --

    async def open(self, url: str) -> NavResult:
        failure = await self._begin("open", url)
        if failure is not None:
            return failure
        if len(self.stack) >= self.max_depth:
            return NavResult(succeeded=False, err_msg=LIMIT_EXCEEDED)
        self.stack.append(FakePage.from_url(url))
        return OK

    async def replace(self, url: str) -> NavResult:
        failure = await self._begin("replace", url)
        if failure is not None:
            return failure
        self.stack[-1] = FakePage.from_url(url)
        await self._teardown(1)
        return OK

    async def back(self, delta: int) -> NavResult:
        failure = await self._begin("back", delta)
        if failure is not None:
            return failure
        popped = min(max(1, delta), len(self.stack) - 1)
        if popped:
            del self.stack[-popped:]
        await self._teardown(popped)
        return OK

    async def reset(self, url: str) -> NavResult:
        failure = await self._begin("reset", url)
        if failure is not None:
            return failure
        torn_down = len(self.stack)
        self.stack = [FakePage.from_url(url)]
        await self._teardown(torn_down)
        return OK

    async def switch_tab(self, url: str) -> NavResult:
        failure = await self._begin("switch_tab", url)
        if failure is not None:
            return failure
        torn_down = len(self.stack)
        self.stack = [FakePage.from_url(url)]
        await self._teardown(torn_down)
        return OK

    # -- User gestures --

    async def user_back(self) -> None:
        """Play the user's back gesture on the top page."""
        if len(self.stack) <= 1:
            return
        self._departing = self.stack[-1]
        self.calls.append(("user_back", 1))
        try:
            if self.unload_listener is not None:
                await self.unload_listener()
        finally:
            self._unmount_departing()
