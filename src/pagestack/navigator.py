"""Navigator — unbounded page history on a depth-capped host stack.

The host platform keeps at most ``max_physical_depth`` pages open. The
navigator keeps the full logical history itself and maps it onto the
physical stack:

- Opening from the second-to-last slot first swaps the current page for
  a blank curtain page, so later back navigation never flashes stale
  content. Opening on a full stack replaces the top page.
- Going back reconciles logical and physical depth (see
  ``pagestack.resolver``), reloading evicted pages and restoring
  overwritten ones through the application's restore handler.
- The host must call ``on_page_unload()`` once per torn-down page. Pages
  torn down by a user back gesture are told apart from code-driven
  teardown through ``NavigationContext.active_unload``.

Usage::

    from pagestack import Navigator, NavigatorConfig

    navigator = Navigator(platform, NavigatorConfig(max_physical_depth=10))

    await navigator.open("/pages/detail/detail?id=3")
    await navigator.back()

``open``, ``reset`` and ``switch_tab`` share the ``navigate`` lock in
discard mode: a call arriving while another one runs returns
``DISCARDED`` without navigating. ``replace`` and ``back`` are not
locked. All public operations accept ``success``/``fail``/``complete``
callbacks (see ``pagestack.compat``).
"""

import logging
from collections.abc import Iterable
from dataclasses import replace as replace_config
from typing import Any

import anyio

from pagestack._internal.types import Clock, Sleep
from pagestack.compat import support_callbacks
from pagestack.config import NavigatorConfig
from pagestack.context import NAVIGATE_LOCK, NavigationContext
from pagestack.history import History, Route
from pagestack.mutex import make_mutex
from pagestack.physical import PhysicalStack
from pagestack.platform import OK, NavResult, Platform, PlatformBridge
from pagestack.resolver import BackResolver
from pagestack.urls import to_absolute_path

logger = logging.getLogger("pagestack.navigator")

DISCARDED = NavResult(succeeded=False, err_msg="discarded by noConcurrent strategy")


class Navigator:
    """Navigation façade over a ``Platform``.

    Args:
        platform: The host's raw navigation primitives.
        config: Navigator configuration; defaults to ``NavigatorConfig()``.
        context: Coordination state; share one to make several navigators
            exclude each other.
        root_url: Url of the history root. Defaults to the bottom page
            currently on the platform's stack.
        sleep: Awaitable used for settle delays and retry backoff.
        clock: Time source for the teardown settle window.
    """

    __slots__ = (
        "_clock",
        "_config",
        "_context",
        "_history",
        "_physical",
        "_platform",
        "_resolver",
        "_sleep",
        "back",
        "open",
        "replace",
        "reset",
        "switch_tab",
    )

    def __init__(
        self,
        platform: Platform,
        config: NavigatorConfig | None = None,
        *,
        context: NavigationContext | None = None,
        root_url: str | None = None,
        sleep: Sleep = anyio.sleep,
        clock: Clock = anyio.current_time,
    ) -> None:
        self._platform = platform
        self._context = context or NavigationContext()
        self._sleep = sleep
        self._clock = clock

        if root_url is None:
            pages = list(platform.pages())
            root_url = to_absolute_path("", pages[0].route) if pages else ""
        self._history = History([Route(url=root_url)])
        self._apply(config or NavigatorConfig())

        navigate = make_mutex(
            namespace=self._context.locks,
            mutex_id=NAVIGATE_LOCK,
            discard_result=DISCARDED,
        )
        self.open = support_callbacks(navigate(self._open))
        self.replace = support_callbacks(self._replace)
        self.back = support_callbacks(self._back)
        self.reset = support_callbacks(navigate(self._reset))
        self.switch_tab = support_callbacks(navigate(self._switch_tab))

    # -- Configuration --

    def _apply(self, config: NavigatorConfig) -> None:
        self._config = config
        self._history.correct_level = config.correct_level
        bridge = PlatformBridge(self._platform, config.adapter_overrides)
        self._physical = PhysicalStack(bridge, config, self._context, self._sleep)
        self._resolver = BackResolver(self._history, self._physical, config)

    def configure(self, **options: Any) -> NavigatorConfig:
        """Override configuration fields, e.g. ``configure(enable_curtain=False)``."""
        self._apply(replace_config(self._config, **options))
        return self._config

    @property
    def config(self) -> NavigatorConfig:
        return self._config

    @property
    def context(self) -> NavigationContext:
        return self._context

    @property
    def history(self) -> tuple[Route, ...]:
        """The full logical history, root first."""
        return self._history.routes

    # -- Operations --

    def _resolve(self, url: str) -> tuple[str, Any]:
        pages = self._physical.pages()
        current = pages[-1] if pages else None
        return to_absolute_path(url, current.route if current is not None else ""), current

    def _flag_reuse(self, incoming: Route, existing: Iterable[Route]) -> None:
        """Taint entries whose page instance *incoming* is about to reuse."""
        reused = self._config.instance_reuse
        if reused is None:
            return
        for route in existing:
            if reused(route, incoming):
                route.tainted = True

    async def _open(self, url: str) -> NavResult:
        logger.debug("open: %s", url)
        cfg = self._config
        target, current = self._resolve(url)
        route = Route(url=target)
        self._flag_reuse(route, self._history.routes)
        depth = self._physical.depth

        if cfg.enable_curtain and depth == cfg.max_physical_depth - 1:
            self._history.open(route, page=current)
            await self._physical.replace(cfg.curtain_page_url)
            await self._physical.open(target)
        elif depth < cfg.max_physical_depth:
            self._history.open(route)
            await self._physical.open(target)
        else:
            self._history.open(route, page=current)
            await self._physical.replace(target)
        return OK

    async def _replace(self, url: str) -> NavResult:
        logger.debug("replace: %s", url)
        target, _ = self._resolve(url)
        route = Route(url=target)
        self._flag_reuse(route, self._history.routes[:-1])
        self._history.replace(route)
        await self._physical.replace(target)
        return OK

    async def _back(self, delta: int = 1) -> NavResult:
        logger.debug("back: %d", delta)
        await self._resolver.back(delta, sys_back=False)
        return OK

    async def _reset(self, url: str) -> NavResult:
        logger.debug("reset: %s", url)
        target, _ = self._resolve(url)
        await self._physical.reset(target)
        self._history.reset(Route(url=target))
        return OK

    async def _switch_tab(self, url: str) -> NavResult:
        logger.debug("switch_tab: %s", url)
        target, _ = self._resolve(url)
        await self._physical.switch_tab(target)
        self._history.reset(Route(url=target))
        return OK

    # -- Page lifecycle --

    async def on_page_unload(self) -> None:
        """Page teardown notification; call once per destroyed page.

        Returns at once for pages torn down by code-driven navigation. One
        reset or switch-tab can tear down several pages, so every
        notification within ``unload_settle_delay`` of the first counts.
        """
        if self._context.claim_unload(self._clock(), self._config.unload_settle_delay):
            return

        logger.debug("system back")
        await self._resolver.back(1, sys_back=True)
