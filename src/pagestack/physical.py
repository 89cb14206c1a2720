"""Physical page operations.

Drives the host platform's page stack without looking at the logical
history. Each successful operation is followed by a settle delay: the
host reports success before its page transition has actually finished.

Code-driven operations that tear pages down (replace, back, reset,
switch-tab) raise ``NavigationContext.active_unload`` first, so the
resulting teardown notifications are not taken for a user back gesture.

Open and the depth limit:
    An open refused with the platform's "limit exceed" error while the
    stack is full falls back to replacing the top page. The same error
    with room left on the stack is a false alarm seen on some devices
    right after a replace; the open is retried with doubling delays until
    the next delay would reach ``retry_timeout``.
"""

import logging

from pagestack._internal.types import Sleep
from pagestack.config import NavigatorConfig
from pagestack.context import NavigationContext
from pagestack.errors import NavigationError
from pagestack.platform import PageHandle, PlatformBridge
from pagestack.urls import append_url_param

logger = logging.getLogger("pagestack.physical")


class PhysicalStack:
    """History-agnostic operations on the host page stack."""

    __slots__ = ("_bridge", "_config", "_context", "_sleep")

    def __init__(
        self,
        bridge: PlatformBridge,
        config: NavigatorConfig,
        context: NavigationContext,
        sleep: Sleep,
    ) -> None:
        self._bridge = bridge
        self._config = config
        self._context = context
        self._sleep = sleep

    def pages(self) -> list[PageHandle]:
        return self._bridge.pages()

    @property
    def depth(self) -> int:
        return len(self._bridge.pages())

    def _target(self, url: str, forced: bool) -> str:
        if not forced:
            return url
        return append_url_param(url, {self._config.forced_refresh_param: True})

    async def open(self, url: str, *, forced: bool = False) -> None:
        cfg = self._config
        target = self._target(url, forced)
        retry_after = cfg.retry_after
        logger.debug("open %s", target)
        while True:
            result = await self._bridge.attempt("open", target)
            if result.succeeded:
                await self._sleep(cfg.settle_delay)
                return

            if cfg.limit_error_marker not in result.err_msg:
                raise NavigationError(result)

            if self.depth >= cfg.max_physical_depth:
                logger.debug("stack full, replacing instead of opening %s", target)
                await self.replace(url, forced=forced)
                return

            if retry_after >= cfg.retry_timeout:
                logger.error(
                    "open %s failed: %s (depth %d, longest retry interval %.3fs)",
                    target,
                    result.err_msg,
                    self.depth,
                    retry_after / 2,
                )
                raise NavigationError(result)

            logger.warning("False limit alarm opening %s, retry after %.3fs", target, retry_after)
            await self._sleep(retry_after)
            retry_after *= 2

    async def replace(self, url: str, *, forced: bool = False) -> None:
        target = self._target(url, forced)
        logger.debug("replace %s", target)
        self._context.begin_unload()
        await self._bridge.call("replace", target)
        await self._sleep(self._config.settle_delay)

    async def back(self, delta: int = 1) -> None:
        logger.debug("back %d", delta)
        self._context.begin_unload()
        await self._bridge.call("back", delta)
        await self._sleep(self._config.back_settle_delay)

    async def reset(self, url: str) -> None:
        logger.debug("reset %s", url)
        self._context.begin_unload()
        await self._bridge.call("reset", url)
        await self._sleep(self._config.settle_delay)

    async def switch_tab(self, url: str) -> None:
        logger.debug("switch_tab %s", url)
        self._context.begin_unload()
        await self._bridge.call("switch_tab", url)
        await self._sleep(self._config.settle_delay)
