"""Back navigation against a depth-capped physical stack.

The logical history may be deeper than the physical stack (pages were
replaced near the cap) or shallower (the curtain page sits in a slot of
its own). After popping the history, the resolver compares the logical
length ``L`` with the physical depth ``P`` and reconciles them:

- ``L < P``: pop ``P - L`` physical pages. If that uncovers the curtain
  page, replace it with the target and run the lost-page restore;
  otherwise restore a tainted target.
- ``L == P``: a code-driven back (the platform has not moved) or a
  curtain on top gets the target loaded over it, followed by the
  lost-page restore. A user back already landed on the right page; only
  a tainted target needs restoring.
- ``L > P``: the target was evicted. Load it on top (pushed after a user
  back, replaced over the current page otherwise) and run the lost-page
  restore.

For a user back the page being torn down is still reported by the
platform, so ``P`` is taken one lower.

The curtain can only ever occupy the second-to-last slot of a full stack,
so landing on it is read from the logical length alone.
"""

import logging
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pagestack._internal.invoke import invoke
from pagestack.config import NavigatorConfig
from pagestack.history import History, Route
from pagestack.physical import PhysicalStack

logger = logging.getLogger("pagestack.resolver")


class RestoreContext(StrEnum):
    """Why a page's data needs restoring, passed to the restore handler."""

    TAINTED = "tainted"  # instance reused by a deeper same-path page; UI state intact
    UNLOADED = "unloaded"  # evicted near the depth cap; page freshly reloaded


def _succeeded(result: Any) -> bool:
    if result is None:
        return False
    if isinstance(result, Mapping):
        return bool(result.get("succeeded"))
    return bool(getattr(result, "succeeded", False))


class BackResolver:
    """Computes and performs the physical steps of a back navigation."""

    __slots__ = ("_config", "_history", "_physical")

    def __init__(self, history: History, physical: PhysicalStack, config: NavigatorConfig) -> None:
        self._history = history
        self._physical = physical
        self._config = config

    async def back(self, delta: int = 1, *, sys_back: bool = False) -> Route:
        """Go back *delta* entries and return the target route."""
        cfg = self._config
        history = self._history
        target = history.back(delta)
        logical = history.length
        physical = self._physical.depth - (1 if sys_back else 0)

        logger.debug(
            "back delta=%d sys_back=%s logical=%d physical=%d target=%s",
            delta,
            sys_back,
            logical,
            physical,
            target.url,
        )

        on_curtain = cfg.enable_curtain and logical == cfg.max_physical_depth - 1
        tainted = cfg.enable_tainted_restore and target.tainted

        if logical < physical:
            await self._physical.back(physical - logical)
            if on_curtain:
                await self._physical.replace(target.url, forced=True)
                await self.restore_lost(target)
            elif tainted:
                await self.restore_tainted(target)
        elif logical == physical:
            if not sys_back or on_curtain:
                await self._physical.replace(target.url, forced=True)
                await self.restore_lost(target)
            elif tainted:
                await self.restore_tainted(target)
        else:
            if sys_back:
                await self._physical.open(target.url, forced=True)
            else:
                await self._physical.replace(target.url, forced=True)
            await self.restore_lost(target)
        return target

    async def _run_handler(self, route: Route, context: RestoreContext) -> bool:
        handler = self._config.page_restore_handler
        if handler is None:
            return False
        try:
            return _succeeded(await invoke(handler, route, context))
        except Exception:
            logger.exception("Page restore handler failed for %s (%s)", route.url, context)
            return False

    async def restore_tainted(self, route: Route) -> None:
        """Restore data overwritten by a reused instance, reloading as a fallback."""
        if not await self._run_handler(route, RestoreContext.TAINTED):
            logger.debug("tainted restore fell back to reload: %s", route.url)
            await self._physical.replace(route.url, forced=True)
        route.tainted = False

    async def restore_lost(self, route: Route) -> None:
        """Give the application a chance to refill a reloaded page."""
        await self._run_handler(route, RestoreContext.UNLOADED)
        route.tainted = False
