"""Logical navigation history.

The host platform caps its page stack, so the navigator keeps the full
history itself. ``History`` is the source of truth for depth: its length
only changes through ``open``, ``back`` and ``reset`` and is never read
back from the physical stack.

Saved pages:
    Near the depth cap an outgoing page's physical slot is about to be
    reused, so a handle to it is saved on its logical entry. Only the two
    entries just below the top keep their saved page; deeper ones are
    dropped on every open.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

# Saved pages kept below the top entry
SAVED_PAGE_WINDOW = 2


@dataclass(slots=True)
class Route:
    """A logical history entry.

    Attributes:
        url: Absolute page path plus query string.
        tainted: The page instance was reused (and its data overwritten)
            by a deeper entry; set by the navigator.
        saved_page: Opaque handle to the physical page captured before
            its slot was reused. Only the restore handler looks inside.
    """

    url: str
    tainted: bool = False
    saved_page: Any = None


class History:
    """Ordered logical routes, index 0 being the app root.

    Never empty: ``back`` stops at the root.
    """

    __slots__ = ("_routes", "correct_level")

    def __init__(self, routes: Iterable[Route] = (), *, correct_level: int = 8) -> None:
        self._routes: list[Route] = list(routes) or [Route(url="")]
        self.correct_level = correct_level

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"History({[route.url for route in self._routes]!r})"

    @property
    def length(self) -> int:
        return len(self._routes)

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    @property
    def top(self) -> Route:
        return self._routes[-1]

    def open(self, route: Route, page: Any = None) -> Route:
        """Push *route*.

        Once the history has reached the correction level, *page* (the
        physical page being pushed off) is saved on the previous top.
        """
        reached = len(self._routes) >= self.correct_level
        self._routes.append(route)
        if page is not None and reached:
            self.save_page(len(self._routes) - 2, page)
        for stale in self._routes[: -SAVED_PAGE_WINDOW - 1]:
            stale.saved_page = None
        return route

    def replace(self, route: Route) -> Route:
        """Overwrite the top entry."""
        self._routes[-1] = route
        return route

    def reset(self, route: Route) -> Route:
        """Drop everything and start over from *route*."""
        self._routes = [route]
        return route

    def save_page(self, index: int, page: Any) -> bool:
        """Record *page* on the entry at *index*.

        Returns False (and saves nothing) for out-of-range indices and for
        the top entry, whose page is still live.
        """
        if not 0 <= index < len(self._routes) - 1:
            return False
        self._routes[index].saved_page = page
        return True

    def back(self, delta: int = 1) -> Route:
        """Pop *delta* entries (at least one, never the root); return the new top."""
        delta = max(1, delta)
        keep = max(1, len(self._routes) - delta)
        del self._routes[keep:]
        return self._routes[-1]
