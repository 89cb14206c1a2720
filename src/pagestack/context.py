"""Coordination state shared by the navigation operations.

Provides:
- ``locks``: the ``MutexNamespace`` holding the ``navigate`` lock that
  open, reset and switch-tab share.
- ``active_unload``: true while a code-driven navigation may tear pages
  down, so page teardown notifications are not mistaken for the user's
  back gesture.
- ``unload_deadline``: end of the settle window opened by the first
  teardown notification after a code-driven navigation. Later
  notifications inside the window are still code-driven; the first one
  past it clears ``active_unload``.

A ``Navigator`` creates its own context unless one is injected. Inject
the same context into several navigators (or other mutex operations)
when they must exclude each other.
"""

from dataclasses import dataclass, field

from pagestack.mutex import MutexNamespace

NAVIGATE_LOCK = "navigate"


@dataclass(slots=True)
class NavigationContext:
    """Mutable coordination state owned by one navigator (or shared)."""

    locks: MutexNamespace = field(default_factory=MutexNamespace)
    active_unload: bool = False
    unload_deadline: float | None = None

    def begin_unload(self) -> None:
        """Mark the pages about to be torn down as code-driven."""
        self.active_unload = True
        self.unload_deadline = None

    def unload_pending(self, now: float) -> bool:
        """Whether a teardown notification at *now* is still code-driven."""
        if not self.active_unload:
            return False
        return self.unload_deadline is None or now < self.unload_deadline

    def claim_unload(self, now: float, settle: float) -> bool:
        """Account a teardown notification at *now* to code-driven navigation.

        The first claim opens a window of *settle* seconds. Returns False,
        clearing ``active_unload``, once the window has closed.
        """
        if not self.unload_pending(now):
            self.active_unload = False
            self.unload_deadline = None
            return False
        if self.unload_deadline is None:
            self.unload_deadline = now + settle
        return True
