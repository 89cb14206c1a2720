"""Pagestack exception hierarchy.

Shared across the physical layer, the back resolver and the navigator
so every module raises and catches the same types.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pagestack.platform import NavResult


class PagestackError(Exception):
    """Base for all pagestack-specific errors."""


class ConfigurationError(PagestackError):
    """Raised when navigator configuration is invalid.

    Typically raised by ``NavigatorConfig`` at construction time.
    """


class NavigationError(PagestackError):
    """A physical navigation operation failed.

    Carries the platform's ``NavResult`` so callers (and the legacy
    callback adapter) can inspect ``err_msg`` without parsing the message.
    """

    def __init__(self, result: NavResult) -> None:
        super().__init__(result.err_msg)
        self.result = result

    def __str__(self) -> str:
        return self.result.err_msg or "navigation failed"
