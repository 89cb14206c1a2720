"""Navigator configuration.

NavigatorConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pagestack._internal.types import RestoreHandler, ReusePredicate
from pagestack.errors import ConfigurationError

# Physical operations an application may override
ADAPTER_OPERATIONS = frozenset({"open", "replace", "back", "reset", "switch_tab"})


@dataclass(frozen=True, slots=True)
class NavigatorConfig:
    """Navigator configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = NavigatorConfig(max_physical_depth=5, enable_curtain=False)
    """

    # Curtain technique: blank transitional page near the depth cap
    enable_curtain: bool = True
    curtain_page_url: str = "/pages/curtain/curtain"

    # Page data restore
    enable_tainted_restore: bool = True
    page_restore_handler: RestoreHandler | None = None
    instance_reuse: ReusePredicate | None = None  # None = platform never reuses instances

    # Host platform
    max_physical_depth: int = 10
    adapter_overrides: Mapping[str, Callable[..., Any]] = field(default_factory=dict)
    platform_os: str = "ios"  # iOS back animations settle three times slower

    # Timing (seconds)
    settle_delay: float = 0.3
    unload_settle_delay: float = 0.3
    retry_after: float = 0.3
    retry_timeout: float = 2.0

    # Platform conventions
    limit_error_marker: str = "limit exceed"
    forced_refresh_param: str = "_forcedRefresh"

    def __post_init__(self) -> None:
        if self.max_physical_depth < 2:
            msg = f"max_physical_depth must be at least 2, got {self.max_physical_depth}"
            raise ConfigurationError(msg)
        unknown = set(self.adapter_overrides) - ADAPTER_OPERATIONS
        if unknown:
            msg = (
                f"Unknown adapter override(s): {', '.join(sorted(unknown))}. "
                f"Expected any of: {', '.join(sorted(ADAPTER_OPERATIONS))}"
            )
            raise ConfigurationError(msg)

    @property
    def correct_level(self) -> int:
        """History depth at which pages start being saved before eviction."""
        return self.max_physical_depth - 2

    @property
    def back_settle_delay(self) -> float:
        if self.platform_os == "ios":
            return self.settle_delay * 3
        return self.settle_delay
