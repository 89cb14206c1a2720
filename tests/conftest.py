"""Shared fixtures: a recording sleep and a navigator on a fake platform."""

from collections.abc import Callable
from typing import Any

import anyio
import pytest

from pagestack.config import NavigatorConfig
from pagestack.navigator import Navigator
from pagestack.testing import FakePlatform


class SleepRecorder:
    """Stand-in for ``anyio.sleep``: records delays, yields once, never waits.

    ``now`` is a virtual clock advanced by every recorded delay.
    """

    def __init__(self) -> None:
        self.delays: list[float] = []
        self.now = 0.0

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        self.now += delay
        await anyio.sleep(0)

    def clock(self) -> float:
        return self.now


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_navigator(sleep: SleepRecorder) -> Callable[..., tuple[Navigator, FakePlatform]]:
    def factory(
        max_depth: int = 10, *, concurrent_teardown: bool = True, **options: Any
    ) -> tuple[Navigator, FakePlatform]:
        platform = FakePlatform(max_depth=max_depth, concurrent_teardown=concurrent_teardown)
        config = NavigatorConfig(max_physical_depth=max_depth, **options)
        navigator = Navigator(platform, config, sleep=sleep, clock=sleep.clock)
        platform.attach(navigator)
        return navigator, platform

    return factory
