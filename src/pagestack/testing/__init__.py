"""Test utilities for applications built on pagestack.

Provides an in-memory host platform with a depth-capped page stack::

    from pagestack.testing import FakePlatform
"""

from pagestack.testing.platform import LIMIT_EXCEEDED, FakePage, FakePlatform

__all__ = [
    "LIMIT_EXCEEDED",
    "FakePage",
    "FakePlatform",
]
