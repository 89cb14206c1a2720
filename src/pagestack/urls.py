"""URL helpers for page routes.

Page routes are slash-separated paths with an optional query string,
e.g. ``/pages/detail/detail?id=3``. Host platforms report the current
page's route without the leading slash (``pages/detail/detail``).

Usage::

    from pagestack.urls import append_url_param, to_absolute_path

    to_absolute_path("../list/list?tab=2", "pages/detail/detail")
    # "/pages/list/list?tab=2"

    append_url_param("/pages/a/a?x=1", {"_forcedRefresh": True})
    # "/pages/a/a?x=1&_forcedRefresh=true"
"""

import posixpath
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode


def _split(url: str) -> tuple[str, str]:
    path, sep, query = url.partition("?")
    return path, sep + query


def page_path(url: str) -> str:
    """Return the path part of *url*, without query string."""
    return _split(url)[0]


def to_absolute_path(url: str, base_route: str = "") -> str:
    """Resolve *url* against the page route *base_route*.

    Absolute urls are returned unchanged. Relative ones are resolved
    against the directory of the base page::

        >>> to_absolute_path("/pages/a/a", "pages/b/b")
        '/pages/a/a'
        >>> to_absolute_path("c?x=1", "pages/b/b")
        '/pages/b/c?x=1'
        >>> to_absolute_path("../a/a", "pages/b/b")
        '/pages/a/a'
    """
    if url.startswith("/"):
        return url
    base = "/" + base_route.lstrip("/")
    path, query = _split(url)
    if not path:
        return base + query
    resolved = posixpath.normpath(posixpath.join(posixpath.dirname(base), path))
    return resolved + query


def _format_value(value: Any) -> str:
    if value is True:
        return "true"
    if value is False:
        return "false"
    return str(value)


def append_url_param(url: str, params: Mapping[str, Any] | None = None) -> str:
    """Append query parameters to *url*.

    ``None`` or empty *params* returns *url* unchanged. Booleans are
    written as ``true``/``false``.
    """
    if not params:
        return url
    encoded = urlencode({key: _format_value(value) for key, value in params.items()})
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{encoded}"


def same_path(existing: Any, incoming: Any) -> bool:
    """Instance-reuse predicate: both routes point at the same page path.

    Suitable as ``NavigatorConfig.instance_reuse`` on platforms that keep
    a single page instance per page path.
    """
    return page_path(existing.url) == page_path(incoming.url)
