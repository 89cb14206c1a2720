"""Tests for pagestack.urls — route resolution and query helpers."""

from pagestack.history import Route
from pagestack.urls import append_url_param, page_path, same_path, to_absolute_path


class TestToAbsolutePath:
    def test_absolute_unchanged(self) -> None:
        assert to_absolute_path("/pages/a/a?x=1", "pages/b/b") == "/pages/a/a?x=1"

    def test_sibling(self) -> None:
        assert to_absolute_path("c", "pages/b/b") == "/pages/b/c"

    def test_parent(self) -> None:
        assert to_absolute_path("../a/a?x=1", "pages/b/b") == "/pages/a/a?x=1"

    def test_base_with_leading_slash(self) -> None:
        assert to_absolute_path("./c", "/pages/b/b") == "/pages/b/c"

    def test_empty_url_is_base_page(self) -> None:
        assert to_absolute_path("", "pages/b/b") == "/pages/b/b"

    def test_no_base(self) -> None:
        assert to_absolute_path("pages/a/a", "") == "/pages/a/a"


class TestAppendUrlParam:
    def test_no_params(self) -> None:
        assert append_url_param("/pages/a/a", None) == "/pages/a/a"
        assert append_url_param("/pages/a/a", {}) == "/pages/a/a"

    def test_first_param(self) -> None:
        assert append_url_param("/pages/a/a", {"id": 3}) == "/pages/a/a?id=3"

    def test_extra_param(self) -> None:
        assert append_url_param("/pages/a/a?id=3", {"_forcedRefresh": True}) == (
            "/pages/a/a?id=3&_forcedRefresh=true"
        )

    def test_values_are_encoded(self) -> None:
        assert append_url_param("/a", {"q": "a b&c"}) == "/a?q=a+b%26c"


class TestPaths:
    def test_page_path(self) -> None:
        assert page_path("/pages/a/a?x=1") == "/pages/a/a"
        assert page_path("/pages/a/a") == "/pages/a/a"

    def test_same_path_ignores_query(self) -> None:
        assert same_path(Route(url="/pages/a/a?id=1"), Route(url="/pages/a/a?id=2"))
        assert not same_path(Route(url="/pages/a/a"), Route(url="/pages/b/b"))
