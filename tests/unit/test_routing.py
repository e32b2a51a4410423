"""
Unit tests for route resolution.
"""

import pytest

from statichttpd.http.routing import resolve_route, strip_query


class TestStripQuery:
    """Tests for strip_query."""

    def test_no_query(self):
        assert strip_query("/about") == "/about"

    def test_query_removed(self):
        assert strip_query("/search?q=1&page=2") == "/search"

    def test_cut_at_first_question_mark(self):
        """Everything after the first '?' is query, including more '?'."""
        assert strip_query("/a?b?c") == "/a"

    def test_empty_query(self):
        assert strip_query("/about?") == "/about"

    def test_empty_route(self):
        assert strip_query("") == ""


class TestResolveRoute:
    """Tests for resolve_route."""

    @pytest.mark.parametrize("route,expected", [
        ("/", "htdocs/index.html"),
        ("/index.html", "htdocs/index.html"),
        ("/about", "htdocs/about.html"),
        ("/about?x=1", "htdocs/about.html"),
        ("/docs/", "htdocs/docs/index.html"),
        ("/docs/?page=2", "htdocs/docs/index.html"),
        ("/css/site.css", "htdocs/css/site.css"),
        ("/img/logo.png", "htdocs/img/logo.png"),
        ("/archive.tar.gz", "htdocs/archive.tar.gz"),
    ])
    def test_resolution_table(self, route, expected):
        assert resolve_route(route) == expected

    def test_empty_route(self):
        """A malformed request line still maps to a path (which won't exist)."""
        assert resolve_route("") == "htdocs.html"

    def test_query_only(self):
        assert resolve_route("?x=1") == "htdocs.html"

    def test_dot_in_directory_not_an_extension(self):
        """Only the last path component decides whether '.html' is added."""
        assert resolve_route("/v1.2/readme") == "htdocs/v1.2/readme.html"

    def test_hidden_file_gets_default_extension(self):
        assert resolve_route("/.profile") == "htdocs/.profile.html"

    def test_parent_segments_kept_literally(self):
        """No normalization: '..' passes straight through."""
        assert resolve_route("/../secret") == "htdocs/../secret.html"

    def test_route_without_leading_slash(self):
        """The root is concatenated verbatim, no separator is inserted."""
        assert resolve_route("about") == "htdocsabout.html"

    def test_custom_root_and_defaults(self):
        path = resolve_route(
            "/docs/",
            document_root="/srv/www",
            index_file="home.htm",
            default_extension=".htm",
        )
        assert path == "/srv/www/docs/home.htm"

    def test_custom_default_extension(self):
        assert resolve_route("/about", default_extension=".htm") == "htdocs/about.htm"
