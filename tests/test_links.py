"""Link resolution and scope filter tests."""

import pytest

from doccrawler.links import (
    EXCLUDE_PATTERNS,
    get_base_path,
    is_same_origin,
    origin_of,
    resolve_url,
    should_follow,
)

ORIGIN = "https://example.com"


def test_origin_of():
    assert origin_of("https://example.com:8443/docs/a?x=1") == "https://example.com:8443"


@pytest.mark.parametrize("url,expected", [
    ("https://example.com/docs/a", "/docs"),
    ("https://example.com/docs/", "/docs"),
    ("https://example.com/", ""),
    ("https://example.com", ""),
])
def test_get_base_path(url, expected):
    assert get_base_path(url) == expected


def test_resolve_absolute_strips_fragment():
    assert resolve_url("https://other.org/x#top", ORIGIN, "/docs") == "https://other.org/x"


def test_resolve_root_relative():
    assert resolve_url("/docs/b#section", ORIGIN, "/docs") == "https://example.com/docs/b"


def test_resolve_relative_against_base_directory():
    assert resolve_url("guide/intro", ORIGIN, "/docs") == "https://example.com/docs/guide/intro"
    assert resolve_url("../api", ORIGIN, "/docs/v2") == "https://example.com/docs/api"


def test_resolve_relative_at_root():
    assert resolve_url("intro", ORIGIN, "") == "https://example.com/intro"


def test_resolve_protocol_relative_is_not_root_relative():
    assert resolve_url("//cdn.example.net/lib.js", ORIGIN, "/docs") == "https://cdn.example.net/lib.js"


@pytest.mark.parametrize("href", ["", "   "])
def test_resolve_blank_returns_none(href):
    assert resolve_url(href, ORIGIN, "/docs") is None


def test_resolve_fragment_only_points_at_base_directory():
    assert resolve_url("#install", ORIGIN, "/docs") == "https://example.com/docs/"


def test_resolve_malformed_returns_none():
    assert resolve_url("http://[::1", ORIGIN, "/docs") is None
    assert resolve_url("http://example.com:notaport/x", ORIGIN, "/docs") is None


def test_same_origin_is_exact():
    assert is_same_origin("https://example.com/docs", ORIGIN)
    assert not is_same_origin("https://example.com.evil.net/docs", ORIGIN)
    assert not is_same_origin("http://example.com/docs", ORIGIN)


def test_should_follow_in_scope():
    assert should_follow("https://example.com/docs/b", ORIGIN, set())


def test_should_follow_rejects_none_and_cross_origin():
    assert not should_follow(None, ORIGIN, set())
    assert not should_follow("https://other.org/docs/b", ORIGIN, set())


def test_should_follow_rejects_visited():
    assert not should_follow("https://example.com/docs/b", ORIGIN, {"https://example.com/docs/b"})


@pytest.mark.parametrize("pattern", EXCLUDE_PATTERNS)
def test_should_follow_rejects_denylist(pattern):
    url = f"https://example.com/x{pattern}y"
    assert not should_follow(url, ORIGIN, set())


def test_login_prefix_matches_substring():
    assert not should_follow("https://example.com/login-help", ORIGIN, set())
