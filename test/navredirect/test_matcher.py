import logging

import pytest

from navredirect import matcher
from navredirect.matcher import MatchType


@pytest.mark.parametrize(
    "pattern,regex",
    [
        ("abc", "abc"),
        ("*", ".*"),
        ("a?c", "a.c"),
        ("https://*.example.com/*", r"https://.*\.example\.com/.*"),
        ("a+b(c)[d]{e}|f^g$h\\i", r"a\+b\(c\)\[d\]\{e\}\|f\^g\$h\\i"),
    ],
)
def test_wildcard_to_regex(pattern, regex):
    assert matcher.wildcard_to_regex(pattern) == regex


class TestContains:
    def test_simple(self):
        m = matcher.compile(MatchType.CONTAINS, "signin.aws.amazon.com/saml")
        assert m("https://signin.aws.amazon.com/saml?x=1")
        assert not m("https://signin.aws.amazon.com/oauth")

    def test_case_insensitive(self):
        assert matcher.compile(MatchType.CONTAINS, "SIGNIN")("https://signin.example.com/")
        assert matcher.compile(MatchType.CONTAINS, "signin")("HTTPS://SIGNIN.EXAMPLE.COM/")

    def test_no_special_characters(self):
        m = matcher.compile(MatchType.CONTAINS, "a.*b")
        assert not m("https://axxb.example.com/")
        assert m("https://example.com/a.*b")


class TestWildcard:
    @pytest.mark.parametrize(
        "url,matches",
        [
            ("https://docs.example.com/path", True),
            ("https://DOCS.EXAMPLE.COM/PATH", True),
            ("https://a.b.example.com/", True),
            ("https://example.com/path", False),
            ("http://evil.com/https://x.example.com/", False),
            ("https://docs.example.com", False),
            ("https://docsXexample.com/path", False),
        ],
    )
    def test_subdomain(self, url, matches):
        m = matcher.wildcard_to_matcher("https://*.example.com/*")
        assert m(url) is matches

    def test_anchored(self):
        m = matcher.compile(MatchType.WILDCARD, "example.com")
        assert not m("https://example.com/")
        assert m("EXAMPLE.com")

    def test_question_mark(self):
        m = matcher.compile(MatchType.WILDCARD, "https://example.com/?")
        assert m("https://example.com/a")
        assert not m("https://example.com/")
        assert not m("https://example.com/ab")

    def test_star_matches_empty(self):
        m = matcher.compile(MatchType.WILDCARD, "https://example.com/*")
        assert m("https://example.com/")

    def test_literal_metacharacters(self):
        m = matcher.compile(MatchType.WILDCARD, "https://example.com/a+b?(x)")
        assert m("https://example.com/a+b1(x)")
        assert not m("https://example.com/aab1x")


class TestRegex:
    def test_simple(self):
        m = matcher.compile(
            MatchType.REGEX, r"^https://legacy\.example\.com/dashboard"
        )
        assert m("https://legacy.example.com/dashboard/x")
        assert not m("https://new.example.com/dashboard/x")

    def test_unanchored(self):
        m = matcher.compile(MatchType.REGEX, r"dash\w+")
        assert m("https://example.com/DASHBOARD")

    def test_invalid(self, caplog):
        caplog.set_level(logging.WARNING)
        m = matcher.compile(MatchType.REGEX, "(unbalanced")
        assert m is matcher.match_none
        assert not m("https://example.com/(unbalanced")
        assert "Invalid regex pattern" in caplog.text


def test_match_type_from_string():
    assert matcher.compile("contains", "foo")("https://foo.com")
    assert matcher.compile("wildcard", "*foo*")("https://foo.com")
    assert matcher.compile("regex", "fo+")("https://foo.com")


def test_unknown_match_type(caplog):
    m = matcher.compile("glob", "foo")
    assert not m("https://foo.com")
    assert "Unknown match type" in caplog.text


def test_evaluation_error(caplog):
    m = matcher.compile(MatchType.CONTAINS, "foo")
    assert not m(None)  # type: ignore[arg-type]
    assert "Cannot evaluate contains pattern" in caplog.text
