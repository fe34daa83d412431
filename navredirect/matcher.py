"""
    Compile a rule's match specification into a predicate over URLs.

    There are three kinds of patterns, all evaluated case-insensitively
    against the full URL:

        contains    the pattern occurs anywhere in the URL
        wildcard    the pattern describes the whole URL, with
                        *   any run of characters, including none
                        ?   exactly one character
                    every other character is matched literally
        regex       the pattern is a regular expression, searched for
                    anywhere in the URL (unanchored)

    A pattern that cannot be compiled or evaluated never raises: the
    resulting predicate matches nothing, and the problem is logged.
"""
from __future__ import annotations

import enum
import functools
import logging
import re
from collections.abc import Callable

logger = logging.getLogger(__name__)

Predicate = Callable[[str], bool]


class MatchType(str, enum.Enum):
    CONTAINS = "contains"
    WILDCARD = "wildcard"
    REGEX = "regex"


def match_none(url: str) -> bool:
    return False


def wildcard_to_regex(pattern: str) -> str:
    """
    Translate a wildcard pattern into an equivalent regular expression.
    The result is not anchored; callers use `re.fullmatch`.
    """
    parts = []
    for c in pattern:
        if c == "*":
            parts.append(".*")
        elif c == "?":
            parts.append(".")
        else:
            parts.append(re.escape(c))
    return "".join(parts)


def _safe(predicate: Predicate, match_type: MatchType, pattern: str) -> Predicate:
    @functools.wraps(predicate)
    def wrapper(url: str) -> bool:
        try:
            return bool(predicate(url))
        except Exception as e:
            logger.warning(
                f"Cannot evaluate {match_type.value} pattern {pattern!r} against {url!r}: {e}"
            )
            return False

    return wrapper


def contains_matcher(pattern: str) -> Predicate:
    needle = pattern.lower()

    def contains(url: str) -> bool:
        return needle in url.lower()

    return contains


def wildcard_to_matcher(pattern: str) -> Predicate:
    """
    Partial matches are rejected: "https://*.example.com/*" does not match
    "http://evil.com/https://x.example.com/".
    """
    regex = re.compile(wildcard_to_regex(pattern), re.IGNORECASE | re.DOTALL)

    def wildcard(url: str) -> bool:
        return regex.fullmatch(url) is not None

    return wildcard


def regex_matcher(pattern: str) -> Predicate:
    regex = re.compile(pattern, re.IGNORECASE)

    def search(url: str) -> bool:
        return regex.search(url) is not None

    return search


_compilers: dict[MatchType, Callable[[str], Predicate]] = {
    MatchType.CONTAINS: contains_matcher,
    MatchType.WILDCARD: wildcard_to_matcher,
    MatchType.REGEX: regex_matcher,
}


def compile(match_type: MatchType | str, pattern: str) -> Predicate:
    """
    Compile a pattern of the given kind. Never raises.
    """
    try:
        match_type = MatchType(match_type)
    except ValueError:
        logger.warning(f"Unknown match type {match_type!r} for pattern {pattern!r}")
        return match_none

    try:
        predicate = _compilers[match_type](pattern)
    except Exception as e:
        logger.warning(f"Invalid {match_type.value} pattern {pattern!r}: {e}")
        return match_none
    return _safe(predicate, match_type, pattern)
