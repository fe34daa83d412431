"""
Redirect rules and first-match-wins selection.

Rules are kept as an ordered sequence. The order is the only precedence
mechanism: the first enabled rule that matches a URL is the one applied.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from navredirect import matcher
from navredirect.matcher import MatchType

logger = logging.getLogger(__name__)

RULES_KEY = "redirectRules"


@dataclass(frozen=True)
class Rule:
    name: str
    match_type: MatchType
    match_pattern: str
    redirect_url: str
    enabled: bool = True

    def matches(self, url: str) -> bool:
        return matcher.compile(self.match_type, self.match_pattern)(url)

    def validate(self) -> None:
        """
        Checks performed when a rule is created or edited. Raises ValueError.

        Rules are matched fail-safe whether or not they have been validated.
        """
        if not self.match_pattern:
            raise ValueError("Match pattern must not be empty.")
        if self.match_type == MatchType.REGEX:
            try:
                re.compile(self.match_pattern)
            except re.error as e:
                raise ValueError(
                    f"Invalid regular expression {self.match_pattern!r} ({e})"
                ) from e
        parts = urlsplit(self.redirect_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"Invalid redirect URL: {self.redirect_url!r}")

    @classmethod
    def from_state(cls, state: dict[str, Any]) -> Rule:
        try:
            name = state["name"]
            match_type = state["matchType"]
            match_pattern = state["matchPattern"]
            redirect_url = state["redirectUrl"]
        except KeyError as e:
            raise ValueError(f"Rule is missing {e.args[0]!r}") from e
        except TypeError as e:
            raise ValueError(f"Rule must be a mapping, not {type(state).__name__}") from e
        try:
            match_type = MatchType(match_type)
        except ValueError:
            raise ValueError(f"Unknown match type: {match_type!r}")
        for k, v in (
            ("name", name),
            ("matchPattern", match_pattern),
            ("redirectUrl", redirect_url),
        ):
            if not isinstance(v, str):
                raise ValueError(f"{k} must be a string")
        if not match_pattern:
            raise ValueError("Match pattern must not be empty.")
        return cls(
            name=name,
            match_type=match_type,
            match_pattern=match_pattern,
            redirect_url=redirect_url,
            enabled=bool(state.get("enabled", False)),
        )

    def get_state(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "matchType": self.match_type.value,
            "matchPattern": self.match_pattern,
            "redirectUrl": self.redirect_url,
            "enabled": self.enabled,
        }


def parse_rules(data: Iterable[Any] | None) -> list[Rule]:
    """
    Turn a stored rule collection into Rule objects, preserving order.
    Malformed entries are skipped so that they cannot hide the others.
    """
    rules = []
    for i, state in enumerate(data or []):
        try:
            rules.append(Rule.from_state(state))
        except ValueError as e:
            logger.warning(f"Skipping malformed rule #{i}: {e}")
    return rules


def select_rule(rules: Sequence[Rule], url: str) -> Rule | None:
    """
    Return the first enabled rule matching url, or None.
    """
    for rule in rules:
        if not rule.enabled:
            continue
        if rule.matches(url):
            return rule
    return None
