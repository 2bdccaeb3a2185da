#!/usr/bin/env python3
"""Detection of path-like substrings in free-form text.

Three recognition strategies are tried in a fixed order and the first one
that matches wins:

    1. url    - ``https://host/x.png``, ``//cdn/x.png``
    2. plain  - ``./a.png``, ``../img/b.png``
    3. alias  - ``@/assets/c.png`` for a known alias key ``@``

Among alias keys, the first key (in alias table order) whose pattern matches
is used, even when a longer key would also match.

Example:
    >>> match_path('<img src="@/assets/logo.png">', ['@'])
    MatchResult(text='@/assets/logo.png', kind=<MatchKind.ALIAS: 'alias'>, ...)
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Pattern, Tuple


class MatchKind(Enum):
    """Which strategy recognised a path."""

    URL = "url"
    PLAIN = "plain"
    ALIAS = "alias"


@dataclass(frozen=True)
class MatchResult:
    """First path-like substring found in a piece of text.

    Attributes:
        text: The matched substring.
        kind: Strategy that produced the match.
        start: Offset of the match in the input text.
        end: End offset (exclusive).
        alias: Alias key for ALIAS matches, else None.
    """

    text: str
    kind: MatchKind
    start: int = 0
    end: int = 0
    alias: Optional[str] = None

    @property
    def is_url(self) -> bool:
        return self.kind is MatchKind.URL


# A path segment: anything but separators, whitespace, quotes and brackets.
SEGMENT = r"""[^/\s'"`()<>]+"""
# Zero or more directories followed by a dotted file name.
FILE_TAIL = rf"(?:{SEGMENT}/)*{SEGMENT}\.\w+"

URL_PATTERN = re.compile(r"(?:https?:)*//[\w./]+")
PLAIN_PATTERN = re.compile(rf"(?:\.{{1,2}}/)+{FILE_TAIL}")


def alias_pattern(key: str) -> Pattern[str]:
    """Pattern for ``<key>/<dirs>/<name>.<ext>``."""
    return re.compile(re.escape(key) + "/" + FILE_TAIL)


Strategy = Callable[[str, Tuple[str, ...]], Optional[MatchResult]]


def match_url(text: str, alias_keys: Tuple[str, ...] = ()) -> Optional[MatchResult]:
    found = URL_PATTERN.search(text)
    if found is None:
        return None
    return MatchResult(found.group(0), MatchKind.URL, found.start(), found.end())


def match_plain(text: str, alias_keys: Tuple[str, ...] = ()) -> Optional[MatchResult]:
    found = PLAIN_PATTERN.search(text)
    if found is None:
        return None
    return MatchResult(found.group(0), MatchKind.PLAIN, found.start(), found.end())


def match_alias(text: str, alias_keys: Tuple[str, ...] = ()) -> Optional[MatchResult]:
    for key in alias_keys:
        if not key:
            continue
        found = alias_pattern(key).search(text)
        if found is not None:
            return MatchResult(
                found.group(0), MatchKind.ALIAS, found.start(), found.end(), alias=key
            )
    return None


# Precedence of the recognition strategies.
STRATEGIES: List[Tuple[str, Strategy]] = [
    ("url", match_url),
    ("plain", match_plain),
    ("alias", match_alias),
]


class PathMatcher:
    """Runs the recognition strategies in order.

    Attributes:
        strategies: (name, strategy) pairs, highest precedence first.
    """

    def __init__(self, strategies: Optional[List[Tuple[str, Strategy]]] = None):
        self.strategies = list(strategies if strategies is not None else STRATEGIES)

    def match(self, text: str, alias_keys: Iterable[str] = ()) -> Optional[MatchResult]:
        """Return the first path-like substring of ``text``, or None."""
        keys = tuple(alias_keys)
        for _name, strategy in self.strategies:
            result = strategy(text, keys)
            if result is not None:
                return result
        return None


def match_path(text: str, alias_keys: Iterable[str] = ()) -> Optional[MatchResult]:
    """Convenience wrapper around ``PathMatcher().match``."""
    return PathMatcher().match(text, alias_keys)
