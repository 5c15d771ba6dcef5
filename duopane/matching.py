"""Glob/regex matcher used by quick search and select-by-pattern."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from .errors import PatternError

_GLOB_SPECIALS = "\\[]"


class MatchKind(str, Enum):
    GLOB = "glob"
    REGEX = "regex"


def glob_to_regex(pattern: str) -> str:
    """Translate a shell pattern into a regex body (no anchors).

    ``*`` and ``?`` become ``.*`` and ``.``; ``[...]`` classes pass through with
    ``!`` negation; a backslash makes the next character literal.
    """
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        i += 1
        if ch == "\\" and i < n:
            out.append(re.escape(pattern[i]))
            i += 1
        elif ch == "*":
            out.append(".*")
        elif ch == "?":
            out.append(".")
        elif ch == "[":
            end = i
            if end < n and pattern[end] in "!^":
                end += 1
            if end < n and pattern[end] == "]":
                end += 1
            while end < n and pattern[end] != "]":
                end += 1
            if end >= n:
                out.append("\\[")
                continue
            body = pattern[i:end].replace("\\", "\\\\")
            if body[:1] in ("!", "^"):
                body = "^" + body[1:]
            out.append(f"[{body}]")
            i = end + 1
        else:
            out.append(re.escape(ch))
    return "".join(out)


def escape_glob(text: str) -> str:
    return "".join(f"\\{ch}" if ch in _GLOB_SPECIALS else ch for ch in text)


@dataclass(frozen=True)
class PatternMatcher:
    """Compiled matcher over file names.

    Raises ``PatternError`` at construction when a regex does not compile.
    """

    pattern: str
    kind: MatchKind = MatchKind.GLOB
    case_sensitive: bool = True
    whole_line: bool = True
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        body = glob_to_regex(self.pattern) if self.kind is MatchKind.GLOB else self.pattern
        flags = 0 if self.case_sensitive else re.IGNORECASE
        try:
            compiled = re.compile(body, flags | re.DOTALL)
        except re.error as exc:
            raise PatternError(self.pattern, str(exc)) from exc
        object.__setattr__(self, "_regex", compiled)

    def matches(self, text: str) -> bool:
        if self.whole_line:
            return self._regex.fullmatch(text) is not None
        return self._regex.search(text) is not None


def quick_search_matcher(buffer: str, case_sensitive: bool) -> PatternMatcher:
    """Prefix matcher for incremental search: escaped buffer plus ``*``."""
    return PatternMatcher(escape_glob(buffer) + "*", MatchKind.GLOB, case_sensitive, True)


__all__ = ["MatchKind", "PatternMatcher", "glob_to_regex", "escape_glob", "quick_search_matcher"]
