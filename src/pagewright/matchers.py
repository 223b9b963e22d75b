"""
URL matchers for page mappings.

A matcher is either a literal path/URL, matched exactly, or a compiled
regular expression, searched for in the path. Literal matchers are more
specific than patterns; matchers of the same kind keep declaration order.
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Union

LITERAL = 0
PATTERN = 1


@dataclass(frozen=True)
class Matcher:
    """Matches a browser location against a path or pattern."""

    path: Union[str, Pattern]

    def __post_init__(self):
        if not isinstance(self.path, (str, re.Pattern)):
            raise TypeError(f"Matcher needs a string or compiled pattern, got {self.path!r}")

    @property
    def kind(self) -> int:
        return LITERAL if isinstance(self.path, str) else PATTERN

    def can_compute_uri(self) -> bool:
        """Only literal matchers name a location that can be navigated to."""
        return self.kind == LITERAL

    def compute_uri(self) -> str:
        if not self.can_compute_uri():
            raise ValueError(f"Cannot build a URL from pattern {self.path.pattern!r}")
        return self.path

    def matches(self, path: str, url: Optional[str] = None) -> bool:
        if self.kind == LITERAL:
            return self.path in (path, url)
        return self.path.search(path or "") is not None

    def __repr__(self):
        if self.kind == LITERAL:
            return f"Matcher({self.path!r})"
        return f"Matcher(re.compile({self.path.pattern!r}))"


def matcher_for(key) -> Matcher:
    """Wrap a raw mapping key in a Matcher; Matchers pass through untouched."""
    if isinstance(key, Matcher):
        return key
    return Matcher(key)


def specificity(matcher: Matcher, index: int):
    """Sort key: literal before pattern, then declaration index."""
    return (matcher.kind, index)
