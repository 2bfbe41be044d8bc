"""Allowlist of values that pass through sanitization unchanged.

Each pattern is an exact string or a glob in which ``*`` matches any run of
characters. Matching is case-sensitive; no other character is special.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

_REGEX_CHARS = ("^", "$", "+", "(", ")")


def glob_matches(pattern: str, value: str) -> bool:
    """Match ``value`` against a ``*``-glob ``pattern``."""
    parts = pattern.split("*")
    first, last = parts[0], parts[-1]
    if len(parts) == 1:
        return value == pattern
    if not value.startswith(first) or not value.endswith(last):
        return False
    if len(parts) == 2:
        return len(value) >= len(first) + len(last)

    pos = len(first)
    end = max(len(value) - len(last), 0)
    for part in parts[1:-1]:
        if not part:
            continue
        found = value.find(part, pos, end)
        if found < 0:
            return False
        pos = found + len(part)
    return True


class AllowlistMatcher:
    """A compiled allowlist that can be queried from several threads.

    Warnings about patterns that look like regular expressions are kept in
    :attr:`warnings` for the caller to show.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self._entries: list[tuple[str, bool]] = []
        self.warnings: list[str] = []
        for pat in patterns:
            bad = next((ch for ch in _REGEX_CHARS if ch in pat), None)
            if bad is not None:
                self.warnings.append(
                    f"allowlist pattern '{pat}' contains regex character '{bad}'; "
                    "it is matched literally — use * for wildcards"
                )
            self._entries.append((pat, "*" in pat))
        self._seen = 0
        self._lock = threading.Lock()

    def is_allowed(self, value: str) -> bool:
        """True if ``value`` matches any pattern; counts the match."""
        return self.match_pattern(value) is not None

    def match_pattern(self, value: str) -> str | None:
        """Return the first pattern that matches ``value``, or None."""
        for pattern, is_glob in self._entries:
            matched = glob_matches(pattern, value) if is_glob else pattern == value
            if matched:
                with self._lock:
                    self._seen += 1
                return pattern
        return None

    def seen_count(self) -> int:
        """Number of values allowed through so far."""
        with self._lock:
            return self._seen

    def __len__(self) -> int:
        return len(self._entries)