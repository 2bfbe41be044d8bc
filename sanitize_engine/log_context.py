"""Keyword-driven context extraction from sanitized logs.

Lines are scanned for configured keywords as substrings. Each hit records
the line, its 1-based line number and up to N lines of context on either
side, for quick triage of errors and warnings.
"""

from __future__ import annotations

import dataclasses
from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

DEFAULT_KEYWORDS: tuple[str, ...] = (
    "error",
    "failure",
    "warning",
    "warn",
    "fatal",
    "exception",
    "critical",
)
"""Keywords used when no custom list is given."""

DEFAULT_CONTEXT_LINES = 10
"""Lines of context captured before and after each match by default."""

DEFAULT_MAX_MATCHES = 50
"""Default cap on the number of matches returned."""


@dataclass(frozen=True)
class LogContextConfig:
    """Settings for :func:`extract_context`; the ``with_*`` methods return copies."""

    keywords: tuple[str, ...] = DEFAULT_KEYWORDS
    context_lines: int = DEFAULT_CONTEXT_LINES
    max_matches: int = DEFAULT_MAX_MATCHES
    case_sensitive: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "keywords", tuple(self.keywords))
        if self.context_lines < 0:
            raise ValueError("context_lines must not be negative")
        if self.max_matches < 0:
            raise ValueError("max_matches must not be negative")

    def with_extra_keywords(self, extra: Iterable[str]) -> LogContextConfig:
        """Add keywords to the current list."""
        return dataclasses.replace(self, keywords=self.keywords + tuple(extra))

    def with_keywords(self, keywords: Iterable[str]) -> LogContextConfig:
        """Replace the keyword list."""
        return dataclasses.replace(self, keywords=tuple(keywords))

    def with_context_lines(self, n: int) -> LogContextConfig:
        """Set the number of context lines around each match."""
        return dataclasses.replace(self, context_lines=n)

    def with_max_matches(self, n: int) -> LogContextConfig:
        """Set the maximum number of matches returned."""
        return dataclasses.replace(self, max_matches=n)

    def with_case_sensitive(self, sensitive: bool) -> LogContextConfig:
        """Set whether keyword matching is case-sensitive."""
        return dataclasses.replace(self, case_sensitive=sensitive)


@dataclass
class LogContextMatch:
    """One keyword hit with its surrounding lines.

    ``keyword`` keeps the casing given in the configuration.
    """

    line_number: int
    keyword: str
    line: str
    before: list[str] = field(default_factory=list)
    after: list[str] = field(default_factory=list)


@dataclass
class LogContextResult:
    """Outcome of a context extraction.

    ``truncated`` is true when scanning stopped because ``max_matches`` was
    reached.
    """

    total_lines: int
    match_count: int
    truncated: bool
    matches: list[LogContextMatch] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """A plain, JSON-serializable representation."""
        return dataclasses.asdict(self)


def _split_lines(content: str) -> list[str]:
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class _KeywordMatcher:
    def __init__(self, config: LogContextConfig) -> None:
        self._case_sensitive = config.case_sensitive
        self._keywords = config.keywords
        self._normalised = [
            kw if config.case_sensitive else kw.lower() for kw in config.keywords
        ]

    def first_hit(self, line: str) -> str | None:
        """The first configured keyword found in ``line``, or None."""
        haystack = line if self._case_sensitive else line.lower()
        for keyword, norm in zip(self._keywords, self._normalised):
            if norm in haystack:
                return keyword
        return None


def extract_context(content: str, config: LogContextConfig) -> LogContextResult:
    """Find keyword lines in ``content`` with their context windows.

    When several keywords occur on one line the first in the configuration
    wins. Line numbers are 1-based.
    """
    lines = _split_lines(content)
    matcher = _KeywordMatcher(config)
    matches: list[LogContextMatch] = []
    truncated = False

    for index, line in enumerate(lines):
        if len(matches) >= config.max_matches:
            truncated = True
            break
        keyword = matcher.first_hit(line)
        if keyword is None:
            continue
        before_start = max(index - config.context_lines, 0)
        after_end = min(index + config.context_lines + 1, len(lines))
        matches.append(
            LogContextMatch(
                line_number=index + 1,
                keyword=keyword,
                line=line,
                before=list(lines[before_start:index]),
                after=list(lines[index + 1:after_end]),
            )
        )

    return LogContextResult(
        total_lines=len(lines),
        match_count=len(matches),
        truncated=truncated,
        matches=matches,
    )


@dataclass
class _Pending:
    match: LogContextMatch
    remaining: int


def extract_context_reader(
    reader: Iterable[str | bytes], config: LogContextConfig
) -> LogContextResult:
    """Streaming form of :func:`extract_context` for large inputs.

    ``reader`` yields lines (a text or binary file, or any iterable of
    lines). Memory is bounded by the context window, not the input size.
    Byte lines must be valid UTF-8.
    """
    cap = config.context_lines
    matcher = _KeywordMatcher(config)
    before_buf: deque[str] = deque(maxlen=cap)
    pending: list[_Pending] = []
    matches: list[LogContextMatch] = []
    truncated = False
    total_lines = 0

    for raw in reader:
        text = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw
        if not text:
            continue
        line = text.rstrip("\r\n")
        total_lines += 1

        still_pending: list[_Pending] = []
        for item in pending:
            item.match.after.append(line)
            item.remaining -= 1
            if item.remaining == 0:
                matches.append(item.match)
            else:
                still_pending.append(item)
        pending = still_pending

        if not truncated:
            keyword = matcher.first_hit(line)
            if len(matches) + len(pending) >= config.max_matches:
                if keyword is not None:
                    truncated = True
            elif keyword is not None:
                found = LogContextMatch(
                    line_number=total_lines,
                    keyword=keyword,
                    line=line,
                    before=list(before_buf),
                )
                if cap == 0:
                    matches.append(found)
                else:
                    pending.append(_Pending(found, cap))

        if cap > 0:
            before_buf.append(line)

    matches.extend(item.match for item in pending)

    return LogContextResult(
        total_lines=total_lines,
        match_count=len(matches),
        truncated=truncated,
        matches=matches,
    )


def _lines_of(items: Sequence[str]) -> str:
    return "\n".join(items)