"""Progress reporting for long-running sanitization tasks.

Interactive terminals get a live spinner line; CI and other non-interactive
outputs get occasional milestone lines, or structured log records when logs
are JSON.
"""

from __future__ import annotations

import logging
import os
import sys
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol, TextIO, TypeVar

_log = logging.getLogger(__name__)

_SPINNER_FRAMES = ("|", "/", "-", "\\")
_SCAN_MIN_DELTA = 8 * 1024 * 1024
_ARCHIVE_MIN_DELTA = 1
_BYTE_UNITS = ("B", "KiB", "MiB", "GiB", "TiB")

T = TypeVar("T")


class ScanProgressLike(Protocol):
    bytes_processed: int
    total_bytes: Optional[int]


class ArchiveProgressLike(Protocol):
    entries_seen: int
    total_entries: Optional[int]
    current_entry: str


class ProgressMode(Enum):
    """When progress should be shown."""

    AUTO = "auto"
    ON = "on"
    OFF = "off"


@dataclass(frozen=True)
class ProgressContext:
    """Facts about the environment that decide how progress is shown."""

    stderr_is_terminal: bool
    is_ci: bool
    term_is_dumb: bool
    json_logs: bool

    @classmethod
    def detect(cls, log_format: str) -> ProgressContext:
        """Inspect the process environment and standard error."""
        term = os.environ.get("TERM", "")
        try:
            is_tty = sys.stderr.isatty()
        except (AttributeError, ValueError):
            is_tty = False
        return cls(
            stderr_is_terminal=is_tty,
            is_ci="CI" in os.environ,
            term_is_dumb=term.lower() == "dumb",
            json_logs=log_format == "json",
        )


@dataclass(frozen=True)
class ProgressPolicy:
    """Which kinds of progress output are enabled."""

    live_updates: bool
    milestone_updates: bool

    @classmethod
    def from_mode(cls, mode: ProgressMode, context: ProgressContext) -> ProgressPolicy:
        """Decide the policy for ``mode`` in ``context``."""
        if mode is ProgressMode.OFF:
            return cls(False, False)
        if mode is ProgressMode.ON:
            return cls(context.stderr_is_terminal and not context.json_logs, True)
        allow_live = (
            context.stderr_is_terminal
            and not context.is_ci
            and not context.term_is_dumb
            and not context.json_logs
        )
        return cls(allow_live, allow_live)


def format_bytes(value: int) -> str:
    """Render a byte count with a binary unit, e.g. ``"1.5 KiB"``."""
    amount = float(value)
    unit_index = 0
    while amount >= 1024.0 and unit_index < len(_BYTE_UNITS) - 1:
        amount /= 1024.0
        unit_index += 1
    if unit_index == 0:
        return f"{value} {_BYTE_UNITS[0]}"
    return f"{amount:.1f} {_BYTE_UNITS[unit_index]}"


def format_scan_progress(progress: ScanProgressLike) -> str:
    """Bytes processed, with the total and a percentage when the total is known."""
    total = progress.total_bytes
    done = progress.bytes_processed
    if total:
        percent = done / total * 100.0
        return f"{format_bytes(done)} / {format_bytes(total)} ({percent:.0f}%)"
    return format_bytes(done)


class ProgressReporter:
    """Renders progress for one task at a time; safe to share between threads."""

    def __init__(
        self,
        policy: ProgressPolicy,
        json_logs: bool = False,
        progress_interval_ms: int = 250,
        stream: TextIO | None = None,
    ) -> None:
        self._policy = policy
        self._json_logs = json_logs
        self._interval = progress_interval_ms / 1000.0
        self._stream = stream
        self._lock = threading.RLock()
        self._spinner_index = 0
        self._last_emit: float | None = None
        self._last_scan_units = 0
        self._last_archive_units = 0
        self._rendered_len = 0

    @property
    def policy(self) -> ProgressPolicy:
        return self._policy

    def _out(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def start_task(self, label: str) -> None:
        """Begin a task and reset throttling state."""
        with self._lock:
            self._spinner_index = 0
            self._last_emit = None
            self._last_scan_units = 0
            self._last_archive_units = 0
            if self._policy.live_updates:
                self._render_live(f"{self._spinner_frame()} {label}")
            elif self._policy.milestone_updates:
                self._emit_milestone(label, None)

    def update_scan(self, label: str, progress: ScanProgressLike) -> None:
        """Report scan progress, throttled by time and by bytes processed."""
        with self._lock:
            if not self._should_emit(progress.bytes_processed, _SCAN_MIN_DELTA, "scan"):
                return
            detail = format_scan_progress(progress)
            if self._policy.live_updates:
                self._render_live(f"{self._spinner_frame()} {label}: {detail}")
            elif self._policy.milestone_updates:
                self._emit_milestone(label, f"processed {detail}")

    def update_archive(self, label: str, progress: ArchiveProgressLike) -> None:
        """Report which archive entry is being processed."""
        with self._lock:
            if not self._should_emit(
                progress.entries_seen, _ARCHIVE_MIN_DELTA, "archive"
            ):
                return
            if progress.total_entries is not None:
                detail = (
                    f"entry {progress.entries_seen}/{progress.total_entries} "
                    f"({progress.current_entry})"
                )
            else:
                detail = f"entry {progress.entries_seen} ({progress.current_entry})"
            if self._policy.live_updates:
                self._render_live(f"{self._spinner_frame()} {label}: {detail}")
            elif self._policy.milestone_updates:
                self._emit_milestone(label, detail)

    def finish_task(self, label: str) -> None:
        """Mark the task as completed."""
        self._end_task(label, "done")

    def fail_task(self, label: str) -> None:
        """Mark the task as stopped by an error."""
        self._end_task(label, "stopped")

    def _end_task(self, label: str, word: str) -> None:
        with self._lock:
            if self._policy.live_updates:
                self._render_final(f"{word}: {label}")
            elif self._policy.milestone_updates:
                self._emit_milestone(label, word)

    def _should_emit(self, units: int, min_delta: int, kind: str) -> bool:
        now = time.monotonic()
        elapsed_ready = self._last_emit is None or now - self._last_emit >= self._interval
        last = self._last_scan_units if kind == "scan" else self._last_archive_units
        if not (elapsed_ready or units >= last + min_delta):
            return False
        self._last_emit = now
        if kind == "scan":
            self._last_scan_units = units
        else:
            self._last_archive_units = units
        return True

    def _emit_milestone(self, label: str, detail: str | None) -> None:
        if self._json_logs:
            extra: dict[str, Any] = {"task": label}
            if detail is not None:
                extra["detail"] = detail
            _log.info("progress update", extra=extra)
            return
        self._clear_live()
        out = self._out()
        out.write(f"{label}: {detail}\n" if detail is not None else f"{label}\n")
        out.flush()

    def _spinner_frame(self) -> str:
        frame = _SPINNER_FRAMES[self._spinner_index % len(_SPINNER_FRAMES)]
        self._spinner_index = (self._spinner_index + 1) % len(_SPINNER_FRAMES)
        return frame

    def _render_live(self, line: str) -> None:
        padded = line.ljust(self._rendered_len)
        self._rendered_len = len(padded)
        out = self._out()
        out.write(f"\r{padded}")
        out.flush()

    def _render_final(self, line: str) -> None:
        self._render_live(line)
        out = self._out()
        out.write("\n")
        out.flush()
        self._rendered_len = 0

    def _clear_live(self) -> None:
        if self._rendered_len == 0:
            return
        out = self._out()
        out.write("\r" + " " * self._rendered_len + "\r")
        out.flush()
        self._rendered_len = 0


def with_progress_scope(
    progress: ProgressReporter | None,
    label: str,
    action: Callable[[Optional[ProgressReporter]], T],
) -> T:
    """Run ``action`` as a reported task.

    The task is marked done when ``action`` returns and stopped when it
    raises; the exception propagates.
    """
    if progress is not None:
        progress.start_task(label)
    try:
        result = action(progress)
    except BaseException:
        if progress is not None:
            progress.fail_task(label)
        raise
    if progress is not None:
        progress.finish_task(label)
    return result