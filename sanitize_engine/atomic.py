"""Crash-safe output files.

Data goes to a temporary file beside the destination, which is flushed,
fsynced and then renamed into place, so the destination either holds the
complete output or does not exist.
"""

from __future__ import annotations

import contextlib
import os
import secrets
from pathlib import Path
from types import TracebackType


class AtomicFileWriter:
    """Write to a temporary file and rename it over ``dest`` on :meth:`finish`.

    Used as a context manager, the file is finished when the block exits
    normally and discarded when it raises.
    """

    def __init__(self, dest: str | os.PathLike[str]) -> None:
        self._dest_path = Path(dest)
        directory = self._dest_path.parent
        base_name = self._dest_path.name or "out"
        suffix = secrets.randbits(64)
        self._tmp_path = directory / f".{base_name}.{suffix:016x}.tmp"
        # O_EXCL refuses to reuse an existing path, so symlinks are not followed.
        flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0)
        fd = os.open(self._tmp_path, flags, 0o666)
        self._file = os.fdopen(fd, "wb")
        self._finished = False

    @property
    def tmp_path(self) -> Path:
        """Path of the temporary file."""
        return self._tmp_path

    @property
    def dest_path(self) -> Path:
        """Final destination path."""
        return self._dest_path

    def write(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes written."""
        return self._file.write(data)

    def flush(self) -> None:
        """Flush buffered data to the temporary file."""
        self._file.flush()

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Flush, move the file position and return the new position."""
        self._file.flush()
        return self._file.seek(offset, whence)

    def finish(self) -> None:
        """Flush, fsync and rename the temporary file to the destination.

        On failure the temporary file is removed and the error re-raised.
        """
        if self._finished:
            raise ValueError("atomic write already finished")
        try:
            self._file.flush()
            os.fsync(self._file.fileno())
            self._file.close()
            os.replace(self._tmp_path, self._dest_path)
        except BaseException:
            self.abort()
            raise
        self._finished = True

    def abort(self) -> None:
        """Discard the temporary file unless the write was finished."""
        if self._finished:
            return
        with contextlib.suppress(OSError):
            self._file.close()
        with contextlib.suppress(OSError):
            os.remove(self._tmp_path)

    def __enter__(self) -> AtomicFileWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.finish()
        else:
            self.abort()

    def __del__(self) -> None:
        with contextlib.suppress(Exception):
            self.abort()


def atomic_write(dest: str | os.PathLike[str], data: bytes) -> None:
    """Write ``data`` to ``dest`` atomically."""
    with AtomicFileWriter(dest) as writer:
        writer.write(data)