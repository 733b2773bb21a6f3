# src/storage/lock.py — v1
"""Workspace run lock — a sentinel file guarding against concurrent runs.

The sentinel is created atomically (O_CREAT | O_EXCL) and removed when the
run ends, whether it succeeds, fails or is interrupted. A sentinel left by
a process that no longer exists on this host can be reclaimed; reclaimers
take an flock on a companion ``.reclaim`` file and replace the sentinel only
if it is still the same inode that was judged stale.
"""

from __future__ import annotations

import fcntl
import logging
import os
import socket
from datetime import datetime, timezone
from pathlib import Path
from types import TracebackType

from neuroreport.core.errors import ConcurrentRunDetected

logger = logging.getLogger(__name__)


def read_lock_info(path: Path) -> dict[str, str]:
    """Parse the ``key: value`` lines of a sentinel file."""
    info: dict[str, str] = {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        return info
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if sep:
            info[key.strip()] = value.strip()
    return info


LockIdentity = tuple[int, int]


def _lock_identity(path: Path) -> LockIdentity:
    stat = path.stat()
    return (stat.st_dev, stat.st_ino)


def _pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    except (OverflowError, ValueError):
        return False
    return True


class RunLock:
    """Exclusive per-workspace run lock, usable as a context manager."""

    def __init__(
        self,
        path: Path,
        subject: str | None = None,
        reclaim_stale: bool = True,
    ) -> None:
        self._path = Path(path)
        self._subject = subject
        self._reclaim_stale = reclaim_stale
        self._held = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def held(self) -> bool:
        return self._held

    @property
    def guard_path(self) -> Path:
        """Companion file flocked while a stale sentinel is being replaced."""
        return self._path.with_name(self._path.name + ".reclaim")

    def acquire(self) -> None:
        """Create the sentinel or raise ConcurrentRunDetected."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._create()
        except FileExistsError:
            if not (self._reclaim_stale and self.is_stale()):
                raise ConcurrentRunDetected(self._path, self._describe_holder()) from None
            self._reclaim()
        self._held = True
        logger.debug("Acquired run lock %s", self._path)

    def _reclaim(self) -> None:
        # Reclaimers serialize on the guard and re-judge the sentinel under
        # it; a dead holder's file is only ever removed while the guard is held.
        fd = os.open(self.guard_path, os.O_CREAT | os.O_RDWR, 0o644)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
            present = self._path.exists()
            if present and self._stale_identity() is None:
                raise ConcurrentRunDetected(self._path, self._describe_holder())
            if present:
                logger.warning(
                    "Reclaiming stale lock %s (%s)", self._path, self._describe_holder()
                )
                self._path.unlink()
            try:
                self._create()
            except FileExistsError:
                raise ConcurrentRunDetected(self._path, self._describe_holder()) from None
        finally:
            os.close(fd)

    def release(self) -> None:
        """Remove the sentinel if this instance holds it."""
        if not self._held:
            return
        self._path.unlink(missing_ok=True)
        self._held = False
        logger.debug("Released run lock %s", self._path)

    def is_stale(self) -> bool:
        """True when the recorded holder is a dead process on this host."""
        return self._stale_identity() is not None

    def _stale_identity(self) -> LockIdentity | None:
        """Identity of the sentinel if its holder is dead, else None."""
        try:
            identity = _lock_identity(self._path)
        except FileNotFoundError:
            return None
        info = read_lock_info(self._path)
        if info.get("host") != socket.gethostname():
            return None
        try:
            pid = int(info.get("pid", ""))
        except ValueError:
            return None
        if _pid_alive(pid):
            return None
        # The file must not have been swapped while it was being read.
        try:
            if _lock_identity(self._path) != identity:
                return None
        except FileNotFoundError:
            return None
        return identity

    def _create(self) -> None:
        fd = os.open(self._path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        lines = [
            f"pid: {os.getpid()}",
            f"host: {socket.gethostname()}",
            f"started_at: {datetime.now(timezone.utc).isoformat()}",
        ]
        if self._subject:
            lines.append(f"subject: {self._subject}")
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write("\n".join(lines) + "\n")

    def _describe_holder(self) -> str | None:
        info = read_lock_info(self._path)
        if not info:
            return None
        return ", ".join(f"{k}={v}" for k, v in info.items())

    def __enter__(self) -> RunLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
