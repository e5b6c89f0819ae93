"""
File-backed credential pools.

Each service has one UTF-8 text file ``<root>/<service>.txt`` holding one
credential per line, consumed first line first. Lines are opaque: they are
never validated or deduplicated here.

Consistency:
    Every mutation runs under a per-service DistributedLock, reads the whole
    file and writes the reduced pool to a temp file in the same directory
    that is fsynced and atomically renamed over the original. A pop returns
    its line only after the rename succeeded. If anything fails first the
    original file is untouched and the line remains available.

Usage:
    pool = CredentialPool.from_settings()
    line = pool.pop("netflix")      # None when empty or unknown
    remaining = pool.size("netflix")
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from django.conf import settings

from core.locks import DistributedLock

from credentials.exceptions import InvalidServiceNameError, PoolStorageError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


POOL_SUFFIX = ".txt"
SERVICE_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,63}$")


def validate_service_name(service: str) -> str:
    """
    Return the service name if it can name a pool file.

    Raises:
        InvalidServiceNameError: blank, too long, or contains characters
            outside [A-Za-z0-9_.-]
    """
    if not service or not SERVICE_NAME_RE.match(service) or ".." in service:
        raise InvalidServiceNameError(
            f"Invalid service name: {service!r}",
            details={"service": service},
        )
    return service


def _split_lines(content: str) -> list[str]:
    """Credential lines of a pool file, skipping blank lines and CR endings."""
    lines = []
    for line in content.split("\n"):
        line = line.rstrip("\r")
        if line.strip():
            lines.append(line)
    return lines


class CredentialPool:
    """
    Per-service FIFO pools stored as text files under ``root``.

    Args:
        root: Directory holding the pool files
        lock_ttl: TTL of the per-service lock in seconds
        lock_timeout: Maximum wait for the per-service lock in seconds
    """

    def __init__(self, root: Path | str, lock_ttl: int = 30, lock_timeout: float = 10.0):
        self.root = Path(root)
        self.lock_ttl = lock_ttl
        self.lock_timeout = lock_timeout

    @classmethod
    def from_settings(cls) -> CredentialPool:
        return cls(
            settings.CREDENTIAL_POOL_DIR,
            lock_ttl=settings.CREDENTIAL_LOCK_TTL_SECONDS,
            lock_timeout=settings.CREDENTIAL_LOCK_TIMEOUT_SECONDS,
        )

    def path_for(self, service: str) -> Path:
        return self.root / f"{validate_service_name(service)}{POOL_SUFFIX}"

    def _lock(self, service: str) -> DistributedLock:
        return DistributedLock(
            f"credential-pool:{service}",
            ttl=self.lock_ttl,
            timeout=self.lock_timeout,
        )

    # =========================================================================
    # Reads
    # =========================================================================

    def _read(self, path: Path) -> list[str]:
        try:
            return _split_lines(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except OSError as e:
            raise PoolStorageError(
                f"Could not read pool file {path.name}",
                details={"path": str(path), "error": str(e)},
            ) from e

    def size(self, service: str) -> int:
        """Number of credentials left. Unknown pools have size 0."""
        return len(self._read(self.path_for(service)))

    def services(self) -> list[str]:
        """Names of the pools present on disk, sorted."""
        if not self.root.is_dir():
            return []
        return sorted(
            path.stem
            for path in self.root.glob(f"*{POOL_SUFFIX}")
            if path.is_file() and SERVICE_NAME_RE.match(path.stem)
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    def _write(self, path: Path, lines: list[str]) -> None:
        """Atomically replace the pool file with ``lines``."""
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write("\n".join(lines))
                if lines:
                    handle.write("\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise PoolStorageError(
                f"Could not persist pool file {path.name}",
                details={"path": str(path), "error": str(e)},
            ) from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("Could not remove temp pool file %s", tmp_name)

    def pop(self, service: str) -> str | None:
        """
        Remove and return the first credential of a pool.

        Returns:
            The line, or None when the pool is empty or doesn't exist (the
            pool is left untouched in that case)

        Raises:
            InvalidServiceNameError: unusable service name
            LockAcquisitionError: the pool lock could not be acquired
            PoolStorageError: the pool could not be read or persisted
        """
        path = self.path_for(service)
        with self._lock(service):
            lines = self._read(path)
            if not lines:
                return None

            head, rest = lines[0], lines[1:]
            self._write(path, rest)

        logger.info(
            "Credential popped",
            extra={"service": service, "remaining": len(rest)},
        )
        return head

    def append(self, service: str, new_lines: Iterable[str]) -> int:
        """
        Add credentials to the end of a pool, creating it if needed.

        Blank lines are dropped.

        Returns:
            The pool size after the append
        """
        path = self.path_for(service)
        additions = _split_lines("\n".join(new_lines))
        with self._lock(service):
            lines = self._read(path) + additions
            self._write(path, lines)

        logger.info(
            "Pool restocked",
            extra={"service": service, "added": len(additions), "size": len(lines)},
        )
        return len(lines)
