"""
Redis-based distributed locks.

Credential pools and order transitions are shared between web workers,
Celery workers and hosts, so in-process locks are not enough. A
DistributedLock is a Redis key set with NX + TTL holding a random token:

- the TTL bounds how long a crashed holder can block others
- the token makes release affect only the holder's own lock

Usage:
    from core.locks import DistributedLock

    with DistributedLock(f"credential-pool:{service}", ttl=30, timeout=10.0):
        line = pop_first_line(service)

    lock = DistributedLock("order:ORD-1", blocking=False)
    try:
        with lock:
            mark_paid(order)
    except LockAcquisitionError:
        # Another process is working on this order
        ...
"""

from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING

from django_redis import get_redis_connection

from core.exceptions import LockAcquisitionError

if TYPE_CHECKING:
    from typing import Any

    from redis import Redis


# Delay between acquisition attempts in blocking mode
RETRY_INTERVAL_SECONDS = 0.05


class DistributedLock:
    """
    Redis lock with TTL and token ownership.

    Args:
        key: Lock identifier (stored as "lock:<key>")
        ttl: Seconds before Redis drops the lock on its own
        blocking: Wait for the lock instead of failing immediately
        timeout: Maximum wait in blocking mode

    Raises (on acquire):
        LockAcquisitionError: Lock held by someone else / wait timed out
    """

    # Delete the key only if it still holds our token
    RELEASE_SCRIPT = """
    if redis.call("get", KEYS[1]) == ARGV[1] then
        return redis.call("del", KEYS[1])
    else
        return 0
    end
    """

    def __init__(
        self,
        key: str,
        ttl: int = 30,
        blocking: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.key = f"lock:{key}"
        self.ttl = ttl
        self.blocking = blocking
        self.timeout = timeout
        self._token: str | None = None
        self._redis: Redis | None = None

    def _get_redis(self) -> Redis:
        if self._redis is None:
            self._redis = get_redis_connection("default")
        return self._redis

    def acquire(self) -> bool:
        """
        Acquire the lock.

        Returns:
            True once the lock is held

        Raises:
            LockAcquisitionError: If the lock couldn't be acquired
        """
        token = uuid.uuid4().hex
        redis = self._get_redis()

        deadline = time.monotonic() + (self.timeout if self.blocking else 0)
        while True:
            if redis.set(self.key, token, nx=True, ex=self.ttl):
                self._token = token
                return True
            if time.monotonic() >= deadline:
                break
            time.sleep(RETRY_INTERVAL_SECONDS)

        if self.blocking:
            raise LockAcquisitionError(
                f"Failed to acquire lock '{self.key}' within {self.timeout}s",
                details={"key": self.key, "timeout": self.timeout},
            )
        raise LockAcquisitionError(
            f"Lock '{self.key}' is already held",
            details={"key": self.key},
        )

    def release(self) -> bool:
        """
        Release the lock if we hold it.

        Returns:
            True if the lock was released, False if we didn't hold it
            (never acquired, already released, or expired and re-taken)
        """
        if self._token is None:
            return False

        result = self._get_redis().eval(self.RELEASE_SCRIPT, 1, self.key, self._token)
        self._token = None
        return bool(result)

    def __enter__(self) -> DistributedLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> bool:
        self.release()
        return False


__all__ = ["DistributedLock"]
