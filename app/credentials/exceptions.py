"""
Credential pool exceptions.

Exception Hierarchy:
    CredentialError (base, INTERNAL_FAILURE)
    ├── InvalidServiceNameError - service name unusable as a pool name (INVALID_REQUEST)
    └── PoolStorageError - pool file could not be read or rewritten (INTERNAL_FAILURE)

Lock timeouts surface as core.exceptions.LockAcquisitionError.
"""

from __future__ import annotations

from core.exceptions import ErrorCode, InternalError


class CredentialError(InternalError):
    """Base exception for credential pool operations."""

    default_error_code: str = ErrorCode.INTERNAL_FAILURE


class InvalidServiceNameError(CredentialError):
    """
    Raised for service names that can't name a pool file.

    Names must start with a letter or digit and contain only letters,
    digits, "_", "-" and "."; this rules out path separators and "..".
    """

    default_error_code: str = ErrorCode.INVALID_REQUEST


class PoolStorageError(CredentialError):
    """
    Raised when a pool file can't be read or persisted.

    The pool is rewritten through a temp file and an atomic rename, so when
    this is raised the previous contents are still intact and nothing was
    consumed.
    """

    default_error_code: str = ErrorCode.INTERNAL_FAILURE
