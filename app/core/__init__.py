"""
Core Application - Infrastructure & Base Classes

Generic building blocks used by the domain apps (authentication,
credentials, payments). No business logic lives here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key
    - AppendOnlyMixin: Refuse updates to existing rows

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - ErrorCode: Failure kinds surfaced at the HTTP boundary
    - BaseApplicationError and subclasses

Locks (import from core.locks):
    - DistributedLock: Redis lock with TTL and token ownership

Views (import from core.views):
    - health_check, result_response

Note:
    Models, model mixins, locks and views are NOT imported here because they
    depend on Django's app registry or settings being ready.
"""

from .services import BaseService, ServiceResult

from .exceptions import (
    BaseApplicationError,
    ConflictError,
    ErrorCode,
    ExternalServiceError,
    InternalError,
    LockAcquisitionError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "ConflictError",
    "ErrorCode",
    "ExternalServiceError",
    "InternalError",
    "LockAcquisitionError",
    "NotFoundError",
    "ValidationError",
]
