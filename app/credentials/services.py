"""
Credential allocation services.

CredentialAllocator hands out pool credentials to users and keeps the
per-user record of what was handed out. ServiceCatalog lists the services
users can pick from together with their remaining stock.

Usage:
    from credentials.services import CredentialAllocator

    result = CredentialAllocator.generate(request.user, "netflix")
    if result:
        event = result.data                  # GenerationEvent
    elif result.error_code == ErrorCode.OUT_OF_STOCK:
        ...

Allocation order matters: the credential is removed from its pool (and the
removal persisted) before anything is recorded in the database. If the
database write then fails the credential is already gone from the pool; it
is logged at CRITICAL on the "credentials.orphans" logger and returned in
the failure result so it can still be delivered.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.db import DatabaseError

from core.exceptions import ErrorCode, LockAcquisitionError
from core.services import BaseService, ServiceResult

from credentials.exceptions import InvalidServiceNameError, PoolStorageError
from credentials.models import GenerationEvent, UsageStats
from credentials.parsing import CredentialRecord, parse_credential_line
from credentials.pool import CredentialPool, validate_service_name

if TYPE_CHECKING:
    from authentication.models import User

orphan_logger = logging.getLogger("credentials.orphans")

RECENT_GENERATIONS = 5


class CredentialAllocator(BaseService):
    """Pop credentials for users and report on their usage."""

    @classmethod
    def get_pool(cls) -> CredentialPool:
        return CredentialPool.from_settings()

    @classmethod
    def generate(cls, user: User, service: str) -> ServiceResult[GenerationEvent]:
        """
        Issue the next credential of ``service`` to ``user``.

        Failures:
            UNAUTHORIZED: no authenticated user
            INVALID_REQUEST: blank or unusable service name
            OUT_OF_STOCK: pool empty or unknown
            INTERNAL_FAILURE: pool lock/storage failure (nothing consumed),
                or the generation could not be recorded (credential in data)
        """
        logger = cls.get_logger()

        if user is None or not user.is_authenticated:
            return ServiceResult.failure(
                "Authentication required", error_code=ErrorCode.UNAUTHORIZED
            )

        service = (service or "").strip()
        if not service:
            return ServiceResult.failure(
                "service is required",
                error_code=ErrorCode.INVALID_REQUEST,
                errors={"service": ["This field is required."]},
            )

        try:
            line = cls.get_pool().pop(service)
        except InvalidServiceNameError as e:
            return ServiceResult.from_exception(e)
        except (LockAcquisitionError, PoolStorageError) as e:
            logger.error(
                f"Could not pop from pool: {e}",
                extra={"service": service, "user_id": user.pk, **e.details},
            )
            return ServiceResult.from_exception(e, ErrorCode.INTERNAL_FAILURE)

        if line is None:
            logger.info(
                "Generation refused, pool empty",
                extra={"service": service, "user_id": user.pk},
            )
            return ServiceResult.failure(
                f"No accounts available for {service}",
                error_code=ErrorCode.OUT_OF_STOCK,
            )

        record = parse_credential_line(line)
        try:
            event = cls._record_generation(user, service, record)
        except DatabaseError:
            orphan_logger.critical(
                "Credential removed from pool but not recorded",
                extra={"service": service, "user_id": user.pk, "line": line},
                exc_info=True,
            )
            return ServiceResult.failure(
                "The account was issued but could not be saved to your history",
                error_code=ErrorCode.INTERNAL_FAILURE,
                data={"service": service, "account": record.to_dict(), "orphaned": True},
            )

        logger.info(
            "Credential generated",
            extra={
                "generation_id": str(event.id),
                "service": service,
                "user_id": user.pk,
                "malformed": record.is_malformed,
            },
        )
        return ServiceResult.success(event)

    @classmethod
    def _record_generation(
        cls, user: User, service: str, record: CredentialRecord
    ) -> GenerationEvent:
        with cls.atomic():
            event = GenerationEvent.objects.create(
                user=user,
                service=service,
                credential=record.to_dict(),
            )
            stats, _ = UsageStats.objects.select_for_update().get_or_create(user=user)
            stats.record_generation(service, event.created_at)
            stats.save()
        return event

    @classmethod
    def history(cls, user: User, limit: Any = None) -> ServiceResult[list[GenerationEvent]]:
        """
        The user's generation events, newest first.

        ``limit`` defaults to CREDENTIAL_HISTORY_DEFAULT_LIMIT and is clamped
        to CREDENTIAL_HISTORY_MAX_LIMIT; it must be a positive integer.
        """
        if limit is None or limit == "":
            limit = settings.CREDENTIAL_HISTORY_DEFAULT_LIMIT
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            limit = 0
        if limit <= 0:
            return ServiceResult.failure(
                "limit must be a positive integer",
                error_code=ErrorCode.INVALID_REQUEST,
                errors={"limit": ["Must be a positive integer."]},
            )

        limit = min(limit, settings.CREDENTIAL_HISTORY_MAX_LIMIT)
        return ServiceResult.success(list(GenerationEvent.objects.for_user(user)[:limit]))

    @classmethod
    def stats(cls, user: User) -> ServiceResult[dict[str, Any]]:
        """
        The user's usage counters plus the last few generation events.

        Users who never generated anything get zero values.
        """
        usage = UsageStats.objects.filter(user=user).first()
        recent = list(GenerationEvent.objects.for_user(user)[:RECENT_GENERATIONS])
        return ServiceResult.success(
            {
                "total_generations": usage.total_generations if usage else 0,
                "services": list(usage.services) if usage else [],
                "last_activity": usage.last_activity if usage else None,
                "recent_generations": recent,
            }
        )


class ServiceCatalog(BaseService):
    """
    Services offered to users, with remaining stock.

    The catalog file (CREDENTIAL_CATALOG_FILE) is a JSON list of objects with
    at least a "name"; any other keys (label, icon, ...) are passed through.
    Without a catalog file every pool on disk is listed.
    """

    @classmethod
    def load_entries(cls) -> list[dict[str, Any]]:
        path = settings.CREDENTIAL_CATALOG_FILE
        if not path.exists():
            return [{"name": name} for name in CredentialAllocator.get_pool().services()]

        with path.open(encoding="utf-8") as handle:
            entries = json.load(handle)
        if not isinstance(entries, list):
            raise ValueError("catalog must be a JSON list")

        valid = []
        for entry in entries:
            name = entry.get("name") if isinstance(entry, dict) else None
            try:
                validate_service_name(name if isinstance(name, str) else "")
            except InvalidServiceNameError:
                cls.get_logger().warning(
                    "Skipping invalid catalog entry", extra={"entry": repr(entry)}
                )
                continue
            valid.append(dict(entry))
        return valid

    @classmethod
    def list_services(cls) -> ServiceResult[list[dict[str, Any]]]:
        """Catalog entries, each with a ``stock`` count."""
        try:
            entries = cls.load_entries()
        except (OSError, ValueError) as e:
            return cls.handle_exception(e, "load service catalog")

        pool = CredentialAllocator.get_pool()
        try:
            for entry in entries:
                entry["stock"] = pool.size(entry["name"])
        except PoolStorageError as e:
            return cls.handle_exception(e, "count pool stock")
        return ServiceResult.success(entries)
