"""Translation of driver/SQLAlchemy failures into GELP errors.

Lock contention becomes a retryable ``ConflictError``; lost connections and
other operational faults become ``StorageUnavailable``. Values the column
types reject (``DataError``) become ``ValidationError``. Integrity violations
that the caller did not map to something more specific end up as a plain
``ConflictError``.
"""

import logging

from sqlalchemy.exc import DataError, DBAPIError, IntegrityError, InterfaceError, OperationalError, SQLAlchemyError

from gelp.core.errors import ConflictError, GelpError, StorageUnavailable, ValidationError

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected, lock_not_available
_PG_RETRYABLE_STATES = {"40001", "40P01", "55P03"}
_SQLITE_LOCK_MESSAGES = ("database is locked", "database table is locked")


def _sqlstate(exc: DBAPIError):
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_lock_conflict(exc: SQLAlchemyError) -> bool:
    if not isinstance(exc, DBAPIError):
        return False
    if _sqlstate(exc) in _PG_RETRYABLE_STATES:
        return True
    message = str(exc.orig).lower()
    return any(m in message for m in _SQLITE_LOCK_MESSAGES)


def translate_db_error(exc: SQLAlchemyError) -> GelpError:
    if is_lock_conflict(exc):
        logger.warning("Lock contention: %s", exc.orig)
        return ConflictError("Concurrent modification, retry the operation", retryable=True)

    if isinstance(exc, IntegrityError):
        return ConflictError(f"Constraint violation: {exc.orig}")

    # value rejected by the column type (e.g. numeric overflow)
    if isinstance(exc, DataError):
        return ValidationError(f"Invalid value: {exc.orig}")

    if isinstance(exc, (OperationalError, InterfaceError)) or (
        isinstance(exc, DBAPIError) and exc.connection_invalidated
    ):
        logger.error("Storage failure: %s", exc)
        return StorageUnavailable(cause=exc)

    logger.error("Unexpected database error: %s", exc)
    return StorageUnavailable("Unexpected database error", cause=exc)
