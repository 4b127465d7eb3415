"""
Tests for `gelp/db/errors.py` and the backend check in `gelp/db/base.py`.

Covers the translation of storage failures:
- Lock contention (SQLite "database is locked", PostgreSQL serialization
  failures and deadlocks) is a retryable ConflictError.
- Constraint violations are a non-retryable ConflictError.
- Values the column types reject are a ValidationError.
- Lost connections and other operational faults are StorageUnavailable.
- Only backends with the stock upsert can back a Database.
"""

from __future__ import annotations

import pytest
from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError, ProgrammingError

from gelp.core.errors import ConflictError, StorageUnavailable, ValidationError
from gelp.db.base import Database
from gelp.db.errors import is_lock_conflict, translate_db_error


class PgDriverError(Exception):
    """Driver exception carrying a SQLSTATE, as asyncpg's errors do."""

    def __init__(self, message: str, sqlstate: str):
        super().__init__(message)
        self.sqlstate = sqlstate


def test_sqlite_lock_is_a_retryable_conflict() -> None:
    exc = OperationalError("UPDATE stock", {}, Exception("database is locked"))

    error = translate_db_error(exc)

    assert is_lock_conflict(exc)
    assert isinstance(error, ConflictError)
    assert error.retryable is True
    assert error.status_code == 409


@pytest.mark.parametrize("sqlstate", ["40001", "40P01", "55P03"])
def test_postgres_lock_states_are_retryable_conflicts(sqlstate) -> None:
    exc = OperationalError("UPDATE stock", {}, PgDriverError("could not serialize access", sqlstate))

    error = translate_db_error(exc)

    assert isinstance(error, ConflictError)
    assert error.retryable is True


def test_integrity_error_is_a_plain_conflict() -> None:
    exc = IntegrityError("INSERT INTO clients", {}, Exception("UNIQUE constraint failed: clients.cpf"))

    error = translate_db_error(exc)

    assert isinstance(error, ConflictError)
    assert error.retryable is False
    assert "retryable" not in error.to_dict()


def test_numeric_overflow_is_a_validation_error() -> None:
    exc = DataError("INSERT INTO sales", {}, PgDriverError("numeric field overflow", "22003"))

    error = translate_db_error(exc)

    assert isinstance(error, ValidationError)
    assert error.status_code == 422
    assert error.retryable is False


@pytest.mark.parametrize(
    "exc",
    [
        OperationalError("SELECT 1", {}, Exception("server closed the connection unexpectedly")),
        InterfaceError("SELECT 1", {}, Exception("connection is closed")),
        ProgrammingError("SELECT 1", {}, Exception("relation does not exist")),
    ],
)
def test_other_failures_are_storage_unavailable(exc) -> None:
    error = translate_db_error(exc)

    assert isinstance(error, StorageUnavailable)
    assert error.status_code == 503
    assert error.retryable is True
    assert error.cause is exc


def test_unsupported_backend_is_refused() -> None:
    with pytest.raises(ValueError, match="mysql"):
        Database("mysql+aiomysql://gelp@localhost/gelp")
