"""
Transaction scope and backend error translation for the SQL store.

Every store operation runs inside ``transaction()``: one session, one
transaction, and any SQLAlchemy failure leaves as a StoreError subclass
carrying the operation name.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import (
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session, sessionmaker

from fupisha.errors import (
    BackendError,
    ConflictError,
    NotFoundError,
    OperationTimeoutError,
    StoreError,
)

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
QUERY_CANCELED = "57014"


def _sqlstate(error: SQLAlchemyError) -> Optional[str]:
    return getattr(getattr(error, "orig", None), "pgcode", None)


def is_unique_violation(error: IntegrityError) -> bool:
    return (
        _sqlstate(error) == UNIQUE_VIOLATION
        or "UNIQUE constraint failed" in str(error.orig)
    )


def is_foreign_key_violation(error: IntegrityError) -> bool:
    return (
        _sqlstate(error) == FOREIGN_KEY_VIOLATION
        or "FOREIGN KEY constraint failed" in str(error.orig)
    )


def is_cancellation(error: OperationalError) -> bool:
    return _sqlstate(error) == QUERY_CANCELED


@contextmanager
def transaction(
    session_factory: sessionmaker,
    operation: str,
    conflict: Optional[str] = None,
    missing_reference: Optional[str] = None,
) -> Iterator[Session]:
    """
    Run a block in a single committed transaction.

    Args:
        session_factory: Session factory bound to the shared engine
        operation: Message prefix identifying the operation ("creating url")
        conflict: Message used when a unique constraint is violated
        missing_reference: Message used when a foreign key is violated

    Raises:
        ConflictError, NotFoundError, OperationTimeoutError, BackendError
    """
    try:
        with session_factory.begin() as session:
            yield session
    except StoreError:
        raise
    except IntegrityError as e:
        if conflict and is_unique_violation(e):
            raise ConflictError(conflict, e) from e
        if missing_reference and is_foreign_key_violation(e):
            raise NotFoundError(missing_reference, e) from e
        raise BackendError(operation, e) from e
    except PoolTimeoutError as e:
        raise OperationTimeoutError(operation, e) from e
    except OperationalError as e:
        if is_cancellation(e):
            raise OperationTimeoutError(operation, e) from e
        raise BackendError(operation, e) from e
    except SQLAlchemyError as e:
        raise BackendError(operation, e) from e
