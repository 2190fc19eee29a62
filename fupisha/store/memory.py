"""
In-memory store implementation using Python dicts.

Pros:
- No database needed (unit tests, local demos)
- Same contract as SQLStore: conflicts, strict NotFound, owner checks,
  and failures after drop() until migrate()

Cons:
- Not shared between processes
- Lost on restart

Records are copied in and out, so callers never mutate stored state.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fupisha.errors import BackendError, ConflictError, InvalidInputError, NotFoundError
from fupisha.logging_config import get_logger
from fupisha.models import URL, User
from fupisha.store.base import Store, URLStore, UserStore
from fupisha.store.sql.migrations import LATEST_VERSION
from fupisha.validators import (
    validate_alias,
    validate_email,
    validate_expiry,
    validate_long_url,
    validate_url_changes,
    validate_user_changes,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _email_key(email: str) -> str:
    try:
        return validate_email(email)
    except InvalidInputError as e:
        raise NotFoundError(f"user {email!r} not found", e) from e


def _copy(record):
    """Detached copy of a model instance with every column value."""
    return type(record)(**{
        column.key: getattr(record, column.key)
        for column in record.__table__.columns
    })


class _Tables:
    """State shared by both sub-stores; owned by InMemoryStore."""

    def __init__(self):
        self.lock = threading.Lock()
        self.users: Dict[int, User] = {}
        self.urls: Dict[str, URL] = {}
        self.next_user_id = 1
        self.next_url_id = 1
        self.migrated = False

    def require_schema(self, operation: str):
        if not self.migrated:
            raise BackendError(operation, RuntimeError("schema is not migrated"))


class InMemoryUserStore(UserStore):

    def __init__(self, tables: _Tables):
        self._tables = tables

    def create(self, email: str, password_hash: str, name: Optional[str] = None) -> User:
        email = validate_email(email)
        with self._tables.lock:
            self._tables.require_schema("creating user")
            if any(u.email == email for u in self._tables.users.values()):
                raise ConflictError(f"email {email!r} already registered")

            now = _now()
            user = User(
                id=self._tables.next_user_id,
                email=email,
                password_hash=password_hash,
                name=name,
                verified=False,
                created_at=now,
                updated_at=now,
            )
            self._tables.next_user_id += 1
            self._tables.users[user.id] = user
            return _copy(user)

    def get(self, user_id: int) -> User:
        with self._tables.lock:
            self._tables.require_schema("fetching user")
            return _copy(self._get(user_id))

    def get_by_email(self, email: str) -> User:
        email = _email_key(email)
        with self._tables.lock:
            self._tables.require_schema("fetching user")
            for user in self._tables.users.values():
                if user.email == email:
                    return _copy(user)
            raise NotFoundError(f"user {email!r} not found")

    def list(self) -> List[User]:
        with self._tables.lock:
            self._tables.require_schema("listing users")
            return [_copy(u) for _, u in sorted(self._tables.users.items())]

    def update(self, user_id: int, **changes) -> User:
        changes = validate_user_changes(changes, self.UPDATABLE_FIELDS)
        with self._tables.lock:
            self._tables.require_schema("updating user")
            user = self._get(user_id)

            new_email = changes.get("email")
            if new_email is not None and any(
                u.email == new_email and u.id != user_id
                for u in self._tables.users.values()
            ):
                raise ConflictError(f"email {new_email!r} already registered")

            for field, value in changes.items():
                setattr(user, field, value)
            user.updated_at = _now()
            return _copy(user)

    def delete(self, user_id: int) -> None:
        with self._tables.lock:
            self._tables.require_schema("deleting user")
            self._get(user_id)
            del self._tables.users[user_id]
            # ON DELETE CASCADE
            for alias in [a for a, u in self._tables.urls.items() if u.owner_id == user_id]:
                del self._tables.urls[alias]

    def _get(self, user_id: int) -> User:
        user = self._tables.users.get(user_id)
        if user is None:
            raise NotFoundError(f"user {user_id} not found")
        return user


class InMemoryURLStore(URLStore):

    def __init__(self, tables: _Tables):
        self._tables = tables

    def create(
        self,
        alias: str,
        long_url: str,
        owner_id: int,
        expires_at: Optional[datetime] = None
    ) -> URL:
        alias = validate_alias(alias)
        long_url = validate_long_url(long_url)
        expires_at = validate_expiry(expires_at)
        with self._tables.lock:
            self._tables.require_schema("creating url")
            if alias in self._tables.urls:
                raise ConflictError(f"alias {alias!r} already exists")
            if owner_id not in self._tables.users:
                raise NotFoundError(f"owner {owner_id} not found")

            now = _now()
            url = URL(
                id=self._tables.next_url_id,
                alias=alias,
                long_url=long_url,
                owner_id=owner_id,
                total_hits=0,
                expires_at=expires_at,
                created_at=now,
                updated_at=now,
            )
            self._tables.next_url_id += 1
            self._tables.urls[alias] = url
            return _copy(url)

    def get(self, alias: str) -> URL:
        with self._tables.lock:
            self._tables.require_schema("fetching url")
            return _copy(self._get(alias))

    def list_by_owner(self, owner_id: int) -> List[URL]:
        with self._tables.lock:
            self._tables.require_schema("listing urls")
            owned = [u for u in self._tables.urls.values() if u.owner_id == owner_id]
            return [_copy(u) for u in sorted(owned, key=lambda u: u.id)]

    def update(self, alias: str, **changes) -> URL:
        changes = validate_url_changes(changes, self.UPDATABLE_FIELDS)
        with self._tables.lock:
            self._tables.require_schema("updating url")
            url = self._get(alias)
            for field, value in changes.items():
                setattr(url, field, value)
            url.updated_at = _now()
            return _copy(url)

    def delete(self, alias: str) -> None:
        with self._tables.lock:
            self._tables.require_schema("deleting url")
            self._get(alias)
            del self._tables.urls[alias]

    def record_hit(self, alias: str) -> None:
        with self._tables.lock:
            self._tables.require_schema("recording hit")
            url = self._get(alias)
            url.total_hits += 1
            url.updated_at = _now()

    def _get(self, alias: str) -> URL:
        url = self._tables.urls.get(alias)
        if url is None:
            raise NotFoundError(f"alias {alias!r} not found")
        return url


class InMemoryStore(Store):
    """
    Dict-backed Store facade.

    Like ``connect()``, construction leaves the schema migrated.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger()
        self._tables = _Tables()
        self._users = InMemoryUserStore(self._tables)
        self._urls = InMemoryURLStore(self._tables)
        self.migrate()

    def users(self) -> UserStore:
        return self._users

    def urls(self) -> URLStore:
        return self._urls

    def migrate(self) -> None:
        with self._tables.lock:
            self._tables.migrated = True

    def drop(self) -> None:
        with self._tables.lock:
            self._tables.users.clear()
            self._tables.urls.clear()
            self._tables.next_user_id = 1
            self._tables.next_url_id = 1
            self._tables.migrated = False
        self.logger.warning("dropped in-memory schema")

    def schema_version(self) -> int:
        return LATEST_VERSION if self._tables.migrated else 0
