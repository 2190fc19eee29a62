"""
Store interfaces using Strategy Pattern.

The HTTP layer and the auth resource only ever see these interfaces:
- SQLStore: production implementation over a relational backend
- InMemoryStore: dict-backed implementation for tests and local runs

Records returned by every implementation are detached ``User`` / ``URL``
model instances, so Pydantic schemas serialize them the same way.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from fupisha.models import URL, User


class UserStore(ABC):
    """
    Capability interface over user records.

    ``email`` is the login identity and is unique across all users.
    """

    UPDATABLE_FIELDS = frozenset({"email", "password_hash", "name", "verified"})

    @abstractmethod
    def create(self, email: str, password_hash: str, name: Optional[str] = None) -> User:
        """
        Insert a new user.

        Args:
            email: Login identity, must be unique
            password_hash: Already-hashed credential material
            name: Optional display name

        Returns:
            The stored user including id and timestamps

        Raises:
            ConflictError: email already registered
            InvalidInputError: malformed email
        """
        pass

    @abstractmethod
    def get(self, user_id: int) -> User:
        """Fetch a user by id. Raises NotFoundError."""
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> User:
        """Fetch a user by login identity. Raises NotFoundError."""
        pass

    @abstractmethod
    def list(self) -> List[User]:
        """All users ordered by id."""
        pass

    @abstractmethod
    def update(self, user_id: int, **changes) -> User:
        """
        Apply field changes to an existing user.

        Args:
            user_id: Target user
            **changes: Subset of UPDATABLE_FIELDS

        Returns:
            The updated user

        Raises:
            NotFoundError: no such user
            ConflictError: new email already taken
            InvalidInputError: unknown field or malformed value
        """
        pass

    @abstractmethod
    def delete(self, user_id: int) -> None:
        """
        Remove a user.

        Deleting an absent (or already deleted) user raises NotFoundError;
        it is never a silent success.
        """
        pass


class URLStore(ABC):
    """
    Capability interface over short alias mappings.

    ``alias`` is unique across all records; ``long_url`` is always a valid
    http(s) URL.
    """

    UPDATABLE_FIELDS = frozenset({"long_url", "expires_at"})

    @abstractmethod
    def create(
        self,
        alias: str,
        long_url: str,
        owner_id: int,
        expires_at: Optional[datetime] = None
    ) -> URL:
        """
        Insert a new alias mapping.

        Returns:
            The stored record including id and timestamps

        Raises:
            ConflictError: alias already exists
            NotFoundError: owner does not exist
            InvalidInputError: malformed alias or URL
        """
        pass

    @abstractmethod
    def get(self, alias: str) -> URL:
        """Fetch a mapping by alias. Raises NotFoundError."""
        pass

    @abstractmethod
    def list_by_owner(self, owner_id: int) -> List[URL]:
        """All mappings owned by a user, ordered by id."""
        pass

    @abstractmethod
    def update(self, alias: str, **changes) -> URL:
        """Apply field changes. Raises NotFoundError / InvalidInputError."""
        pass

    @abstractmethod
    def delete(self, alias: str) -> None:
        """Remove a mapping. A second delete raises NotFoundError."""
        pass

    @abstractmethod
    def record_hit(self, alias: str) -> None:
        """Increment the click counter of a mapping. Raises NotFoundError."""
        pass


class Store(ABC):
    """
    Facade owning one backend connection and both sub-stores.

    A Store handed out by a constructor or factory always has a migrated
    schema; callers never check schema readiness themselves.
    """

    @abstractmethod
    def users(self) -> UserStore:
        pass

    @abstractmethod
    def urls(self) -> URLStore:
        pass

    @abstractmethod
    def migrate(self) -> None:
        """Apply every pending schema migration in order."""
        pass

    @abstractmethod
    def drop(self) -> None:
        """Destroy the schema. Every store operation fails until migrate()."""
        pass

    def reset(self) -> None:
        """Drop then migrate. Destructive, never run against production data."""
        self.drop()
        self.migrate()

    def close(self) -> None:
        """Release the backend connection."""
        pass
