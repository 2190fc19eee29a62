import logging
from datetime import datetime, timezone
from typing import List, Optional

from fupisha.config import settings
from fupisha.errors import ConflictError, NotFoundError
from fupisha.logging_config import get_logger
from fupisha.models import URL
from fupisha.services.alias_strategies import AliasStrategy, RandomAliasStrategy
from fupisha.store.base import URLStore


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored timestamp is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class URLService:
    """
    URL Service with dependency injection for the URL store.

    This follows the Dependency Injection pattern:
    - The store and alias strategy are injected (not created internally)
    - Easy to test (inject an InMemoryStore or a fixed alias strategy)

    Ownership is enforced here: a URL owned by someone else behaves exactly
    like a missing one, so aliases of other users are not disclosed.
    """

    def __init__(
        self,
        urls: URLStore,
        alias_strategy: Optional[AliasStrategy] = None,
        max_retries: int = settings.max_retries,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize URL service with dependencies.

        Args:
            urls: URL store capability of the application store
            alias_strategy: Alias generator (random by default)
            max_retries: Generated aliases tried before giving up
            logger: Application logger
        """
        self.urls = urls
        self.alias_strategy = alias_strategy or RandomAliasStrategy(length=settings.alias_length)
        self.max_retries = max_retries
        self.logger = logger or get_logger()

    def shorten(
        self,
        owner_id: int,
        long_url: str,
        alias: Optional[str] = None,
        expires_at: Optional[datetime] = None
    ) -> URL:
        """Create a new short URL

        A caller-chosen alias is used as is and fails with ConflictError when
        taken. Otherwise generated aliases are tried until one is free.

        Note: Always creates a new short URL even if the long URL already exists.
        """
        if alias is not None:
            return self.urls.create(alias, long_url, owner_id, expires_at)

        for attempt in range(1, self.max_retries + 1):
            candidate = self.alias_strategy.generate()
            try:
                return self.urls.create(candidate, long_url, owner_id, expires_at)
            except ConflictError:
                self.logger.debug("alias %s taken (attempt %d)", candidate, attempt)

        raise ConflictError(
            f"could not generate a unique alias after {self.max_retries} attempts"
        )

    def get_owned(self, owner_id: int, alias: str) -> URL:
        url = self.urls.get(alias)
        if url.owner_id != owner_id:
            raise NotFoundError(f"alias {alias!r} not found")
        return url

    def list_owned(self, owner_id: int) -> List[URL]:
        return self.urls.list_by_owner(owner_id)

    def update_owned(self, owner_id: int, alias: str, **changes) -> URL:
        self.get_owned(owner_id, alias)
        return self.urls.update(alias, **changes)

    def delete_owned(self, owner_id: int, alias: str) -> None:
        self.get_owned(owner_id, alias)
        self.urls.delete(alias)

    def resolve(self, alias: str) -> str:
        """
        Get long URL for redirection and count the hit.

        Raises:
            NotFoundError: alias unknown or expired
        """
        url = self.urls.get(alias)

        if url.expires_at is not None and _as_utc(url.expires_at) <= datetime.now(timezone.utc):
            raise NotFoundError(f"alias {alias!r} expired")

        self.urls.record_hit(alias)
        return url.long_url
