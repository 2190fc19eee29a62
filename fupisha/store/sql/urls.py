import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, update
from sqlalchemy.orm import sessionmaker

from fupisha.errors import NotFoundError
from fupisha.logging_config import get_logger
from fupisha.models import URL
from fupisha.store.base import URLStore
from fupisha.store.sql.session import transaction
from fupisha.validators import (
    validate_alias,
    validate_expiry,
    validate_long_url,
    validate_url_changes,
)


class SQLURLStore(URLStore):
    """
    URLStore over the shared engine.

    ``get`` sits on the redirect path; it is a single indexed lookup on the
    unique alias column.
    """

    def __init__(self, session_factory: sessionmaker, logger: Optional[logging.Logger] = None):
        self.session_factory = session_factory
        self.logger = logger or get_logger()

    def create(
        self,
        alias: str,
        long_url: str,
        owner_id: int,
        expires_at: Optional[datetime] = None
    ) -> URL:
        url = URL(
            alias=validate_alias(alias),
            long_url=validate_long_url(long_url),
            owner_id=owner_id,
            total_hits=0,
            expires_at=validate_expiry(expires_at),
        )

        with transaction(
            self.session_factory,
            "creating url",
            conflict=f"alias {alias!r} already exists",
            missing_reference=f"owner {owner_id} not found",
        ) as session:
            session.add(url)
            session.flush()
            session.refresh(url)

        self.logger.info("created alias %s for user %d", url.alias, owner_id)
        return url

    def get(self, alias: str) -> URL:
        with transaction(self.session_factory, "fetching url") as session:
            url = session.query(URL).filter(URL.alias == alias).first()
            if url is None:
                raise NotFoundError(f"alias {alias!r} not found")
        return url

    def list_by_owner(self, owner_id: int) -> List[URL]:
        with transaction(self.session_factory, "listing urls") as session:
            return session.query(URL).filter(URL.owner_id == owner_id).order_by(URL.id).all()

    def update(self, alias: str, **changes) -> URL:
        changes = validate_url_changes(changes, self.UPDATABLE_FIELDS)

        with transaction(self.session_factory, "updating url") as session:
            url = session.query(URL).filter(URL.alias == alias).first()
            if url is None:
                raise NotFoundError(f"alias {alias!r} not found")
            for field, value in changes.items():
                setattr(url, field, value)
            session.flush()
            session.refresh(url)

        return url

    def delete(self, alias: str) -> None:
        with transaction(self.session_factory, "deleting url") as session:
            result = session.execute(delete(URL).where(URL.alias == alias))
            if result.rowcount == 0:
                raise NotFoundError(f"alias {alias!r} not found")

        self.logger.info("deleted alias %s", alias)

    def record_hit(self, alias: str) -> None:
        with transaction(self.session_factory, "recording hit") as session:
            result = session.execute(
                update(URL)
                .where(URL.alias == alias)
                .values(total_hits=URL.total_hits + 1)
            )
            if result.rowcount == 0:
                raise NotFoundError(f"alias {alias!r} not found")
