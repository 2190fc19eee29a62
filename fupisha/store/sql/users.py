import logging
from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.orm import sessionmaker

from fupisha.errors import InvalidInputError, NotFoundError
from fupisha.logging_config import get_logger
from fupisha.models import User
from fupisha.store.base import UserStore
from fupisha.store.sql.session import transaction
from fupisha.validators import validate_email, validate_user_changes


class SQLUserStore(UserStore):
    """UserStore over the shared engine. Does not own the connection."""

    def __init__(self, session_factory: sessionmaker, logger: Optional[logging.Logger] = None):
        self.session_factory = session_factory
        self.logger = logger or get_logger()

    def create(self, email: str, password_hash: str, name: Optional[str] = None) -> User:
        email = validate_email(email)
        user = User(email=email, password_hash=password_hash, name=name, verified=False)

        with transaction(
            self.session_factory,
            "creating user",
            conflict=f"email {email!r} already registered",
        ) as session:
            session.add(user)
            session.flush()
            session.refresh(user)

        self.logger.info("created user %d", user.id)
        return user

    def get(self, user_id: int) -> User:
        with transaction(self.session_factory, "fetching user") as session:
            user = session.get(User, user_id)
            if user is None:
                raise NotFoundError(f"user {user_id} not found")
        return user

    def get_by_email(self, email: str) -> User:
        # Stored emails are normalized on write; look up by the same form
        try:
            email = validate_email(email)
        except InvalidInputError as e:
            raise NotFoundError(f"user {email!r} not found", e) from e

        with transaction(self.session_factory, "fetching user") as session:
            user = session.query(User).filter(User.email == email).first()
            if user is None:
                raise NotFoundError(f"user {email!r} not found")
        return user

    def list(self) -> List[User]:
        with transaction(self.session_factory, "listing users") as session:
            return session.query(User).order_by(User.id).all()

    def update(self, user_id: int, **changes) -> User:
        changes = validate_user_changes(changes, self.UPDATABLE_FIELDS)

        with transaction(
            self.session_factory,
            "updating user",
            conflict=f"email {changes.get('email')!r} already registered",
        ) as session:
            user = session.get(User, user_id)
            if user is None:
                raise NotFoundError(f"user {user_id} not found")
            for field, value in changes.items():
                setattr(user, field, value)
            session.flush()
            session.refresh(user)

        return user

    def delete(self, user_id: int) -> None:
        with transaction(self.session_factory, "deleting user") as session:
            result = session.execute(delete(User).where(User.id == user_id))
            if result.rowcount == 0:
                raise NotFoundError(f"user {user_id} not found")

        self.logger.info("deleted user %d", user_id)
