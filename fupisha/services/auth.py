"""Authentication resource: password hashing, JWT issuance and user lookups."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext

from fupisha.config import Settings
from fupisha.errors import AuthenticationError, InvalidInputError, NotFoundError
from fupisha.logging_config import get_logger
from fupisha.models import User
from fupisha.store.base import Store, UserStore

API_VERSION = "v1"

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 72  # bcrypt only reads the first 72 bytes

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def _check_password(password: str) -> None:
    if not MIN_PASSWORD_LENGTH <= len(password.encode("utf-8")) <= MAX_PASSWORD_LENGTH:
        raise InvalidInputError(
            f"password must be {MIN_PASSWORD_LENGTH}-{MAX_PASSWORD_LENGTH} bytes long"
        )


class AuthResource:
    """
    Dependencies and operations behind the auth endpoints.

    Every user record access goes through ``store.users()``; the resource
    never opens a connection of its own.
    """

    def __init__(self, store: Store, config: Settings, logger: Optional[logging.Logger] = None):
        self.store = store
        self.config = config
        self.logger = logger or get_logger()

    @property
    def users(self) -> UserStore:
        return self.store.users()

    def register(self, email: str, password: str, name: Optional[str] = None) -> Tuple[User, str]:
        """
        Create an account and sign it in.

        Raises:
            ConflictError: email already registered
            InvalidInputError: malformed email or password
        """
        _check_password(password)
        user = self.users.create(email, get_password_hash(password), name)
        self.logger.info("registered user %d", user.id)
        return user, self.issue_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """Check credentials and issue a token. Raises AuthenticationError."""
        try:
            user = self.users.get_by_email(email)
        except NotFoundError as e:
            raise AuthenticationError("incorrect email or password") from e

        if not verify_password(password, user.password_hash):
            self.logger.info("failed login for user %d", user.id)
            raise AuthenticationError("incorrect email or password")

        return user, self.issue_token(user)

    def issue_token(self, user: User) -> str:
        """Create a JWT access token."""
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.config.jwt_expiration_minutes)
        to_encode = {
            "sub": str(user.id),
            "email": user.email,
            "exp": expire,
        }
        return jwt.encode(to_encode, self.config.jwt_secret, algorithm=self.config.jwt_algorithm)

    def authenticate(self, token: str) -> User:
        """Resolve a bearer token to its user. Raises AuthenticationError."""
        try:
            payload = jwt.decode(
                token, self.config.jwt_secret, algorithms=[self.config.jwt_algorithm]
            )
        except JWTError as e:
            raise AuthenticationError("invalid authentication credentials") from e

        user_id = payload.get("sub")
        if user_id is None or not user_id.isdigit():
            raise AuthenticationError("invalid authentication credentials")

        try:
            return self.users.get(int(user_id))
        except NotFoundError as e:
            raise AuthenticationError("user not found") from e

    def change_password(self, user_id: int, old_password: str, new_password: str) -> User:
        user = self.users.get(user_id)
        if not verify_password(old_password, user.password_hash):
            raise AuthenticationError("incorrect password")

        _check_password(new_password)
        return self.users.update(user_id, password_hash=get_password_hash(new_password))
