"""
FastAPI dependencies for dependency injection.

This module provides the application logger, the store facade and the
services built on top of it, injected into routes.

Pattern: Dependency Injection
- Loose coupling between components
- Easy to test (override get_store with an InMemoryStore)
- Flexible (swap store backend via config)
"""

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fupisha.config import settings
from fupisha.errors import AuthenticationError
from fupisha.logging_config import setup_logging
from fupisha.models import User
from fupisha.services.auth import AuthResource
from fupisha.services.url_service import URLService
from fupisha.store import Store, StoreBackend, StoreFactory

security = HTTPBearer()


@lru_cache()
def get_app_logger() -> logging.Logger:
    """
    Get the application logger (built once).

    Returns:
        Logger configured from settings
    """
    return setup_logging(settings.log_level, settings.log_file, settings.log_json)


def get_store() -> Store:
    """
    Get store instance (singleton held by the factory).

    The first call connects and migrates; a failure here is fatal for startup.

    Returns:
        Store instance based on settings
    """
    backend = StoreBackend(settings.store_backend)
    return StoreFactory.create(backend, logger=get_app_logger())


def get_auth_resource(
    store: Store = Depends(get_store),
    logger: logging.Logger = Depends(get_app_logger)
) -> AuthResource:
    return AuthResource(store, settings, logger)


def get_url_service(
    store: Store = Depends(get_store),
    logger: logging.Logger = Depends(get_app_logger)
) -> URLService:
    """
    Get URLService with the URL store capability injected.

    The service only receives ``store.urls()``; it cannot reach user records.
    """
    return URLService(store.urls(), logger=logger)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    auth: AuthResource = Depends(get_auth_resource)
) -> User:
    """Get the current authenticated user from JWT token."""
    try:
        return auth.authenticate(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
