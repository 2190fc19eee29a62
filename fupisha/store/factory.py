"""
Factory for creating store instances.
Simple, clean factory with singleton caching.
"""

import logging
from enum import Enum
from typing import Optional

from .base import Store
from .memory import InMemoryStore
from fupisha.config import settings
from fupisha.logging_config import get_logger


class StoreBackend(Enum):
    """Available store backends"""
    POSTGRES = "postgres"
    MEMORY = "memory"


class StoreFactory:
    """
    Simple factory for creating the application store.

    Uses Singleton Pattern - one store (and so one connection pool) per process.
    Gets connection settings from settings (not passed as parameters).
    Unlike a cache, a store that fails to connect is never replaced by a
    fallback: the error propagates and the application must not start.
    """

    _instance: Optional[Store] = None

    @classmethod
    def create(cls, backend: StoreBackend, logger: Optional[logging.Logger] = None) -> Store:
        """
        Create or return cached store instance.

        Args:
            backend: Type of store backend (from enum)
            logger: Logger handed to the store

        Returns:
            Singleton, migrated store instance

        Raises:
            DatabaseConnectionError, SchemaMigrationError: postgres store could not start
        """
        if cls._instance is not None:
            return cls._instance

        logger = logger or get_logger()

        if backend == StoreBackend.POSTGRES:
            from .sql import connect

            cls._instance = connect(
                settings.database_address,
                settings.database_user,
                settings.database_password,
                settings.database_name,
                logger=logger,
            )
            logger.info("postgres store initialized")

        elif backend == StoreBackend.MEMORY:
            cls._instance = InMemoryStore(logger=logger)
            logger.info("in-memory store initialized")

        else:
            raise ValueError(f"Unknown store backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Close and forget the cached instance (for testing and shutdown)"""
        if cls._instance is not None:
            cls._instance.close()
        cls._instance = None
