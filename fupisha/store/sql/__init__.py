"""
Relational store backed by SQLAlchemy (PostgreSQL in production).
"""

from .migrations import MIGRATIONS, LATEST_VERSION, Migration, Migrator
from .store import SQLStore, connect, connection_uri, open_store

__all__ = [
    "MIGRATIONS",
    "LATEST_VERSION",
    "Migration",
    "Migrator",
    "SQLStore",
    "connect",
    "connection_uri",
    "open_store",
]
