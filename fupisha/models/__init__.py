"""
Database models for Fupisha.

Tables are created by the versioned migrations in ``fupisha.store.sql.migrations``,
never by ``Base.metadata.create_all``.
"""

from .base import Base
from .user import User
from .url import URL

__all__ = ["Base", "User", "URL"]
