"""
Store module for Fupisha.
Implements Strategy Pattern for swappable persistence backends.
"""

from .base import Store, UserStore, URLStore
from .memory import InMemoryStore
from .factory import StoreFactory, StoreBackend

__all__ = [
    "Store",
    "UserStore",
    "URLStore",
    "InMemoryStore",
    "StoreFactory",
    "StoreBackend",
]
