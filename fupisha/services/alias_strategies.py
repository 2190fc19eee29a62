"""
Alias generation strategies for Fupisha.
Uses Strategy Pattern to allow different generation algorithms.
"""

import secrets
import string
from abc import ABC, abstractmethod


class AliasStrategy(ABC):
    """Abstract base class for alias generation strategies"""

    @abstractmethod
    def generate(self) -> str:
        """
        Generate a candidate alias.

        Uniqueness is not checked here: the URL store rejects a taken alias
        with ConflictError and the caller asks for another candidate.

        Returns:
            An alias string
        """
        pass


class RandomAliasStrategy(AliasStrategy):
    """
    Random generation strategy.

    Pros: Simple, unpredictable, no shared counter
    Cons: Collision risk grows with volume (handled by retrying)
    """

    def __init__(self, length: int = 6):
        if not 1 <= length <= 32:
            raise ValueError(f"alias length must be between 1 and 32, got {length}")
        self.length = length
        self.characters = string.ascii_letters + string.digits

    def generate(self) -> str:
        return ''.join(secrets.choice(self.characters) for _ in range(self.length))
