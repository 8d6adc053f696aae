"""Abstract base class for secrets backends."""

from abc import ABC, abstractmethod

from ..errors import NotFound
from ..schema import Encrypted


class Backend(ABC):
    """
    Abstract base class for encrypted record storage.

    Backends persist opaque `Encrypted` records keyed by name and know
    nothing about how they were encrypted.
    """

    name: str = "base"

    @abstractmethod
    def load(self, name: str) -> Encrypted:
        """Retrieve a record by name. Raises NotFound if absent."""

    @abstractmethod
    def store(self, record: Encrypted) -> None:
        """Store a record. Replaces an existing record of the same name."""

    @abstractmethod
    def remove(self, name: str) -> None:
        """Remove a record. Does nothing if the name is absent."""

    @abstractmethod
    def list(self) -> list[Encrypted]:
        """List all records. A missing database is empty."""

    def exists(self, name: str) -> bool:
        """Check if a record exists."""
        try:
            self.load(name)
        except NotFound:
            return False
        return True
