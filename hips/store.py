"""Secret-level API composing one backend and one encrypter."""

from __future__ import annotations

import logging
from pathlib import Path

from .backends import Backend
from .config import Config
from .crypto import AESGCMEncrypter, Encrypter
from .errors import context
from .schema import Secret

logger = logging.getLogger(__name__)


class Store:
    """
    Encrypted secret store.

    Holds no state besides its collaborators: every call reads from and
    writes to the backend, nothing is cached between calls.
    """

    def __init__(
        self,
        backend: Backend,
        encrypter: Encrypter,
        config: Config | None = None,
    ):
        self.backend = backend
        self.encrypter = encrypter
        self.config = config

    @classmethod
    def open(cls, config: Config) -> Store:
        """Build a store for `config`, picking the backend from its location."""
        return cls(config.backend(), AESGCMEncrypter(config.password), config)

    def __repr__(self) -> str:
        return f"Store(backend={self.backend.name!r}, config={self.config!r})"

    def store(self, secret: Secret) -> None:
        with context(f"storing secret {secret.name!r}"):
            with context("encrypting secret"):
                record = self.encrypter.encrypt(secret)
            self.backend.store(record)
        logger.debug("Stored %r", secret.name)

    def load(self, name: str) -> Secret:
        with context("looking up name"):
            record = self.backend.load(name)
        with context("decrypting secret"):
            return self.encrypter.decrypt(record)

    def exists(self, name: str) -> bool:
        with context("looking up name"):
            return self.backend.exists(name)

    def remove(self, name: str) -> None:
        with context("removing secret"):
            self.backend.remove(name)
        logger.debug("Removed %r", name)

    def list(self) -> list[Secret]:
        with context("listing secrets"):
            records = self.backend.list()
            with context("decrypting secret"):
                return [self.encrypter.decrypt(r) for r in records]

    def rename(self, current: str, new: str) -> None:
        """Move a secret to a new name; the old entry goes last."""
        with context(f"renaming secret {current!r} to {new!r}"):
            secret = self.load(current)
            if current == new:
                return
            self.store(Secret(name=new, secret=secret.secret))
            self.remove(current)

    def rotate(
        self,
        new_password: str | None = None,
        new_location: str | Path | None = None,
    ) -> Store:
        """Re-encrypt every secret into a new store and return it."""
        from .rotation import rotate

        return rotate(self, new_password=new_password, new_location=new_location)


def open_store(location: str | Path, password: str) -> Store:
    return Store.open(Config(location=Path(location), password=password))
