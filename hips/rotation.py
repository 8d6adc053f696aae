"""
Database rotation: re-encrypt every secret into a freshly built store.

Rotation is not atomic. Secrets are written one by one into the target, so
a crash part-way leaves the target partially populated while the source is
untouched (unless both share a location). Treat the result as a new
database to verify before discarding the old one.

Security Note:
    All plaintext secrets are held in memory at once during rotation.
    Never log secret values.
"""

import logging
from pathlib import Path

from .config import Config
from .crypto import AESGCMEncrypter
from .errors import ConfigurationError, context
from .store import Store

logger = logging.getLogger(__name__)


def _target(
    store: Store,
    new_password: str | None,
    new_location: str | Path | None,
) -> Store:
    if store.config is not None:
        changes: dict[str, object] = {}
        if new_password is not None:
            changes["password"] = new_password
        if new_location is not None:
            changes["location"] = Path(new_location)
        return Store.open(store.config.replace(**changes))

    # Built from a bare backend and encrypter: the current password is unknown.
    if new_password is None:
        raise ConfigurationError(
            "a new password is required to rotate a store without a Config"
        )
    if new_location is None:
        return Store(store.backend, AESGCMEncrypter(new_password))
    return Store.open(Config(location=Path(new_location), password=new_password))


def _describe(store: Store) -> str:
    if store.config is not None:
        return str(store.config.location)
    return str(getattr(store.backend, "path", store.backend.name))


def rotate(
    store: Store,
    new_password: str | None = None,
    new_location: str | Path | None = None,
) -> Store:
    """
    Copy all secrets of `store` into a new store.

    Args:
        store: Source store, opened with the current password.
        new_password: Password for the new store; defaults to the current one.
            Required when `store` was not opened from a Config.
        new_location: Location of the new store; defaults to the current one.

    Returns:
        The new store.
    """
    with context("rotating database"):
        target = _target(store, new_password, new_location)
        source, destination = _describe(store), _describe(target)
        if source == destination:
            logger.warning(
                "Rotating %s in place; an interruption leaves it partially "
                "re-encrypted",
                destination,
            )

        secrets = store.list()
        for secret in secrets:
            target.store(secret)

    logger.info("Rotated %d secrets from %s to %s", len(secrets), source, destination)
    return target
