"""Directory backend: one sub-directory per secret holding `secret` and `salt`."""

import logging
import os
import shutil
from pathlib import Path

from ..errors import DecodingError, InvalidLayout, NotFound, StorageError
from ..schema import Encrypted
from .base import Backend

logger = logging.getLogger(__name__)

SECRET_FILE = "secret"
SALT_FILE = "salt"


class DirectoryBackend(Backend):
    """Directory-based backend."""

    name = "directory"

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _entry(self, name: str) -> Path:
        if (
            not name
            or name in (".", "..")
            or os.sep in name
            or (os.altsep and os.altsep in name)
            or "\0" in name
        ):
            raise InvalidLayout(f"invalid secret name {name!r}")
        return self.path / name

    def load(self, name: str) -> Encrypted:
        entry = self._entry(name)
        if not entry.exists():
            raise NotFound(f"secret {name!r} not found")
        if not entry.is_dir():
            raise InvalidLayout(f"secret path {entry} should be a directory")

        return Encrypted(
            name=name,
            secret=self._read_file(entry / SECRET_FILE),
            salt=self._read_file(entry / SALT_FILE),
        )

    def store(self, record: Encrypted) -> None:
        entry = self._entry(record.name)
        try:
            entry.mkdir(mode=0o700, parents=True, exist_ok=True)
        except FileExistsError as e:
            raise InvalidLayout(
                f"secret path {entry} should be a directory"
            ) from e
        except OSError as e:
            raise StorageError(f"creating {entry}: {e}") from e

        # Both files are staged before either replaces the committed pair.
        salt_tmp = self._stage(entry / SALT_FILE, record.salt)
        try:
            secret_tmp = self._stage(entry / SECRET_FILE, record.secret)
        except StorageError:
            salt_tmp.unlink(missing_ok=True)
            raise

        staged = [(salt_tmp, entry / SALT_FILE), (secret_tmp, entry / SECRET_FILE)]
        for tmp, path in staged:
            try:
                os.replace(tmp, path)
            except OSError as e:
                raise StorageError(f"writing {path}: {e}") from e

    def remove(self, name: str) -> None:
        entry = self._entry(name)
        if not entry.exists():
            logger.debug("Nothing to remove for %r in %s", name, self.path)
            return
        if not entry.is_dir():
            raise InvalidLayout(f"secret path {entry} should be a directory")
        try:
            shutil.rmtree(entry)
        except OSError as e:
            raise StorageError(f"removing {entry}: {e}") from e

    def list(self) -> list[Encrypted]:
        try:
            names = sorted(os.listdir(self.path))
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"listing secret files in {self.path}: {e}") from e
        return [self.load(name) for name in names]

    def _read_file(self, path: Path) -> str:
        try:
            return path.read_text(encoding="ascii")
        except UnicodeDecodeError as e:
            raise DecodingError(f"reading {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"reading {path}: {e}") from e

    def _stage(self, path: Path, content: str) -> Path:
        """Write `content` next to `path` and return the temporary file."""
        tmp = path.with_name(f".{path.name}.tmp")
        try:
            tmp.touch(mode=0o600, exist_ok=True)
            tmp.write_text(content, encoding="ascii")
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise StorageError(f"writing {path}: {e}") from e
        return tmp
