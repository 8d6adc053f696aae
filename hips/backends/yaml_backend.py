"""YAML file backend: every record in one list, rewritten on each change."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from ..errors import DecodingError, NotFound, StorageError
from ..schema import Encrypted
from .base import Backend

logger = logging.getLogger(__name__)


class YAMLBackend(Backend):
    """Single-file list-based backend."""

    name = "yaml"

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self, name: str) -> Encrypted:
        for record in self._read():
            if record.name == name:
                return record
        raise NotFound(f"secret {name!r} not found")

    def store(self, record: Encrypted) -> None:
        records = self._read()
        for i, existing in enumerate(records):
            if existing.name == record.name:
                records[i] = record
                break
        else:
            records.append(record)
        self._write(records)

    def remove(self, name: str) -> None:
        records = self._read()
        remaining = [r for r in records if r.name != name]
        if len(remaining) == len(records):
            logger.debug("Nothing to remove for %r in %s", name, self.path)
            return
        self._write(remaining)

    def list(self) -> list[Encrypted]:
        return self._read()

    def _read(self) -> list[Encrypted]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"reading {self.path}: {e}") from e

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DecodingError(f"unmarshalling yaml: {e}") from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise DecodingError(
                f"unmarshalling yaml: expected a list, got {type(data).__name__}"
            )
        return [Encrypted.from_dict(entry) for entry in data]

    def _write(self, records: list[Encrypted]) -> None:
        text = yaml.safe_dump(
            [r.to_dict() for r in records],
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch(mode=0o600, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise StorageError(f"writing {self.path}: {e}") from e
        logger.debug("Wrote %d records to %s", len(records), self.path)
