"""Database configuration and backend selection."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path

from .backends import Backend, DirectoryBackend, YAMLBackend
from .errors import UnsupportedFormat

YAML_SUFFIXES = (".yaml", ".yml")


@dataclass(frozen=True)
class Config:
    """Where the database lives and the password protecting it."""

    location: Path
    password: str = field(repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "location", Path(self.location))

    def replace(self, **changes: object) -> Config:
        return dataclasses.replace(self, **changes)

    def backend(self) -> Backend:
        """
        Select a backend from the shape of the location.

        A `.yaml`/`.yml` file selects the list-based file backend, a path
        without an extension selects the directory backend.
        """
        suffix = self.location.suffix
        if not suffix:
            return DirectoryBackend(self.location)
        if suffix.lower() in YAML_SUFFIXES:
            return YAMLBackend(self.location)
        raise UnsupportedFormat(f"unsupported format: {suffix.lstrip('.')}")
