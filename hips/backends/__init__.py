"""Backend implementations for secrets storage."""

from .base import Backend
from .directory import DirectoryBackend
from .yaml_backend import YAMLBackend

__all__ = [
    "Backend",
    "DirectoryBackend",
    "YAMLBackend",
]
